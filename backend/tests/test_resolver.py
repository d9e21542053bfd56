from __future__ import annotations

import asyncio

import pytest

from samples import (
    ARCHIVE,
    FALLBACK,
    NETWORK_LINK_KML,
    REMOTE,
    THREE_PLACES,
    FakeFetcher,
    build_kml,
    build_kmz,
    patch_first_entry,
)
from sources.errors import AllSourcesExhausted, HttpFailure, NetworkLinkOnly, NoEmbeddedPayload
from sources.resolver import (
    ContentResolver,
    Provenance,
    is_network_link_only,
    looks_like_markup,
)


def _resolve(campus_config, fetcher):
    return asyncio.run(ContentResolver(campus_config.sources, fetcher).resolve())


def test_local_archive_success_skips_other_tiers(campus_config):
    kml = build_kml(THREE_PLACES)
    fetcher = FakeFetcher({ARCHIVE: build_kmz({"doc.kml": kml})})

    result = _resolve(campus_config, fetcher)

    assert result.provenance == Provenance.local_archive
    assert result.payload == kml
    assert fetcher.calls == [ARCHIVE]


def test_network_link_archive_falls_through_to_flat_file(campus_config):
    kml = build_kml(THREE_PLACES)
    fetcher = FakeFetcher(
        {
            ARCHIVE: build_kmz({"doc.kml": NETWORK_LINK_KML}),
            FALLBACK: kml.encode("utf-8"),
        }
    )

    result = _resolve(campus_config, fetcher)

    assert result.provenance == Provenance.local_fallback
    assert result.payload == kml
    assert fetcher.calls == [ARCHIVE, FALLBACK]


def test_remote_plain_markup_is_decoded_directly(campus_config):
    kml = build_kml(THREE_PLACES)
    fetcher = FakeFetcher({REMOTE: kml.encode("utf-8")})

    result = _resolve(campus_config, fetcher)

    assert result.provenance == Provenance.remote
    assert result.payload == kml
    assert fetcher.calls == [ARCHIVE, FALLBACK, REMOTE]


def test_remote_archive_bytes_go_through_archive_reader(campus_config):
    kml = build_kml(THREE_PLACES)
    fetcher = FakeFetcher({REMOTE: build_kmz({"doc.kml": kml})})

    result = _resolve(campus_config, fetcher)

    assert result.provenance == Provenance.remote
    assert result.payload == kml


def test_all_tiers_failing_raises_exhausted(campus_config):
    fetcher = FakeFetcher(
        {
            ARCHIVE: b"definitely not a zip",
            REMOTE: HttpFailure(REMOTE, 500, "server error"),
        }
    )

    with pytest.raises(AllSourcesExhausted) as exc:
        _resolve(campus_config, fetcher)

    tiers = [tier for tier, _ in exc.value.failures]
    assert tiers == ["local_archive", "local_fallback", "remote"]
    assert isinstance(exc.value.failures[2][1], HttpFailure)
    assert exc.value.failures[2][1].status == 500
    # Each tier is attempted exactly once.
    assert fetcher.calls == [ARCHIVE, FALLBACK, REMOTE]


def test_network_link_failure_is_reported(campus_config):
    fetcher = FakeFetcher({ARCHIVE: build_kmz({"doc.kml": NETWORK_LINK_KML})})

    with pytest.raises(AllSourcesExhausted) as exc:
        _resolve(campus_config, fetcher)

    assert isinstance(exc.value.failures[0][1], NetworkLinkOnly)


def test_network_link_detection_requires_no_placemark():
    assert is_network_link_only(NETWORK_LINK_KML)
    with_places = build_kml(THREE_PLACES, extra="<NetworkLink><name>x</name></NetworkLink>")
    assert not is_network_link_only(with_places)
    assert not is_network_link_only(build_kml(THREE_PLACES))


def test_markup_sniffing():
    assert looks_like_markup(b'<?xml version="1.0"?><kml/>')
    assert looks_like_markup(b"  \n<kml xmlns='http://www.opengis.net/kml/2.2'/>")
    assert looks_like_markup('\ufeff<?xml version="1.0"?><kml/>'.encode("utf-8"))
    assert not looks_like_markup(b"PK\x03\x04\x14\x00\x00\x00")


def test_encrypted_archive_falls_through_to_flat_file(campus_config):
    kml = build_kml(THREE_PLACES)
    fetcher = FakeFetcher(
        {
            ARCHIVE: patch_first_entry(build_kmz({"doc.kml": kml}), flag_bits=0x1),
            FALLBACK: kml.encode("utf-8"),
        }
    )

    result = _resolve(campus_config, fetcher)

    assert result.provenance == Provenance.local_fallback
    assert fetcher.calls == [ARCHIVE, FALLBACK]


def test_unreadable_remote_archive_is_a_tier_failure(campus_config):
    fetcher = FakeFetcher(
        {REMOTE: patch_first_entry(build_kmz({"doc.kml": build_kml([])}), compression=99)}
    )

    with pytest.raises(AllSourcesExhausted) as exc:
        _resolve(campus_config, fetcher)

    assert isinstance(exc.value.failures[2][1], NoEmbeddedPayload)
