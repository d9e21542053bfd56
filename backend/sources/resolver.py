from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable

from settings.types import CampusSources
from sources.archive import extract_markup
from sources.errors import AllSourcesExhausted, CampusMapError, MalformedMarkup, NetworkLinkOnly
from sources.fetch import ByteFetcher

logger = logging.getLogger(__name__)

SNIFF_BYTES = 100

_NETWORK_LINK_RE = re.compile(r"<(?:\w+:)?NetworkLink[\s>]")
_PLACEMARK_RE = re.compile(r"<(?:\w+:)?Placemark[\s>/]")


class Provenance(str, Enum):
    local_archive = "local_archive"
    local_fallback = "local_fallback"
    remote = "remote"

    @property
    def label(self) -> str:
        return _PROVENANCE_LABELS[self]


_PROVENANCE_LABELS = {
    Provenance.local_archive: "fichier KMZ local",
    Provenance.local_fallback: "données locales (KML)",
    Provenance.remote: "Google Maps",
}


@dataclass(frozen=True)
class AcquisitionResult:
    payload: str
    provenance: Provenance


def is_network_link_only(markup: str) -> bool:
    return bool(_NETWORK_LINK_RE.search(markup)) and not _PLACEMARK_RE.search(markup)


def looks_like_markup(data: bytes) -> bool:
    preview = data[:SNIFF_BYTES].decode("utf-8", errors="replace")
    preview = preview.lstrip("\ufeff").strip()
    return preview.startswith("<?xml") or preview.startswith("<kml")


def decode_markup(data: bytes) -> str:
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedMarkup(f"Payload is not UTF-8: {e}") from e


class ContentResolver:
    """
    Three-tier acquisition: local archive, local flat markup, remote endpoint.

    Tiers run strictly in order; tier n+1 only starts once tier n has failed.
    Each tier is attempted once per `resolve()` call.
    """

    def __init__(self, sources: CampusSources, fetcher: ByteFetcher) -> None:
        self.sources = sources
        self.fetcher = fetcher

    async def _fetch(self, location: str) -> bytes:
        return await asyncio.to_thread(self.fetcher.fetch, location)

    async def _local_archive(self) -> str:
        data = await self._fetch(self.sources.localArchive)
        markup = extract_markup(data)
        if is_network_link_only(markup):
            raise NetworkLinkOnly("Archive only holds a NetworkLink, no inline placemarks")
        return markup

    async def _local_fallback(self) -> str:
        data = await self._fetch(self.sources.localFallback)
        return decode_markup(data)

    async def _remote(self) -> str:
        data = await self._fetch(self.sources.remoteUrl)
        if looks_like_markup(data):
            return decode_markup(data)
        logger.info("Remote payload is not plain markup, reading it as an archive")
        return extract_markup(data)

    def tiers(self) -> list[tuple[Provenance, Callable[[], Awaitable[str]]]]:
        return [
            (Provenance.local_archive, self._local_archive),
            (Provenance.local_fallback, self._local_fallback),
            (Provenance.remote, self._remote),
        ]

    async def resolve(self) -> AcquisitionResult:
        failures: list[tuple[str, CampusMapError]] = []
        for provenance, tier in self.tiers():
            logger.info("Trying source tier %s", provenance.value)
            try:
                payload = await tier()
            except CampusMapError as e:
                logger.warning("Source tier %s failed: %s", provenance.value, e)
                failures.append((provenance.value, e))
                continue
            logger.info("Source tier %s succeeded (%d chars)", provenance.value, len(payload))
            return AcquisitionResult(payload=payload, provenance=provenance)
        raise AllSourcesExhausted(failures)
