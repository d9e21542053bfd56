from __future__ import annotations

import pytest

from places.parser import parse_places
from render.view import coordinate_to_pixel, fit_view_to_places, hit_test
from samples import THREE_PLACES, build_kml

VIEWPORT = {"width": 900, "height": 600}


def test_fit_single_place_is_capped_at_max_zoom():
    records = parse_places(build_kml([("Hall", 55.4835, -20.902, None)]))
    center, zoom = fit_view_to_places(
        records, viewport=VIEWPORT, padding_px=100, max_zoom=18.0
    )
    assert zoom == 18.0
    assert center["lon"] == pytest.approx(55.4835)
    assert center["lat"] == pytest.approx(-20.902)


def test_fit_keeps_every_place_inside_the_padded_viewport():
    records = parse_places(build_kml(THREE_PLACES))
    center, zoom = fit_view_to_places(
        records, viewport=VIEWPORT, padding_px=100, max_zoom=18.0
    )
    assert zoom <= 18.0
    for r in records:
        px, py = coordinate_to_pixel(
            r.geometry.x, r.geometry.y, center=center, zoom=zoom, viewport=VIEWPORT
        )
        assert 100 - 1e-6 <= px <= VIEWPORT["width"] - 100 + 1e-6
        assert 100 - 1e-6 <= py <= VIEWPORT["height"] - 100 + 1e-6


def test_fit_zooms_out_for_larger_extent():
    near = parse_places(
        build_kml([("a", 55.48, -20.90, None), ("b", 55.481, -20.901, None)])
    )
    far = parse_places(
        build_kml([("a", 55.40, -20.90, None), ("b", 55.60, -21.00, None)])
    )
    _, z_near = fit_view_to_places(near, viewport=VIEWPORT, padding_px=100, max_zoom=18.0)
    _, z_far = fit_view_to_places(far, viewport=VIEWPORT, padding_px=100, max_zoom=18.0)
    assert z_far < z_near


def test_view_center_projects_to_viewport_center():
    (rec,) = parse_places(build_kml([("Hall", 55.4835, -20.902, None)]))
    px, py = coordinate_to_pixel(
        rec.geometry.x,
        rec.geometry.y,
        center={"lat": -20.902, "lon": 55.4835},
        zoom=17.0,
        viewport=VIEWPORT,
    )
    assert px == pytest.approx(450.0, abs=1e-6)
    assert py == pytest.approx(300.0, abs=1e-6)


def test_north_east_of_center_is_up_and_right():
    (rec,) = parse_places(build_kml([("Hall", 55.4840, -20.9015, None)]))
    px, py = coordinate_to_pixel(
        rec.geometry.x,
        rec.geometry.y,
        center={"lat": -20.902, "lon": 55.4835},
        zoom=17.0,
        viewport=VIEWPORT,
    )
    assert px > 450.0
    assert py < 300.0


def test_hit_test_finds_marker_under_pointer_and_misses_elsewhere():
    records = parse_places(build_kml(THREE_PLACES))
    center = {"lat": -20.902, "lon": 55.484}
    target = records[2]
    px, py = coordinate_to_pixel(
        target.geometry.x, target.geometry.y, center=center, zoom=17.0, viewport=VIEWPORT
    )

    hit = hit_test(
        records, (px + 5, py - 5), center=center, zoom=17.0, viewport=VIEWPORT, tolerance_px=15
    )
    assert hit == target.id

    miss = hit_test(
        records, (5.0, 5.0), center=center, zoom=17.0, viewport=VIEWPORT, tolerance_px=15
    )
    assert miss is None
