from __future__ import annotations

import math

from shapely.geometry import MultiPoint

from geo.projection import (
    EARTH_CIRCUMFERENCE_M,
    TILE_SIZE_PX,
    meters_per_pixel,
    to_lonlat,
    to_mercator,
)
from places.types import PlaceRecord


def fit_view_to_places(
    places: list[PlaceRecord],
    *,
    viewport: dict[str, int],
    padding_px: int,
    max_zoom: float,
) -> tuple[dict[str, float], float]:
    """
    Center + zoom showing every place, keeping `padding_px` free on each side.
    """
    minx, miny, maxx, maxy = MultiPoint([p.geometry for p in places]).bounds
    lon, lat = to_lonlat((minx + maxx) / 2.0, (miny + maxy) / 2.0)

    # Never let padding eat the whole viewport.
    width = max(1, int(viewport["width"]) - 2 * padding_px)
    height = max(1, int(viewport["height"]) - 2 * padding_px)
    zoom = bbox_to_zoom(minx, miny, maxx, maxy, width=width, height=height)
    return {"lat": lat, "lon": lon}, float(min(zoom, max_zoom))


def bbox_to_zoom(
    minx: float,
    miny: float,
    maxx: float,
    maxy: float,
    *,
    width: int,
    height: int,
) -> float:
    # EPSG:3857 bbox (meters) -> zoom at which it spans width x height pixels.
    dx = max(maxx - minx, 1e-6)
    dy = max(maxy - miny, 1e-6)
    zoom_x = math.log2((width * EARTH_CIRCUMFERENCE_M) / (TILE_SIZE_PX * dx))
    zoom_y = math.log2((height * EARTH_CIRCUMFERENCE_M) / (TILE_SIZE_PX * dy))
    return float(min(zoom_x, zoom_y))


def coordinate_to_pixel(
    x: float,
    y: float,
    *,
    center: dict[str, float],
    zoom: float,
    viewport: dict[str, int],
) -> tuple[float, float]:
    """
    Project an EPSG:3857 coordinate to viewport pixels (origin top-left).
    """
    cx, cy = to_mercator(center["lon"], center["lat"])
    res = meters_per_pixel(zoom)
    px = viewport["width"] / 2.0 + (x - cx) / res
    py = viewport["height"] / 2.0 - (y - cy) / res
    return px, py


def hit_test(
    places: list[PlaceRecord],
    pixel: tuple[float, float],
    *,
    center: dict[str, float],
    zoom: float,
    viewport: dict[str, int],
    tolerance_px: float,
) -> int | None:
    """
    Id of the place whose marker is under `pixel` (nearest wins), else None.
    """
    best: tuple[float, int] | None = None
    for p in places:
        px, py = coordinate_to_pixel(
            p.geometry.x, p.geometry.y, center=center, zoom=zoom, viewport=viewport
        )
        d = math.hypot(px - pixel[0], py - pixel[1])
        if d <= tolerance_px and (best is None or d < best[0]):
            best = (d, p.id)
    return best[1] if best is not None else None
