from __future__ import annotations

import math
from functools import lru_cache

from pyproj import Transformer

# Web Mercator constants (256 px tiles).
EARTH_CIRCUMFERENCE_M = 2 * math.pi * 6378137.0
TILE_SIZE_PX = 256.0

MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0


@lru_cache(maxsize=1)
def transformer_4326_to_3857() -> Transformer:
    return Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)


@lru_cache(maxsize=1)
def transformer_3857_to_4326() -> Transformer:
    return Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True)


def to_mercator(lon: float, lat: float) -> tuple[float, float]:
    x, y = transformer_4326_to_3857().transform(lon, lat)
    return float(x), float(y)


def to_lonlat(x: float, y: float) -> tuple[float, float]:
    lon, lat = transformer_3857_to_4326().transform(x, y)
    return float(lon), float(lat)


def is_valid_lonlat(lon: float, lat: float) -> bool:
    if not (math.isfinite(lon) and math.isfinite(lat)):
        return False
    return MIN_LONGITUDE <= lon <= MAX_LONGITUDE and MIN_LATITUDE <= lat <= MAX_LATITUDE


def meters_per_pixel(zoom: float) -> float:
    return EARTH_CIRCUMFERENCE_M / (TILE_SIZE_PX * 2.0**zoom)
