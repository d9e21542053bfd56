from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from shapely.geometry import Point


class Category(str, Enum):
    # Values double as keys into the configured color palette.
    building = "batiment"
    green = "vert"
    restaurant = "restaurant"
    parking = "parking"
    service = "service"
    default = "default"


@dataclass(frozen=True)
class PlaceRecord:
    """
    One positioned point of interest.

    `lon`/`lat` are EPSG:4326 degrees (what the Plotly map consumes);
    `geometry` is the same anchor reprojected to EPSG:3857 meters, used for
    fitting, pixel projection and hit-testing.
    """

    id: int
    lon: float
    lat: float
    geometry: Point
    name: str | None = None
    description: str | None = None
    # ExtendedData values, keyed by Data/SimpleData name.
    attributes: dict[str, Any] = field(default_factory=dict)
    # Only set on synthetic places; parsed places derive their category from `name`.
    category: Category | None = None

    def display_name(self, unnamed: str) -> str:
        return self.name or unnamed
