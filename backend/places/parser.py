"""KML placemark decoding.

Reads placemarks from a KML document (any KML namespace, or none) and turns
each one with a usable coordinate into a `PlaceRecord`:

- Point placemarks anchor at their coordinate.
- LineString / LinearRing / Polygon / MultiGeometry placemarks anchor at their
  first coordinate.
- Placemarks without a parseable, in-range coordinate are dropped.

Coordinates are reprojected from EPSG:4326 to EPSG:3857.
"""

from __future__ import annotations

import logging
import re
import xml.etree.ElementTree as ET
from typing import Any

from shapely.geometry import Point

from geo.projection import is_valid_lonlat, to_mercator
from places.types import PlaceRecord
from sources.errors import MalformedMarkup

logger = logging.getLogger(__name__)

GEOMETRY_TAGS = ("Point", "LineString", "LinearRing", "Polygon", "MultiGeometry")

_COMMA_SPACES = re.compile(r"\s*,\s*")


def _local(tag: Any) -> str:
    # "{http://www.opengis.net/kml/2.2}Placemark" -> "Placemark"
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _child(el: ET.Element, name: str) -> ET.Element | None:
    return next((c for c in el if _local(c.tag) == name), None)


def _child_text(el: ET.Element, name: str) -> str | None:
    c = _child(el, name)
    if c is None or c.text is None:
        return None
    text = c.text.strip()
    return text or None


def _inner_markup(el: ET.Element | None) -> str | None:
    # Descriptions are usually CDATA, but inline (unescaped) HTML also occurs.
    if el is None:
        return None
    parts = [el.text or ""]
    for c in el:
        parts.append(ET.tostring(c, encoding="unicode"))
    text = "".join(parts).strip()
    return text or None


def _descendant(el: ET.Element, names: tuple[str, ...]) -> ET.Element | None:
    for d in el.iter():
        if d is not el and _local(d.tag) in names:
            return d
    return None


def parse_coordinates(text: str | None) -> list[tuple[float, float]]:
    """
    KML `coordinates` text -> [(lon, lat), ...]; altitude is ignored.
    """
    out: list[tuple[float, float]] = []
    for chunk in _COMMA_SPACES.sub(",", (text or "").strip()).split():
        parts = chunk.split(",")
        if len(parts) < 2:
            continue
        try:
            lon, lat = float(parts[0]), float(parts[1])
        except ValueError:
            continue
        out.append((lon, lat))
    return out


def _anchor(placemark: ET.Element) -> tuple[float, float] | None:
    geom = _descendant(placemark, GEOMETRY_TAGS)
    if geom is None:
        return None
    coords_el = _descendant(geom, ("coordinates",))
    if coords_el is None:
        return None
    coords = parse_coordinates(coords_el.text)
    if not coords:
        return None
    lon, lat = coords[0]
    if not is_valid_lonlat(lon, lat):
        return None
    return lon, lat


def _attributes(placemark: ET.Element) -> dict[str, Any]:
    ext = _child(placemark, "ExtendedData")
    if ext is None:
        return {}
    out: dict[str, Any] = {}
    for el in ext.iter():
        tag = _local(el.tag)
        key = el.get("name")
        if not key:
            continue
        if tag == "Data":
            value = _child_text(el, "value")
        elif tag == "SimpleData":
            value = (el.text or "").strip() or None
        else:
            continue
        if value is not None:
            out[key] = value
    return out


def parse_places(payload: str) -> list[PlaceRecord]:
    try:
        root = ET.fromstring(payload)
    except ET.ParseError as e:
        raise MalformedMarkup(f"Unparseable markup: {e}") from e

    out: list[PlaceRecord] = []
    dropped = 0
    for pm in root.iter():
        if _local(pm.tag) != "Placemark":
            continue
        anchor = _anchor(pm)
        if anchor is None:
            dropped += 1
            continue
        lon, lat = anchor
        x, y = to_mercator(lon, lat)
        out.append(
            PlaceRecord(
                id=len(out),
                lon=lon,
                lat=lat,
                geometry=Point(x, y),
                name=_child_text(pm, "name"),
                description=_inner_markup(_child(pm, "description")),
                attributes=_attributes(pm),
            )
        )

    if dropped:
        logger.info("Dropped %d placemark(s) without a usable coordinate", dropped)
    return out
