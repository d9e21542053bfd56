from __future__ import annotations

from typing import Any

from places.classify import place_category, place_color
from places.types import PlaceRecord
from settings.types import CampusMarkerStyle

PLACES_LEGEND_GROUP = "places"


def trace_place_outlines(places: list[PlaceRecord], style: CampusMarkerStyle) -> dict[str, Any]:
    # scattermapbox markers have no stroke; draw the outline as a larger disc underneath.
    return {
        "type": "scattermapbox",
        "name": "outline",
        "legendgroup": PLACES_LEGEND_GROUP,
        "lon": [p.lon for p in places],
        "lat": [p.lat for p in places],
        "mode": "markers",
        "marker": {
            "size": 2 * (style.radius + style.strokeWidth),
            "color": style.strokeColor,
        },
        "hoverinfo": "skip",
        "showlegend": False,
    }


def trace_places(
    places: list[PlaceRecord],
    *,
    title: str,
    style: CampusMarkerStyle,
    colors: dict[str, str],
) -> dict[str, Any]:
    return {
        "type": "scattermapbox",
        "name": title,
        "legendgroup": PLACES_LEGEND_GROUP,
        "lon": [p.lon for p in places],
        "lat": [p.lat for p in places],
        "mode": "markers+text",
        "text": [p.name or "" for p in places],
        "textposition": "top center",
        "textfont": {
            "size": style.labelSize,
            "color": style.labelColor,
            "family": style.labelFamily,
        },
        # Place ids let the front end turn a marker click into a selection.
        "customdata": [p.id for p in places],
        "marker": {
            "size": 2 * style.radius,
            "color": [place_color(p, colors) for p in places],
        },
        "meta": {"categories": [place_category(p).value for p in places]},
        "hovertemplate": "%{text}<extra></extra>",
    }


def place_traces(
    places: list[PlaceRecord],
    *,
    title: str,
    style: CampusMarkerStyle,
    colors: dict[str, str],
) -> list[dict[str, Any]]:
    """All markers as one layer: outline underneath, colored discs + labels on top."""
    return [
        trace_place_outlines(places, style),
        trace_places(places, title=title, style=style, colors=colors),
    ]
