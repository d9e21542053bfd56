from __future__ import annotations

from typing import Any

from render.listing import list_entries
from render.state import AppState, Notification
from render.traces import place_traces
from render.view import coordinate_to_pixel


def _popup_payload(state: AppState) -> dict[str, Any] | None:
    popup = state.view.popup
    if popup is None:
        return None
    place = state.place(popup.place_id)
    if place is None:
        return None
    cfg = state.config
    # Recomputed from the current view, so the popup follows pans/zooms.
    px, py = coordinate_to_pixel(
        place.geometry.x,
        place.geometry.y,
        center=state.view.center,
        zoom=state.view.zoom,
        viewport=state.view.viewport,
    )
    return {
        "placeId": place.id,
        "name": place.display_name(cfg.list.unnamedLabel),
        # Raw markup, rendered as-is by the front end.
        "description": place.description or "",
        "lon": place.lon,
        "lat": place.lat,
        "pixel": {"x": round(px, 1), "y": round(py + cfg.popup.offsetY, 1)},
    }


def _list_payload(state: AppState) -> dict[str, Any]:
    cfg = state.config
    if state.load_error is not None:
        return {
            "entries": [],
            "error": {
                "message": cfg.list.errorMessage,
                "detail": cfg.list.errorDetail,
                "cause": state.load_error,
            },
        }
    if not state.loaded:
        return {"entries": [], "loading": True}
    entries = list_entries(
        state.places,
        colors=cfg.colors.as_dict(),
        unnamed=cfg.list.unnamedLabel,
        preview_chars=cfg.list.previewChars,
        selected_id=state.view.selected_id,
    )
    if not entries:
        return {"entries": [], "empty": cfg.list.emptyMessage}
    return {"entries": entries}


def _notification_payload(n: Notification | None) -> dict[str, Any] | None:
    if n is None:
        return None
    return {"message": n.message, "level": n.level, "durationMs": n.duration_ms}


def build_campus_plot(
    state: AppState, *, notification: Notification | None = None
) -> dict[str, Any]:
    """
    Plotly mapbox payload for the current state.

    `layout.meta` carries everything the side panel and overlays need: the sorted
    list, the selection, the popup anchor, the toast and the orientation warning.
    """
    cfg = state.config
    traces: list[dict[str, Any]] = []
    if state.places:
        title = cfg.title if state.load_error is None else cfg.institutionName
        traces.extend(
            place_traces(
                state.places,
                title=title,
                style=cfg.markers,
                colors=cfg.colors.as_dict(),
            )
        )

    meta: dict[str, Any] = {
        "list": _list_payload(state),
        "selectedId": state.view.selected_id,
        "popup": _popup_payload(state),
        "notification": _notification_payload(notification),
        "orientationWarning": state.orientation_warning,
        "provenance": state.provenance.value if state.provenance is not None else None,
        "stats": {
            "renderedPlaces": len(state.places),
            "fallback": state.load_error is not None,
        },
    }

    return {
        "data": traces,
        "layout": {
            "mapbox": {
                "center": dict(state.view.center),
                "zoom": float(state.view.zoom),
                "style": cfg.mapStyle,
            },
            "showlegend": False,
            "margin": {"l": 0, "r": 0, "t": 0, "b": 0},
            "meta": meta,
        },
    }
