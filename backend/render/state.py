"""Application state and the single function allowed to change it.

Front-end events (list click, marker click, map click, pan/zoom, resize) and the
load result are turned into messages; `dispatch` applies them to one explicitly
owned `AppState`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Literal, Union

from shapely.geometry import Point

from geo.projection import to_mercator
from places.load import LoadComplete, LoadFailed
from places.types import Category, PlaceRecord
from render.view import fit_view_to_places
from settings.types import CampusConfig
from sources.resolver import Provenance

logger = logging.getLogger(__name__)

NOTIFICATION_DURATION_MS = 3000
LOAD_ERROR_TOAST = "Erreur de chargement des données"


@dataclass(frozen=True)
class Popup:
    place_id: int


@dataclass(frozen=True)
class Notification:
    message: str
    level: Literal["success", "error", "info"] = "info"
    duration_ms: int = NOTIFICATION_DURATION_MS


@dataclass(frozen=True)
class ViewState:
    center: dict[str, float]
    zoom: float
    viewport: dict[str, int]
    selected_id: int | None = None
    popup: Popup | None = None


@dataclass
class AppState:
    config: CampusConfig
    view: ViewState
    places: list[PlaceRecord] = field(default_factory=list)
    provenance: Provenance | None = None
    # Set when loading failed; the list panel shows it instead of entries.
    load_error: str | None = None
    loaded: bool = False
    notification: Notification | None = None
    orientation_dismissed: bool = False
    orientation_warning: bool = False

    def place(self, place_id: int | None) -> PlaceRecord | None:
        if place_id is None:
            return None
        return next((p for p in self.places if p.id == place_id), None)


@dataclass(frozen=True)
class Select:
    place_id: int


@dataclass(frozen=True)
class MapClick:
    # None when the click missed every marker.
    place_id: int | None


@dataclass(frozen=True)
class DismissPopup:
    pass


@dataclass(frozen=True)
class ViewChanged:
    center: dict[str, float]
    zoom: float


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class OrientationWarningDismissed:
    pass


Message = Union[
    LoadComplete,
    LoadFailed,
    Select,
    MapClick,
    DismissPopup,
    ViewChanged,
    Resize,
    OrientationWarningDismissed,
]


def new_state(config: CampusConfig, *, orientation_dismissed: bool = False) -> AppState:
    view = ViewState(
        center={
            "lat": config.initialView.center.lat,
            "lon": config.initialView.center.lon,
        },
        zoom=config.initialView.zoom,
        viewport={"width": config.viewport.width, "height": config.viewport.height},
    )
    state = AppState(config=config, view=view, orientation_dismissed=orientation_dismissed)
    state.orientation_warning = _orientation_warning(state)
    return state


def default_place(config: CampusConfig) -> PlaceRecord:
    """The single synthetic marker shown when no dataset could be loaded."""
    center = config.fallbackView.center
    x, y = to_mercator(center.lon, center.lat)

    return PlaceRecord(
        id=0,
        lon=center.lon,
        lat=center.lat,
        geometry=Point(x, y),
        name=config.institutionName,
        category=Category.building,
    )


def _orientation_warning(state: AppState) -> bool:
    width = state.view.viewport["width"]
    height = state.view.viewport["height"]
    portrait = width < height and width < state.config.orientation.maxPortraitWidth
    return portrait and not state.orientation_dismissed


def _on_load_complete(state: AppState, msg: LoadComplete) -> None:
    cfg = state.config
    center, zoom = fit_view_to_places(
        msg.records,
        viewport=state.view.viewport,
        padding_px=cfg.fit.paddingPx,
        max_zoom=cfg.fit.maxZoom,
    )
    state.places = list(msg.records)
    state.provenance = msg.provenance
    state.load_error = None
    state.view = replace(state.view, center=center, zoom=zoom, selected_id=None, popup=None)
    state.notification = Notification(
        message=f"✅ {len(msg.records)} lieux chargés depuis {msg.provenance.label}",
        level="success",
    )
    state.loaded = True


def _on_load_failed(state: AppState, msg: LoadFailed) -> None:
    fallback = state.config.fallbackView
    state.places = [default_place(state.config)]
    state.provenance = None
    state.load_error = str(msg.error)
    state.view = replace(
        state.view,
        center={"lat": fallback.center.lat, "lon": fallback.center.lon},
        zoom=fallback.zoom,
        selected_id=None,
        popup=None,
    )
    state.notification = Notification(message=LOAD_ERROR_TOAST, level="error")
    state.loaded = True


def _select(state: AppState, place_id: int) -> None:
    place = state.place(place_id)
    if place is None:
        logger.warning("Ignoring selection of unknown place id %s", place_id)
        return
    # Opening a popup replaces the previous one.
    state.view = replace(
        state.view,
        center={"lat": place.lat, "lon": place.lon},
        zoom=state.config.popup.targetZoom,
        selected_id=place.id,
        popup=Popup(place_id=place.id),
    )


def _map_click(state: AppState, place_id: int | None) -> None:
    place = state.place(place_id)
    if place is None:
        if place_id is not None:
            logger.warning("Map click on unknown place id %s", place_id)
        state.view = replace(state.view, popup=None)
        return
    # Unnamed markers do not react to clicks; the list still selects them.
    if place.name:
        _select(state, place.id)


def dispatch(state: AppState, msg: Message) -> AppState:
    if isinstance(msg, LoadComplete):
        _on_load_complete(state, msg)
    elif isinstance(msg, LoadFailed):
        _on_load_failed(state, msg)
    elif isinstance(msg, Select):
        _select(state, msg.place_id)
    elif isinstance(msg, MapClick):
        _map_click(state, msg.place_id)
    elif isinstance(msg, DismissPopup):
        state.view = replace(state.view, popup=None)
    elif isinstance(msg, ViewChanged):
        state.view = replace(state.view, center=dict(msg.center), zoom=float(msg.zoom))
    elif isinstance(msg, Resize):
        state.view = replace(
            state.view, viewport={"width": int(msg.width), "height": int(msg.height)}
        )
        state.orientation_warning = _orientation_warning(state)
    elif isinstance(msg, OrientationWarningDismissed):
        state.orientation_dismissed = True
        state.orientation_warning = False
    else:
        raise TypeError(f"Unknown message: {msg!r}")
    return state


def take_notification(state: AppState) -> Notification | None:
    """Toasts are transient: hand the pending one out once, then clear it."""
    n = state.notification
    state.notification = None
    return n
