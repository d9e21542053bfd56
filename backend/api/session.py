from __future__ import annotations

import asyncio
import logging
from typing import Any

from places.load import load_places
from prefs.store import PrefsStore
from render.build_map import build_campus_plot
from render.state import (
    AppState,
    DismissPopup,
    MapClick,
    Message,
    OrientationWarningDismissed,
    Resize,
    Select,
    ViewChanged,
    dispatch,
    new_state,
    take_notification,
)
from render.view import hit_test
from settings.types import CampusConfig
from sources.fetch import ByteFetcher, SourceFetcher
from sources.resolver import ContentResolver

logger = logging.getLogger(__name__)


class CampusSession:
    """
    One map session: the state, the single startup load, and the event entry points.

    Every entry point returns the figure payload for the updated state.
    """

    def __init__(
        self,
        config: CampusConfig,
        *,
        fetcher: ByteFetcher | None = None,
        store: PrefsStore | None = None,
    ) -> None:
        self.config = config
        self.store = store
        self.resolver = ContentResolver(
            config.sources,
            fetcher or SourceFetcher(timeout_s=config.sources.remoteTimeoutS),
        )
        dismissed = (
            store.get_flag(config.orientation.dismissKey) if store is not None else False
        )
        self.state: AppState = new_state(config, orientation_dismissed=dismissed)
        self._load_lock = asyncio.Lock()

    async def ensure_loaded(self) -> None:
        # The first caller loads; concurrent callers wait for that same load.
        async with self._load_lock:
            if self.state.loaded:
                return
            outcome = await load_places(self.resolver)
            dispatch(self.state, outcome)

    def snapshot(self) -> dict[str, Any]:
        return build_campus_plot(self.state, notification=take_notification(self.state))

    async def apply(self, msg: Message) -> dict[str, Any]:
        await self.ensure_loaded()
        dispatch(self.state, msg)
        return self.snapshot()

    async def current(self) -> dict[str, Any]:
        await self.ensure_loaded()
        return self.snapshot()

    async def select(self, place_id: int) -> dict[str, Any]:
        return await self.apply(Select(place_id=place_id))

    async def click(
        self, *, place_id: int | None = None, pixel: tuple[float, float] | None = None
    ) -> dict[str, Any]:
        await self.ensure_loaded()
        if place_id is None and pixel is not None:
            view = self.state.view
            markers = self.config.markers
            place_id = hit_test(
                self.state.places,
                pixel,
                center=view.center,
                zoom=view.zoom,
                viewport=view.viewport,
                tolerance_px=markers.radius + markers.strokeWidth,
            )
        return await self.apply(MapClick(place_id=place_id))

    async def dismiss_popup(self) -> dict[str, Any]:
        return await self.apply(DismissPopup())

    async def change_view(self, center: dict[str, float], zoom: float) -> dict[str, Any]:
        return await self.apply(ViewChanged(center=center, zoom=zoom))

    async def resize(self, width: int, height: int) -> dict[str, Any]:
        return await self.apply(Resize(width=width, height=height))

    async def dismiss_orientation_warning(self) -> dict[str, Any]:
        if self.store is not None:
            self.store.set_flag(self.config.orientation.dismissKey, True)
        else:
            logger.info("Preferences disabled; orientation warning dismissal not persisted")
        return await self.apply(OrientationWarningDismissed())
