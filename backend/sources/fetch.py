"""Byte fetching for the acquisition tiers.

Local names are repo-relative files; `http(s)://` locations go through a shared
`requests` session. Every failure surfaces as `HttpFailure` so callers only
handle one error family.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Protocol

import requests

from settings.registry import resolve_repo_path
from sources.errors import HttpFailure

logger = logging.getLogger(__name__)

USER_AGENT = "campus-map/0.1"


class ByteFetcher(Protocol):
    def fetch(self, location: str) -> bytes: ...


def is_remote(location: str) -> bool:
    return location.lower().startswith(("http://", "https://"))


class SourceFetcher:
    def __init__(
        self,
        *,
        timeout_s: float = 30.0,
        session: requests.Session | None = None,
        resolve_path: Callable[[str], Path] = resolve_repo_path,
    ) -> None:
        self.timeout_s = timeout_s
        self._session = session or requests.Session()
        self._session.headers["User-Agent"] = USER_AGENT
        self._resolve_path = resolve_path

    def fetch(self, location: str) -> bytes:
        if is_remote(location):
            return self._fetch_remote(location)
        return self._fetch_local(location)

    def _fetch_local(self, location: str) -> bytes:
        path = self._resolve_path(location)
        try:
            data = path.read_bytes()
        except FileNotFoundError as e:
            raise HttpFailure(location, 404, "not found") from e
        except OSError as e:
            raise HttpFailure(location, None, str(e)) from e
        logger.debug("Read %d bytes from %s", len(data), path)
        return data

    def _fetch_remote(self, location: str) -> bytes:
        try:
            resp = self._session.get(location, timeout=self.timeout_s)
        except requests.RequestException as e:
            raise HttpFailure(location, None, str(e)) from e
        if not resp.ok:
            raise HttpFailure(location, resp.status_code, resp.reason or "")
        logger.debug(
            "Fetched %d bytes from %s (content-type=%s)",
            len(resp.content),
            location,
            resp.headers.get("content-type", ""),
        )
        return resp.content
