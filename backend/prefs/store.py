from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

import duckdb

from prefs.sql import CREATE_FLAGS_TABLE_SQL, SELECT_FLAG_SQL, UPSERT_FLAG_SQL
from settings.registry import resolve_repo_path

logger = logging.getLogger(__name__)

ENV_PATH = "CAMPUS_MAP_PREFS_PATH"
ENV_SWITCH = "CAMPUS_MAP_PREFS"
DEFAULT_LOCATION = "data/prefs/prefs.duckdb"
_OFF = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class PrefsSettings:
    enabled: bool
    path: Path

    @classmethod
    def from_env(cls) -> PrefsSettings:
        switch = (os.getenv(ENV_SWITCH) or "").strip().lower()
        custom = os.getenv(ENV_PATH)
        return cls(
            enabled=switch not in _OFF,
            path=Path(custom) if custom else resolve_repo_path(DEFAULT_LOCATION),
        )


@dataclass
class PrefsStore:
    """
    Small persisted boolean flags (e.g. "orientation warning dismissed").

    Values survive process restarts; an unknown flag reads as False.
    """

    path: Path
    conn: duckdb.DuckDBPyConnection
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    @classmethod
    def open(cls, path: Path) -> PrefsStore:
        path.parent.mkdir(parents=True, exist_ok=True)
        store = cls(path=path, conn=duckdb.connect(str(path)))
        store.ensure_schema()
        return store

    def ensure_schema(self) -> None:
        with self._lock:
            self.conn.execute(CREATE_FLAGS_TABLE_SQL)

    def get_flag(self, name: str) -> bool:
        with self._lock:
            row = self.conn.execute(SELECT_FLAG_SQL, [name]).fetchone()
        return bool(row[0]) if row is not None else False

    def set_flag(self, name: str, value: bool = True) -> None:
        with self._lock:
            self.conn.execute(
                UPSERT_FLAG_SQL, [name, bool(value), int(time.time() * 1000)]
            )
            # Make the write durable right away; the process may be killed at any time.
            self.conn.execute("CHECKPOINT;")
        logger.debug("Flag %s set to %s", name, value)

    def close(self) -> None:
        with self._lock:
            self.conn.close()

    def reset(self) -> None:
        # Delete the database file; flags read as False afterwards.
        self.close()
        self.path.unlink(missing_ok=True)
