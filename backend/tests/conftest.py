import sys
from pathlib import Path

import pytest


# Ensure `backend/` is on sys.path so tests can import local modules
# like `places.*`, `sources.*`, and `main`.
BACKEND_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_ROOT))
from settings.types import CampusConfig
from samples import ARCHIVE, FALLBACK, REMOTE


@pytest.fixture
def campus_config() -> CampusConfig:
    return CampusConfig.model_validate(
        {
            "id": "test_campus",
            "title": "Lieux importants",
            "institutionName": "Université de Saint-Denis",
            "initialView": {"center": {"lat": -20.902, "lon": 55.4835}, "zoom": 17},
            "fallbackView": {"center": {"lat": -20.9015, "lon": 55.4515}, "zoom": 16},
            "sources": {
                "localArchive": ARCHIVE,
                "localFallback": FALLBACK,
                "remoteUrl": REMOTE,
            },
        }
    )


@pytest.fixture(autouse=True)
def _isolated_prefs(tmp_path, monkeypatch):
    # Never touch the checkout's prefs database from tests.
    monkeypatch.setenv("CAMPUS_MAP_PREFS_PATH", str(tmp_path / "prefs.duckdb"))
