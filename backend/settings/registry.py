from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

import yaml

from settings.types import CampusConfig


def _repo_root() -> Path:
    # .../campus-map/backend/settings/registry.py -> repo root is 2 levels up
    return Path(__file__).resolve().parents[2]


def config_path() -> Path:
    return Path(
        os.getenv("CAMPUS_MAP_CONFIG") or (_repo_root() / "config" / "campus.yaml")
    )


def _load_yaml(path: Path) -> dict:
    raw = path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid campus config yaml root: {path}")
    return data


def load_config(path: Path) -> CampusConfig:
    return CampusConfig.model_validate(_load_yaml(path))


@lru_cache(maxsize=1)
def get_config() -> CampusConfig:
    path = config_path()
    if not path.exists():
        raise FileNotFoundError(f"Campus config not found: {path}")
    return load_config(path)


def resolve_repo_path(repo_relative: str) -> Path:
    # Allow both "data/..." and "/data/..." inputs (normalize to repo-relative).
    rel = (repo_relative or "").lstrip("/")
    return _repo_root() / rel


def clear_config_cache() -> None:
    """
    Clear the in-memory config cache.

    YAML edits are otherwise not picked up until the backend process restarts.
    """
    get_config.cache_clear()
