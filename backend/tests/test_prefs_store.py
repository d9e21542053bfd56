from __future__ import annotations

from prefs.singleton import get_store, reset_store
from prefs.store import PrefsSettings
from settings.registry import resolve_repo_path


def test_flags_default_to_false_and_persist(tmp_path, monkeypatch):
    db_path = tmp_path / "prefs.duckdb"
    monkeypatch.setenv("CAMPUS_MAP_PREFS_PATH", str(db_path))
    monkeypatch.setenv("CAMPUS_MAP_PREFS", "1")

    store = get_store()
    assert store is not None
    assert store.get_flag("orientationWarningDismissed") is False

    store.set_flag("orientationWarningDismissed", True)
    assert store.get_flag("orientationWarningDismissed") is True

    # Upsert, not a second row.
    store.set_flag("orientationWarningDismissed", True)
    n = int(store.conn.execute("select count(*) from flags").fetchone()[0])
    assert n == 1

    store.set_flag("orientationWarningDismissed", False)
    assert store.get_flag("orientationWarningDismissed") is False


def test_store_reopens_when_path_changes(tmp_path, monkeypatch):
    monkeypatch.setenv("CAMPUS_MAP_PREFS_PATH", str(tmp_path / "a.duckdb"))
    a = get_store()
    a.set_flag("x", True)

    monkeypatch.setenv("CAMPUS_MAP_PREFS_PATH", str(tmp_path / "b.duckdb"))
    b = get_store()
    assert b is not a
    assert b.get_flag("x") is False


def test_prefs_can_be_disabled(monkeypatch):
    monkeypatch.setenv("CAMPUS_MAP_PREFS", "off")
    assert get_store() is None


def test_prefs_reset_deletes_db(tmp_path, monkeypatch):
    db_path = tmp_path / "prefs.duckdb"
    monkeypatch.setenv("CAMPUS_MAP_PREFS_PATH", str(db_path))

    store = get_store()
    assert store is not None
    store.set_flag("orientationWarningDismissed", True)
    assert store.path.resolve() == db_path.resolve()

    reset_store()
    assert not db_path.exists()


def test_settings_default_to_enabled_under_data_dir(monkeypatch):
    monkeypatch.delenv("CAMPUS_MAP_PREFS_PATH", raising=False)
    monkeypatch.delenv("CAMPUS_MAP_PREFS", raising=False)
    settings = PrefsSettings.from_env()
    assert settings.enabled is True
    assert settings.path == resolve_repo_path("data/prefs/prefs.duckdb")


def test_settings_read_switch_and_path(tmp_path, monkeypatch):
    monkeypatch.setenv("CAMPUS_MAP_PREFS_PATH", str(tmp_path / "p.duckdb"))
    monkeypatch.setenv("CAMPUS_MAP_PREFS", " False ")
    settings = PrefsSettings.from_env()
    assert settings.enabled is False
    assert settings.path == tmp_path / "p.duckdb"
