from __future__ import annotations

import threading

from prefs.store import PrefsSettings, PrefsStore

_STORE: PrefsStore | None = None
_STORE_LOCK = threading.RLock()


def get_store() -> PrefsStore | None:
    """Process-wide store, or None when preferences are switched off."""
    global _STORE
    settings = PrefsSettings.from_env()
    if not settings.enabled:
        return None
    with _STORE_LOCK:
        if _STORE is not None and _STORE.path.resolve() != settings.path.resolve():
            # Path changed since the store was opened (tests switch it per case).
            _STORE.close()
            _STORE = None
        if _STORE is None:
            _STORE = PrefsStore.open(settings.path)
        return _STORE


def reset_store() -> None:
    global _STORE
    with _STORE_LOCK:
        if _STORE is not None:
            _STORE.reset()
            _STORE = None
        else:
            PrefsSettings.from_env().path.unlink(missing_ok=True)
