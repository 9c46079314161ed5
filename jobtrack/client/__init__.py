"""
JobTrack client - remote-state store, API client and terminal views.

Usage:
    from jobtrack.client import ApiClient, Store, TokenStorage, PrefsStorage
    from jobtrack.client import store as actions

    async with ApiClient(base_url, TokenStorage(path)) as api:
        store = Store(api, PrefsStorage(prefs_path))
        await store.run(actions.login(email, password))
        await store.run(actions.fetch_jobs())
"""
from .api import ApiClient
from .errors import ApiError, parse_error, format_validation_errors
from .store import Store, State
from .tokens import TokenStorage, PrefsStorage

__all__ = [
    "ApiClient",
    "ApiError",
    "parse_error",
    "format_validation_errors",
    "Store",
    "State",
    "TokenStorage",
    "PrefsStorage",
]
