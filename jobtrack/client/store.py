"""
JobTrack client - centralized remote-state store.

Three slices mirror what the views need:

    auth  - who is logged in, plus the login/register request lifecycle
    jobs  - the cached job collection, the job being viewed and stats
    ui    - client-only state: theme, open modal, selection, search text,
            status filter and pending notifications

Server interaction goes through async thunks. `await store.run(thunk(...))`
moves the owning slice through pending (is_loading set, error cleared),
then fulfilled (result merged) or rejected (error message stored, an error
notification queued). Plain synchronous actions go through `dispatch`.

Requests of one slice share a single is_loading flag. Thunks marked
`latest_only` (the read requests) are numbered per type and id, and a
response that was overtaken by a newer request for the same key is dropped.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional
import itertools
import logging

from .api import ApiClient
from .errors import ApiError
from .tokens import PrefsStorage

logger = logging.getLogger("jobtrack.client")

THEMES = ("light", "dark")


# -----------------------------------------------------------------------------
# State
# -----------------------------------------------------------------------------

@dataclass
class AuthState:
    user: Optional[Dict[str, Any]] = None
    token: Optional[str] = None
    is_authenticated: bool = False
    is_loading: bool = False
    error: Optional[str] = None


@dataclass
class JobsState:
    jobs: List[Dict[str, Any]] = field(default_factory=list)
    current_job: Optional[Dict[str, Any]] = None
    stats: Optional[Dict[str, int]] = None
    count: int = 0
    is_loading: bool = False
    error: Optional[str] = None


@dataclass
class Notification:
    level: str
    message: str


@dataclass
class UiState:
    theme: str = "light"
    sidebar_open: bool = False
    modal_open: Optional[str] = None  # "addJob", "editJob", "deleteJob"
    selected_job_id: Optional[int] = None
    search: str = ""
    status_filter: str = "all"
    notifications: List[Notification] = field(default_factory=list)


@dataclass
class State:
    auth: AuthState
    jobs: JobsState
    ui: UiState


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None


# -----------------------------------------------------------------------------
# Async thunks
# -----------------------------------------------------------------------------

class AsyncThunk:
    """
    An API call with a pending/fulfilled/rejected lifecycle.

    `payload_creator(api, *args, **kwargs)` performs the request and returns
    the payload handed to the fulfilled reducer.
    """

    def __init__(self, type_prefix: str, payload_creator: Callable, fallback_error: str,
                 latest_only: bool = False):
        self.type_prefix = type_prefix
        self.slice_name = type_prefix.split("/")[0]
        self.payload_creator = payload_creator
        self.fallback_error = fallback_error
        self.latest_only = latest_only

    def __call__(self, *args, **kwargs) -> "ThunkCall":
        return ThunkCall(self, args, kwargs)


@dataclass
class ThunkCall:
    thunk: AsyncThunk
    args: tuple
    kwargs: dict

    @property
    def key(self) -> str:
        return f"{self.thunk.type_prefix}:{self.args[0] if self.args else ''}"


async def _register(api: ApiClient, name: str, email: str, password: str):
    data = await api.register(name, email, password)
    api.tokens.save(data["token"])
    return data


async def _login(api: ApiClient, email: str, password: str):
    data = await api.login(email, password)
    api.tokens.save(data["token"])
    return data


async def _fetch_jobs(api: ApiClient, status=None, search=None, sort=None):
    return await api.list_jobs(status=status, search=search, sort=sort)


async def _fetch_job(api: ApiClient, job_id):
    return await api.get_job(job_id)


async def _fetch_stats(api: ApiClient):
    return await api.job_stats()


async def _create_job(api: ApiClient, job_data: Dict[str, Any]):
    return await api.create_job(job_data)


async def _update_job(api: ApiClient, job_id, job_data: Dict[str, Any]):
    return await api.update_job(job_id, job_data)


async def _delete_job(api: ApiClient, job_id):
    await api.delete_job(job_id)
    return job_id


register = AsyncThunk("auth/register", _register, "Registration failed")
login = AsyncThunk("auth/login", _login, "Login failed")
fetch_jobs = AsyncThunk("jobs/fetchAll", _fetch_jobs, "Failed to fetch jobs", latest_only=True)
fetch_job = AsyncThunk("jobs/fetchSingle", _fetch_job, "Failed to fetch job", latest_only=True)
fetch_stats = AsyncThunk("jobs/fetchStats", _fetch_stats, "Failed to fetch stats", latest_only=True)
create_job = AsyncThunk("jobs/create", _create_job, "Failed to create job")
update_job = AsyncThunk("jobs/update", _update_job, "Failed to update job")
delete_job = AsyncThunk("jobs/delete", _delete_job, "Failed to delete job")


# -----------------------------------------------------------------------------
# Reducers
# -----------------------------------------------------------------------------

def _auth_fulfilled(state: AuthState, payload, store: "Store") -> AuthState:
    user = {**(store.api.tokens.user() or {}), "name": payload["user"]["name"]}
    return replace(state, is_loading=False, error=None, user=user,
                   token=payload["token"], is_authenticated=True)


def _jobs_fetched(state: JobsState, payload, store) -> JobsState:
    return replace(state, is_loading=False, error=None, jobs=payload["jobs"], count=payload["Count"])


def _job_fetched(state: JobsState, payload, store) -> JobsState:
    return replace(state, is_loading=False, error=None, current_job=payload["job"])


def _stats_fetched(state: JobsState, payload, store) -> JobsState:
    return replace(state, is_loading=False, error=None, stats=payload)


def _job_created(state: JobsState, payload, store) -> JobsState:
    return replace(state, is_loading=False, error=None,
                   jobs=[payload["job"]] + state.jobs, count=state.count + 1)


def _job_updated(state: JobsState, payload, store) -> JobsState:
    updated = payload["job"]
    jobs = [updated if job["id"] == updated["id"] else job for job in state.jobs]
    current = state.current_job
    if current and current["id"] == updated["id"]:
        current = updated
    return replace(state, is_loading=False, error=None, jobs=jobs, current_job=current)


def _job_deleted(state: JobsState, job_id, store) -> JobsState:
    jobs = [job for job in state.jobs if str(job["id"]) != str(job_id)]
    current = state.current_job
    if current and str(current["id"]) == str(job_id):
        current = None
    return replace(state, is_loading=False, error=None, jobs=jobs,
                   count=state.count - (len(state.jobs) - len(jobs)), current_job=current)


FULFILLED_REDUCERS = {
    "auth/register": _auth_fulfilled,
    "auth/login": _auth_fulfilled,
    "jobs/fetchAll": _jobs_fetched,
    "jobs/fetchSingle": _job_fetched,
    "jobs/fetchStats": _stats_fetched,
    "jobs/create": _job_created,
    "jobs/update": _job_updated,
    "jobs/delete": _job_deleted,
}


# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------

class Store:
    """Holds the client state; views read `store.state` and subscribe to changes."""

    def __init__(self, api: ApiClient, prefs: PrefsStorage):
        self.api = api
        self.prefs = prefs
        token = api.tokens.get() if api.tokens.is_valid() else None
        self.state = State(
            auth=AuthState(
                user=api.tokens.user() if token else None,
                token=token,
                is_authenticated=token is not None,
            ),
            jobs=JobsState(),
            ui=UiState(theme=prefs.get_theme()),
        )
        self._listeners: List[Callable[[State], None]] = []
        self._counter = itertools.count(1)
        self._latest: Dict[str, int] = {}

    # --- subscriptions ---

    def subscribe(self, listener: Callable[[State], None]) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set(self, slice_name: str, value) -> None:
        self.state = replace(self.state, **{slice_name: value})
        for listener in list(self._listeners):
            listener(self.state)

    def _notify(self, level: str, message: str) -> None:
        ui = self.state.ui
        self._set("ui", replace(ui, notifications=ui.notifications + [Notification(level, message)]))

    # --- async thunks ---

    async def run(self, call: ThunkCall) -> Any:
        """
        Run a thunk through its lifecycle.

        Returns the payload on success. On any failure the error is stored on
        the slice and queued as a notification, then the exception is
        re-raised so form-like callers can map an ApiError onto fields.
        """
        thunk = call.thunk
        name = thunk.slice_name
        seq = next(self._counter)
        if thunk.latest_only:
            self._latest[call.key] = seq

        self._set(name, replace(getattr(self.state, name), is_loading=True, error=None))
        try:
            payload = await thunk.payload_creator(self.api, *call.args, **call.kwargs)
        except ApiError as e:
            if not self._is_stale(call, seq):
                self._reject(name, e.server_message or thunk.fallback_error)
                if e.status == 401 and name == "jobs":
                    self._clear_auth()
            raise
        except Exception:
            logger.exception(f"{thunk.type_prefix} failed")
            if not self._is_stale(call, seq):
                self._reject(name, thunk.fallback_error)
            raise

        if self._is_stale(call, seq):
            logger.debug(f"Dropping stale response for {call.key}")
            return payload

        reducer = FULFILLED_REDUCERS[thunk.type_prefix]
        self._set(name, reducer(getattr(self.state, name), payload, self))
        return payload

    def _reject(self, slice_name: str, message: str) -> None:
        self._set(slice_name, replace(getattr(self.state, slice_name), is_loading=False, error=message))
        self._notify("error", message)

    def _is_stale(self, call: ThunkCall, seq: int) -> bool:
        return call.thunk.latest_only and self._latest.get(call.key) != seq

    # --- plain actions ---

    def dispatch(self, action: Action) -> None:
        handler = getattr(self, f"_on_{action.type.replace('/', '_')}", None)
        if handler is None:
            raise ValueError(f"Unknown action {action.type}")
        handler(action.payload)

    def _clear_auth(self) -> None:
        self.api.tokens.remove()
        self._set("auth", AuthState())

    def _on_auth_logout(self, payload) -> None:
        self._clear_auth()
        self._set("jobs", JobsState())

    def _on_auth_clearError(self, payload) -> None:
        self._set("auth", replace(self.state.auth, error=None))

    def _on_auth_loadUserFromToken(self, payload) -> None:
        if self.api.tokens.is_valid():
            self._set("auth", replace(self.state.auth, user=self.api.tokens.user(),
                                      token=self.api.tokens.get(), is_authenticated=True))

    def _on_jobs_clearCurrentJob(self, payload) -> None:
        self._set("jobs", replace(self.state.jobs, current_job=None))

    def _on_jobs_clearError(self, payload) -> None:
        self._set("jobs", replace(self.state.jobs, error=None))

    def _on_ui_setTheme(self, theme) -> None:
        if theme not in THEMES:
            raise ValueError(f"Theme must be one of {', '.join(THEMES)}")
        self.prefs.set_theme(theme)
        self._set("ui", replace(self.state.ui, theme=theme))

    def _on_ui_toggleTheme(self, payload) -> None:
        self._on_ui_setTheme("dark" if self.state.ui.theme == "light" else "light")

    def _on_ui_toggleSidebar(self, payload) -> None:
        self._set("ui", replace(self.state.ui, sidebar_open=not self.state.ui.sidebar_open))

    def _on_ui_openModal(self, payload) -> None:
        self._set("ui", replace(self.state.ui, modal_open=payload["modal"],
                                selected_job_id=payload.get("job_id")))

    def _on_ui_closeModal(self, payload) -> None:
        self._set("ui", replace(self.state.ui, modal_open=None, selected_job_id=None))

    def _on_ui_setFilters(self, payload) -> None:
        self._set("ui", replace(self.state.ui, **{k: v for k, v in payload.items()
                                                  if k in ("search", "status_filter")}))

    def _on_ui_clearFilters(self, payload) -> None:
        self._set("ui", replace(self.state.ui, search="", status_filter="all"))

    def _on_ui_notify(self, payload) -> None:
        self._notify(payload.get("level", "info"), payload["message"])

    def _on_ui_clearNotifications(self, payload) -> None:
        self._set("ui", replace(self.state.ui, notifications=[]))

    # --- selectors ---

    def visible_jobs(self) -> List[Dict[str, Any]]:
        """Cached jobs filtered by the UI search text and status filter."""
        search = self.state.ui.search.lower()
        status = self.state.ui.status_filter
        return [
            job for job in self.state.jobs.jobs
            if (not search or search in job["company"].lower() or search in job["position"].lower())
            and (status == "all" or job["status"] == status)
        ]


# Action creators for plain actions
def logout() -> Action:
    return Action("auth/logout")


def clear_auth_error() -> Action:
    return Action("auth/clearError")


def load_user_from_token() -> Action:
    return Action("auth/loadUserFromToken")


def clear_current_job() -> Action:
    return Action("jobs/clearCurrentJob")


def clear_jobs_error() -> Action:
    return Action("jobs/clearError")


def set_theme(theme: str) -> Action:
    return Action("ui/setTheme", theme)


def toggle_theme() -> Action:
    return Action("ui/toggleTheme")


def toggle_sidebar() -> Action:
    return Action("ui/toggleSidebar")


def open_modal(modal: str, job_id: Optional[int] = None) -> Action:
    return Action("ui/openModal", {"modal": modal, "job_id": job_id})


def close_modal() -> Action:
    return Action("ui/closeModal")


def set_filters(**filters) -> Action:
    return Action("ui/setFilters", filters)


def clear_filters() -> Action:
    return Action("ui/clearFilters")


def notify(message: str, level: str = "info") -> Action:
    return Action("ui/notify", {"message": message, "level": level})


def clear_notifications() -> Action:
    return Action("ui/clearNotifications")
