"""
App State Machine.

Decides which screen is active from the authentication status, the persisted
onboarding flag, the splash timer and the outcome of loading the screen
documents, and exposes the user-initiated transitions.

Every write to the AppSession happens on the event loop thread through
`_mutate`, whether it comes from a transition method or from an auth-status
notification, so the two never interleave. Failed operations record a
SessionError and leave the current screen unchanged; nothing is retried here.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, FrozenSet, List, Optional, Type

from ..auth.session_gateway import AuthError, SessionGateway
from ..config import AppConfig, get_config
from ..repositories.base_repository import (
    ConfigDecodeError,
    ConfigImportError,
    ConfigNotFoundError,
    DocumentStoreError,
)
from ..repositories.config_repository import ConfigRepository
from ..repositories.preferences_repository import PreferencesError, PreferencesRepository
from ..schemas.screen_schemas import ScreenBundle, ScreenConfig, ScreenKey
from ..schemas.session_schemas import AppSession, AppState, SessionError, SessionErrorKind
from ..utils.execution_logger import log_operation, track_operation

logger = logging.getLogger(__name__)

SessionObserver = Callable[[AppSession], None]
Sleep = Callable[[float], Awaitable[Any]]

_SCREEN_FOR_STATE: Dict[AppState, ScreenKey] = {
    AppState.SPLASH: ScreenKey.SPLASH,
    AppState.ONBOARDING: ScreenKey.ONBOARDING,
    AppState.LOGIN: ScreenKey.LOGIN,
    AppState.REGISTRATION: ScreenKey.REGISTRATION,
    AppState.HOME: ScreenKey.HOME,
}
if set(_SCREEN_FOR_STATE) != set(AppState):
    raise RuntimeError("every AppState needs a screen document")

# States each transition may start from
_ALLOWED_FROM: Dict[str, FrozenSet[AppState]] = {
    "skip_onboarding": frozenset({AppState.ONBOARDING}),
    "advance_onboarding": frozenset({AppState.ONBOARDING}),
    "select_onboarding_page": frozenset({AppState.ONBOARDING}),
    "complete_onboarding": frozenset({AppState.ONBOARDING}),
    "sign_in": frozenset({AppState.LOGIN}),
    "show_registration": frozenset({AppState.LOGIN}),
    "dismiss_registration": frozenset({AppState.REGISTRATION}),
    "sign_up": frozenset({AppState.REGISTRATION}),
    "sign_out": frozenset({AppState.HOME}),
}

_ERROR_KINDS: Dict[Type[BaseException], SessionErrorKind] = {
    ConfigNotFoundError: SessionErrorKind.NOT_FOUND,
    ConfigDecodeError: SessionErrorKind.DECODE,
    ConfigImportError: SessionErrorKind.IMPORT,
    DocumentStoreError: SessionErrorKind.STORE,
    AuthError: SessionErrorKind.AUTH,
    PreferencesError: SessionErrorKind.PREFERENCES,
}


def error_kind_for(exc: BaseException) -> SessionErrorKind:
    for cls in type(exc).__mro__:
        if cls in _ERROR_KINDS:
            return _ERROR_KINDS[cls]
    return SessionErrorKind.UNKNOWN


class AppStateMachine:
    """
    Owner of the AppSession and the loaded screen documents.

    Startup always shows SPLASH. The app leaves SPLASH only after the splash
    duration has elapsed and all five documents have loaded; the destination
    is then derived from the current auth and onboarding status.
    """

    def __init__(
        self,
        repository: ConfigRepository,
        gateway: SessionGateway,
        preferences: PreferencesRepository,
        config: Optional[AppConfig] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        """
        Initialize the state machine.

        Args:
            repository: Source of the screen documents
            gateway: Identity provider
            preferences: Persisted onboarding flag
            config: Application configuration (global config when omitted)
            sleep: Coroutine used for the splash wait
        """
        self.repository = repository
        self.gateway = gateway
        self.preferences = preferences
        self.config = config or get_config()
        self._sleep = sleep

        # Auth status is read in start(), off the loop thread
        self.session = AppSession(has_completed_onboarding=preferences.has_completed_onboarding)
        self.screens: Optional[ScreenBundle] = None

        self._splash_finished = False
        self._auth_calls_in_flight = 0
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._unsubscribe_auth: Optional[Callable[[], None]] = None
        self._observers: List[SessionObserver] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def current_state(self) -> AppState:
        return self.session.current_state

    @property
    def splash_finished(self) -> bool:
        return self._splash_finished

    def subscribe(self, observer: SessionObserver) -> Callable[[], None]:
        """
        Register an observer called with a copy of the session after every change.

        Returns:
            Callable that removes the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _publish(self) -> None:
        snapshot = self.session.model_copy()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception as e:
                logger.error(f"Session observer {observer!r} failed: {e}")

    def _mutate(self, **changes: Any) -> None:
        for name, value in changes.items():
            setattr(self.session, name, value)
        self._publish()

    def screen_config_for(self, state: AppState) -> Optional[ScreenConfig]:
        """The loaded document for a screen, or None before configuration loads."""
        if self.screens is None:
            return None
        return self.screens.for_key(_SCREEN_FOR_STATE[AppState(state)])

    @property
    def current_config(self) -> Optional[ScreenConfig]:
        return self.screen_config_for(self.session.current_state)

    @property
    def splash_duration(self) -> float:
        if self.screens is not None and self.screens.splash.duration is not None:
            return self.screens.splash.duration
        return self.config.splash.default_duration

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    def _record_failure(self, operation: str, exc: BaseException) -> None:
        kind = error_kind_for(exc)
        logger.error(f"❌ {operation} failed ({kind.value}): {exc}")
        self._mutate(error=SessionError(kind=kind, message=str(exc), operation=operation))

    def _guard(self, operation: str) -> bool:
        allowed = _ALLOWED_FROM[operation]
        current = self.session.current_state
        if current in allowed:
            return True
        message = f"Cannot {operation} from {current.value}"
        logger.warning(message)
        self._mutate(
            error=SessionError(
                kind=SessionErrorKind.INVALID_TRANSITION,
                message=message,
                operation=operation,
            )
        )
        return False

    def clear_error(self) -> None:
        if self.session.error is not None:
            self._mutate(error=None)

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    @log_operation("start")
    async def start(self) -> bool:
        """
        Run the startup sequence.

        Subscribes to auth changes, loads configuration, waits out the rest of
        the splash duration and routes. If loading fails the app stays on
        SPLASH with the error recorded; calling start() again retries.

        Returns:
            True if the app left SPLASH
        """
        self._loop = asyncio.get_running_loop()
        started = self._loop.time()

        self._apply_auth_status(await self.gateway.refresh_status())
        if self._unsubscribe_auth is None:
            self._unsubscribe_auth = self.gateway.subscribe(self._on_auth_status)

        if not await self.load_initial_configurations():
            return False

        remaining = self.splash_duration - (self._loop.time() - started)
        if remaining > 0:
            await self._sleep(remaining)

        self._splash_finished = True
        self.route_by_auth()
        return True

    async def load_initial_configurations(self) -> bool:
        """
        Seed the namespace if needed, then fetch all five documents concurrently.

        Returns:
            True if every document loaded
        """
        self._mutate(is_loading=True, error=None)
        try:
            async with track_operation("load_initial_configurations") as metrics:
                logger.info("🔍 Checking initial configuration...")
                if not await self.repository.check_initial_configuration_present():
                    logger.info("📝 Configuration not found, importing defaults...")
                    await self.repository.import_initial_configuration()
                    metrics.metadata["imported"] = True

                logger.info("🔄 Loading configurations...")
                self.screens = await self._fetch_all()
                metrics.metadata["screens"] = len(ScreenKey)
        except Exception as e:
            self._record_failure("load_initial_configurations", e)
            return False
        finally:
            self._mutate(is_loading=False)

        logger.info("✅ Configurations loaded")
        return True

    async def _fetch_all(self) -> ScreenBundle:
        """Fetch every screen document; the first failure fails the whole join."""
        tasks = {key: asyncio.create_task(self.repository.fetch(key)) for key in ScreenKey}
        done, pending = await asyncio.wait(tasks.values(), return_when=asyncio.FIRST_EXCEPTION)

        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        failure: Optional[BaseException] = None
        for key in ScreenKey:
            task = tasks[key]
            if task in done and task.exception() is not None and failure is None:
                failure = task.exception()
        if failure is not None:
            raise failure

        return ScreenBundle(**{key.value: tasks[key].result() for key in ScreenKey})

    # ------------------------------------------------------------------
    # Auth-derived routing
    # ------------------------------------------------------------------

    def resolve_route(self) -> AppState:
        """Authenticated -> HOME; else not onboarded -> ONBOARDING; else LOGIN."""
        if self.session.is_authenticated:
            return AppState.HOME
        if not self.session.has_completed_onboarding:
            return AppState.ONBOARDING
        return AppState.LOGIN

    def route_by_auth(self) -> AppState:
        """
        Move to the screen the current status calls for.

        Has no effect while the splash phase is still running. Calling it
        repeatedly with unchanged inputs keeps the same state.
        """
        if not self._splash_finished:
            return self.session.current_state
        self._go_to(self.resolve_route())
        return self.session.current_state

    def _go_to(self, state: AppState, **changes: Any) -> None:
        if state == AppState.ONBOARDING and self.session.current_state != AppState.ONBOARDING:
            changes.setdefault("onboarding_page_index", 0)
        self._mutate(current_state=state, **changes)

    def _on_auth_status(self, authenticated: bool) -> None:
        """Gateway listener; may be called from any thread."""
        loop = self._loop
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if loop is None or running is loop:
            self._apply_auth_status(authenticated)
        elif not loop.is_closed():
            loop.call_soon_threadsafe(self._apply_auth_status, authenticated)

    def _apply_auth_status(self, authenticated: bool) -> None:
        changed = authenticated != self.session.is_authenticated
        if not changed:
            return
        logger.info(f"Auth status changed: authenticated={authenticated}")
        self._mutate(is_authenticated=authenticated)
        # A sign-in/up/out in flight decides the destination itself
        if self._splash_finished and self._auth_calls_in_flight == 0:
            self.route_by_auth()

    # ------------------------------------------------------------------
    # Onboarding
    # ------------------------------------------------------------------

    def _finish_onboarding(self, operation: str) -> bool:
        try:
            self.preferences.mark_onboarding_completed()
        except PreferencesError as e:
            self._record_failure(operation, e)
            return False
        self._mutate(has_completed_onboarding=True, error=None)
        self._go_to(self.resolve_route())
        return True

    @log_operation("complete_onboarding")
    def complete_onboarding(self) -> bool:
        """Persist the onboarding flag and leave onboarding."""
        if not self._guard("complete_onboarding"):
            return False
        return self._finish_onboarding("complete_onboarding")

    @log_operation("skip_onboarding")
    def skip_onboarding(self) -> bool:
        if not self._guard("skip_onboarding"):
            return False
        return self._finish_onboarding("skip_onboarding")

    @log_operation("advance_onboarding")
    def advance_onboarding(self) -> bool:
        """Next page, or finish onboarding when already on the last page."""
        if not self._guard("advance_onboarding"):
            return False
        onboarding = self.screens.onboarding if self.screens else None
        index = self.session.onboarding_page_index
        if onboarding is None or onboarding.is_last_page(index):
            return self._finish_onboarding("advance_onboarding")
        self._mutate(onboarding_page_index=index + 1)
        return True

    def select_onboarding_page(self, page_index: int) -> bool:
        """Jump to a page (swipe); the index is clamped to the page range."""
        if not self._guard("select_onboarding_page"):
            return False
        last = self.screens.onboarding.last_page_index if self.screens else 0
        self._mutate(onboarding_page_index=min(max(page_index, 0), last))
        return True

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def _call_gateway(self, operation: str, call: Callable[[], Awaitable[None]]) -> bool:
        if not self._guard(operation):
            return False
        self._auth_calls_in_flight += 1
        try:
            await call()
        except Exception as e:
            self._record_failure(operation, e)
            return False
        finally:
            self._auth_calls_in_flight -= 1
        return True

    @log_operation("sign_in")
    async def sign_in(self, email: str, password: str) -> bool:
        if not await self._call_gateway("sign_in", lambda: self.gateway.sign_in(email, password)):
            return False
        self._go_to(AppState.HOME, is_authenticated=True, error=None)
        return True

    @log_operation("sign_up")
    async def sign_up(self, email: str, password: str) -> bool:
        if not await self._call_gateway("sign_up", lambda: self.gateway.sign_up(email, password)):
            return False
        self._go_to(AppState.HOME, is_authenticated=True, error=None)
        return True

    @log_operation("sign_out")
    async def sign_out(self) -> bool:
        if not await self._call_gateway("sign_out", self.gateway.sign_out):
            return False
        self._go_to(AppState.LOGIN, is_authenticated=False, error=None)
        return True

    def show_registration(self) -> bool:
        """Open the registration overlay on top of login."""
        if not self._guard("show_registration"):
            return False
        self._go_to(AppState.REGISTRATION)
        return True

    def dismiss_registration(self) -> bool:
        if not self._guard("dismiss_registration"):
            return False
        self._go_to(AppState.LOGIN)
        return True

    # ------------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Stop listening for auth changes and drop observers."""
        if self._unsubscribe_auth is not None:
            self._unsubscribe_auth()
            self._unsubscribe_auth = None
        self._observers.clear()
