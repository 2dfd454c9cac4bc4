"""
Session/Auth gateway.

The core depends only on the SessionGateway contract: sign in, sign up, sign
out, "is a user present", and a subscription that reports the authenticated
status once on subscribe and again on every change. SupabaseSessionGateway is
the production implementation.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

from supabase import AuthApiError, Client

from ..utils.database import get_db_client

logger = logging.getLogger(__name__)

AuthListener = Callable[[bool], None]
Unsubscribe = Callable[[], None]


class AuthError(Exception):
    """Raised when an identity operation fails (bad credentials, network)."""
    pass


class SessionGateway(ABC):
    """
    Contract around the identity provider.

    Listener bookkeeping lives here; implementations call `_notify` whenever the
    provider reports a status change.
    """

    def __init__(self):
        self._listeners: List[AuthListener] = []
        self._listeners_lock = threading.Lock()

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> None:
        """
        Raises:
            AuthError: If authentication fails
        """
        pass

    @abstractmethod
    async def sign_up(self, email: str, password: str) -> None:
        """
        Raises:
            AuthError: If registration fails
        """
        pass

    @abstractmethod
    async def sign_out(self) -> None:
        """
        Raises:
            AuthError: If sign out fails
        """
        pass

    @abstractmethod
    def current_user_present(self) -> bool:
        pass

    async def refresh_status(self) -> bool:
        """Read the current status in a worker thread; the read may block."""
        return await asyncio.to_thread(self.current_user_present)

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        """
        Register for auth-status changes.

        The listener is called immediately with the current status.

        Returns:
            Callable that removes the listener
        """
        with self._listeners_lock:
            self._listeners.append(listener)
        listener(self.current_user_present())

        def unsubscribe() -> None:
            with self._listeners_lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, authenticated: bool) -> None:
        with self._listeners_lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(authenticated)
            except Exception as e:
                logger.error(f"Auth listener {listener!r} failed: {e}")


class SupabaseSessionGateway(SessionGateway):
    """SessionGateway backed by Supabase Auth."""

    def __init__(self, client: Optional[Client] = None):
        super().__init__()
        self._client = client
        self._subscription: Any = None
        self._authenticated: Optional[bool] = None

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_db_client().client
        return self._client

    def _ensure_provider_subscription(self) -> None:
        if self._subscription is None:
            self._subscription = self.client.auth.on_auth_state_change(
                lambda event, session: self._on_provider_event(session is not None)
            )

    def _on_provider_event(self, authenticated: bool) -> None:
        self._authenticated = authenticated
        self._notify(authenticated)

    def subscribe(self, listener: AuthListener) -> Unsubscribe:
        self._ensure_provider_subscription()
        return super().subscribe(listener)

    async def sign_in(self, email: str, password: str) -> None:
        try:
            response = await asyncio.to_thread(
                self.client.auth.sign_in_with_password,
                {"email": email, "password": password},
            )
        except AuthApiError as e:
            logger.warning(f"Authentication failed for {email}: {e}")
            raise AuthError(f"Authentication failed: {e}") from e
        except Exception as e:
            logger.error(f"Authentication error: {e}")
            raise AuthError(f"Authentication error: {e}") from e

        if not (response.user and response.session):
            raise AuthError("Authentication failed: Invalid credentials")
        self._authenticated = True
        logger.info(f"User authenticated successfully: {email}")

    async def sign_up(self, email: str, password: str) -> None:
        try:
            response = await asyncio.to_thread(
                self.client.auth.sign_up,
                {"email": email, "password": password},
            )
        except AuthApiError as e:
            logger.warning(f"Registration failed for {email}: {e}")
            raise AuthError(f"Registration failed: {e}") from e
        except Exception as e:
            logger.error(f"Registration error: {e}")
            raise AuthError(f"Registration error: {e}") from e

        if not response.user:
            raise AuthError("Registration failed")
        if response.session:
            self._authenticated = True
        logger.info(f"User registered successfully: {email}")

    async def sign_out(self) -> None:
        try:
            await asyncio.to_thread(self.client.auth.sign_out)
        except Exception as e:
            logger.error(f"Sign out error: {e}")
            raise AuthError(f"Sign out failed: {e}") from e
        self._authenticated = False
        logger.info("User signed out successfully")

    def _read_session(self) -> bool:
        # get_session may refresh an expired token over the network
        try:
            return self.client.auth.get_session() is not None
        except Exception as e:
            logger.debug(f"No session available: {e}")
            return False

    def current_user_present(self) -> bool:
        """Last known status; reads the stored session only before the first refresh."""
        if self._authenticated is None:
            self._authenticated = self._read_session()
        return self._authenticated

    async def refresh_status(self) -> bool:
        self._authenticated = await asyncio.to_thread(self._read_session)
        return self._authenticated

    def close(self) -> None:
        """Drop the provider subscription."""
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
