"""
Shared fixtures for the sdui_core test suite.
"""

from typing import List, Optional, Tuple
from unittest.mock import AsyncMock

import pytest

from sdui_core.auth.session_gateway import SessionGateway
from sdui_core.config import AppConfig, PreferencesConfig, SplashTimingConfig
from sdui_core.repositories.base_repository import InMemoryDocumentStore
from sdui_core.repositories.config_repository import ConfigRepository
from sdui_core.repositories.default_configuration import default_documents
from sdui_core.repositories.preferences_repository import PreferencesRepository
from sdui_core.state.app_state_machine import AppStateMachine


class FakeSessionGateway(SessionGateway):
    """In-process identity provider that records every call."""

    def __init__(self, authenticated: bool = False):
        super().__init__()
        self.authenticated = authenticated
        self.sign_in_error: Optional[Exception] = None
        self.sign_up_error: Optional[Exception] = None
        self.sign_out_error: Optional[Exception] = None
        self.calls: List[Tuple[str, ...]] = []

    async def sign_in(self, email: str, password: str) -> None:
        self.calls.append(("sign_in", email, password))
        if self.sign_in_error is not None:
            raise self.sign_in_error
        self.authenticated = True
        self._notify(True)

    async def sign_up(self, email: str, password: str) -> None:
        self.calls.append(("sign_up", email, password))
        if self.sign_up_error is not None:
            raise self.sign_up_error
        self.authenticated = True
        self._notify(True)

    async def sign_out(self) -> None:
        self.calls.append(("sign_out",))
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.authenticated = False
        self._notify(False)

    def current_user_present(self) -> bool:
        return self.authenticated

    def emit(self, authenticated: bool) -> None:
        """Simulate a provider-side status change (token expiry, other device)."""
        self.authenticated = authenticated
        self._notify(authenticated)


def seeded_documents():
    return {key.value: document for key, document in default_documents()}


@pytest.fixture
def seeded_store():
    return InMemoryDocumentStore(documents=seeded_documents())


@pytest.fixture
def empty_store():
    return InMemoryDocumentStore()


@pytest.fixture
def app_config(tmp_path):
    return AppConfig(
        preferences=PreferencesConfig(path=tmp_path / "preferences.json"),
        splash=SplashTimingConfig(default_duration=2.0),
    )


@pytest.fixture
def preferences(app_config):
    return PreferencesRepository(app_config.preferences)


@pytest.fixture
def gateway():
    return FakeSessionGateway()


@pytest.fixture
def sleep():
    return AsyncMock()


@pytest.fixture
def make_machine(seeded_store, gateway, preferences, app_config, sleep):
    """Factory so tests can tweak collaborators before construction."""

    def factory(store=None, **overrides):
        return AppStateMachine(
            repository=ConfigRepository(store or seeded_store),
            gateway=overrides.get("gateway", gateway),
            preferences=overrides.get("preferences", preferences),
            config=overrides.get("config", app_config),
            sleep=overrides.get("sleep", sleep),
        )

    return factory
