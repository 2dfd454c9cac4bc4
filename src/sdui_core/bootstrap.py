"""
Wiring and startup helpers for a UI shell.

The core never retries on its own. `seed_if_needed` is the caller-side retry
for seeding a fresh deployment: it re-runs the whole presence check + import
sequence with exponential backoff.
"""

import logging
from typing import Optional

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from .auth.session_gateway import SessionGateway, SupabaseSessionGateway
from .config import AppConfig, get_config
from .repositories.base_repository import ConfigImportError, DocumentStore, DocumentStoreError
from .repositories.config_repository import ConfigRepository
from .repositories.preferences_repository import PreferencesRepository
from .repositories.supabase_document_store import SupabaseDocumentStore
from .state.app_state_machine import AppStateMachine
from .utils.logging_setup import configure_logging

logger = logging.getLogger(__name__)


async def seed_if_needed(
    repository: ConfigRepository,
    config: Optional[AppConfig] = None,
    wait: Optional[wait_base] = None,
) -> bool:
    """
    Seed the config namespace unless already seeded, retrying transient failures.

    Args:
        repository: Config repository to seed
        config: Application configuration (retry budget)
        wait: Override for the backoff strategy

    Returns:
        True if defaults were imported, False if already present

    Raises:
        ConfigImportError, DocumentStoreError: After the last attempt fails
    """
    config = config or get_config()
    retrying = AsyncRetrying(
        stop=stop_after_attempt(config.supabase.max_retries),
        wait=wait or wait_exponential(multiplier=config.supabase.retry_delay, min=1, max=10),
        retry=retry_if_exception_type((ConfigImportError, DocumentStoreError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await repository.initialize_if_needed()
    return False


def build_state_machine(
    config: Optional[AppConfig] = None,
    store: Optional[DocumentStore] = None,
    gateway: Optional[SessionGateway] = None,
    preferences: Optional[PreferencesRepository] = None,
) -> AppStateMachine:
    """
    Assemble an AppStateMachine, defaulting to the Supabase-backed collaborators.
    """
    config = config or get_config()
    configure_logging(config.logging)

    repository = ConfigRepository(store or SupabaseDocumentStore(store_config=config.store))
    machine = AppStateMachine(
        repository=repository,
        gateway=gateway or SupabaseSessionGateway(),
        preferences=preferences or PreferencesRepository(config.preferences),
        config=config,
    )
    logger.info(f"State machine assembled (environment={config.environment})")
    return machine
