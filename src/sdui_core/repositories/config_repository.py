"""
Config Repository for Server-Driven Screen Documents.

This module provides fetch, seed, update and reset operations for the screen
configuration documents held in the remote document store.

None of these operations retry: a failure propagates to the caller, who owns
the retry policy.
"""

import logging
from typing import Any, List, Mapping, Optional, Union

from ..schemas.screen_schemas import (
    AuthConfig,
    HomeConfig,
    OnboardingConfig,
    SchemaError,
    ScreenConfig,
    ScreenKey,
    SplashConfig,
    parse_screen_config,
)
from .base_repository import (
    ConfigDecodeError,
    ConfigImportError,
    ConfigNotFoundError,
    Document,
    DocumentStore,
    RepositoryError,
)
from .default_configuration import default_documents

logger = logging.getLogger(__name__)


class ConfigRepository:
    """
    Repository for the screen configuration namespace.

    The splash document doubles as the "deployment has been seeded" marker.
    """

    def __init__(self, store: DocumentStore):
        """
        Initialize the config repository.

        Args:
            store: Document store holding the config collection
        """
        self.store = store
        self._logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def fetch(self, screen_key: Union[ScreenKey, str]) -> ScreenConfig:
        """
        Fetch and decode one screen document.

        Args:
            screen_key: Which screen to load

        Returns:
            The typed screen configuration

        Raises:
            ConfigNotFoundError: If the document is absent
            ConfigDecodeError: If the document does not match its schema
            DocumentStoreError: If the store cannot be reached
        """
        key = ScreenKey(screen_key)
        raw = await self.store.get(key.value)

        if raw is None:
            self._logger.error(f"❌ Document not found: {self.store.path(key.value)}")
            raise ConfigNotFoundError(self.store.path(key.value))

        try:
            return parse_screen_config(key, raw)
        except SchemaError as e:
            self._logger.error(f"❌ Error decoding {self.store.path(key.value)}: {e}")
            raise ConfigDecodeError(str(e)) from e

    async def fetch_splash_config(self) -> SplashConfig:
        return await self.fetch(ScreenKey.SPLASH)

    async def fetch_onboarding_config(self) -> OnboardingConfig:
        return await self.fetch(ScreenKey.ONBOARDING)

    async def fetch_login_config(self) -> AuthConfig:
        return await self.fetch(ScreenKey.LOGIN)

    async def fetch_registration_config(self) -> AuthConfig:
        return await self.fetch(ScreenKey.REGISTRATION)

    async def fetch_home_config(self) -> HomeConfig:
        return await self.fetch(ScreenKey.HOME)

    async def check_initial_configuration_present(self) -> bool:
        """True iff the splash document exists."""
        return await self.store.exists(ScreenKey.SPLASH.value)

    async def import_initial_configuration(self) -> None:
        """
        Write the five default documents, one after another.

        Callers check presence first. A failure part-way leaves the documents
        written so far in place and raises ConfigImportError; the whole
        sequence can be retried.

        Raises:
            ConfigImportError: If any write fails
        """
        written: List[str] = []
        for key, document in default_documents():
            try:
                await self.store.set(key.value, document)
            except RepositoryError as e:
                self._logger.error(f"❌ Import stopped at {key.value} after {written}: {e}")
                raise ConfigImportError(
                    f"Failed to import '{key.value}': {e}",
                    written=written,
                    failed=key.value,
                ) from e
            written.append(key.value)

        self._logger.info("✅ Initial configuration imported")

    async def initialize_if_needed(self) -> bool:
        """
        Seed the namespace unless it is already seeded.

        Returns:
            True if the defaults were imported, False if already present
        """
        if await self.check_initial_configuration_present():
            self._logger.info("✅ Configuration already present")
            return False

        self._logger.info("📝 Configuration not found, importing defaults")
        await self.import_initial_configuration()
        return True

    async def update_config(self, screen_key: Union[ScreenKey, str], partial: Mapping[str, Any]) -> Document:
        """
        Merge fields into an existing screen document.

        Fields not named in `partial` are left untouched.

        Returns:
            The document as stored after the merge
        """
        key = ScreenKey(screen_key)
        document = await self.store.set(key.value, partial, merge=True)
        self._logger.info(f"🔄 Configuration for {key.value} updated")
        return document

    async def clear_configuration(self) -> int:
        """
        Delete every document in the config namespace.

        Returns:
            Number of documents deleted
        """
        deleted = 0
        for key in await self.store.list_keys():
            if await self.store.delete(key):
                deleted += 1
        self._logger.info(f"🗑️ Configuration cleared ({deleted} documents)")
        return deleted

    async def reset_to_defaults(self) -> None:
        """
        Delete all config documents and import the defaults again.

        Not atomic: an interruption between the two steps leaves no usable
        configuration. Intended for operators, not runtime paths.
        """
        self._logger.warning("Resetting configuration to defaults")
        await self.clear_configuration()
        await self.import_initial_configuration()

    async def get_raw(self, screen_key: Union[ScreenKey, str]) -> Optional[Document]:
        """The stored document without decoding, or None."""
        return await self.store.get(ScreenKey(screen_key).value)
