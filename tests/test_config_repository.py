"""
Unit tests for ConfigRepository and the in-memory document store.

Tests cover:
- Seeding a fresh namespace
- Not-found and decode failures
- Merge updates
- Partial import failures
- Clear and reset
"""

from unittest.mock import AsyncMock

import pytest

from sdui_core.repositories import (
    ConfigDecodeError,
    ConfigImportError,
    ConfigNotFoundError,
    ConfigRepository,
    DocumentStoreError,
    InMemoryDocumentStore,
    merge_documents,
)
from sdui_core.schemas import AuthConfig, HomeConfig, ScreenKey, SplashConfig

from conftest import seeded_documents


class FailingPutStore(InMemoryDocumentStore):
    """Store whose writes fail for chosen keys."""

    def __init__(self, fail_on, **kwargs):
        super().__init__(**kwargs)
        self.fail_on = set(fail_on)

    async def put(self, key, document):
        if key in self.fail_on:
            raise DocumentStoreError(f"write rejected for {key}")
        await super().put(key, document)


class TestMergeDocuments:
    """Deep merge semantics used by partial updates."""

    def test_nested_mappings_merge(self):
        base = {"a": 1, "nested": {"x": 1, "y": 2}}
        merged = merge_documents(base, {"nested": {"y": 3, "z": 4}})
        assert merged == {"a": 1, "nested": {"x": 1, "y": 3, "z": 4}}

    def test_lists_replace(self):
        merged = merge_documents({"items": [1, 2, 3]}, {"items": [4]})
        assert merged == {"items": [4]}

    def test_base_is_not_modified(self):
        base = {"nested": {"x": 1}}
        merge_documents(base, {"nested": {"x": 2}})
        assert base == {"nested": {"x": 1}}


class TestFetch:
    """Reading and decoding screen documents."""

    @pytest.mark.asyncio
    async def test_fetch_typed_documents(self, seeded_store):
        repository = ConfigRepository(seeded_store)

        assert isinstance(await repository.fetch_splash_config(), SplashConfig)
        assert isinstance(await repository.fetch_login_config(), AuthConfig)
        assert isinstance(await repository.fetch_registration_config(), AuthConfig)
        assert isinstance(await repository.fetch_home_config(), HomeConfig)
        onboarding = await repository.fetch_onboarding_config()
        assert len(onboarding.pages) == 3

    @pytest.mark.asyncio
    async def test_missing_document_raises_not_found(self, empty_store):
        repository = ConfigRepository(empty_store)

        with pytest.raises(ConfigNotFoundError) as exc_info:
            await repository.fetch(ScreenKey.HOME)

        assert exc_info.value.path == "config/home"

    @pytest.mark.asyncio
    async def test_malformed_document_raises_decode_error(self):
        store = InMemoryDocumentStore(documents={"splash": {"showImage": "yes"}})
        repository = ConfigRepository(store)

        with pytest.raises(ConfigDecodeError) as exc_info:
            await repository.fetch(ScreenKey.SPLASH)

        assert "splash" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_store_errors_propagate(self):
        store = InMemoryDocumentStore()
        store.get = AsyncMock(side_effect=DocumentStoreError("offline"))
        repository = ConfigRepository(store)

        with pytest.raises(DocumentStoreError):
            await repository.fetch(ScreenKey.LOGIN)


class TestSeeding:
    """Presence check and default import."""

    @pytest.mark.asyncio
    async def test_fresh_namespace_is_seeded(self, empty_store):
        repository = ConfigRepository(empty_store)

        assert not await repository.check_initial_configuration_present()
        await repository.import_initial_configuration()

        assert await repository.check_initial_configuration_present()
        assert set(empty_store.snapshot()) == {key.value for key in ScreenKey}
        for key in ScreenKey:
            await repository.fetch(key)

    @pytest.mark.asyncio
    async def test_initialize_if_needed(self, empty_store):
        repository = ConfigRepository(empty_store)

        assert await repository.initialize_if_needed() is True
        assert await repository.initialize_if_needed() is False

    @pytest.mark.asyncio
    async def test_presence_depends_on_splash_only(self):
        documents = seeded_documents()
        del documents["splash"]
        repository = ConfigRepository(InMemoryDocumentStore(documents=documents))

        assert not await repository.check_initial_configuration_present()

    @pytest.mark.asyncio
    async def test_partial_import_failure(self):
        store = FailingPutStore(fail_on={"login"})
        repository = ConfigRepository(store)

        with pytest.raises(ConfigImportError) as exc_info:
            await repository.import_initial_configuration()

        assert exc_info.value.written == ["splash", "onboarding"]
        assert exc_info.value.failed == "login"
        assert set(store.snapshot()) == {"splash", "onboarding"}

    @pytest.mark.asyncio
    async def test_import_can_be_retried(self):
        store = FailingPutStore(fail_on={"home"})
        repository = ConfigRepository(store)

        with pytest.raises(ConfigImportError):
            await repository.import_initial_configuration()

        store.fail_on.clear()
        await repository.import_initial_configuration()
        assert set(store.snapshot()) == {key.value for key in ScreenKey}


class TestUpdateAndReset:
    """Merge updates, clearing and resetting the namespace."""

    @pytest.mark.asyncio
    async def test_merge_update_keeps_other_fields(self, seeded_store):
        repository = ConfigRepository(seeded_store)

        await repository.update_config(
            ScreenKey.LOGIN,
            {"title": "Welcome back", "socialConfig": {"showApple": True}},
        )

        login = await repository.fetch_login_config()
        assert login.title == "Welcome back"
        assert login.subtitle == "Bienvenido de nuevo"
        assert login.social_config.show_apple is True
        assert login.social_config.show_google is True
        assert len(login.fields) == 2

    @pytest.mark.asyncio
    async def test_update_returns_stored_document(self, seeded_store):
        repository = ConfigRepository(seeded_store)

        document = await repository.update_config("splash", {"duration": 0.5})

        assert document["duration"] == 0.5
        assert document == await repository.get_raw(ScreenKey.SPLASH)

    @pytest.mark.asyncio
    async def test_clear_configuration(self, seeded_store):
        repository = ConfigRepository(seeded_store)

        assert await repository.clear_configuration() == 5
        assert seeded_store.snapshot() == {}
        assert await repository.clear_configuration() == 0

    @pytest.mark.asyncio
    async def test_reset_to_defaults(self, seeded_store):
        repository = ConfigRepository(seeded_store)
        await repository.update_config(ScreenKey.SPLASH, {"text": "custom"})

        await repository.reset_to_defaults()

        splash = await repository.fetch_splash_config()
        assert splash.text == "Bienvenido al App Oficial del DevFest Campeche 2024"

    @pytest.mark.asyncio
    async def test_get_raw_missing(self, empty_store):
        repository = ConfigRepository(empty_store)
        assert await repository.get_raw(ScreenKey.HOME) is None
