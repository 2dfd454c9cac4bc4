"""
Unit tests for logging helpers, the Supabase client wrapper and preferences.
"""

import json
import logging
from unittest.mock import MagicMock, patch

import pytest

from sdui_core.config import AppConfig, PreferencesConfig
from sdui_core.repositories import PreferencesError, PreferencesRepository
from sdui_core.utils import JsonFormatter, OperationMetrics, log_operation, track_operation
from sdui_core.utils.database import DatabaseConnectionError, SupabaseClient


class TestJsonFormatter:
    """Structured log lines."""

    def test_includes_extra_fields(self):
        record = logging.makeLogRecord(
            {
                "name": "sdui_core.test",
                "levelname": "INFO",
                "msg": "loaded %s",
                "args": ("home",),
                "operation": "load",
            }
        )

        payload = json.loads(JsonFormatter().format(record))

        assert payload["message"] == "loaded home"
        assert payload["logger"] == "sdui_core.test"
        assert payload["operation"] == "load"
        assert "timestamp" in payload


class TestOperationLogging:
    """Operation timing and outcome tracking."""

    def test_metrics_to_dict(self):
        metrics = OperationMetrics("fetch")
        metrics.start()
        result = metrics.end(success=False, error="boom", error_type="RuntimeError")

        assert result["operation"] == "fetch"
        assert result["success"] is False
        assert result["error_type"] == "RuntimeError"
        assert result["execution_time_seconds"] >= 0

    def test_false_return_logged_as_failure(self, caplog):
        @log_operation("skip")
        def skip():
            return False

        with caplog.at_level(logging.INFO, logger="sdui_core.utils.execution_logger"):
            assert skip() is False

        assert any("FAILED" in message for message in caplog.messages)

    @pytest.mark.asyncio
    async def test_async_operation_reraises(self):
        @log_operation("sign_in")
        async def sign_in():
            raise RuntimeError("provider down")

        with pytest.raises(RuntimeError):
            await sign_in()

    @pytest.mark.asyncio
    async def test_track_operation_records_metadata(self):
        async with track_operation("load") as metrics:
            metrics.metadata["screens"] = 5

        assert metrics.success is True
        assert metrics.metadata == {"screens": 5}

    @pytest.mark.asyncio
    async def test_track_operation_failure(self):
        with pytest.raises(ValueError):
            async with track_operation("load") as metrics:
                raise ValueError("bad document")

        assert metrics.success is False
        assert metrics.error_type == "ValueError"


class TestSupabaseClient:
    """Lazy client creation."""

    def test_client_created_once(self):
        with patch("sdui_core.utils.database.create_client") as mock_create:
            mock_create.return_value = MagicMock()
            wrapper = SupabaseClient(AppConfig())

            assert wrapper.client is wrapper.client
            mock_create.assert_called_once()
            assert wrapper.stats["total_connections"] == 1

    def test_creation_failure(self):
        with patch("sdui_core.utils.database.create_client", side_effect=Exception("bad key")):
            wrapper = SupabaseClient(AppConfig())

            with pytest.raises(DatabaseConnectionError):
                wrapper.client

            assert wrapper.stats["failed_connections"] == 1


class TestPreferencesRepository:
    """Onboarding flag persistence."""

    def test_flag_defaults_to_false(self, tmp_path):
        repository = PreferencesRepository(PreferencesConfig(path=tmp_path / "prefs.json"))
        assert repository.has_completed_onboarding is False

    def test_flag_survives_new_instance(self, tmp_path):
        config = PreferencesConfig(path=tmp_path / "nested" / "prefs.json")
        PreferencesRepository(config).mark_onboarding_completed()

        assert PreferencesRepository(config).has_completed_onboarding is True
        stored = json.loads(config.path.read_text(encoding="utf-8"))
        assert stored == {"hasCompletedOnboarding": True}

    def test_other_keys_are_preserved(self, tmp_path):
        repository = PreferencesRepository(PreferencesConfig(path=tmp_path / "prefs.json"))
        repository.set_bool("darkMode", True)
        repository.mark_onboarding_completed()

        assert repository.get_bool("darkMode") is True

    def test_corrupt_file_reads_as_defaults(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text("{not json", encoding="utf-8")

        assert PreferencesRepository(PreferencesConfig(path=path)).has_completed_onboarding is False

    def test_non_bool_value_ignored(self, tmp_path):
        path = tmp_path / "prefs.json"
        path.write_text('{"hasCompletedOnboarding": "yes"}', encoding="utf-8")

        assert PreferencesRepository(PreferencesConfig(path=path)).has_completed_onboarding is False

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        repository = PreferencesRepository(PreferencesConfig(path=blocker / "prefs.json"))

        with pytest.raises(PreferencesError):
            repository.mark_onboarding_completed()
