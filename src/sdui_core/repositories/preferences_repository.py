"""
Local preferences that survive process restarts.

Holds the "onboarding completed" flag in a small JSON file, written atomically
(temp file + os.replace) so a crash never leaves a half-written file.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

from ..config import PreferencesConfig, get_config

logger = logging.getLogger(__name__)


class PreferencesError(Exception):
    """Raised when the preferences file cannot be read or written."""
    pass


class PreferencesRepository:
    """JSON-file backed key/value preferences."""

    def __init__(self, config: Optional[PreferencesConfig] = None):
        self.config = config or get_config().preferences
        self.path = Path(self.config.path).expanduser()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Preferences file {self.path} unreadable, using defaults: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, Any]) -> None:
        temp_path: Optional[Path] = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=str(self.path.parent),
                prefix=self.path.name + ".",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                json.dump(data, tmp, indent=2, sort_keys=True)
                tmp.flush()
                os.fsync(tmp.fileno())
                temp_path = Path(tmp.name)
            os.replace(temp_path, self.path)
        except OSError as e:
            raise PreferencesError(f"Failed to write preferences to {self.path}: {e}") from e
        finally:
            if temp_path is not None and temp_path.exists():
                temp_path.unlink(missing_ok=True)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self._load().get(key, default)
        return value if isinstance(value, bool) else default

    def set_bool(self, key: str, value: bool) -> None:
        data = self._load()
        data[key] = bool(value)
        self._write(data)

    @property
    def has_completed_onboarding(self) -> bool:
        return self.get_bool(self.config.onboarding_key)

    def mark_onboarding_completed(self) -> None:
        """
        Persist the onboarding flag.

        Raises:
            PreferencesError: If the file cannot be written
        """
        self.set_bool(self.config.onboarding_key, True)
        logger.info("Onboarding marked as completed")
