"""
Configuration management for the server-driven UI core.

This module handles all configuration settings including the Supabase
connection, the config document namespace, splash timing, local preference
storage and logging, using Pydantic settings.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class SupabaseConfig(BaseSettings):
    """Supabase-specific configuration settings."""

    url: str = "https://placeholder.supabase.co"
    key: str = "placeholder_key"
    timeout: int = 30
    max_retries: int = 3
    retry_delay: int = 1

    model_config = SettingsConfigDict(env_prefix="SUPABASE_", case_sensitive=False, extra="ignore")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate Supabase URL format."""
        if not v.startswith(("https://", "http://localhost", "http://127.0.0.1")):
            raise ValueError("Invalid Supabase URL format")
        return v.rstrip("/")

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        if v < 1 or v > 10:
            raise ValueError("max_retries must be between 1 and 10")
        return v


class StoreConfig(BaseSettings):
    """Remote document store layout."""

    collection: str = Field("config", description="Table holding one row per screen document")
    key_column: str = "key"
    data_column: str = "data"

    model_config = SettingsConfigDict(env_prefix="STORE_", case_sensitive=False, extra="ignore")

    @field_validator("collection", "key_column", "data_column")
    @classmethod
    def validate_identifier(cls, v: str) -> str:
        if not v or not v.replace("_", "").isalnum():
            raise ValueError(f"Invalid store identifier: {v!r}")
        return v


class SplashTimingConfig(BaseSettings):
    """Splash screen timing."""

    default_duration: float = Field(
        2.0,
        description="Seconds the splash stays visible when the splash document has no duration",
    )

    model_config = SettingsConfigDict(env_prefix="SPLASH_", case_sensitive=False, extra="ignore")

    @field_validator("default_duration")
    @classmethod
    def validate_duration(cls, v: float) -> float:
        if v < 0:
            raise ValueError("Splash duration cannot be negative")
        return v


class PreferencesConfig(BaseSettings):
    """Local preference storage that survives restarts."""

    path: Path = Path.home() / ".sdui" / "preferences.json"
    onboarding_key: str = "hasCompletedOnboarding"

    model_config = SettingsConfigDict(env_prefix="PREFS_", case_sensitive=False, extra="ignore")


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "json"

    model_config = SettingsConfigDict(env_prefix="LOG_", case_sensitive=False, extra="ignore")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in {"json", "text"}:
            raise ValueError("Log format must be 'json' or 'text'")
        return v


class AppConfig(BaseSettings):
    """Main application configuration."""

    environment: str = "development"
    debug: bool = True

    # Sub-configurations
    supabase: SupabaseConfig
    store: StoreConfig
    splash: SplashTimingConfig
    preferences: PreferencesConfig
    logging: LoggingConfig

    def __init__(self, **kwargs):
        # Initialize sub-configurations unless the caller supplied them
        kwargs.setdefault("supabase", SupabaseConfig())
        kwargs.setdefault("store", StoreConfig())
        kwargs.setdefault("splash", SplashTimingConfig())
        kwargs.setdefault("preferences", PreferencesConfig())
        kwargs.setdefault("logging", LoggingConfig())
        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment.lower() == "production"


# Global configuration instance
config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the global configuration instance.

    Returns:
        AppConfig: The application configuration instance.
    """
    global config
    if config is None:
        config = AppConfig()
    return config


def reload_config() -> AppConfig:
    """
    Reload the configuration from environment variables.

    Returns:
        AppConfig: The reloaded application configuration instance.
    """
    global config
    config = AppConfig()
    return config
