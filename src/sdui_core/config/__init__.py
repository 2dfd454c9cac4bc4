"""
Configuration management package for the server-driven UI core.
"""

from .settings import (
    get_config,
    reload_config,
    AppConfig,
    SupabaseConfig,
    StoreConfig,
    SplashTimingConfig,
    PreferencesConfig,
    LoggingConfig,
)

__all__ = [
    "get_config",
    "reload_config",
    "AppConfig",
    "SupabaseConfig",
    "StoreConfig",
    "SplashTimingConfig",
    "PreferencesConfig",
    "LoggingConfig",
]
