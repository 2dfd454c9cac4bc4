"""
Pydantic schemas for screen documents and app session state.
"""

from .screen_schemas import (
    SCREEN_MODELS,
    AuthConfig,
    AutocapitalizationType,
    ButtonAction,
    ButtonSpec,
    ButtonStyle,
    ButtonType,
    FieldSpec,
    FieldType,
    HomeConfig,
    HomeSection,
    HomeSectionItem,
    KeyboardType,
    OnboardingButtonConfig,
    OnboardingConfig,
    OnboardingPage,
    SchemaError,
    ScreenBundle,
    ScreenConfig,
    ScreenKey,
    SocialConfig,
    SplashConfig,
    Talk,
    Track,
    TracksConfig,
    WebLink,
    parse_screen_config,
)
from .session_schemas import (
    AppSession,
    AppState,
    SessionError,
    SessionErrorKind,
    ValidationResult,
)

__all__ = [
    "SCREEN_MODELS",
    "AuthConfig",
    "AutocapitalizationType",
    "ButtonAction",
    "ButtonSpec",
    "ButtonStyle",
    "ButtonType",
    "FieldSpec",
    "FieldType",
    "HomeConfig",
    "HomeSection",
    "HomeSectionItem",
    "KeyboardType",
    "OnboardingButtonConfig",
    "OnboardingConfig",
    "OnboardingPage",
    "SchemaError",
    "ScreenBundle",
    "ScreenConfig",
    "ScreenKey",
    "SocialConfig",
    "SplashConfig",
    "Talk",
    "Track",
    "TracksConfig",
    "WebLink",
    "parse_screen_config",
    "AppSession",
    "AppState",
    "SessionError",
    "SessionErrorKind",
    "ValidationResult",
]
