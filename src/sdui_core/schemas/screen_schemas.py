"""
Screen Configuration Schema Definitions.

This module defines the typed shapes of the remote JSON documents that describe
each app screen (splash, onboarding, login, registration and home), plus the
helpers that decode a raw document into the right model.

Features:
- camelCase aliases matching the stored documents (imageURL, showImage, ...)
- Strict required fields and closed enum vocabularies
- Permissive optional fields (missing or null -> None)
- Stable ordering helpers for fields and buttons
- Track/talk consistency checks and selected-track resolution
"""

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel


class SchemaError(Exception):
    """Raised when a screen document does not match its schema."""

    def __init__(self, screen_key: str, problems: List[str]):
        self.screen_key = screen_key
        self.problems = problems
        super().__init__(f"Invalid '{screen_key}' document: {'; '.join(problems)}")


# Enums
class ScreenKey(str, Enum):
    """Document keys in the config namespace, one per screen."""
    SPLASH = "splash"
    ONBOARDING = "onboarding"
    LOGIN = "login"
    REGISTRATION = "registration"
    HOME = "home"


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    PHONE = "phone"
    NUMBER = "number"
    USERNAME = "username"


class KeyboardType(str, Enum):
    DEFAULT = "default"
    EMAIL = "email"
    NUMERIC = "numeric"
    PHONE = "phone"
    URL = "url"


class AutocapitalizationType(str, Enum):
    NONE = "none"
    WORDS = "words"
    SENTENCES = "sentences"
    CHARACTERS = "characters"


class ButtonType(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    SOCIAL = "social"
    LINK = "link"


class ButtonStyle(str, Enum):
    FILLED = "filled"
    OUTLINED = "outlined"
    PLAIN = "plain"


class ButtonAction(str, Enum):
    """Closed vocabulary of symbolic button actions."""
    LOGIN = "login"
    REGISTER = "register"
    GOOGLE_SIGN_IN = "googleSignIn"
    APPLE_SIGN_IN = "appleSignIn"
    FORGOT_PASSWORD = "forgotPassword"
    SKIP = "skip"
    CONTINUE = "continue"
    FINISH = "finish"


class SectionType(str, Enum):
    CAROUSEL = "carousel"
    GRID = "grid"
    LIST = "list"


class ItemActionType(str, Enum):
    URL = "url"
    SCREEN = "screen"
    FUNCTION = "function"


class ScreenModel(BaseModel):
    """Base for all document models: immutable, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


# Splash
class SplashConfig(ScreenModel):
    show_image: StrictBool
    image_url: Optional[StrictStr] = Field(None, alias="imageURL")
    text: Optional[StrictStr] = None
    background_color: StrictStr
    text_color: Optional[StrictStr] = None
    duration: Optional[Union[StrictInt, StrictFloat]] = None

    @field_validator("duration")
    @classmethod
    def validate_duration(cls, v):
        if v is not None and v < 0:
            raise ValueError("duration cannot be negative")
        return v


# Onboarding
class OnboardingPage(ScreenModel):
    id: StrictStr
    image_url: StrictStr = Field(..., alias="imageURL")
    title: StrictStr
    description: StrictStr
    background_color: Optional[StrictStr] = None
    text_color: Optional[StrictStr] = None


class OnboardingButtonConfig(ScreenModel):
    skip_button_title: StrictStr
    continue_button_title: StrictStr
    finish_button_title: StrictStr
    button_color: Optional[StrictStr] = None
    button_text_color: Optional[StrictStr] = None


class OnboardingConfig(ScreenModel):
    """Onboarding pages are shown in document order."""

    pages: List[OnboardingPage]
    show_skip_button: StrictBool
    button_config: OnboardingButtonConfig

    @property
    def last_page_index(self) -> int:
        return max(len(self.pages) - 1, 0)

    def is_last_page(self, page_index: int) -> bool:
        return page_index >= self.last_page_index

    def primary_button_title(self, page_index: int) -> str:
        """Finish title on the last page, continue title before it."""
        if self.is_last_page(page_index):
            return self.button_config.finish_button_title
        return self.button_config.continue_button_title


# Fields and buttons
class FieldSpec(ScreenModel):
    """One user-input control description."""

    id: StrictStr
    type: FieldType
    label: StrictStr
    placeholder: StrictStr
    required: StrictBool
    validation: Optional[StrictStr] = None
    error_message: Optional[StrictStr] = None
    order: StrictInt
    keyboard_type: Optional[KeyboardType] = None
    autocapitalization: Optional[AutocapitalizationType] = None


class ButtonSpec(ScreenModel):
    """One actionable control bound to a symbolic action."""

    id: StrictStr
    type: ButtonType
    title: StrictStr
    style: ButtonStyle
    order: StrictInt
    action: ButtonAction
    background_color: Optional[StrictStr] = None
    text_color: Optional[StrictStr] = None
    icon: Optional[StrictStr] = None

    @property
    def is_social_button(self) -> bool:
        return self.type == ButtonType.SOCIAL


# Login / Registration
class SocialConfig(ScreenModel):
    show_apple: StrictBool
    show_google: StrictBool


class AuthConfig(ScreenModel):
    """Shared shape of the login and registration documents."""

    title: Optional[StrictStr] = None
    subtitle: Optional[StrictStr] = None
    logo_url: Optional[StrictStr] = Field(None, alias="logoURL")
    background_color: Optional[StrictStr] = None
    text_color: Optional[StrictStr] = None
    social_buttons: Optional[StrictBool] = None
    social_config: Optional[SocialConfig] = None
    fields: List[FieldSpec]
    buttons: List[ButtonSpec]
    terms_text: Optional[StrictStr] = None
    privacy_text: Optional[StrictStr] = None
    divider_text: Optional[StrictStr] = None

    @model_validator(mode="after")
    def validate_unique_field_ids(self):
        seen = set()
        for field in self.fields:
            if field.id in seen:
                raise ValueError(f"Duplicate field id: {field.id}")
            seen.add(field.id)
        return self

    def sorted_fields(self) -> List[FieldSpec]:
        """Fields by `order`; ties keep document sequence."""
        return sorted(self.fields, key=lambda f: f.order)

    def sorted_buttons(self) -> List[ButtonSpec]:
        return sorted(self.buttons, key=lambda b: b.order)

    def field(self, field_id: str) -> Optional[FieldSpec]:
        return next((f for f in self.fields if f.id == field_id), None)


# Home
class Talk(ScreenModel):
    id: StrictStr
    title: StrictStr
    description: StrictStr
    speaker_name: StrictStr
    speaker_role: Optional[StrictStr] = None
    image_url: Optional[StrictStr] = Field(None, alias="imageURL")
    time: StrictStr
    location: Optional[StrictStr] = None
    track_id: StrictStr
    tags: Optional[List[StrictStr]] = None


class Track(ScreenModel):
    id: StrictStr
    name: StrictStr
    color: Optional[StrictStr] = None
    talks: List[Talk]

    @model_validator(mode="after")
    def validate_talk_track_ids(self):
        for talk in self.talks:
            if talk.track_id != self.id:
                raise ValueError(
                    f"Talk '{talk.id}' references track '{talk.track_id}' but belongs to '{self.id}'"
                )
        return self


class TracksConfig(ScreenModel):
    tracks: List[Track]
    selected_track_id: Optional[StrictStr] = None

    @property
    def resolved_selected_track_id(self) -> Optional[str]:
        """The configured selection if it names a track, else the first track."""
        if self.selected_track_id and any(t.id == self.selected_track_id for t in self.tracks):
            return self.selected_track_id
        return self.tracks[0].id if self.tracks else None

    def talks_for(self, track_id: Optional[str]) -> List[Talk]:
        track = next((t for t in self.tracks if t.id == track_id), None)
        return list(track.talks) if track else []


class WebLink(ScreenModel):
    url: StrictStr
    text: StrictStr


class ItemAction(ScreenModel):
    type: ItemActionType
    value: StrictStr


class HomeSectionItem(ScreenModel):
    id: StrictStr
    title: StrictStr
    description: Optional[StrictStr] = None
    image_url: Optional[StrictStr] = Field(None, alias="imageURL")
    action: Optional[ItemAction] = None


class HomeSection(ScreenModel):
    id: StrictStr
    type: SectionType
    title: StrictStr
    items: Optional[List[HomeSectionItem]] = None


class HomeConfig(ScreenModel):
    welcome_text: StrictStr
    image_url: Optional[StrictStr] = Field(None, alias="imageURL")
    background_color: Optional[StrictStr] = None
    text_color: Optional[StrictStr] = None
    web_link: Optional[WebLink] = None
    tracks_config: TracksConfig
    sections: Optional[List[HomeSection]] = None


ScreenConfig = Union[SplashConfig, OnboardingConfig, AuthConfig, HomeConfig]

SCREEN_MODELS: Dict[ScreenKey, Type[ScreenModel]] = {
    ScreenKey.SPLASH: SplashConfig,
    ScreenKey.ONBOARDING: OnboardingConfig,
    ScreenKey.LOGIN: AuthConfig,
    ScreenKey.REGISTRATION: AuthConfig,
    ScreenKey.HOME: HomeConfig,
}


class ScreenBundle(BaseModel):
    """All five screen documents, loaded together at startup."""

    model_config = ConfigDict(frozen=True)

    splash: SplashConfig
    onboarding: OnboardingConfig
    login: AuthConfig
    registration: AuthConfig
    home: HomeConfig

    def for_key(self, screen_key: ScreenKey) -> ScreenConfig:
        return getattr(self, ScreenKey(screen_key).value)


def _format_problem(error: Dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
    return f"{location}: {error.get('msg', 'invalid value')}"


def parse_screen_config(screen_key: Union[ScreenKey, str], raw: Any) -> ScreenConfig:
    """
    Decode a raw document into the typed config for a screen.

    Args:
        screen_key: Which screen the document describes
        raw: The document as stored (a JSON object)

    Returns:
        The matching ScreenConfig variant

    Raises:
        SchemaError: If the key is unknown or the document does not match
    """
    try:
        key = ScreenKey(screen_key)
    except ValueError:
        raise SchemaError(str(screen_key), [f"unknown screen key '{screen_key}'"])

    if not isinstance(raw, Mapping):
        raise SchemaError(key.value, [f"expected an object, got {type(raw).__name__}"])

    try:
        return SCREEN_MODELS[key].model_validate(dict(raw))
    except ValidationError as e:
        raise SchemaError(key.value, [_format_problem(err) for err in e.errors()]) from e
