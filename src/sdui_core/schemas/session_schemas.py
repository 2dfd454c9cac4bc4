"""
App session and validation result schemas.

The AppSession is the single process-wide record of which screen is active
and why. It is mutated only by the AppStateMachine; observers receive copies.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AppState(str, Enum):
    """Screens the app can show."""
    SPLASH = "splash"
    ONBOARDING = "onboarding"
    LOGIN = "login"
    REGISTRATION = "registration"
    HOME = "home"


class SessionErrorKind(str, Enum):
    """Categories of failures recorded on the session."""
    NOT_FOUND = "not_found"
    DECODE = "decode"
    IMPORT = "import"
    STORE = "store"
    AUTH = "auth"
    PREFERENCES = "preferences"
    INVALID_TRANSITION = "invalid_transition"
    UNKNOWN = "unknown"


class SessionError(BaseModel):
    """The last failure of a session operation."""

    model_config = ConfigDict(frozen=True)

    kind: SessionErrorKind
    message: str
    operation: Optional[str] = Field(None, description="Operation that failed")
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class AppSession(BaseModel):
    """
    Process-wide session state.

    Created at startup in SPLASH and torn down with the process.
    """

    model_config = ConfigDict(validate_assignment=True)

    current_state: AppState = AppState.SPLASH
    is_authenticated: bool = False
    has_completed_onboarding: bool = False
    is_loading: bool = True
    onboarding_page_index: int = Field(0, ge=0)
    error: Optional[SessionError] = None


class ValidationResult(BaseModel):
    """Outcome of validating one field value."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    message: Optional[str] = None
