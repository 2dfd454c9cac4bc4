"""
Form Interpreter for login and registration screens.

Holds the live input of the form currently on screen, recomputes field
validity on every change, and turns a button's symbolic action into one
state-machine operation or a local UI behaviour.
"""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from ..schemas.screen_schemas import AuthConfig, ButtonAction, ButtonSpec, FieldSpec, FieldType
from ..schemas.session_schemas import AppState
from .field_validation import is_form_valid, validate

if TYPE_CHECKING:
    from ..state.app_state_machine import AppStateMachine

logger = logging.getLogger(__name__)

DEFAULT_ERROR_MESSAGE = "Invalid field"


class FormAction(str, Enum):
    """What a button press resolves to."""
    SIGN_IN = "sign_in"
    SHOW_REGISTRATION = "show_registration"
    DISMISS_REGISTRATION = "dismiss_registration"
    SIGN_UP = "sign_up"
    SKIP_ONBOARDING = "skip_onboarding"
    ADVANCE_ONBOARDING = "advance_onboarding"
    COMPLETE_ONBOARDING = "complete_onboarding"
    FORGOT_PASSWORD = "forgot_password"
    GOOGLE_SIGN_IN = "google_sign_in"
    APPLE_SIGN_IN = "apple_sign_in"
    IGNORED = "ignored"


# Actions whose meaning does not depend on the screen
_STATIC_ACTIONS: Dict[ButtonAction, FormAction] = {
    ButtonAction.LOGIN: FormAction.SIGN_IN,
    ButtonAction.SKIP: FormAction.SKIP_ONBOARDING,
    ButtonAction.CONTINUE: FormAction.ADVANCE_ONBOARDING,
    ButtonAction.FINISH: FormAction.COMPLETE_ONBOARDING,
    ButtonAction.FORGOT_PASSWORD: FormAction.FORGOT_PASSWORD,
    ButtonAction.GOOGLE_SIGN_IN: FormAction.GOOGLE_SIGN_IN,
    ButtonAction.APPLE_SIGN_IN: FormAction.APPLE_SIGN_IN,
}

# Handled by the UI shell, no state-machine call
LOCAL_ACTIONS = frozenset({FormAction.FORGOT_PASSWORD, FormAction.GOOGLE_SIGN_IN, FormAction.APPLE_SIGN_IN})

# Require a valid form before they run
SUBMIT_ACTIONS = frozenset({FormAction.SIGN_IN, FormAction.SIGN_UP})


class FormInputState(BaseModel):
    """Live values and validity of the form on screen; discarded with it."""

    values: Dict[str, str] = Field(default_factory=dict)
    validations: Dict[str, bool] = Field(default_factory=dict)


class DispatchResult(BaseModel):
    action: FormAction
    performed: bool
    reason: Optional[str] = None


class FormInterpreter:
    """
    Interpreter for one AuthConfig form.

    Args:
        config: The login or registration document (no fields when omitted,
            e.g. for onboarding buttons)
        screen: Which screen the form is shown on (decides what "register" means)
    """

    def __init__(self, config: Optional[AuthConfig], screen: AppState):
        config = config or AuthConfig(fields=[], buttons=[])
        self.config = config
        self.screen = AppState(screen)
        self.state = FormInputState()
        self.is_submitting = False
        for field in config.fields:
            self.state.values[field.id] = ""
            self.state.validations[field.id] = validate("", field).is_valid

    @property
    def fields(self) -> List[FieldSpec]:
        return self.config.sorted_fields()

    def update_field(self, field_id: str, value: str) -> bool:
        """
        Record a new value and recompute that field's validity.

        Returns:
            The field's validity; unknown field ids are ignored (False)
        """
        field = self.config.field(field_id)
        if field is None:
            logger.debug(f"Ignoring input for unknown field {field_id}")
            return False
        result = validate(value, field)
        self.state.values[field_id] = value
        self.state.validations[field_id] = result.is_valid
        return result.is_valid

    def value(self, field_id: str) -> str:
        return self.state.values.get(field_id, "")

    def error_message(self, field_id: str) -> Optional[str]:
        """The message to show under a field, if any."""
        field = self.config.field(field_id)
        if field is None or not field.required:
            return None
        if not self.value(field_id) or self.state.validations.get(field_id, False):
            return None
        return field.error_message or DEFAULT_ERROR_MESSAGE

    @property
    def is_form_valid(self) -> bool:
        return is_form_valid(self.config.fields, self.state.values, self.state.validations)

    def visible_buttons(self) -> List[ButtonSpec]:
        """Buttons in display order, social ones only when enabled by the document."""
        social = self.config.social_config
        visible = []
        for button in self.config.sorted_buttons():
            if button.is_social_button:
                if not self.config.social_buttons:
                    continue
                if social is not None:
                    if button.action == ButtonAction.APPLE_SIGN_IN and not social.show_apple:
                        continue
                    if button.action == ButtonAction.GOOGLE_SIGN_IN and not social.show_google:
                        continue
            visible.append(button)
        return visible

    def is_button_enabled(self, button: ButtonSpec) -> bool:
        if self.is_submitting:
            return False
        return self.resolve_action(button) not in SUBMIT_ACTIONS or self.is_form_valid

    def resolve_action(self, button: Union[ButtonSpec, ButtonAction, str]) -> FormAction:
        """
        Map a button's symbolic action to what it does on this screen.

        Values outside the known vocabulary resolve to IGNORED.
        """
        raw = button.action if isinstance(button, ButtonSpec) else button
        try:
            action = ButtonAction(raw)
        except ValueError:
            return FormAction.IGNORED

        if action == ButtonAction.REGISTER:
            if self.screen == AppState.LOGIN:
                return FormAction.SHOW_REGISTRATION
            if self.screen == AppState.REGISTRATION:
                return FormAction.SIGN_UP
            return FormAction.IGNORED
        if action == ButtonAction.LOGIN and self.screen == AppState.REGISTRATION:
            return FormAction.DISMISS_REGISTRATION
        return _STATIC_ACTIONS.get(action, FormAction.IGNORED)

    def _credential(self, kind: FieldType) -> str:
        field = self.config.field(kind.value)
        if field is None:
            field = next((f for f in self.config.fields if f.type == kind), None)
        return self.value(field.id) if field is not None else ""

    async def dispatch(
        self,
        button: Union[ButtonSpec, ButtonAction, str],
        machine: "AppStateMachine",
    ) -> DispatchResult:
        """
        Perform a button's action.

        Submit actions run only when the form is valid and no submission is in
        flight. Field values are kept whatever the outcome.
        """
        action = self.resolve_action(button)

        if action == FormAction.IGNORED:
            return DispatchResult(action=action, performed=False, reason="no handler")
        if action in LOCAL_ACTIONS:
            logger.info(f"Action {action.value} is handled by the UI shell")
            return DispatchResult(action=action, performed=False, reason="local")
        if action in SUBMIT_ACTIONS:
            if self.is_submitting:
                return DispatchResult(action=action, performed=False, reason="submission in progress")
            if not self.is_form_valid:
                return DispatchResult(action=action, performed=False, reason="form invalid")

        if action == FormAction.SHOW_REGISTRATION:
            performed = machine.show_registration()
        elif action == FormAction.DISMISS_REGISTRATION:
            performed = machine.dismiss_registration()
        elif action == FormAction.SKIP_ONBOARDING:
            performed = machine.skip_onboarding()
        elif action == FormAction.ADVANCE_ONBOARDING:
            performed = machine.advance_onboarding()
        elif action == FormAction.COMPLETE_ONBOARDING:
            performed = machine.complete_onboarding()
        else:
            email = self._credential(FieldType.EMAIL)
            password = self._credential(FieldType.PASSWORD)
            self.is_submitting = True
            try:
                if action == FormAction.SIGN_IN:
                    performed = await machine.sign_in(email, password)
                else:
                    performed = await machine.sign_up(email, password)
            finally:
                self.is_submitting = False

        return DispatchResult(action=action, performed=performed)
