"""
Unit tests for the FormInterpreter.

Tests cover:
- Field updates, validity and error display
- Button visibility and enablement
- Action resolution per screen
- Dispatching to the state machine
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from sdui_core.auth import AuthError
from sdui_core.forms import FormAction, FormInterpreter
from sdui_core.repositories.default_configuration import default_documents
from sdui_core.schemas import AppState, ButtonAction, ButtonSpec, ScreenKey, parse_screen_config


@pytest.fixture
def login_config():
    documents = dict(default_documents())
    return parse_screen_config(ScreenKey.LOGIN, documents[ScreenKey.LOGIN])


@pytest.fixture
def registration_config():
    documents = dict(default_documents())
    return parse_screen_config(ScreenKey.REGISTRATION, documents[ScreenKey.REGISTRATION])


@pytest.fixture
def login_form(login_config):
    return FormInterpreter(login_config, AppState.LOGIN)


@pytest.fixture
def machine():
    machine = MagicMock()
    machine.sign_in = AsyncMock(return_value=True)
    machine.sign_up = AsyncMock(return_value=True)
    machine.show_registration.return_value = True
    machine.skip_onboarding.return_value = True
    machine.advance_onboarding.return_value = True
    machine.complete_onboarding.return_value = True
    return machine


def fill(form, **values):
    for field_id, value in values.items():
        form.update_field(field_id, value)


class TestFieldState:
    """Live values, validity and error messages."""

    def test_new_form_is_invalid(self, login_form):
        assert login_form.value("email") == ""
        assert not login_form.is_form_valid

    def test_valid_input_makes_form_valid(self, login_form):
        fill(login_form, email="a@b.com", password="secret1")
        assert login_form.is_form_valid

    def test_update_returns_field_validity(self, login_form):
        assert login_form.update_field("email", "a@b.com") is True
        assert login_form.update_field("password", "123") is False

    def test_unknown_field_is_ignored(self, login_form):
        assert login_form.update_field("phone", "555") is False
        assert "phone" not in login_form.state.values

    def test_no_error_for_untouched_field(self, login_form):
        assert login_form.error_message("email") is None

    def test_error_for_invalid_value(self, login_form):
        fill(login_form, email="not-an-email")
        assert login_form.error_message("email") == "Correo inválido"

    def test_error_cleared_once_valid(self, login_form):
        fill(login_form, email="not-an-email")
        fill(login_form, email="a@b.com")
        assert login_form.error_message("email") is None

    def test_fields_in_display_order(self, registration_config):
        form = FormInterpreter(registration_config, AppState.REGISTRATION)
        assert [f.id for f in form.fields] == ["name", "email", "password"]


class TestButtons:
    """Visibility and enablement of buttons."""

    def test_social_buttons_hidden_when_disabled(self, login_form):
        assert [b.id for b in login_form.visible_buttons()] == ["login", "register"]

    def test_social_config_filters_providers(self, login_config):
        config = login_config.model_copy(update={"social_buttons": True})
        form = FormInterpreter(config, AppState.LOGIN)
        assert [b.id for b in form.visible_buttons()] == ["login", "google", "register"]

    def test_submit_disabled_until_valid(self, login_form, login_config):
        submit = login_config.buttons[0]
        register = login_config.buttons[3]

        assert not login_form.is_button_enabled(submit)
        assert login_form.is_button_enabled(register)

        fill(login_form, email="a@b.com", password="secret1")
        assert login_form.is_button_enabled(submit)

    def test_buttons_disabled_while_submitting(self, login_form, login_config):
        login_form.is_submitting = True
        assert not login_form.is_button_enabled(login_config.buttons[3])


class TestResolveAction:
    """Symbolic actions mapped per screen."""

    def test_register_depends_on_screen(self, login_config, registration_config):
        login = FormInterpreter(login_config, AppState.LOGIN)
        registration = FormInterpreter(registration_config, AppState.REGISTRATION)
        home = FormInterpreter(None, AppState.HOME)

        assert login.resolve_action(ButtonAction.REGISTER) == FormAction.SHOW_REGISTRATION
        assert registration.resolve_action(ButtonAction.REGISTER) == FormAction.SIGN_UP
        assert home.resolve_action(ButtonAction.REGISTER) == FormAction.IGNORED

    def test_login_on_registration_goes_back(self, login_config, registration_config):
        login = FormInterpreter(login_config, AppState.LOGIN)
        registration = FormInterpreter(registration_config, AppState.REGISTRATION)

        assert login.resolve_action(ButtonAction.LOGIN) == FormAction.SIGN_IN
        assert registration.resolve_action(ButtonAction.LOGIN) == FormAction.DISMISS_REGISTRATION

    @pytest.mark.parametrize(
        "action,expected",
        [
            ("login", FormAction.SIGN_IN),
            ("skip", FormAction.SKIP_ONBOARDING),
            ("continue", FormAction.ADVANCE_ONBOARDING),
            ("finish", FormAction.COMPLETE_ONBOARDING),
            ("forgotPassword", FormAction.FORGOT_PASSWORD),
            ("googleSignIn", FormAction.GOOGLE_SIGN_IN),
            ("appleSignIn", FormAction.APPLE_SIGN_IN),
            ("teleport", FormAction.IGNORED),
        ],
    )
    def test_static_actions(self, login_form, action, expected):
        assert login_form.resolve_action(action) == expected


class TestDispatch:
    """Performing actions against the state machine."""

    @pytest.mark.asyncio
    async def test_sign_in_with_valid_form(self, login_form, login_config, machine):
        fill(login_form, email="a@b.com", password="secret1")

        result = await login_form.dispatch(login_config.buttons[0], machine)

        assert result.performed
        assert result.action == FormAction.SIGN_IN
        machine.sign_in.assert_awaited_once_with("a@b.com", "secret1")
        assert login_form.is_submitting is False

    @pytest.mark.asyncio
    async def test_invalid_form_is_not_submitted(self, login_form, machine):
        fill(login_form, email="a@b.com", password="123")

        result = await login_form.dispatch(ButtonAction.LOGIN, machine)

        assert not result.performed
        assert result.reason == "form invalid"
        machine.sign_in.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_sign_in_keeps_values(self, login_form, machine):
        machine.sign_in.return_value = False
        fill(login_form, email="a@b.com", password="secret1")

        result = await login_form.dispatch(ButtonAction.LOGIN, machine)

        assert not result.performed
        assert login_form.value("email") == "a@b.com"
        assert login_form.value("password") == "secret1"
        assert login_form.is_form_valid

    @pytest.mark.asyncio
    async def test_submitting_flag_reset_after_error(self, login_form, machine):
        machine.sign_in.side_effect = AuthError("boom")
        fill(login_form, email="a@b.com", password="secret1")

        with pytest.raises(AuthError):
            await login_form.dispatch(ButtonAction.LOGIN, machine)

        assert login_form.is_submitting is False

    @pytest.mark.asyncio
    async def test_second_submit_while_in_flight_is_rejected(self, login_form, machine):
        release = asyncio.Event()

        async def slow_sign_in(email, password):
            await release.wait()
            return True

        machine.sign_in.side_effect = slow_sign_in
        fill(login_form, email="a@b.com", password="secret1")

        first = asyncio.create_task(login_form.dispatch(ButtonAction.LOGIN, machine))
        await asyncio.sleep(0)
        second = await login_form.dispatch(ButtonAction.LOGIN, machine)
        release.set()
        await first

        assert second.reason == "submission in progress"
        assert machine.sign_in.await_count == 1

    @pytest.mark.asyncio
    async def test_register_on_login_opens_registration(self, login_form, machine):
        result = await login_form.dispatch(ButtonAction.REGISTER, machine)

        assert result.action == FormAction.SHOW_REGISTRATION
        machine.show_registration.assert_called_once()

    @pytest.mark.asyncio
    async def test_register_on_registration_signs_up(self, registration_config, machine):
        form = FormInterpreter(registration_config, AppState.REGISTRATION)
        fill(form, name="Ana Perez", email="ana@mail.com", password="secret123")

        result = await form.dispatch(registration_config.buttons[0], machine)

        assert result.action == FormAction.SIGN_UP
        machine.sign_up.assert_awaited_once_with("ana@mail.com", "secret123")

    @pytest.mark.asyncio
    async def test_local_actions_do_not_touch_machine(self, login_form, machine):
        result = await login_form.dispatch(ButtonAction.FORGOT_PASSWORD, machine)

        assert result.reason == "local"
        assert not machine.method_calls

    @pytest.mark.asyncio
    async def test_unknown_action_is_ignored(self, login_form, machine):
        result = await login_form.dispatch("teleport", machine)

        assert result.action == FormAction.IGNORED
        assert not result.performed

    @pytest.mark.asyncio
    async def test_onboarding_buttons(self, machine):
        form = FormInterpreter(None, AppState.ONBOARDING)

        await form.dispatch(ButtonAction.SKIP, machine)
        await form.dispatch(ButtonAction.CONTINUE, machine)
        await form.dispatch(ButtonAction.FINISH, machine)

        machine.skip_onboarding.assert_called_once()
        machine.advance_onboarding.assert_called_once()
        machine.complete_onboarding.assert_called_once()


class TestWithStateMachine:
    """Dispatching against a real AppStateMachine."""

    @pytest.mark.asyncio
    async def test_continue_on_last_page_goes_to_login(self, make_machine):
        machine = make_machine()
        await machine.start()
        form = FormInterpreter(None, AppState.ONBOARDING)

        for _ in machine.screens.onboarding.pages:
            await form.dispatch(ButtonAction.CONTINUE, machine)

        assert machine.current_state == AppState.LOGIN

    @pytest.mark.asyncio
    async def test_failed_sign_in_keeps_login_and_values(self, make_machine, preferences, gateway):
        preferences.mark_onboarding_completed()
        gateway.sign_in_error = AuthError("Invalid login credentials")
        machine = make_machine()
        await machine.start()
        form = FormInterpreter(machine.current_config, AppState.LOGIN)
        fill(form, email="a@b.com", password="secret1")

        result = await form.dispatch(ButtonAction.LOGIN, machine)

        assert not result.performed
        assert machine.current_state == AppState.LOGIN
        assert form.value("email") == "a@b.com"

    @pytest.mark.asyncio
    async def test_login_button_on_registration_returns_to_login(self, make_machine, preferences, gateway):
        preferences.mark_onboarding_completed()
        machine = make_machine()
        await machine.start()
        machine.show_registration()
        form = FormInterpreter(machine.current_config, AppState.REGISTRATION)
        back = ButtonSpec(id="back", type="link", title="Login", style="plain", order=2, action="login")

        result = await form.dispatch(back, machine)

        assert result.action == FormAction.DISMISS_REGISTRATION
        assert result.performed
        assert machine.current_state == AppState.LOGIN
        assert machine.session.error is None
        assert gateway.calls == []
