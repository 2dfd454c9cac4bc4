"""
App state machine.
"""

from .app_state_machine import AppStateMachine, SessionObserver, error_kind_for

__all__ = ["AppStateMachine", "SessionObserver", "error_kind_for"]
