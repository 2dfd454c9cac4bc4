"""
Form validation and button action interpretation.
"""

from .field_validation import compile_pattern, is_form_valid, normalize_pattern, validate, validate_fields
from .form_interpreter import DispatchResult, FormAction, FormInputState, FormInterpreter

__all__ = [
    "compile_pattern",
    "is_form_valid",
    "normalize_pattern",
    "validate",
    "validate_fields",
    "DispatchResult",
    "FormAction",
    "FormInputState",
    "FormInterpreter",
]
