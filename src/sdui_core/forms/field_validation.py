"""
Field-level validation for server-described form fields.

Validation patterns are authored alongside the screen documents and are
evaluated against the whole input value. A pattern that cannot be compiled
makes the field invalid instead of raising.
"""

import logging
import re
from functools import lru_cache
from typing import Dict, Iterable, Mapping, Optional, Pattern

from ..schemas.screen_schemas import FieldSpec
from ..schemas.session_schemas import ValidationResult

logger = logging.getLogger(__name__)

_SHORTHAND_CLASSES = frozenset("wWdDsS")


def normalize_pattern(pattern: str) -> str:
    """
    Escape hyphens adjacent to shorthand classes inside a character set.

    Mobile regex engines read `[\\w-.]` as "word char, hyphen or dot" while
    Python's `re` rejects it as a bad range. Everything else is left as authored.
    """
    out = []
    in_class = False
    i = 0
    n = len(pattern)

    while i < n:
        ch = pattern[i]

        if ch == "\\" and i + 1 < n:
            escaped = pattern[i + 1]
            out.append(ch + escaped)
            i += 2
            if in_class and escaped in _SHORTHAND_CLASSES and i < n and pattern[i] == "-":
                out.append("\\-")
                i += 1
            continue

        if in_class:
            if ch == "]":
                in_class = False
            elif (
                ch == "-"
                and i + 2 < n
                and pattern[i + 1] == "\\"
                and pattern[i + 2] in _SHORTHAND_CLASSES
            ):
                out.append("\\-")
                i += 1
                continue
            out.append(ch)
            i += 1
            continue

        out.append(ch)
        i += 1
        if ch == "[":
            in_class = True
            # A leading ^ and a leading ] belong to the set body
            if i < n and pattern[i] == "^":
                out.append("^")
                i += 1
            if i < n and pattern[i] == "]":
                out.append("]")
                i += 1

    return "".join(out)


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> Optional[Pattern[str]]:
    """Compile an authored pattern, or return None if it is malformed."""
    try:
        return re.compile(normalize_pattern(pattern))
    except re.error as e:
        logger.warning(f"Validation pattern {pattern!r} does not compile, field will be invalid: {e}")
        return None


def validate(value: str, spec: FieldSpec) -> ValidationResult:
    """
    Validate a single field value against its spec.

    Args:
        value: Current input value
        spec: The field's configuration

    Returns:
        ValidationResult with the field's error message when invalid
    """
    if not value:
        if spec.required:
            return ValidationResult(is_valid=False, message=spec.error_message)
        return ValidationResult(is_valid=True)

    if not spec.validation:
        return ValidationResult(is_valid=True)

    compiled = compile_pattern(spec.validation)
    is_valid = compiled is not None and compiled.fullmatch(value) is not None
    return ValidationResult(
        is_valid=is_valid,
        message=None if is_valid else spec.error_message,
    )


def validate_fields(fields: Iterable[FieldSpec], values: Mapping[str, str]) -> Dict[str, ValidationResult]:
    """Validate every field against the current values (missing -> empty)."""
    return {field.id: validate(values.get(field.id, ""), field) for field in fields}


def is_form_valid(
    fields: Iterable[FieldSpec],
    values: Mapping[str, str],
    validations: Mapping[str, bool],
) -> bool:
    """True iff every required field is non-empty and individually valid."""
    for field in fields:
        if not field.required:
            continue
        if not values.get(field.id, ""):
            return False
        if not validations.get(field.id, False):
            return False
    return True
