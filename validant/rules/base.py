"""Helpers shared by the leaf rules."""

import json
import math
from decimal import Decimal
from numbers import Real
from typing import Any

from validant.types import Violation

VALUE_PLACEHOLDER = ":value"


def stringify_value(value: Any) -> str:
    """Render a value for use inside an error message.

    Examples:
        >>> stringify_value(None)
        'None'
        >>> stringify_value("abc")
        'abc'
        >>> stringify_value({"a": 1})
        '{"a": 1}'
    """
    if value is None:
        return "None"
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, default=str)
        except (TypeError, ValueError):
            return repr(value)
    return str(value)


def format_message(template: str, value: Any) -> str:
    """Replace the ':value' placeholder of a message template with the value."""
    if VALUE_PLACEHOLDER not in template:
        return template
    return template.replace(VALUE_PLACEHOLDER, stringify_value(value))


def violation(rule_name: str, value: Any, message: str) -> Violation:
    """Build a Violation, expanding the ':value' placeholder."""
    return Violation(
        rule_name=rule_name,
        attempted_value=value,
        error_message=format_message(message, value),
    )


def is_real_number(value: Any) -> bool:
    """True for int, float and Decimal-like numbers; False for bool."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (Real, Decimal))


def is_nan(value: Any) -> bool:
    """True for float and Decimal NaN."""
    if isinstance(value, Decimal):
        return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


__all__ = [
    "VALUE_PLACEHOLDER",
    "stringify_value",
    "format_message",
    "violation",
    "is_real_number",
    "is_nan",
]
