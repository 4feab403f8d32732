"""Presence, type and membership rules.

Every factory accepts an optional error_message that replaces the rule's
default message. Messages may contain ':value', which is replaced with the
attempted value.
"""

from collections.abc import Mapping
from datetime import date
from typing import Any, Iterable, Optional

from validant.engine import get_field_value
from validant.rules.base import is_nan, is_real_number, stringify_value, violation
from validant.types import Rule, Violation


def required(error_message: Optional[str] = None) -> Rule:
    """Rule: the value must be present and non-empty.

    | Value          | Result  |
    | -------------- | ------- |
    | None           | invalid |
    | ""             | invalid |
    | "   "          | invalid |
    | [] / () / set()| invalid |
    | {}             | invalid |
    | float("nan")   | invalid |
    | 0              | valid   |
    | False          | valid   |
    | [1]            | valid   |
    | {"a": 1}       | valid   |

    Examples:
        >>> required()("", {})
        Violation(rule_name='required', attempted_value='', error_message='This field is required.')
        >>> required()(0, {}) is None
        True
    """
    message = error_message or "This field is required."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        missing = (
            value is None
            or (isinstance(value, str) and value.strip() == "")
            or (isinstance(value, (list, tuple, set, frozenset, Mapping)) and len(value) == 0)
            or is_nan(value)
        )
        if missing:
            return violation("required", value, message)
        return None

    return rule


def is_string(error_message: Optional[str] = None) -> Rule:
    """Rule: the value must be a str (empty and whitespace strings are valid)."""

    def rule(value: Any, root: Any) -> Optional[Violation]:
        if isinstance(value, str):
            return None
        message = error_message or (
            f"This field is not a valid string, type of value was: {type(value).__name__}."
        )
        return violation("is_string", value, message)

    return rule


def is_number(error_message: Optional[str] = None) -> Rule:
    """Rule: the value must be a real number; bool and NaN are rejected."""

    def rule(value: Any, root: Any) -> Optional[Violation]:
        if is_real_number(value) and not is_nan(value):
            return None
        if is_nan(value):
            message = error_message or "This field is not a valid number, type of value was: NaN."
        else:
            message = error_message or (
                f"This field is not a valid number, type of value was: {type(value).__name__}."
            )
        return violation("is_number", value, message)

    return rule


def is_bool(error_message: Optional[str] = None) -> Rule:
    """Rule: the value must be True or False."""

    def rule(value: Any, root: Any) -> Optional[Violation]:
        if isinstance(value, bool):
            return None
        message = error_message or (
            f"This field is not a valid boolean, type of value was: {type(value).__name__}."
        )
        return violation("is_bool", value, message)

    return rule


def is_date(error_message: Optional[str] = None) -> Rule:
    """Rule: the value must be a date or datetime object; strings are rejected."""

    def rule(value: Any, root: Any) -> Optional[Violation]:
        if isinstance(value, date):
            return None
        message = error_message or (
            f"This field is not a valid date, type of value was: {type(value).__name__}."
        )
        return violation("is_date", value, message)

    return rule


def element_of(options: Iterable[Any], error_message: Optional[str] = None) -> Rule:
    """Rule: the value must be one of the given options.

    Raises:
        TypeError: If options is a string or not iterable
    """
    if isinstance(options, (str, bytes)) or not isinstance(options, Iterable):
        raise TypeError(f"element_of: Expected a collection of options but received {type(options).__name__}.")
    choices = list(options)
    message = error_message or (
        f"The value ':value' is not an element of [{', '.join(stringify_value(c) for c in choices)}]."
    )

    def rule(value: Any, root: Any) -> Optional[Violation]:
        if value in choices:
            return None
        return violation("element_of", value, message)

    return rule


def equal_to_field_value(field_name: str, error_message: Optional[str] = None) -> Rule:
    """Rule: the value must equal another field of the root object.

    Examples:
        >>> rule = equal_to_field_value("password")
        >>> rule("secret", {"password": "secret"}) is None
        True
    """
    message = error_message or f"The value should be equal to the value of '{field_name}'."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        if value == get_field_value(root, field_name):
            return None
        return violation("equal_to_field_value", value, message)

    return rule


__all__ = [
    "required",
    "is_string",
    "is_number",
    "is_bool",
    "is_date",
    "element_of",
    "equal_to_field_value",
]
