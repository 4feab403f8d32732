"""String length and pattern rules."""

import re
from typing import Any, Optional, Union

from validant.rules.base import violation
from validant.types import Rule, Violation

EMAIL_PATTERN = re.compile(
    r"^(([^<>()\[\]\\.,;:\s@\"]+(\.[^<>()\[\]\\.,;:\s@\"]+)*)|(\".+\"))"
    r"@((\[[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\])|(([a-zA-Z\-0-9]+\.)+[a-zA-Z]{2,}))$"
)
ALPHABET_ONLY_PATTERN = re.compile(r"^[a-zA-Z ]*$")


def _require_string(rule_name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise TypeError(f"{rule_name}: Expected a string but received {type(value).__name__}.")


def string_min_len(min_length: int, error_message: Optional[str] = None) -> Rule:
    """Rule: the string must have at least min_length characters.

    Raises:
        ValueError: If min_length is negative (at factory time)
        TypeError: If the validated value is not a string (at validation time)
    """
    if min_length < 0:
        raise ValueError("string_min_len: The minimum length argument must be a non-negative number.")
    message = error_message or f"The min length allowed is {min_length} characters."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        _require_string("string_min_len", value)
        if len(value) >= min_length:
            return None
        return violation("string_min_len", value, message)

    return rule


def string_max_len(max_length: int, error_message: Optional[str] = None) -> Rule:
    """Rule: the string must have at most max_length characters."""
    if max_length < 0:
        raise ValueError("string_max_len: The maximum length argument must be a non-negative number.")
    message = error_message or f"The maximum length allowed is {max_length} characters."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        _require_string("string_max_len", value)
        if len(value) <= max_length:
            return None
        return violation("string_max_len", value, message)

    return rule


def regular_expression(
    pattern: Union[str, re.Pattern],
    error_message: Optional[str] = None,
    rule_name: str = "regular_expression",
) -> Rule:
    """Rule: the value must be a string matching pattern (re.search semantics).

    Non-string values never match. The rule_name argument lets derived
    rules such as email_address report their own name.

    Examples:
        >>> rule = regular_expression(r"^\\d+$")
        >>> rule("123", {}) is None
        True
        >>> rule("12a", {}).error_message
        "The value '12a' doesn't match with the specified regular expression."
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    message = error_message or "The value ':value' doesn't match with the specified regular expression."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        if isinstance(value, str) and compiled.search(value):
            return None
        return violation(rule_name, value, message)

    return rule


def email_address(error_message: Optional[str] = None) -> Rule:
    """Rule: the value must look like an email address."""
    return regular_expression(
        EMAIL_PATTERN,
        error_message or "Invalid email address. The valid email example: john.doe@example.com.",
        rule_name="email_address",
    )


def alphabet_only(error_message: Optional[str] = None) -> Rule:
    """Rule: the value may contain only letters A-Z, a-z and spaces."""
    return regular_expression(
        ALPHABET_ONLY_PATTERN,
        error_message
        or "This field should not contain any numbers or symbols. Accept only A-Z a-z and spaces.",
        rule_name="alphabet_only",
    )


__all__ = [
    "string_min_len",
    "string_max_len",
    "regular_expression",
    "email_address",
    "alphabet_only",
]
