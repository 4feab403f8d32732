"""Collection rules, applied to a list field as a whole."""

from typing import Any, Optional

from validant.engine import is_array
from validant.rules.base import violation
from validant.types import Rule, Violation


def array_min_len(min_length: int, error_message: Optional[str] = None) -> Rule:
    """Rule: the list must have at least min_length entries.

    None and non-list values are reported as violations, so a collection
    rule can flag a missing or wrongly typed list field.

    Examples:
        >>> array_min_len(1)([], {})
        Violation(rule_name='array_min_len', attempted_value=[], error_message='The minimum length for this field is 1.')
        >>> array_min_len(1)(None, {}).rule_name
        'array_min_len'
    """
    if min_length < 0:
        raise ValueError(
            f"array_min_len: The minimum length should be a non-negative number. Your input was: {min_length}"
        )
    message = error_message or f"The minimum length for this field is {min_length}."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        if is_array(value) and len(value) >= min_length:
            return None
        return violation("array_min_len", value, message)

    return rule


def array_max_len(max_length: int, error_message: Optional[str] = None) -> Rule:
    """Rule: the list must have at most max_length entries.

    None passes (an absent list cannot be too long). Any other non-list
    value raises TypeError.
    """
    if max_length < 0:
        raise ValueError(
            f"array_max_len: The maximum length should be a non-negative number. Your input was: {max_length}"
        )
    message = error_message or f"The maximum length for this field is {max_length}."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        if value is None:
            return None
        if not is_array(value):
            raise TypeError(f"array_max_len: Expected an array but received {type(value).__name__}.")
        if len(value) <= max_length:
            return None
        return violation("array_max_len", value, message)

    return rule


__all__ = [
    "array_min_len",
    "array_max_len",
]
