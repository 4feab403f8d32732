"""Numeric bound and sum rules."""

import logging
from typing import Any, Optional

from validant.engine import get_field_value, is_array
from validant.rules.base import is_nan, is_real_number, violation
from validant.types import Rule, Violation

logger = logging.getLogger(__name__)


def _require_number(rule_name: str, value: Any) -> None:
    if not is_real_number(value):
        raise TypeError(
            f"{rule_name}: Value is not a number. The value was: {value!r} "
            f"(type: '{type(value).__name__}')"
        )


def min_number(minimum: float, error_message: Optional[str] = None) -> Rule:
    """Rule: the value must be greater than or equal to minimum.

    A non-numeric value means the rule was attached to the wrong field, so
    the rule raises TypeError instead of reporting a violation.

    Examples:
        >>> min_number(10)(3, {})
        Violation(rule_name='min_number', attempted_value=3, error_message='The minimum value for this field is 10.')
    """
    message = error_message or f"The minimum value for this field is {minimum}."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        _require_number("min_number", value)
        if not is_nan(value) and value >= minimum:
            return None
        return violation("min_number", value, message)

    return rule


def max_number(maximum: float, error_message: Optional[str] = None) -> Rule:
    """Rule: the value must be less than or equal to maximum (TypeError on non-numbers)."""
    message = error_message or f"The maximum value for this field is {maximum}."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        _require_number("max_number", value)
        if not is_nan(value) and value <= maximum:
            return None
        return violation("max_number", value, message)

    return rule


def _sum_of(rule_name: str, items: Any, field_name: str) -> Optional[float]:
    if not is_array(items):
        logger.warning("%s: value is not a list, got %s", rule_name, type(items).__name__)
        return None
    total = 0
    for item in items:
        amount = get_field_value(item, field_name)
        if not is_real_number(amount) or is_nan(amount):
            logger.warning("%s: skipping non-numeric %r value %r", rule_name, field_name, amount)
            continue
        total += amount
    return total


def min_sum_of(field_name: str, minimum: float, error_message: Optional[str] = None) -> Rule:
    """Rule: the sum of field_name over a list of records must be at least minimum.

    Non-numeric entries are skipped with a warning. A value that is not a
    list is reported as a violation.

    Examples:
        >>> rule = min_sum_of("qty", 5)
        >>> rule([{"qty": 2}, {"qty": 3}], {}) is None
        True
        >>> rule([{"qty": 2}], {}).error_message
        'The minimum sum of qty is 5.'
    """
    message = error_message or f"The minimum sum of {field_name} is {minimum}."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        total = _sum_of("min_sum_of", value, field_name)
        if total is not None and total >= minimum:
            return None
        return violation("min_sum_of", value, message)

    return rule


def max_sum_of(field_name: str, maximum: float, error_message: Optional[str] = None) -> Rule:
    """Rule: the sum of field_name over a list of records must be at most maximum."""
    message = error_message or f"The maximum sum of {field_name} is {maximum}."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        total = _sum_of("max_sum_of", value, field_name)
        if total is not None and total <= maximum:
            return None
        return violation("max_sum_of", value, message)

    return rule


__all__ = [
    "min_number",
    "max_number",
    "min_sum_of",
    "max_sum_of",
]
