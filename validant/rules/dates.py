"""Date bound rules.

Values and bounds may be date/datetime objects or ISO-8601 strings, which
are parsed with dateutil. A plain date compared with a datetime is treated
as midnight of that day, and a naive datetime compared with an aware one is
treated as UTC.
"""

from datetime import date, datetime, timezone
from typing import Any, Optional, Union

from dateutil import parser as date_parser

from validant.rules.base import violation
from validant.types import Rule, Violation

DateLike = Union[date, datetime, str]


def to_datetime(value: DateLike) -> datetime:
    """Normalise a date, datetime or ISO-8601 string to a datetime.

    Raises:
        ValueError: If a string cannot be parsed
        TypeError: If value is neither a date nor a string

    Examples:
        >>> to_datetime("2024-05-01")
        datetime.datetime(2024, 5, 1, 0, 0)
        >>> to_datetime(date(2024, 5, 1))
        datetime.datetime(2024, 5, 1, 0, 0)
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        return date_parser.isoparse(value)
    raise TypeError(f"Expected a date, datetime or ISO-8601 string but received {type(value).__name__}.")


def _display(bound: datetime) -> str:
    if bound.time() == datetime.min.time() and bound.tzinfo is None:
        return bound.date().isoformat()
    return bound.isoformat()


def _comparable(moment: datetime, other: datetime) -> datetime:
    if moment.tzinfo is None and other.tzinfo is not None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _parse_value(value: Any) -> Optional[datetime]:
    try:
        return to_datetime(value)
    except (TypeError, ValueError, OverflowError):
        return None


def min_date(minimum: DateLike, error_message: Optional[str] = None) -> Rule:
    """Rule: the date must not be earlier than minimum.

    None passes; values that are not dates or parseable strings are violations.

    Examples:
        >>> rule = min_date("2024-01-01")
        >>> rule("2024-06-30", {}) is None
        True
        >>> rule(date(2023, 12, 31), {}).error_message
        'The minimum date for this field is 2024-01-01.'
    """
    bound = to_datetime(minimum)
    message = error_message or f"The minimum date for this field is {_display(bound)}."
    invalid_message = error_message or "The value ':value' is not a valid date."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        if value is None:
            return None
        parsed = _parse_value(value)
        if parsed is None:
            return violation("min_date", value, invalid_message)
        if _comparable(parsed, bound) >= _comparable(bound, parsed):
            return None
        return violation("min_date", value, message)

    return rule


def max_date(maximum: DateLike, error_message: Optional[str] = None) -> Rule:
    """Rule: the date must not be later than maximum."""
    bound = to_datetime(maximum)
    message = error_message or f"The maximum date for this field is {_display(bound)}."
    invalid_message = error_message or "The value ':value' is not a valid date."

    def rule(value: Any, root: Any) -> Optional[Violation]:
        if value is None:
            return None
        parsed = _parse_value(value)
        if parsed is None:
            return violation("max_date", value, invalid_message)
        if _comparable(parsed, bound) <= _comparable(bound, parsed):
            return None
        return violation("max_date", value, message)

    return rule


__all__ = [
    "min_date",
    "max_date",
    "to_datetime",
]
