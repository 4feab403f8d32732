"""Built-in leaf rules.

Each rule is a factory: call it with its parameters (and optionally an
error_message) to get a rule function taking (value, root) and returning a
Violation or None.

Example:
    >>> from validant.rules import required, min_number
    >>> rule_tree = {"name": [required()], "age": [min_number(18)]}
"""

from validant.rules.arrays import array_max_len, array_min_len
from validant.rules.base import format_message, stringify_value
from validant.rules.common import (
    element_of,
    equal_to_field_value,
    is_bool,
    is_date,
    is_number,
    is_string,
    required,
)
from validant.rules.dates import max_date, min_date
from validant.rules.numeric import max_number, max_sum_of, min_number, min_sum_of
from validant.rules.schema import matches_schema
from validant.rules.strings import (
    alphabet_only,
    email_address,
    regular_expression,
    string_max_len,
    string_min_len,
)

__all__ = [
    # Presence, type and membership
    "required",
    "is_string",
    "is_number",
    "is_bool",
    "is_date",
    "element_of",
    "equal_to_field_value",
    # Numbers
    "min_number",
    "max_number",
    "min_sum_of",
    "max_sum_of",
    # Strings
    "string_min_len",
    "string_max_len",
    "regular_expression",
    "email_address",
    "alphabet_only",
    # Arrays
    "array_min_len",
    "array_max_len",
    # Dates
    "min_date",
    "max_date",
    # JSON Schema
    "matches_schema",
    # Message helpers
    "stringify_value",
    "format_message",
]
