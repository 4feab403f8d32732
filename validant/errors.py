"""Exceptions raised by validant for programmer and contract errors.

Validation failures are never raised: they are returned as Violations inside
the error tree. The exceptions below signal misuse of the engine itself, such
as a missing rule tree or a rule list entry that cannot be called.
"""

from typing import Any, Optional


class ValidantError(Exception):
    """Base class for all validant errors."""


class MissingRuleTreeError(ValidantError, ValueError):
    """Raised when validation is requested without a rule tree."""

    def __init__(self, message: str = "validant: validation rule is null or undefined."):
        super().__init__(message)


class InvalidRuleError(ValidantError, TypeError):
    """Raised when a rule-tree node or rule entry violates the rule contract.

    Attributes:
        field_name: Field whose rule was being processed, when known
        rule: The offending rule node, rule entry or rule return value
    """

    def __init__(self, message: str, field_name: Optional[str] = None, rule: Any = None):
        self.field_name = field_name
        self.rule = rule
        super().__init__(message)


__all__ = [
    "ValidantError",
    "MissingRuleTreeError",
    "InvalidRuleError",
]
