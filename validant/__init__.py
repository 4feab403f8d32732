"""validant: declarative, recursive object validation.

validant validates nested objects against a caller-authored rule tree that
mirrors the object's shape and returns an error tree holding only the
failing fields:
- Rule lists for primitive fields, run in order without short-circuiting
- Nested rule trees for object fields
- Array rule nodes with collection rules and a per-element rule
- Dynamic rule functions that build the rule node from the value at runtime
- A synchronous engine and an async mirror that runs independent work concurrently

Basic usage:
    >>> from validant import Validator
    >>> from validant.rules import required, array_min_len
    >>> validator = Validator({
    ...     "name": [required()],
    ...     "items": {"collection_rules": [array_min_len(1)]},
    ... })
    >>> result = validator.validate({"name": "Order 1", "items": []})
    >>> result.is_valid
    False
    >>> result.errors["items"].collection_errors[0].error_message
    'The minimum length for this field is 1.'
"""

__version__ = "0.1.0"
__author__ = "validant contributors"

# Version info
VERSION = (0, 1, 0)

# Core exports
from validant.classifier import check_rule_tree, classify_rule_node
from validant.engine import validate_field, validate_object
from validant.engine_async import validate_field_async, validate_object_async
from validant.errors import InvalidRuleError, MissingRuleTreeError, ValidantError
from validant.flatten import ErrorLevel, flatten_error
from validant.types import (
    ArrayErrors,
    FieldValidationResult,
    IndexedErrors,
    RuleKind,
    Violation,
    error_tree_to_dict,
)
from validant.validator import AsyncValidator, ValidationMessage, ValidationResult, Validator

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "Validator",
    "AsyncValidator",
    "ValidationMessage",
    "ValidationResult",
    "validate_object",
    "validate_object_async",
    "validate_field",
    "validate_field_async",
    "check_rule_tree",
    "classify_rule_node",
    "flatten_error",
    "error_tree_to_dict",
    "ErrorLevel",
    "RuleKind",
    "Violation",
    "IndexedErrors",
    "ArrayErrors",
    "FieldValidationResult",
    "ValidantError",
    "MissingRuleTreeError",
    "InvalidRuleError",
]
