"""Validator facade over the recursive validation engines.

Validator and AsyncValidator bind a rule tree once and validate many values
against it. They wrap the error tree produced by the engine in a
ValidationResult carrying a configurable summary message.

Usage:
    >>> from validant.rules import required, min_number
    >>> validator = Validator({"name": [required()], "age": [min_number(18)]})
    >>> result = validator.validate({"name": "Alice", "age": 30})
    >>> result.is_valid
    True
    >>> result.message
    'Validation successful.'
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from validant.classifier import check_rule_tree
from validant.engine import validate_field, validate_object
from validant.engine_async import validate_field_async, validate_object_async
from validant.flatten import flatten_error
from validant.types import ErrorTree, FieldValidationResult, RuleTree, error_tree_to_dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationMessage:
    """Summary messages attached to a ValidationResult.

    Attributes:
        success_message: Message used when the value is valid
        error_message: Message used when at least one field failed
    """
    success_message: str = "Validation successful."
    error_message: str = "Validation failed. Please check and fix the errors to continue."


@dataclass(frozen=True)
class ValidationResult:
    """Result of validating a value against a rule tree.

    Attributes:
        is_valid: Whether every field passed
        message: Summary message taken from the validator's ValidationMessage
        errors: The error tree, or None when the value is valid. When the
            validator was built with flatten_errors=True this is the
            flatten_error form instead
        flattened: Whether errors holds flattened errors

    Examples:
        >>> ValidationResult(is_valid=True, message="Validation successful.").to_dict()
        {'isValid': True, 'message': 'Validation successful.'}
    """
    is_valid: bool
    message: str
    errors: Optional[Dict[str, Any]] = None
    flattened: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "isValid": self.is_valid,
            "message": self.message,
        }
        if self.errors is not None:
            result["errors"] = self.errors if self.flattened else error_tree_to_dict(self.errors)
        return result


class _BaseValidator:
    def __init__(
        self,
        rule_tree: RuleTree,
        validation_message: Optional[ValidationMessage] = None,
        flatten_errors: bool = False,
    ) -> None:
        """Bind a rule tree.

        Args:
            rule_tree: Mapping of field name to rule node
            validation_message: Summary messages; defaults to ValidationMessage()
            flatten_errors: Return errors in flatten_error form instead of an error tree

        Raises:
            MissingRuleTreeError: If rule_tree is None
            InvalidRuleError: If a statically known node or rule entry is invalid
        """
        check_rule_tree(rule_tree)
        self.rule_tree = rule_tree
        self.validation_message = validation_message or ValidationMessage()
        self.flatten_errors = flatten_errors

    def _build_result(self, errors: Optional[ErrorTree]) -> ValidationResult:
        if errors is None:
            logger.debug("Validation passed for %d field(s)", len(self.rule_tree))
            return ValidationResult(is_valid=True, message=self.validation_message.success_message)
        logger.debug("Validation failed for field(s): %s", ", ".join(errors))
        return ValidationResult(
            is_valid=False,
            message=self.validation_message.error_message,
            errors=flatten_error(errors) if self.flatten_errors else errors,
            flattened=self.flatten_errors,
        )


class Validator(_BaseValidator):
    """Synchronous validator bound to one rule tree.

    Rules must be plain functions; a rule returning an awaitable raises
    InvalidRuleError. Use AsyncValidator for async rules.

    Examples:
        >>> from validant.rules import required
        >>> validator = Validator({"name": [required()]})
        >>> result = validator.validate({"name": ""})
        >>> result.is_valid
        False
        >>> result.errors["name"][0].rule_name
        'required'
    """

    def validate(self, value: Any) -> ValidationResult:
        """Validate a value against the bound rule tree; the value is the root."""
        return self._build_result(validate_object(value, value, self.rule_tree))

    def validate_field(self, value: Any, field_name: str) -> FieldValidationResult:
        """Validate only field_name of value, using the field's rule from the tree."""
        return validate_field(value, field_name, self.rule_tree.get(field_name), root=value)


class AsyncValidator(_BaseValidator):
    """Validator accepting both plain and coroutine rules.

    Examples:
        >>> import asyncio
        >>> from validant.rules import required
        >>> validator = AsyncValidator({"name": [required()]})
        >>> asyncio.run(validator.validate({"name": "Alice"})).is_valid
        True
    """

    async def validate(self, value: Any) -> ValidationResult:
        """Validate a value against the bound rule tree; the value is the root."""
        return self._build_result(await validate_object_async(value, value, self.rule_tree))

    async def validate_field(self, value: Any, field_name: str) -> FieldValidationResult:
        """Validate only field_name of value, using the field's rule from the tree."""
        return await validate_field_async(value, field_name, self.rule_tree.get(field_name), root=value)


__all__ = [
    "ValidationMessage",
    "ValidationResult",
    "Validator",
    "AsyncValidator",
]
