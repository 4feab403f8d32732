"""JSON Schema rule.

Lets a field be checked against a JSON Schema (Draft 7) instead of a rule
list. The first relevant jsonschema error is translated into a readable
message.
"""

from typing import Any, Dict, Optional

import jsonschema
from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from validant.rules.base import violation
from validant.types import Rule, Violation


def describe_schema_error(error: jsonschema.ValidationError) -> str:
    """Translate a jsonschema ValidationError into a readable message.

    Error mapping:
        - 'required' -> "'<path>' is required but was not provided."
        - 'type' -> expected/received type names
        - 'enum' / 'const' -> allowed values
        - 'minLength' / 'maxLength' -> length bounds
        - numeric bounds -> the violated constraint
        - 'pattern' -> the pattern
        - anything else -> jsonschema's own message
    """
    path = ".".join(str(p) for p in error.path)
    where = f"'{path}'" if path else "Value"

    if error.validator == "required":
        missing = error.message.split("'")[1] if "'" in error.message else "field"
        full_path = f"{path}.{missing}" if path else missing
        return f"'{full_path}' is required but was not provided."

    if error.validator == "type":
        return f"{where} has invalid type. Expected {error.validator_value}, got {type(error.instance).__name__}."

    if error.validator in ("enum", "const"):
        return f"{where} has invalid value. Must be one of: {error.validator_value}."

    if error.validator == "minLength":
        return f"{where} is too short. Minimum length: {error.validator_value}, got: {len(error.instance)}."

    if error.validator == "maxLength":
        return f"{where} is too long. Maximum length: {error.validator_value}, got: {len(error.instance)}."

    if error.validator in ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum"):
        return f"{where} violates {error.validator} constraint: {error.validator_value}."

    if error.validator == "pattern":
        return f"{where} does not match required pattern: {error.validator_value}."

    return f"{where} failed schema validation: {error.message}"


def matches_schema(schema: Dict[str, Any], error_message: Optional[str] = None) -> Rule:
    """Rule: the value must validate against a JSON Schema.

    The schema itself is checked when the rule is built, so a malformed
    schema fails early with jsonschema.SchemaError.

    Examples:
        >>> rule = matches_schema({"type": "object", "required": ["sku"]})
        >>> rule({"sku": "A-1"}, {}) is None
        True
        >>> rule({}, {}).error_message
        "'sku' is required but was not provided."
    """
    Draft7Validator.check_schema(schema)
    validator = Draft7Validator(schema)

    def rule(value: Any, root: Any) -> Optional[Violation]:
        error = best_match(validator.iter_errors(value))
        if error is None:
            return None
        return violation("matches_schema", value, error_message or describe_schema_error(error))

    return rule


__all__ = [
    "matches_schema",
    "describe_schema_error",
]
