"""Flattened presentation of error trees.

flatten_error turns an error tree into plain dicts and lists meant for
display (for example next to form inputs). Unlike error_tree_to_dict, array
fields become a single flat list in which every entry carries an errorLevel:

- "array": a collection-rule violation of the list as a whole
- "arrayElement": the errors of one element, with its index

Example:
    >>> from validant.types import ArrayErrors, Violation
    >>> tree = {"items": ArrayErrors(collection_errors=[
    ...     Violation("array_min_len", [], "The minimum length for this field is 1.")
    ... ])}
    >>> flatten_error(tree)["items"][0]["errorLevel"]
    'array'
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from validant.types import ArrayErrors, ErrorTree, FieldErrors, IndexedErrors, Violation


class ErrorLevel(str, Enum):
    """Level of an entry in a flattened array field."""
    ARRAY = "array"
    ARRAY_ELEMENT = "arrayElement"


def _flatten_array(errors: ArrayErrors) -> List[Dict[str, Any]]:
    entries: List[Dict[str, Any]] = []
    for violation in errors.collection_errors or []:
        entries.append({
            "errorLevel": ErrorLevel.ARRAY.value,
            "errorMessage": violation.error_message,
            "ruleName": violation.rule_name,
            "attemptedValue": violation.attempted_value,
        })
    for element in errors.element_errors or []:
        entries.append(_flatten_element(element))
    return entries


def _flatten_element(element: IndexedErrors) -> Dict[str, Any]:
    return {
        "errorLevel": ErrorLevel.ARRAY_ELEMENT.value,
        "index": element.index,
        "errors": _flatten_field(element.errors),
        "attemptedValue": element.validated_value,
    }


def _flatten_field(errors: FieldErrors) -> Any:
    if isinstance(errors, ArrayErrors):
        return _flatten_array(errors)
    if isinstance(errors, dict):
        return flatten_error(errors)
    return [_flatten_violation(v) for v in errors]


def _flatten_violation(violation: Violation) -> Dict[str, Any]:
    return {
        "errorMessage": violation.error_message,
        "attemptedValue": violation.attempted_value,
        "ruleName": violation.rule_name,
    }


def flatten_error(error_tree: Optional[ErrorTree]) -> Dict[str, Any]:
    """Flatten an error tree for presentation.

    Args:
        error_tree: Error tree returned by the engine, or None

    Returns:
        A dict keyed like the error tree; {} when error_tree is None

    Examples:
        >>> flatten_error(None)
        {}
        >>> from validant.types import Violation
        >>> flatten_error({"name": [Violation("required", "", "This field is required.")]})
        {'name': [{'errorMessage': 'This field is required.', 'attemptedValue': '', 'ruleName': 'required'}]}
    """
    if not error_tree:
        return {}
    return {key: _flatten_field(value) for key, value in error_tree.items()}


__all__ = [
    "ErrorLevel",
    "flatten_error",
]
