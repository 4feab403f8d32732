"""Synchronous recursive validation engine.

This module walks a value and its rule tree in lock-step and builds an error
tree that mirrors the rule tree, restricted to failing fields:

- rule lists run every rule in order against the field value and keep every
  Violation (no short-circuit)
- nested rule trees recurse into the field value
- array rule nodes apply collection rules to the whole list and the element
  rule to each entry, recording failing entries by their original index
- dynamic rule functions are invoked with (field value, root) and the node
  they return is dispatched as if it had been written in the tree

A fully valid value yields None, never an empty dict.

The effect-free helpers at the top of the module (field lookup, rule-result
checks, error assembly) are shared with validant.engine_async, which only
differs where it awaits and gathers.

Usage:
    >>> from validant.rules import required
    >>> validate_object({"name": ""}, {"name": ""}, {"name": [required()]})
    {'name': [Violation(rule_name='required', attempted_value='', error_message='This field is required.')]}
    >>> validate_object({"name": "ok"}, {"name": "ok"}, {"name": [required()]}) is None
    True
"""

import inspect
from collections.abc import Mapping
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from validant.classifier import (
    ResolvedRule,
    ensure_callable_rule,
    ensure_rule_list,
    resolve_rule_node,
    rule_label,
)
from validant.errors import InvalidRuleError, MissingRuleTreeError
from validant.types import (
    COLLECTION_RULES_KEY,
    ELEMENT_RULE_KEY,
    ArrayErrors,
    ErrorTree,
    FieldErrors,
    FieldValidationResult,
    IndexedErrors,
    RuleKind,
    RuleListResult,
    RuleTree,
    Violation,
)

# Values that never expose fields, even though they have attributes
_SCALAR_TYPES = (str, bytes, int, float, complex, bool, list, tuple, set, frozenset)


def get_field_value(value: Any, field_name: str) -> Any:
    """Read a field from a mapping, a named tuple or an attribute-bearing object.

    Missing fields read as None so rules such as required can report them.

    Examples:
        >>> get_field_value({"name": "Alice"}, "name")
        'Alice'
        >>> get_field_value({}, "name") is None
        True
    """
    if value is None:
        return None
    if isinstance(value, Mapping):
        return value.get(field_name)
    # Named tuples are records, not sequences
    if isinstance(value, tuple) and hasattr(type(value), "_fields"):
        return getattr(value, field_name, None) if field_name in type(value)._fields else None
    if isinstance(value, _SCALAR_TYPES):
        return None
    return getattr(value, field_name, None)


def is_array(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def ensure_rule_tree(rule_tree: Any) -> None:
    """Raise the contract error for a missing or non-mapping rule tree."""
    if rule_tree is None:
        raise MissingRuleTreeError()
    if not isinstance(rule_tree, Mapping):
        raise InvalidRuleError(
            f"{type(rule_tree).__name__} is not a valid rule tree.",
            rule=rule_tree,
        )


def accept_violation(result: Any, rule: Any, field_name: Optional[str]) -> Optional[Violation]:
    """Check a rule's return value against the rule contract.

    Returns:
        The Violation, or None when the rule passed

    Raises:
        InvalidRuleError: If the rule returned anything other than None or a Violation
    """
    if result is None or isinstance(result, Violation):
        return result
    raise InvalidRuleError(
        f"Rule '{rule_label(rule)}' of '{field_name}' returned {type(result).__name__}; "
        f"expected a Violation or None.",
        field_name=field_name,
        rule=rule,
    )


def element_label(field_name: Optional[str], index: int) -> str:
    return f"{field_name}[{index}]"


def build_element_errors(
    elements: Sequence[Any],
    results: Iterable[Optional[FieldErrors]],
) -> List[IndexedErrors]:
    """Pair per-element results with their index, keeping failing elements only."""
    return [
        IndexedErrors(index=index, errors=errors, validated_value=elements[index])
        for index, errors in enumerate(results)
        if errors is not None
    ]


def build_array_errors(
    collection_errors: Optional[List[Violation]],
    element_errors: Optional[List[IndexedErrors]],
) -> Optional[ArrayErrors]:
    """Build ArrayErrors, or None when neither part recorded anything."""
    if not collection_errors and not element_errors:
        return None
    return ArrayErrors(
        collection_errors=collection_errors or None,
        element_errors=element_errors or None,
    )


def assemble_error_tree(results: Iterable[Tuple[str, Optional[FieldErrors]]]) -> Optional[ErrorTree]:
    """Key failing field results by field name; None when no field failed."""
    errors: ErrorTree = {}
    for field_name, field_errors in results:
        if field_errors is not None:
            errors[field_name] = field_errors
    return errors or None


def _invoke(rule: Any, value: Any, root: Any, field_name: Optional[str]) -> Optional[Violation]:
    result = rule(value, root)
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise InvalidRuleError(
            f"Rule '{rule_label(rule)}' of '{field_name}' returned an awaitable; "
            f"use the async engine to validate with async rules.",
            field_name=field_name,
            rule=rule,
        )
    return accept_violation(result, rule, field_name)


def validate_rules(
    field_name: Optional[str],
    value: Any,
    root: Any,
    rules: Sequence[Any],
) -> RuleListResult:
    """Run an ordered rule list against one value.

    Every rule runs, even after an earlier one failed. None entries are
    skipped; any other non-callable entry raises InvalidRuleError.

    Args:
        field_name: Name of the field being validated (for error messages)
        value: The field value passed to each rule
        root: The root object passed to each rule
        rules: The ordered rule list

    Returns:
        RuleListResult whose errors keep the order of the rules that failed
    """
    ensure_rule_list(rules, field_name)
    violations: List[Violation] = []
    for position, rule in enumerate(rules):
        if rule is None:
            continue
        ensure_callable_rule(rule, field_name, position)
        violation = _invoke(rule, value, root, field_name)
        if violation is not None:
            violations.append(violation)
    return RuleListResult(errors=violations)


def validate_array_field(
    field_name: Optional[str],
    value: Any,
    root: Any,
    node: Mapping,
) -> Optional[ArrayErrors]:
    """Validate an array field against an array rule node.

    Collection rules always run against the whole value, whatever its type.
    The element rule only runs when the value is a list or tuple; for any
    other value element validation is skipped without error.

    Args:
        field_name: Name of the array field
        value: The field value
        root: The root object
        node: Mapping with optional "collection_rules" and "element_rule"

    Returns:
        ArrayErrors, or None when neither collection nor element errors exist
    """
    collection_errors = None
    collection_rules = node.get(COLLECTION_RULES_KEY)
    if collection_rules is not None:
        result = validate_rules(field_name, value, root, collection_rules)
        if not result.is_valid:
            collection_errors = result.errors

    element_errors = None
    element_rule = node.get(ELEMENT_RULE_KEY)
    if element_rule is not None and is_array(value):
        results = [
            validate_node(element_label(field_name, index), element, root, element_rule)
            for index, element in enumerate(value)
        ]
        element_errors = build_element_errors(value, results)

    return build_array_errors(collection_errors, element_errors)


def validate_node(field_name: Optional[str], value: Any, root: Any, node: Any) -> Optional[FieldErrors]:
    """Resolve one rule-tree node and validate a value against it.

    Returns:
        The field's entry for the error tree, or None when it is valid
    """
    resolved = resolve_rule_node(node, value, root, field_name)
    return _dispatch(field_name, value, root, resolved)


def _dispatch(field_name: Optional[str], value: Any, root: Any, resolved: ResolvedRule) -> Optional[FieldErrors]:
    if resolved.kind is RuleKind.SKIP:
        return None
    if resolved.kind is RuleKind.PRIMITIVE_LIST:
        result = validate_rules(field_name, value, root, resolved.node)
        return None if result.is_valid else result.errors
    if resolved.kind is RuleKind.NESTED_OBJECT:
        return validate_object(value, root, resolved.node)
    return validate_array_field(field_name, value, root, resolved.node)


def validate_object(value: Any, root: Any, rule_tree: RuleTree) -> Optional[ErrorTree]:
    """Validate a value against a rule tree.

    Iteration is driven by the rule tree's keys, so a field missing from the
    value is validated as None. A None value is validated as an empty record.

    Args:
        value: The (possibly nested) value to validate
        root: The top-level object passed to every rule
        rule_tree: Mapping of field name to rule node

    Returns:
        The error tree, or None when every field is valid

    Raises:
        MissingRuleTreeError: If rule_tree is None
        InvalidRuleError: If the rule tree contains an invalid node or rule
    """
    ensure_rule_tree(rule_tree)
    if value is None:
        value = {}
    return assemble_error_tree(
        (field_name, validate_node(field_name, get_field_value(value, field_name), root, node))
        for field_name, node in rule_tree.items()
    )


def validate_field(
    value: Any,
    field_name: str,
    field_rule: Any,
    root: Any = None,
) -> FieldValidationResult:
    """Validate a single field of a value against its rule node.

    Args:
        value: The object holding the field
        field_name: Name of the field to validate
        field_rule: The field's rule node (rule list, nested tree, array node or function)
        root: Root object passed to rules; defaults to value

    Returns:
        FieldValidationResult; errors is shaped like the field's error-tree entry

    Examples:
        >>> from validant.rules import required
        >>> validate_field({"name": "Alice"}, "name", [required()]).is_valid
        True
    """
    if field_rule is None:
        return FieldValidationResult(is_valid=True, field_name=field_name)
    if root is None:
        root = value
    errors = validate_node(field_name, get_field_value(value, field_name), root, field_rule)
    return FieldValidationResult(is_valid=errors is None, field_name=field_name, errors=errors)


__all__ = [
    "get_field_value",
    "is_array",
    "ensure_rule_tree",
    "accept_violation",
    "element_label",
    "build_element_errors",
    "build_array_errors",
    "assemble_error_tree",
    "validate_rules",
    "validate_array_field",
    "validate_node",
    "validate_object",
    "validate_field",
]
