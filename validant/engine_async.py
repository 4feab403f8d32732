"""Asynchronous mirror of the validation engine.

Classification, dispatch and error-tree shape are identical to
validant.engine; this module only differs where it awaits. Rules may be
plain functions or coroutine functions, and a rule list may mix both.

Independent work is started together and joined with gather_all, which
cancels the remaining work when any part raises:
- the rules of one rule list
- the fields of one rule tree
- the collection rules and the elements of one array field

Results are merged in rule-tree and index order, so the error tree equals
the one the synchronous engine builds for the same inputs.

Usage:
    >>> import asyncio
    >>> from validant.rules import required
    >>> asyncio.run(validate_object_async({"name": ""}, {"name": ""}, {"name": [required()]}))
    {'name': [Violation(rule_name='required', attempted_value='', error_message='This field is required.')]}
"""

import asyncio
import inspect
from collections.abc import Mapping
from typing import Any, Awaitable, Iterable, List, Optional, Sequence, TypeVar

from validant.classifier import (
    ResolvedRule,
    ensure_callable_rule,
    ensure_rule_list,
    resolve_rule_node_async,
)
from validant.engine import (
    accept_violation,
    assemble_error_tree,
    build_array_errors,
    build_element_errors,
    element_label,
    ensure_rule_tree,
    get_field_value,
    is_array,
)
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

T = TypeVar("T")


async def gather_all(coroutines: Iterable[Awaitable[T]]) -> List[T]:
    """Run awaitables concurrently and return their results in order.

    If one of them raises, the others are cancelled and awaited before the
    error propagates, so no rule keeps running after the call has failed.
    """
    tasks = [asyncio.ensure_future(coroutine) for coroutine in coroutines]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def _invoke_async(rule: Any, value: Any, root: Any, field_name: Optional[str]) -> Optional[Violation]:
    result = rule(value, root)
    if inspect.isawaitable(result):
        result = await result
    return accept_violation(result, rule, field_name)


async def validate_rules_async(
    field_name: Optional[str],
    value: Any,
    root: Any,
    rules: Sequence[Any],
) -> RuleListResult:
    """Run a rule list concurrently against one value.

    Every entry is checked before any rule starts, so a non-callable entry
    raises InvalidRuleError without leaving rules half-run. Violations keep
    the order of the rule list regardless of completion order.
    """
    ensure_rule_list(rules, field_name)
    runnable = []
    for position, rule in enumerate(rules):
        if rule is None:
            continue
        ensure_callable_rule(rule, field_name, position)
        runnable.append(rule)

    results = await gather_all(_invoke_async(rule, value, root, field_name) for rule in runnable)
    return RuleListResult(errors=[violation for violation in results if violation is not None])


async def _collection_errors_async(
    field_name: Optional[str],
    value: Any,
    root: Any,
    rules: Any,
) -> Optional[List[Violation]]:
    if rules is None:
        return None
    result = await validate_rules_async(field_name, value, root, rules)
    return None if result.is_valid else result.errors


async def _element_errors_async(
    field_name: Optional[str],
    value: Any,
    root: Any,
    element_rule: Any,
) -> Optional[List[IndexedErrors]]:
    if element_rule is None or not is_array(value):
        return None
    results = await gather_all(
        validate_node_async(element_label(field_name, index), element, root, element_rule)
        for index, element in enumerate(value)
    )
    return build_element_errors(value, results)


async def validate_array_field_async(
    field_name: Optional[str],
    value: Any,
    root: Any,
    node: Mapping,
) -> Optional[ArrayErrors]:
    """Async counterpart of validate_array_field.

    Collection rules and element validations run concurrently. Element
    errors are reported in ascending index order.
    """
    collection_errors, element_errors = await gather_all([
        _collection_errors_async(field_name, value, root, node.get(COLLECTION_RULES_KEY)),
        _element_errors_async(field_name, value, root, node.get(ELEMENT_RULE_KEY)),
    ])
    return build_array_errors(collection_errors, element_errors)


async def validate_node_async(field_name: Optional[str], value: Any, root: Any, node: Any) -> Optional[FieldErrors]:
    """Resolve one rule-tree node and validate a value against it."""
    resolved = await resolve_rule_node_async(node, value, root, field_name)
    return await _dispatch_async(field_name, value, root, resolved)


async def _dispatch_async(
    field_name: Optional[str],
    value: Any,
    root: Any,
    resolved: ResolvedRule,
) -> Optional[FieldErrors]:
    if resolved.kind is RuleKind.SKIP:
        return None
    if resolved.kind is RuleKind.PRIMITIVE_LIST:
        result = await validate_rules_async(field_name, value, root, resolved.node)
        return None if result.is_valid else result.errors
    if resolved.kind is RuleKind.NESTED_OBJECT:
        return await validate_object_async(value, root, resolved.node)
    return await validate_array_field_async(field_name, value, root, resolved.node)


async def validate_object_async(value: Any, root: Any, rule_tree: RuleTree) -> Optional[ErrorTree]:
    """Validate a value against a rule tree, validating fields concurrently.

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
    field_names = list(rule_tree)
    results = await gather_all(
        validate_node_async(field_name, get_field_value(value, field_name), root, rule_tree[field_name])
        for field_name in field_names
    )
    return assemble_error_tree(zip(field_names, results))


async def validate_field_async(
    value: Any,
    field_name: str,
    field_rule: Any,
    root: Any = None,
) -> FieldValidationResult:
    """Async counterpart of validate_field."""
    if field_rule is None:
        return FieldValidationResult(is_valid=True, field_name=field_name)
    if root is None:
        root = value
    errors = await validate_node_async(field_name, get_field_value(value, field_name), root, field_rule)
    return FieldValidationResult(is_valid=errors is None, field_name=field_name, errors=errors)


__all__ = [
    "gather_all",
    "validate_rules_async",
    "validate_array_field_async",
    "validate_node_async",
    "validate_object_async",
    "validate_field_async",
]
