"""Rule-kind classification for rule-tree nodes.

Every node met while walking a rule tree (a top-level field rule, a nested
rule tree entry, an array element rule) goes through this module before the
engine dispatches on it. Classification is priority ordered:

1. None                                   -> SKIP
2. callable                               -> DYNAMIC_FN (invoked, then reclassified)
3. list / tuple                           -> PRIMITIVE_LIST
4. mapping keyed only by array rule keys  -> ARRAY_NODE
5. any other non-empty mapping            -> NESTED_OBJECT

An empty mapping means "no validation" and is classified as SKIP. Anything
else is not a rule and raises InvalidRuleError.
"""

import inspect
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from validant.errors import InvalidRuleError, MissingRuleTreeError
from validant.types import (
    ARRAY_RULE_KEYS,
    COLLECTION_RULES_KEY,
    ELEMENT_RULE_KEY,
    RuleKind,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedRule:
    """A rule-tree node whose dynamic functions have been invoked.

    Attributes:
        kind: The node's classification; never DYNAMIC_FN
        node: The concrete node to dispatch on
    """
    kind: RuleKind
    node: Any


def rule_label(rule: Any) -> str:
    """Short printable name of a rule or node, for error messages."""
    name = getattr(rule, "__name__", None)
    if name:
        return name
    return repr(rule)


def classify_rule_node(node: Any, field_name: Optional[str] = None) -> RuleKind:
    """Classify a raw rule-tree node without invoking it.

    Args:
        node: The rule-tree node
        field_name: Field the node belongs to, used in error messages

    Returns:
        The node's RuleKind

    Raises:
        InvalidRuleError: If the node is not one of the recognised shapes

    Examples:
        >>> classify_rule_node([lambda value, root: None])
        <RuleKind.PRIMITIVE_LIST: 'primitive_list'>
        >>> classify_rule_node({"element_rule": {"qty": []}})
        <RuleKind.ARRAY_NODE: 'array_node'>
        >>> classify_rule_node({"qty": []})
        <RuleKind.NESTED_OBJECT: 'nested_object'>
        >>> classify_rule_node(None)
        <RuleKind.SKIP: 'skip'>
    """
    if node is None:
        return RuleKind.SKIP
    if callable(node):
        return RuleKind.DYNAMIC_FN
    if isinstance(node, (list, tuple)):
        return RuleKind.PRIMITIVE_LIST
    if isinstance(node, Mapping):
        if not node:
            return RuleKind.SKIP
        # Must run before the nested-object fallback, every array node is a mapping too
        if all(key in ARRAY_RULE_KEYS for key in node):
            return RuleKind.ARRAY_NODE
        return RuleKind.NESTED_OBJECT
    raise InvalidRuleError(
        f"{type(node).__name__} is not a valid rule.",
        field_name=field_name,
        rule=node,
    )


def _reject_awaitable(result: Any, node: Any, field_name: Optional[str]) -> None:
    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        raise InvalidRuleError(
            f"Dynamic rule '{rule_label(node)}' returned an awaitable; "
            f"use the async engine to validate with async rules.",
            field_name=field_name,
            rule=node,
        )


def resolve_rule_node(
    node: Any,
    value: Any,
    root: Any,
    field_name: Optional[str] = None,
) -> ResolvedRule:
    """Classify a node, invoking dynamic rule functions until a concrete node remains.

    Args:
        node: The raw rule-tree node
        value: Current field (or element) value passed to dynamic functions
        root: The root object passed to dynamic functions
        field_name: Field the node belongs to, used in error messages

    Returns:
        ResolvedRule with a kind other than DYNAMIC_FN

    Examples:
        >>> resolved = resolve_rule_node(lambda value, root: [], "x", {})
        >>> resolved.kind
        <RuleKind.PRIMITIVE_LIST: 'primitive_list'>
    """
    kind = classify_rule_node(node, field_name)
    while kind is RuleKind.DYNAMIC_FN:
        built = node(value, root)
        _reject_awaitable(built, node, field_name)
        node = built
        kind = classify_rule_node(node, field_name)
        logger.debug("Resolved dynamic rule for %r as %s", field_name, kind.value)
    return ResolvedRule(kind=kind, node=node)


async def resolve_rule_node_async(
    node: Any,
    value: Any,
    root: Any,
    field_name: Optional[str] = None,
) -> ResolvedRule:
    """Async counterpart of resolve_rule_node; dynamic functions may be coroutines."""
    kind = classify_rule_node(node, field_name)
    while kind is RuleKind.DYNAMIC_FN:
        built = node(value, root)
        if inspect.isawaitable(built):
            built = await built
        node = built
        kind = classify_rule_node(node, field_name)
        logger.debug("Resolved dynamic rule for %r as %s", field_name, kind.value)
    return ResolvedRule(kind=kind, node=node)


def ensure_rule_list(rules: Any, field_name: Optional[str] = None) -> None:
    """Raise InvalidRuleError unless rules is a list or tuple."""
    if not isinstance(rules, (list, tuple)):
        raise InvalidRuleError(
            f"Expected a list of rules for '{field_name}' but received {type(rules).__name__}.",
            field_name=field_name,
            rule=rules,
        )


def ensure_callable_rule(rule: Any, field_name: Optional[str], position: int) -> None:
    """Raise InvalidRuleError unless a rule list entry can be invoked."""
    if not callable(rule):
        raise InvalidRuleError(
            f"Rule at position {position} of '{field_name}' is not a function "
            f"(received {type(rule).__name__}).",
            field_name=field_name,
            rule=rule,
        )


def check_rule_entries(rules: Any, field_name: Optional[str] = None) -> None:
    """Ensure rules is a rule list whose non-None entries are all callable."""
    ensure_rule_list(rules, field_name)
    for position, rule in enumerate(rules):
        if rule is not None:
            ensure_callable_rule(rule, field_name, position)


def check_rule_tree(rule_tree: Any) -> None:
    """Check the static shape of a rule tree.

    Walks every statically known node and raises the contract errors the
    engine would raise when reaching it. Dynamic rule functions are not
    invoked, so whatever they return is only checked at validation time.

    Args:
        rule_tree: The rule tree to check

    Raises:
        MissingRuleTreeError: If rule_tree is None
        InvalidRuleError: If any static node or rule entry is invalid

    Examples:
        >>> check_rule_tree({"name": [lambda value, root: None]})
        >>> check_rule_tree({"name": ["not a function"]})
        Traceback (most recent call last):
        ...
        validant.errors.InvalidRuleError: Rule at position 0 of 'name' is not a function (received str).
    """
    if rule_tree is None:
        raise MissingRuleTreeError()
    if not isinstance(rule_tree, Mapping):
        raise InvalidRuleError(
            f"{type(rule_tree).__name__} is not a valid rule tree.",
            rule=rule_tree,
        )
    for field_name, node in rule_tree.items():
        _check_node(node, field_name)


def _check_node(node: Any, field_name: str) -> None:
    kind = classify_rule_node(node, field_name)
    if kind is RuleKind.PRIMITIVE_LIST:
        check_rule_entries(node, field_name)
    elif kind is RuleKind.NESTED_OBJECT:
        for child_name, child in node.items():
            _check_node(child, child_name)
    elif kind is RuleKind.ARRAY_NODE:
        collection_rules = node.get(COLLECTION_RULES_KEY)
        if collection_rules is not None:
            check_rule_entries(collection_rules, field_name)
        element_rule = node.get(ELEMENT_RULE_KEY)
        if element_rule is not None:
            _check_node(element_rule, field_name)


__all__ = [
    "ResolvedRule",
    "classify_rule_node",
    "resolve_rule_node",
    "resolve_rule_node_async",
    "ensure_rule_list",
    "ensure_callable_rule",
    "check_rule_entries",
    "check_rule_tree",
    "rule_label",
]
