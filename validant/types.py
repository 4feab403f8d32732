"""Core type definitions for validant.

This module defines the fundamental types used throughout the validation engine:
- RuleKind: The four rule-tree node variants (plus SKIP) produced by the classifier
- Violation: A single failed-rule record returned by leaf rules
- IndexedErrors: The errors recorded for one failing array element
- ArrayErrors: Collection-level and element-level errors of an array field
- RuleListResult / FieldValidationResult: Results of rule-list and single-field runs
- Rule, AsyncRule, RuleTree, ErrorTree: Type aliases describing the rule and error trees

Rule trees are plain dicts authored by callers. Error trees are plain dicts built
by the engine; every value in an error tree is one of:
- List[Violation] for fields validated by a rule list
- ErrorTree for nested-object fields
- ArrayErrors for fields validated by an array rule node
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from typing_extensions import Protocol, TypeAlias

COLLECTION_RULES_KEY = "collection_rules"
ELEMENT_RULE_KEY = "element_rule"

# Keys that mark a rule-tree mapping as an array rule node
ARRAY_RULE_KEYS = frozenset({COLLECTION_RULES_KEY, ELEMENT_RULE_KEY})


class RuleKind(str, Enum):
    """Rule-tree node variants.

    Every node met while walking a rule tree is classified into exactly one
    of these kinds before the engine dispatches on it.
    """
    SKIP = "skip"
    PRIMITIVE_LIST = "primitive_list"
    NESTED_OBJECT = "nested_object"
    ARRAY_NODE = "array_node"
    DYNAMIC_FN = "dynamic_fn"


@dataclass(frozen=True)
class Violation:
    """One failed rule.

    Attributes:
        rule_name: Identifier of the rule that failed (e.g., "required")
        attempted_value: The value the rule was applied to
        error_message: Human-readable description of the failure

    Examples:
        >>> v = Violation(
        ...     rule_name="required",
        ...     attempted_value="",
        ...     error_message="This field is required."
        ... )
        >>> v.rule_name
        'required'
    """
    rule_name: str
    attempted_value: Any
    error_message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "ruleName": self.rule_name,
            "attemptedValue": self.attempted_value,
            "errorMessage": self.error_message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Violation":
        """Create Violation from dict."""
        return cls(
            rule_name=data["ruleName"],
            attempted_value=data.get("attemptedValue"),
            error_message=data["errorMessage"],
        )


@dataclass(frozen=True)
class IndexedErrors:
    """Errors of a single failing array element.

    Attributes:
        index: Position of the element in the original array
        errors: Violations (rule-list element rule), a nested error tree
            (object element rule) or ArrayErrors (nested array element rule)
        validated_value: The element that was validated
    """
    index: int
    errors: Union[List[Violation], "ErrorTree", "ArrayErrors"]
    validated_value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "index": self.index,
            "errors": field_errors_to_dict(self.errors),
            "validatedValue": self.validated_value,
        }


@dataclass(frozen=True)
class ArrayErrors:
    """Errors of an array field.

    Attributes:
        collection_errors: Violations of the rules applied to the array as a whole
        element_errors: One entry per failing element, in ascending index order

    Examples:
        >>> errors = ArrayErrors(collection_errors=[
        ...     Violation("array_min_len", [], "The minimum length for this field is 1.")
        ... ])
        >>> errors.has_errors
        True
        >>> errors.element_errors is None
        True
    """
    collection_errors: Optional[List[Violation]] = None
    element_errors: Optional[List[IndexedErrors]] = None

    @property
    def has_errors(self) -> bool:
        """Whether any collection or element error was recorded."""
        return bool(self.collection_errors) or bool(self.element_errors)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {}
        if self.collection_errors:
            result["collectionErrors"] = [v.to_dict() for v in self.collection_errors]
        if self.element_errors:
            result["elementErrors"] = [e.to_dict() for e in self.element_errors]
        return result


@dataclass(frozen=True)
class RuleListResult:
    """Outcome of running one ordered rule list against one value."""
    errors: List[Violation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0


@dataclass(frozen=True)
class FieldValidationResult:
    """Outcome of validating a single field of an object.

    Attributes:
        is_valid: Whether the field passed every rule
        field_name: Name of the validated field
        errors: The field's errors, shaped like one entry of an ErrorTree
    """
    is_valid: bool
    field_name: str
    errors: Optional["FieldErrors"] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "isValid": self.is_valid,
            "fieldName": self.field_name,
        }
        if self.errors is not None:
            result["errors"] = field_errors_to_dict(self.errors)
        return result


class Rule(Protocol):
    """Synchronous rule contract: return None when valid, a Violation otherwise."""

    def __call__(self, value: Any, root: Any) -> Optional[Violation]:
        ...


AsyncRule: TypeAlias = Callable[[Any, Any], Awaitable[Optional[Violation]]]

RuleTree: TypeAlias = Dict[str, Any]
"""Mapping of field name to a rule list, nested rule tree, array rule node,
dynamic rule function, or None."""

FieldErrors: TypeAlias = Union[List[Violation], Dict[str, Any], ArrayErrors]
ErrorTree: TypeAlias = Dict[str, FieldErrors]


def field_errors_to_dict(errors: Any) -> Any:
    """Serialize one error-tree entry."""
    if isinstance(errors, ArrayErrors):
        return errors.to_dict()
    if isinstance(errors, dict):
        return error_tree_to_dict(errors)
    return [v.to_dict() for v in errors]


def error_tree_to_dict(error_tree: Optional[ErrorTree]) -> Optional[Dict[str, Any]]:
    """Convert an error tree to plain dicts and lists.

    Examples:
        >>> tree = {"name": [Violation("required", "", "This field is required.")]}
        >>> error_tree_to_dict(tree)
        {'name': [{'ruleName': 'required', 'attemptedValue': '', 'errorMessage': 'This field is required.'}]}
        >>> error_tree_to_dict(None) is None
        True
    """
    if error_tree is None:
        return None
    return {key: field_errors_to_dict(value) for key, value in error_tree.items()}


__all__ = [
    "COLLECTION_RULES_KEY",
    "ELEMENT_RULE_KEY",
    "ARRAY_RULE_KEYS",
    "RuleKind",
    "Violation",
    "IndexedErrors",
    "ArrayErrors",
    "RuleListResult",
    "FieldValidationResult",
    "Rule",
    "AsyncRule",
    "RuleTree",
    "FieldErrors",
    "ErrorTree",
    "field_errors_to_dict",
    "error_tree_to_dict",
]
