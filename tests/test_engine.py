"""Unit tests for the synchronous validation engine.

Tests cover:
- Rule lists (ordering, no short-circuit, None entries)
- Nested rule trees and root propagation
- Array rule nodes (collection rules, element rules, preserved indices)
- Dynamic rule functions
- Contract errors (missing tree, non-callable rules, bad rule results)
- Single-field validation
"""

from dataclasses import dataclass
from typing import NamedTuple, Optional

import pytest

from validant.engine import (
    get_field_value,
    validate_array_field,
    validate_field,
    validate_object,
    validate_rules,
)
from validant.errors import InvalidRuleError, MissingRuleTreeError
from validant.rules import (
    array_min_len,
    equal_to_field_value,
    is_number,
    min_number,
    required,
    string_min_len,
)
from validant.types import ArrayErrors, IndexedErrors, Violation


def validate(value, rule_tree):
    return validate_object(value, value, rule_tree)


class TestRuleLists:
    """Test primitive rule-list validation."""

    def test_required_on_empty_string(self):
        """An empty name should produce a single required violation."""
        errors = validate({"name": ""}, {"name": [required()]})

        assert errors == {
            "name": [Violation("required", "", "This field is required.")]
        }

    def test_valid_value_returns_none(self):
        """A fully valid value should return None, not an empty dict."""
        assert validate({"name": "ok"}, {"name": [required()]}) is None

    def test_every_rule_runs(self):
        """Rules should not short-circuit; failures keep rule order."""
        rules = [
            string_min_len(5, "too short"),
            required(),
            lambda value, root: Violation("custom", value, "custom failed"),
        ]
        result = validate_rules("code", "abc", {}, rules)

        assert result.is_valid is False
        assert [v.rule_name for v in result.errors] == ["string_min_len", "custom"]
        assert result.errors[0].error_message == "too short"

    def test_none_entries_are_skipped(self):
        """None entries in a rule list should be ignored."""
        result = validate_rules("name", "", {}, [None, required(), None])
        assert [v.rule_name for v in result.errors] == ["required"]

    def test_empty_rule_list_is_valid(self):
        """An empty rule list should accept any value."""
        assert validate({"name": None}, {"name": []}) is None

    def test_missing_field_is_validated_as_none(self):
        """Fields are driven by the rule tree, so missing fields read as None."""
        errors = validate({}, {"name": [required()]})
        assert errors["name"][0].attempted_value is None

    def test_none_value_is_validated_as_empty_record(self):
        """A None value should still run every field's rules."""
        errors = validate_object(None, None, {"name": [required()], "age": [required()]})
        assert set(errors) == {"name", "age"}

    def test_extra_value_fields_are_ignored(self):
        """Fields without rules should not appear in the error tree."""
        assert validate({"name": "ok", "other": ""}, {"name": [required()]}) is None

    def test_skip_nodes(self):
        """None and empty mapping nodes should skip the field."""
        assert validate({"a": "", "b": ""}, {"a": None, "b": {}}) is None


class TestFieldIndependence:
    """Test that field results do not influence each other."""

    def test_same_violations_regardless_of_other_fields(self):
        """Field A's violations should not depend on field B's validity."""
        rule_tree = {"a": [required()], "b": [required()]}

        a_only = validate({"a": "", "b": "ok"}, rule_tree)
        both = validate({"a": "", "b": ""}, rule_tree)

        assert a_only["a"] == both["a"]
        assert "b" not in a_only
        assert "b" in both

    def test_idempotent(self):
        """Validating twice should yield equal error trees."""
        rule_tree = {"name": [required()], "child": {"name": [required()]}}
        value = {"name": "", "child": {"name": ""}}

        assert validate(value, rule_tree) == validate(value, rule_tree)


class TestNestedObjects:
    """Test nested rule-tree recursion."""

    def test_parent_and_child(self):
        """Nested failures should mirror the rule tree's shape."""
        rule_tree = {"name": [required()], "child": {"name": [required()]}}
        errors = validate({"name": "", "child": {"name": ""}}, rule_tree)

        assert errors["name"][0].rule_name == "required"
        assert errors["child"]["name"][0].rule_name == "required"

    def test_valid_branch_is_omitted(self):
        """A fully valid nested object should not appear in the error tree."""
        rule_tree = {"name": [required()], "child": {"name": [required()]}}
        errors = validate({"name": "", "child": {"name": "Bob"}}, rule_tree)

        assert errors == {"name": [Violation("required", "", "This field is required.")]}

    def test_deep_nesting(self):
        """Recursion should reach arbitrarily deep branches."""
        rule_tree = {"a": {"b": {"c": {"d": [required()]}}}}
        errors = validate({"a": {"b": {"c": {"d": ""}}}}, rule_tree)

        assert list(errors["a"]["b"]["c"]) == ["d"]

    def test_missing_nested_object(self):
        """A missing nested object should validate its fields as None."""
        errors = validate({}, {"child": {"name": [required()]}})
        assert errors["child"]["name"][0].attempted_value is None

    def test_nested_rules_receive_root(self):
        """Rules deep in the tree should receive the top-level root."""
        seen = []

        def capture(value, root):
            seen.append(root)
            return None

        value = {"child": {"name": "x"}}
        validate(value, {"child": {"name": [capture]}})

        assert seen == [value]

    def test_cross_field_rule_uses_root(self):
        """equal_to_field_value should compare against the root object."""
        rule_tree = {
            "password": [required()],
            "confirm": [equal_to_field_value("password")],
        }
        assert validate({"password": "s3cret", "confirm": "s3cret"}, rule_tree) is None
        errors = validate({"password": "s3cret", "confirm": "other"}, rule_tree)
        assert errors["confirm"][0].rule_name == "equal_to_field_value"

    def test_attribute_objects(self):
        """Objects exposing fields as attributes should be validated too."""
        @dataclass
        class Customer:
            name: str
            age: Optional[int] = None

        errors = validate(Customer(name=""), {"name": [required()], "age": [required()]})
        assert set(errors) == {"name", "age"}


class TestArrayFields:
    """Test array rule nodes."""

    def test_collection_rule_only(self):
        """An empty list should only produce collection errors."""
        rule_tree = {
            "order_items": {
                "collection_rules": [array_min_len(1, "Please add at least one order item.")]
            }
        }
        errors = validate({"order_items": []}, rule_tree)

        array_errors = errors["order_items"]
        assert isinstance(array_errors, ArrayErrors)
        assert [v.error_message for v in array_errors.collection_errors] == [
            "Please add at least one order item."
        ]
        assert array_errors.element_errors is None

    def test_element_errors_per_index(self):
        """Only failing elements should be reported, each with its sub-errors."""
        rule_tree = {
            "items": {
                "element_rule": {
                    "product_id": [required()],
                    "quantity": [min_number(1)],
                }
            }
        }
        items = [
            {"product_id": "", "quantity": 0},
            {"product_id": "p-2", "quantity": 0},
            {"product_id": "p-3", "quantity": 3},
        ]
        errors = validate({"items": items}, rule_tree)

        element_errors = errors["items"].element_errors
        assert [e.index for e in element_errors] == [0, 1]
        assert set(element_errors[0].errors) == {"product_id", "quantity"}
        assert set(element_errors[1].errors) == {"quantity"}
        assert element_errors[1].validated_value is items[1]
        assert errors["items"].collection_errors is None

    def test_indices_are_not_compacted(self):
        """Failing indices 0, 2, 4 should be reported exactly."""
        rule_tree = {"values": {"element_rule": [is_number()]}}
        errors = validate({"values": ["a", 1, "b", 2, "c"]}, rule_tree)

        assert [e.index for e in errors["values"].element_errors] == [0, 2, 4]

    def test_primitive_element_rule(self):
        """A rule-list element rule should record violation lists per element."""
        rule_tree = {"tags": {"element_rule": [required()]}}
        errors = validate({"tags": ["a", ""]}, rule_tree)

        assert errors["tags"].element_errors == [
            IndexedErrors(
                index=1,
                errors=[Violation("required", "", "This field is required.")],
                validated_value="",
            )
        ]

    def test_collection_and_element_errors_together(self):
        """Both kinds of errors should be reported side by side."""
        rule_tree = {
            "tags": {
                "collection_rules": [array_min_len(3)],
                "element_rule": [required()],
            }
        }
        errors = validate({"tags": ["", "b"]}, rule_tree)

        assert errors["tags"].collection_errors[0].rule_name == "array_min_len"
        assert errors["tags"].element_errors[0].index == 0

    def test_non_list_skips_element_rule(self):
        """Element validation should be skipped silently for non-lists."""
        rule_tree = {"tags": {"element_rule": [required()]}}
        assert validate({"tags": "not a list"}, rule_tree) is None
        assert validate({"tags": None}, rule_tree) is None

    def test_collection_rules_see_non_lists(self):
        """Collection rules should decide how to treat non-list values."""
        rule_tree = {"tags": {"collection_rules": [array_min_len(1)]}}
        errors = validate({"tags": None}, rule_tree)

        assert errors["tags"].collection_errors[0].attempted_value is None

    def test_valid_array_is_omitted(self):
        """A valid array field should not appear in the error tree."""
        rule_tree = {
            "tags": {"collection_rules": [array_min_len(1)], "element_rule": [required()]}
        }
        assert validate({"tags": ["a"]}, rule_tree) is None

    def test_nested_arrays(self):
        """Element rules may themselves be array nodes."""
        rule_tree = {"matrix": {"element_rule": {"element_rule": [is_number()]}}}
        errors = validate({"matrix": [[1, 2], [3, "x"]]}, rule_tree)

        outer = errors["matrix"].element_errors
        assert [e.index for e in outer] == [1]
        inner = outer[0].errors
        assert isinstance(inner, ArrayErrors)
        assert [e.index for e in inner.element_errors] == [1]

    def test_direct_array_field_call(self):
        """validate_array_field returns None when nothing fails."""
        node = {"collection_rules": [array_min_len(1)]}
        assert validate_array_field("tags", ["a"], {}, node) is None
        assert validate_array_field("tags", [], {}, node).has_errors is True


class TestDynamicRules:
    """Test dynamic rule functions."""

    def test_dynamic_rule_list(self):
        """A function node should build rules from the field value and root."""
        def by_kind(value, root):
            if root.get("kind") == "company":
                return [required("Company number is required.")]
            return None

        rule_tree = {"kind": [required()], "number": by_kind}

        assert validate({"kind": "person", "number": ""}, rule_tree) is None
        errors = validate({"kind": "company", "number": ""}, rule_tree)
        assert errors["number"][0].error_message == "Company number is required."

    def test_dynamic_element_rule(self):
        """A per-element function should receive each element."""
        def element_rule(element, root):
            if element.get("type") == "digital":
                return {"url": [required()]}
            return {"weight": [required()]}

        rule_tree = {"items": {"element_rule": element_rule}}
        items = [{"type": "digital", "url": ""}, {"type": "physical", "weight": 2}]
        errors = validate({"items": items}, rule_tree)

        element_errors = errors["items"].element_errors
        assert [e.index for e in element_errors] == [0]
        assert list(element_errors[0].errors) == ["url"]

    def test_dynamic_nested_object_recurses_into_field(self):
        """A dynamic nested rule tree should validate the field value, not the parent."""
        rule_tree = {"child": lambda value, root: {"name": [required()]}}
        errors = validate({"name": "parent", "child": {"name": ""}}, rule_tree)

        assert errors == {"child": {"name": [Violation("required", "", "This field is required.")]}}

    def test_dynamic_array_node(self):
        """A dynamic function may return an array rule node."""
        rule_tree = {"tags": lambda value, root: {"collection_rules": [array_min_len(2)]}}
        errors = validate({"tags": ["a"]}, rule_tree)

        assert errors["tags"].collection_errors[0].rule_name == "array_min_len"

    def test_dynamic_rule_returning_invalid_node_raises(self):
        """A dynamic function returning a non-node should raise."""
        with pytest.raises(InvalidRuleError):
            validate({"name": "x"}, {"name": lambda value, root: "required"})


class TestContractErrors:
    """Test programmer errors surfaced by the engine."""

    def test_none_rule_tree_raises(self):
        """A None rule tree should raise MissingRuleTreeError."""
        with pytest.raises(MissingRuleTreeError, match="null or undefined"):
            validate({"name": "x"}, None)

    def test_non_callable_rule_raises(self):
        """A non-function rule entry should raise, never be skipped."""
        with pytest.raises(InvalidRuleError, match="not a function"):
            validate({"name": "x"}, {"name": ["not a function"]})

    def test_rule_list_must_be_list(self):
        """validate_rules should reject non-list rule collections."""
        with pytest.raises(InvalidRuleError):
            validate_rules("name", "x", {}, required())

    def test_rule_returning_wrong_type_raises(self):
        """A rule must return None or a Violation."""
        with pytest.raises(InvalidRuleError, match="returned bool"):
            validate({"name": "x"}, {"name": [lambda value, root: False]})

    def test_async_rule_in_sync_engine_raises(self):
        """Coroutine rules should be rejected by the sync engine."""
        async def unique(value, root):
            return None

        with pytest.raises(InvalidRuleError, match="async engine"):
            validate({"name": "x"}, {"name": [unique]})

    def test_rule_exceptions_propagate(self):
        """Exceptions raised by rules should abort validation."""
        with pytest.raises(TypeError, match="min_number"):
            validate({"age": "ten"}, {"age": [min_number(18)]})


class TestValidateField:
    """Test single-field validation."""

    def test_valid_field(self):
        """A passing field should be valid with no errors."""
        result = validate_field({"name": "Alice"}, "name", [required()])

        assert result.is_valid is True
        assert result.field_name == "name"
        assert result.errors is None

    def test_invalid_field(self):
        """A failing field should carry its violation list."""
        result = validate_field({"name": ""}, "name", [required()])

        assert result.is_valid is False
        assert result.errors[0].rule_name == "required"

    def test_none_rule_is_valid(self):
        """A field without rules is valid."""
        assert validate_field({"name": ""}, "name", None).is_valid is True

    def test_nested_field(self):
        """Nested field rules should return a nested error tree."""
        result = validate_field({"customer": {"name": ""}}, "customer", {"name": [required()]})

        assert result.is_valid is False
        assert result.errors == {
            "name": [Violation("required", "", "This field is required.")]
        }

    def test_root_defaults_to_value(self):
        """Cross-field rules should see the containing value as root."""
        value = {"password": "a", "confirm": "b"}
        result = validate_field(value, "confirm", [equal_to_field_value("password")])
        assert result.is_valid is False

    def test_explicit_root(self):
        """An explicit root should be passed to rules."""
        root = {"password": "b"}
        result = validate_field({"confirm": "b"}, "confirm", [equal_to_field_value("password")], root=root)
        assert result.is_valid is True


class TestGetFieldValue:
    """Test field lookup on different value kinds."""

    def test_mapping(self):
        """Mappings should be read by key."""
        assert get_field_value({"a": 1}, "a") == 1

    def test_scalars_have_no_fields(self):
        """Strings, numbers and lists should not expose fields."""
        assert get_field_value("abc", "upper") is None
        assert get_field_value(5, "real") is None
        assert get_field_value([1], "append") is None

    def test_attribute_object(self):
        """Plain objects should be read by attribute."""
        class Box:
            size = 3

        assert get_field_value(Box(), "size") == 3
        assert get_field_value(Box(), "missing") is None

    def test_named_tuple_fields(self):
        """Named tuples should expose their fields, but not tuple methods."""
        class Point(NamedTuple):
            x: int
            y: int

        point = Point(1, 2)
        assert get_field_value(point, "x") == 1
        assert get_field_value(point, "count") is None
        assert get_field_value((1, 2), "x") is None

    def test_named_tuple_validation(self):
        """Valid named tuples should pass object validation."""
        class Point(NamedTuple):
            x: int
            y: Optional[int]

        assert validate(Point(1, 2), {"x": [required()], "y": [required()]}) is None
        errors = validate(Point(1, None), {"x": [required()], "y": [required()]})
        assert list(errors) == ["y"]
