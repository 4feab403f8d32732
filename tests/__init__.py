"""Test suite for validant.

This package contains tests for:
- Rule-node classification and static rule-tree checks
- The synchronous engine (rule lists, nesting, arrays, dynamic rules)
- The async engine (concurrency, mixed rules, sync/async equivalence)
- Built-in leaf rules
- Validator facade, error flattening and serialization
- Integration scenarios (order intake with nested arrays)
"""
