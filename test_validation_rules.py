"""
Unit tests for validation_rules module.
"""

import pytest

from form_builder.schema_models import FieldDescriptor, FieldValidation
from form_builder.validation_rules import (
    PatternRule,
    RequiredRule,
    build_rules,
    first_violation,
    is_empty_value,
    validate_field_value,
)

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


def email_field(message=None, required=False):
    return FieldDescriptor(
        id="email",
        type="email",
        label="Email",
        required=required,
        validation=FieldValidation(pattern=EMAIL_PATTERN, message=message),
    )


class TestRuleSynthesis:
    """Tests for building rules from descriptors."""

    def test_no_rules_for_plain_field(self):
        field = FieldDescriptor(id="note", type="text", label="Note")
        assert build_rules(field) == []

    def test_required_rule(self):
        field = FieldDescriptor(id="name", type="text", label="Full Name", required=True)
        assert build_rules(field) == [RequiredRule(label="Full Name")]

    def test_required_precedes_pattern(self):
        rules = build_rules(email_field(required=True))
        assert isinstance(rules[0], RequiredRule)
        assert isinstance(rules[1], PatternRule)

    def test_pattern_applies_regardless_of_type(self):
        field = FieldDescriptor(
            id="zip", type="text", label="ZIP",
            validation=FieldValidation(pattern=r"^\d{5}$"),
        )
        assert build_rules(field) == [PatternRule(label="ZIP", pattern=r"^\d{5}$")]

    def test_validation_without_pattern_adds_no_rule(self):
        field = FieldDescriptor(id="x", type="text", label="X", validation=FieldValidation(message="m"))
        assert build_rules(field) == []


class TestRuleEvaluation:
    """Tests for evaluating rules against values."""

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty_values(self, value):
        assert is_empty_value(value)

    @pytest.mark.parametrize("value", [" ", "a", 0, False])
    def test_non_empty_values(self, value):
        assert not is_empty_value(value)

    def test_required_message(self):
        field = FieldDescriptor(id="name", type="text", label="Full Name", required=True)
        assert validate_field_value(field, "") == "Full Name is required"
        assert validate_field_value(field, None) == "Full Name is required"
        assert validate_field_value(field, "Jane") is None

    def test_pattern_custom_message(self):
        field = email_field(message="Please enter a valid email")
        assert validate_field_value(field, "invalid-email") == "Please enter a valid email"
        assert validate_field_value(field, "a@b.com") is None

    def test_pattern_default_message(self):
        assert validate_field_value(email_field(), "invalid-email") == "Invalid input"

    def test_pattern_skipped_for_empty_optional_value(self):
        assert validate_field_value(email_field(), "") is None

    def test_required_checked_before_pattern(self):
        field = email_field(message="Bad email", required=True)
        assert validate_field_value(field, "") == "Email is required"

    def test_pattern_uses_search_semantics(self):
        rule = PatternRule(label="Code", pattern=r"\d+")
        assert rule.evaluate("abc123") is None
        assert rule.evaluate("abc") == "Invalid input"

    def test_malformed_pattern_is_a_field_error(self):
        field = FieldDescriptor(
            id="code", type="text", label="Code",
            validation=FieldValidation(pattern="([a-z"),
        )
        assert validate_field_value(field, "abc") == "Code has an invalid validation pattern"

    def test_first_violation_returns_none_without_rules(self):
        assert first_violation([], "anything") is None
