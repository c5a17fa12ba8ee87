"""
Per-field validation rules for rendered forms.
Rules are synthesized from a field descriptor and evaluated in a fixed order.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from .schema_models import FieldDescriptor

logger = logging.getLogger(__name__)

DEFAULT_PATTERN_MESSAGE = "Invalid input"


def is_empty_value(value: Any) -> bool:
    """Check whether a control value counts as not filled in."""
    return value is None or value == ""


@dataclass(frozen=True)
class RequiredRule:
    """Value must be non-empty."""

    label: str

    @property
    def message(self) -> str:
        return f"{self.label} is required"

    def evaluate(self, value: Any) -> Optional[str]:
        if is_empty_value(value):
            return self.message
        return None


@dataclass(frozen=True)
class PatternRule:
    """A non-empty value must contain a match for the pattern."""

    label: str
    pattern: str
    custom_message: Optional[str] = None

    @property
    def message(self) -> str:
        return self.custom_message or DEFAULT_PATTERN_MESSAGE

    def evaluate(self, value: Any) -> Optional[str]:
        if is_empty_value(value):
            return None

        try:
            regex = re.compile(self.pattern)
        except re.error as e:
            logger.warning(f"Field '{self.label}' has invalid regex pattern {self.pattern!r}: {e}")
            return f"{self.label} has an invalid validation pattern"

        if not regex.search(str(value)):
            return self.message
        return None


def build_rules(field: FieldDescriptor) -> List[Any]:
    """
    Synthesize the validation rules for a field.

    Args:
        field: Validated field descriptor

    Returns:
        Rules in evaluation order (required before pattern)
    """
    rules: List[Any] = []

    if field.required:
        rules.append(RequiredRule(label=field.label))

    if field.validation is not None and field.validation.pattern:
        rules.append(PatternRule(
            label=field.label,
            pattern=field.validation.pattern,
            custom_message=field.validation.message,
        ))

    return rules


def first_violation(rules: List[Any], value: Any) -> Optional[str]:
    """Return the message of the first failing rule, or None."""
    for rule in rules:
        message = rule.evaluate(value)
        if message:
            return message
    return None


def validate_field_value(field: FieldDescriptor, value: Any) -> Optional[str]:
    """Validate a single field value against its synthesized rules."""
    return first_violation(build_rules(field), value)
