"""
Form state for a rendered schema.
Tracks field values, per-field errors and status, and gates submission.
"""

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional

from .schema_models import ValidatedFormSchema
from .validation_rules import build_rules, first_violation

logger = logging.getLogger(__name__)


class FieldStatus(str, Enum):
    """Lifecycle of a single field: pristine -> touched -> valid | invalid."""

    PRISTINE = "pristine"
    TOUCHED = "touched"
    VALID = "valid"
    INVALID = "invalid"


class SubmissionPayload(Mapping):
    """Immutable snapshot of submitted values keyed by field id."""

    def __init__(self, data: Dict[str, Any]):
        self._data = dict(data)

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"SubmissionPayload({self._data!r})"

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)


class FormState:
    """
    Values, errors and field status for one mounted form.

    A FormState belongs to exactly one schema. When the schema changes the
    state is replaced rather than migrated.
    """

    def __init__(self, schema: ValidatedFormSchema, live_validation: bool = True):
        self.schema = schema
        self.live_validation = live_validation
        self.values: Dict[str, Any] = {}
        self.errors: Dict[str, str] = {}
        self.status: Dict[str, FieldStatus] = {}
        self._rules: Dict[str, List[Any]] = {}

        for field in schema.fields:
            self.values[field.id] = ""
            self.status[field.id] = FieldStatus.PRISTINE
            # Duplicate ids share one value, so their rules are combined
            self._rules.setdefault(field.id, []).extend(build_rules(field))

        logger.debug(f"FormState created for '{schema.form_title}' with {len(self.values)} fields")

    def set_value(self, field_id: str, value: Any) -> None:
        """
        Record a value change for a field.

        Args:
            field_id: Id of the changed field
            value: New control value
        """
        if field_id not in self.values:
            logger.warning(f"Ignoring value for unknown field '{field_id}'")
            return

        self.values[field_id] = "" if value is None else value
        self.status[field_id] = FieldStatus.TOUCHED

        if self.live_validation:
            self.validate_field(field_id)

    def validate_field(self, field_id: str) -> Optional[str]:
        """Evaluate a field's rules, update its status and return its error."""
        message = first_violation(self._rules.get(field_id, []), self.values.get(field_id))

        if message:
            self.errors[field_id] = message
            self.status[field_id] = FieldStatus.INVALID
        else:
            self.errors.pop(field_id, None)
            self.status[field_id] = FieldStatus.VALID

        return message

    def validate_all(self) -> bool:
        """Touch and evaluate every field. Returns True if all are valid."""
        for field_id in self.values:
            self.validate_field(field_id)
        return not self.errors

    def is_submittable(self) -> bool:
        """Check submission readiness without touching any field."""
        for field_id, status in self.status.items():
            if status == FieldStatus.INVALID:
                return False
            if first_violation(self._rules.get(field_id, []), self.values.get(field_id)):
                return False
        return True

    def get_error(self, field_id: str) -> Optional[str]:
        return self.errors.get(field_id)

    def submit(self) -> Optional[SubmissionPayload]:
        """
        Attempt a submission.

        Returns:
            Frozen payload of all field values, or None if any rule fails
        """
        if not self.validate_all():
            logger.info(f"Submission refused: {len(self.errors)} field error(s)")
            return None

        payload = SubmissionPayload(self.values)
        logger.info(f"Submission accepted for '{self.schema.form_title}' with {len(payload)} fields")
        return payload
