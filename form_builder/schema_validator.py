"""
Schema validator for the JSON form builder.
Turns untrusted JSON text into a typed form schema or a single diagnostic.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from .schema_models import (
    FieldDescriptor,
    FieldOption,
    FieldValidation,
    Invalid,
    Valid,
    ValidatedFormSchema,
    ValidationResult,
)

logger = logging.getLogger(__name__)

# Field types whose control is backed by an options list
OPTION_FIELD_TYPES = {'select', 'radio'}

INVALID_JSON_MESSAGE = "Invalid JSON format"


def _reject_constant(name: str) -> None:
    raise ValueError(f"Non-standard JSON constant: {name}")


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_present(value: Any) -> bool:
    """Authored values that count as set: anything but null, false, 0 and "". Empty objects and arrays count."""
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value != ""
    return True


def _stringify(value: Any) -> str:
    """Render a JSON scalar the way it is spelled in JSON (1, true, null)."""
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return str(value)


def parse_json(raw_text: Any) -> Any:
    """
    Parse JSON text strictly.

    Args:
        raw_text: Text to parse

    Returns:
        Parsed JSON value

    Raises:
        ValueError: If the text is not a standard JSON document
    """
    if not isinstance(raw_text, str):
        raise ValueError(f"Expected JSON text, got {type(raw_text).__name__}")

    try:
        return json.loads(raw_text, parse_constant=_reject_constant)
    except RecursionError as e:
        raise ValueError("JSON document is nested too deeply") from e


def validate(raw_text: str) -> ValidationResult:
    """
    Validate a form schema document.

    Checks run in a fixed order and the first failing check wins, so the
    caller always gets the one most relevant message.

    Args:
        raw_text: JSON text as typed by the user

    Returns:
        Valid with the typed schema, or Invalid with a message
    """
    try:
        data = parse_json(raw_text)
    except ValueError as e:
        logger.debug(f"Schema text is not valid JSON: {e}")
        return Invalid(INVALID_JSON_MESSAGE)

    error = validate_schema_structure(data)
    if error:
        logger.debug(f"Schema rejected: {error}")
        return Invalid(error)

    try:
        schema = build_schema(data)
    except ValidationError as e:
        logger.error(f"Failed to build schema model from validated data: {e}")
        return Invalid(INVALID_JSON_MESSAGE)

    logger.debug(f"Schema accepted: '{schema.form_title}' with {len(schema.fields)} fields")
    return Valid(schema)


def validate_schema_structure(data: Any) -> Optional[str]:
    """
    Check the top-level structure and every field of a parsed schema.

    Args:
        data: Parsed JSON value

    Returns:
        Error message for the first failing check, or None if valid
    """
    if not isinstance(data, dict):
        return "Root element must be an object"

    if not _is_non_empty_string(data.get('formTitle')):
        return "Missing or invalid 'formTitle'"

    if not _is_non_empty_string(data.get('formDescription')):
        return "Missing or invalid 'formDescription'"

    fields = data.get('fields')

    # An empty list is reported before the array type check
    if isinstance(fields, list) and len(fields) == 0:
        return "Missing or invalid 'fields'"

    if not isinstance(fields, list):
        return "'fields' must be an array"

    for field in fields:
        error = validate_field_config(field)
        if error:
            return error

    return None


def validate_field_config(field: Any) -> Optional[str]:
    """
    Validate an individual field descriptor.

    Args:
        field: Field descriptor as authored

    Returns:
        Error message for the first failing rule, or None if valid
    """
    if not isinstance(field, dict) or not _is_non_empty_string(field.get('id')):
        return "Each field must have a valid 'id'"

    field_id = field['id']

    if not _is_non_empty_string(field.get('type')):
        return f"Field '{field_id}' must have a valid 'type'"

    if not _is_non_empty_string(field.get('label')):
        return f"Field '{field_id}' must have a valid 'label'"

    field_type = field['type']

    if field_type in OPTION_FIELD_TYPES:
        options = field.get('options')
        if not isinstance(options, list) or len(options) == 0:
            return f"Field '{field_id}' of type '{field_type}' must have non-empty 'options' array"

    validation = field.get('validation')
    if field_type == 'email' and _is_present(validation):
        pattern = validation.get('pattern') if isinstance(validation, dict) else None
        if not _is_non_empty_string(pattern):
            return f"Field '{field_id}' must have a valid validation pattern"

    return None


def build_schema(data: Dict[str, Any]) -> ValidatedFormSchema:
    """Build the typed schema from a structurally valid document."""
    return ValidatedFormSchema(
        formTitle=data['formTitle'],
        formDescription=data['formDescription'],
        fields=tuple(build_field(field) for field in data['fields']),
    )


def build_field(field: Dict[str, Any]) -> FieldDescriptor:
    """Normalize one authored field into a FieldDescriptor."""
    placeholder = field.get('placeholder')

    return FieldDescriptor(
        id=field['id'],
        type=field['type'],
        label=field['label'],
        required=bool(field.get('required')),
        placeholder=_stringify(placeholder) if placeholder is not None else None,
        options=tuple(build_options(field.get('options'))),
        validation=build_validation(field.get('validation')),
    )


def build_options(options: Any) -> List[FieldOption]:
    """
    Normalize authored options into value/label pairs.

    A mapping missing one of the two keys borrows the other; any other
    entry is used as both value and label.
    """
    if not isinstance(options, list):
        return []

    normalized = []
    for option in options:
        if isinstance(option, dict):
            value = option.get('value')
            label = option.get('label')
            if value is None:
                value = label
            if label is None:
                label = value
            normalized.append(FieldOption(
                value=_stringify(value) if value is not None else "",
                label=_stringify(label) if label is not None else "",
            ))
        else:
            text = _stringify(option)
            normalized.append(FieldOption(value=text, label=text))

    return normalized


def build_validation(validation: Any) -> Optional[FieldValidation]:
    """Keep the pattern rule only when it is a mapping with string entries."""
    if not isinstance(validation, dict):
        return None

    pattern = validation.get('pattern')
    message = validation.get('message')

    return FieldValidation(
        pattern=pattern if _is_non_empty_string(pattern) else None,
        message=message if _is_non_empty_string(message) else None,
    )
