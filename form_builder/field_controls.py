"""
Field control dispatch for rendered forms.
Maps a field's declared type to a Streamlit control and a value extractor.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

import streamlit as st

from .schema_models import FieldDescriptor, FieldOption

logger = logging.getLogger(__name__)

# Input types Streamlit's text_input can express natively
STREAMLIT_INPUT_TYPES = {'default', 'password'}


class ControlKind(str, Enum):
    SELECT = "select"
    RADIO = "radio"
    TEXTAREA = "textarea"
    INPUT = "input"


@dataclass(frozen=True)
class ControlSpec:
    """Render-ready description of one control."""

    kind: ControlKind
    key: str
    field_id: str
    label: str
    input_type: str
    placeholder: Optional[str] = None
    options: Tuple[FieldOption, ...] = ()

    @property
    def option_values(self) -> Tuple[str, ...]:
        return tuple(option.value for option in self.options)

    def option_label(self, value: Any) -> str:
        for option in self.options:
            if option.value == value:
                return option.label
        return "" if value is None else str(value)


@dataclass(frozen=True)
class FieldControl:
    """Strategy for one control kind: how to render it and read its value."""

    kind: ControlKind
    render: Callable[..., Any]
    extract: Callable[[Any], Any]


def field_key(field_id: str, index: int, form_version: int) -> str:
    """Widget key for a field; the form version isolates schema generations."""
    return f"field_{index}_{field_id}_v{form_version}"


def build_control_spec(field: FieldDescriptor, key: str) -> ControlSpec:
    """
    Describe the control a field renders as.

    Args:
        field: Validated field descriptor
        key: Widget key for the control

    Returns:
        ControlSpec for the field's control kind
    """
    control = get_field_control(field.type)
    options: Tuple[FieldOption, ...] = ()

    if control.kind == ControlKind.SELECT:
        placeholder_label = field.placeholder or f"Select {field.label}"
        options = (FieldOption(value="", label=placeholder_label),) + tuple(field.options)
    elif control.kind == ControlKind.RADIO:
        options = tuple(field.options)

    return ControlSpec(
        kind=control.kind,
        key=key,
        field_id=field.id,
        label=field.label,
        input_type=field.type,
        placeholder=field.placeholder,
        options=options,
    )


def _render_select(spec: ControlSpec, on_change: Optional[Callable] = None, args: Tuple = ()) -> Any:
    """Render selectbox with the placeholder choice first."""
    return st.selectbox(
        label=spec.label,
        options=list(spec.option_values),
        format_func=spec.option_label,
        key=spec.key,
        on_change=on_change,
        args=args,
    )


def _render_radio(spec: ControlSpec, on_change: Optional[Callable] = None, args: Tuple = ()) -> Any:
    """Render one exclusive radio group with nothing selected initially."""
    return st.radio(
        label=spec.label,
        options=list(spec.option_values),
        index=None,
        format_func=spec.option_label,
        key=spec.key,
        on_change=on_change,
        args=args,
    )


def _render_textarea(spec: ControlSpec, on_change: Optional[Callable] = None, args: Tuple = ()) -> str:
    """Render text area field."""
    return st.text_area(
        label=spec.label,
        key=spec.key,
        placeholder=spec.placeholder,
        on_change=on_change,
        args=args,
    )


def _render_input(spec: ControlSpec, on_change: Optional[Callable] = None, args: Tuple = ()) -> str:
    """Render single-line input; unknown input types render as plain text."""
    widget_type = spec.input_type if spec.input_type in STREAMLIT_INPUT_TYPES else 'default'

    return st.text_input(
        label=spec.label,
        key=spec.key,
        type=widget_type,
        placeholder=spec.placeholder,
        on_change=on_change,
        args=args,
    )


def _extract_text(value: Any) -> Any:
    return "" if value is None else value


FIELD_CONTROLS: Dict[str, FieldControl] = {
    'select': FieldControl(ControlKind.SELECT, _render_select, _extract_text),
    'radio': FieldControl(ControlKind.RADIO, _render_radio, _extract_text),
    'textarea': FieldControl(ControlKind.TEXTAREA, _render_textarea, _extract_text),
}

DEFAULT_CONTROL = FieldControl(ControlKind.INPUT, _render_input, _extract_text)


def get_field_control(field_type: str) -> FieldControl:
    """Look up the control strategy for a field type, falling back to text input."""
    return FIELD_CONTROLS.get(field_type, DEFAULT_CONTROL)


def render_field(
    field: FieldDescriptor,
    key: str,
    on_change: Optional[Callable] = None,
    args: Tuple = ()
) -> Any:
    """
    Render a single field and return its current value.

    Args:
        field: Validated field descriptor
        key: Widget key for the control
        on_change: Callback fired when the control value changes
        args: Positional arguments for the callback

    Returns:
        Extracted field value
    """
    control = get_field_control(field.type)
    spec = build_control_spec(field, key)

    logger.debug(f"[render_field] Field: {field.id}, Kind: {spec.kind.value}, Key: {key}")

    return control.extract(control.render(spec, on_change=on_change, args=args))


def extract_value(field: FieldDescriptor, widget_value: Any) -> Any:
    """Convert a raw widget value into the field value."""
    return get_field_control(field.type).extract(widget_value)
