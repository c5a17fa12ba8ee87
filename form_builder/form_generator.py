"""
Dynamic form generator for the JSON form builder.
Creates Streamlit forms from validated schemas and handles submission.
"""

import streamlit as st
from typing import Dict, Any, Optional
import logging

from .error_handler import ErrorHandler, ErrorType
from .field_controls import extract_value, field_key, render_field
from .form_state import FormState, SubmissionPayload
from .schema_models import FieldDescriptor, Valid, ValidatedFormSchema
from .session_manager import SessionManager
from .submission_handler import SubmissionView
from .ui_feedback import UserFeedback

logger = logging.getLogger(__name__)

EMPTY_SCHEMA_MESSAGE = "Enter a valid JSON schema to generate a form."


class FormGenerator:
    """Generates dynamic forms based on schemas and handles form data."""

    @staticmethod
    def render_dynamic_form(schema: Optional[ValidatedFormSchema]) -> Optional[SubmissionPayload]:
        """
        Render a dynamic form for a validated schema.

        Args:
            schema: Validated schema, or None while the editor text is invalid

        Returns:
            The current submission payload, if the form has been submitted
        """
        if schema is None:
            st.info(EMPTY_SCHEMA_MESSAGE)
            return None

        form_state = SessionManager.get_form_state()
        if form_state is None or form_state.schema != schema:
            SessionManager.set_validation_result(Valid(schema))
            form_state = SessionManager.get_form_state()

        st.subheader(schema.form_title)
        st.write(schema.form_description)

        version = SessionManager.get_form_version()
        FormGenerator._render_form_fields(schema, form_state, version)

        st.button(
            "Submit",
            key=f"submit_form_v{version}",
            type="primary",
            on_click=FormGenerator._handle_submit,
            args=(version,),
            width="stretch"
        )

        submission = SessionManager.get_submission()
        if submission is not None:
            ErrorHandler.with_error_handling(
                lambda: SubmissionView.render(schema.form_title),
                "submission panel",
                ErrorType.EXPORT,
                recovery_options=ErrorHandler.create_recovery_options("submission panel")
            )
        elif form_state.errors and FormGenerator._submit_attempted(version):
            UserFeedback.error("Please fix the highlighted fields before submitting.")

        return submission

    @staticmethod
    def _render_form_fields(schema: ValidatedFormSchema, form_state: FormState, version: int) -> None:
        """Render every field followed by its current error."""
        for index, field in enumerate(schema.fields):
            key = field_key(field.id, index, version)
            render_field(
                field,
                key,
                on_change=FormGenerator._on_field_change,
                args=(field, key)
            )
            UserFeedback.field_error(form_state.get_error(field.id))

    @staticmethod
    def _on_field_change(field: FieldDescriptor, key: str) -> None:
        """Control change callback: push the widget value into the form state."""
        form_state = SessionManager.get_form_state()
        if form_state is None:
            return

        value = extract_value(field, st.session_state.get(key))
        form_state.set_value(field.id, value)
        SessionManager.clear_submission()

        logger.debug(f"[_on_field_change] Field: {field.id}, Status: {form_state.status[field.id].value}")

    @staticmethod
    def collect_current_form_data(schema: ValidatedFormSchema, version: int) -> Dict[str, Any]:
        """
        Collect current control values from session state without rendering.

        Args:
            schema: Validated schema
            version: Form version the widget keys belong to

        Returns:
            Field id -> value for every control that has been rendered
        """
        form_data = {}
        for index, field in enumerate(schema.fields):
            key = field_key(field.id, index, version)
            if key in st.session_state:
                form_data[field.id] = extract_value(field, st.session_state[key])
        return form_data

    @staticmethod
    def _submit_attempted(version: int) -> bool:
        return st.session_state.get('submit_attempted') == version

    @staticmethod
    def _handle_submit(version: int) -> None:
        """Submit button callback: validate every field and store the payload."""
        form_state = SessionManager.get_form_state()
        if form_state is None:
            return

        # Widgets hold the source of truth in case a change callback was skipped
        current_values = FormGenerator.collect_current_form_data(form_state.schema, version)
        for field_id, value in current_values.items():
            if form_state.values.get(field_id) != value:
                form_state.set_value(field_id, value)

        st.session_state['submit_attempted'] = version
        SessionManager.set_submission(form_state.submit())


def render_dynamic_form(schema: Optional[ValidatedFormSchema]) -> Optional[SubmissionPayload]:
    """Convenience function to render dynamic form."""
    return FormGenerator.render_dynamic_form(schema)
