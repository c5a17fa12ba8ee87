"""
Session state management for the Streamlit JSON form builder.
Owns the schema text, the current validation result, the form state and
the submission handed to the export panel.
"""

import streamlit as st
from typing import Optional
from datetime import datetime
import logging

from .config_loader import get_config_value
from .form_state import FormState, SubmissionPayload
from .schema_models import Invalid, ValidatedFormSchema, ValidationResult
from .schema_validator import validate
from .ui_feedback import DEFAULT_FEEDBACK_SECONDS, TransientFlag

logger = logging.getLogger(__name__)

SCHEMA_TEXT_KEY = 'schema_text'
DEFAULT_SCHEMA_TEXT = "{}"

COPY_FLAG = 'copy_flag'
DOWNLOAD_FLAG = 'download_flag'


class SessionManager:
    """Manages Streamlit session state for the JSON form builder."""

    @staticmethod
    def initialize(initial_schema_text: str = DEFAULT_SCHEMA_TEXT):
        """
        Initialize all session state variables with default values.

        Calling this on every rerun is safe; existing keys are kept.

        Args:
            initial_schema_text: Editor contents for a fresh session
        """
        feedback_seconds = float(get_config_value('export', 'feedback_seconds', DEFAULT_FEEDBACK_SECONDS))

        defaults = {
            'session_id': f"session_{datetime.now().strftime('%Y%m%d_%H%M%S')}",
            'form_version': 0,
            'form_state': None,
            'submission': None,
            COPY_FLAG: TransientFlag(duration=feedback_seconds),
            DOWNLOAD_FLAG: TransientFlag(duration=feedback_seconds),
        }

        for key, default_value in defaults.items():
            if key not in st.session_state:
                st.session_state[key] = default_value

        if SCHEMA_TEXT_KEY not in st.session_state:
            st.session_state[SCHEMA_TEXT_KEY] = initial_schema_text
            SessionManager.apply_schema_text(initial_schema_text)
            logger.info(f"Session initialized: {st.session_state['session_id']}")

    @staticmethod
    def get_schema_text() -> str:
        """Get the current editor contents."""
        return st.session_state.get(SCHEMA_TEXT_KEY, DEFAULT_SCHEMA_TEXT)

    @staticmethod
    def apply_schema_text(text: str) -> ValidationResult:
        """
        Validate editor text and make the result current.

        Args:
            text: Schema JSON text

        Returns:
            The validation result
        """
        result = validate(text)
        SessionManager.set_validation_result(result)
        return result

    @staticmethod
    def get_validation_result() -> ValidationResult:
        return st.session_state.get('validation_result') or Invalid("Invalid JSON format")

    @staticmethod
    def set_validation_result(result: ValidationResult):
        """
        Store a validation result and keep the form state in step with it.

        A new schema replaces the form state wholesale; an identical schema
        keeps the values already entered; an invalid schema drops the form.
        """
        st.session_state['validation_result'] = result

        if not result.is_valid:
            if st.session_state.get('form_state') is not None:
                logger.info("Schema became invalid, dropping form state")
            st.session_state['form_state'] = None
            st.session_state['submission'] = None
            return

        current = st.session_state.get('form_state')
        if current is not None and current.schema == result.schema:
            return

        SessionManager._replace_form_state(result.schema)

    @staticmethod
    def _replace_form_state(schema: ValidatedFormSchema):
        live = bool(get_config_value('validation', 'live', True))
        version = st.session_state.get('form_version', 0) + 1

        st.session_state['form_version'] = version
        st.session_state['form_state'] = FormState(schema, live_validation=live)
        st.session_state['submission'] = None

        logger.info(f"Form state replaced for '{schema.form_title}' (version {version})")

    @staticmethod
    def get_schema() -> Optional[ValidatedFormSchema]:
        """Get the current validated schema, if any."""
        return SessionManager.get_validation_result().schema

    @staticmethod
    def get_schema_error() -> Optional[str]:
        """Get the current schema error message, if any."""
        return SessionManager.get_validation_result().error

    @staticmethod
    def get_form_version() -> int:
        return st.session_state.get('form_version', 0)

    @staticmethod
    def get_form_state() -> Optional[FormState]:
        return st.session_state.get('form_state')

    @staticmethod
    def reset_form_state():
        """Discard entered values and errors for the current schema."""
        schema = SessionManager.get_schema()
        if schema is None:
            st.session_state['form_state'] = None
            return
        SessionManager._replace_form_state(schema)

    @staticmethod
    def get_submission() -> Optional[SubmissionPayload]:
        return st.session_state.get('submission')

    @staticmethod
    def set_submission(payload: Optional[SubmissionPayload]):
        st.session_state['submission'] = payload
        if payload is not None:
            logger.info(f"Submission stored with {len(payload)} fields")

    @staticmethod
    def clear_submission():
        st.session_state['submission'] = None
        for name in (COPY_FLAG, DOWNLOAD_FLAG):
            flag = st.session_state.get(name)
            if flag is not None:
                flag.reset()

    @staticmethod
    def get_flag(name: str) -> TransientFlag:
        """Get a transient feedback flag, creating it if needed."""
        flag = st.session_state.get(name)
        if flag is None:
            flag = TransientFlag(
                duration=float(get_config_value('export', 'feedback_seconds', DEFAULT_FEEDBACK_SECONDS))
            )
            st.session_state[name] = flag
        return flag

    @staticmethod
    def reset_session():
        """Clear all session state; the next run starts from scratch."""
        for key in list(st.session_state.keys()):
            del st.session_state[key]
        logger.info("Session reset")
