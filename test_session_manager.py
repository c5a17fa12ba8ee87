"""
Unit tests for session_manager module.
"""

import json
from unittest.mock import patch

import pytest

from form_builder.form_state import FormState, SubmissionPayload
from form_builder.schema_models import Invalid
from form_builder.session_manager import (
    COPY_FLAG,
    DOWNLOAD_FLAG,
    SCHEMA_TEXT_KEY,
    SessionManager,
)
from form_builder.ui_feedback import TransientFlag

SCHEMA_TEXT = json.dumps({
    "formTitle": "Test Form",
    "formDescription": "d",
    "fields": [{"id": "name", "type": "text", "label": "Full Name", "required": True}],
})


@pytest.fixture
def session_state():
    state = {}
    with patch('streamlit.session_state', state), \
            patch('form_builder.session_manager.get_config_value', side_effect=lambda s, k, d=None: d):
        yield state


class TestInitialize:
    """Tests for session initialization."""

    def test_initialize_with_valid_schema(self, session_state):
        SessionManager.initialize(SCHEMA_TEXT)

        assert session_state[SCHEMA_TEXT_KEY] == SCHEMA_TEXT
        assert SessionManager.get_schema().form_title == "Test Form"
        assert SessionManager.get_schema_error() is None
        assert isinstance(SessionManager.get_form_state(), FormState)
        assert SessionManager.get_form_version() == 1
        assert isinstance(session_state[COPY_FLAG], TransientFlag)
        assert isinstance(session_state[DOWNLOAD_FLAG], TransientFlag)

    def test_initialize_with_default_text(self, session_state):
        SessionManager.initialize()

        assert SessionManager.get_schema_text() == "{}"
        assert SessionManager.get_schema() is None
        assert SessionManager.get_schema_error() == "Missing or invalid 'formTitle'"
        assert SessionManager.get_form_state() is None

    def test_initialize_is_idempotent(self, session_state):
        SessionManager.initialize(SCHEMA_TEXT)
        form_state = SessionManager.get_form_state()

        SessionManager.initialize("{}")

        assert SessionManager.get_form_state() is form_state
        assert session_state[SCHEMA_TEXT_KEY] == SCHEMA_TEXT

    def test_missing_result_reads_as_invalid(self, session_state):
        assert SessionManager.get_validation_result() == Invalid("Invalid JSON format")


class TestSchemaChanges:
    """Tests for keeping form state in step with the schema."""

    def test_invalid_schema_drops_form(self, session_state):
        SessionManager.initialize(SCHEMA_TEXT)
        SessionManager.set_submission(SubmissionPayload({"name": "Jane"}))

        result = SessionManager.apply_schema_text("[]")

        assert result == Invalid("Root element must be an object")
        assert SessionManager.get_schema_error() == "Root element must be an object"
        assert SessionManager.get_form_state() is None
        assert SessionManager.get_submission() is None

    def test_same_schema_keeps_entered_values(self, session_state):
        SessionManager.initialize(SCHEMA_TEXT)
        SessionManager.get_form_state().set_value("name", "Jane")

        SessionManager.apply_schema_text(SCHEMA_TEXT + "\n")

        assert SessionManager.get_form_state().values["name"] == "Jane"
        assert SessionManager.get_form_version() == 1

    def test_changed_schema_replaces_form_state(self, session_state):
        SessionManager.initialize(SCHEMA_TEXT)
        old_state = SessionManager.get_form_state()
        old_state.set_value("name", "Jane")

        changed = SCHEMA_TEXT.replace("Full Name", "Name")
        SessionManager.apply_schema_text(changed)

        new_state = SessionManager.get_form_state()
        assert new_state is not old_state
        assert new_state.values["name"] == ""
        assert SessionManager.get_form_version() == 2

    def test_schema_recovering_from_invalid_gets_new_version(self, session_state):
        SessionManager.initialize(SCHEMA_TEXT)
        SessionManager.apply_schema_text("{")
        SessionManager.apply_schema_text(SCHEMA_TEXT)

        assert SessionManager.get_form_version() == 2
        assert SessionManager.get_form_state() is not None

    def test_reset_form_state(self, session_state):
        SessionManager.initialize(SCHEMA_TEXT)
        SessionManager.get_form_state().set_value("name", "Jane")

        SessionManager.reset_form_state()

        assert SessionManager.get_form_state().values["name"] == ""
        assert SessionManager.get_form_version() == 2


class TestSessionHelpers:
    """Tests for submission, flags and reset."""

    def test_submission_round_trip(self, session_state):
        payload = SubmissionPayload({"name": "Jane"})

        SessionManager.set_submission(payload)
        assert SessionManager.get_submission() is payload

        SessionManager.clear_submission()
        assert SessionManager.get_submission() is None

    def test_clear_submission_resets_feedback_flags(self, session_state):
        SessionManager.initialize(SCHEMA_TEXT)
        SessionManager.set_submission(SubmissionPayload({"name": "Jane"}))
        SessionManager.get_flag(COPY_FLAG).activate()
        SessionManager.get_flag(DOWNLOAD_FLAG).activate()

        SessionManager.clear_submission()

        assert SessionManager.get_flag(COPY_FLAG).is_active() is False
        assert SessionManager.get_flag(DOWNLOAD_FLAG).is_active() is False

    def test_get_flag_creates_missing_flag(self, session_state):
        flag = SessionManager.get_flag(COPY_FLAG)
        assert isinstance(flag, TransientFlag)
        assert SessionManager.get_flag(COPY_FLAG) is flag

    def test_reset_session_clears_everything(self, session_state):
        SessionManager.initialize(SCHEMA_TEXT)

        SessionManager.reset_session()

        assert session_state == {}
