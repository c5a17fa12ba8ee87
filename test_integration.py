"""
Integration tests for the JSON form builder.
Tests end-to-end workflows from schema text to exported submission.
"""

import json
from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from form_builder.field_controls import build_control_spec, field_key
from form_builder.form_generator import FormGenerator
from form_builder.schema_editor_view import SchemaEditor
from form_builder.session_manager import SCHEMA_TEXT_KEY, SessionManager
from form_builder.submission_handler import SubmissionHandler

SAMPLE_SCHEMA = Path(__file__).parent / "schemas" / "contact_form.json"

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


def defaults(section, key, default=None):
    return default


@pytest.fixture
def session_state():
    state = {}
    with patch('streamlit.session_state', state), \
            patch('form_builder.session_manager.get_config_value', side_effect=defaults), \
            patch('form_builder.submission_handler.get_config_value', side_effect=defaults):
        yield state


def edit_schema(session_state, document):
    session_state[SCHEMA_TEXT_KEY] = json.dumps(document)
    SchemaEditor._on_schema_change()


def change_field(session_state, index, value):
    """Simulate a widget change followed by its on_change callback."""
    schema = SessionManager.get_schema()
    field = schema.fields[index]
    key = field_key(field.id, index, SessionManager.get_form_version())
    session_state[key] = value
    FormGenerator._on_field_change(field, key)


def submit():
    FormGenerator._handle_submit(SessionManager.get_form_version())
    return SessionManager.get_submission()


class TestEndToEndWorkflow:
    """Test complete editor-to-export workflows."""

    def test_required_field_workflow(self, session_state):
        SessionManager.initialize()
        edit_schema(session_state, {
            "formTitle": "Test Form",
            "formDescription": "Test Description",
            "fields": [{"id": "name", "type": "text", "label": "Full Name", "required": True}],
        })

        assert submit() is None
        assert SessionManager.get_form_state().get_error("name") == "Full Name is required"

        change_field(session_state, 0, "Jane")
        payload = submit()

        assert payload.to_dict() == {"name": "Jane"}
        text, error = SubmissionHandler.prepare_export(payload, 'download')
        assert error is None
        assert json.loads(text) == {"name": "Jane"}

    @pytest.mark.parametrize("message,expected", [
        ("Please enter a valid email", "Please enter a valid email"),
        (None, "Invalid input"),
    ])
    def test_email_pattern_workflow(self, session_state, message, expected):
        validation = {"pattern": EMAIL_PATTERN}
        if message:
            validation["message"] = message

        SessionManager.initialize()
        edit_schema(session_state, {
            "formTitle": "Signup",
            "formDescription": "Join",
            "fields": [{"id": "email", "type": "email", "label": "Email", "validation": validation}],
        })

        change_field(session_state, 0, "invalid-email")
        assert SessionManager.get_form_state().get_error("email") == expected
        assert submit() is None

        change_field(session_state, 0, "jane@example.com")
        assert submit().to_dict() == {"email": "jane@example.com"}

    def test_select_offers_placeholder_plus_authored_options(self, session_state):
        SessionManager.initialize(SAMPLE_SCHEMA.read_text(encoding='utf-8'))
        schema = SessionManager.get_schema()
        topic = schema.fields[2]

        spec = build_control_spec(topic, "k")

        assert len(spec.options) == len(topic.options) + 1
        assert spec.option_values[0] == ""

    def test_schema_edit_discards_entered_values(self, session_state):
        SessionManager.initialize(SAMPLE_SCHEMA.read_text(encoding='utf-8'))
        change_field(session_state, 0, "Jane")
        old_version = SessionManager.get_form_version()

        document = json.loads(SAMPLE_SCHEMA.read_text(encoding='utf-8'))
        document["formTitle"] = "Contact Support"
        edit_schema(session_state, document)

        assert SessionManager.get_form_version() == old_version + 1
        assert SessionManager.get_form_state().values["name"] == ""

    def test_invalid_edit_removes_form(self, session_state):
        SessionManager.initialize(SAMPLE_SCHEMA.read_text(encoding='utf-8'))

        session_state[SCHEMA_TEXT_KEY] = '{"formTitle": "x",'
        SchemaEditor._on_schema_change()

        assert SessionManager.get_schema() is None
        assert SessionManager.get_schema_error() == "Invalid JSON format"
        assert SessionManager.get_form_state() is None

    def test_full_contact_form_submission(self, session_state):
        SessionManager.initialize(SAMPLE_SCHEMA.read_text(encoding='utf-8'))
        entered = ["Jane Doe", "jane@example.com", "support", "phone", "Hello there"]
        for index, value in enumerate(entered):
            change_field(session_state, index, value)

        payload = submit()

        assert payload.to_dict() == {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "topic": "support",
            "contact_method": "phone",
            "message": "Hello there",
        }
        file_name = SubmissionHandler.build_file_name(
            SessionManager.get_schema().form_title, now=datetime(2024, 5, 1, 9, 0, 0)
        )
        assert file_name == "Contact_Us_2024-05-01T09-00-00.000.json"
