"""
Schema Editor View for the JSON form builder.
Provides the JSON text editor and the live schema error display.
"""

import streamlit as st
import logging
from pathlib import Path
from typing import Optional

from .config_loader import get_config_value
from .session_manager import DEFAULT_SCHEMA_TEXT, SCHEMA_TEXT_KEY, SessionManager

logger = logging.getLogger(__name__)

DEFAULT_EDITOR_HEIGHT = 500


def load_initial_schema_text(schema_path: Optional[str] = None) -> str:
    """
    Load the text shown in the editor for a fresh session.

    Args:
        schema_path: Path of a JSON file (defaults to editor.initial_schema_file)

    Returns:
        File contents, or "{}" when no file is configured or it cannot be read
    """
    if schema_path is None:
        schema_path = get_config_value('editor', 'initial_schema_file', '')

    if not schema_path:
        return DEFAULT_SCHEMA_TEXT

    path = Path(schema_path)
    if not path.exists():
        logger.warning(f"Initial schema file not found: {path}")
        return DEFAULT_SCHEMA_TEXT

    try:
        text = path.read_text(encoding='utf-8')
        logger.info(f"Loaded initial schema from {path}")
        return text
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading initial schema {path}: {e}")
        return DEFAULT_SCHEMA_TEXT


class SchemaEditor:
    """JSON schema editor panel."""

    @staticmethod
    def render() -> None:
        """Render the editor and the current schema error."""
        st.subheader("JSON Schema Editor")

        st.text_area(
            "Form schema (JSON)",
            key=SCHEMA_TEXT_KEY,
            height=int(get_config_value('ui', 'editor_height', DEFAULT_EDITOR_HEIGHT)),
            on_change=SchemaEditor._on_schema_change,
            label_visibility="collapsed"
        )

        SchemaEditor._render_validation_status()

    @staticmethod
    def _on_schema_change() -> None:
        """Validate the editor contents after every change."""
        text = st.session_state.get(SCHEMA_TEXT_KEY, "")
        result = SessionManager.apply_schema_text(text)
        logger.debug(f"[_on_schema_change] Valid: {result.is_valid}, Error: {result.error}")

    @staticmethod
    def _render_validation_status() -> None:
        error = SessionManager.get_schema_error()
        if error:
            st.error(error)
        else:
            schema = SessionManager.get_schema()
            field_count = len(schema.fields) if schema else 0
            st.caption(f"Schema is valid: {field_count} field(s)")
