"""
Submission handling for the JSON form builder.
Serializes accepted submissions and offers them for preview, copy and download.
"""

import json
import logging
import re
from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

import streamlit as st
import streamlit.components.v1 as components

from .config_loader import get_config_value
from .session_manager import COPY_FLAG, DOWNLOAD_FLAG, SessionManager
from .ui_feedback import UserFeedback

logger = logging.getLogger(__name__)

DEFAULT_FILE_PREFIX = "form_submission"
DEFAULT_INDENT = 2


class SubmissionHandler:
    """Serialization and export of submission payloads."""

    @staticmethod
    def to_json(payload: Mapping[str, Any], indent: Optional[int] = None) -> str:
        """
        Serialize a payload as indented JSON.

        Raises:
            TypeError: If a value cannot be represented in JSON
        """
        if indent is None:
            indent = int(get_config_value('export', 'indent', DEFAULT_INDENT))
        return json.dumps(dict(payload), indent=indent, ensure_ascii=False)

    @staticmethod
    def _timestamp(now: datetime) -> str:
        return now.isoformat(timespec='milliseconds').replace(':', '-')

    @staticmethod
    def build_file_name(form_title: Optional[str] = None, now: Optional[datetime] = None) -> str:
        """
        Build the download file name for a submission.

        Args:
            form_title: Title of the submitted form
            now: Timestamp to embed (defaults to the current time)

        Returns:
            '<Title_With_Underscores>_<timestamp>.json', or
            '<prefix>_<timestamp>.json' when there is no title
        """
        now = now or datetime.now()
        timestamp = SubmissionHandler._timestamp(now)

        if form_title:
            safe_title = re.sub(r"\s+", "_", form_title)
            return f"{safe_title}_{timestamp}.json"

        prefix = get_config_value('export', 'default_file_prefix', DEFAULT_FILE_PREFIX)
        return f"{prefix}_{timestamp}.json"

    @staticmethod
    def prepare_export(payload: Optional[Mapping[str, Any]], action: str) -> Tuple[Optional[str], Optional[str]]:
        """
        Serialize a payload for copy or download.

        Args:
            payload: Submitted values
            action: 'copy' or 'download', used in the error message

        Returns:
            Tuple of (json_text, error_message); exactly one is set
        """
        if not payload:
            return None, f"No data to {action}"

        try:
            return SubmissionHandler.to_json(payload), None
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to stringify submission: {e}")
            return None, "Failed to stringify data"

    @staticmethod
    def copy_to_clipboard(text: str) -> None:
        """Ask the browser to copy text; fire-and-forget."""
        script = f"<script>navigator.clipboard.writeText({json.dumps(text)});</script>"
        components.html(script, height=0)

    @staticmethod
    def handle_copy() -> None:
        """Copy button callback."""
        payload = SessionManager.get_submission()
        text, error = SubmissionHandler.prepare_export(payload, 'copy')
        st.session_state['copy_error'] = error
        st.session_state['pending_copy'] = text

        if text is not None:
            SessionManager.get_flag(COPY_FLAG).activate()
            logger.info("Submission copied to clipboard")

    @staticmethod
    def handle_download() -> None:
        """Download button callback."""
        SessionManager.get_flag(DOWNLOAD_FLAG).activate()
        logger.info("Submission downloaded")


class SubmissionView:
    """Panel shown after a successful submission."""

    @staticmethod
    def render(form_title: Optional[str] = None) -> None:
        payload = SessionManager.get_submission()
        if payload is None:
            return

        with st.container(border=True):
            st.subheader("Submission Successful!")
            st.write("Your form has been submitted. Would you like to:")

            col_copy, col_download, col_close = st.columns(3)

            with col_copy:
                SubmissionView._render_copy_button()

            with col_download:
                SubmissionView._render_download_button(payload, form_title)

            with col_close:
                st.button("Close", key="close_submission", on_click=SessionManager.clear_submission)

            with st.expander("Preview Data"):
                st.json(payload.to_dict())

    @staticmethod
    def _render_copy_button() -> None:
        copied = SessionManager.get_flag(COPY_FLAG).is_active()
        error = st.session_state.get('copy_error')

        st.button(
            "Copied!" if copied else "Copy Data",
            key="copy_submission",
            disabled=copied,
            on_click=SubmissionHandler.handle_copy,
            width="stretch"
        )

        pending = st.session_state.pop('pending_copy', None)
        if pending is not None:
            SubmissionHandler.copy_to_clipboard(pending)

        if error:
            UserFeedback.error(error)

    @staticmethod
    def _render_download_button(payload: Mapping[str, Any], form_title: Optional[str]) -> None:
        downloaded = SessionManager.get_flag(DOWNLOAD_FLAG).is_active()
        text, error = SubmissionHandler.prepare_export(payload, 'download')

        if error:
            st.button("Download Data", key="download_submission", disabled=True, width="stretch")
            UserFeedback.error(error)
            return

        st.download_button(
            "Downloaded!" if downloaded else "Download Data",
            data=text,
            file_name=SubmissionHandler.build_file_name(form_title),
            mime="application/json",
            key="download_submission",
            disabled=downloaded,
            on_click=SubmissionHandler.handle_download,
            width="stretch"
        )
