"""
Error handling utilities for the JSON form builder.
Provides user-friendly messages, recovery options and error analytics logging.
"""

import streamlit as st
import logging
import traceback
from typing import Dict, Any, Optional, Callable, List
from datetime import datetime
from pathlib import Path
import json

from .config_loader import get_config_value
from .session_manager import SessionManager

logger = logging.getLogger(__name__)


class ErrorType:
    """Error type constants."""
    SCHEMA = "schema"
    EXPORT = "export"
    SYSTEM = "system"


class ErrorHandler:
    """Error handling for the form builder panels."""

    @staticmethod
    def handle_error(
        error: Exception,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        recovery_options: Optional[List[Dict[str, Any]]] = None,
        show_details: bool = False
    ) -> None:
        """
        Handle errors with user-friendly messages and recovery options.

        Args:
            error: The exception that occurred
            context: Context where the error occurred
            error_type: Type of error (from ErrorType constants)
            user_message: Custom user-friendly message
            recovery_options: List of recovery actions
            show_details: Whether to show technical details
        """
        logger.error(f"Error in {context}: {str(error)}", exc_info=True)

        if not user_message:
            user_message = ErrorHandler._get_user_friendly_message(error, error_type)

        ErrorHandler._display_error(
            user_message,
            error,
            context,
            recovery_options,
            show_details
        )

        ErrorHandler._log_error_analytics(error, context, error_type)

    @staticmethod
    def _get_user_friendly_message(error: Exception, error_type: str) -> str:
        """Generate user-friendly error messages based on error type."""
        error_messages = {
            ErrorType.SCHEMA: {
                json.JSONDecodeError: "📋 The schema text is not valid JSON. Please check the editor contents.",
                KeyError: "📋 A required schema key is missing. Please review the schema.",
                ValueError: "📋 The schema contains invalid values. Please review the schema.",
                "default": "📋 Schema error occurred. Please review the schema in the editor."
            },

            ErrorType.EXPORT: {
                TypeError: "📤 The submitted data could not be serialized.",
                ValueError: "📤 The submitted data could not be serialized.",
                "default": "📤 Export failed. Please try copying or downloading again."
            },

            ErrorType.SYSTEM: {
                MemoryError: "💻 System is running low on memory. Please try again.",
                ImportError: "💻 Required system component is missing. Please contact support.",
                "default": "💻 System error occurred. Please try again."
            }
        }

        error_type_messages = error_messages.get(error_type, error_messages[ErrorType.SYSTEM])

        for exception_type, message in error_type_messages.items():
            if exception_type != "default" and isinstance(error, exception_type):
                return message

        return error_type_messages.get("default", "An unexpected error occurred.")

    @staticmethod
    def _display_error(
        user_message: str,
        error: Exception,
        context: str,
        recovery_options: Optional[List[Dict[str, Any]]] = None,
        show_details: bool = False
    ) -> None:
        """Display error message to user with recovery options."""
        st.error(user_message)

        if recovery_options:
            st.subheader("🔧 Suggested Actions:")

            for i, option in enumerate(recovery_options):
                col1, col2 = st.columns([3, 1])

                with col1:
                    st.write(f"**{option['title']}**")
                    st.write(option['description'])

                with col2:
                    st.button(
                        option['button_text'],
                        key=f"recovery_{context}_{i}",
                        on_click=option.get('action')
                    )

        if show_details:
            with st.expander("🔍 Technical Details"):
                st.write(f"**Error Type:** {type(error).__name__}")
                st.write(f"**Context:** {context}")
                st.write(f"**Error Message:** {str(error)}")
                st.code(''.join(traceback.format_exception(type(error), error, error.__traceback__)))

    @staticmethod
    def _log_error_analytics(error: Exception, context: str, error_type: str) -> None:
        """Append the error to the JSON-lines analytics log, if one is configured."""
        log_path = get_config_value('logging', 'error_log_file', '')
        if not log_path:
            return

        try:
            error_data = {
                'timestamp': datetime.now().isoformat(),
                'error_type': error_type,
                'exception_type': type(error).__name__,
                'context': context,
                'message': str(error)
            }

            log_file = Path(log_path)
            log_file.parent.mkdir(parents=True, exist_ok=True)

            with open(log_file, 'a', encoding='utf-8') as f:
                json.dump(error_data, f)
                f.write('\n')

        except OSError as e:
            logger.error(f"Failed to log error analytics: {e}")

    @staticmethod
    def with_error_handling(
        func: Callable,
        context: str,
        error_type: str = ErrorType.SYSTEM,
        user_message: Optional[str] = None,
        recovery_options: Optional[List[Dict[str, Any]]] = None,
        show_details: bool = False,
        default_return: Any = None
    ) -> Any:
        """
        Run an operation, containing any failure to the calling panel.

        Args:
            func: Function to execute
            context: Context description
            error_type: Type of error expected
            user_message: Custom user message
            recovery_options: Recovery actions
            show_details: Show technical details
            default_return: Value to return on error

        Returns:
            Function result or default_return on error
        """
        try:
            return func()
        except Exception as e:
            ErrorHandler.handle_error(
                e, context, error_type, user_message, recovery_options, show_details
            )
            return default_return

    @staticmethod
    def create_recovery_options(context: str) -> List[Dict[str, Any]]:
        """Create context-specific recovery options."""
        recovery_options: List[Dict[str, Any]] = []

        if "form" in context.lower():
            recovery_options.append({
                'title': 'Reset Form',
                'description': 'Clear all entered values and field errors',
                'button_text': '🔄 Reset Form',
                'action': SessionManager.reset_form_state
            })

        if "submission" in context.lower():
            recovery_options.append({
                'title': 'Close Submission',
                'description': 'Dismiss the submitted data and keep editing the form',
                'button_text': '✖️ Close',
                'action': SessionManager.clear_submission
            })

        recovery_options.append({
            'title': 'Restart Session',
            'description': 'Clear all session data and start fresh',
            'button_text': '🔄 Restart',
            'action': SessionManager.reset_session
        })

        return recovery_options

