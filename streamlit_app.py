"""
Main Streamlit application for the JSON form builder.
Type a JSON form schema on the left and use the generated form on the right.
"""

import streamlit as st
import logging

from form_builder.config_loader import get_config, get_config_value, validate_config, get_config_summary


def get_logging_level(level_str):
    """Map string logging level to logging constant."""
    level_map = {
        'DEBUG': logging.DEBUG,
        'INFO': logging.INFO,
        'WARNING': logging.WARNING,
        'ERROR': logging.ERROR,
        'CRITICAL': logging.CRITICAL
    }
    return level_map.get(str(level_str).upper(), logging.INFO)


# Configure logging dynamically from config
try:
    log_level_str = get_config_value('logging', 'level', 'INFO')
    log_format = get_config_value('logging', 'format', '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    logging.basicConfig(level=get_logging_level(log_level_str), format=log_format)
    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured to level: {log_level_str}")
except Exception as e:
    # Fallback to INFO if config reading fails
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)
    logger.error(f"Failed to configure logging from config: {e}, using INFO level")

page_title = get_config_value('ui', 'page_title', 'JSON Form Builder')
page_icon = get_config_value('ui', 'page_icon', '📝')

# Page configuration
st.set_page_config(
    page_title=page_title,
    page_icon=page_icon,
    layout="wide"
)


def main():
    """Main application entry point."""
    from form_builder.error_handler import ErrorHandler, ErrorType
    from form_builder.form_generator import FormGenerator
    from form_builder.schema_editor_view import SchemaEditor, load_initial_schema_text
    from form_builder.session_manager import SessionManager

    config = get_config()
    if not validate_config(config):
        logger.warning("Configuration issues detected, using defaults where necessary")
    logger.debug(f"Configuration summary: {get_config_summary(config)}")

    try:
        SessionManager.initialize(load_initial_schema_text())
    except Exception as e:
        ErrorHandler.handle_error(
            e,
            "application startup",
            ErrorType.SYSTEM,
            recovery_options=ErrorHandler.create_recovery_options("system")
        )
        return

    st.title(page_title)

    editor_col, preview_col = st.columns(2)

    with editor_col:
        ErrorHandler.with_error_handling(
            SchemaEditor.render,
            "schema editor",
            ErrorType.SCHEMA,
            recovery_options=ErrorHandler.create_recovery_options("schema editor")
        )

    with preview_col:
        ErrorHandler.with_error_handling(
            lambda: FormGenerator.render_dynamic_form(SessionManager.get_schema()),
            "form preview",
            ErrorType.SYSTEM,
            recovery_options=ErrorHandler.create_recovery_options("form preview")
        )


if __name__ == "__main__":
    main()
