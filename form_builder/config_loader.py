"""
Configuration loading utilities for the JSON form builder.

This module loads the application configuration from config.yaml and
merges it over built-in defaults, falling back to the defaults whenever
the file is missing or unreadable.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")

VALID_LOG_LEVELS = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}

# Global configuration cache
_config_cache: Optional[Dict[str, Any]] = None


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'JSON Form Builder',
            'version': '1.0.0'
        },
        'ui': {
            'page_title': 'JSON Form Builder',
            'page_icon': '📝',
            'editor_height': 500
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'error_log_file': 'logs/error_analytics.jsonl'
        },
        'editor': {
            'initial_schema_file': 'schemas/contact_form.json'
        },
        'validation': {
            'live': True
        },
        'export': {
            'indent': 2,
            'feedback_seconds': 2.0,
            'default_file_prefix': 'form_submission'
        }
    }


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load application configuration.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)

    Returns:
        Complete configuration dictionary
    """
    if config_path is None:
        config_path = CONFIG_FILE

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return default_config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)

        if user_config is None:
            logger.warning(f"Configuration file is empty: {config_path}")
            return default_config

        if not isinstance(user_config, dict):
            logger.error(f"Configuration file is not a valid dictionary: {config_path}")
            logger.info("Using default configuration")
            return default_config

        config = deep_merge(default_config, user_config)

        logger.info(f"Successfully loaded configuration from {config_path}")
        return config

    except yaml.YAMLError as e:
        logger.error(f"YAML parsing error in {config_path}: {e}")
        logger.info("Using default configuration")
        return default_config

    except (IOError, OSError) as e:
        logger.error(f"Failed to read configuration file {config_path}: {e}")
        logger.info("Using default configuration")
        return default_config


def get_config() -> Dict[str, Any]:
    """Return the cached configuration, loading it on first use."""
    global _config_cache

    if _config_cache is None:
        _config_cache = load_config()

    return _config_cache


def reload_config() -> Dict[str, Any]:
    """
    Force reload of configuration from file.
    Useful for testing or when configuration changes.
    """
    global _config_cache
    _config_cache = None
    return get_config()


def get_config_value(section: str, key: str, default: Any = None) -> Any:
    """
    Get a specific configuration value.

    Args:
        section: Configuration section (e.g., 'ui', 'export')
        key: Configuration key within section
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    section_values = get_config().get(section, {})
    if not isinstance(section_values, dict):
        return default
    return section_values.get(key, default)


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and value types.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'ui', 'logging', 'editor', 'validation', 'export']

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.warning(f"Missing required configuration section: {section}")
            return False

    app = config['app']
    if 'name' not in app or 'version' not in app:
        logger.warning("Missing required app configuration (name or version)")
        return False

    level = config['logging'].get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        logger.warning(f"Invalid logging level: {level}")
        return False

    if not isinstance(config['validation'].get('live', True), bool):
        logger.warning("validation.live must be a boolean")
        return False

    export = config['export']
    try:
        indent = int(export.get('indent', 2))
        if indent < 0:
            logger.warning("export.indent must not be negative")
            return False
    except (ValueError, TypeError):
        logger.warning("export.indent must be a valid integer")
        return False

    try:
        seconds = float(export.get('feedback_seconds', 2.0))
        if seconds <= 0:
            logger.warning("export.feedback_seconds must be positive")
            return False
    except (ValueError, TypeError):
        logger.warning("export.feedback_seconds must be a valid number")
        return False

    if not isinstance(export.get('default_file_prefix', ''), str):
        logger.warning("export.default_file_prefix must be a string")
        return False

    return True


def get_config_summary(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Get a summary of the current configuration.

    Args:
        config: Configuration dictionary

    Returns:
        Dictionary with configuration summary
    """
    return {
        'app_name': config.get('app', {}).get('name', 'Unknown'),
        'app_version': config.get('app', {}).get('version', 'Unknown'),
        'log_level': config.get('logging', {}).get('level', 'INFO'),
        'live_validation': config.get('validation', {}).get('live', True),
        'initial_schema_file': config.get('editor', {}).get('initial_schema_file'),
        'feedback_seconds': config.get('export', {}).get('feedback_seconds', 2.0)
    }
