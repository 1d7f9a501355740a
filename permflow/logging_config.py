"""
Logging configuration utilities for permflow.

Configures the structured logger from a settings dictionary (for hosts that
keep their own settings store) or from environment variables.

Usage:
    from permflow.logging_config import configure_from_settings

    configure_from_settings({
        "loggingEnabled": True,
        "logLevel": "DEBUG",
        "logDirectory": "/path/to/logs",
    })
"""

import os
from typing import Any, Dict, Optional

from permflow.logger import LogLevel, configure_logger, get_logger


def configure_from_settings(settings: Dict[str, Any]) -> None:
    """Configure logger from a host settings dict.

    Args:
        settings: Dictionary of host settings.
            Expected keys (all optional):
            - loggingEnabled: bool
            - logLevel: str ('ERROR', 'WARN', 'INFO', 'DEBUG', 'TRACE')
            - logDirectory: str (path to log directory)
            - logSensitiveData: bool
            - logMaxFileSize: int (bytes)
            - logMaxFiles: int
            - logToConsole: bool
            - sessionId: str
    """
    configure_logger(
        enabled=settings.get("loggingEnabled", True),
        level=settings.get("logLevel", "INFO"),
        log_directory=settings.get("logDirectory") or None,
        log_sensitive_data=settings.get("logSensitiveData", True),
        max_file_size=settings.get("logMaxFileSize", 10485760),
        max_files=settings.get("logMaxFiles", 10),
        session_id=settings.get("sessionId"),
        console_output=settings.get("logToConsole", False),
    )


def configure_from_environment() -> None:
    """Configure logger from environment variables.

    Environment variables:
        PERMFLOW_LOG_ENABLED: '0', '1', 'true', 'false'
        PERMFLOW_LOG_LEVEL: 'ERROR', 'WARN', 'INFO', 'DEBUG', 'TRACE'
        PERMFLOW_LOG_DIR: Path to log directory
        PERMFLOW_LOG_SENSITIVE: '0', '1', 'true', 'false'
        PERMFLOW_LOG_CONSOLE: '0', '1', 'true', 'false'
        PERMFLOW_SESSION_ID: Session ID for correlation
    """
    configure_logger(
        enabled=_parse_bool(os.environ.get("PERMFLOW_LOG_ENABLED"), True),
        level=os.environ.get("PERMFLOW_LOG_LEVEL", "INFO"),
        log_directory=os.environ.get("PERMFLOW_LOG_DIR"),
        log_sensitive_data=_parse_bool(os.environ.get("PERMFLOW_LOG_SENSITIVE"), True),
        session_id=os.environ.get("PERMFLOW_SESSION_ID"),
        console_output=_parse_bool(os.environ.get("PERMFLOW_LOG_CONSOLE"), False),
    )


def enable_debug_logging(console: bool = True) -> None:
    """Turn on DEBUG level logging, echoed to the console by default."""
    logger = get_logger()
    logger.enabled = True
    logger.set_console_output(console)
    logger.level = LogLevel.DEBUG
    logger.info("permflow", "debug_logging_enabled", {})


def disable_debug_logging() -> None:
    """Return to INFO level without console output."""
    logger = get_logger()
    logger.info("permflow", "debug_logging_disabled", {})
    logger.level = LogLevel.INFO
    logger.set_console_output(False)


def _parse_bool(value: Optional[str], default: bool) -> bool:
    """Parse string to boolean."""
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def get_session_id() -> str:
    """Get current session ID."""
    return get_logger().session_id


def set_session_id(session_id: str) -> None:
    """Set session ID for cross-component correlation."""
    get_logger().session_id = session_id


__all__ = [
    "configure_from_settings",
    "configure_from_environment",
    "enable_debug_logging",
    "disable_debug_logging",
    "get_session_id",
    "set_session_id",
]
