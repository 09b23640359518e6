"""
Logging Configuration Module.

Centralized logging configuration for the agent runtime.

Library modules only ever call ``logging.getLogger(__name__)``; nothing is
configured on import. Applications embedding the runtime call
``setup_logging()`` once at startup.

Features:
- Configurable log levels per module
- Console and optional file logging
- Simple, detailed and JSON line formats
"""

import logging
from pathlib import Path
from typing import Optional

from agent_runtime.core.config import get_settings

SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)

LOG_FILE_NAME = "agent_runtime.log"

# Module-specific log levels
MODULE_LOG_LEVELS = {
    "agent_runtime": "INFO",
    "agent_runtime.policy": "DEBUG",
    "agent_runtime.runtime": "DEBUG",
    "agent_runtime.usage": "INFO",
    # Third-party libraries (reduce noise)
    "langgraph": "WARNING",
    "asyncio": "WARNING",
}


def _format_string(log_format: str) -> str:
    if log_format == "json":
        return JSON_FORMAT
    if log_format == "simple":
        return SIMPLE_FORMAT
    return DETAILED_FORMAT


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: Optional[bool] = None,
) -> None:
    """
    Configure logging for the application.

    Args:
        log_level: Override the configured log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Override the configured format (simple, detailed, json)
        enable_file: Override whether file logging is enabled
    """
    settings = get_settings()
    level = (log_level or settings.log_level).upper()
    fmt = log_format or settings.log_format
    file_logging = settings.enable_file_logging if enable_file is None else enable_file

    formatter = logging.Formatter(_format_string(fmt), datefmt="%Y-%m-%d %H:%M:%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all levels, filter at handler level

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if file_logging:
        log_dir = Path(settings.log_file_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / LOG_FILE_NAME)
        file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    for module_name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(module_name).setLevel(module_level)

    root_logger.info(f"Logging configured: level={level}, format={fmt}, file_logging={file_logging}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The module name (typically __name__)

    Returns:
        A configured logger instance
    """
    return logging.getLogger(name)
