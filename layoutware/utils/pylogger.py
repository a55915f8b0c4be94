"""Logging utilities for layoutware.

This module provides request-aware formatters, configuration utilities and
shared logging components used across the layout middleware.
"""

from __future__ import annotations

import logging.config
import os
import socket
import sys
import tempfile
import warnings

from layoutware.utils.constants import (
    DEFAULT_LOG_DATE_FORMAT,
    DEFAULT_LOG_FORMAT,
    LOG_ROTATION_CONFIG,
    LOGGER,
)
from layoutware.utils.request_context import get_log_context, get_request_id


def get_log_file_path(default_path: str = "/etc/logs/app.log") -> str:
    """Get the log file path with directory creation and fallback handling.

    Args:
        default_path: Default log file path if LOG_FILE_PATH env var is not set

    Returns:
        Valid log file path that can be written to
    """
    log_file_path = os.environ.get("LOG_FILE_PATH", default_path)
    fallback_path = os.path.join(tempfile.gettempdir(), "app.log")

    log_dir = os.path.dirname(log_file_path)
    if log_dir and not os.path.exists(log_dir):
        try:
            os.makedirs(log_dir, exist_ok=True)
        except (OSError, PermissionError) as e:
            warnings.warn(
                f"Cannot create log directory {log_dir}: {e}. "
                f"Falling back to temp directory {fallback_path}"
            )
            return fallback_path

    return log_file_path


class RequestContextFormatter(logging.Formatter):
    """Formatter that adds the request ID, HTTP request details, hostname and environment to log records."""

    def format(self, record):
        """Format the log record with request context information."""
        request_id = get_request_id()
        record.request_id = request_id or "no-request"

        log_context = get_log_context()
        record.http_origin = log_context.get("http_origin", "unknown")
        record.http_method = log_context.get("http_method", "unknown")
        record.http_path = log_context.get("http_path", "unknown")
        record.user_agent = log_context.get("user_agent", "unknown")

        # Add hostname/pod name
        record.hostname = os.environ.get("HOSTNAME", socket.gethostname())

        record.environment = os.environ.get("APP_ENV", "local")

        return super().format(record)


def configure_logging(
    log_level="INFO",
    log_format=None,
    log_date_format=None,
    enable_file_logging=True,
):
    """Configure logging for the entire application.

    This should be called once at application startup.
    Supports both console and file logging with the same key=value format.
    """
    log_level = log_level.upper()
    log_file_path = get_log_file_path() if enable_file_logging else None

    if log_format is None:
        log_format = DEFAULT_LOG_FORMAT
    if log_date_format is None:
        log_date_format = DEFAULT_LOG_DATE_FORMAT

    formatters = {
        LOGGER: {
            "()": RequestContextFormatter,
            "format": log_format,
            "datefmt": log_date_format,
        }
    }

    handlers = {
        "console": {
            "level": log_level,
            "class": "logging.StreamHandler",
            "formatter": LOGGER,
            "stream": sys.stdout,
        },
    }

    if enable_file_logging:
        handlers["file"] = {
            "level": log_level,
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": LOGGER,
            "filename": log_file_path,
            **LOG_ROTATION_CONFIG,
        }

    root_handlers = ["console"]
    if enable_file_logging:
        root_handlers.append("file")

    logger_config = {
        "version": 1,
        "formatters": formatters,
        "handlers": handlers,
        "root": {
            "level": log_level,
            "handlers": root_handlers,
        },
        "disable_existing_loggers": False,
    }

    logging.config.dictConfig(logger_config)


def get_python_logger(name=None):
    """Get a logger with the specified name.

    Args:
        name: The name of the logger. If None, uses the default package logger.
              It's recommended to use __name__ to get module-specific loggers.

    Returns:
        logging.Logger: Configured logger instance
    """
    if name is None:
        name = LOGGER
    return logging.getLogger(name)
