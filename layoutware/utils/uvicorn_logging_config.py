"""Uvicorn logging configuration utilities.

This module provides logging configuration for uvicorn, so that server logs
and application logs share the same format and request context.
"""

from __future__ import annotations

import json
import os
import tempfile

from layoutware.utils.constants import (
    DEFAULT_LOG_DATE_FORMAT,
    DEFAULT_LOG_FORMAT,
    LOG_ROTATION_CONFIG,
    LOGGER,
)
from layoutware.utils.pylogger import get_log_file_path

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "uvicorn.asgi")


def get_uvicorn_log_config(enable_file_logging=True):
    """Returns a uvicorn-compatible logging configuration.

    This captures uvicorn's startup, shutdown and access logs along with the
    layoutware application loggers.
    """
    log_level = os.environ.get("PYTHON_LOG_LEVEL", "INFO").upper()

    handlers = {
        "console": {
            "formatter": LOGGER,
            "class": "logging.StreamHandler",
            "stream": "ext://sys.stdout",
        },
    }
    if enable_file_logging:
        handlers["file"] = {
            "formatter": LOGGER,
            "class": "logging.handlers.RotatingFileHandler",
            "filename": get_log_file_path(),
            **LOG_ROTATION_CONFIG,
        }
    handler_names = list(handlers)

    loggers = {
        name: {"handlers": handler_names, "level": log_level, "propagate": False}
        for name in UVICORN_LOGGERS + ("layoutware",)
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            LOGGER: {
                "()": "layoutware.utils.pylogger.RequestContextFormatter",
                "format": DEFAULT_LOG_FORMAT,
                "datefmt": DEFAULT_LOG_DATE_FORMAT,
            },
        },
        "handlers": handlers,
        "loggers": loggers,
        "root": {
            "level": log_level,
            "handlers": handler_names,
        },
    }


def write_uvicorn_log_config_file(enable_file_logging=True):
    """Write uvicorn logging configuration to a JSON file.

    Returns the path to the configuration file.
    """
    config = get_uvicorn_log_config(enable_file_logging=enable_file_logging)

    with tempfile.NamedTemporaryFile(
        mode="w", suffix="_uvicorn_log_config.json", delete=False
    ) as f:
        json.dump(config, f, indent=2)
        return f.name
