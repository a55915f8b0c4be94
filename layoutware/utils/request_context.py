"""Request context management utilities.

This module provides context variable management for request identifiers
and logging context across async request processing.
"""

from __future__ import annotations

import contextvars
import os
import uuid
from typing import Any, Dict, Optional

from layoutware.utils.constants import SERVICE

# Context variable to store the request ID for the current request
request_id_context: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "request_id", default=None
)

# Context variable to store log context for the current request
log_context_var: contextvars.ContextVar[Optional[Dict[str, Any]]] = (
    contextvars.ContextVar("log_context", default=None)
)

DEFAULT_LOG_CONTEXT = {
    "http_origin": "unknown",
    "http_method": "unknown",
    "http_path": "unknown",
    "user_agent": "unknown",
}


def generate_request_id() -> str:
    """Generate a new request ID using UUID4."""
    app_env = os.environ.get("APP_ENV", "local")
    return SERVICE + "-" + app_env + "-" + str(uuid.uuid4())


def set_request_id(request_id: Optional[str]) -> None:
    """Set the request ID for the current context."""
    request_id_context.set(request_id)


def get_request_id() -> Optional[str]:
    """Get the request ID from the current context."""
    return request_id_context.get()


def set_log_context(log_context: Optional[Dict[str, Any]]) -> None:
    """Set the log context for the current request."""
    log_context_var.set(log_context)


def get_log_context() -> Dict[str, Any]:
    """Get the log context from the current context."""
    context = log_context_var.get()
    if context is None:
        return dict(DEFAULT_LOG_CONTEXT)
    return context
