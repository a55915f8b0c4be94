"""Application constants.

This module defines global constants used throughout the layoutware package.
"""

from __future__ import annotations

LOGGER = "layoutware-logger"
SERVICE = "layoutware"
DEFAULT_LOG_FORMAT = "timestamp=%(asctime)s.%(msecs)03d log_level=%(levelname)s hostname=%(hostname)s environment=%(environment)s request_id=%(request_id)s http.origin=%(http_origin)s http.method=%(http_method)s http.path=%(http_path)s user_agent=%(user_agent)s class=%(module)s function=%(funcName)s log_message=%(message)s"
DEFAULT_LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_ROTATION_CONFIG = {"maxBytes": 52428800, "backupCount": 5, "encoding": "utf-8"}

# Layout defaults
DEFAULT_CONTENT_LABEL = "content"
DEFAULT_TEMPLATE_NAME = "application"
DEFAULT_FORMAT = "html"
DEFAULT_LAYOUT_DIRS = ("layouts", "views/layouts", "app/views/layouts")

REQUEST_ID_HEADER = "X-Request-ID"

FORMAT_MEDIA_TYPES = {
    "html": "text/html",
    "xml": "application/xml",
    "json": "application/json",
    "jsonp": "application/javascript",
    "js": "application/javascript",
    "txt": "text/plain",
}
DEFAULT_MEDIA_TYPE = "text/plain"
