from __future__ import annotations

import time

from fastapi import Request
from fastapi import Response
from starlette.middleware.base import BaseHTTPMiddleware

from layoutware.utils.constants import REQUEST_ID_HEADER
from layoutware.utils.pylogger import get_python_logger
from layoutware.utils.request_context import generate_request_id, set_log_context, set_request_id

logger = get_python_logger(__name__)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to assign request IDs and logging context to requests."""

    def __init__(self, app, log_requests: bool = True):
        super().__init__(app)
        self.log_requests = log_requests

    def _create_log_context(self, request: Request) -> dict:
        """Create logging context from the request line and headers."""
        http_origin = (
            request.headers.get("origin")
            or request.headers.get("host")
            or "unknown"
        )

        return {
            "http_origin": http_origin,
            "http_method": request.method,
            "http_path": request.url.path,
            "user_agent": request.headers.get("user-agent", "unknown"),
        }

    async def dispatch(self, request: Request, call_next):
        # Reuse an incoming request ID so logs can be correlated with upstream proxies
        request_id = request.headers.get(REQUEST_ID_HEADER) or generate_request_id()
        set_request_id(request_id)
        request.state.request_id = request_id

        log_context = self._create_log_context(request)
        set_log_context(log_context)

        start_time = time.time()
        if self.log_requests:
            logger.info(f"Request started: {request.method} {request.url.path}")

        try:
            response: Response = await call_next(request)
        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                f"Request failed: {request.method} {request.url.path} - Error: {str(e)} - Duration: {process_time:.3f}s"
            )
            raise

        response.headers[REQUEST_ID_HEADER] = request_id

        if self.log_requests:
            process_time = time.time() - start_time
            logger.info(
                f"Request completed: {request.method} {request.url.path} - Status: {response.status_code} - Duration: {process_time:.3f}s"
            )

        return response
