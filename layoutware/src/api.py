"""FastAPI application for layoutware.

This module assembles a FastAPI application with logging, request context
middleware, the layout middleware, exception handlers and example routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from starlette.responses import JSONResponse

from layoutware.src.core.exceptions.exceptions import AppException, AppExceptionCode
from layoutware.src.core.predicates import ignore_when_query_param
from layoutware.src.middleware.layout_middleware import LayoutMiddleware
from layoutware.src.middleware.request_context_middleware import RequestContextMiddleware
from layoutware.src.routes.health import router as health_router
from layoutware.src.routes.pages import router as pages_router
from layoutware.src.settings import settings
from layoutware.utils.pylogger import configure_logging, get_python_logger

logger = get_python_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log application startup and shutdown."""
    logger.info("Layout server starting up")
    yield
    logger.info("Layout server shutting down")


async def generic_exception_handler(request: Request, exc: Exception):
    """Generic exception handler for unhandled exceptions."""
    logger.exception(
        "Unhandled exception occurred for request_method=%s, request_path=%s, error=%s",
        request.method,
        request.url.path,
        exc,
    )
    return JSONResponse(
        status_code=AppExceptionCode.INTERNAL_SERVER_ERROR.response_code,
        content={
            "detail_message": str(exc),
            "message": AppExceptionCode.INTERNAL_SERVER_ERROR.message,
            "error_code": AppExceptionCode.INTERNAL_SERVER_ERROR.error_code,
        },
    )


async def app_exception_handler(request: Request, exc: AppException):
    """App exception handler for known application errors."""
    logger.warning(
        "App exception occurred for request_method=%s, request_path=%s, error=%s",
        request.method,
        request.url.path,
        exc,
    )
    return JSONResponse(
        status_code=exc.response_code,
        content={
            "detail_message": exc.detail_message,
            "message": exc.message,
            "error_code": exc.error_code,
        },
    )


def create_app(**layout_options) -> FastAPI:
    """Create the FastAPI application.

    Args:
        **layout_options: Keyword arguments for :class:`LayoutMiddleware`,
            overriding the ``LAYOUT_*`` settings.

    Returns:
        The configured application.
    """
    if "ignore_layout" not in layout_options and settings.LAYOUT_IGNORE_PARAM:
        layout_options["ignore_layout"] = ignore_when_query_param(settings.LAYOUT_IGNORE_PARAM)

    app = FastAPI(lifespan=lifespan)

    # Starlette runs the last added middleware first
    app.add_middleware(LayoutMiddleware, **layout_options)
    app.add_middleware(
        RequestContextMiddleware, log_requests=settings.REQUEST_LOGGING_ENABLED
    )

    app.include_router(health_router)
    app.include_router(pages_router)

    app.add_exception_handler(Exception, generic_exception_handler)
    app.add_exception_handler(AppException, app_exception_handler)
    return app


def main():
    """Run the application with uvicorn."""
    import uvicorn

    from layoutware.utils.uvicorn_logging_config import get_uvicorn_log_config

    configure_logging(
        log_level=settings.PYTHON_LOG_LEVEL,
        enable_file_logging=settings.LOG_FILE_ENABLED,
    )
    uvicorn.run(
        create_app(),
        host=settings.HOST,
        port=settings.PORT,
        log_config=get_uvicorn_log_config(enable_file_logging=settings.LOG_FILE_ENABLED),
    )


if __name__ == "__main__":
    main()
