"""Responses and dependencies for handlers that render through a layout."""

from __future__ import annotations

from typing import Mapping, Optional

from starlette.background import BackgroundTask
from starlette.requests import Request
from starlette.responses import Response

from layoutware.src.core.exceptions.exceptions import LayoutNotAttachedException
from layoutware.src.core.layout import Layout
from layoutware.utils.constants import DEFAULT_MEDIA_TYPE, FORMAT_MEDIA_TYPES


def media_type_for(fmt: str) -> str:
    """Return the media type for a layout format, ``text/plain`` if unknown."""
    return FORMAT_MEDIA_TYPES.get(str(fmt).lower(), DEFAULT_MEDIA_TYPE)


class LayoutResponse(Response):
    """Response whose body is the rendered layout."""

    def __init__(
        self,
        layout: Layout,
        status_code: int = 200,
        headers: Optional[Mapping[str, str]] = None,
        media_type: Optional[str] = None,
        background: Optional[BackgroundTask] = None,
    ):
        self.layout = layout
        if media_type is None:
            media_type = media_type_for(layout.format)
        super().__init__(
            content=str(layout),
            status_code=status_code,
            headers=headers,
            media_type=media_type,
            background=background,
        )


def get_layout(request: Request) -> Optional[Layout]:
    """FastAPI dependency returning the layout attached to the request, if any."""
    return getattr(request.state, "layout", None)


def require_layout(request: Request) -> Layout:
    """FastAPI dependency returning the attached layout.

    Raises:
        LayoutNotAttachedException: If no layout middleware handled the request.
    """
    layout = get_layout(request)
    if layout is None:
        raise LayoutNotAttachedException(
            f"No layout attached to request {request.method} {request.url.path}"
        )
    return layout
