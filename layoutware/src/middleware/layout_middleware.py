from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional, Union

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from layoutware.src.core.exceptions.exceptions import LayoutConfigurationException
from layoutware.src.core.layout import Layout
from layoutware.src.core.predicates import IgnoreLayoutPredicate, never_ignore
from layoutware.src.core.templates import LayoutTemplate, TemplateResolver
from layoutware.src.settings import settings
from layoutware.utils.constants import DEFAULT_LAYOUT_DIRS
from layoutware.utils.pylogger import get_python_logger

logger = get_python_logger(__name__)

_MISSING = object()


def default_layout_dirs() -> List[Path]:
    """Conventional layout directories under the current working directory."""
    cwd = Path(os.getcwd())
    return [cwd / d for d in DEFAULT_LAYOUT_DIRS]


class LayoutMiddleware(BaseHTTPMiddleware):
    """Middleware that attaches a :class:`Layout` to every request.

    The layout is available to handlers as ``request.state.layout``. Handlers
    that do not want a layout simply ignore it.

    A middleware created with ``master=True`` takes precedence over every
    layout middleware further down the stack: they see its layout on the
    request and pass the request on without attaching their own.

    Example::

        app.add_middleware(
            LayoutMiddleware,
            layout_dirs=["templates/layouts"],
            default_template="application",
            ignore_layout=ignore_when_query_param("apply_layout"),
        )
    """

    def __init__(
        self,
        app,
        layout_dirs: Optional[Iterable[Union[str, Path]]] = None,
        default_template: Optional[str] = None,
        default_format: Optional[str] = None,
        master: Optional[bool] = None,
        ignore_layout: Optional[IgnoreLayoutPredicate] = None,
    ):
        super().__init__(app)
        if layout_dirs is None:
            layout_dirs = settings.LAYOUT_DIRS or default_layout_dirs()
        self.layout_dirs = layout_dirs
        self.default_template = str(
            default_template if default_template is not None else settings.LAYOUT_DEFAULT_TEMPLATE
        )
        self.default_format = str(
            default_format if default_format is not None else settings.LAYOUT_DEFAULT_FORMAT
        )
        self._master = settings.LAYOUT_MASTER if master is None else bool(master)
        self._ignore_layout = ignore_layout or never_ignore

        if not self.default_template:
            raise LayoutConfigurationException("default_template must not be empty")
        if not self.default_format:
            raise LayoutConfigurationException("default_format must not be empty")

    @property
    def is_master(self) -> bool:
        return self._master

    @property
    def layout_dirs(self) -> List[Path]:
        """Directories searched, in order, for layout templates."""
        return list(self._resolver.layout_dirs)

    @layout_dirs.setter
    def layout_dirs(self, dirs: Union[str, Path, Iterable[Union[str, Path]]]):
        if isinstance(dirs, (str, Path)):
            dirs = [dirs]
        self._resolver = TemplateResolver(dirs)

    @property
    def resolver(self) -> TemplateResolver:
        return self._resolver

    def resolve_template(self, name: str, fmt: Optional[str] = None) -> Optional[LayoutTemplate]:
        """Find the compiled template ``<name>.<fmt>.*``, None when there is none."""
        if fmt is None:
            fmt = self.default_format
        return self._resolver.resolve(str(name), str(fmt))

    def should_ignore_layout(self, request: Request) -> bool:
        return bool(self._ignore_layout(request))

    async def dispatch(self, request: Request, call_next) -> Response:
        if getattr(request.state, "variables", None) is None:
            request.state.variables = {}

        previous = getattr(request.state, "layout", _MISSING)
        if isinstance(previous, Layout) and previous.is_master:
            logger.debug(
                f"Master layout already attached, skipping layout for {request.method} {request.url.path}"
            )
            return await call_next(request)

        layout = Layout(self, request)
        request.state.layout = layout
        logger.debug(
            f"Attached layout {layout.template_name}.{layout.format} to {request.method} {request.url.path}"
        )
        try:
            return await call_next(request)
        finally:
            if previous is _MISSING:
                del request.state.layout
            else:
                request.state.layout = previous
