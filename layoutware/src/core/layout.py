"""Per-request layout object.

A ``Layout`` is attached to ``request.state.layout`` by
:class:`~layoutware.src.middleware.layout_middleware.LayoutMiddleware`.
Handlers put their output into it and return it as the response body,
either through :class:`~layoutware.src.core.responses.LayoutResponse` or by
passing the layout itself to ``StreamingResponse``. The layout template is
looked up and rendered only when the body is produced.

Example::

    @app.get("/")
    async def index(request: Request):
        layout = request.state.layout
        layout.content = "<p>Here's some content</p>"
        layout.set_content("<nav>...</nav>", label="sidebar")
        return LayoutResponse(layout)
"""

from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Callable, Dict, Iterator, Optional, Union

from starlette.requests import Request

from layoutware.utils.constants import DEFAULT_CONTENT_LABEL
from layoutware.utils.pylogger import get_python_logger

if TYPE_CHECKING:
    from layoutware.src.middleware.layout_middleware import LayoutMiddleware

logger = get_python_logger(__name__)


class Layout:
    """Collects the content of a request and renders it into a layout template."""

    def __init__(self, middleware: "LayoutMiddleware", request: Request):
        self.middleware = middleware
        self.request = request
        self._template_name: Optional[str] = None
        self._format: Optional[str] = None
        self._contents: Dict[str, str] = {}
        self._ignore_layout: Optional[Callable[[Request], bool]] = None

    @property
    def is_master(self) -> bool:
        return self.middleware.is_master

    @property
    def template_name(self) -> str:
        """The template to render, the middleware default unless set."""
        if self._template_name is None:
            return self.middleware.default_template
        return self._template_name

    @template_name.setter
    def template_name(self, name: Optional[str]):
        self._template_name = None if name is None else str(name)

    @property
    def format(self) -> str:
        """The template format, the middleware default unless set."""
        if self._format is None:
            return self.middleware.default_format
        return self._format

    @format.setter
    def format(self, fmt: Optional[str]):
        self._format = None if fmt is None else str(fmt)

    @property
    def content(self) -> str:
        return self.get_content(DEFAULT_CONTENT_LABEL)

    @content.setter
    def content(self, value: str):
        self.set_default_content(value)

    @property
    def content_regions(self) -> Dict[str, str]:
        return dict(self._contents)

    def set_content(self, value: str, label: str = DEFAULT_CONTENT_LABEL) -> None:
        """Set the content of a region, replacing anything already there."""
        self._contents[str(label)] = value

    def set_default_content(self, value: str) -> None:
        self.set_content(value, DEFAULT_CONTENT_LABEL)

    def get_content(self, label: str = DEFAULT_CONTENT_LABEL) -> str:
        """Return the content of a region, or an empty string when it is unset."""
        return self._contents.get(str(label), "")

    def ignore_layout(self, predicate: Union[bool, Callable[[Request], bool]] = True) -> None:
        """Override the middleware's ignore predicate for this request only.

        Args:
            predicate: Either a callable taking the request, or a bool.
        """
        if isinstance(predicate, bool):
            flag = predicate

            def predicate(request: Request) -> bool:
                return flag

        self._ignore_layout = predicate

    def should_ignore_layout(self) -> bool:
        if self._ignore_layout is not None:
            return bool(self._ignore_layout(self.request))
        return self.middleware.should_ignore_layout(self.request)

    def wrap(self, content: str, layout: Optional[str] = None, format: Optional[str] = None) -> str:
        """Wrap ``content`` in a layout on demand.

        The current layout is left untouched: a copy with its own content
        regions is rendered instead. Ignore predicates do not apply.

        Args:
            content: The main body of the layout.
            layout: Name of a different layout template to use.
            format: Format of the layout template to use.

        Returns:
            The rendered layout.
        """
        wrapped = copy.copy(self)
        wrapped._contents = dict(self._contents)
        if format:
            wrapped.format = format
        if layout:
            wrapped.template_name = layout
        wrapped.set_default_content(content)
        return wrapped.render(suppress_layout=False)

    def render(self, suppress_layout: Optional[bool] = None) -> str:
        """Render the layout with the collected content.

        Args:
            suppress_layout: True returns the default content unwrapped. When
                None, the ignore predicates decide.

        Returns:
            The rendered layout, or the raw default content when the layout is
            suppressed or no template matches.
        """
        if suppress_layout is None:
            suppress_layout = self.should_ignore_layout()
        if suppress_layout:
            return self.content

        template = self.middleware.resolve_template(self.template_name, self.format)
        if template is None:
            logger.debug(
                "Layout %s.%s not found, returning unwrapped content",
                self.template_name,
                self.format,
            )
            return self.content

        return template.render(self._template_context(), self.get_content)

    def _template_context(self):
        return {
            "request": self.request,
            "variables": getattr(self.request.state, "variables", {}),
            "layout": self,
        }

    def __iter__(self) -> Iterator[str]:
        yield self.render()

    def __str__(self):
        return "".join(self)

    def __repr__(self):
        return f"Layout(template_name={self.template_name!r}, format={self.format!r}, master={self.is_master})"
