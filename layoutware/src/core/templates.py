"""Layout template lookup and compilation.

Templates are located by name and format in an ordered list of layout
directories, using the ``<name>.<format>.*`` file naming convention
(``application.html.j2``, ``wrapper.xml.jinja`` ...). Every matching file is
compiled with Jinja2, whatever its final extension.

Compiled templates are cached per resolver for the lifetime of the process.
The cache is never invalidated, so editing a layout file requires a restart.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional, Union

from jinja2 import Environment, FileSystemLoader, Template

from layoutware.utils.constants import DEFAULT_CONTENT_LABEL
from layoutware.utils.pylogger import get_python_logger

logger = get_python_logger(__name__)

ContentLookup = Callable[..., str]


class LayoutTemplate:
    """A compiled layout template bound to the file it was loaded from."""

    def __init__(self, template: Template, path: Path):
        self.template = template
        self.path = path

    def render(
        self,
        context: Optional[Dict[str, Any]] = None,
        content_for: Optional[ContentLookup] = None,
    ) -> str:
        """Render the layout.

        Args:
            context: Variables made available to the template.
            content_for: Callback returning the content of a region by label.
                It is exposed to the template as ``content_for(label)`` and its
                default region as ``content``.

        Returns:
            The rendered layout.
        """
        if content_for is None:
            content_for = _empty_content
        variables = dict(context or {})
        variables["content_for"] = content_for
        variables["content"] = content_for(DEFAULT_CONTENT_LABEL)
        return self.template.render(**variables)

    def __repr__(self):
        return f"LayoutTemplate(path={str(self.path)!r})"


def _empty_content(label: str = DEFAULT_CONTENT_LABEL) -> str:
    return ""


class TemplateResolver:
    """Finds layout templates in a list of directories and caches them."""

    def __init__(
        self,
        layout_dirs: Iterable[Union[str, Path]],
        environment: Optional[Environment] = None,
    ):
        self.layout_dirs = [Path(d) for d in layout_dirs]
        if environment is None:
            environment = Environment(
                loader=FileSystemLoader([str(d) for d in self.layout_dirs]),
                autoescape=False,
                keep_trailing_newline=True,
            )
        self.environment = environment
        self._cache: Dict[str, LayoutTemplate] = {}

    @staticmethod
    def lookup_key(name: str, fmt: str) -> str:
        """Return the glob used to find a template, e.g. ``application.html.*``."""
        return f"{name}.{fmt}.*"

    def find_template_file(self, name: str, fmt: str) -> Optional[Path]:
        """Search the layout directories in order for a matching template file."""
        pattern = self.lookup_key(name, fmt)
        for directory in self.layout_dirs:
            if not directory.is_dir():
                continue
            for candidate in sorted(directory.glob(pattern)):
                if candidate.is_file():
                    return candidate
        return None

    def resolve(self, name: str, fmt: str) -> Optional[LayoutTemplate]:
        """Return the compiled template for ``name`` and ``fmt``.

        Returns None when no directory holds a matching file.
        """
        key = self.lookup_key(name, fmt)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Layout template cache hit: %s", key)
            return cached

        path = self.find_template_file(name, fmt)
        if path is None:
            logger.debug(
                "No layout template matching %s in %s",
                key,
                [str(d) for d in self.layout_dirs],
            )
            return None

        logger.debug("Compiling layout template %s from %s", key, path)
        template = LayoutTemplate(self._compile(path), path)
        self._cache[key] = template
        return template

    def _compile(self, path: Path) -> Template:
        source = path.read_text(encoding="utf-8")
        return self.environment.from_string(source)

    def cached_keys(self):
        return list(self._cache)
