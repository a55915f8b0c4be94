"""Predicates deciding whether a request should skip its layout.

Useful for ajax, ESI or partial page requests that want the content but not
the surrounding layout.
"""

from __future__ import annotations

from typing import Callable, Optional

from starlette.requests import Request

IgnoreLayoutPredicate = Callable[[Request], bool]


def never_ignore(request: Request) -> bool:
    """Default predicate: always apply the layout."""
    return False


def ignore_when_query_param(
    name: str = "apply_layout", value: str = "false"
) -> IgnoreLayoutPredicate:
    """Skip the layout when the query parameter ``name`` equals ``value``.

    ``ignore_when_query_param()`` makes ``GET /?apply_layout=false`` return
    the bare content.
    """

    def predicate(request: Request) -> bool:
        return request.query_params.get(name, "").lower() == value.lower()

    return predicate


def ignore_when_header(name: str, value: Optional[str] = None) -> IgnoreLayoutPredicate:
    """Skip the layout when header ``name`` is present (and equals ``value`` if given)."""

    def predicate(request: Request) -> bool:
        header = request.headers.get(name)
        if header is None:
            return False
        if value is None:
            return True
        return header.lower() == value.lower()

    return predicate
