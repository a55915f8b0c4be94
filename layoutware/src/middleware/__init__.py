"""Middleware package for request processing.

This package contains HTTP middleware components for layoutware: the layout
middleware that attaches a layout to each request, and request context
middleware for request IDs and logging.
"""

from __future__ import annotations
