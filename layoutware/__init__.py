"""layoutware: layout templates for FastAPI and Starlette responses."""

from __future__ import annotations
