"""Application package for layoutware."""

from __future__ import annotations
