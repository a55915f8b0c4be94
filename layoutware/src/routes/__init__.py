"""HTTP routes for the layoutware demo application."""

from __future__ import annotations
