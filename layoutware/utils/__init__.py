"""Shared utilities: constants, logging and request context."""

from __future__ import annotations
