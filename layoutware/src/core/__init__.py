"""Core layout objects: layouts, templates, responses and predicates."""

from __future__ import annotations
