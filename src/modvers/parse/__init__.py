"""Parsing utilities for version assignments."""

from modvers.parse.version_line import (
    UnsupportedExpression,
    evaluate_version_line,
    find_version_line,
    version_to_text,
)

__all__ = [
    "UnsupportedExpression",
    "evaluate_version_line",
    "find_version_line",
    "version_to_text",
]
