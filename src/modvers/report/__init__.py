"""Result reporting for modvers."""

from modvers.report.lines import (
    FAILED_TEXT,
    UNKNOWN_TEXT,
    Reporter,
    format_line,
    format_record,
    status_text,
)

__all__ = [
    "FAILED_TEXT",
    "UNKNOWN_TEXT",
    "Reporter",
    "format_line",
    "format_record",
    "status_text",
]
