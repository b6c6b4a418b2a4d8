"""Rendering of version outcomes, one line per module."""

from __future__ import annotations

from typing import TYPE_CHECKING, TextIO

import orjson

from modvers.models import DisplayConfig, Status, classify

if TYPE_CHECKING:
    from pathlib import Path

    from modvers.config import OutputFormat
    from modvers.models import VersionOutcome

FAILED_TEXT = "(failed)"
UNKNOWN_TEXT = "(unknown)"


def status_text(outcome: VersionOutcome) -> str:
    status = classify(outcome)
    if status is Status.FAILED:
        return FAILED_TEXT
    if status is Status.UNKNOWN:
        return UNKNOWN_TEXT
    return outcome.value or UNKNOWN_TEXT


def format_line(
    name: str,
    file: Path | None,
    outcome: VersionOutcome,
    display: DisplayConfig,
) -> str:
    """Format one text result line, without the trailing newline.

    Examples:
        >>> from modvers.models import VersionOutcome
        >>> format_line("pkg", None, VersionOutcome.found("1.0"), DisplayConfig(True))
        'pkg:\\t1.0'
        >>> format_line("pkg", None, VersionOutcome.failed(), DisplayConfig(False))
        '(failed)'
    """
    parts = []
    if display.show_name:
        parts.append(f"{name}:")
    parts.append(status_text(outcome))
    if display.show_file and file is not None:
        parts.append(str(file))
    return "\t".join(parts)


def format_record(name: str, file: Path | None, outcome: VersionOutcome) -> bytes:
    """Format one JSON Lines record, without the trailing newline."""
    status = classify(outcome)
    payload = {
        "module": name,
        "status": status.value,
        "version": outcome.value if status is Status.OK else None,
        "file": str(file) if file is not None else None,
    }
    return orjson.dumps(payload, option=orjson.OPT_SORT_KEYS)


class Reporter:
    """Writes results to a text stream in the configured format."""

    def __init__(
        self,
        stream: TextIO,
        display: DisplayConfig,
        output_format: OutputFormat = "text",
    ) -> None:
        self.stream = stream
        self.display = display
        self.output_format = output_format

    def report(self, name: str, file: Path | None, outcome: VersionOutcome) -> None:
        if self.output_format == "jsonl":
            line = format_record(name, file, outcome).decode("utf-8")
        else:
            line = format_line(name, file, outcome, self.display)
        self.stream.write(line + "\n")
        self.stream.flush()


__all__ = [
    "FAILED_TEXT",
    "UNKNOWN_TEXT",
    "Reporter",
    "format_line",
    "format_record",
    "status_text",
]
