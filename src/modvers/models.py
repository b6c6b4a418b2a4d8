"""Records passed between the scanner, the strategies and the reporter."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict

_DIGIT = re.compile(r"\d")


class ModuleRecord(BaseModel):
    """A module discovered on the search path and the file that defines it."""

    model_config = ConfigDict(frozen=True)

    name: str
    file: Path


@dataclass(frozen=True)
class VersionOutcome:
    """Result of one version-resolution attempt.

    ``ok`` is False when the module could not be found, read or loaded.
    ``error`` keeps the reason for diagnostics only; it never reaches the
    report and does not take part in equality.
    """

    ok: bool
    value: str | None = None
    error: str | None = field(default=None, compare=False)

    @classmethod
    def failed(cls, error: str | None = None) -> VersionOutcome:
        return cls(ok=False, error=error)

    @classmethod
    def unknown(cls) -> VersionOutcome:
        return cls(ok=True)

    @classmethod
    def found(cls, value: str | None) -> VersionOutcome:
        return cls(ok=True, value=value)


class Status(str, Enum):
    """What the user sees for an outcome."""

    FAILED = "failed"
    UNKNOWN = "unknown"
    OK = "ok"


def looks_like_version(value: str | None) -> bool:
    """Return True when ``value`` contains at least one digit."""
    return value is not None and _DIGIT.search(value) is not None


def classify(outcome: VersionOutcome) -> Status:
    if not outcome.ok:
        return Status.FAILED
    if looks_like_version(outcome.value):
        return Status.OK
    return Status.UNKNOWN


@dataclass(frozen=True)
class DisplayConfig:
    show_name: bool
    show_file: bool = False


__all__ = [
    "DisplayConfig",
    "ModuleRecord",
    "Status",
    "VersionOutcome",
    "classify",
    "looks_like_version",
]
