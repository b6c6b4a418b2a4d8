"""Static version lookup by reading the module's source text."""

from __future__ import annotations

import logging
import tokenize
from typing import TYPE_CHECKING

from modvers.models import VersionOutcome
from modvers.parse.version_line import (
    UnsupportedExpression,
    evaluate_version_line,
    find_version_line,
    version_to_text,
)
from modvers.resolve.base import VersionStrategy

if TYPE_CHECKING:
    from pathlib import Path

LOGGER = logging.getLogger(__name__)


class TextScan(VersionStrategy):
    """Find the version assignment in the source file and evaluate that line only."""

    name = "text"

    def resolve(self, module: str, file: Path | None) -> VersionOutcome:
        if file is None:
            return VersionOutcome.failed(f"no source file found for {module}")

        try:
            # tokenize.open honours PEP 263 coding cookies.
            with tokenize.open(file) as handle:
                line = find_version_line(handle, self.attributes)
        except (OSError, SyntaxError, UnicodeDecodeError) as exc:
            LOGGER.debug("cannot read %s: %s", file, exc)
            return VersionOutcome.failed(str(exc))

        if line is None:
            return VersionOutcome.unknown()

        try:
            value = evaluate_version_line(line, self.attributes)
        except UnsupportedExpression as exc:
            LOGGER.debug("%s: cannot evaluate %r: %s", file, line.strip(), exc)
            return VersionOutcome.unknown()

        return VersionOutcome.found(version_to_text(value))


__all__ = ["TextScan"]
