"""Shared interface for version resolution strategies."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path
    from types import TracebackType

    from modvers.models import VersionOutcome


class LoadInterrupted(KeyboardInterrupt):
    """Raised when the operator interrupts a module load."""

    def __init__(self, module: str) -> None:
        super().__init__(module)
        self.module = module


class ProtocolError(RuntimeError):
    """Raised when an isolated child does not produce one well-formed line."""

    def __init__(self, module: str, output: str, returncode: int | None) -> None:
        super().__init__(
            f"{module}: malformed child output {output!r} (exit status {returncode})"
        )
        self.module = module
        self.output = output
        self.returncode = returncode


class VersionStrategy(ABC):
    """Resolve the version of one module at a time.

    A strategy is used as a context manager around a whole run so that
    run-scoped state (such as an interrupt handler) is installed once and
    released on every exit path.
    """

    name: str

    def __init__(self, search_path: list[str], attributes: tuple[str, ...]) -> None:
        self.search_path = list(search_path)
        self.attributes = tuple(attributes)

    @abstractmethod
    def resolve(self, module: str, file: Path | None) -> VersionOutcome:
        """Return the outcome for ``module``, defined in ``file`` if known."""

    def __enter__(self) -> VersionStrategy:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        return None


__all__ = ["LoadInterrupted", "ProtocolError", "VersionStrategy"]
