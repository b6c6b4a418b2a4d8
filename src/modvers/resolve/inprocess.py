"""Version lookup by importing the module into the running interpreter."""

from __future__ import annotations

import importlib
import io
import logging
import signal
import sys
import warnings
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from typing import TYPE_CHECKING

from modvers.models import VersionOutcome
from modvers.parse.version_line import version_to_text
from modvers.resolve.base import LoadInterrupted, VersionStrategy

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path
    from types import ModuleType, TracebackType

LOGGER = logging.getLogger(__name__)

_MISSING = object()


@contextmanager
def scoped_search_path(search_path: Sequence[str]) -> Iterator[None]:
    """Replace ``sys.path`` for the duration of the block."""
    saved = sys.path[:]
    sys.path[:] = list(search_path)
    importlib.invalidate_caches()
    try:
        yield
    finally:
        sys.path[:] = saved


@contextmanager
def silenced_output() -> Iterator[io.StringIO]:
    """Send stdout and stderr to a sink, ignore warnings and mute logging.

    Logging is muted as well because handlers configured before the load
    hold a reference to the real stderr.
    """
    sink = io.StringIO()
    previous_disable = logging.root.manager.disable
    logging.disable(logging.CRITICAL)
    try:
        with warnings.catch_warnings(), redirect_stdout(sink), redirect_stderr(sink):
            warnings.simplefilter("ignore")
            yield sink
    finally:
        logging.disable(previous_disable)


def read_version(module: ModuleType, attributes: Sequence[str]) -> str | None:
    """Return the first version attribute the module defines."""
    for attribute in attributes:
        value = getattr(module, attribute, _MISSING)
        if value is not _MISSING:
            return version_to_text(value)
    return None


def load_version(
    module: str, search_path: Sequence[str], attributes: Sequence[str]
) -> VersionOutcome:
    """Import ``module`` quietly and read its version attribute.

    Anything the module raises, including ``SystemExit`` and other
    ``BaseException`` subclasses, becomes a failed outcome.
    ``KeyboardInterrupt`` propagates once the streams and the import path
    have been restored.
    """
    try:
        with scoped_search_path(search_path), silenced_output():
            loaded = importlib.import_module(module)
            value = read_version(loaded, attributes)
    except KeyboardInterrupt:
        raise
    except BaseException as exc:
        LOGGER.debug("loading %s failed: %s: %s", module, type(exc).__name__, exc)
        return VersionOutcome.failed(f"{type(exc).__name__}: {exc}")
    return VersionOutcome.found(value)


def report_interrupt(module: str) -> None:
    sys.stderr.write(f"modvers: interrupted while loading {module}\n")
    sys.stderr.flush()


class InProcessLoad(VersionStrategy):
    """Import each module in this process and read its version attribute."""

    name = "import"

    def __init__(self, search_path: list[str], attributes: tuple[str, ...]) -> None:
        super().__init__(search_path, attributes)
        self._guarded = False
        self._previous_handler: object = None

    def __enter__(self) -> InProcessLoad:
        try:
            self._previous_handler = signal.signal(
                signal.SIGINT, signal.default_int_handler
            )
        except ValueError:
            # Handlers can only be installed from the main thread.
            return self
        self._guarded = True
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._guarded:
            self._guarded = False
            if self._previous_handler is not None:
                signal.signal(signal.SIGINT, self._previous_handler)

    def _reassert_handler(self) -> None:
        # Modules may install their own SIGINT handler while loading. It is
        # checked before and after each load, so a handler a module installs
        # mid-import still applies until that one import returns.
        if not self._guarded:
            return
        if signal.getsignal(signal.SIGINT) is not signal.default_int_handler:
            signal.signal(signal.SIGINT, signal.default_int_handler)

    def resolve(self, module: str, file: Path | None) -> VersionOutcome:
        self._reassert_handler()
        try:
            return load_version(module, self.search_path, self.attributes)
        except KeyboardInterrupt:
            report_interrupt(module)
            raise LoadInterrupted(module) from None
        finally:
            self._reassert_handler()


__all__ = [
    "InProcessLoad",
    "load_version",
    "read_version",
    "report_interrupt",
    "scoped_search_path",
    "silenced_output",
]
