"""Run orchestration: targets in, one reported line per target out."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TextIO

from modvers.config import DEFAULT_VERSION_ATTRIBUTES, ConfigError
from modvers.models import DisplayConfig
from modvers.report.lines import Reporter
from modvers.resolve.base import ProtocolError
from modvers.resolve.registry import STRATEGIES, create_strategy
from modvers.scan.paths import find_module_file, scan_modules
from modvers.utils import normalize_module_name

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence
    from pathlib import Path

    from modvers.config import OutputFormat

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class VersionRequest:
    modules: tuple[str, ...] = ()
    all_modules: bool = False
    method: str = "text"
    names: bool = False
    no_names: bool = False
    show_files: bool = False
    attributes: tuple[str, ...] = DEFAULT_VERSION_ATTRIBUTES
    output_format: OutputFormat = "text"


@dataclass(frozen=True)
class RunSummary:
    reported: int = 0
    internal_errors: tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.internal_errors


def validate_request(request: VersionRequest) -> None:
    """Reject invalid option combinations before any module is processed.

    Raises:
        ConfigError: On conflicting or missing options.
    """
    if request.modules and request.all_modules:
        msg = "module names and --all are mutually exclusive"
        raise ConfigError(msg)
    if not request.modules and not request.all_modules:
        msg = "no modules requested (give module names or --all)"
        raise ConfigError(msg)
    if request.method not in STRATEGIES:
        msg = (
            f"Unknown method '{request.method}'. "
            f"Valid methods: {', '.join(sorted(STRATEGIES))}"
        )
        raise ConfigError(msg)
    build_display_config(request)


def build_display_config(request: VersionRequest) -> DisplayConfig:
    """Derive the display settings for a run.

    Names are shown by default whenever more than one module may be reported.
    """
    if request.names and request.no_names:
        msg = "--names and --no-names are mutually exclusive"
        raise ConfigError(msg)

    if request.names:
        show_name = True
    elif request.no_names:
        show_name = False
    else:
        show_name = request.all_modules or len(request.modules) > 1

    return DisplayConfig(show_name=show_name, show_file=request.show_files)


def iter_targets(
    request: VersionRequest, search_path: Sequence[str]
) -> Iterator[tuple[str, Path | None]]:
    """Yield ``(module, file)`` pairs in reporting order.

    A requested name that is not a valid module name is passed through
    unchanged with no file, so it is reported as failed.
    """
    if request.all_modules:
        for record in scan_modules(search_path):
            yield record.name, record.file
        return

    for raw in request.modules:
        try:
            name = normalize_module_name(raw)
        except ValueError as exc:
            LOGGER.debug("%s", exc)
            yield raw, None
            continue
        yield name, find_module_file(name, search_path)


def run(
    request: VersionRequest,
    *,
    search_path: Sequence[str],
    out: TextIO | None = None,
) -> RunSummary:
    """Resolve and report the version of every requested module.

    Modules are processed one at a time in target order; a module that
    fails to load is reported as failed and the run goes on. A child
    protocol violation is logged as an internal error for that module and
    no result line is written for it.

    Raises:
        ConfigError: If the request is invalid; nothing has been written.
        LoadInterrupted: If the operator interrupts a module load.
    """
    validate_request(request)
    display = build_display_config(request)
    reporter = Reporter(out or sys.stdout, display, request.output_format)
    strategy = create_strategy(request.method, search_path, request.attributes)

    reported = 0
    internal_errors: list[str] = []
    with strategy:
        for name, file in iter_targets(request, search_path):
            try:
                outcome = strategy.resolve(name, file)
            except ProtocolError as exc:
                LOGGER.error("internal error: %s", exc)
                internal_errors.append(name)
                continue
            reporter.report(name, file, outcome)
            reported += 1

    return RunSummary(reported=reported, internal_errors=tuple(internal_errors))


__all__ = [
    "RunSummary",
    "VersionRequest",
    "build_display_config",
    "iter_targets",
    "run",
    "validate_request",
]
