"""Version lookup by importing the module in a child interpreter.

The child reports back over its stdout with a single line::

    <ok-flag>,<value>\\n

where ``ok-flag`` is ``0`` or ``1`` and ``value`` is empty when the module has
no version. Anything else on the pipe is a protocol violation.
"""

from __future__ import annotations

import logging
import re
import subprocess
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from modvers.models import VersionOutcome
from modvers.resolve.base import LoadInterrupted, ProtocolError, VersionStrategy
from modvers.resolve.inprocess import report_interrupt

if TYPE_CHECKING:
    from collections.abc import Sequence

LOGGER = logging.getLogger(__name__)

_WIRE_LINE = re.compile(r"\A([01]),([^\n]*)\n\Z")

# Makes the modvers package importable in the child before the child
# replaces sys.path with the parent's search path. os._exit skips the
# loaded module's atexit hooks and does not wait for its threads.
_BOOTSTRAP = (
    "import os, sys\n"
    "sys.path.insert(0, sys.argv[1])\n"
    "from modvers.resolve.child import main\n"
    "os._exit(main(sys.argv[2:]))\n"
)

_PACKAGE_ROOT = str(Path(__file__).resolve().parents[2])


def encode_outcome(outcome: VersionOutcome) -> str:
    """Serialize an outcome as one wire line."""
    value = outcome.value or ""
    value = value.replace("\r", " ").replace("\n", " ")
    return f"{1 if outcome.ok else 0},{value}\n"


def decode_outcome(module: str, output: str, returncode: int | None) -> VersionOutcome:
    """Parse the child's complete output.

    The exit status is only carried into the error: a child that printed a
    well-formed line and then exited badly still produced its answer.

    Raises:
        ProtocolError: If the output is not exactly one well-formed line.
    """
    match = _WIRE_LINE.match(output)
    if match is None:
        raise ProtocolError(module, output, returncode)
    flag, value = match.groups()
    return VersionOutcome(ok=flag == "1", value=value or None)


def child_command(
    module: str, search_path: Sequence[str], attributes: Sequence[str]
) -> list[str]:
    return [
        sys.executable,
        "-c",
        _BOOTSTRAP,
        _PACKAGE_ROOT,
        module,
        ",".join(attributes),
        *search_path,
    ]


class SubprocessLoad(VersionStrategy):
    """Import each module in a fresh interpreter to contain its side effects."""

    name = "subprocess"

    def resolve(self, module: str, file: Path | None) -> VersionOutcome:
        command = child_command(module, self.search_path, self.attributes)
        proc = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
        try:
            output, _ = proc.communicate()
        except KeyboardInterrupt:
            proc.kill()
            proc.wait()
            report_interrupt(module)
            raise LoadInterrupted(module) from None

        LOGGER.debug("child for %s exited with status %s", module, proc.returncode)
        return decode_outcome(module, output, proc.returncode)


__all__ = [
    "SubprocessLoad",
    "child_command",
    "decode_outcome",
    "encode_outcome",
]
