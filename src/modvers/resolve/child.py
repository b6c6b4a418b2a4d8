"""Entry point of the isolated child interpreter."""

from __future__ import annotations

import os
import sys

from modvers.resolve.inprocess import load_version
from modvers.resolve.isolated import encode_outcome


def _silence_standard_fds() -> None:
    sys.stdout.flush()
    sys.stderr.flush()
    devnull = os.open(os.devnull, os.O_WRONLY)
    try:
        os.dup2(devnull, 1)
        os.dup2(devnull, 2)
    finally:
        os.close(devnull)


def main(argv: list[str]) -> int:
    """Load one module and write its outcome line to the original stdout.

    Args:
        argv: module name, comma-separated version attributes, then the
            search path entries.
    """
    module, attributes, *search_path = argv

    # The protocol line goes through a private copy of fd 1; whatever the
    # module writes to fd 1 or fd 2, even from C code, is discarded.
    with os.fdopen(
        os.dup(1), "w", encoding="utf-8", errors="backslashreplace"
    ) as protocol:
        _silence_standard_fds()
        sys.path[:] = search_path
        outcome = load_version(module, search_path, attributes.split(","))
        protocol.write(encode_outcome(outcome))
        protocol.flush()
    return 0


__all__ = ["main"]
