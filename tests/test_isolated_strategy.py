from __future__ import annotations

import subprocess
import sys
from typing import TYPE_CHECKING, Any

import pytest

from modvers.models import VersionOutcome
from modvers.resolve.base import LoadInterrupted, ProtocolError
from modvers.resolve.inprocess import InProcessLoad
from modvers.resolve.isolated import (
    SubprocessLoad,
    child_command,
    decode_outcome,
    encode_outcome,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

ATTRIBUTES = ("__version__", "VERSION")
PREFIX = "mvfix_isolated_"


@pytest.fixture(autouse=True)
def _forget_fixture_modules() -> Iterator[None]:
    yield
    for name in [name for name in sys.modules if name.startswith(PREFIX)]:
        del sys.modules[name]


def _module(tmp_path: Path, name: str, content: str) -> str:
    (tmp_path / f"{PREFIX}{name}.py").write_text(content, encoding="utf-8")
    return f"{PREFIX}{name}"


def _search_path(tmp_path: Path) -> list[str]:
    return [str(tmp_path), *sys.path]


def test_encode_outcome_wire_format() -> None:
    assert encode_outcome(VersionOutcome.found("1.2")) == "1,1.2\n"
    assert encode_outcome(VersionOutcome.unknown()) == "1,\n"
    assert encode_outcome(VersionOutcome.failed("boom")) == "0,\n"
    assert encode_outcome(VersionOutcome.found("1\n2")) == "1,1 2\n"


def test_decode_outcome_accepts_one_line() -> None:
    assert decode_outcome("m", "1,1.2\n", 0) == VersionOutcome(ok=True, value="1.2")
    assert decode_outcome("m", "1,\n", 0) == VersionOutcome(ok=True, value=None)
    assert decode_outcome("m", "0,\n", 0) == VersionOutcome(ok=False)


def test_decode_outcome_splits_on_first_comma() -> None:
    assert decode_outcome("m", "1,1,2,3\n", 0).value == "1,2,3"


def test_decode_outcome_ignores_exit_status_when_line_is_well_formed() -> None:
    assert decode_outcome("m", "1,4.0\n", 1) == VersionOutcome(ok=True, value="4.0")


@pytest.mark.parametrize(
    "output",
    ["", "1,1.0", "2,1.0\n", "yes,1.0\n", "1,1.0\nextra\n", "noise\n1,1.0\n", "1\n"],
)
def test_decode_outcome_rejects_malformed_output(output: str) -> None:
    with pytest.raises(ProtocolError) as exc_info:
        decode_outcome("mod", output, 7)

    assert exc_info.value.module == "mod"
    assert exc_info.value.output == output
    assert exc_info.value.returncode == 7


def test_child_command_carries_module_attributes_and_path() -> None:
    command = child_command("pkg.mod", ["/a", "", "/b"], ATTRIBUTES)

    assert command[0] == sys.executable
    assert command[1] == "-c"
    assert command[4:] == ["pkg.mod", "__version__,VERSION", "/a", "", "/b"]


def test_subprocess_reads_version(tmp_path: Path) -> None:
    name = _module(tmp_path, "versioned", '__version__ = "1.23"\n')

    outcome = SubprocessLoad(_search_path(tmp_path), ATTRIBUTES).resolve(name, None)

    assert outcome == VersionOutcome(ok=True, value="1.23")
    assert name not in sys.modules


@pytest.mark.parametrize(
    ("name", "content"),
    [
        ("parity_string", '__version__ = "5.6.7"\n'),
        ("parity_tuple", "VERSION = (1, 2)\n"),
        ("parity_none", "X = 1\n"),
        ("parity_broken", "raise ImportError('nope')\n"),
        ("parity_exit", "import sys\nsys.exit(0)\n"),
        ("parity_surrogate", '__version__ = "1.0\\udcff"\n'),
        (
            "parity_base_exception",
            "class Boom(BaseException):\n    pass\n\nraise Boom()\n",
        ),
    ],
)
def test_subprocess_matches_in_process_outcome(
    tmp_path: Path, name: str, content: str
) -> None:
    module = _module(tmp_path, name, content)
    search_path = _search_path(tmp_path)

    isolated = SubprocessLoad(search_path, ATTRIBUTES).resolve(module, None)
    in_process = InProcessLoad(search_path, ATTRIBUTES).resolve(module, None)

    assert isolated == in_process


def test_subprocess_missing_module_fails(tmp_path: Path) -> None:
    outcome = SubprocessLoad(_search_path(tmp_path), ATTRIBUTES).resolve(
        f"{PREFIX}absent", None
    )

    assert outcome == VersionOutcome.failed()


def test_subprocess_discards_output_written_to_file_descriptors(
    tmp_path: Path,
) -> None:
    name = _module(
        tmp_path,
        "fd_noise",
        "import os, sys\n"
        "os.write(1, b'raw stdout\\n')\n"
        "os.write(2, b'raw stderr\\n')\n"
        "print('printed')\n"
        '__version__ = "8.0"\n',
    )

    outcome = SubprocessLoad(_search_path(tmp_path), ATTRIBUTES).resolve(name, None)

    assert outcome.value == "8.0"


def test_subprocess_does_not_wait_for_module_exit_hooks(tmp_path: Path) -> None:
    name = _module(
        tmp_path,
        "exit_hook",
        "import atexit, os\n"
        "atexit.register(lambda: os.write(1, b'late output\\n'))\n"
        '__version__ = "1.1"\n',
    )

    outcome = SubprocessLoad(_search_path(tmp_path), ATTRIBUTES).resolve(name, None)

    assert outcome.value == "1.1"


def test_subprocess_child_crash_is_a_protocol_error(tmp_path: Path) -> None:
    name = _module(tmp_path, "crashes", "import os\nos._exit(3)\n")

    with pytest.raises(ProtocolError) as exc_info:
        SubprocessLoad(_search_path(tmp_path), ATTRIBUTES).resolve(name, None)

    assert exc_info.value.output == ""
    assert exc_info.value.returncode == 3


class _InterruptedProcess:
    def __init__(self) -> None:
        self.killed = False
        self.waited = False
        self.returncode = None

    def communicate(self) -> tuple[str, str]:
        raise KeyboardInterrupt

    def kill(self) -> None:
        self.killed = True

    def wait(self) -> int:
        self.waited = True
        return -9


def test_subprocess_interrupt_kills_child_and_reports_module(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    process = _InterruptedProcess()

    def _fake_popen(*args: Any, **kwargs: Any) -> _InterruptedProcess:
        return process

    monkeypatch.setattr(subprocess, "Popen", _fake_popen)

    with pytest.raises(LoadInterrupted) as exc_info:
        SubprocessLoad(_search_path(tmp_path), ATTRIBUTES).resolve("slow.mod", None)

    assert exc_info.value.module == "slow.mod"
    assert process.killed
    assert process.waited
    assert "interrupted while loading slow.mod" in capsys.readouterr().err
