from __future__ import annotations

import json
import sys
from typing import TYPE_CHECKING

import pytest

from modvers.cli import main

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

PREFIX = "mvfix_cli_"


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    yield
    for name in [name for name in sys.modules if name.startswith(PREFIX)]:
        del sys.modules[name]


def _write_lib(root: Path) -> Path:
    root.mkdir(parents=True, exist_ok=True)
    (root / f"{PREFIX}alpha.py").write_text('__version__ = "1.0"\n', encoding="utf-8")
    (root / f"{PREFIX}beta.py").write_text("X = 1\n", encoding="utf-8")
    return root


def test_cli_single_module(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    lib = _write_lib(tmp_path / "lib")

    exit_code = main(["-I", str(lib), f"{PREFIX}alpha"])

    assert exit_code == 0
    assert capsys.readouterr().out == "1.0\n"


def test_cli_absent_module_exits_zero(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main([f"{PREFIX}absent"])

    assert exit_code == 0
    assert capsys.readouterr().out == "(failed)\n"


def test_cli_multiple_modules_with_files(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    lib = _write_lib(tmp_path / "lib")

    exit_code = main(
        ["-I", str(lib), "--files", f"{PREFIX}alpha", f"{PREFIX}beta", f"{PREFIX}gone"]
    )

    assert exit_code == 0
    assert capsys.readouterr().out.splitlines() == [
        f"{PREFIX}alpha:\t1.0\t{lib.resolve() / f'{PREFIX}alpha.py'}",
        f"{PREFIX}beta:\t(unknown)\t{lib.resolve() / f'{PREFIX}beta.py'}",
        f"{PREFIX}gone:\t(failed)",
    ]


@pytest.mark.parametrize("method", ["text", "import", "subprocess"])
def test_cli_methods_agree(
    tmp_path: Path, capsys: pytest.CaptureFixture[str], method: str
) -> None:
    lib = _write_lib(tmp_path / "lib")

    exit_code = main(["-I", str(lib), "-m", method, "-n", f"{PREFIX}alpha"])

    assert exit_code == 0
    assert capsys.readouterr().out == f"{PREFIX}alpha:\t1.0\n"


def test_cli_conflicting_name_flags_exit_before_output(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    lib = _write_lib(tmp_path / "lib")

    exit_code = main(["-I", str(lib), "-n", "-N", f"{PREFIX}alpha"])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "modvers: error:" in captured.err


def test_cli_names_with_all_is_a_config_error(
    capsys: pytest.CaptureFixture[str],
) -> None:
    exit_code = main(["--all", "os"])

    assert exit_code == 2
    assert capsys.readouterr().out == ""


def test_cli_without_modules_is_a_config_error(
    capsys: pytest.CaptureFixture[str],
) -> None:
    exit_code = main([])

    assert exit_code == 2
    assert "no modules requested" in capsys.readouterr().err


def test_cli_unknown_method_is_rejected_by_parser() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["-m", "magic", "os"])

    assert exc_info.value.code == 2


def test_cli_jsonl_format(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    lib = _write_lib(tmp_path / "lib")

    exit_code = main(["-I", str(lib), "--format", "jsonl", f"{PREFIX}alpha"])

    assert exit_code == 0
    record = json.loads(capsys.readouterr().out)
    assert record == {
        "file": str(lib.resolve() / f"{PREFIX}alpha.py"),
        "module": f"{PREFIX}alpha",
        "status": "ok",
        "version": "1.0",
    }


def test_cli_reads_config_file(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    lib = _write_lib(tmp_path / "work" / "lib")
    (tmp_path / "work" / "modvers.toml").write_text(
        'include = ["lib"]\nshow_files = true\nmethod = "import"\n',
        encoding="utf-8",
    )

    exit_code = main([f"{PREFIX}alpha"])

    assert exit_code == 0
    assert capsys.readouterr().out == f"1.0\t{lib.resolve() / f'{PREFIX}alpha.py'}\n"


def test_cli_invalid_config_file_exits_before_output(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "work" / "modvers.toml").write_text(
        'method = "magic"\n', encoding="utf-8"
    )

    exit_code = main(["os"])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Invalid config" in captured.err

