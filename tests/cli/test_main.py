# Copyright 2026 XIDL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the xidl CLI entry point."""

import json
import sys
from pathlib import Path

import pytest

from xidl.cli.main import main

# ###############
# Helpers
# ###############


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    """Run main() with the given arguments and return its exit code."""
    monkeypatch.setattr(sys, "argv", ["xidl", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    code = exc_info.value.code
    assert isinstance(code, int)
    return code


# ###############
# Public Interface
# ###############


def test_main_no_args_prints_help_and_exits(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """main() with no subcommand prints help and exits with code 0."""
    assert _run(monkeypatch) == 0
    assert "check" in capsys.readouterr().out


# -------- check tests --------


def test_check_valid_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """check exits with code 0 and reports success for a well-formed file."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "good.idl").write_text("namespace test {}\n")
    assert _run(monkeypatch, "check", "good.idl") == 0
    assert "No issues found." in capsys.readouterr().out


def test_check_reports_each_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """check prints one file:line:column line per diagnostic and exits with code 1."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "bad.idl").write_text('namespace 123abc {}\nnamespace a { enum E { X = "s" } }\n')
    assert _run(monkeypatch, "check", "bad.idl") == 1
    err = capsys.readouterr().err
    assert "bad.idl:1:11:" in err
    assert "Expected identifier, found integer literal '123'" in err
    assert "bad.idl:2:28:" in err
    assert "Found 2 error(s)." in err


def test_check_discovers_project_sources(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """check without arguments checks the sources selected by the project config."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / "a.idl").write_text("namespace a {}\n")
    (tmp_path / "sub").mkdir()
    (tmp_path / "sub" / "b.idl").write_text("namespace b {}\n")
    assert _run(monkeypatch, "check") == 0
    out = capsys.readouterr().out
    assert "Checking 2 IDL file(s)" in out


def test_check_directory_argument(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """check accepts a project directory and honours its config file."""
    project = tmp_path / "project"
    (project / "idl").mkdir(parents=True)
    (project / ".xidl.yaml").write_text("sources:\n  - idl/*.idl\n")
    (project / "idl" / "a.idl").write_text("namespace a {}\n")
    (project / "ignored.idl").write_text("this is not idl\n")
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "check", str(project)) == 0
    assert "Checking 1 IDL file(s)" in capsys.readouterr().out


def test_check_with_no_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "check") == 0
    assert "No IDL files found." in capsys.readouterr().out


def test_check_missing_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "check", "missing.idl") == 1
    assert "does not exist" in capsys.readouterr().err


def test_check_max_diagnostics(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    """max-diagnostics caps the lines printed per file but not the error total."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".xidl.yaml").write_text("max-diagnostics: 1\n")
    (tmp_path / "bad.idl").write_text("namespace a { enum E { A = 1.5, B = 2.5, C = 3.5 } }\n")
    assert _run(monkeypatch, "check", "bad.idl") == 1
    err = capsys.readouterr().err
    assert err.count("bad.idl:1:") == 1
    assert "2 more error(s) not shown" in err
    assert "Found 3 error(s)." in err


def test_check_invalid_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".xidl.yaml").write_text("unknown: true\n")
    assert _run(monkeypatch, "check") == 1
    assert "Error" in capsys.readouterr().err


def test_check_directory_uses_its_own_limit(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """A project directory argument applies the max-diagnostics of its own config."""
    project = tmp_path / "proj"
    project.mkdir()
    (project / ".xidl.yaml").write_text("max-diagnostics: 1\n")
    (project / "b.idl").write_text("namespace b { enum E { A = 1.5, B = 2.5, C = 3.5 } }\n")
    monkeypatch.chdir(tmp_path)
    assert _run(monkeypatch, "check", "proj") == 1
    err = capsys.readouterr().err
    assert err.count("b.idl:1:") == 1
    assert "2 more error(s) not shown" in err


def test_check_clean_file_ignores_invalid_cwd_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """An explicit file that parses cleanly does not need the working directory config."""
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".xidl.yaml").write_text("unknown: true\n")
    (tmp_path / "good.idl").write_text("namespace good {}\n")
    assert _run(monkeypatch, "check", "good.idl") == 0
    assert "No issues found." in capsys.readouterr().out


def test_check_unreadable_encoding(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "latin1.idl").write_bytes(b"namespace caf\xe9 {}")
    assert _run(monkeypatch, "check", "latin1.idl") == 1
    assert "UTF-8" in capsys.readouterr().err


# -------- dump tests --------


def test_dump_prints_json(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "a.idl"
    source.write_text("namespace Windows.Test { enum E { X = 0x1 } }\n")
    assert _run(monkeypatch, "dump", str(source)) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["namespaces"][0]["name"] == ["Windows", "Test"]
    assert data["namespaces"][0]["declarations"][0]["members"][0]["value"]["text"] == "0x1"


def test_dump_to_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    source = tmp_path / "a.idl"
    source.write_text("namespace a {}\n")
    output = tmp_path / "out" / "a.xidl.json"
    assert _run(monkeypatch, "dump", str(source), "-o", str(output)) == 0
    assert json.loads(output.read_text())["namespaces"][0]["name"] == ["a"]


def test_dump_with_errors_still_emits_tree(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = tmp_path / "a.idl"
    source.write_text("namespace a { delegate void D() }\n")
    assert _run(monkeypatch, "dump", str(source)) == 1
    captured = capsys.readouterr()
    assert json.loads(captured.out)["namespaces"][0]["declarations"][0]["name"] == "D"
    assert "Expected ';', found '}'" in captured.err


def test_dump_missing_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(monkeypatch, "dump", str(tmp_path / "missing.idl")) == 1
    assert "Cannot read" in capsys.readouterr().err


def test_dump_unwritable_output(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """A failure writing the artifact is reported as an error, not a traceback."""
    source = tmp_path / "a.idl"
    source.write_text("namespace a {}\n")
    (tmp_path / "blocker").write_text("not a directory\n")
    assert _run(monkeypatch, "dump", str(source), "-o", str(tmp_path / "blocker" / "out.json")) == 1
    assert "Cannot write artifact" in capsys.readouterr().err


# -------- build tests --------


def test_build_writes_artifacts(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "ui").mkdir()
    (tmp_path / "ui" / "widget.idl").write_text("namespace ui { struct Widget { Int32 size; } }\n")
    assert _run(monkeypatch, "build", str(tmp_path)) == 0
    assert (tmp_path / ".xidl-build" / "ui" / "widget.xidl.json").exists()


def test_build_uses_configured_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".xidl.yaml").write_text("build-directory: out\n")
    (tmp_path / "a.idl").write_text("namespace a {}\n")
    assert _run(monkeypatch, "build", str(tmp_path)) == 0
    assert (tmp_path / "out" / "a.xidl.json").exists()


def test_build_skips_failing_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / "good.idl").write_text("namespace good {}\n")
    (tmp_path / "bad.idl").write_text("namespace 1bad {}\n")
    assert _run(monkeypatch, "build", str(tmp_path)) == 1
    assert (tmp_path / ".xidl-build" / "good.xidl.json").exists()
    assert not (tmp_path / ".xidl-build" / "bad.xidl.json").exists()
    assert "1 file(s) failed" in capsys.readouterr().err


def test_build_missing_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    assert _run(monkeypatch, "build", str(tmp_path / "nope")) == 1


def test_build_with_no_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(monkeypatch, "build", str(tmp_path)) == 0
    assert "No IDL files found." in capsys.readouterr().out


def test_build_unwritable_build_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    (tmp_path / ".xidl.yaml").write_text("build-directory: blocker\n")
    (tmp_path / "blocker").write_text("not a directory\n")
    (tmp_path / "a.idl").write_text("namespace a {}\n")
    assert _run(monkeypatch, "build", str(tmp_path)) == 1
    err = capsys.readouterr().err
    assert "Error" in err
    assert "Cannot write artifact" in err
