# Copyright 2026 ShapeQL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the ShapeQL CLI entry point."""

import logging
import sys
from pathlib import Path

import pytest

from shapeql.cli.main import main

# ###############
# Helpers
# ###############

DATA_DIR = Path(__file__).parent.parent / "data"


def _run(monkeypatch: pytest.MonkeyPatch, *args: str) -> int:
    """Run main() with the given arguments and return its exit code."""
    monkeypatch.setattr(sys, "argv", ["shapeql", *args])
    with pytest.raises(SystemExit) as exc_info:
        main()
    code = exc_info.value.code
    assert isinstance(code, int)
    return code


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


# ###############
# General
# ###############


def test_main_no_args_prints_help_and_exits(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """main() with no subcommand prints help and exits with code 0."""
    assert _run(monkeypatch) == 0
    assert "usage: shapeql" in capsys.readouterr().out


def test_verbose_enables_debug_logging(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[int] = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs["level"]))
    source = _write(tmp_path, "api.ts", "interface Query { a: string }")
    assert _run(monkeypatch, "--verbose", "check", str(source)) == 0
    assert calls == [logging.DEBUG]


# -------- print tests --------


def test_print_writes_sdl_to_stdout(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path, "api.ts", "interface Query { hello: string }")
    assert _run(monkeypatch, "print", str(source)) == 0
    assert capsys.readouterr().out == "type Query {\n  hello: String!\n}\n"


def test_print_example_file(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(monkeypatch, "print", str(DATA_DIR / "library.ts")) == 0
    out = capsys.readouterr().out
    assert "type Book {" in out
    assert "enum Genre {" in out
    assert "scalar Date" in out


def test_print_to_output_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path, "api.ts", "interface Query { hello: string }")
    output = tmp_path / "schema.graphql"
    assert _run(monkeypatch, "print", str(source), "--output", str(output)) == 0
    assert output.read_text(encoding="utf-8") == "type Query {\n  hello: String!\n}\n"
    assert "Wrote schema to" in capsys.readouterr().out


def test_print_with_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    source = _write(tmp_path, "api.ts", "type Level = 'LOW' | 'HIGH'\ninterface Query { level: Level; home: URL }")
    config = _write(tmp_path, "shapeql.yaml", "string-unions-as-enums: true\ncustom-scalars: [URL]\n")
    assert _run(monkeypatch, "print", str(source), "--config", str(config)) == 0
    out = capsys.readouterr().out
    assert "enum Level {" in out
    assert "scalar URL" in out


def test_print_compile_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path, "api.ts", "interface User { id: ID }")
    assert _run(monkeypatch, "print", str(source)) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error: No 'Query' or 'Mutation' interface")


def test_print_invalid_config(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path, "api.ts", "interface Query { a: string }")
    config = _write(tmp_path, "shapeql.yaml", "unknown: 1\n")
    assert _run(monkeypatch, "print", str(source), "--config", str(config)) == 1
    assert "unknown key(s): unknown" in capsys.readouterr().err


def test_print_mismatched_default(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path, "api.ts", "interface Query { f(args: { a?: Default<Int, 1.5> }): string }")
    assert _run(monkeypatch, "print", str(source)) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "does not match its type" in captured.err


# -------- check tests --------


def test_check_reports_success(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    assert _run(monkeypatch, "check", str(DATA_DIR / "library.ts")) == 0
    out = capsys.readouterr().out
    assert "named type(s)" in out
    assert "No issues found." in out


def test_check_missing_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    assert _run(monkeypatch, "check", str(tmp_path / "missing.ts")) == 1
    assert "Error: Cannot read" in capsys.readouterr().err


def test_check_syntax_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    source = _write(tmp_path, "api.ts", "interface Query { a string }")
    assert _run(monkeypatch, "check", str(source)) == 1
    assert "Syntax error in" in capsys.readouterr().err
