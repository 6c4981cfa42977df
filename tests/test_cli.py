"""Tests for the CLI module: arg parsing, exit codes, file runs, and the REPL."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from quill.cli import (
    MAX_DEPTH_CEILING,
    PROMPT,
    CliOptions,
    build_parser,
    main,
    repl,
    run_file,
    run_program,
)


def _options(**overrides) -> CliOptions:
    values = {
        "script": None,
        "output": None,
        "max_depth": 128,
        "tab_width": 4,
        "tokens": False,
        "debug": False,
    }
    values.update(overrides)
    return CliOptions(**values)


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_no_arguments(self) -> None:
        ns = build_parser().parse_args([])
        assert ns.script is None
        assert ns.output is None

    def test_script_only(self) -> None:
        ns = build_parser().parse_args(["main.ql"])
        assert ns.script == "main.ql"
        assert ns.output is None

    def test_script_and_output(self) -> None:
        ns = build_parser().parse_args(["main.ql", "out.txt"])
        assert ns.output == "out.txt"

    def test_limits(self) -> None:
        ns = build_parser().parse_args(["main.ql", "--max-depth", "10", "--tab-width", "8"])
        assert ns.max_depth == 10
        assert ns.tab_width == 8

    def test_dump_flags(self) -> None:
        ns = build_parser().parse_args(["main.ql", "--tokens", "--debug"])
        assert ns.tokens is True
        assert ns.debug is True

    def test_non_integer_depth_exits(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["main.ql", "--max-depth", "deep"])


# ---------------------------------------------------------------------------
# Running programs
# ---------------------------------------------------------------------------


class TestRunProgram:
    def test_formats_results(self) -> None:
        lines = run_program('1; "hi"; -2.5; !true;', "t.ql", _options())
        assert lines == ["1", "hi", "-2.5", "false"]

    def test_block_value(self) -> None:
        assert run_program("{ 1; 2; }", "t.ql", _options()) == ["2"]

    def test_depth_option_applies(self) -> None:
        from quill.errors import ParseErrors

        with pytest.raises(ParseErrors):
            run_program("((1));", "t.ql", _options(max_depth=2))

    def test_run_file(self, tmp_path: Path) -> None:
        script = tmp_path / "main.ql"
        script.write_text("1;\n2;\n")
        assert run_file(_options(script=script)) == "1\n2\n"


# ---------------------------------------------------------------------------
# Exit codes via main()
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success_writes_stdout(self, tmp_path: Path, capsys) -> None:
        script = tmp_path / "main.ql"
        script.write_text('"hello";\n')
        assert main([str(script)]) == 0
        assert capsys.readouterr().out == "hello\n"

    def test_output_file(self, tmp_path: Path) -> None:
        script = tmp_path / "main.ql"
        script.write_text("(4);\n")
        out = tmp_path / "out.txt"
        assert main([str(script), str(out)]) == 0
        assert out.read_text() == "4\n"

    def test_lex_error_returns_1(self, tmp_path: Path, capsys) -> None:
        script = tmp_path / "bad.ql"
        script.write_text("1; @ #\n")
        assert main([str(script)]) == 1
        err = capsys.readouterr().err
        assert err.count("error: Unexpected character") == 2

    def test_parse_error_returns_1(self, tmp_path: Path, capsys) -> None:
        script = tmp_path / "bad.ql"
        script.write_text("(1;\n")
        assert main([str(script)]) == 1
        err = capsys.readouterr().err
        assert "Expected ')' after expression." in err
        assert "bad.ql:1:3" in err

    def test_eval_error_returns_2(self, tmp_path: Path, capsys) -> None:
        script = tmp_path / "bad.ql"
        script.write_text('-"text";\n')
        assert main([str(script)]) == 2
        assert "Unsupported unary operator" in capsys.readouterr().err

    def test_missing_file_returns_2(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "missing.ql")]) == 2
        assert "cannot read" in capsys.readouterr().err

    def test_non_positive_depth_returns_2(self, tmp_path: Path, capsys) -> None:
        script = tmp_path / "main.ql"
        script.write_text("1;\n")
        assert main([str(script), "--max-depth", "0"]) == 2
        assert "--max-depth" in capsys.readouterr().err

    def test_depth_above_ceiling_returns_2(self, tmp_path: Path, capsys) -> None:
        script = tmp_path / "deep.ql"
        script.write_text("(" * 400 + "1" + ")" * 400 + ";\n")
        assert main([str(script), "--max-depth", "1000"]) == 2
        assert f"at most {MAX_DEPTH_CEILING}" in capsys.readouterr().err

    def test_depth_at_ceiling_is_guarded(self, tmp_path: Path, capsys) -> None:
        script = tmp_path / "deep.ql"
        script.write_text("(" * 400 + "1" + ")" * 400 + ";\n")
        assert main([str(script), "--max-depth", str(MAX_DEPTH_CEILING)]) == 1
        err = capsys.readouterr().err
        assert f"Nesting exceeds maximum depth of {MAX_DEPTH_CEILING}." in err

    def test_invalid_utf8_returns_2(self, tmp_path: Path, capsys) -> None:
        script = tmp_path / "binary.ql"
        script.write_bytes(b"1;\n\xff\xfe;\n")
        assert main([str(script)]) == 2
        assert "not valid UTF-8" in capsys.readouterr().err

    def test_debug_dumps_do_not_change_output(self, tmp_path: Path, capsys) -> None:
        script = tmp_path / "main.ql"
        script.write_text("-1;\n")
        assert main([str(script), "--tokens", "--debug"]) == 0
        assert capsys.readouterr().out == "-1\n"


# ---------------------------------------------------------------------------
# REPL
# ---------------------------------------------------------------------------


class TestRepl:
    def test_session(self, capsys) -> None:
        stdin = io.StringIO("1;\n\n-true;\n2;\n")
        stdout = io.StringIO()
        repl(_options(), stdin, stdout)
        assert stdout.getvalue() == f"{PROMPT}1\n{PROMPT}{PROMPT}{PROMPT}2\n{PROMPT}\n"
        assert "Unsupported unary operator '-' for Boolean" in capsys.readouterr().err

    def test_errors_do_not_end_session(self, capsys) -> None:
        stdin = io.StringIO("(;\n@\n3;\n")
        stdout = io.StringIO()
        repl(_options(), stdin, stdout)
        assert "3\n" in stdout.getvalue()
        err = capsys.readouterr().err
        assert "Expected expression." in err
        assert "Unexpected character: '@'." in err

    def test_main_without_script_starts_repl(self, tmp_path: Path, monkeypatch, capsys) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setattr("sys.stdin", io.StringIO('"x";\n'))
        assert main([]) == 0
        assert capsys.readouterr().out == f"{PROMPT}x\n{PROMPT}\n"
