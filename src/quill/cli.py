"""Command-line interface for Quill."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TextIO

from quill.errors import EvalError, LexErrors, ParseErrors
from quill.eval import DEFAULT_MAX_DEPTH
from quill.lexer import DEFAULT_TAB_WIDTH

PROMPT = "> "
CONFIG_NAME = "quill.toml"

# The parser spends about four interpreter frames per nesting level
MAX_DEPTH_CEILING = 200


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    script: Path | None
    output: Path | None
    max_depth: int
    tab_width: int
    tokens: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="quill",
        description="Quill scripting language. Without a script, starts a REPL.",
    )
    p.add_argument("script", nargs="?", help="Source file to run")
    p.add_argument("output", nargs="?", help="Write results here instead of stdout")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--max-depth",
        type=int,
        default=None,
        metavar="N",
        help=(
            f"Maximum expression/block nesting, at most {MAX_DEPTH_CEILING} "
            f"(default: {DEFAULT_MAX_DEPTH})"
        ),
    )
    p.add_argument(
        "--tab-width",
        type=int,
        default=None,
        metavar="N",
        help=f"Columns a tab advances in error positions (default: {DEFAULT_TAB_WIDTH})",
    )
    p.add_argument("--tokens", action="store_true", help="Dump tokens to stderr")
    p.add_argument("--debug", action="store_true", help="Dump AST to stderr")
    return p


def load_config(config_path: Path | None, base_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else base_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _config_int(
    config: dict[str, Any], table: str, key: str, ceiling: int | None = None
) -> int | None:
    section = config.get(table)
    if not isinstance(section, dict):
        return None
    value = section.get(key)
    # bool is an int subclass; reject it along with non-positive values
    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        return None
    if ceiling is not None and value > ceiling:
        return None
    return value


def _positive(value: int, flag: str, ceiling: int | None = None) -> int:
    if value <= 0:
        raise argparse.ArgumentTypeError(f"{flag} must be a positive integer, got {value}")
    if ceiling is not None and value > ceiling:
        raise argparse.ArgumentTypeError(f"{flag} must be at most {ceiling}, got {value}")
    return value


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    script = Path(args.script) if args.script else None
    base_dir = script.parent if script is not None else Path(".")
    if not base_dir.parts:
        base_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, base_dir)

    max_depth = (
        _config_int(config, "limits", "max_depth", MAX_DEPTH_CEILING) or DEFAULT_MAX_DEPTH
    )
    if args.max_depth is not None:
        max_depth = _positive(args.max_depth, "--max-depth", MAX_DEPTH_CEILING)

    tab_width = _config_int(config, "lexer", "tab_width") or DEFAULT_TAB_WIDTH
    if args.tab_width is not None:
        tab_width = _positive(args.tab_width, "--tab-width")

    output = Path(args.output) if args.output else None

    return CliOptions(
        script=script,
        output=output,
        max_depth=max_depth,
        tab_width=tab_width,
        tokens=args.tokens,
        debug=args.debug,
    )


def run_program(source: str, filename: str, options: CliOptions) -> list[str]:
    """Lex, parse and run *source*; return the formatted statement results."""
    from quill.debug import dump_ast, dump_tokens
    from quill.eval import EvalContext, run
    from quill.lexer import tokenize
    from quill.parser import Parser
    from quill.values import format_value

    tokens = tokenize(source, filename, options.tab_width)
    if options.tokens:
        dump_tokens(tokens)

    statements = Parser(tokens, source, filename, options.max_depth).parse()
    if options.debug:
        dump_ast(statements)

    ctx = EvalContext(filename=filename, source=source, max_depth=options.max_depth)
    return [format_value(v) for v in run(statements, ctx)]


def run_file(options: CliOptions) -> str:
    """Read and run the script file, returning the text to print."""
    assert options.script is not None
    source = options.script.read_text(encoding="utf-8")
    lines = run_program(source, str(options.script), options)
    return "".join(f"{line}\n" for line in lines)


def repl(options: CliOptions, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
    """Read-eval-print loop: run each input line, report errors, keep going."""
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    try:
        while True:
            stdout.write(PROMPT)
            stdout.flush()
            line = stdin.readline()
            if not line:
                stdout.write("\n")
                break
            if not line.strip():
                continue
            try:
                for text in run_program(line, "<repl>", options):
                    stdout.write(f"{text}\n")
            except (LexErrors, ParseErrors, EvalError) as exc:
                print(str(exc), file=sys.stderr)
    except KeyboardInterrupt:
        stdout.write("\n")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    if options.script is None:
        repl(options)
        return 0

    try:
        text = run_file(options)
    except OSError as exc:
        print(f"error: cannot read {options.script}: {exc.strerror}", file=sys.stderr)
        return 2
    except UnicodeDecodeError as exc:
        print(f"error: {options.script} is not valid UTF-8: {exc.reason}", file=sys.stderr)
        return 2
    except (LexErrors, ParseErrors) as exc:
        print(str(exc), file=sys.stderr)
        return 1
    except EvalError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    if options.output:
        options.output.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)

    return 0
