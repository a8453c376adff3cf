"""Command-line interface for colorexpr."""

from __future__ import annotations

import argparse
import io
import json
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from colorexpr.debug import DEFAULT_WIDTH, ast_to_dict, dump_ast, format_token
from colorexpr.errors import LexError, ParseError

FORMATS = ("tree", "json", "tokens")

CONFIG_NAME = "colorexpr.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None
    command: str | None
    output_file: Path | None
    format: str
    trivia: bool
    debug: bool
    width: int

    @property
    def display_name(self) -> str:
        if self.command is not None:
            return "<command>"
        if self.input_file is None or str(self.input_file) == "-":
            return "<stdin>"
        return str(self.input_file)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="colorexpr",
        description="Tokenize and parse color-function expressions",
    )
    p.add_argument("input", nargs="?", help="Input file ('-' for stdin)")
    p.add_argument("-c", "--command", metavar="EXPR", help="Parse EXPR instead of a file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format (default: tree)",
    )
    p.add_argument(
        "--no-trivia",
        action="store_true",
        help="Leave whitespace and newline tokens out of --format tokens",
    )
    p.add_argument(
        "--debug", action="store_true", help="Dump characters, tokens and AST to stderr"
    )
    p.add_argument(
        "--width",
        type=int,
        default=None,
        metavar="N",
        help=f"Width of debug dump boxes (default: {DEFAULT_WIDTH})",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    return p


def load_config(config_path: Path | None, search_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else search_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _section(config: dict[str, Any], name: str) -> dict[str, Any]:
    section = config.get(name)
    return section if isinstance(section, dict) else {}


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    if (args.input is None) == (args.command is None):
        raise argparse.ArgumentTypeError("expected exactly one of INPUT or -c/--command")

    input_file = Path(args.input) if args.input is not None else None
    if input_file is not None and str(input_file) != "-":
        search_dir = input_file.parent
        if not search_dir.parts:
            search_dir = Path(".")
    else:
        search_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    try:
        config = load_config(config_path, search_dir)
    except tomllib.TOMLDecodeError as exc:
        raise argparse.ArgumentTypeError(f"invalid config file: {exc}") from None

    # Trivia: default < config < CLI
    trivia = True
    cfg_trivia = _section(config, "lexer").get("trivia")
    if isinstance(cfg_trivia, bool):
        trivia = cfg_trivia
    if args.no_trivia:
        trivia = False

    # Output format: default < config < CLI
    fmt = "tree"
    cfg_format = _section(config, "output").get("format")
    if cfg_format is not None:
        if cfg_format not in FORMATS:
            raise argparse.ArgumentTypeError(
                f"invalid [output] format {cfg_format!r} in config "
                f"(expected one of: {', '.join(FORMATS)})"
            )
        fmt = cfg_format
    if args.format is not None:
        fmt = args.format

    # Debug box width: default < config < CLI
    width = DEFAULT_WIDTH
    cfg_width = _section(config, "debug").get("width")
    if isinstance(cfg_width, int) and not isinstance(cfg_width, bool):
        width = cfg_width
    if args.width is not None:
        width = args.width
    if width < 8:
        raise argparse.ArgumentTypeError(f"debug width must be at least 8, got {width}")

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        command=args.command,
        output_file=output_file,
        format=fmt,
        trivia=trivia,
        debug=args.debug,
        width=width,
    )


def read_source(options: CliOptions) -> str:
    if options.command is not None:
        return options.command
    if options.input_file is None or str(options.input_file) == "-":
        return sys.stdin.read()
    return options.input_file.read_text(encoding="utf-8")


def process_source(source: str, options: CliOptions) -> str:
    """Tokenize and parse *source*, returning the text to write."""
    from colorexpr.lexer import Tokenizer
    from colorexpr.parser import Parser
    from colorexpr.stream import CharacterStream

    name = options.display_name
    stream = CharacterStream(source)
    tokenizer = Tokenizer(keep_trivia=options.trivia)
    if options.debug:
        stream.with_logging(f"CHARACTERS: {name}", width=options.width, file=sys.stderr)
        tokenizer.with_logging(f"TOKENS: {name}", width=options.width, file=sys.stderr)

    tokens = tokenizer.tokenize(stream)
    if options.format == "tokens":
        return "".join(format_token(tok) + "\n" for tok in tokens)

    program = Parser(tokens, stream.source).parse()
    if options.debug:
        dump_ast(program, file=sys.stderr)

    if options.format == "json":
        return json.dumps(ast_to_dict(program), indent=2, ensure_ascii=False) + "\n"

    out = io.StringIO()
    dump_ast(program, file=out)
    return out.getvalue()


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        source = read_source(options)
    except OSError as exc:
        print(f"error: cannot read {options.display_name}: {exc.strerror}", file=sys.stderr)
        return 2

    try:
        text = process_source(source, options)
    except (LexError, ParseError) as exc:
        print(exc.format(options.display_name), file=sys.stderr)
        return 1

    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)

    return 0
