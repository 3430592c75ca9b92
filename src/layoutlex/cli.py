"""Command-line interface: dump the token stream of a source file."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from layoutlex.errors import LexError
from layoutlex.source import DEFAULT_CHUNK_SIZE
from layoutlex.tokens import Token, TokenType

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "layoutlex.toml"
OUTPUT_FORMATS = ("text", "json")

_COMMENT_TYPES = frozenset(
    {TokenType.COMMENT, TokenType.DOC_COMMENT, TokenType.TOP_DOC_COMMENT}
)


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None  # None reads stdin
    output_file: Path | None
    output_format: str
    positions: bool
    comments: bool
    chunk_size: int
    verbose: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="layoutlex",
        description="Tokenize a source file and print its token stream",
    )
    p.add_argument("input", help="Input source file ('-' for stdin)")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--format",
        choices=OUTPUT_FORMATS,
        default=None,
        help="Output format (default: text)",
    )
    p.add_argument(
        "--no-positions",
        dest="positions",
        action="store_false",
        default=None,
        help="Omit token spans from the output",
    )
    p.add_argument(
        "--skip-comments",
        dest="comments",
        action="store_false",
        default=None,
        help="Drop comment tokens from the output",
    )
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_FILENAME})",
    )
    p.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        metavar="BYTES",
        help=f"Read size for the input stream (default: {DEFAULT_CHUNK_SIZE})",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_FILENAME

    if not path.is_file():
        return {}

    logger.debug("loading config from %s", path)
    with open(path, "rb") as f:
        return tomllib.load(f)


def parse_chunk_size(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise argparse.ArgumentTypeError(f"chunk size must be a positive integer: {value!r}")
    return value


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = None if args.input == "-" else Path(args.input)
    input_dir = input_file.parent if input_file is not None else Path(".")
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    output_format = "text"
    positions = True
    comments = True
    cfg_output = config.get("output")
    if isinstance(cfg_output, dict):
        cfg_format = cfg_output.get("format")
        if cfg_format is not None:
            if cfg_format not in OUTPUT_FORMATS:
                raise argparse.ArgumentTypeError(f"invalid output format in config: {cfg_format!r}")
            output_format = cfg_format
        cfg_positions = cfg_output.get("positions")
        if isinstance(cfg_positions, bool):
            positions = cfg_positions
        cfg_comments = cfg_output.get("comments")
        if isinstance(cfg_comments, bool):
            comments = cfg_comments
    if args.format is not None:
        output_format = args.format
    if args.positions is not None:
        positions = args.positions
    if args.comments is not None:
        comments = args.comments

    chunk_size = DEFAULT_CHUNK_SIZE
    cfg_input = config.get("input")
    if isinstance(cfg_input, dict) and "chunk_size" in cfg_input:
        chunk_size = parse_chunk_size(cfg_input["chunk_size"])
    if args.chunk_size is not None:
        chunk_size = parse_chunk_size(args.chunk_size)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        output_format=output_format,
        positions=positions,
        comments=comments,
        chunk_size=chunk_size,
        verbose=args.verbose,
    )


def lex_file(options: CliOptions) -> list[Token]:
    """Tokenize the input file (or stdin) and apply the output filters."""
    from layoutlex.lexer import Lexer

    if options.input_file is None:
        tokens = Lexer(sys.stdin.buffer, chunk_size=options.chunk_size).tokenize()
    else:
        with open(options.input_file, "rb") as f:
            tokens = Lexer(f, chunk_size=options.chunk_size).tokenize()

    logger.debug("lexed %d tokens", len(tokens))
    if not options.comments:
        tokens = [t for t in tokens if t.type not in _COMMENT_TYPES]
    return tokens


def render_tokens(tokens: list[Token], options: CliOptions) -> str:
    """Render tokens in the selected output format."""
    from layoutlex.debug import format_token, token_to_dict

    if options.output_format == "json":
        data = [token_to_dict(t, positions=options.positions) for t in tokens]
        return json.dumps(data, indent=2) + "\n"
    return "".join(format_token(t, positions=options.positions) + "\n" for t in tokens)


def _error_source(options: CliOptions) -> str | None:
    """Best-effort source text for error context; None when unavailable."""
    if options.input_file is None:
        return None
    try:
        return options.input_file.read_bytes().decode("utf-8", errors="replace")
    except OSError:
        return None


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    filename = str(options.input_file) if options.input_file is not None else "<stdin>"
    try:
        tokens = lex_file(options)
    except LexError as exc:
        print(exc.format(filename, _error_source(options)), file=sys.stderr)
        return 1
    except OSError as exc:
        print(f"error: cannot read {filename}: {exc.strerror or exc}", file=sys.stderr)
        return 1

    output = render_tokens(tokens, options)
    if options.output_file:
        options.output_file.write_text(output, encoding="utf-8")
    else:
        sys.stdout.write(output)

    return 0
