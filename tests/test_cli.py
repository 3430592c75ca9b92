"""Tests for the CLI module: arg parsing, exit codes, output formats, end-to-end."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from layoutlex.cli import (
    CliOptions,
    build_parser,
    lex_file,
    main,
    parse_chunk_size,
    render_tokens,
)
from layoutlex.source import DEFAULT_CHUNK_SIZE
from layoutlex.tokens import TokenType


def _options(input_file: Path, **overrides) -> CliOptions:
    values = dict(
        input_file=input_file,
        output_file=None,
        output_format="text",
        positions=True,
        comments=True,
        chunk_size=DEFAULT_CHUNK_SIZE,
        verbose=False,
    )
    values.update(overrides)
    return CliOptions(**values)


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        ns = build_parser().parse_args(["main.lx"])
        assert ns.input == "main.lx"
        assert ns.output is None
        assert ns.format is None
        assert ns.positions is None
        assert ns.comments is None

    def test_output_flag(self) -> None:
        ns = build_parser().parse_args(["main.lx", "-o", "tokens.txt"])
        assert ns.output == "tokens.txt"

    def test_format_flag(self) -> None:
        ns = build_parser().parse_args(["main.lx", "--format", "json"])
        assert ns.format == "json"

    def test_bad_format_rejected(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["main.lx", "--format", "xml"])

    def test_filter_flags(self) -> None:
        ns = build_parser().parse_args(["main.lx", "--no-positions", "--skip-comments"])
        assert ns.positions is False
        assert ns.comments is False

    def test_chunk_size_and_verbose(self) -> None:
        ns = build_parser().parse_args(["main.lx", "--chunk-size", "16", "-v"])
        assert ns.chunk_size == 16
        assert ns.verbose is True


class TestParseChunkSize:
    def test_positive(self) -> None:
        assert parse_chunk_size(64) == 64

    @pytest.mark.parametrize("value", [0, -1, "64", True, 1.5])
    def test_invalid(self, value) -> None:
        import argparse

        with pytest.raises(argparse.ArgumentTypeError):
            parse_chunk_size(value)


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "ok.lx"
        src.write_text("main = 1\n")
        assert main([str(src)]) == 0
        assert "WORD 'main'" in capsys.readouterr().out

    def test_lex_error_returns_1(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "bad.lx"
        src.write_text("x = 1\ny = `\n")
        assert main([str(src)]) == 1
        err = capsys.readouterr().err
        assert "unexpected character" in err
        assert f"{src}:2:5" in err
        assert "y = `" in err

    def test_invalid_utf8_returns_1(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "bin.lx"
        src.write_bytes(b"x \xff")
        assert main([str(src)]) == 1
        assert "UTF-8" in capsys.readouterr().err

    def test_missing_file_returns_1(self, tmp_path: Path, capsys) -> None:
        assert main([str(tmp_path / "nope.lx")]) == 1
        assert "cannot read" in capsys.readouterr().err

    def test_bad_chunk_size_returns_2(self, tmp_path: Path) -> None:
        src = tmp_path / "ok.lx"
        src.write_text("x\n")
        assert main([str(src), "--chunk-size", "0"]) == 2


# ---------------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------------


class TestOutput:
    def test_output_file(self, tmp_path: Path) -> None:
        src = tmp_path / "ok.lx"
        src.write_text("main =\n    go\n")
        out = tmp_path / "tokens.txt"
        assert main([str(src), "-o", str(out)]) == 0
        lines = out.read_text().splitlines()
        assert lines[0] == "1:1-1:5         WORD 'main'"
        assert lines[3].endswith("INDENT 4")
        assert lines[-1].endswith("EOF")

    def test_no_positions(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "ok.lx"
        src.write_text("a -> b")
        assert main([str(src), "--no-positions"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "WORD 'a'",
            "RARROW",
            "WORD 'b'",
            "EOF",
        ]

    def test_json_output(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "ok.lx"
        src.write_text("vec[3]")
        assert main([str(src), "--format", "json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert [d["type"] for d in data] == ["MWORD", "INTEGER", "RBRACKET", "EOF"]
        assert data[0]["value"] == "vec"
        assert data[0]["span"]["end"] == {"line": 0, "column": 4, "offset": 4}

    def test_json_without_positions(self, tmp_path: Path, capsys) -> None:
        src = tmp_path / "ok.lx"
        src.write_text("x")
        assert main([str(src), "--format", "json", "--no-positions"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data == [{"type": "WORD", "value": "x"}, {"type": "EOF", "value": None}]


# ---------------------------------------------------------------------------
# lex_file / render_tokens
# ---------------------------------------------------------------------------


class TestLexFile:
    def test_basic(self, tmp_path: Path) -> None:
        src = tmp_path / "simple.lx"
        src.write_text("data Maybe a = Just a | Nothing\n")
        tokens = lex_file(_options(src))
        assert tokens[0].lexeme == (TokenType.KEYWORD, "data")
        assert tokens[-1].type == TokenType.EOF

    def test_skip_comments(self, tmp_path: Path) -> None:
        src = tmp_path / "c.lx"
        src.write_text("--^ module\nx -- trailing\n--. doc\n")
        tokens = lex_file(_options(src, comments=False))
        assert [t.type for t in tokens] == [
            TokenType.NEWLINE,
            TokenType.WORD,
            TokenType.NEWLINE,
            TokenType.NEWLINE,
            TokenType.EOF,
        ]

    def test_small_chunks(self, tmp_path: Path) -> None:
        src = tmp_path / "u.lx"
        src.write_text('greet = "héllo ✓"\n', encoding="utf-8")
        tokens = lex_file(_options(src, chunk_size=1))
        assert tokens[2].value == "héllo ✓"

    def test_render_text(self, tmp_path: Path) -> None:
        src = tmp_path / "r.lx"
        src.write_text("1.5")
        opts = _options(src, positions=False)
        assert render_tokens(lex_file(opts), opts) == "FLOAT '1.5'\nEOF\n"
