"""Token stream dumps for the CLI: aligned text lines or JSON-ready dicts."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import Any, TextIO

from layoutlex.tokens import Position, Span, Token


def format_position(pos: Position) -> str:
    """Render a position as 1-based line:column."""
    return f"{pos.line + 1}:{pos.column + 1}"


def format_span(span: Span) -> str:
    return f"{format_position(span.start)}-{format_position(span.end)}"


def format_token(token: Token, *, positions: bool = True) -> str:
    """Render one token as a single line, e.g. ``1:1-1:5  WORD 'main'``."""
    text = token.type.name
    if token.value is not None:
        text += f" {token.value!r}"
    if positions:
        return f"{format_span(token.span):<16}{text}"
    return text


def dump_tokens(
    tokens: Iterable[Token], *, file: TextIO = sys.stderr, positions: bool = True
) -> None:
    """Print one line per token to *file*."""
    for token in tokens:
        file.write(format_token(token, positions=positions) + "\n")


def token_to_dict(token: Token, *, positions: bool = True) -> dict[str, Any]:
    result: dict[str, Any] = {"type": token.type.name, "value": token.value}
    if positions:
        result["span"] = {
            "start": _position_to_dict(token.span.start),
            "end": _position_to_dict(token.span.end),
        }
    return result


def _position_to_dict(pos: Position) -> dict[str, int]:
    return {"line": pos.line, "column": pos.column, "offset": pos.offset}
