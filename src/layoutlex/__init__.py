"""Streaming, layout-aware lexer for a small functional language."""

from __future__ import annotations

from layoutlex.errors import LexError
from layoutlex.lexer import Lexer, tokenize
from layoutlex.tokens import Position, Span, Token, TokenType

__version__ = "0.1.0"

__all__ = [
    "LexError",
    "Lexer",
    "Position",
    "Span",
    "Token",
    "TokenType",
    "tokenize",
]
