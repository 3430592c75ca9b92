"""Streaming lexer: pulls code points from a byte stream and yields positioned tokens."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator
from typing import BinaryIO

from layoutlex.errors import (
    InvalidIntegerError,
    LexError,
    MysteriousCharError,
    UnexpectedEofError,
    UnsupportedSyntaxError,
)
from layoutlex.source import DEFAULT_CHUNK_SIZE, iter_chars
from layoutlex.tokens import (
    Position,
    Span,
    Token,
    TokenType,
    is_digit,
    is_hex_digit,
    is_keyword,
    is_letter,
    is_special,
    is_whitespace,
    is_word_char,
)

logger = logging.getLogger(__name__)

_SINGLE_CHAR = {
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "\n": TokenType.NEWLINE,
}

# Operator runs that are really punctuation
_OPERATOR_PUNCTUATION = {
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    "->": TokenType.RARROW,
    ":": TokenType.COLON,
    "|": TokenType.BAR,
    "=": TokenType.EQUALS,
}


class Lexer:
    """Tokenize a UTF-8 byte stream one token at a time.

    The cursor is a two-slot window (current, lookahead) over the decoded
    code points. Every scanner consumes its whole token, so after any
    ``next_token`` call the cursor sits on the first character not yet
    tokenized.
    """

    def __init__(self, stream: BinaryIO, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self._chars = iter_chars(stream, chunk_size)
        self._current = next(self._chars, None)
        self._lookahead = next(self._chars, None)
        self._indent = 0
        self._offset = 0
        self._line = 0
        self._column = 0
        self._failure: LexError | None = None
        logger.debug("lexer created (chunk_size=%d)", chunk_size)

    @property
    def indent_level(self) -> int:
        """Leading whitespace count of the last line that changed the layout."""
        return self._indent

    def __iter__(self) -> Iterator[Token]:
        """Yield tokens up to and including the first EOF."""
        while True:
            tok = self.next_token()
            yield tok
            if tok.type is TokenType.EOF:
                return

    def tokenize(self) -> list[Token]:
        """Tokenize the rest of the stream and return the token list."""
        return list(self)

    def next_token(self) -> Token:
        """Return the next token, raising a LexError subclass on failure.

        A read or decode failure is terminal: every later call raises it again.
        """
        if self._failure is not None:
            raise self._failure

        layout = self._skip_whitespace()
        if layout is not None:
            return layout

        ch = self._current
        if ch is None:
            here = self._here()
            return Token(TokenType.EOF, None, Span(here, here))

        la = self._lookahead

        if ch == "-" and la == "-":
            return self._lex_comment()

        if ch == "T" and la == "[":
            return self._lex_t_bracket()

        if ch in _SINGLE_CHAR:
            span = self._point_span()
            self._shift()
            return Token(_SINGLE_CHAR[ch], None, span)

        if ch == '"':
            return self._lex_string()

        if ch == "'":
            raise UnsupportedSyntaxError(
                "character literals are not supported", self._point_span()
            )

        if ch == "0" and la == "x":
            return self._lex_hex_integer()

        # _ is special too, but a leading underscore always starts a word
        if is_letter(ch):
            return self._lex_word()

        if is_special(ch):
            return self._lex_operator()

        if is_digit(ch):
            return self._lex_integer_or_word()

        raise MysteriousCharError(f"unexpected character {ch!r}", self._point_span())

    # ------------------------------------------------------------------
    # Cursor and position helpers
    # ------------------------------------------------------------------

    def _here(self) -> Position:
        return Position(self._line, self._column, self._offset)

    def _point_span(self) -> Span:
        """Span of the single character under the cursor."""
        return Span(
            self._here(),
            Position(self._line, self._column + 1, self._offset + 1),
        )

    def _span_from(self, start: Position) -> Span:
        return Span(start, self._here())

    def _shift(self) -> None:
        # Read before moving so a failed read leaves the cursor untouched
        try:
            nxt = next(self._chars, None)
        except LexError as exc:
            self._failure = exc
            raise
        if self._current == "\n":
            self._line += 1
            self._column = 0
        else:
            self._column += 1
        self._offset += 1
        self._current = self._lookahead
        self._lookahead = nxt

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def _skip_whitespace(self) -> Token | None:
        """Skip spaces and tabs; at a line start, report an indent change."""
        at_line_start = self._column == 0
        start = self._here()

        indent = 0
        while self._current is not None and is_whitespace(self._current):
            indent += 1
            self._shift()

        # Blank lines never touch the indent level
        if not at_line_start or self._current == "\n":
            return None
        if indent == self._indent:
            return None

        span = self._span_from(start)
        if indent > self._indent:
            tok = Token(TokenType.INDENT, indent - self._indent, span)
        else:
            tok = Token(TokenType.UNINDENT, self._indent - indent, span)
        logger.debug(
            "line %d: indent level %d -> %d", self._line + 1, self._indent, indent
        )
        self._indent = indent
        return tok

    # ------------------------------------------------------------------
    # Words
    # ------------------------------------------------------------------

    def _read_word(self, chars: list[str]) -> None:
        while self._current is not None and is_word_char(self._current):
            chars.append(self._current)
            self._shift()

    def _finish_word(self, text: str, start: Position) -> Token:
        """Classify a scanned word, swallowing a directly following [."""
        if self._current == "[":
            self._shift()
            return Token(TokenType.MWORD, text, self._span_from(start))
        span = self._span_from(start)
        if text == "_":
            return Token(TokenType.UNDERSCORE, None, span)
        if is_keyword(text):
            return Token(TokenType.KEYWORD, text, span)
        return Token(TokenType.WORD, text, span)

    def _lex_word(self) -> Token:
        start = self._here()
        chars: list[str] = []
        self._read_word(chars)
        return self._finish_word("".join(chars), start)

    def _lex_t_bracket(self) -> Token:
        # The span covers only the T; the [ is swallowed
        span = self._point_span()
        self._shift()
        self._shift()
        return Token(TokenType.TBRACKET, None, span)

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def _lex_integer_or_word(self) -> Token:
        start = self._here()
        chars: list[str] = []
        while self._current is not None and is_digit(self._current):
            chars.append(self._current)
            self._shift()

        # 16[ and 3d are words that happen to start with a digit
        if self._current is not None and is_letter(self._current):
            self._read_word(chars)
            return self._finish_word("".join(chars), start)
        if self._current == "[":
            return self._finish_word("".join(chars), start)

        if self._current == ".":
            chars.append(".")
            self._shift()
            if self._current is None or not is_digit(self._current):
                raise InvalidIntegerError(
                    f"expected a digit after the decimal point in {''.join(chars)!r}",
                    self._span_from(start),
                )
            while self._current is not None and is_digit(self._current):
                chars.append(self._current)
                self._shift()
            return Token(TokenType.FLOAT, "".join(chars), self._span_from(start))

        return Token(TokenType.INTEGER, "".join(chars), self._span_from(start))

    def _lex_hex_integer(self) -> Token:
        start = self._here()
        self._shift()  # 0
        self._shift()  # x
        chars = ["0", "x"]
        while self._current is not None and is_hex_digit(self._current):
            chars.append(self._current)
            self._shift()

        if len(chars) == 2:
            raise InvalidIntegerError(
                "expected hex digits after '0x'", self._span_from(start)
            )
        if self._current is not None and is_word_char(self._current):
            bad = self._current
            raise InvalidIntegerError(
                f"invalid hex digit {bad!r} in {''.join(chars)!r}",
                Span(start, self._point_span().end),
            )
        return Token(TokenType.INTEGER, "".join(chars), self._span_from(start))

    # ------------------------------------------------------------------
    # Operators
    # ------------------------------------------------------------------

    def _lex_operator(self) -> Token:
        start = self._here()
        chars: list[str] = []
        while self._current is not None and is_special(self._current):
            chars.append(self._current)
            self._shift()
        text = "".join(chars)
        span = self._span_from(start)

        tt = _OPERATOR_PUNCTUATION.get(text)
        if tt is not None:
            return Token(tt, None, span)
        return Token(TokenType.OPERATOR, text, span)

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def _lex_string(self) -> Token:
        start = self._here()
        self._shift()  # opening quote

        chars: list[str] = []
        while True:
            ch = self._current
            if ch is None:
                raise UnexpectedEofError("unterminated string literal", self._point_span())
            if ch == '"':
                self._shift()
                break
            if ch == "\\" and self._lookahead in ('"', "\\"):
                chars.append(self._lookahead)
                self._shift()
                self._shift()
                continue
            # Any other backslash is kept literally
            chars.append(ch)
            self._shift()

        return Token(TokenType.STRING, "".join(chars), self._span_from(start))

    # ------------------------------------------------------------------
    # Comments
    # ------------------------------------------------------------------

    def _lex_comment(self) -> Token:
        start = self._here()
        self._shift()
        self._shift()

        tt = TokenType.COMMENT
        if self._current == ".":
            tt = TokenType.DOC_COMMENT
            self._shift()
        elif self._current == "^":
            tt = TokenType.TOP_DOC_COMMENT
            self._shift()

        # Stop before the newline so it is emitted as its own token
        chars: list[str] = []
        while self._current is not None and self._current != "\n":
            chars.append(self._current)
            self._shift()
        return Token(tt, "".join(chars), self._span_from(start))


def tokenize(source: str | bytes, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[Token]:
    """Convenience function: tokenize text or UTF-8 bytes and return the token list."""
    data = source.encode("utf-8") if isinstance(source, str) else source
    return Lexer(io.BytesIO(data), chunk_size=chunk_size).tokenize()
