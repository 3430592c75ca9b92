"""Token types, data structures, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Punctuation
    LPAREN = auto()  # (
    RPAREN = auto()  # )
    LBRACKET = auto()  # [
    TBRACKET = auto()  # T[
    RBRACKET = auto()  # ]
    LBRACE = auto()  # {
    RBRACE = auto()  # }
    COMMA = auto()  # ,
    DOT = auto()  # .
    RARROW = auto()  # ->
    COLON = auto()  # :
    BAR = auto()  # |
    EQUALS = auto()  # =
    UNDERSCORE = auto()  # _

    # Identifiers
    KEYWORD = auto()
    WORD = auto()
    MWORD = auto()  # word immediately followed by [, which is swallowed

    OPERATOR = auto()

    # Literals
    STRING = auto()
    CHAR = auto()  # reserved; character literals are rejected by the lexer
    INTEGER = auto()
    FLOAT = auto()

    # Comments
    COMMENT = auto()  # --
    DOC_COMMENT = auto()  # --.
    TOP_DOC_COMMENT = auto()  # --^

    # Layout
    INDENT = auto()
    UNINDENT = auto()
    NEWLINE = auto()

    EOF = auto()


LAYOUT_TYPES = frozenset({TokenType.INDENT, TokenType.UNINDENT})


@dataclass(frozen=True, slots=True)
class Position:
    """Source position: 0-based line and column, 0-based code point offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open source range from start to end position."""

    start: Position
    end: Position

    def cover(self, other: Span) -> Span:
        """Return the smallest span containing both self and other."""
        start = self.start if self.start.offset <= other.start.offset else other.start
        end = other.end if self.end.offset <= other.end.offset else self.end
        return Span(start, end)


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexer token: tag, payload, and the span it was read from."""

    type: TokenType
    value: str | int | None
    span: Span

    @property
    def lexeme(self) -> tuple[TokenType, str | int | None]:
        return (self.type, self.value)


KEYWORDS = frozenset(
    {"data", "forall", "case", "where", "if", "else", "infix", "infixl", "infixr"}
)

# ! through &, * through /, : through @, plus \ ^ _ | ~
_SPECIAL = frozenset('!"#$%&*+,-./:;<=>?@\\^_|~')
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def is_keyword(text: str) -> bool:
    """Return True if text is a reserved keyword."""
    return text in KEYWORDS


def is_whitespace(ch: str) -> bool:
    """Return True for the horizontal whitespace counted by the layout tracker."""
    return ch == " " or ch == "\t"


def is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def is_hex_digit(ch: str) -> bool:
    """Return True if ch is a hexadecimal digit."""
    return ch in _HEX_DIGITS


def is_letter(ch: str) -> bool:
    """Return True for ASCII letters and underscore."""
    return "a" <= ch <= "z" or "A" <= ch <= "Z" or ch == "_"


def is_word_char(ch: str) -> bool:
    return is_letter(ch) or is_digit(ch)


def is_special(ch: str) -> bool:
    """Return True if ch is an operator-forming character."""
    return ch in _SPECIAL
