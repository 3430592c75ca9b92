"""Error types with formatted source context."""

from __future__ import annotations

from typing import ClassVar

from layoutlex.tokens import Span


class LexError(Exception):
    """Raised on the first lexing error. Errors are terminal for the stream."""

    kind: ClassVar[str] = "LexError"

    def __init__(self, message: str, span: Span | None = None) -> None:
        self.message = message
        self.span = span
        super().__init__(self.format())

    def format(self, filename: str = "<input>", source: str | None = None) -> str:
        """Render the error, with the offending line underlined when source is given."""
        if self.span is None:
            return f"error: {self.message}\n  --> {filename}"

        line = self.span.start.line
        col = self.span.start.column

        line_num = str(line + 1)
        gutter_width = len(line_num) + 1
        header = (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{line + 1}:{col + 1}"
        )
        if source is None:
            return header

        # Only \n starts a new line for the lexer, so split on it alone
        lines = source.split("\n")
        source_line = lines[line].rstrip("\r") if 0 <= line < len(lines) else ""

        if self.span.end.line == line:
            underline_len = max(1, self.span.end.column - col)
        else:
            underline_len = max(1, len(source_line) - col)

        pad = " " * col
        carets = "^" * underline_len

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"{header}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


class NotUtf8Error(LexError):
    """The byte stream is not valid UTF-8."""

    kind = "NotUtf8"

    def __init__(self, message: str, byte_offset: int | None = None) -> None:
        self.byte_offset = byte_offset
        super().__init__(message)


class ReadError(LexError):
    """The underlying byte stream failed to read."""

    kind = "IoError"


class UnexpectedEofError(LexError):
    kind = "UnexpectedEof"


class InvalidIntegerError(LexError):
    kind = "InvalidInteger"


class MysteriousCharError(LexError):
    kind = "MysteriousChar"


class UnsupportedSyntaxError(LexError):
    """Syntax the language reserves but the lexer does not accept yet."""

    kind = "Unsupported"
