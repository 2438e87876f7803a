"""asmfmt — canonical formatter for Go-style assembler source.

WHY: Hand-written assembler drifts: mixed tabs and spaces, operands that
never line up, ``//comment`` next to ``/* comment */``, runs of blank
lines. A formatter with exactly one output for every input ends the
discussion, the way gofmt does for Go.

HOW: The single entry point format_source() reads a binary stream, splits
it into lines (``\\n``, ``\\r\\n`` or ``\\r``), feeds every line through one
FormatState and returns the formatted bytes. format_bytes() and
format_text() are the same pipeline for data already in memory.

RULES:
- Only whitespace and comment delimiters ever change; no instruction or
  operand is added, dropped or reordered.
- format(format(x)) == format(x).
- On error nothing is returned: AsmFormatError subclasses for bad input,
  OSError from the stream unchanged.
- Bytes that are not valid UTF-8 round-trip unchanged (surrogateescape).
- No global state: concurrent calls are independent.
"""

from __future__ import annotations

from typing import BinaryIO

from asmfmt.core.engine import FormatState
from asmfmt.errors import AsmFormatError, InvalidInputError, UnsupportedDialectError

__version__ = "0.1.0"

__all__ = [
    "format_source",
    "format_bytes",
    "format_text",
    "is_formatted",
    "AsmFormatError",
    "InvalidInputError",
    "UnsupportedDialectError",
]

ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


def format_text(text: str) -> str:
    """Format assembler source held in a string.

    Args:
        text: Complete source text with any line-ending convention.

    Returns:
        Formatted source, every line terminated by ``\\n``; empty when the
        input has no content.

    Raises:
        UnsupportedDialectError: Input is a Go (or similar) source file.
        InvalidInputError: Input contains null bytes.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    state = FormatState()
    for line in lines:
        state.feed(line)
    return state.finish()


def format_bytes(data: bytes) -> bytes:
    """Format assembler source held in memory as bytes."""
    text = data.decode(ENCODING, ENCODING_ERRORS)
    return format_text(text).encode(ENCODING, ENCODING_ERRORS)


def format_source(src: BinaryIO) -> bytes:
    """Format the assembler source read from a binary stream.

    The whole stream is consumed before any output is produced; read
    errors propagate unchanged.
    """
    return format_bytes(src.read())


def is_formatted(data: bytes) -> bool:
    """True when formatting would leave ``data`` unchanged."""
    return format_bytes(data) == data
