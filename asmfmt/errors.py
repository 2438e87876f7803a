"""Error taxonomy for the assembler formatter.

WHY: Formatting either succeeds on the whole input or fails with one
terminal condition. Callers (the CLI, tests, editor integrations) need to
tell "this is not assembler source" apart from "this is binary data" and
from plain I/O failures, which propagate unchanged as OSError.

HOW: One base class derived from ValueError, with one subclass per fatal
input condition. Every error carries the 1-based physical line number where
the condition was detected.

RULES:
- The core raises these and never logs them.
- No partial output is ever returned alongside an error.
- OSError from the input stream is never wrapped.
"""

from __future__ import annotations


class AsmFormatError(ValueError):
    """Base class for every fatal formatting condition."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = "line {}: {}".format(line_number, message)
        super().__init__(message)
        self.line_number = line_number


class UnsupportedDialectError(AsmFormatError):
    """Input declares a high-level language package (e.g. a Go source file).

    Raised for a bare ``package`` instruction unless the same input defined
    a macro named ``package`` earlier with ``#define``.
    """


class InvalidInputError(AsmFormatError):
    """Input contains null bytes, so it is almost certainly not text."""
