"""Line-by-line formatting state machine.

WHY: Formatting decisions are local (one line, or one pending batch of
lines) but the result has to be globally consistent and idempotent. The
state machine is the only component with memory across lines: it decides
indentation, when a batch of statements is flushed as one aligned group,
and where blank lines go.

HOW: FormatState consumes one physical line at a time through feed().
Each line runs a begin-line phase (line counting, null-byte check), is
dispatched to exactly one handler (block-comment body, line comment, block
comment, blank, statement) and finishes with an end-line phase that sets
the carry flags for the next line. Handlers may re-enter _add_line() for
fragments of the same physical line (code before a block comment, code
after a label). finish() flushes what is left and returns the output.

RULES:
- Comments never share an alignment batch with code.
- Labels, preprocessor lines, TEXT, DATA and GLOBL sit at column 0 and are
  flushed alone, unless they continue an open continuation block.
- RET/JMP flush their batch at one indent and reset indentation to 0.
- Upper-case instructions set indentation to 1 without flushing.
- A continuation block ends with a flush at one indent, then indentation 0.
- At most one blank line in a row, never at the start of the output.
- A separating blank line goes before comments and level-0 lines unless
  the previous output was blank, a comment or a label. Never inside a
  continuation block, where the previous line ends in a backslash.
- One FormatState per format call; the defines table never leaks.
"""

from __future__ import annotations

import enum
from typing import List, Set

from asmfmt.core.aligner import render_statements
from asmfmt.core.comments import (
    BLOCK_OPEN,
    LINE_COMMENT,
    BlockComment,
    block_comment_body,
    block_comment_closer,
    block_comment_opener,
    find_block_comment,
    normalize_line_comment,
)
from asmfmt.core.ir import Statement, StatementKind
from asmfmt.core.statement import (
    CONTINUATION_MARKER,
    PACKAGE_KEYWORD,
    build_statement,
)
from asmfmt.errors import InvalidInputError, UnsupportedDialectError

INDENT = "\t"


class LineKind(enum.Enum):
    """What the last content-bearing output was."""

    BLANK = "blank"
    COMMENT = "comment"
    LEVEL0 = "level0"
    CODE = "code"


class FormatState:
    """Mutable state of one format invocation."""

    def __init__(self) -> None:
        self.lines: List[str] = []
        self.indentation = 0
        self.queued: List[Statement] = []
        self.defines: Set[str] = set()
        self.line_number = 0

        self.last_empty = False
        self.last_comment = False
        self.last_label = False
        self.any_contents = False
        self.inside_block = False
        self.last_star = False
        self.in_continuation = False

    # ------------------------------------------------------------------
    # Line phases
    # ------------------------------------------------------------------

    def feed(self, raw: str) -> None:
        """Process one physical input line (without its line terminator)."""
        self.begin_line(raw)
        self._add_line(raw)

    def begin_line(self, raw: str) -> None:
        self.line_number += 1
        if "\x00" in raw:
            raise InvalidInputError(
                "zero (0) byte in input, file is unlikely to be assembler source",
                self.line_number,
            )

    def end_line(self, kind: LineKind) -> None:
        """Set the carry flags after a line produced output of ``kind``."""
        self.last_empty = kind is LineKind.BLANK
        self.last_comment = kind is LineKind.COMMENT
        self.last_label = kind is LineKind.LEVEL0
        if kind is not LineKind.BLANK:
            self.any_contents = True

    def finish(self) -> str:
        """Flush remaining statements and return the formatted text."""
        self.flush()
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _write(self, text: str) -> None:
        self.lines.append(text)

    def _indent(self) -> str:
        return INDENT * self.indentation

    def flush(self) -> None:
        """Render every queued statement as one aligned batch."""
        if not self.queued:
            return
        prefix = self._indent()
        for text in render_statements(self.queued):
            self._write(prefix + text)
        self.queued = []

    def _separate(self) -> None:
        # Labels and comments glue to whatever follows them.
        if not self.any_contents or self.in_continuation:
            return
        if self.last_empty or self.last_comment or self.last_label:
            return
        self._write("")

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _add_line(self, raw: str) -> None:
        if self.inside_block:
            self._continue_block_comment(raw)
            return

        line = raw.strip()
        if line.startswith(LINE_COMMENT):
            self._add_comment(line)
            return

        block = find_block_comment(line)
        if block is not None and not (block.closed and line.endswith(CONTINUATION_MARKER)):
            self._add_block_comment(line, block)
            return

        st = build_statement(line, self.defines)
        if st is None:
            self._add_blank()
            return
        self._add_statement(line, st)

    def _add_blank(self) -> None:
        self.flush()
        if self.last_empty or not self.any_contents:
            return
        self._write("")
        self.end_line(LineKind.BLANK)

    def _add_comment(self, line: str) -> None:
        self.flush()
        self._separate()
        self._write(self._indent() + normalize_line_comment(line))
        self.end_line(LineKind.COMMENT)

    # ------------------------------------------------------------------
    # Block comments
    # ------------------------------------------------------------------

    def _add_block_comment(self, line: str, block: BlockComment) -> None:
        if block.closed:
            # Single-line block comments become // comments.
            if block.before:
                if block.text:
                    self._add_line(block.before + " " + LINE_COMMENT + " " + block.text)
                else:
                    self._add_line(block.before)
            else:
                self.flush()
                self._add_line((LINE_COMMENT + " " + block.text).rstrip())
            if not block.at_end:
                self._add_line(block.after)
            return

        if block.before:
            self._add_line(block.before)
        self.flush()

        prefix = ""
        if line.endswith(CONTINUATION_MARKER):
            # Comment inside a multi-line macro body.
            prefix = self._indent()
        tail = line[line.find(BLOCK_OPEN) + len(BLOCK_OPEN):]
        self._write(prefix + block_comment_opener(tail))
        self.inside_block = True
        self.last_star = False
        self.end_line(LineKind.COMMENT)

    def _continue_block_comment(self, raw: str) -> None:
        end = raw.find("*/")
        if end < 0:
            text, self.last_star = block_comment_body(raw)
            self._write(text)
            self.end_line(LineKind.COMMENT)
            return

        self._write(block_comment_closer(raw[:end], self.last_star))
        self.inside_block = False
        self.last_star = False
        self.end_line(LineKind.COMMENT)
        rest = raw[end + 2:].strip()
        if rest:
            self._add_line(rest)

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _add_statement(self, line: str, st: Statement) -> None:
        if st.define:
            self.defines.add(st.define)
        if st.package_decl and PACKAGE_KEYWORD not in self.defines:
            raise UnsupportedDialectError(
                "package instruction found, Go files are not supported",
                self.line_number,
            )

        # Labels always get their own line.
        if st.kind is StatementKind.LABEL and st.params and not st.continues:
            label = build_statement(line[:len(st.instruction)], self.defines)
            self._add_level0(label)
            self._add_line(line[len(st.instruction):])
            return

        if st.level0 and not (st.continues and self.in_continuation):
            self._add_level0(st)
            return

        self.queued.append(st)
        ends_block = st.kind is StatementKind.TERMINATOR or self.in_continuation
        if ends_block and not st.continues:
            self.indentation = 1
            self.flush()
            self.indentation = 0
        elif st.kind in (StatementKind.COMMAND, StatementKind.TERMINATOR):
            self.indentation = 1
        self.in_continuation = st.continues
        self.end_line(LineKind.CODE)

    def _add_level0(self, st: Statement) -> None:
        self.flush()
        self._separate()
        self.indentation = 0
        self.queued.append(st)
        self.flush()
        if not st.keeps_flat:
            self.indentation = 1
        self.in_continuation = st.continues
        self.end_line(LineKind.LEVEL0)
