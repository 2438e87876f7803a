"""Column alignment and rendering of one flush batch.

WHY: Statements flushed together share one set of columns: operands start
at the same column, trailing comments start at the same column, and the
backslashes of a continued macro body line up. Computing the columns over
the whole batch first is what makes the output read as a table.

HOW: compute_layout() measures the batch once and returns a ColumnLayout
of absolute columns. render_statement() then pads each statement to those
columns. All widths are character counts, so multi-byte text (``·`` in
symbol names, non-ASCII comments) aligns visually.

RULES:
- Instruction column = widest non-macro instruction + 1. Macro calls are
  excluded so one long invocation does not push every operand right.
- Comment column = instruction column + widest joined operand list + 1.
- Continuation column = comment column + widest ``// comment`` + 1, raised
  to the widest macro-call instruction + 1 when that is larger.
- An instruction is padded only when operands or a comment follow it.
- At least one space always separates text from ``//`` or ``\\``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from asmfmt.core.ir import Statement

COMMENT_PREFIX = "// "
PARAM_JOINER = ", "
CONTINUATION = "\\"


@dataclass
class ColumnLayout:
    """Absolute column positions shared by one batch.

    Attributes:
        instruction: Width of the instruction column, separator included.
        comment: Column where ``//`` starts.
        continuation: Column of the trailing ``\\``.
    """

    instruction: int
    comment: int
    continuation: int


def compute_layout(statements: Sequence[Statement]) -> ColumnLayout:
    """Measure a batch of statements."""
    instr_width = 0
    macro_width = 0
    param_width = 0
    comment_width = 0
    for st in statements:
        width = len(st.instruction) + 1
        if st.is_macro_call:
            macro_width = max(macro_width, width)
        else:
            instr_width = max(instr_width, width)
        param_width = max(param_width, len(PARAM_JOINER.join(st.params)) + 1)
        if st.comment:
            comment_width = max(comment_width, len(COMMENT_PREFIX) + len(st.comment) + 1)

    comment_col = instr_width + param_width
    continuation_col = max(comment_col + comment_width, macro_width)
    return ColumnLayout(
        instruction=instr_width,
        comment=comment_col,
        continuation=continuation_col,
    )


def _pad_to(text: str, column: int) -> str:
    return text + " " * max(1, column - len(text))


def render_statement(st: Statement, layout: ColumnLayout) -> str:
    """Render one statement against a precomputed layout."""
    line = st.instruction
    if st.params or st.comment:
        line = line.ljust(layout.instruction)
    line += PARAM_JOINER.join(st.params)
    if st.comment:
        line = _pad_to(line, layout.comment) + COMMENT_PREFIX + st.comment
    if st.continues:
        line = _pad_to(line, layout.continuation) + CONTINUATION
    return line


def render_statements(statements: Sequence[Statement]) -> List[str]:
    """Render a flush batch into lines of text, without indentation."""
    layout = compute_layout(statements)
    return [render_statement(st, layout) for st in statements]
