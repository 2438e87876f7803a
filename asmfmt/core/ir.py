"""Intermediate representation of formatted assembler statements.

WHY: The classifier, the state machine and the column aligner all need the
same view of a line of code: its instruction, its operands, its trailing
comment and a handful of flags. Deciding once what kind of statement a line
is (label, directive, terminator, ...) keeps that decision out of the rest
of the pipeline.

HOW: Two types form the IR:
  StatementKind — closed classification computed once per statement
  Statement     — one formatted unit of code, possibly one fragment of a
                  backslash-continued logical line

RULES:
- A Statement with continues=False is complete and may be aligned with
  its siblings in the same flush.
- params never contains empty strings and never contains separating commas.
- comment holds the comment text without the ``//`` delimiter.
- Macro-call-shaped statements carry the whole line in ``instruction``.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class StatementKind(str, enum.Enum):
    """What a statement is, as far as indentation routing cares.

    RULES:
    - label: instruction ends with ``:``
    - preprocessor: instruction starts with ``#``
    - section: ``TEXT`` directive, code following it is indented
    - global: ``DATA`` / ``GLOBL`` declarations, following lines stay at 0
    - terminator: ``RET`` / ``JMP``, ends a block of code
    - command: upper-case instruction, a real machine instruction
    - pseudo: anything else (lower-case pseudo-ops, odd tokens)
    """

    LABEL = "label"
    PREPROCESSOR = "preprocessor"
    SECTION = "section"
    GLOBAL = "global"
    TERMINATOR = "terminator"
    COMMAND = "command"
    PSEUDO = "pseudo"


# Kinds that are always rendered at column 0 and flushed alone.
LEVEL0_KINDS = frozenset({
    StatementKind.LABEL,
    StatementKind.PREPROCESSOR,
    StatementKind.SECTION,
    StatementKind.GLOBAL,
})

# Level-0 kinds after which ordinary code is NOT indented.
FLAT_KINDS = frozenset({
    StatementKind.PREPROCESSOR,
    StatementKind.GLOBAL,
})


@dataclass
class Statement:
    """One formatted unit of code.

    Attributes:
        instruction: Mnemonic, or the entire line for macro calls.
        params: Operands in order, trimmed, commas removed.
        comment: Trailing comment text without ``//``.
        is_macro_call: Excluded from the instruction column width.
        continues: Non-final fragment of a backslash-continued line.
        kind: Classification used for indentation routing.
        define: Macro name registered by a ``#define`` line, if any.
        package_decl: Line starts with a bare ``package`` token.
    """

    instruction: str
    params: list[str] = field(default_factory=list)
    comment: str = ""
    is_macro_call: bool = False
    continues: bool = False
    kind: StatementKind = StatementKind.PSEUDO
    define: str | None = None
    package_decl: bool = False

    @property
    def level0(self) -> bool:
        return self.kind in LEVEL0_KINDS

    @property
    def keeps_flat(self) -> bool:
        """True when code after this level-0 statement stays unindented."""
        return self.kind in FLAT_KINDS
