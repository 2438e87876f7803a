"""Line classification and statement building.

WHY: Every code line must be split into an instruction, its operands and a
trailing comment before anything can be aligned. Hand-written assembler
mixes in macro invocations, ``#define`` bodies continued with backslashes
and block comments between operands, so a plain ``split(",")`` loses
information or invents operands.

HOW: build_statement() trims the line, cuts off a trailing ``//`` comment,
takes the first whitespace-delimited token as the instruction and splits the
remainder on commas that are not inside a ``/* */`` span. Macro-call-shaped
lines keep their whole text as the instruction. Terminators and
continuation markers are stripped last, then the statement is classified
once via classify().

RULES:
- A blank line yields None.
- Macro call: token contains ``(``, its name is in ``defines``, it contains
  ``_`` (labels excepted), or it starts with ``/*``.
- A trailing ``;`` is stripped from the last operand, or from the
  instruction when there are no operands.
- A trailing ``\\`` marks the statement as continued and is stripped.
- ``#define NAME(...)`` reports NAME in Statement.define; the caller owns
  the symbol table and registers it.
"""

from __future__ import annotations

from typing import AbstractSet, List, Optional

from asmfmt.core.comments import BLOCK_OPEN, find_line_comment
from asmfmt.core.ir import Statement, StatementKind

LABEL_MARKER = ":"
PREPROCESSOR_MARKER = "#"
STATEMENT_TERMINATOR = ";"
CONTINUATION_MARKER = "\\"
PARAM_SEPARATOR = ","

DEFINE_DIRECTIVE = "#define"
PACKAGE_KEYWORD = "package"

SECTION_DIRECTIVES = frozenset({"TEXT"})
GLOBAL_DIRECTIVES = frozenset({"DATA", "GLOBL"})
TERMINATORS = frozenset({"RET", "JMP"})


def split_params(text: str) -> List[str]:
    """Split an operand list on commas outside ``/* */`` spans.

    Each operand is trimmed; empty operands are dropped.
    """
    params: List[str] = []
    current: List[str] = []
    in_comment = False
    last = ""
    for ch in text:
        if ch == PARAM_SEPARATOR and not in_comment:
            param = "".join(current).strip()
            if param:
                params.append(param)
            current = []
            last = ch
            continue
        current.append(ch)
        if in_comment and last == "*" and ch == "/":
            in_comment = False
            ch = ""
        elif not in_comment and last == "/" and ch == "*":
            in_comment = True
            ch = ""
        last = ch
    param = "".join(current).strip()
    if param:
        params.append(param)
    return params


def is_macro_call(token: str, defines: AbstractSet[str]) -> bool:
    """Guess whether the leading token invokes a function-style macro.

    Macros may come from a header we never see, so besides the names
    registered with ``#define`` any token with parentheses or underscores
    is treated as one.
    """
    if "(" in token or token.startswith(BLOCK_OPEN):
        return True
    if token.split("(")[0] in defines:
        return True
    return "_" in token and not token.endswith(LABEL_MARKER)


def classify(instruction: str) -> StatementKind:
    """Compute the StatementKind of an instruction."""
    if instruction.endswith(LABEL_MARKER):
        return StatementKind.LABEL
    if instruction.startswith(PREPROCESSOR_MARKER):
        return StatementKind.PREPROCESSOR
    upper = instruction.upper()
    if upper in SECTION_DIRECTIVES:
        return StatementKind.SECTION
    if upper in GLOBAL_DIRECTIVES:
        return StatementKind.GLOBAL
    if upper in TERMINATORS:
        return StatementKind.TERMINATOR
    if upper == instruction:
        return StatementKind.COMMAND
    return StatementKind.PSEUDO


def define_name(instruction: str, params: List[str]) -> Optional[str]:
    """Return the macro name declared by a ``#define`` statement, if any."""
    if instruction != DEFINE_DIRECTIVE or not params:
        return None
    words = params[0].split()
    if not words:
        return None
    name = words[0].split("(")[0].strip(CONTINUATION_MARKER).strip()
    return name or None


def _strip_terminator(st: Statement) -> None:
    if st.params:
        last = st.params[-1]
        if last.endswith(STATEMENT_TERMINATOR):
            last = last[:-1].rstrip()
            if last:
                st.params[-1] = last
            else:
                st.params.pop()
    elif st.instruction.endswith(STATEMENT_TERMINATOR):
        st.instruction = st.instruction[:-1].rstrip()


def _strip_continuation(st: Statement) -> None:
    if st.params:
        last = st.params[-1]
        if not last.endswith(CONTINUATION_MARKER):
            return
        st.continues = True
        last = last[:-1].strip()
        if last:
            st.params[-1] = last
            return
        # "MOVQ AX, \" keeps its dangling separator on the previous operand.
        st.params.pop()
        if st.params:
            st.params[-1] += PARAM_SEPARATOR
    elif st.instruction.endswith(CONTINUATION_MARKER):
        st.continues = True
        st.instruction = st.instruction[:-1].strip()


def build_statement(line: str, defines: AbstractSet[str] = frozenset()) -> Optional[Statement]:
    """Build a Statement from one line of code.

    Args:
        line: Raw line text; surrounding whitespace is ignored.
        defines: Macro names registered so far in the current input.

    Returns:
        The parsed Statement, or None for a blank line.
    """
    text = line.strip()
    comment = ""
    start = find_line_comment(text)
    if start > 0:
        comment = text[start + 2:].strip()
        text = text[:start].strip()

    fields = text.split()
    if not fields:
        return None

    token = fields[0]
    st = Statement(instruction=token, comment=comment)
    st.package_decl = token == PACKAGE_KEYWORD
    st.is_macro_call = is_macro_call(token, defines)
    if st.is_macro_call:
        st.instruction = text.replace("\t", " ")
    else:
        st.params = split_params(text[len(token):])

    _strip_terminator(st)
    _strip_continuation(st)

    st.kind = classify(st.instruction)
    st.define = define_name(st.instruction, st.params)
    return st
