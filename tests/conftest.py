"""Shared test fixtures for the asmfmt test suite.

WHY: Several test modules check the same properties (idempotence, token
preservation, blank-line bounds) over the same set of messy inputs.
Centralizing the inputs and the helpers keeps every module honest about
the same corpus.

HOW: MESSY_INPUTS is a list of hand-written sources covering the awkward
cases (labels with code, block comments mid-line, continued macro bodies,
runs of blank lines). GOLDEN_CASES pairs every testdata/*.in file with its
*.golden file. tokens_of() reduces source text to the token sequence that
formatting must preserve.

RULES:
- Inputs avoid ``;`` terminators and empty operands, which the formatter
  strips by design and would break the token comparison.
- Golden files are compared byte-for-byte.
"""

import re
from pathlib import Path
from typing import List

import pytest

TESTDATA = Path(__file__).resolve().parent / "testdata"

GOLDEN_CASES = sorted(TESTDATA.glob("*.in"))

MESSY_INPUTS: List[str] = [
    "MOVQ AX,BX // move it\n",
    "MOVQ AX,BX\nADDQ CX,DX // add\n",
    "start:    MOVQ AX,BX\n",
    "/* hello */\n",
    "MOVQ AX, BX\n\n\n\nADDQ CX, DX\n",
    "\n\n\nTEXT ·f(SB),$0\n  loop:  DECQ CX\n  JNZ loop\n  RET\n\n\n",
    "MOVQ AX, BX /* c */ ADDQ CX, DX\n",
    "/* lead */ MOVQ AX, BX\n",
    "start: RET // done\n",
    "#define F \\\n\tMOVQ AX, BX /* x, y */ \\\n\tRET\n",
    "#define F \\\n  MOVQ AX,BX \\\n  ADDQ CX,DX\nfoo\n",
    "/*\n   * starred\n*/\n  MOVQ AX, BX\n",
    "/* open\n   plain text\n   end */ RET\n",
    "//comment\n//+build amd64\n///triple\n//\nRET\n",
    "MOVQ $1, AX\n// between\nloop_body: ADDQ $1, AX\nJMP loop_body\n",
    "\tMOVOU (SI), X0\r\n\tPXOR X1,X0\r\n\tMOVOU X0, (DI)\r\n",
    "TEXT ·h(SB), NOSPLIT, $0\n\tCALL runtime·entersyscall(SB)\n\tNO_LOCAL_POINTERS // keep\n\tRET\n",
]


def tokens_of(text: str) -> List[str]:
    """Return the tokens of source text, ignoring whitespace and comment delimiters."""
    for delimiter in ("//", "/*", "*/"):
        text = text.replace(delimiter, " ")
    return re.findall(r"[^\s,]+|,", text)


@pytest.fixture(params=MESSY_INPUTS)
def messy_input(request):
    """Each hand-written messy source in turn."""
    return request.param


@pytest.fixture(params=GOLDEN_CASES, ids=lambda p: p.stem)
def golden_case(request):
    """(input path, expected golden bytes) for each testdata/*.in file."""
    path = request.param
    return path, path.with_suffix(".golden").read_bytes()


@pytest.fixture
def tokenize():
    """The tokens_of() helper."""
    return tokens_of
