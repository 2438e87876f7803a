"""Comment detection and normalization.

WHY: Comments are where hand-written assembler is least consistent:
``//comment`` vs ``// comment``, ``/* single line */`` blocks, block
comments that swallow half a line, and multi-line blocks decorated with a
column of ``*``. The state machine needs each of these turned into a small,
predictable decision.

HOW: Pure functions over one line of text. The state machine owns the
only state involved (inside-block and last-line-was-starred) and passes it
in where needed.

RULES:
- ``//`` text keeps the author's spacing when it already starts with
  whitespace or with a decorative marker (``+`` build tags, ``///``).
- A ``/*`` that appears after a ``//`` is comment text, not a block opener.
- A ``//`` inside a ``/* ... */`` span is block text, not a line comment.
- Block-comment continuation lines that start with ``*`` get exactly one
  leading space so the stars line up under the opening ``/*``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

LINE_COMMENT = "//"
BLOCK_OPEN = "/*"
BLOCK_CLOSE = "*/"

# First characters after "//" that mark deliberate formatting.
LINE_COMMENT_DECORATIONS = "+/"

# Leading character of decorated block-comment continuation lines.
BLOCK_DECORATION = "*"


def find_line_comment(text: str) -> int:
    """Return the index of the first ``//`` outside a ``/* */`` span, or -1."""
    i = 0
    in_block = False
    while i < len(text) - 1:
        pair = text[i:i + 2]
        if in_block:
            if pair == BLOCK_CLOSE:
                in_block = False
                i += 2
                continue
        elif pair == BLOCK_OPEN:
            in_block = True
            i += 2
            continue
        elif pair == LINE_COMMENT:
            return i
        i += 1
    return -1


def normalize_line_comment(line: str) -> str:
    """Render a comment-only line.

    Args:
        line: Trimmed line starting with ``//``.

    Returns:
        ``//`` for an empty comment, the line unchanged when the text after
        ``//`` starts with whitespace or a decoration, otherwise the text
        with exactly one space inserted after ``//``.
    """
    body = line[len(LINE_COMMENT):]
    if not body.strip():
        return LINE_COMMENT
    if body[0].isspace() or body[0] in LINE_COMMENT_DECORATIONS:
        return LINE_COMMENT + body
    return LINE_COMMENT + " " + body


@dataclass
class BlockComment:
    """A ``/* ... */`` span found on one line.

    Attributes:
        before: Trimmed code preceding ``/*``.
        text: Trimmed comment text without delimiters.
        after: Trimmed code following ``*/`` (empty when unclosed).
        closed: True when ``*/`` appears on the same line.
    """

    before: str
    text: str
    after: str
    closed: bool

    @property
    def at_end(self) -> bool:
        """True for a closed span with nothing following it."""
        return self.closed and not self.after


def find_block_comment(line: str) -> Optional[BlockComment]:
    """Locate the first block comment on a line.

    Returns None when the line has no ``/*`` or when the ``/*`` sits inside
    a trailing ``//`` comment.
    """
    start = line.find(BLOCK_OPEN)
    if start < 0:
        return None
    marker = line.find(LINE_COMMENT)
    if 0 <= marker < start:
        return None
    before = line[:start].strip()
    end = line.find(BLOCK_CLOSE, start + len(BLOCK_OPEN))
    if end < 0:
        return BlockComment(
            before=before,
            text=line[start + len(BLOCK_OPEN):].strip(),
            after="",
            closed=False,
        )
    return BlockComment(
        before=before,
        text=line[start + len(BLOCK_OPEN):end].strip(),
        after=line[end + len(BLOCK_CLOSE):].strip(),
        closed=True,
    )


def block_comment_opener(tail: str) -> str:
    """Render the first line of a multi-line block comment.

    ``tail`` is the raw text after ``/*``. A doc-style ``/**`` opener keeps
    its second star attached.
    """
    if tail.startswith(BLOCK_DECORATION):
        return BLOCK_OPEN + tail.rstrip()
    text = tail.strip()
    if not text:
        return BLOCK_OPEN
    return BLOCK_OPEN + " " + text


def block_comment_body(raw: str) -> Tuple[str, bool]:
    """Render a line inside an open block comment.

    Returns:
        (rendered line, whether the line used the ``*`` decoration).
    """
    stripped = raw.strip()
    if stripped.startswith(BLOCK_DECORATION):
        return " " + stripped, True
    return raw.rstrip(), False


def block_comment_closer(head: str, starred: bool) -> str:
    """Render the line that closes a block comment.

    Args:
        head: Raw text preceding ``*/`` on the closing line.
        starred: Whether the previous body line used the ``*`` decoration.
    """
    if starred:
        head = head.strip()
        if not head:
            return " " + BLOCK_CLOSE
        return " " + head + " " + BLOCK_CLOSE
    return head + BLOCK_CLOSE
