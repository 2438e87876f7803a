"""Formatting engine: statement IR, classifier, comments, aligner, state machine.

WHY: The core is a pure function of its input text. Keeping it in its own
package makes the boundary explicit: nothing in here reads files, parses
arguments or logs.

HOW: ir.py defines the Statement data model, statement.py builds statements
from lines, comments.py normalizes comments, aligner.py renders one flush
batch, and engine.py drives them line by line.

RULES:
- Only engine.py holds state across lines.
- No I/O, no logging, no module-level mutable state.
"""
