"""Configuration constants and .env loading for the command-line driver.

WHY: The formatter's output is fixed, but the driver around it has a few
knobs worth setting per project: which file suffixes count as assembler
source when walking a directory, and how chatty logging is. Keeping them in
one place (and overridable from a .env file) avoids sprinkling os.getenv
calls through the CLI.

HOW: python-dotenv loads the .env file on import. Constants are module-level
values read from the environment with defaults.

RULES:
- ASMFMT_EXTENSIONS: comma-separated suffixes, default ".s"
- ASMFMT_LOG_LEVEL: logging level name, default "WARNING"
- Nothing here influences how a line is formatted.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the directory the tool is run from
load_dotenv()

DEFAULT_EXTENSIONS = ".s"


def parse_extensions(raw: str) -> tuple[str, ...]:
    """Normalize a comma-separated list of file suffixes.

    RULES:
    - Entries are trimmed and lowercased; a leading dot is added if missing
    - Empty entries are dropped, duplicates removed (first one wins)
    - Raises ValueError when no suffix remains
    """
    result: list[str] = []
    for item in raw.split(","):
        item = item.strip().lower()
        if not item:
            continue
        if not item.startswith("."):
            item = "." + item
        if item not in result:
            result.append(item)
    if not result:
        raise ValueError("No source file extensions configured: {!r}".format(raw))
    return tuple(result)


SOURCE_EXTENSIONS = parse_extensions(os.getenv("ASMFMT_EXTENSIONS", DEFAULT_EXTENSIONS))
LOG_LEVEL = os.getenv("ASMFMT_LOG_LEVEL", "WARNING").upper()
