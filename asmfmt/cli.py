"""Command-line driver for the assembler formatter.

WHY: The formatting core knows nothing about files or processes. Users
need the gofmt-style workflow on top of it: format stdin to stdout, list
files that need formatting, rewrite them in place, or review a diff first.

HOW: Uses argparse for flags and positional paths. Directories are walked
recursively for files whose suffix is listed in config.SOURCE_EXTENSIONS.
Each file is read as bytes, formatted with asmfmt.format_bytes() and then
listed, diffed, rewritten or printed depending on the flags. Progress and
failures are logged to stderr; formatted source, listings and diffs go to
stdout.

RULES:
- No paths: read stdin, write the result to stdout (-w is not allowed)
- -l: print names of files whose formatting differs
- -w: rewrite differing files, only after formatting succeeded
- -d: print a unified diff for differing files
- Without -l/-w/-d the formatted source is printed
- Exit codes: 0 = success, 1 = at least one file failed, 2 = usage error
"""

from __future__ import annotations

import argparse
import difflib
import logging
import sys
from pathlib import Path
from typing import Iterator, List, Optional

from asmfmt import ENCODING, ENCODING_ERRORS, __version__, format_bytes
from asmfmt.config import LOG_LEVEL, SOURCE_EXTENSIONS
from asmfmt.errors import AsmFormatError

logger = logging.getLogger(__name__)


def _write_stdout(data: bytes) -> None:
    """Write raw bytes to stdout after anything already printed."""
    sys.stdout.flush()
    sys.stdout.buffer.write(data)
    sys.stdout.buffer.flush()


def iter_source_files(root: Path) -> Iterator[Path]:
    """Yield assembler files below ``root`` in sorted order.

    A path that is not a directory is yielded as-is, whatever its suffix:
    naming a file explicitly is enough to format it.
    """
    if not root.is_dir():
        yield root
        return
    for path in sorted(root.rglob("*")):
        if path.is_file() and path.suffix.lower() in SOURCE_EXTENSIONS:
            yield path


def unified_diff(name: str, before: bytes, after: bytes) -> bytes:
    """Return a unified diff between the original and formatted source."""
    old = before.decode(ENCODING, ENCODING_ERRORS).splitlines(keepends=True)
    new = after.decode(ENCODING, ENCODING_ERRORS).splitlines(keepends=True)
    lines = difflib.unified_diff(
        old,
        new,
        fromfile="a/{}".format(name),
        tofile="b/{}".format(name),
    )
    return "".join(lines).encode(ENCODING, ENCODING_ERRORS)


def process_file(path: Path, args: argparse.Namespace) -> bool:
    """Format one file according to the flags.

    Returns:
        True on success, False if the file could not be read, formatted or
        written. Failures are logged, never raised.
    """
    try:
        src = path.read_bytes()
        res = format_bytes(src)
    except (AsmFormatError, OSError) as e:
        logger.error("%s: %s", path, e)
        return False

    changed = res != src
    if args.list and changed:
        print(path)
    if args.write and changed:
        try:
            path.write_bytes(res)
        except OSError as e:
            logger.error("%s: %s", path, e)
            return False
        logger.info("formatted %s", path)
    if args.diff and changed:
        _write_stdout(unified_diff(str(path), src, res))
    if not (args.list or args.write or args.diff):
        _write_stdout(res)
    if not changed:
        logger.info("skipping %s", path)
    return True


def process_stdin(args: argparse.Namespace) -> bool:
    """Format stdin to stdout (or list/diff it as ``<standard input>``)."""
    src = sys.stdin.buffer.read()
    try:
        res = format_bytes(src)
    except AsmFormatError as e:
        logger.error("<standard input>: %s", e)
        return False

    changed = res != src
    if args.list and changed:
        print("<standard input>")
    if args.diff and changed:
        _write_stdout(unified_diff("<standard input>", src, res))
    if not (args.list or args.diff):
        _write_stdout(res)
    return True


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Positional: zero or more files or directories
    - Optional: -l/--list, -w/--write, -d/--diff, -v/--verbose, --version
    """
    parser = argparse.ArgumentParser(
        prog="asmfmt",
        description="Format Go-style assembler source files. "
                    "With no paths, formats standard input.",
    )

    parser.add_argument(
        "paths",
        nargs="*",
        help="Files or directories to format. Directories are searched "
             "recursively for {} files.".format(", ".join(SOURCE_EXTENSIONS)),
    )

    parser.add_argument(
        "-l", "--list",
        action="store_true",
        help="List files whose formatting differs from asmfmt's.",
    )

    parser.add_argument(
        "-w", "--write",
        action="store_true",
        help="Write the result to the source file instead of stdout.",
    )

    parser.add_argument(
        "-d", "--diff",
        action="store_true",
        help="Display diffs instead of rewriting files.",
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every processed file to stderr.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version="%(prog)s {}".format(__version__),
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    - Returns the process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else LOG_LEVEL,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if not args.paths:
        if args.write:
            parser.error("cannot use -w with standard input")
        return 0 if process_stdin(args) else 1

    ok = True
    for root in args.paths:
        root_path = Path(root)
        if not root_path.exists():
            logger.error("%s: no such file or directory", root)
            ok = False
            continue
        for path in iter_source_files(root_path):
            if not process_file(path, args):
                ok = False
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
