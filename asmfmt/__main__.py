"""Package entry point for ``python -m asmfmt``."""

import sys

from asmfmt.cli import main

if __name__ == "__main__":
    sys.exit(main())
