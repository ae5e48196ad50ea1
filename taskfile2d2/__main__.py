"""Allow running the CLI with ``python -m taskfile2d2``."""

import sys

from taskfile2d2.cli import main

if __name__ == "__main__":
    sys.exit(main())
