#!/usr/bin/env python3
"""
Command Line Interface
======================

Generate a D2 diagram file from a Taskfile.

The Taskfile is read from the path given as first argument, or from
standard input when no path is given and input is piped. File input writes
next to the input (or to the second argument); piped input writes to
standard output. Empty standard input prints the help like a terminal does.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from taskfile2d2 import __version__
from taskfile2d2.config.logging import get_logger, setup_logging
from taskfile2d2.config.settings import get_settings
from taskfile2d2.core.d2.translator import taskfile_to_d2
from taskfile2d2.exceptions import FatalTaskfileError, Taskfile2D2Error

logger = get_logger(__name__)

EXAMPLES = """\
examples:
  # Write the diagram to "Taskfile.yml.d2"
  taskfile2d2 Taskfile.yml

  # Write the diagram to a chosen file
  taskfile2d2 Taskfile.yml out.d2

  # Read standard input, write standard output
  cat Taskfile.yml | taskfile2d2 > output.d2
  taskfile2d2 < Taskfile.yml > output.d2

  # Pipe a Taskfile from a remote source
  curl -s http://example.com/Taskfile.yml | taskfile2d2 > output.d2
"""


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="taskfile2d2",
        description="Generate a Terrastruct D2 diagram file from a Taskfile.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", nargs="?", type=Path, help="Taskfile to read (Taskfile.yml)")
    parser.add_argument(
        "output",
        nargs="?",
        type=Path,
        help="D2 file to write, defaults to the input path with the output suffix appended",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def default_output_path(input_path: Path) -> Path:
    """Output path used when only the input is given."""
    return input_path.with_name(input_path.name + get_settings().output_suffix)


def convert_file(input_path: Path, output_path: Optional[Path] = None) -> Path:
    """
    Convert a Taskfile on disk into a D2 file.

    Args:
        input_path: Taskfile path
        output_path: Optional D2 path

    Returns:
        Path of the written D2 file
    """
    output_path = output_path or default_output_path(input_path)
    d2 = taskfile_to_d2(input_path.read_bytes())
    output_path.write_text(d2, encoding="utf-8")
    logger.info("D2 file written", input=str(input_path), output=str(output_path))
    return output_path


def convert_stream() -> bool:
    """
    Convert the whole of standard input, writing D2 to standard output.

    Returns:
        False when standard input is empty (/dev/null, a closed pipe)
    """
    content = sys.stdin.buffer.read()
    if not content.strip():
        return False
    sys.stdout.write(taskfile_to_d2(content))
    sys.stdout.flush()
    return True


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the CLI.

    Args:
        argv: Arguments, defaults to ``sys.argv[1:]``

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level="DEBUG" if args.debug else None)

    try:
        if args.input is not None:
            convert_file(args.input, args.output)
        elif sys.stdin.isatty() or not convert_stream():
            parser.print_help()
    except FatalTaskfileError as e:
        logger.debug("Fatal Taskfile error", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except (Taskfile2D2Error, OSError) as e:
        logger.debug("Taskfile conversion failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
