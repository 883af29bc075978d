"""
Command line entry point.

Usage: shn2xml [--encoding ENC] [-v] (--stdin | INPUT) (--stdout | OUTPUT)

Positional paths are taken as the input first, then the output, for
whichever of the two is not replaced by its flag.
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .converter import convert_file
from .encodings import DEFAULT_ENCODING
from .exceptions import Shn2XmlError, UsageError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shn2xml",
        description="Convert an SHN file to XML.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="INPUT unless --stdin is given, then OUTPUT unless --stdout is given",
    )
    parser.add_argument(
        "--encoding",
        default="",
        metavar="ENC",
        help=f"Encoding of string columns (default: {DEFAULT_ENCODING})",
    )
    parser.add_argument("-i", "--stdin", action="store_true", help="Read input from stdin")
    parser.add_argument("-o", "--stdout", action="store_true", help="Write output to stdout")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail on bytes that are invalid in the encoding instead of replacing them",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def select_paths(
    paths: List[str], use_stdin: bool, use_stdout: bool
) -> Tuple[Optional[str], Optional[str]]:
    """
    Assign positional paths to input and output.

    Returns:
        (input_path, output_path), None meaning the standard stream

    Raises:
        UsageError: If the number of paths does not match the flags
    """
    wanted = ["input"] * (not use_stdin) + ["output"] * (not use_stdout)
    if len(paths) != len(wanted):
        if len(paths) < len(wanted):
            missing = " and ".join(name.upper() for name in wanted[len(paths) :])
            raise UsageError(f"Missing {missing} (or use --stdin/--stdout)")
        raise UsageError(f"Unexpected argument(s): {' '.join(paths[len(wanted):])}")

    selected = dict(zip(wanted, paths))
    return selected.get("input"), selected.get("output")


def setup_logging(verbose: bool) -> None:
    """Log to stderr through rich so stdout stays free for --stdout."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Run the converter and return the process exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        input_path, output_path = select_paths(args.paths, args.stdin, args.stdout)
    except UsageError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: {e}", file=sys.stderr)
        return EXIT_USAGE

    setup_logging(args.verbose)

    try:
        convert_file(
            input_path,
            output_path,
            encoding_name=args.encoding,
            errors="strict" if args.strict else "replace",
        )
    except Shn2XmlError as e:
        logger.error("%s", e)
        return EXIT_FAILURE
    except OSError as e:
        logger.error("I/O error: %s", e)
        return EXIT_FAILURE

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
