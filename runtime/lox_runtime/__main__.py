"""
Command-line entry point

    lox [script]          run a script, or start a prompt without one
    lox -v script.lox     with debug logging
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .lox_config import LoxConfig
from .lox_errors import EXIT_NOINPUT, EXIT_USAGE
from .lox_runtime import LoxRuntime


class _ArgumentParser(argparse.ArgumentParser):
    """argparse with the sysexits usage code instead of 2"""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(EXIT_USAGE, f"{self.prog}: error: {message}\n")


def main(argv: Optional[List[str]] = None) -> int:
    parser = _ArgumentParser(prog="lox", description="Run a Lox script or start an interactive prompt.")
    parser.add_argument("script", nargs="?", help="Path to a .lox file (omit for a prompt).")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument("--max-call-depth", type=int, default=None,
                        help="Nested calls allowed before 'Stack overflow.' (env LOX_MAX_CALL_DEPTH).")
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        config = LoxConfig.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE
    if args.max_call_depth is not None:
        if args.max_call_depth < 1:
            parser.error("--max-call-depth must be positive")
        config.max_call_depth = args.max_call_depth

    runtime = LoxRuntime(config)

    if args.script is None:
        return runtime.repl()

    if not os.path.isfile(args.script):
        print(f"Error: File '{args.script}' not found.", file=sys.stderr)
        return EXIT_NOINPUT

    return runtime.execute_file(args.script)


if __name__ == "__main__":
    sys.exit(main())
