"""
Main entry point for the termprogress CLI application.

This module provides the main entry point that is called from the installed
console script or with ``python -m termprogress.main``.
"""

import sys

from .cli import parse_args, handle_cli_command
from .core.shutdown import get_shutdown_registry


def main(argv=None) -> int:
    """Main entry point for termprogress."""
    try:
        args = parse_args(argv)

        # restore the cursor on Ctrl+C, SIGTERM and interpreter exit
        get_shutdown_registry()

        return handle_cli_command(args)

    except KeyboardInterrupt:
        print("\n👋 Interrupted", file=sys.stderr)
        return 0


if __name__ == "__main__":
    sys.exit(main())
