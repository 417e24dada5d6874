"""
Command-line argument parser for termprogress.

This module defines the CLI commands and arguments, kept apart from the
handlers that run them.
"""

import argparse

DEMO_NAMES = ("basic", "custom", "spinner", "async", "silent", "state")


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="termprogress",
        description="termprogress - terminal progress bars and spinners",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  termprogress demo                   # Run every demonstration
  termprogress demo --only spinner    # Run a single demonstration
  termprogress demo --silent          # Capture progress instead of drawing it
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version="termprogress 0.1.0"
    )

    subparsers = parser.add_subparsers(dest="command")

    demo = subparsers.add_parser(
        "demo",
        help="Run the progress bar demonstrations"
    )

    demo.add_argument(
        "--only",
        choices=DEMO_NAMES,
        action="append",
        metavar="NAME",
        help=f"Run only the named demonstration; repeatable ({', '.join(DEMO_NAMES)})"
    )

    demo.add_argument(
        "--silent",
        action="store_true",
        help="Use silent renderers and print the captured results"
    )

    demo.add_argument(
        "--fast",
        action="store_true",
        help="Skip the simulated work delays"
    )

    demo.add_argument(
        "--config",
        type=str,
        metavar="PATH",
        help="Path to configuration file"
    )

    demo.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output"
    )

    return parser


def parse_args(args=None):
    """Parse command line arguments."""
    parser = create_parser()
    return parser.parse_args(args)
