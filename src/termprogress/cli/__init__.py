"""
CLI module for termprogress.

This module contains the command-line interface used by the ``termprogress``
console script.
"""

from .commands import create_parser, parse_args, DEMO_NAMES
from .handlers import handle_cli_command, run_demos, DemoContext

__all__ = ["create_parser", "parse_args", "DEMO_NAMES", "handle_cli_command", "run_demos", "DemoContext"]
