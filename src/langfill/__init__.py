"""
langfill - fills missing translations of per-module language string tables.
"""

import sys

from .main import main as cli_main


def main() -> None:
    """Console entry point."""
    sys.exit(cli_main())


__all__ = ["main"]
