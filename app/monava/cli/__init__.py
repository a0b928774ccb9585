"""CLI package for monava.

This package contains the Typer application and all subcommands.
"""

from monava.cli.main import app

__all__ = ["app"]
