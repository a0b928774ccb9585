"""CLI commands for monava.

This package contains all subcommand implementations.
"""

from monava.cli.commands import config, deps, detect, info, packages

__all__ = ["config", "deps", "detect", "info", "packages"]
