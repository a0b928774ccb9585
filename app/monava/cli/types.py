"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

import logging
from enum import Enum
from pathlib import Path

import typer

from monava.core.config import ConfigError, load_config_or_default
from monava.core.monorepo import MonorepoService
from monava.models.detection import DetectionResult
from monava.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def get_service() -> MonorepoService:
    """Build a service from the user configuration.

    Raises:
        typer.Exit: If the configuration file exists but is invalid.
    """
    try:
        config = load_config_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    if config.debug:
        logging.getLogger("monava").setLevel(logging.DEBUG)
    return MonorepoService(config)


def require_context(
    service: MonorepoService,
    path: Path | None,
    max_depth: int | None = None,
) -> DetectionResult:
    """Detect the monorepo around a path or exit with an error.

    Args:
        service: Service to detect with.
        path: Starting directory; the current directory when None.
        max_depth: Directories to test; configuration default when None.

    Returns:
        Detection context for the nearest workspace root.

    Raises:
        typer.Exit: If no monorepo is found.
    """
    start = path or Path.cwd()
    context = service.detect(start, max_depth)
    if context is None:
        print_error(f"No monorepo detected at or above {start}")
        raise typer.Exit(code=1)
    return context
