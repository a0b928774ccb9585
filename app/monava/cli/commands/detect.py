"""Detect command implementation.

Reports which monorepo convention governs a directory.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from monava.cli.types import OutputFormat, get_service, require_context
from monava.utils.formatting import console


def detect(
    path: Annotated[
        Path | None,
        typer.Argument(help="Directory to start from (default: current directory)."),
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option(
            "--max-depth",
            "-d",
            min=1,
            help="Number of directories to test walking upward.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Detect the monorepo root and convention.

    Examples:
        monava detect                   # Detect from the current directory
        monava detect apps/web          # Detect from a subdirectory
        monava detect --format json     # Output as JSON
    """
    context = require_context(get_service(), path, max_depth)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(context.to_dict()))
        return

    console.print(f"[header]Ecosystem:[/] [ecosystem]{context.ecosystem.value}[/]")
    console.print(f"[header]Type:[/]      {context.subtype.value}")
    console.print(f"[header]Root:[/]      [package_path]{context.root}[/]")
