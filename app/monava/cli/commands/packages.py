"""Packages command implementation.

Lists the member packages of the detected monorepo.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from monava.cli.types import OutputFormat, get_service, require_context
from monava.utils.formatting import (
    console,
    create_package_table,
    format_package_row,
    print_info,
)


def list_packages(
    path: Annotated[
        Path | None,
        typer.Argument(help="Directory inside the monorepo (default: current directory)."),
    ] = None,
    package_type: Annotated[
        str | None,
        typer.Option(
            "--type",
            "-t",
            help="Only show packages of this type (e.g. npm-package, cargo-package).",
        ),
    ] = None,
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-n",
            min=1,
            help="Limit number of packages to display.",
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
    """List the packages of the monorepo containing PATH.

    Examples:
        monava packages                       # All packages, as a table
        monava packages --type cargo-package  # Only Cargo crates
        monava packages --limit 10            # First 10 packages by name
        monava packages --format json         # Output as JSON
    """
    service = get_service()
    context = require_context(service, path)

    packages = service.enumerate(context.root, context.subtype, package_type, limit)
    packages.sort(key=lambda p: p.name)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([pkg.to_dict() for pkg in packages]))
        return

    if not packages:
        print_info(f"No packages found in {context.subtype.value} workspace at {context.root}")
        return

    table = create_package_table(f"Packages ({context.subtype.value})")
    for pkg in packages:
        table.add_row(*format_package_row(pkg, context.root))
    console.print(table)

    console.print(f"\n[muted]{len(packages)} package(s) in {context.root}[/]")
