"""Deps command implementation.

Lists the dependencies declared in a package's manifest.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from monava.cli.types import OutputFormat, get_service, require_context
from monava.utils.formatting import (
    console,
    create_dependency_table,
    format_dependency_row,
    print_error,
    print_info,
)


def deps(
    name: Annotated[str, typer.Argument(help="Package name.")],
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Directory inside the monorepo (default: current directory).",
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
    """Show the dependencies declared by package NAME."""
    service = get_service()
    context = require_context(service, path)

    pkg = service.get_package(context, name)
    if pkg is None:
        print_error(f"Package not found: {name}")
        raise typer.Exit(code=1)

    dependencies = service.get_dependencies(pkg)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([dep.to_dict() for dep in dependencies]))
        return

    if not dependencies:
        print_info(f"No dependencies declared by {name}")
        return

    table = create_dependency_table(f"Dependencies of {name}")
    for dep in dependencies:
        table.add_row(*format_dependency_row(dep))
    console.print(table)
