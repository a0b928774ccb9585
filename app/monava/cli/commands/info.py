"""Info command implementation.

Shows the details of one package, or a summary of the whole monorepo.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from monava.cli.types import OutputFormat, get_service, require_context
from monava.utils.formatting import console, print_error


def info(
    name: Annotated[
        str | None,
        typer.Argument(help="Package name (default: summarize the monorepo)."),
    ] = None,
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
    """Show details of package NAME, or of the monorepo itself."""
    service = get_service()
    context = require_context(service, path)

    if name is None:
        summary = service.describe(context)
        if output_format == OutputFormat.JSON:
            console.print_json(json.dumps(summary.to_dict()))
            return
        console.print(f"[header]Ecosystem:[/] [ecosystem]{context.ecosystem.value}[/]")
        console.print(f"[header]Type:[/]      {context.subtype.value}")
        console.print(f"[header]Root:[/]      [package_path]{context.root}[/]")
        console.print(f"[header]Packages:[/]  {len(summary.packages)}")
        return

    pkg = service.get_package(context, name)
    if pkg is None:
        print_error(f"Package not found: {name}")
        raise typer.Exit(code=1)

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(pkg.to_dict()))
        return

    console.print(f"[header]Name:[/]     [package_name]{pkg.name}[/]")
    console.print(f"[header]Type:[/]     [ecosystem]{pkg.ecosystem_tag}[/]")
    console.print(f"[header]Path:[/]     [package_path]{pkg.path}[/]")
    console.print(f"[header]Manifest:[/] [package_path]{pkg.manifest_path}[/]")
