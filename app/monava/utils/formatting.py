"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from monava.core.theme import get_theme

if TYPE_CHECKING:
    from monava.models.package import Dependency, Package


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_package_table(title: str = "Packages") -> Table:
    """Create a pre-configured table for displaying packages.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for package display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Package", no_wrap=True)
    table.add_column("Type", style="ecosystem")
    table.add_column("Path", style="package_path", overflow="ellipsis")
    return table


def format_package_row(pkg: Package, root: Path | None = None) -> tuple[str, str, str]:
    """Format a package as a table row.

    Args:
        pkg: The package to format.
        root: Workspace root; paths under it are shown relative.

    Returns:
        Tuple of (name, ecosystem tag, path) with Rich markup.
    """
    path = pkg.path
    if root is not None and pkg.path.is_relative_to(root):
        path = pkg.path.relative_to(root)

    return (
        f"[package_name]{pkg.name}[/]",
        pkg.ecosystem_tag,
        str(path),
    )


def create_dependency_table(title: str) -> Table:
    """Create a pre-configured table for displaying dependencies."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Dependency", no_wrap=True)
    table.add_column("Version", style="muted")
    table.add_column("Kind")
    return table


def format_dependency_row(dep: Dependency) -> tuple[str, str, str]:
    """Format a dependency as a table row, highlighting runtime dependencies."""
    style = "dependency_runtime" if dep.kind.value == "dependencies" else "dependency_dev"
    return (f"[{style}]{dep.name}[/]", dep.version, dep.kind.value)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
