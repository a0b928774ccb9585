"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from monava import __version__
from monava.cli.commands import config, deps, detect, info, packages
from monava.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="monava",
    help="Detect monorepos and list their packages.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"monava version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging to stderr through Rich.

    Args:
        verbose: Log at DEBUG instead of WARNING.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    root_logger = logging.getLogger("monava")
    root_logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in root_logger.handlers):
        root_logger.addHandler(RichHandler(console=err_console, show_path=verbose))


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
) -> None:
    """monava - Monorepo detection and package listing.

    Recognizes npm, Yarn, PNPM, Nx and Lerna workspaces, Cargo workspaces
    and Poetry monorepos.
    """
    configure_logging(verbose)


# Register commands
app.command(name="detect")(detect.detect)
app.command(name="packages")(packages.list_packages)
app.command(name="info")(info.info)
app.command(name="deps")(deps.deps)
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
