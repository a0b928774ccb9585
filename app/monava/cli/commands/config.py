"""Config command implementation.

Shows, creates and locates the monava configuration file.
"""

import json
from typing import Annotated

import typer

from monava.core.config import (
    ConfigError,
    MonavaConfig,
    load_config_or_default,
    save_config,
)
from monava.core.paths import ensure_config_dir, get_config_path
from monava.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Manage the monava configuration file.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration (file values over defaults)."""
    try:
        config = load_config_or_default()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    console.print_json(json.dumps(config.model_dump()))


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file holding the default settings."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        print_info(f"Config already exists: {config_path} (use --force to overwrite)")
        return

    try:
        ensure_config_dir()
        saved = save_config(MonavaConfig(), config_path)
    except (ConfigError, RuntimeError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")


@app.command()
def path() -> None:
    """Print the config file location."""
    typer.echo(str(get_config_path()))
