#!/usr/bin/env python3
"""
Main CLI Application for singularity-driver

This module contains the main Typer app and entry point for the
singularity-driver CLI, a tool for developers of the library.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import sys

import typer
from rich.traceback import install

try:
    from typing import Annotated  # Python 3.9+
except ImportError:
    from typing_extensions import Annotated  # Python 3.8

from singularity_driver import __version__

from .commands import pull, run, version
from .constants import ExitCode
from .utils import console

# Install rich traceback handler for better error displays
install(show_locals=False)

# Initialize the main Typer app
app = typer.Typer(
    name="singularity-driver",
    help="📦 singularity-driver - Pull Singularity images and run commands in containers",
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=True,
)

# Register commands
app.command()(pull)
app.command()(run)
app.command()(version)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    show_version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """
    📦 singularity-driver

    Translate container configurations into Singularity command lines.
    """
    if show_version:
        console.print(
            f"📦 [bold cyan]singularity-driver[/bold cyan] version [green]{__version__}[/green]"
        )
        raise typer.Exit()

    # If no command is provided, show help
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        ctx.exit()


def cli_main() -> None:
    """Entry point for the CLI application."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n🛑 [yellow]Operation cancelled by user[/yellow]")
        sys.exit(ExitCode.FAILURE)
    except Exception as e:
        console.print(f"💥 [bold red]Unexpected error: {e}[/bold red]")
        console.print_exception()
        sys.exit(ExitCode.FAILURE)


if __name__ == "__main__":
    cli_main()
