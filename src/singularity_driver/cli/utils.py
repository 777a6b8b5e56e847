#!/usr/bin/env python3
"""
Utility functions for singularity-driver CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from singularity_driver.core.console import ProcessOutput
from singularity_driver.core.errors import (
    ErrorHandler,
    SingularityDriverError,
    handle_error,
    set_error_handler,
)
from singularity_driver.core.singularity import Singularity


# Initialize Rich console
console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Setup Rich logging configuration and unified error handler."""
    log_level = logging.DEBUG if verbose else logging.INFO

    # Setup rich logging handler
    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=verbose,
        markup=False,
        rich_tracebacks=True,
    )

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
        force=True,
    )

    # Setup unified error handler
    error_handler = ErrorHandler(console=console, verbose=verbose)
    set_error_handler(error_handler)


def create_singularity(binary: Optional[str] = None) -> Singularity:
    """Create the gateway used by the commands."""
    return Singularity(binary=binary)


def fail(error: SingularityDriverError, exit_code: int, verbose: bool = False) -> None:
    """Report a library error and leave with the given exit code."""
    handle_error(error, show_traceback=verbose)
    raise typer.Exit(exit_code)


def display_process_output(output: ProcessOutput) -> None:
    """Print a successful run's output."""
    console.print("✅ [bold green]Success:[/bold green]", Text(output.stdout_text.rstrip()))
    if output.stderr:
        console.print(
            Panel(Text(output.stderr_text.rstrip()), title="stderr", border_style="yellow"),
        )
