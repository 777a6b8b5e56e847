#!/usr/bin/env python3
"""
Pull command for singularity-driver CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from typing import Optional

import typer
from rich.panel import Panel

try:
    from typing import Annotated  # Python 3.9+
except ImportError:
    from typing_extensions import Annotated  # Python 3.8

from singularity_driver.core.errors import PullError

from ..constants import ExitCode
from ..utils import console, create_singularity, fail, setup_logging


def pull(
    image: Annotated[str, typer.Argument(help="The URL of the image (e.g. docker://ubuntu:latest)")],
    output_path: Annotated[str, typer.Argument(help="The output path for the image")],
    binary: Annotated[
        Optional[str],
        typer.Option("--binary", "-b", help="Runtime executable (default: $SINGULARITY_DRIVER_BINARY or singularity)"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose logging")
    ] = False,
) -> None:
    """
    📥 Pull a Singularity image from a given URL.

    Nothing is downloaded when OUTPUT_PATH already exists.
    """
    setup_logging(verbose)

    singularity = create_singularity(binary)

    try:
        pulled = singularity.pull_image(image, output_path)
    except PullError as e:
        fail(e, ExitCode.PULL_FAILURE, verbose)

    if not pulled:
        console.print(f"♻️  Image already present at [cyan]{output_path}[/cyan]")
    else:
        console.print(
            Panel(
                f"✅ [bold green]Pulled image[/bold green] [cyan]{image}[/cyan]\n"
                f"Output: [yellow]{output_path}[/yellow]",
                title="Pull",
                border_style="green",
            )
        )
