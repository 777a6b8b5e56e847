#!/usr/bin/env python3
"""
Version command for singularity-driver CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from typing import Optional

import typer
from rich.text import Text

try:
    from typing import Annotated  # Python 3.9+
except ImportError:
    from typing_extensions import Annotated  # Python 3.8

from singularity_driver.core.errors import VersionError

from ..constants import ExitCode
from ..utils import console, create_singularity, fail, setup_logging


def version(
    binary: Annotated[
        Optional[str],
        typer.Option("--binary", "-b", help="Runtime executable (default: $SINGULARITY_DRIVER_BINARY or singularity)"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose logging")
    ] = False,
) -> None:
    """
    🔖 Show the version of the container runtime.
    """
    setup_logging(verbose)
    singularity = create_singularity(binary)

    try:
        runtime_version = singularity.version()
    except VersionError as e:
        fail(e, ExitCode.FAILURE, verbose)

    console.print(Text(runtime_version))
