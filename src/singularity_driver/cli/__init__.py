#!/usr/bin/env python3
"""
CLI Package for singularity-driver

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from .app import app, cli_main
from .constants import ExitCode
from .utils import (
    setup_logging,
    create_singularity,
    display_process_output,
)
from .validators import (
    split_command,
    parse_binds,
    parse_envs,
    build_host_config,
)

__all__ = [
    "app",
    "cli_main",
    "ExitCode",
    "setup_logging",
    "create_singularity",
    "display_process_output",
    "split_command",
    "parse_binds",
    "parse_envs",
    "build_host_config",
]
