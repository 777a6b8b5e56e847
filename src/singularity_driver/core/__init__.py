"""
singularity-driver core

Configuration model, command translator, process spawner and the
Singularity execution gateway.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from .config import ContainerSpec, HostConfig
from .config_loader import ConfigLoader, parse_bind, parse_env
from .console import Console, ProcessOutput
from .singularity import Singularity, default_binary
from .translator import build_exec_args, build_pull_args, format_command

__all__ = [
    "ContainerSpec",
    "HostConfig",
    "ConfigLoader",
    "parse_bind",
    "parse_env",
    "Console",
    "ProcessOutput",
    "Singularity",
    "default_binary",
    "build_exec_args",
    "build_pull_args",
    "format_command",
]
