#!/usr/bin/env python3
"""
Validation functions for singularity-driver CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import shlex
from typing import Any, Dict, List, Optional, Tuple

from singularity_driver.core.config import Bind, HostConfig
from singularity_driver.core.config_loader import ConfigLoader, parse_bind, parse_env
from singularity_driver.core.errors import InvalidCommandError, create_error_context


def split_command(command: str) -> Tuple[str, List[str]]:
    """
    Split a shell-style command string into program and arguments.

    Args:
        command: e.g. ``echo 'hello world'``

    Returns:
        Tuple of the program and its arguments, e.g. ``("echo", ["hello world"])``

    Raises:
        InvalidCommandError: If the quoting is unbalanced or the command is empty
    """
    context = create_error_context(operation="split_command", component="cli")
    try:
        parts = shlex.split(command)
    except ValueError as e:
        raise InvalidCommandError(command, context=context, cause=e) from e
    if not parts:
        raise InvalidCommandError(
            command, context=context, suggestions=["Provide a program to run"]
        )
    return parts[0], parts[1:]


def parse_binds(binds: Optional[List[str]]) -> List[Bind]:
    """Parse repeated ``--bind HOST:CONTAINER`` options."""
    return [parse_bind(bind) for bind in binds or []]


def parse_envs(envs: Optional[List[str]]) -> List[Tuple[str, str]]:
    """Parse repeated ``--env NAME=VALUE`` options, keeping their order."""
    return [parse_env(env) for env in envs or []]


def build_host_config(
    host_config: Optional[str],
    host_config_file: Optional[str],
    cpu_shares: Optional[int] = None,
    cpus: Optional[int] = None,
    memory: Optional[int] = None,
    memory_reservation: Optional[int] = None,
    contain_all: Optional[bool] = None,
) -> Optional[HostConfig]:
    """
    Resolve the host configuration for a run.

    Individual flags override the JSON string, which overrides the file.
    Returns None when no host option was given, so the run carries no
    resource or isolation flags at all.

    Raises:
        ConfigurationError: If any layer is invalid
    """
    overrides: Dict[str, Any] = {
        "cpu_shares": cpu_shares,
        "cpus": cpus,
        "memory": memory,
        "memory_reservation": memory_reservation,
        "contain_all": contain_all,
    }
    if not host_config and not host_config_file and all(
        value is None for value in overrides.values()
    ):
        return None
    return ConfigLoader.load(
        host_config=host_config,
        host_config_file=host_config_file,
        overrides=overrides,
    )
