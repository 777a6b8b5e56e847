#!/usr/bin/env python3
"""
Translate a ContainerSpec into Singularity command-line arguments.

The runtime is positionally sensitive: every flag must precede the image and
the image must precede the program. Each flag and its value travel as one
argument-vector element (``--memory=<n>``), and the vector is handed to the
spawner directly, so values with spaces or shell metacharacters stay intact.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import shlex
from typing import Iterable, List, Optional, Sequence

from singularity_driver.core.config import Bind, ContainerSpec, HostConfig
from singularity_driver.core.errors import ConfigurationError, create_error_context


def build_pull_args(image: str, output_path: str) -> List[str]:
    """Arguments for ``singularity pull <output_path> <image>``."""
    return ["pull", output_path, image]


def validate_host_config(host_config: HostConfig) -> None:
    """Check the HostConfig invariants.

    Raises:
        ConfigurationError: If a numeric limit is not a positive integer or a
            bind path is empty.
    """
    for name in ("cpu_shares", "cpus", "memory", "memory_reservation"):
        value = getattr(host_config, name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigurationError(
                f"{name} must be a positive integer, got {value!r}",
                context=create_error_context(operation="translate", component="HostConfig"),
            )
    if host_config.binds is not None:
        validate_binds(host_config.binds)


def validate_binds(binds: Iterable[Bind]) -> None:
    for host_path, container_path in binds:
        if not host_path or not container_path:
            raise ConfigurationError(
                f"bind paths must be non-empty, got {host_path!r}:{container_path!r}",
                context=create_error_context(operation="translate", component="binds"),
            )


def validate_spec(spec: ContainerSpec) -> None:
    """Check that a spec can be executed.

    Raises:
        ConfigurationError: If image or program is empty or the host
            configuration is invalid.
    """
    for name in ("image", "program"):
        if not getattr(spec, name):
            raise ConfigurationError(
                f"{name} must be set before exec",
                context=create_error_context(
                    operation="translate", component="ContainerSpec", image=spec.image or None
                ),
                suggestions=[f"Call ContainerSpec.with_{name}() before exec"],
            )
    if spec.host_config is not None:
        validate_host_config(spec.host_config)


def resolve_binds(host_config: Optional[HostConfig], binds: Sequence[Bind]) -> Sequence[Bind]:
    """HostConfig binds win over caller binds whenever they are set."""
    if host_config is not None and host_config.binds is not None:
        return host_config.binds
    return binds


def build_exec_args(
    spec: ContainerSpec,
    binds: Sequence[Bind] = (),
    extra_args: Sequence[str] = (),
) -> List[str]:
    """Arguments for ``singularity exec``.

    Args:
        spec: The container invocation.
        binds: Bind mounts used when the spec's HostConfig defines none.
        extra_args: Additional runtime arguments, placed after all generated
            flags and before the image.

    Returns:
        list: The argument vector, without the runtime binary.

    Raises:
        ConfigurationError: If the spec is incomplete or invalid.
    """
    validate_spec(spec)
    host_config = spec.host_config
    selected_binds = resolve_binds(host_config, binds)
    validate_binds(selected_binds)

    argv = ["exec"]

    for host_path, container_path in selected_binds:
        argv.append(f"--bind={host_path}:{container_path}")

    if host_config is not None:
        if host_config.cpu_shares is not None:
            argv.append(f"--cpu-shares={host_config.cpu_shares}")
        if host_config.cpus is not None:
            argv.append(f"--cpus={host_config.cpus}")
        if host_config.memory is not None:
            argv.append(f"--memory={host_config.memory}")
        if host_config.memory_reservation is not None:
            argv.append(f"--memory-reservation={host_config.memory_reservation}")

    for name, value in spec.env.items():
        argv.append(f"--env={name}={value}")

    if spec.work_dir is not None:
        argv.append(f"--workdir={spec.work_dir}")

    if host_config is not None and host_config.contain_all:
        argv.append("--containall")

    argv.extend(extra_args)
    argv.append(spec.image)
    argv.append(spec.program)
    argv.extend(spec.args)
    return argv


def format_command(binary: str, args: Sequence[str]) -> str:
    """Render a command as a shell-quoted string, for logs only."""
    return shlex.join([binary, *args])
