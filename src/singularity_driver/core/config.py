#!/usr/bin/env python3
"""
Configuration model for Singularity invocations.

HostConfig holds the resource and isolation policy, ContainerSpec a single
invocation. Both are frozen; every ContainerSpec builder step returns a new
value and leaves the receiver untouched. Nothing is validated here, the
translator checks invariants when it builds the argument vector.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple, Union

# 2 GiB
DEFAULT_MEMORY_RESERVATION = 2 * 1024 * 1024 * 1024
DEFAULT_CPUS = 1

Bind = Tuple[str, str]
EnvItems = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


@dataclass(frozen=True)
class HostConfig:
    """Resource and isolation policy for the container.

    Attributes:
        cpu_shares: Relative CPU weight, None leaves the runtime default.
        cpus: Number of CPUs available to the container.
        memory: Memory limit in bytes.
        memory_reservation: Soft memory limit in bytes.
        binds: (host_path, container_path) mounts. None means the binds
            passed to ``Singularity.exec`` are used instead.
        contain_all: Contain file systems, PID, IPC and environment.
    """

    cpu_shares: Optional[int] = None
    cpus: Optional[int] = DEFAULT_CPUS
    memory: Optional[int] = None
    memory_reservation: Optional[int] = DEFAULT_MEMORY_RESERVATION
    binds: Optional[Tuple[Bind, ...]] = None
    contain_all: bool = True

    def __post_init__(self) -> None:
        # accept any iterable of pairs but store an immutable tuple
        if self.binds is not None:
            object.__setattr__(
                self, "binds", tuple((host, container) for host, container in self.binds)
            )


@dataclass(frozen=True)
class ContainerSpec:
    """A single container invocation, built step by step."""

    image: str = ""
    program: str = ""
    args: Tuple[str, ...] = ()
    env: Mapping[str, str] = field(default_factory=dict)
    work_dir: Optional[str] = None
    attach_stdout: bool = False
    attach_stderr: bool = False
    host_config: Optional[HostConfig] = None

    def __post_init__(self) -> None:
        # own copies, so no two specs share mutable state
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    def with_image(self, image: str) -> "ContainerSpec":
        """Set the image (e.g. ``ubuntu:latest`` or a ``.sif`` path)."""
        return replace(self, image=image)

    def with_program(self, program: str) -> "ContainerSpec":
        """Set the program to run inside the container."""
        return replace(self, program=program)

    def arg(self, arg: str) -> "ContainerSpec":
        """Append one program argument."""
        return replace(self, args=self.args + (arg,))

    def with_args(self, args: Iterable[str]) -> "ContainerSpec":
        """Append several program arguments.

        A plain string is an iterable of characters, wrap a single argument
        in a list or use arg().
        """
        return replace(self, args=self.args + tuple(args))

    def with_attach_stdout(self) -> "ContainerSpec":
        return replace(self, attach_stdout=True)

    def with_attach_stderr(self) -> "ContainerSpec":
        return replace(self, attach_stderr=True)

    def with_env(self, name: str, value: str) -> "ContainerSpec":
        """Set an environment variable, keeping its first-insertion position."""
        env = dict(self.env)
        env[name] = value
        return replace(self, env=env)

    def with_envs(self, variables: EnvItems) -> "ContainerSpec":
        """Set several environment variables, last write wins."""
        items = variables.items() if isinstance(variables, Mapping) else variables
        env = dict(self.env)
        for name, value in items:
            env[name] = value
        return replace(self, env=env)

    def with_work_dir(self, work_dir: str) -> "ContainerSpec":
        return replace(self, work_dir=work_dir)

    def with_host_config(self, host_config: HostConfig) -> "ContainerSpec":
        return replace(self, host_config=host_config)
