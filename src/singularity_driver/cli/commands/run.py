#!/usr/bin/env python3
"""
Run command for singularity-driver CLI

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from typing import List, Optional

import typer
from rich.panel import Panel

try:
    from typing import Annotated  # Python 3.9+
except ImportError:
    from typing_extensions import Annotated  # Python 3.8

from singularity_driver.core.config import ContainerSpec
from singularity_driver.core.errors import (
    ConfigurationError,
    ExecError,
    ValidationError,
)

from ..constants import ExitCode
from ..utils import (
    console,
    create_singularity,
    display_process_output,
    fail,
    setup_logging,
)
from ..validators import build_host_config, parse_binds, parse_envs, split_command


def run(
    image: Annotated[str, typer.Argument(help="The name of the image (or path to a .sif file)")],
    command: Annotated[str, typer.Argument(help="The command to run, shell quoting allowed")],
    bind: Annotated[
        List[str],
        typer.Option("--bind", "-B", help="Bind mount HOST:CONTAINER (can specify multiple)"),
    ] = [],
    env: Annotated[
        List[str],
        typer.Option("--env", "-e", help="Environment variable NAME=VALUE (can specify multiple)"),
    ] = [],
    workdir: Annotated[
        Optional[str], typer.Option("--workdir", "-w", help="Working directory inside the container")
    ] = None,
    cpu_shares: Annotated[
        Optional[int], typer.Option("--cpu-shares", min=1, help="Relative CPU weight")
    ] = None,
    cpus: Annotated[
        Optional[int], typer.Option("--cpus", min=1, help="Number of CPUs (default: 1)")
    ] = None,
    memory: Annotated[
        Optional[int], typer.Option("--memory", min=1, help="Memory limit in bytes")
    ] = None,
    memory_reservation: Annotated[
        Optional[int],
        typer.Option("--memory-reservation", min=1, help="Soft memory limit in bytes (default: 2 GiB)"),
    ] = None,
    contain_all: Annotated[
        Optional[bool],
        typer.Option("--contain-all/--no-contain-all", help="Contain file systems, PID, IPC and environment (default: on)"),
    ] = None,
    host_config: Annotated[
        Optional[str],
        typer.Option("--host-config", "-c", help="Host configuration as JSON string"),
    ] = None,
    host_config_file: Annotated[
        Optional[str],
        typer.Option("--host-config-file", "-f", help="File containing host configuration JSON"),
    ] = None,
    runtime_arg: Annotated[
        List[str],
        typer.Option("--runtime-arg", help="Extra argument passed to the runtime before the image"),
    ] = [],
    attach_stdout: Annotated[
        bool, typer.Option("--attach-stdout", help="Log the container's stdout")
    ] = False,
    attach_stderr: Annotated[
        bool, typer.Option("--attach-stderr", help="Log the container's stderr")
    ] = False,
    binary: Annotated[
        Optional[str],
        typer.Option("--binary", "-b", help="Runtime executable (default: $SINGULARITY_DRIVER_BINARY or singularity)"),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable verbose logging")
    ] = False,
) -> None:
    """
    🚀 Run a command inside a container and print the result.

    Without any host option (--cpus, --memory, --host-config, ...) no resource
    or isolation flags are passed. Once one is given, the remaining host
    defaults apply too: 1 CPU, a 2 GiB memory reservation and --containall.
    """
    setup_logging(verbose)

    try:
        program, args = split_command(command)
        binds = parse_binds(bind)
        spec = (
            ContainerSpec()
            .with_image(image)
            .with_program(program)
            .with_args(args)
            .with_envs(parse_envs(env))
        )
        resolved_host_config = build_host_config(
            host_config,
            host_config_file,
            cpu_shares=cpu_shares,
            cpus=cpus,
            memory=memory,
            memory_reservation=memory_reservation,
            contain_all=contain_all,
        )
        if resolved_host_config is not None:
            spec = spec.with_host_config(resolved_host_config)
        if workdir is not None:
            spec = spec.with_work_dir(workdir)
        if attach_stdout:
            spec = spec.with_attach_stdout()
        if attach_stderr:
            spec = spec.with_attach_stderr()

        if verbose:
            console.print(
                Panel(
                    f"Image: [yellow]{image}[/yellow]\n"
                    f"Program: [yellow]{program}[/yellow]\n"
                    f"Binds: [yellow]{len(binds)}[/yellow]\n"
                    f"Env: [yellow]{', '.join(spec.env) or 'none'}[/yellow]",
                    title="Run Configuration",
                    border_style="blue",
                )
            )

        output = create_singularity(binary).exec(spec, binds=binds, args=runtime_arg)

    except (ValidationError, ConfigurationError) as e:
        fail(e, ExitCode.INVALID_ARGS, verbose)
    except ExecError as e:
        fail(e, ExitCode.RUN_FAILURE, verbose)

    display_process_output(output)
