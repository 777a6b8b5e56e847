#!/usr/bin/env python3
"""Module to run singularity commands.

This module provides a class to pull Singularity images and run programs
inside Singularity containers through the runtime's command-line interface.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""
# built-in modules
import logging
import os
import typing
# user-defined modules
from singularity_driver.core.config import Bind, ContainerSpec
from singularity_driver.core.console import Console, ProcessOutput
from singularity_driver.core.errors import (
    ExecError,
    FailureReason,
    PullError,
    SpawnError,
    VersionError,
    create_error_context,
)
from singularity_driver.core.translator import (
    build_exec_args,
    build_pull_args,
    format_command,
)

LOGGER = logging.getLogger(__name__)

BINARY_ENV_VAR = "SINGULARITY_DRIVER_BINARY"
DEFAULT_BINARY = "singularity"


def default_binary() -> str:
    """The runtime executable, from SINGULARITY_DRIVER_BINARY or ``singularity``."""
    return os.environ.get(BINARY_ENV_VAR) or DEFAULT_BINARY


class Singularity:
    """Class to run commands through the Singularity runtime.

    Every call spawns exactly one runtime process and blocks until it exits.
    Nothing is retried.

    Attributes:
        console (Console): The process spawner.
        binary (str): The runtime executable.
    """

    def __init__(
        self,
        console: typing.Optional[Console] = None,
        binary: typing.Optional[str] = None,
    ) -> None:
        """Constructor of the Singularity class.

        Args:
            console (Console): The process spawner, a default one if None.
            binary (str): The runtime executable, see default_binary().
        """
        self.console = console or Console()
        self.binary = binary or default_binary()

    def _run(self, args: typing.Sequence[str]) -> ProcessOutput:
        return self.console.run([self.binary, *args])

    def pull_image(self, image: str, output_path: str) -> bool:
        """Pull an image to a local file.

        A file already present at output_path counts as a successful pull and
        the runtime is not invoked.

        Args:
            image (str): The image URL (e.g. ``docker://ubuntu:latest``).
            output_path (str): Where to write the image file.

        Returns:
            bool: True if the runtime pulled the image, False if output_path
            already existed and nothing was done.

        Raises:
            PullError: If the runtime could not start or exited nonzero.
        """
        if os.path.exists(output_path):
            LOGGER.info("Image already pulled: %s", image)
            return False

        args = build_pull_args(image, output_path)
        LOGGER.info("Pulling image: %s", format_command(self.binary, args))
        context = create_error_context(
            operation="pull_image", component="Singularity", image=image, file_path=output_path
        )

        try:
            output = self._run(args)
        except SpawnError as e:
            raise PullError(
                FailureReason.SPAWN_FAILED, context=context, cause=e, suggestions=e.suggestions
            ) from e

        if not output.success:
            raise PullError(
                FailureReason.NON_ZERO_EXIT,
                stderr=output.stderr_text,
                returncode=output.returncode,
                output=output,
                context=context,
            )
        LOGGER.info("Pulled %s to %s", image, output_path)
        return True

    def exec(
        self,
        spec: ContainerSpec,
        binds: typing.Sequence[Bind] = (),
        args: typing.Sequence[str] = (),
    ) -> ProcessOutput:
        """Execute a program inside a Singularity container.

        Args:
            spec (ContainerSpec): What to run and how.
            binds (list): Bind mounts used when the spec's HostConfig has none.
            args (list): Extra runtime arguments placed before the image.

        Returns:
            ProcessOutput: The captured output of a successful run.

        Raises:
            ConfigurationError: If the spec is incomplete or invalid.
            ExecError: If the runtime could not start or exited nonzero.
        """
        exec_args = build_exec_args(spec, binds=binds, extra_args=args)
        LOGGER.info("executing command: %s", format_command(self.binary, exec_args))
        context = create_error_context(
            operation="exec", component="Singularity", image=spec.image
        )

        try:
            output = self._run(exec_args)
        except SpawnError as e:
            raise ExecError(
                FailureReason.SPAWN_FAILED, context=context, cause=e, suggestions=e.suggestions
            ) from e

        if not output.success:
            raise ExecError(
                FailureReason.NON_ZERO_EXIT,
                stderr=output.stderr_text,
                returncode=output.returncode,
                output=output,
                context=context,
            )

        # attached streams are echoed, the rest only shows up with --verbose
        LOGGER.log(
            logging.INFO if spec.attach_stdout else logging.DEBUG,
            "Output: %s",
            output.stdout_text,
        )
        if output.stderr:
            LOGGER.log(
                logging.INFO if spec.attach_stderr else logging.DEBUG,
                "Error output: %s",
                output.stderr_text,
            )
        return output

    def version(self) -> str:
        """Get the version of Singularity.

        Returns:
            str: The runtime's version line, stripped.

        Raises:
            VersionError: If the runtime could not start or exited nonzero.
        """
        context = create_error_context(operation="version", component="Singularity")
        try:
            output = self._run(["--version"])
        except SpawnError as e:
            raise VersionError(
                FailureReason.SPAWN_FAILED, context=context, cause=e, suggestions=e.suggestions
            ) from e

        if not output.success:
            raise VersionError(
                FailureReason.NON_ZERO_EXIT,
                stderr=output.stderr_text,
                returncode=output.returncode,
                output=output,
                context=context,
            )
        return output.stdout_text.strip()
