#!/usr/bin/env python3
"""Module to run console commands.

This module provides the process-spawn primitive used by the Singularity
gateway: an argument vector goes in, exit status and captured streams come
out. No shell is ever involved.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""
# built-in modules
import logging
import shlex
import subprocess
import typing
from dataclasses import dataclass
# user-defined modules
from singularity_driver.core.errors import ProcessTimeoutError, SpawnError

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessOutput:
    """Captured result of a finished subprocess."""

    argv: typing.Tuple[str, ...]
    returncode: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def success(self) -> bool:
        return self.returncode == 0

    @property
    def stdout_text(self) -> str:
        """Standard output decoded as UTF-8, bad bytes replaced."""
        return self.stdout.decode("utf-8", errors="replace")

    @property
    def stderr_text(self) -> str:
        """Standard error decoded as UTF-8, bad bytes replaced."""
        return self.stderr.decode("utf-8", errors="replace")


class Console:
    """Class to run console commands.

    Attributes:
        shellVerbose (bool): Log every command before running it.
        timeout (int): Seconds to wait for a command, None waits forever.
    """

    def __init__(
            self,
            shellVerbose: bool = True,
            timeout: typing.Optional[int] = None
        ) -> None:
        """Constructor of the Console class.

        Args:
            shellVerbose (bool): The shell verbose flag.
            timeout (int): The timeout in seconds, or None for no timeout.
        """
        self.shellVerbose = shellVerbose
        self.timeout = timeout

    def run(
            self,
            argv: typing.Sequence[str],
            env: typing.Optional[typing.Dict[str, str]] = None
        ) -> ProcessOutput:
        """Run a command given as an argument vector.

        Args:
            argv (list): The program followed by its arguments.
            env (dict): The environment variables, or None to inherit.

        Returns:
            ProcessOutput: Exit status and captured stdout/stderr. A nonzero
            exit status is returned, not raised.

        Raises:
            SpawnError: If the program could not be started.
            ProcessTimeoutError: If the timeout expired.
        """
        argv = tuple(argv)
        if self.shellVerbose:
            LOGGER.debug("> %s", shlex.join(argv))

        try:
            proc = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                shell=False,
                env=env,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise ProcessTimeoutError(
                f"Subprocess '{shlex.join(argv)}' timed out after {self.timeout}s",
                cause=exc,
            ) from exc
        except OSError as exc:
            raise SpawnError(argv[0], exc) from exc

        return ProcessOutput(
            argv=argv,
            returncode=proc.returncode,
            stdout=proc.stdout,
            stderr=proc.stderr,
        )
