"""
Pytest configuration and shared fixtures for singularity-driver tests.

Provides a recording fake Console so the gateway can be tested without a
container runtime installed.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

from typing import Dict, List, Optional, Sequence

import pytest

from singularity_driver.core.config import ContainerSpec, HostConfig
from singularity_driver.core.console import Console, ProcessOutput
from singularity_driver.core.errors import SpawnError


class FakeConsole(Console):
    """Console that records argument vectors instead of spawning processes."""

    def __init__(
        self,
        returncode: int = 0,
        stdout: bytes = b"",
        stderr: bytes = b"",
        spawn_error: Optional[OSError] = None,
    ) -> None:
        super().__init__(shellVerbose=False)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.spawn_error = spawn_error
        self.calls: List[List[str]] = []

    def run(
        self, argv: Sequence[str], env: Optional[Dict[str, str]] = None
    ) -> ProcessOutput:
        self.calls.append(list(argv))
        if self.spawn_error is not None:
            raise SpawnError(argv[0], self.spawn_error)
        return ProcessOutput(
            argv=tuple(argv),
            returncode=self.returncode,
            stdout=self.stdout,
            stderr=self.stderr,
        )


@pytest.fixture
def fake_console():
    """A console whose commands all succeed with empty output."""
    return FakeConsole()


@pytest.fixture
def make_console():
    """Factory for consoles with a chosen outcome."""
    return FakeConsole


@pytest.fixture
def ubuntu_spec():
    """Spec for ``echo hi`` in ubuntu:latest with the default host config."""
    return (
        ContainerSpec()
        .with_image("ubuntu:latest")
        .with_program("echo")
        .with_args(["hi"])
        .with_host_config(HostConfig())
    )


@pytest.fixture(autouse=True)
def clear_binary_env(monkeypatch):
    """Keep a developer's SINGULARITY_DRIVER_BINARY out of the tests."""
    monkeypatch.delenv("SINGULARITY_DRIVER_BINARY", raising=False)
