#!/usr/bin/env python3
"""
Unified error handling for singularity-driver.

Every failure raised by the library derives from SingularityDriverError and
carries a category, an optional ErrorContext, a recoverable flag and a list
of suggestions. ErrorHandler renders them as Rich panels for the CLI.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.text import Text


class ErrorCategory(Enum):
    """Error category enumeration."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    RUNTIME = "runtime"
    PULL = "pull"
    EXEC = "exec"
    TIMEOUT = "timeout"


class FailureReason(Enum):
    """Why an external runtime invocation failed."""

    SPAWN_FAILED = "spawn_failed"
    NON_ZERO_EXIT = "non_zero_exit"


@dataclass
class ErrorContext:
    """Where an error happened."""

    operation: str
    phase: Optional[str] = None
    component: Optional[str] = None
    image: Optional[str] = None
    file_path: Optional[str] = None
    additional_info: Optional[Dict[str, Any]] = None


def create_error_context(
    operation: str,
    phase: Optional[str] = None,
    component: Optional[str] = None,
    image: Optional[str] = None,
    file_path: Optional[str] = None,
    additional_info: Optional[Dict[str, Any]] = None,
) -> ErrorContext:
    """Convenience constructor for ErrorContext."""
    return ErrorContext(
        operation=operation,
        phase=phase,
        component=component,
        image=image,
        file_path=file_path,
        additional_info=additional_info,
    )


class SingularityDriverError(Exception):
    """Base class for all singularity-driver errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory,
        context: Optional[ErrorContext] = None,
        recoverable: bool = False,
        suggestions: Optional[List[str]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.context = context
        self.recoverable = recoverable
        self.suggestions = suggestions or []
        self.cause = cause


class ValidationError(SingularityDriverError):
    """Invalid user input."""

    def __init__(self, message: str, **kwargs) -> None:
        kwargs.setdefault("recoverable", True)
        super().__init__(message, ErrorCategory.VALIDATION, **kwargs)


class InvalidCommandError(ValidationError):
    """A command string could not be split into an argument vector."""

    def __init__(self, command: str, **kwargs) -> None:
        kwargs.setdefault(
            "suggestions", ["Check that every quote in the command is closed"]
        )
        super().__init__(f"invalid command `{command}`", **kwargs)
        self.command = command


class ConfigurationError(SingularityDriverError):
    """A configuration value breaks an invariant."""

    def __init__(self, message: str, **kwargs) -> None:
        kwargs.setdefault("recoverable", True)
        super().__init__(message, ErrorCategory.CONFIGURATION, **kwargs)


class RuntimeError(SingularityDriverError):
    """The external runtime could not be used."""

    def __init__(self, message: str, **kwargs) -> None:
        kwargs.setdefault("recoverable", False)
        super().__init__(message, ErrorCategory.RUNTIME, **kwargs)


class SpawnError(RuntimeError):
    """The runtime binary could not be launched (missing, not executable)."""

    def __init__(self, program: str, cause: OSError, **kwargs) -> None:
        kwargs.setdefault(
            "suggestions",
            [
                f"Check that `{program}` is installed and on PATH",
                "Set SINGULARITY_DRIVER_BINARY or --binary to the runtime executable",
            ],
        )
        super().__init__(f"Failed to execute {program}: {cause}", cause=cause, **kwargs)
        self.program = program


class TimeoutError(SingularityDriverError):
    """The runtime did not exit within the configured timeout."""

    def __init__(self, message: str, **kwargs) -> None:
        kwargs.setdefault("recoverable", True)
        super().__init__(message, ErrorCategory.TIMEOUT, **kwargs)


class ProcessTimeoutError(TimeoutError):
    """Raised by Console when a subprocess is killed after its timeout."""


class CommandError(SingularityDriverError):
    """Base for failures of a single runtime invocation.

    Attributes:
        reason (FailureReason): Spawn failure or nonzero exit.
        stderr (str): Captured standard error, empty on spawn failure.
        returncode (int): Exit status, None on spawn failure.
        output (ProcessOutput): Full captured output, None on spawn failure.
    """

    prefix = "Runtime command failed"

    def __init__(
        self,
        reason: FailureReason,
        category: ErrorCategory,
        stderr: str = "",
        returncode: Optional[int] = None,
        output: Any = None,
        **kwargs,
    ) -> None:
        if reason is FailureReason.SPAWN_FAILED:
            detail = str(kwargs.get("cause") or "could not start the runtime")
        else:
            detail = stderr.strip() or f"exit code {returncode}"
        super().__init__(f"{self.prefix}: {detail}", category, **kwargs)
        self.reason = reason
        self.stderr = stderr
        self.returncode = returncode
        self.output = output

    @property
    def spawn_failed(self) -> bool:
        return self.reason is FailureReason.SPAWN_FAILED


class PullError(CommandError):
    """Pulling an image failed."""

    prefix = "Failed to pull image"

    def __init__(self, reason: FailureReason, **kwargs) -> None:
        super().__init__(reason, ErrorCategory.PULL, **kwargs)


class ExecError(CommandError):
    """Executing a program inside a container failed."""

    prefix = "Failed to execute command"

    def __init__(self, reason: FailureReason, **kwargs) -> None:
        super().__init__(reason, ErrorCategory.EXEC, **kwargs)


class VersionError(CommandError):
    """Querying the runtime version failed."""

    prefix = "Failed to get Singularity version"

    def __init__(self, reason: FailureReason, **kwargs) -> None:
        super().__init__(reason, ErrorCategory.RUNTIME, **kwargs)


_CATEGORY_STYLE = {
    ErrorCategory.VALIDATION: ("⚠️", "Validation Error", "yellow"),
    ErrorCategory.CONFIGURATION: ("⚙️", "Configuration Error", "yellow"),
    ErrorCategory.RUNTIME: ("💥", "Runtime Error", "red"),
    ErrorCategory.PULL: ("📥", "Pull Error", "red"),
    ErrorCategory.EXEC: ("🚀", "Exec Error", "red"),
    ErrorCategory.TIMEOUT: ("⏱️", "Timeout Error", "magenta"),
}


class ErrorHandler:
    """Render errors on a Rich console and log them."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False) -> None:
        self.console = console or Console()
        self.verbose = verbose
        self.logger = logging.getLogger(__name__)

    def handle_error(
        self,
        error: BaseException,
        context: Optional[ErrorContext] = None,
        show_traceback: bool = False,
    ) -> None:
        """Print an error panel, plus a traceback in verbose mode."""
        if isinstance(error, SingularityDriverError):
            emoji, title, style = _CATEGORY_STYLE[error.category]
            context = context or error.context
            suggestions = error.suggestions
        else:
            emoji, title, style = "❌", type(error).__name__, "red"
            suggestions = []

        body = Text(str(error), style="bold")
        if context is not None:
            for field in ("operation", "phase", "component", "image", "file_path"):
                value = getattr(context, field)
                if value:
                    body.append(f"\n{field}: ", style="dim")
                    body.append(str(value))
            for key, value in (context.additional_info or {}).items():
                body.append(f"\n{key}: ", style="dim")
                body.append(str(value))
        if isinstance(error, CommandError) and error.returncode is not None:
            body.append("\nexit code: ", style="dim")
            body.append(str(error.returncode))
        if suggestions:
            body.append("\n\n💡 Suggestions:", style="cyan")
            for suggestion in suggestions:
                body.append(f"\n  • {suggestion}")

        self.console.print(
            Panel(body, title=f"{emoji} {title}", border_style=style, expand=False)
        )
        self.logger.debug("Handled %s: %s", type(error).__name__, error)

        if self.verbose and show_traceback:
            self.console.print("[dim]Traceback:[/dim]")
            self.console.print_exception()


_error_handler: Optional[ErrorHandler] = None


def set_error_handler(handler: Optional[ErrorHandler]) -> None:
    """Install the process-wide error handler."""
    global _error_handler
    _error_handler = handler


def get_error_handler() -> Optional[ErrorHandler]:
    return _error_handler


def handle_error(
    error: BaseException,
    context: Optional[ErrorContext] = None,
    show_traceback: bool = False,
) -> None:
    """Route an error to the global handler, or log it when none is set."""
    if _error_handler is None:
        logging.error("%s: %s", type(error).__name__, error)
        return
    _error_handler.handle_error(error, context=context, show_traceback=show_traceback)
