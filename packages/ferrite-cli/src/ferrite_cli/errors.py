"""CLI error handling for ferrite-cli.

Wraps ferrite-core exceptions in a ClickException that renders the
user-facing message with Rich and exits with the matching code.
"""

from __future__ import annotations

from typing import NoReturn

import click
from rich.markup import escape

from ferrite_cli.output import error
from ferrite_core.errors import BuildError, FerriteError, ToolMissingError

# Exit codes following sysexits.h convention
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # Configuration error or failed build step
EXIT_SYSTEM_ERROR = 2  # Missing toolchain or unreadable file


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting.

        Args:
            file: Output file (unused, for Click compatibility).
        """
        error(escape(self.format_message()))


def exit_code_for(err: FerriteError) -> int:
    """Map a ferrite-core exception to a CLI exit code.

    Example:
        >>> exit_code_for(ToolMissingError("rustup"))
        2
    """
    if isinstance(err, ToolMissingError):
        return EXIT_SYSTEM_ERROR
    return EXIT_USER_ERROR


def handle_ferrite_error(err: FerriteError, goal: str | None = None) -> NoReturn:
    """Re-raise a ferrite-core exception as a CLIError.

    Build failures are prefixed with the goal that was running.

    Args:
        err: Exception raised by ferrite-core.
        goal: Name of the goal being run, if any.

    Raises:
        CLIError: Always.
    """
    message = err.user_message
    if goal is not None and isinstance(err, BuildError):
        message = f"{goal}: {message}"
    raise CLIError(message, exit_code=exit_code_for(err)) from err


def handle_file_not_found(file_path: str) -> NoReturn:
    """Handle an explicitly requested board file that does not exist.

    Raises:
        CLIError: Always raises with formatted error message.
    """
    raise CLIError(
        f"Board file not found: {file_path}\n\n"
        "Omit --file to use ./ferrite.yaml when present, or FERRITE_* variables.",
        exit_code=EXIT_SYSTEM_ERROR,
    )
