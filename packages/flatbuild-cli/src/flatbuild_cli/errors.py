"""CLI error handling for flatbuild-cli.

This module provides CLI-specific error handling that wraps
flatbuild-core exceptions and provides user-friendly messages
with appropriate exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click
from pydantic import ValidationError as PydanticValidationError

from flatbuild_cli.output import error

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


# Exit codes following sysexits.h convention
EXIT_USER_ERROR = 1  # User error (invalid model, unresolvable default target)
EXIT_SYSTEM_ERROR = 2  # System error (missing file, write failure)


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        """Initialize CLIError.

        Args:
            message: User-facing error message.
            exit_code: Exit code for the CLI.
        """
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting.

        Args:
            file: Output file (unused, for Click compatibility).
        """
        error(self.format_message())


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format Pydantic validation error into user-friendly message.

    Args:
        err: Pydantic ValidationError instance.

    Returns:
        Formatted error message with field paths and issues.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - targets.0.name: Field required"
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]

    for e in errors:
        loc = ".".join(str(x) for x in e["loc"])
        msg = e["msg"]
        lines.append(f"  - {loc}: {msg}" if loc else f"  - {msg}")

    return "\n".join(lines)


def handle_yaml_error(err: Exception, file_path: str) -> NoReturn:
    """Handle YAML parsing errors with line number information.

    Args:
        err: YAML parsing exception.
        file_path: Path to the file being parsed.

    Raises:
        CLIError: Always raises with formatted error message.
    """
    error_msg = str(err)
    mark = getattr(err, "problem_mark", None)
    if mark is not None:
        line = mark.line + 1
        col = mark.column + 1
        problem = getattr(err, "problem", None) or err
        error_msg = f"YAML syntax error at line {line}, column {col}: {problem}"

    raise CLIError(f"Invalid YAML in {file_path}: {error_msg}")


def handle_validation_error(err: PydanticValidationError, file_path: str) -> NoReturn:
    """Handle Pydantic validation errors with user-friendly messages.

    Args:
        err: Pydantic ValidationError instance.
        file_path: Path to the file being validated.

    Raises:
        CLIError: Always raises with formatted error message.
    """
    formatted = format_pydantic_error(err)
    raise CLIError(f"Invalid project model in {file_path}:\n{formatted}")


def handle_file_not_found(file_path: str) -> NoReturn:
    """Handle file not found errors with helpful suggestions.

    Args:
        file_path: Path to the missing file.

    Raises:
        CLIError: Always raises with formatted error message.
    """
    raise CLIError(
        f"File not found: {file_path}\n\n"
        "Use --file to point at an evaluated project model (YAML or JSON).",
        exit_code=EXIT_SYSTEM_ERROR,
    )


def handle_permission_error(path: str, operation: str = "access") -> NoReturn:
    """Handle permission errors.

    Args:
        path: Path that caused the permission error.
        operation: Operation that failed (read, write, etc.).

    Raises:
        CLIError: Always raises with formatted error message.
    """
    raise CLIError(
        f"Permission denied: Cannot {operation} {path}",
        exit_code=EXIT_SYSTEM_ERROR,
    )


def handle_load_error(err: Exception, file_path: str) -> NoReturn:
    """Translate a project model loading failure into a CLIError.

    Args:
        err: Exception raised while loading the model.
        file_path: Path to the model file.

    Raises:
        CLIError: Always.
    """
    if isinstance(err, FileNotFoundError):
        handle_file_not_found(file_path)
    if isinstance(err, PermissionError):
        handle_permission_error(file_path, "read")
    if isinstance(err, PydanticValidationError):
        handle_validation_error(err, file_path)
    if "yaml" in type(err).__module__.lower():
        handle_yaml_error(err, file_path)
    raise CLIError(f"Cannot load {file_path}: {err}")
