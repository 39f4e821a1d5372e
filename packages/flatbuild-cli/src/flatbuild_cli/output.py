"""Rich console output utilities for flatbuild-cli.

Status messages (success, error, warning) go to stderr through Rich,
so that a generated program written to stdout can be piped or redirected
untouched. Respects the NO_COLOR environment variable and --no-color.
"""

from __future__ import annotations

import os
from typing import Any

import click
from rich.console import Console

# Rich automatically respects NO_COLOR, but we also support --no-color flag
_force_no_color = os.environ.get("NO_COLOR") is not None


def create_console(no_color: bool = False) -> Console:
    """Create a stderr Rich Console with appropriate color settings.

    Args:
        no_color: If True, disable colored output. Also respects NO_COLOR env var.

    Returns:
        Configured Console instance.
    """
    force_terminal = None
    if no_color or _force_no_color:
        force_terminal = False
    return Console(
        stderr=True,
        force_terminal=force_terminal,
        no_color=no_color or _force_no_color,
    )


# Default console instance
console = create_console()


def success(message: str, **kwargs: Any) -> None:
    """Print a success message with green checkmark.

    Example:
        >>> success("Compiled to build.csx")
        ✓ Compiled to build.csx
    """
    console.print(f"[green]✓[/green] {message}", **kwargs)


def error(message: str, **kwargs: Any) -> None:
    """Print an error message with red X.

    Example:
        >>> error("No default target declared")
        ✗ No default target declared
    """
    console.print(f"[red]✗[/red] {message}", **kwargs)


def warning(message: str, **kwargs: Any) -> None:
    """Print a warning message with yellow triangle."""
    console.print(f"[yellow]⚠[/yellow] {message}", **kwargs)


def emit_program(text: str) -> None:
    """Write a generated program to stdout, exactly as generated.

    Bypasses Rich so markup-like text in the program is not interpreted.
    """
    click.echo(text, nl=False)


def set_no_color(no_color: bool) -> None:
    """Update the global console to enable/disable colors.

    Args:
        no_color: If True, disable colored output.

    Note:
        This updates the module-level console instance.
    """
    global console
    console = create_console(no_color=no_color)
