"""CLI entry point for flatbuild.

This module defines the main CLI group using the LazyGroup pattern:
subcommands are imported only when invoked, so `flatbuild --help`
stays fast.
"""

from __future__ import annotations

import importlib
from typing import Any

import click
import rich_click as rclick

from flatbuild_cli import __version__
from flatbuild_cli.output import set_no_color
from flatbuild_core.logging import LOG_LEVELS, configure_logging

# Configure rich-click for better help formatting
rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class LazyGroup(rclick.RichGroup):
    """Click group that loads commands lazily.

    Attributes:
        lazy_subcommands: Mapping of command names to "module.attribute" paths.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize LazyGroup.

        Args:
            *args: Positional arguments for parent class.
            lazy_subcommands: Mapping of command name to module path.
                Format: {"compile": "flatbuild_cli.commands.compile.compile_cmd"}
            **kwargs: Keyword arguments for parent class.
        """
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """Return sorted names of directly registered and lazy commands."""
        commands = set(super().list_commands(ctx))
        commands.update(self.lazy_subcommands.keys())
        return sorted(commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, importing it on first use.

        Args:
            ctx: Click context.
            cmd_name: Name of the command to get.

        Returns:
            Click Command instance, or None if not found.
        """
        cmd = super().get_command(ctx, cmd_name)  # type: ignore[arg-type]
        if cmd is not None:
            return cmd

        if cmd_name not in self.lazy_subcommands:
            return None

        module_name, attr_name = self.lazy_subcommands[cmd_name].rsplit(".", 1)
        mod = importlib.import_module(module_name)
        return getattr(mod, attr_name)  # type: ignore[no-any-return]


LAZY_COMMANDS = {
    "compile": "flatbuild_cli.commands.compile.compile_cmd",
    "validate": "flatbuild_cli.commands.validate.validate",
    "schema": "flatbuild_cli.commands.schema.schema",
}


@click.command(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.version_option(version=__version__, prog_name="flatbuild")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="warning",
    show_default=True,
    help="Minimum level of log events written to stderr.",
)
def cli(log_level: str) -> None:
    """Flatbuild - compile declarative build graphs into procedural programs.

    Reads an already-evaluated build project (targets, properties, item
    schemas, tasks) and writes a program whose top-to-bottom execution
    reproduces the build engine's target call order.

    **Getting Started:**

    - `flatbuild validate -f project.yaml` - Check the project model
    - `flatbuild compile -f project.yaml` - Print the generated program
    - `flatbuild compile -f project.yaml -o build.csx` - Write it to a file
    - `flatbuild schema export` - Export the project model JSON Schema
    """
    configure_logging(log_level)


if __name__ == "__main__":
    cli()
