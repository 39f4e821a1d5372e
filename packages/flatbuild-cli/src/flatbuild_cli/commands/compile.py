"""flatbuild compile command - Generate the procedural program."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from flatbuild_cli.errors import (
    EXIT_SYSTEM_ERROR,
    CLIError,
    format_pydantic_error,
    handle_load_error,
    handle_permission_error,
)
from flatbuild_cli.output import emit_program, success


def parse_global_properties(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Parse repeated NAME=VALUE options into a dict (last one wins)."""
    properties: dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected NAME=VALUE, got '{item}'", ctx=ctx, param=param)
        properties[name.strip()] = value
    return properties


@click.command("compile")
@click.option(
    "-f",
    "--file",
    "file_path",
    type=click.Path(exists=False),
    default="./project.yaml",
    help="Path to the evaluated project model [default: ./project.yaml]",
)
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write the program to this file instead of stdout",
)
@click.option(
    "-p",
    "--property",
    "global_properties",
    multiple=True,
    callback=parse_global_properties,
    metavar="NAME=VALUE",
    help="Global property override used during expansion (repeatable)",
)
@click.option(
    "--parameter-order",
    type=click.Choice(["sorted", "declared"]),
    default=None,
    help="Task parameter order [default: sorted]",
)
@click.option(
    "--item-schemas/--no-item-schemas",
    "emit_item_schemas",
    default=None,
    help="Emit a type declaration per item schema [default: on]",
)
@click.option(
    "--detect-cycles/--no-detect-cycles",
    "detect_cycles",
    default=None,
    help="Fail when the target call graph is cyclic [default: off]",
)
@click.option(
    "--workers",
    "max_workers",
    type=click.IntRange(1, 64),
    default=None,
    help="Threads used to compile targets [default: 1]",
)
def compile_cmd(
    file_path: str,
    output_path: str | None,
    global_properties: dict[str, str],
    parameter_order: str | None,
    emit_item_schemas: bool | None,
    detect_cycles: bool | None,
    max_workers: int | None,
) -> None:
    """Generate the procedural program for an evaluated project.

    Options left unset fall back to FLATBUILD_* environment variables,
    then to built-in defaults.

    Examples:

        flatbuild compile -f project.yaml

        flatbuild compile -f project.yaml -o build.csx

        flatbuild compile -f project.yaml -p Configuration=Release --detect-cycles
    """
    # Import here to avoid heavy imports at CLI startup
    import yaml
    from pydantic import ValidationError as PydanticValidationError

    from flatbuild_core import Compiler, CompilerSettings, FlatbuildError

    overrides: dict[str, Any] = {
        "parameter_order": parameter_order,
        "emit_item_schemas": emit_item_schemas,
        "detect_cycles": detect_cycles,
        "max_workers": max_workers,
    }
    try:
        settings = CompilerSettings(**{k: v for k, v in overrides.items() if v is not None})
    except PydanticValidationError as e:
        raise CLIError(f"Invalid settings:\n{format_pydantic_error(e)}") from None

    compiler = Compiler(settings)
    try:
        program = compiler.compile_file(file_path, global_properties)
    except FlatbuildError as e:
        raise CLIError(f"Compilation failed: {e.user_message}") from None
    except (OSError, yaml.YAMLError, PydanticValidationError) as e:
        handle_load_error(e, file_path)

    if output_path is None:
        emit_program(program.text)
        return

    output = Path(output_path)
    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        with output.open("w", encoding="utf-8") as sink:
            compiler.write(program, sink)
    except PermissionError:
        handle_permission_error(output_path, "write")
    except OSError as e:
        raise CLIError(
            f"Cannot write {output_path}: {e.strerror or e}",
            exit_code=EXIT_SYSTEM_ERROR,
        ) from None

    success(
        f"Compiled {len(program.targets)} targets to {output} "
        f"(default target: {program.default_target})"
    )
