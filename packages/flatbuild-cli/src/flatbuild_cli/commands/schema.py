"""flatbuild schema command - Export JSON Schema."""

from __future__ import annotations

from pathlib import Path

import click

from flatbuild_cli.errors import EXIT_SYSTEM_ERROR, CLIError, handle_permission_error
from flatbuild_cli.output import success


@click.group()
def schema() -> None:
    """Manage the project model JSON Schema.

    **Commands:**

    - `flatbuild schema export` - Export the ProjectModel JSON Schema
    """
    pass


@schema.command("export")
@click.option(
    "-o",
    "--output",
    "output_path",
    type=click.Path(),
    default="./schemas/project-model.schema.json",
    help="Output path [default: ./schemas/project-model.schema.json]",
)
def export_schema(output_path: str) -> None:
    """Export the ProjectModel JSON Schema.

    Evaluators can validate the documents they hand to flatbuild
    against this schema.

    Examples:

        flatbuild schema export

        flatbuild schema export --output custom/path/schema.json
    """
    # Import here to avoid heavy imports at CLI startup
    from flatbuild_core import export_project_model_schema

    output = Path(output_path)
    try:
        export_project_model_schema(output)
    except PermissionError:
        handle_permission_error(output_path, "write")
    except OSError as e:
        raise CLIError(f"Schema export failed: {e}", exit_code=EXIT_SYSTEM_ERROR) from None

    success(f"Schema exported to {output}")
