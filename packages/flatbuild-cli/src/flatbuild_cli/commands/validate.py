"""flatbuild validate command - Check an evaluated project model."""

from __future__ import annotations

import click

from flatbuild_cli.commands.compile import parse_global_properties
from flatbuild_cli.errors import CLIError, handle_load_error
from flatbuild_cli.output import success, warning


@click.command()
@click.option(
    "-f",
    "--file",
    "file_path",
    type=click.Path(exists=False),
    default="./project.yaml",
    help="Path to the evaluated project model [default: ./project.yaml]",
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
    "--strict",
    is_flag=True,
    default=False,
    help="Treat references to undeclared targets as errors.",
)
def validate(file_path: str, global_properties: dict[str, str], strict: bool) -> None:
    """Validate an evaluated project model.

    Checks the model schema, the default target, the BeforeTargets and
    AfterTargets declarations, and the target call graph for cycles.
    References to undeclared targets are reported as warnings.

    Examples:

        flatbuild validate

        flatbuild validate --file path/to/project.yaml --strict
    """
    # Import here to avoid heavy imports at CLI startup
    import yaml
    from pydantic import ValidationError as PydanticValidationError

    from flatbuild_core import FlatbuildError, ProjectModel, PropertyExpander
    from flatbuild_core.compiler import (
        build_dependency_index,
        check_acyclic,
        find_dangling_references,
        resolve_default_target,
    )

    try:
        project = ProjectModel.from_yaml(file_path)
    except (OSError, yaml.YAMLError, PydanticValidationError) as e:
        handle_load_error(e, file_path)

    expander = PropertyExpander.from_project(project, global_properties)
    try:
        default_target = resolve_default_target(
            project, expander, global_properties=global_properties
        )
        index = build_dependency_index(project.targets, expander)
        check_acyclic(project.targets, index, expander)
    except FlatbuildError as e:
        raise CLIError(f"Validation failed: {e.user_message}") from None

    dangling = find_dangling_references(project.targets, expander)
    for target_name, field_name, missing in dangling:
        warning(f"Target '{target_name}' {field_name} references undeclared target '{missing}'")
    if project.get_target(default_target) is None:
        dangling.append(("<project>", "default target", default_target))
        warning(f"Default target '{default_target}' is not declared")

    if dangling and strict:
        raise CLIError(f"Validation failed: {len(dangling)} undeclared target reference(s)")

    success(
        f"Project model valid ({len(project.targets)} targets, "
        f"default target: {default_target})"
    )
