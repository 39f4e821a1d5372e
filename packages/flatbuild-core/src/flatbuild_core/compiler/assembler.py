"""Program assembly for flatbuild.

Lays out the generated program in a fixed order so that output diffs
cleanly between runs:

1. One run-flag per target, initialized false
2. One initializer per emitted property, then a blank line
3. One type declaration per item schema (optional)
4. One procedure per target, in declaration order
5. A call to the default target
"""

from __future__ import annotations

from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING

import structlog

from flatbuild_core.compiler.call_graph import check_acyclic
from flatbuild_core.compiler.dependency_index import build_dependency_index, split_target_list
from flatbuild_core.compiler.formatter import format_value
from flatbuild_core.compiler.models import CompiledProgram
from flatbuild_core.compiler.target_compiler import TargetCompiler, run_flag
from flatbuild_core.compiler.writer import IndentedWriter
from flatbuild_core.config import CompilerSettings
from flatbuild_core.errors import DefaultTargetError, ExpansionError

if TYPE_CHECKING:
    from flatbuild_core.expansion import Expander
    from flatbuild_core.schemas import ItemSchema, ProjectModel

logger = structlog.get_logger(__name__)


def _override_table(global_properties: Mapping[str, str] | None) -> dict[str, str]:
    return {name.lower(): value for name, value in (global_properties or {}).items()}


def resolve_default_target(
    project: ProjectModel,
    expander: Expander,
    settings: CompilerSettings | None = None,
    global_properties: Mapping[str, str] | None = None,
) -> str:
    """Resolve the single target the program invokes last.

    Uses the model's explicit default_targets when present, otherwise the
    evaluated value of the configured default-target property, which a
    global property of the same name overrides. When several default
    targets are declared only the first one is invoked.

    Args:
        project: Evaluated project model.
        expander: Expander for an explicit default_targets value.
        settings: Compiler settings (names the default-target property).
        global_properties: Property overrides, matched case-insensitively.

    Returns:
        Name of the default target.

    Raises:
        DefaultTargetError: If no default target is declared or it cannot
            be expanded.
    """
    settings = settings or CompilerSettings()

    if project.default_targets is not None and project.default_targets.strip():
        source = "default_targets"
        try:
            value = expander.expand(project.default_targets)
        except ExpansionError as e:
            raise DefaultTargetError(source, internal_details=e.reason) from e
    else:
        source = settings.default_target_property
        overrides = _override_table(global_properties)
        prop = project.get_property(source)
        if source.lower() in overrides:
            value = overrides[source.lower()]
        elif prop is not None:
            value = prop.expanded_value
        else:
            raise DefaultTargetError(source)

    names = split_target_list(value)
    if not names:
        raise DefaultTargetError(source)
    if len(names) > 1:
        logger.info("default_targets_truncated", invoked=names[0], declared=names)
    return names[0]


class ProgramAssembler:
    """Assemble a complete generated program from an evaluated project.

    Example:
        >>> assembler = ProgramAssembler(PropertyExpander.from_project(project))
        >>> program = assembler.assemble(project)
        >>> program.text.splitlines()[-1]
        'Build();'
    """

    def __init__(
        self,
        expander: Expander,
        settings: CompilerSettings | None = None,
        global_properties: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the ProgramAssembler.

        Args:
            expander: Expander used for every value in the project.
            settings: Compiler settings. Defaults to CompilerSettings().
            global_properties: Overrides for property initializers and the
                default-target property. Names match case-insensitively.
        """
        self.expander = expander
        self.settings = settings or CompilerSettings()
        self.global_properties = dict(global_properties or {})
        self._log = logger.bind(component="program_assembler")

    def assemble(self, project: ProjectModel) -> CompiledProgram:
        """Compile every target and lay out the full program.

        Args:
            project: Evaluated project model.

        Returns:
            CompiledProgram with the generated text.

        Raises:
            DefaultTargetError: If no default target is declared.
            ControlFlowExpansionError: If a control-flow value cannot be expanded.
            CyclicDependencyError: If cycle detection is enabled and finds a cycle.
        """
        default_target = resolve_default_target(
            project, self.expander, self.settings, self.global_properties
        )
        index = build_dependency_index(project.targets, self.expander)

        if self.settings.detect_cycles:
            check_acyclic(project.targets, index, self.expander)

        writer = IndentedWriter(self.settings.indent_size)

        for target in project.targets:
            writer.write_line(f"bool {run_flag(target.name)} = false;")

        overrides = _override_table(self.global_properties)
        for prop in project.emitted_properties:
            value = overrides.get(prop.name.lower(), prop.expanded_value)
            writer.write_line(f"var {prop.name} = {format_value(value)};")
        writer.write_line()

        if self.settings.emit_item_schemas:
            for schema in project.item_schemas:
                self._write_item_schema(writer, schema)

        target_compiler = TargetCompiler(self.expander, index, self.settings)
        for body in self._compile_targets(project, target_compiler):
            writer.write_block(body)

        writer.write_line(f"{default_target}();")

        self._log.info(
            "program_assembled",
            targets=len(project.targets),
            properties=len(project.emitted_properties),
            default_target=default_target,
        )
        return CompiledProgram(
            text=writer.getvalue(),
            targets=[t.name for t in project.targets],
            default_target=default_target,
        )

    def _compile_targets(self, project: ProjectModel, compiler: TargetCompiler) -> list[str]:
        workers = self.settings.max_workers
        if workers > 1 and len(project.targets) > 1:
            # map() yields results in submission order, i.e. declaration order.
            with ThreadPoolExecutor(max_workers=workers) as executor:
                return list(executor.map(compiler.compile, project.targets))
        return [compiler.compile(target) for target in project.targets]

    def _write_item_schema(self, writer: IndentedWriter, schema: ItemSchema) -> None:
        writer.write_line(f"class {schema.item_type}")
        writer.write_line("{")
        with writer.indent():
            for metadatum in schema.metadata:
                writer.write_line(
                    f"public string {metadatum.name} {{ get; set; }} = "
                    f"{format_value(metadatum.evaluated_value)};"
                )
        writer.write_line("}")
        writer.write_line()
