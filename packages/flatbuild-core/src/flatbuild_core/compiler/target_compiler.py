"""Per-target procedure synthesis.

Each target becomes one procedure of the generated program. The procedure
realizes the target's run-once state machine (not run, skipped via its
condition, completed) as guarded code:

1. Skip condition: when it holds, mark the target run and return.
2. DependsOnTargets, in declared order, each called only if not yet run.
3. Targets that listed this one in their BeforeTargets.
4. The body: property groups and task calls in declaration order.
5. Targets that listed this one in their AfterTargets.
6. Mark the target run.

Values are emitted twice where they can differ: the raw text as a comment
and the expanded text as code, so the generated program shows where every
value came from.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING

import structlog

from flatbuild_core.compiler.dependency_index import split_target_list
from flatbuild_core.compiler.formatter import format_value
from flatbuild_core.compiler.writer import IndentedWriter
from flatbuild_core.config import CompilerSettings, ParameterOrder
from flatbuild_core.errors import ControlFlowExpansionError, ExpansionError
from flatbuild_core.expansion import expand_or_raw
from flatbuild_core.schemas import PropertyAssignment, PropertyGroup, TaskInvocation

if TYPE_CHECKING:
    from flatbuild_core.compiler.dependency_index import DependencyIndex
    from flatbuild_core.expansion import Expander
    from flatbuild_core.schemas import Target

logger = structlog.get_logger(__name__)

RUN_FLAG_SUFFIX = "Run"
COMMENT_END = "*/"
ESCAPED_COMMENT_END = "*\\/"


def run_flag(target_name: str) -> str:
    """Name of the run-flag cell for ``target_name``."""
    return f"{target_name}{RUN_FLAG_SUFFIX}"


def guarded_call(target_name: str) -> str:
    """Statement calling ``target_name`` unless it already ran."""
    return f"if (!{run_flag(target_name)}) {target_name}();"


def block_comment(text: str) -> str:
    """Wrap ``text`` in ``/* */`` with any comment terminator inside it broken up.

    Example:
        >>> block_comment('Exclude = "**/*.tmp";')
        '/*Exclude = "**\\\\/*.tmp";*/'
    """
    escaped = text.replace(COMMENT_END, ESCAPED_COMMENT_END)
    return f"/*{escaped}{COMMENT_END}"


def _has_text(value: str | None) -> bool:
    return bool(value and value.strip())


@dataclass(frozen=True)
class ParameterRendering:
    """Raw and expanded renderings of one task's parameter list.

    Attributes:
        raw: Parameters rendered from their raw values.
        expanded: Parameters rendered from their expanded values.
    """

    raw: str
    expanded: str

    @property
    def differs(self) -> bool:
        """True when the two renderings are not textually identical."""
        return self.raw != self.expanded


def render_parameters(
    task: TaskInvocation,
    expander: Expander,
    order: ParameterOrder = "sorted",
) -> ParameterRendering:
    """Render a task's parameter list twice: raw and expanded.

    Args:
        task: Task invocation.
        expander: Expander for parameter values (failures fall back to raw).
        order: "sorted" by parameter name or "declared" order.

    Returns:
        ParameterRendering with both texts.

    Example:
        >>> rendering = render_parameters(
        ...     TaskInvocation(name="Copy", parameters={"To": "$(Out)"}),
        ...     PropertyExpander({"Out": "bin"}),
        ... )
        >>> rendering.raw, rendering.expanded
        ('To: "$(Out)"', 'To: "bin"')
    """
    items = list(task.parameters.items())
    if order == "sorted":
        items.sort(key=lambda item: item[0])

    raw = ", ".join(f"{name}: {format_value(value)}" for name, value in items)
    expanded = ", ".join(
        f"{name}: {format_value(expand_or_raw(expander, value))}" for name, value in items
    )
    return ParameterRendering(raw=raw, expanded=expanded)


class TargetCompiler:
    """Compile single targets into guarded, run-once procedures.

    A TargetCompiler holds only read-only state (the expander, the
    dependency index and settings), so one instance can compile targets
    from several threads at once.

    Example:
        >>> index = build_dependency_index(project.targets, expander)
        >>> compiler = TargetCompiler(expander, index)
        >>> print(compiler.compile(project.get_target("Build")))
        void Build()
        {
            ...
        }
    """

    def __init__(
        self,
        expander: Expander,
        index: DependencyIndex,
        settings: CompilerSettings | None = None,
    ) -> None:
        """Initialize the TargetCompiler.

        Args:
            expander: Expander used for every value in the target.
            index: Before/after producer maps for all targets.
            settings: Compiler settings. Defaults to CompilerSettings().
        """
        self.expander = expander
        self.index = index
        self.settings = settings or CompilerSettings()

    def compile(self, target: Target) -> str:
        """Compile one target into the text of its procedure.

        Args:
            target: Target to compile.

        Returns:
            Procedure text, followed by one blank line.

        Raises:
            ControlFlowExpansionError: If the skip condition or
                DependsOnTargets cannot be expanded.
        """
        writer = IndentedWriter(self.settings.indent_size)
        flag = run_flag(target.name)

        writer.write_line(f"void {target.name}()")
        writer.write_line("{")
        with writer.indent():
            self._write_skip_condition(writer, target, flag)
            self._write_early_calls(writer, target)
            writer.write_line()

            for child in target.children:
                if isinstance(child, PropertyGroup):
                    self._write_property_group(writer, child)
                else:
                    self._write_task(writer, child)

            if target.tasks:
                writer.write_line()

            self._write_calls(writer, "AfterTargets", self.index.after(target.name))
            writer.write_line(f"{flag} = true;")
        writer.write_line("}")
        writer.write_line()

        logger.debug("target_compiled", target=target.name, children=len(target.children))
        return writer.getvalue()

    def _expand_control_flow(self, target: Target, field_name: str, raw: str) -> str:
        try:
            return self.expander.expand(raw)
        except ExpansionError as e:
            raise ControlFlowExpansionError(target.name, field_name, raw, e.reason) from e

    def _write_skip_condition(self, writer: IndentedWriter, target: Target, flag: str) -> None:
        if not _has_text(target.condition):
            return
        assert target.condition is not None  # Type narrowing for mypy
        expanded = self._expand_control_flow(target, "condition", target.condition)
        writer.write_line(f"// if ({target.condition})")
        writer.write_line(f"if ({expanded}) {{ {flag} = true; return; }}")

    def _write_early_calls(self, writer: IndentedWriter, target: Target) -> None:
        if _has_text(target.depends_on_targets):
            expanded = self._expand_control_flow(
                target, "depends_on_targets", target.depends_on_targets
            )
            self._write_calls(writer, "DependsOnTargets", split_target_list(expanded))
        self._write_calls(writer, "BeforeTargets", self.index.before(target.name))

    def _write_calls(self, writer: IndentedWriter, section: str, names: list[str]) -> None:
        if not names:
            return
        writer.write_line(f"// {section};")
        for name in names:
            writer.write_line(guarded_call(name))

    def _write_conditioned(
        self,
        writer: IndentedWriter,
        condition: str | None,
        write_body: Callable[[], None],
    ) -> None:
        if not _has_text(condition):
            write_body()
            return
        assert condition is not None  # Type narrowing for mypy

        writer.write_line(block_comment(f" if ({condition})"))
        writer.write_line(f"if ({expand_or_raw(self.expander, condition)})")
        writer.write_line("{")
        with writer.indent():
            write_body()
        writer.write_line("}")

    def _write_property_group(self, writer: IndentedWriter, group: PropertyGroup) -> None:
        self._write_conditioned(
            writer,
            group.condition,
            partial(self._write_assignments, writer, group),
        )

    def _write_assignments(self, writer: IndentedWriter, group: PropertyGroup) -> None:
        for assignment in group.properties:
            self._write_conditioned(
                writer,
                assignment.condition,
                partial(self._write_assignment, writer, assignment),
            )

    def _write_assignment(self, writer: IndentedWriter, assignment: PropertyAssignment) -> None:
        expanded = expand_or_raw(self.expander, assignment.value)
        writer.write_line(block_comment(f"{assignment.name} = {format_value(assignment.value)};"))
        writer.write_line(f"{assignment.name} = {format_value(expanded)};")

    def _write_task(self, writer: IndentedWriter, task: TaskInvocation) -> None:
        rendering = render_parameters(task, self.expander, self.settings.parameter_order)
        if rendering.differs:
            writer.write_line(block_comment(f"{task.name}({rendering.raw});"))

        self._write_conditioned(
            writer,
            task.condition,
            lambda: writer.write_line(f"{task.name}({rendering.expanded});"),
        )
