"""Target call graph analysis: optional cycle check and dangling references.

The generated program relies on run-flags only, and a flag is set when a
target completes. A target that (transitively) calls itself therefore
recurses without bound. When enabled, this check rejects such projects
before any text is emitted.

Edges run from a target to every target its procedure calls: its
DependsOnTargets and its before/after producers. Names that do not match a
declared target are ignored.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from flatbuild_core.compiler.dependency_index import split_target_list
from flatbuild_core.errors import ControlFlowExpansionError, CyclicDependencyError, ExpansionError
from flatbuild_core.expansion import expand_or_raw

if TYPE_CHECKING:
    from flatbuild_core.compiler.dependency_index import DependencyIndex
    from flatbuild_core.expansion import Expander
    from flatbuild_core.schemas import Target

logger = structlog.get_logger(__name__)


def build_call_graph(
    targets: list[Target],
    index: DependencyIndex,
    expander: Expander,
) -> dict[str, list[str]]:
    """Map each target to the declared targets its procedure calls, in call order."""
    known = {t.name for t in targets}
    graph: dict[str, list[str]] = {}

    for target in targets:
        depends: list[str] = []
        if target.depends_on_targets.strip():
            try:
                depends = split_target_list(expander.expand(target.depends_on_targets))
            except ExpansionError as e:
                raise ControlFlowExpansionError(
                    target.name, "depends_on_targets", target.depends_on_targets, e.reason
                ) from e

        callees = depends + index.before(target.name) + index.after(target.name)
        graph[target.name] = [name for name in callees if name in known]

    return graph


def find_cycle(graph: dict[str, list[str]]) -> list[str] | None:
    """Return the first cycle found by depth-first search, or None.

    Nodes are visited in graph order, so the result is deterministic.
    The returned path repeats its first node at the end.
    """
    done: set[str] = set()

    for root in graph:
        if root in done:
            continue

        path: list[str] = [root]
        on_path: set[str] = {root}
        stack = [iter(graph[root])]

        while stack:
            child = next(stack[-1], None)
            if child is None:
                stack.pop()
                node = path.pop()
                on_path.discard(node)
                done.add(node)
                continue
            if child in on_path:
                return path[path.index(child) :] + [child]
            if child in done:
                continue
            path.append(child)
            on_path.add(child)
            stack.append(iter(graph.get(child, [])))

    return None


def check_acyclic(targets: list[Target], index: DependencyIndex, expander: Expander) -> None:
    """Raise if the target call graph contains a cycle.

    Raises:
        CyclicDependencyError: With the offending cycle.
    """
    cycle = find_cycle(build_call_graph(targets, index, expander))
    if cycle is not None:
        logger.error("cycle_detected", cycle=cycle)
        raise CyclicDependencyError(cycle)


def find_dangling_references(
    targets: list[Target],
    expander: Expander,
) -> list[tuple[str, str, str]]:
    """List ordering references to targets that are not declared.

    The compiler still emits calls for such names; whatever runs the
    generated program has to resolve them. This is a reporting aid only.

    Values that cannot be expanded are checked in their raw form.

    Returns:
        (declaring target, field, missing name) tuples in declaration order.
    """
    known = {t.name for t in targets}
    dangling: list[tuple[str, str, str]] = []

    for target in targets:
        for field_name in ("depends_on_targets", "before_targets", "after_targets"):
            raw: str = getattr(target, field_name)
            if not raw.strip():
                continue
            for name in split_target_list(expand_or_raw(expander, raw)):
                if name not in known:
                    dangling.append((target.name, field_name, name))

    return dangling
