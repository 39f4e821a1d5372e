"""Reverse dependency index for BeforeTargets/AfterTargets.

A target that lists X in its BeforeTargets must run immediately before X,
so the call to it is emitted inside X's procedure. This module builds the
two reverse maps once, up front, for all targets.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from flatbuild_core.errors import ControlFlowExpansionError, ExpansionError

if TYPE_CHECKING:
    from flatbuild_core.expansion import Expander
    from flatbuild_core.schemas import Target

logger = structlog.get_logger(__name__)

TARGET_LIST_SEPARATOR = ";"


def split_target_list(value: str) -> list[str]:
    """Split a semicolon-joined target list into trimmed, non-empty names."""
    return [name.strip() for name in value.split(TARGET_LIST_SEPARATOR) if name.strip()]


@dataclass
class DependencyIndex:
    """Reverse ordering maps keyed by the referenced target name.

    Dicts preserve insertion order, and each list holds producers in target
    declaration order. That order is the tie-break when several targets
    inject themselves before or after the same target.

    Attributes:
        producer_before: Target name -> targets that must run right before it.
        producer_after: Target name -> targets that must run right after it.
    """

    producer_before: dict[str, list[str]] = field(default_factory=dict)
    producer_after: dict[str, list[str]] = field(default_factory=dict)

    def before(self, target_name: str) -> list[str]:
        """Targets declaring ``target_name`` in their BeforeTargets."""
        return self.producer_before.get(target_name, [])

    def after(self, target_name: str) -> list[str]:
        """Targets declaring ``target_name`` in their AfterTargets."""
        return self.producer_after.get(target_name, [])


def _expand_target_list(expander: Expander, target: Target, field_name: str, raw: str) -> list[str]:
    if not raw.strip():
        return []
    try:
        return split_target_list(expander.expand(raw))
    except ExpansionError as e:
        raise ControlFlowExpansionError(target.name, field_name, raw, e.reason) from e


def build_dependency_index(targets: Iterable[Target], expander: Expander) -> DependencyIndex:
    """Scan all targets once and build the before/after reverse maps.

    Args:
        targets: Targets in declaration order.
        expander: Expander for BeforeTargets/AfterTargets values.

    Returns:
        The populated DependencyIndex.

    Raises:
        ControlFlowExpansionError: If a BeforeTargets or AfterTargets value
            cannot be expanded.

    Example:
        >>> index = build_dependency_index(
        ...     [Target(name="Build"), Target(name="Clean", before_targets="Build")],
        ...     PropertyExpander(),
        ... )
        >>> index.before("Build")
        ['Clean']
    """
    index = DependencyIndex()

    for target in targets:
        for name in _expand_target_list(expander, target, "before_targets", target.before_targets):
            index.producer_before.setdefault(name, []).append(target.name)
        for name in _expand_target_list(expander, target, "after_targets", target.after_targets):
            index.producer_after.setdefault(name, []).append(target.name)

    logger.debug(
        "dependency_index_built",
        before_entries=len(index.producer_before),
        after_entries=len(index.producer_after),
    )
    return index
