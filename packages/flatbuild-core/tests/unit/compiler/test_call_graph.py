"""Unit tests for call graph analysis."""

from __future__ import annotations

import pytest
from structlog.testing import capture_logs

from flatbuild_core.compiler.call_graph import (
    build_call_graph,
    check_acyclic,
    find_cycle,
    find_dangling_references,
)
from flatbuild_core.compiler.dependency_index import build_dependency_index
from flatbuild_core.errors import ControlFlowExpansionError, CyclicDependencyError
from flatbuild_core.expansion import PropertyExpander
from flatbuild_core.schemas import ProjectModel, Target


class TestBuildCallGraph:
    """Tests for build_call_graph."""

    def test_edges_follow_procedure_call_order(self, sample_project: ProjectModel) -> None:
        expander = PropertyExpander.from_project(sample_project)
        index = build_dependency_index(sample_project.targets, expander)

        graph = build_call_graph(sample_project.targets, index, expander)

        assert graph == {
            "Build": ["Compile", "Clean", "Publish"],
            "Compile": [],
            "Clean": [],
            "Publish": [],
        }

    def test_undeclared_targets_are_ignored(self) -> None:
        targets = [Target(name="Build", depends_on_targets="Missing")]
        expander = PropertyExpander()

        graph = build_call_graph(targets, build_dependency_index(targets, expander), expander)

        assert graph == {"Build": []}

    def test_unexpandable_depends_on_targets_is_fatal(self) -> None:
        targets = [Target(name="Build", depends_on_targets="$(Missing)")]
        expander = PropertyExpander()

        with pytest.raises(ControlFlowExpansionError):
            build_call_graph(targets, build_dependency_index(targets, expander), expander)


class TestFindCycle:
    """Tests for find_cycle."""

    def test_acyclic(self) -> None:
        assert find_cycle({"A": ["B", "C"], "B": ["C"], "C": []}) is None

    def test_self_loop(self) -> None:
        assert find_cycle({"A": ["A"]}) == ["A", "A"]

    def test_two_node_cycle(self) -> None:
        assert find_cycle({"A": ["B"], "B": ["A"]}) == ["A", "B", "A"]

    def test_cycle_reported_from_its_entry_point(self) -> None:
        graph = {"Root": ["A"], "A": ["B"], "B": ["C"], "C": ["A"]}
        assert find_cycle(graph) == ["A", "B", "C", "A"]

    def test_diamond_is_not_a_cycle(self) -> None:
        graph = {"A": ["B", "C"], "B": ["D"], "C": ["D"], "D": []}
        assert find_cycle(graph) is None

    def test_empty_graph(self) -> None:
        assert find_cycle({}) is None


class TestCheckAcyclic:
    """Tests for check_acyclic."""

    def test_after_targets_cycle(self) -> None:
        # Build calls Test after itself; Test depends on Build, whose flag is not set yet.
        targets = [
            Target(name="Build"),
            Target(name="Test", depends_on_targets="Build", after_targets="Build"),
        ]
        expander = PropertyExpander()
        index = build_dependency_index(targets, expander)

        with capture_logs() as logs, pytest.raises(CyclicDependencyError) as exc_info:
            check_acyclic(targets, index, expander)

        assert exc_info.value.cycle == ["Build", "Test", "Build"]
        assert logs[0]["event"] == "cycle_detected"
        assert logs[0]["log_level"] == "error"

    def test_acyclic_project_passes(self, sample_project: ProjectModel) -> None:
        expander = PropertyExpander.from_project(sample_project)
        index = build_dependency_index(sample_project.targets, expander)

        check_acyclic(sample_project.targets, index, expander)


class TestFindDanglingReferences:
    """Tests for find_dangling_references."""

    def test_reports_each_missing_name(self) -> None:
        targets = [
            Target(name="Build", depends_on_targets="Restore;Compile"),
            Target(name="Compile", after_targets="Link"),
        ]

        dangling = find_dangling_references(targets, PropertyExpander())

        assert dangling == [
            ("Build", "depends_on_targets", "Restore"),
            ("Compile", "after_targets", "Link"),
        ]

    def test_unexpandable_value_is_checked_raw(self) -> None:
        targets = [Target(name="Build", before_targets="$(Missing)")]

        dangling = find_dangling_references(targets, PropertyExpander())

        assert dangling == [("Build", "before_targets", "$(Missing)")]

    def test_clean_project(self, sample_project: ProjectModel) -> None:
        expander = PropertyExpander.from_project(sample_project)
        assert find_dangling_references(sample_project.targets, expander) == []
