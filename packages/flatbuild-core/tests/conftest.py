"""Shared pytest fixtures for flatbuild-core tests.

This module provides common fixtures used across unit, integration,
and contract tests.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import pytest
import structlog
import yaml

from flatbuild_core.expansion import PropertyExpander
from flatbuild_core.schemas import ProjectModel


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture.

    Debug events are let through so structlog.testing.capture_logs sees
    every event the compiler emits.
    """
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture
def chain_project_data() -> dict[str, Any]:
    """Return a two-target project: Build depends on Compile.

    Returns:
        Dictionary representing a valid project model document.
    """
    return {
        "name": "chain",
        "default_targets": "Build",
        "targets": [
            {"name": "Build", "depends_on_targets": "Compile"},
            {
                "name": "Compile",
                "children": [
                    {"kind": "task", "name": "Csc", "parameters": {"Sources": "a.cs"}},
                ],
            },
        ],
    }


@pytest.fixture
def chain_project(chain_project_data: dict[str, Any]) -> ProjectModel:
    """Return the chain project as a validated ProjectModel."""
    return ProjectModel.model_validate(chain_project_data)


@pytest.fixture
def sample_project_data() -> dict[str, Any]:
    """Return a project exercising properties, item schemas and ordering.

    Returns:
        Dictionary representing a valid project model document.
    """
    return {
        "name": "sample",
        "properties": [
            {"name": "Configuration", "raw_value": "Debug", "expanded_value": "Debug"},
            {
                "name": "OutputPath",
                "raw_value": "bin\\$(Configuration)",
                "expanded_value": "bin\\Debug",
            },
            {
                "name": "MSBuildProjectDefaultTargets",
                "raw_value": "Build",
                "expanded_value": "Build",
                "is_reserved": True,
            },
            {
                "name": "PATH",
                "raw_value": "/usr/bin",
                "expanded_value": "/usr/bin",
                "is_environment": True,
            },
        ],
        "item_schemas": [
            {
                "item_type": "Content",
                "metadata": [{"name": "CopyToOutputDirectory", "evaluated_value": "Never"}],
            },
        ],
        "targets": [
            {
                "name": "Build",
                "depends_on_targets": "Compile",
                "children": [
                    {
                        "kind": "task",
                        "name": "Copy",
                        "parameters": {"SourceFiles": "app.dll", "DestinationFolder": "$(OutputPath)"},
                    },
                ],
            },
            {"name": "Compile"},
            {"name": "Clean", "before_targets": "Build"},
            {"name": "Publish", "after_targets": "Build"},
        ],
    }


@pytest.fixture
def sample_project(sample_project_data: dict[str, Any]) -> ProjectModel:
    """Return the sample project as a validated ProjectModel."""
    return ProjectModel.model_validate(sample_project_data)


@pytest.fixture
def sample_expander(sample_project: ProjectModel) -> PropertyExpander:
    """Return an expander built from the sample project's properties."""
    return PropertyExpander.from_project(sample_project)


@pytest.fixture
def write_project(tmp_path: Path):  # type: ignore[no-untyped-def]
    """Return a helper that writes a project document to a YAML file."""

    def _write(data: dict[str, Any], name: str = "project.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump(data, sort_keys=False))
        return path

    return _write
