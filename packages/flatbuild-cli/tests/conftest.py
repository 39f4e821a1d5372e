"""Shared test fixtures for flatbuild-cli tests.

Provides CliRunner fixtures and project model file helpers
for testing CLI commands.
"""

from __future__ import annotations

import sys
from collections.abc import Generator
from pathlib import Path
from typing import TYPE_CHECKING

from click.testing import CliRunner
import pytest

from flatbuild_core.logging import configure_logging

if TYPE_CHECKING:
    from collections.abc import Callable

PROJECT_YAML_FILENAME = "project.yaml"


@pytest.fixture(autouse=True)
def configure_logging_for_tests() -> None:
    """Keep log events off stdout, where commands write generated programs.

    Commands invoked directly (not through the cli group) never call
    configure_logging themselves.
    """
    configure_logging("warning", stream=sys.stderr)


@pytest.fixture(autouse=True)
def clear_flatbuild_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure FLATBUILD_* settings from the environment do not leak in."""
    for name in (
        "FLATBUILD_PARAMETER_ORDER",
        "FLATBUILD_EMIT_ITEM_SCHEMAS",
        "FLATBUILD_DETECT_CYCLES",
        "FLATBUILD_MAX_WORKERS",
        "FLATBUILD_INDENT_SIZE",
        "FLATBUILD_DEFAULT_TARGET_PROPERTY",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner.

    Returns:
        CliRunner instance for testing CLI commands.
    """
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Create a Click test runner with an isolated filesystem.

    This fixture creates a temporary directory and changes to it
    for the duration of the test.

    Yields:
        CliRunner instance with isolated filesystem.
    """
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory.

    Returns:
        Path to fixtures directory.
    """
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def valid_project_yaml(fixtures_dir: Path, tmp_path: Path) -> Path:
    """Return a copy of the valid project model fixture in tmp_path.

    Returns:
        Path to project.yaml in tmp_path.
    """
    dst = tmp_path / PROJECT_YAML_FILENAME
    dst.write_text((fixtures_dir / "valid_project.yaml").read_text())
    return dst


@pytest.fixture
def invalid_project_yaml(fixtures_dir: Path) -> Path:
    """Return the path to an invalid project model fixture.

    Returns:
        Path to invalid_project.yaml test file.
    """
    return fixtures_dir / "invalid_project.yaml"


@pytest.fixture
def create_project_yaml(isolated_runner: CliRunner) -> Callable[..., Path]:
    """Factory fixture to create project.yaml files with custom content.

    Args:
        isolated_runner: CliRunner with isolated filesystem.

    Returns:
        Function that creates project.yaml with given content.
    """

    def _create(content: str, filename: str = PROJECT_YAML_FILENAME) -> Path:
        path = Path(filename)
        path.write_text(content)
        return path

    return _create
