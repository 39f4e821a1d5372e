"""Tests for flatbuild schema command."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from flatbuild_cli.commands.schema import schema


class TestSchemaExport:
    """Tests for schema export command."""

    def test_export_to_path(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        output = tmp_path / "out" / "schema.json"

        result = cli_runner.invoke(schema, ["export", "--output", str(output)])

        assert result.exit_code == 0
        assert "Schema exported" in result.output
        exported = json.loads(output.read_text())
        assert exported["title"] == "ProjectModel"
        assert exported["$schema"] == "https://json-schema.org/draft/2020-12/schema"

    def test_export_default_location(self, isolated_runner: CliRunner) -> None:
        result = isolated_runner.invoke(schema, ["export"])

        assert result.exit_code == 0
        assert Path("schemas/project-model.schema.json").exists()

    def test_schema_help_lists_export(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(schema, ["--help"])

        assert result.exit_code == 0
        assert "export" in result.output
