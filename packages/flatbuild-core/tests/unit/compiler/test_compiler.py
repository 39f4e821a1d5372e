"""Unit tests for the Compiler facade."""

from __future__ import annotations

import hashlib
import io
from pathlib import Path
from typing import Any

import pytest
import yaml
from pydantic import ValidationError

from flatbuild_core.compiler import Compiler
from flatbuild_core.config import CompilerSettings
from flatbuild_core.errors import ControlFlowExpansionError, DefaultTargetError
from flatbuild_core.schemas import ProjectModel, Property, Target, TaskInvocation


class TestCompile:
    """Tests for Compiler.compile."""

    def test_uses_project_properties(self, sample_project: ProjectModel) -> None:
        program = Compiler(CompilerSettings()).compile(sample_project)
        assert 'Copy(DestinationFolder: "bin\\\\Debug", SourceFiles: "app.dll");' in program.text

    def test_global_properties_override_expansion(self) -> None:
        project = ProjectModel(
            default_targets="Build",
            properties=[Property(name="Configuration", expanded_value="Debug")],
            targets=[
                Target(
                    name="Build",
                    children=[TaskInvocation(name="Message", parameters={"Text": "$(Configuration)"})],
                )
            ],
        )

        program = Compiler(CompilerSettings()).compile(project, {"Configuration": "Release"})

        assert 'Message(Text: "Release");' in program.text
        assert 'var Configuration = "Release";' in program.text
        assert 'var Configuration = "Debug";' not in program.text

    def test_global_properties_match_case_insensitively(self, sample_project: ProjectModel) -> None:
        program = Compiler(CompilerSettings()).compile(sample_project, {"configuration": "Release"})
        assert 'var Configuration = "Release";' in program.text

    def test_global_property_overrides_default_target(self, sample_project: ProjectModel) -> None:
        program = Compiler(CompilerSettings()).compile(
            sample_project, {"MSBuildProjectDefaultTargets": "Clean"}
        )

        assert program.default_target == "Clean"
        assert program.text.endswith("\nClean();\n")

    def test_global_properties_do_not_add_initializers(self, sample_project: ProjectModel) -> None:
        program = Compiler(CompilerSettings()).compile(sample_project, {"Platform": "x64"})
        assert "var Platform" not in program.text

    def test_explicit_expander(self) -> None:
        class Upper:
            def expand(self, raw: str) -> str:
                return raw.upper()

        project = ProjectModel(
            default_targets="build",
            targets=[Target(name="build", condition="x == y")],
        )

        program = Compiler(CompilerSettings(), expander=Upper()).compile(project)

        assert "if (X == Y) { buildRun = true; return; }" in program.text
        assert program.default_target == "BUILD"

    def test_compilation_errors_propagate(self) -> None:
        with pytest.raises(DefaultTargetError):
            Compiler(CompilerSettings()).compile(ProjectModel())

        project = ProjectModel(
            default_targets="Build",
            targets=[Target(name="Build", condition="$(Missing)")],
        )
        with pytest.raises(ControlFlowExpansionError):
            Compiler(CompilerSettings()).compile(project)

    def test_is_deterministic(self, sample_project: ProjectModel) -> None:
        compiler = Compiler(CompilerSettings())
        assert compiler.compile(sample_project).text == compiler.compile(sample_project).text


class TestCompileFile:
    """Tests for Compiler.compile_file."""

    def test_compiles_yaml_file(self, write_project: Any, chain_project_data: dict[str, Any]) -> None:
        path: Path = write_project(chain_project_data)

        program = Compiler(CompilerSettings()).compile_file(path)

        assert program.targets == ["Build", "Compile"]
        assert program.source_hash == hashlib.sha256(path.read_bytes()).hexdigest()

    def test_accepts_string_path(self, write_project: Any, chain_project_data: dict[str, Any]) -> None:
        path: Path = write_project(chain_project_data)
        assert Compiler(CompilerSettings()).compile_file(str(path)).default_target == "Build"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Compiler(CompilerSettings()).compile_file(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "project.yaml"
        path.write_text("targets: [")

        with pytest.raises(yaml.YAMLError):
            Compiler(CompilerSettings()).compile_file(path)

    def test_invalid_model(self, write_project: Any) -> None:
        path: Path = write_project({"targets": [{"name": "Build", "unknown": 1}]})

        with pytest.raises(ValidationError):
            Compiler(CompilerSettings()).compile_file(path)


class TestWrite:
    """Tests for Compiler.write."""

    def test_writes_program_text(self, chain_project: ProjectModel) -> None:
        compiler = Compiler(CompilerSettings())
        program = compiler.compile(chain_project)
        sink = io.StringIO()

        compiler.write(program, sink)

        assert sink.getvalue() == program.text
