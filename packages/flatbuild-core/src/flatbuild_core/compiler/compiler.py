"""Compiler class for flatbuild.

This module implements the Compiler that turns an evaluated build project
into a procedural program which, run top to bottom, calls targets and
tasks in the same effective order as the declarative build engine.

Data flows one way:
ProjectModel -> DependencyIndex -> TargetCompiler -> ProgramAssembler -> text
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import structlog

from flatbuild_core.compiler.assembler import ProgramAssembler
from flatbuild_core.compiler.models import CompiledProgram
from flatbuild_core.config import CompilerSettings
from flatbuild_core.expansion import PropertyExpander
from flatbuild_core.schemas import ProjectModel

if TYPE_CHECKING:
    from flatbuild_core.expansion import Expander

logger = structlog.get_logger(__name__)


class Compiler:
    """Compile an evaluated project model into a procedural program.

    When no expander is given, each compilation builds a PropertyExpander
    from the project's own properties plus any global properties.

    Example:
        >>> compiler = Compiler()
        >>> program = compiler.compile_file(Path("project.yaml"))
        >>> print(program.text)
        >>>
        >>> # With explicit settings
        >>> compiler = Compiler(CompilerSettings(parameter_order="declared"))
        >>> program = compiler.compile(project, global_properties={"Configuration": "Release"})
    """

    def __init__(
        self,
        settings: CompilerSettings | None = None,
        expander: Expander | None = None,
    ) -> None:
        """Initialize the Compiler.

        Args:
            settings: Compiler settings. Defaults to CompilerSettings(),
                which also reads FLATBUILD_* environment variables.
            expander: Expander to use for every project. If not specified,
                one is derived from each project's properties.
        """
        self.settings = settings or CompilerSettings()
        self.expander = expander

    def compile(
        self,
        project: ProjectModel,
        global_properties: Mapping[str, str] | None = None,
    ) -> CompiledProgram:
        """Compile a project model.

        Args:
            project: Evaluated project model.
            global_properties: Property overrides. They replace the initial
                value of matching properties and the default-target property,
                and feed the derived expander (an explicit expander is used
                as given).

        Returns:
            CompiledProgram with the generated text.

        Raises:
            CompilationError: If the default target, a skip condition or a
                target ordering list cannot be resolved.
        """
        expander = self.expander or PropertyExpander.from_project(project, global_properties)
        assembler = ProgramAssembler(expander, self.settings, global_properties)
        return assembler.assemble(project)

    def compile_file(
        self,
        path: Path | str,
        global_properties: Mapping[str, str] | None = None,
    ) -> CompiledProgram:
        """Load a project model file and compile it.

        Args:
            path: Path to the evaluated project (YAML or JSON).
            global_properties: Property overrides, as for :meth:`compile`.

        Returns:
            CompiledProgram carrying the source file's SHA-256 hash.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            pydantic.ValidationError: If the model is invalid.
            CompilationError: If compilation fails.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        source_hash = self._compute_hash(path.read_bytes())
        project = ProjectModel.from_yaml(path)
        logger.info("project_loaded", path=str(path), source_hash=source_hash)

        program = self.compile(project, global_properties)
        return program.model_copy(update={"source_hash": source_hash})

    def write(self, program: CompiledProgram, sink: TextIO) -> None:
        """Write a compiled program to a text sink."""
        sink.write(program.text)

    def _compute_hash(self, content: bytes) -> str:
        """Compute SHA-256 hash of content.

        Args:
            content: Raw file content.

        Returns:
            Hex-encoded SHA-256 hash.
        """
        return hashlib.sha256(content).hexdigest()
