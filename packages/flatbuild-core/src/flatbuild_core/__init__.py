"""flatbuild-core: Compile declarative build graphs into procedural programs.

This package provides:
- ProjectModel: Pydantic schema for an already-evaluated build project
- Expander: Interface to the build engine's expression expansion
- Compiler: Transform ProjectModel -> CompiledProgram
- JSON Schema export for the project model
"""

from __future__ import annotations

__version__ = "0.1.0"

# Compiler and output model
from flatbuild_core.compiler import (
    CompiledProgram,
    Compiler,
    ProgramAssembler,
    TargetCompiler,
    format_value,
)

# Configuration
from flatbuild_core.config import CompilerSettings

# Error types
from flatbuild_core.errors import (
    CompilationError,
    ControlFlowExpansionError,
    CyclicDependencyError,
    DefaultTargetError,
    ExpansionError,
    FlatbuildError,
)

# Expansion
from flatbuild_core.expansion import Expander, PropertyExpander, expand_or_raw

# JSON Schema export
from flatbuild_core.export import export_project_model_schema

# Schema models
from flatbuild_core.schemas import (
    ItemSchema,
    Metadatum,
    ProjectModel,
    Property,
    PropertyAssignment,
    PropertyGroup,
    Target,
    TaskInvocation,
)

__all__ = [
    "__version__",
    # Compiler
    "Compiler",
    "CompiledProgram",
    "ProgramAssembler",
    "TargetCompiler",
    "format_value",
    # Configuration
    "CompilerSettings",
    # Errors
    "FlatbuildError",
    "ExpansionError",
    "CompilationError",
    "DefaultTargetError",
    "ControlFlowExpansionError",
    "CyclicDependencyError",
    # Expansion
    "Expander",
    "PropertyExpander",
    "expand_or_raw",
    # JSON Schema export
    "export_project_model_schema",
    # Schema models
    "ProjectModel",
    "Property",
    "ItemSchema",
    "Metadatum",
    "Target",
    "PropertyGroup",
    "PropertyAssignment",
    "TaskInvocation",
]
