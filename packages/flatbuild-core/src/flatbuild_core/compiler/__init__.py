"""Compiler module for flatbuild.

This module exports the Compiler class, its components and output model:
- Compiler: Main compiler class
- ProgramAssembler: Lays out the full generated program
- TargetCompiler: Compiles one target into a guarded, run-once procedure
- DependencyIndex: BeforeTargets/AfterTargets reverse maps
- IndentedWriter: Indentation-aware text sink
- format_value: String literal rendering
- CompiledProgram: Output model
"""

from __future__ import annotations

from flatbuild_core.compiler.assembler import ProgramAssembler, resolve_default_target
from flatbuild_core.compiler.call_graph import (
    build_call_graph,
    check_acyclic,
    find_cycle,
    find_dangling_references,
)
from flatbuild_core.compiler.compiler import Compiler
from flatbuild_core.compiler.dependency_index import (
    DependencyIndex,
    build_dependency_index,
    split_target_list,
)
from flatbuild_core.compiler.formatter import format_value, parse_value
from flatbuild_core.compiler.models import CompiledProgram
from flatbuild_core.compiler.target_compiler import (
    ParameterRendering,
    TargetCompiler,
    guarded_call,
    render_parameters,
    run_flag,
)
from flatbuild_core.compiler.writer import IndentedWriter

__all__: list[str] = [
    # Compiler class
    "Compiler",
    # Components
    "ProgramAssembler",
    "resolve_default_target",
    "TargetCompiler",
    "ParameterRendering",
    "render_parameters",
    "run_flag",
    "guarded_call",
    "DependencyIndex",
    "build_dependency_index",
    "split_target_list",
    "build_call_graph",
    "find_cycle",
    "check_acyclic",
    "find_dangling_references",
    "format_value",
    "parse_value",
    "IndentedWriter",
    # Output model
    "CompiledProgram",
]
