"""Compiler output models for flatbuild."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CompiledProgram(BaseModel):
    """A generated procedural program and what it was built from.

    Attributes:
        text: The generated program.
        targets: Target names in declaration order (one procedure each).
        default_target: Target invoked by the program's final statement.
        source_hash: SHA-256 of the project model file, when compiled from one.

    Example:
        >>> program = Compiler().compile(project)
        >>> program.default_target
        'Build'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    text: str = Field(
        ...,
        description="Generated program text",
    )
    targets: list[str] = Field(
        default_factory=list,
        description="Compiled target names in declaration order",
    )
    default_target: str = Field(
        ...,
        min_length=1,
        description="Target invoked at the end of the program",
    )
    source_hash: str | None = Field(
        default=None,
        description="SHA-256 hash of the source project model",
    )
