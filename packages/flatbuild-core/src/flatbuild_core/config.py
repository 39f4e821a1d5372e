"""Compiler configuration for flatbuild.

Settings can be passed explicitly or loaded from environment variables
with the FLATBUILD_ prefix (and from a .env file).
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ParameterOrder = Literal["sorted", "declared"]

DEFAULT_TARGET_PROPERTY = "MSBuildProjectDefaultTargets"


class CompilerSettings(BaseSettings):
    """Settings that change the emitted text, never the program's semantics.

    Attributes:
        parameter_order: "sorted" renders task parameters alphabetically so
            generated programs diff cleanly; "declared" keeps source order.
        emit_item_schemas: Emit one type declaration per item schema.
        detect_cycles: Fail compilation when the target call graph is cyclic.
        max_workers: Worker threads for compiling targets (1 = sequential).
        indent_size: Spaces per indentation level.
        default_target_property: Property read when the project model has
            no explicit default_targets.

    Example:
        >>> # From environment (FLATBUILD_PARAMETER_ORDER=declared)
        >>> settings = CompilerSettings()
        >>>
        >>> # Explicit
        >>> settings = CompilerSettings(parameter_order="declared", detect_cycles=True)
    """

    model_config = SettingsConfigDict(
        env_prefix="FLATBUILD_",
        env_file=".env",
        extra="ignore",
        frozen=True,
    )

    parameter_order: ParameterOrder = Field(
        default="sorted",
        description="Task parameter rendering order",
    )
    emit_item_schemas: bool = Field(
        default=True,
        description="Emit a type declaration per item schema",
    )
    detect_cycles: bool = Field(
        default=False,
        description="Reject cyclic target call graphs at compile time",
    )
    max_workers: int = Field(
        default=1,
        ge=1,
        le=64,
        description="Worker threads used to compile targets",
    )
    indent_size: int = Field(
        default=4,
        ge=1,
        le=16,
        description="Spaces per indentation level",
    )
    default_target_property: str = Field(
        default=DEFAULT_TARGET_PROPERTY,
        min_length=1,
        description="Property naming the default target(s)",
    )
