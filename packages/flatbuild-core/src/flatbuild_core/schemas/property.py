"""Evaluated property model for flatbuild.

A property arrives already evaluated: the core never computes its value,
it only decides whether and how to emit an initializer for it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Property(BaseModel):
    """A single evaluated project property.

    Attributes:
        name: Property name, unique within the project.
        raw_value: Value as written in the build description.
        expanded_value: Value after macro expansion by the evaluator.
        is_reserved: True for engine-reserved properties (never emitted).
        is_environment: True for properties sourced from the environment
            (never emitted).

    Example:
        >>> prop = Property(
        ...     name="OutputPath",
        ...     raw_value="bin\\\\$(Configuration)",
        ...     expanded_value="bin\\\\Debug",
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(
        ...,
        min_length=1,
        description="Property name",
    )
    raw_value: str = Field(
        default="",
        description="Unexpanded property value",
    )
    expanded_value: str = Field(
        default="",
        description="Property value after expansion",
    )
    is_reserved: bool = Field(
        default=False,
        description="Engine-reserved property",
    )
    is_environment: bool = Field(
        default=False,
        description="Property derived from an environment variable",
    )

    @property
    def is_emitted(self) -> bool:
        """Whether the program assembler writes an initializer for this property."""
        return not (self.is_reserved or self.is_environment)
