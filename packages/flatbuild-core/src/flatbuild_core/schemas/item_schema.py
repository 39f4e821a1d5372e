"""Item schema models for flatbuild.

An item schema describes a record type (the metadata an item of that type
carries by default), not item data.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Metadatum(BaseModel):
    """One metadata field of an item schema."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Metadata name")
    evaluated_value: str = Field(default="", description="Evaluated default value")


class ItemSchema(BaseModel):
    """Record type declared for an item type.

    Attributes:
        item_type: Item type name, unique within the project.
        metadata: Ordered metadata fields with their evaluated defaults.

    Example:
        >>> schema = ItemSchema(
        ...     item_type="Compile",
        ...     metadata=[Metadatum(name="Optimize", evaluated_value="false")],
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    item_type: str = Field(..., min_length=1, description="Item type name")
    metadata: list[Metadatum] = Field(
        default_factory=list,
        description="Ordered metadata declarations",
    )
