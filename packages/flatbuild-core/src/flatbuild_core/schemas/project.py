"""ProjectModel root model for flatbuild.

This module defines the already-evaluated project model the compiler
consumes. An external evaluator (the build engine's own loader) resolves
imports and evaluates properties; it then hands over the result as a
YAML or JSON document matching this schema.

Declaration order is significant everywhere: properties, item schemas,
targets and target children are all kept in the order they appear.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from flatbuild_core.schemas.item_schema import ItemSchema
from flatbuild_core.schemas.property import Property
from flatbuild_core.schemas.target import Target


def _find_duplicate(names: list[str], *, case_sensitive: bool = True) -> str | None:
    seen: set[str] = set()
    for name in names:
        key = name if case_sensitive else name.lower()
        if key in seen:
            return name
        seen.add(key)
    return None


class ProjectModel(BaseModel):
    """Root model for an evaluated build project.

    Attributes:
        name: Optional project name (informational only).
        properties: Evaluated properties in declaration order.
        item_schemas: Item record types in declaration order.
        targets: Targets in declaration order.
        default_targets: Raw semicolon-joined default targets. When absent,
            the compiler reads the configured default-target property.

    Example:
        >>> project = ProjectModel(
        ...     targets=[Target(name="Build")],
        ...     default_targets="Build",
        ... )

        >>> project = ProjectModel.from_yaml("project.yaml")
        >>> [t.name for t in project.targets]
        ['Build', 'Compile']
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = Field(
        default=None,
        description="Project name",
    )
    properties: list[Property] = Field(
        default_factory=list,
        description="Evaluated properties in declaration order",
    )
    item_schemas: list[ItemSchema] = Field(
        default_factory=list,
        description="Item schemas in declaration order",
    )
    targets: list[Target] = Field(
        default_factory=list,
        description="Targets in declaration order",
    )
    default_targets: str | None = Field(
        default=None,
        description="Raw semicolon-joined default targets",
    )

    @field_validator("targets")
    @classmethod
    def validate_unique_targets(cls, v: list[Target]) -> list[Target]:
        """Reject duplicate target names."""
        duplicate = _find_duplicate([t.name for t in v])
        if duplicate is not None:
            raise ValueError(f"Duplicate target name '{duplicate}'")
        return v

    @field_validator("item_schemas")
    @classmethod
    def validate_unique_item_types(cls, v: list[ItemSchema]) -> list[ItemSchema]:
        """Reject duplicate item types."""
        duplicate = _find_duplicate([s.item_type for s in v])
        if duplicate is not None:
            raise ValueError(f"Duplicate item type '{duplicate}'")
        return v

    @field_validator("properties")
    @classmethod
    def validate_unique_properties(cls, v: list[Property]) -> list[Property]:
        """Reject duplicate property names (property names are case-insensitive)."""
        duplicate = _find_duplicate([p.name for p in v], case_sensitive=False)
        if duplicate is not None:
            raise ValueError(f"Duplicate property name '{duplicate}'")
        return v

    def get_property(self, name: str) -> Property | None:
        """Look up a property by name, reserved and environment ones included.

        Args:
            name: Property name (case-insensitive).

        Returns:
            The matching Property, or None.
        """
        wanted = name.lower()
        for prop in self.properties:
            if prop.name.lower() == wanted:
                return prop
        return None

    def get_target(self, name: str) -> Target | None:
        """Look up a target by exact name."""
        for target in self.targets:
            if target.name == name:
                return target
        return None

    @property
    def emitted_properties(self) -> list[Property]:
        """Properties that receive an initializer in the generated program."""
        return [p for p in self.properties if p.is_emitted]

    @classmethod
    def from_yaml(cls, path: str | Path) -> ProjectModel:
        """Load and validate a ProjectModel from a YAML (or JSON) file.

        Args:
            path: Path to the evaluated project document.

        Returns:
            Validated ProjectModel instance.

        Raises:
            FileNotFoundError: If file doesn't exist.
            yaml.YAMLError: If YAML syntax is invalid.
            pydantic.ValidationError: If schema validation fails.

        Example:
            >>> project = ProjectModel.from_yaml("project.yaml")
            >>> project.default_targets
            'Build'
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        with path.open("r", encoding="utf-8") as f:
            data: dict[str, Any] = yaml.safe_load(f) or {}

        return cls.model_validate(data)
