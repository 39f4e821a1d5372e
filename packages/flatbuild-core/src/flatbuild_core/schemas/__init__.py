"""Schema definitions for flatbuild.

This module exports the evaluated project model:

Root Model:
- ProjectModel: An already-evaluated build project

Members:
- Property: Evaluated property with raw and expanded value
- ItemSchema, Metadatum: Item record types
- Target: Run-once unit of build work
- PropertyGroup, PropertyAssignment: Property assignments inside a target
- TaskInvocation: Task call inside a target
"""

from __future__ import annotations

from flatbuild_core.schemas.item_schema import ItemSchema, Metadatum
from flatbuild_core.schemas.project import ProjectModel
from flatbuild_core.schemas.property import Property
from flatbuild_core.schemas.target import (
    PropertyAssignment,
    PropertyGroup,
    Target,
    TargetChild,
    TaskInvocation,
)

__all__: list[str] = [
    # Root
    "ProjectModel",
    # Members
    "Property",
    "ItemSchema",
    "Metadatum",
    "Target",
    "TargetChild",
    "PropertyGroup",
    "PropertyAssignment",
    "TaskInvocation",
]
