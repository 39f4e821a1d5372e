"""Target models for flatbuild.

This module defines the target as the evaluator hands it over: its
ordering declarations (DependsOnTargets, BeforeTargets, AfterTargets) as
raw semicolon-joined strings, an optional skip condition, and an ordered
list of children. Children are either property groups or task invocations
and keep their interleaved declaration order.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

TARGET_NAME_PATTERN = r"^[A-Za-z_][A-Za-z0-9_.\-]*$"


class PropertyAssignment(BaseModel):
    """A property assignment inside a target's property group.

    Attributes:
        name: Name of the assigned property.
        value: Raw (unexpanded) value.
        condition: Optional raw condition guarding this assignment only.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(..., min_length=1, description="Assigned property name")
    value: str = Field(default="", description="Raw assigned value")
    condition: str | None = Field(default=None, description="Raw assignment condition")


class PropertyGroup(BaseModel):
    """A conditional group of property assignments inside a target."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["property_group"] = "property_group"
    condition: str | None = Field(default=None, description="Raw group condition")
    properties: list[PropertyAssignment] = Field(
        default_factory=list,
        description="Assignments in declaration order",
    )


class TaskInvocation(BaseModel):
    """A single task call inside a target.

    Attributes:
        name: Task name (becomes the called procedure name).
        condition: Optional raw condition guarding the call.
        parameters: Parameter name to raw value, in declaration order.

    Example:
        >>> task = TaskInvocation(name="Csc", parameters={"Sources": "a.cs"})
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["task"] = "task"
    name: str = Field(..., min_length=1, description="Task name")
    condition: str | None = Field(default=None, description="Raw task condition")
    parameters: dict[str, str] = Field(
        default_factory=dict,
        description="Raw parameter values in declaration order",
    )


TargetChild = Annotated[
    Union[PropertyGroup, TaskInvocation],
    Field(discriminator="kind"),
]


class Target(BaseModel):
    """A named, conditionally-skippable, run-once unit of build work.

    Attributes:
        name: Target name, unique within the project.
        condition: Optional raw skip condition.
        depends_on_targets: Raw semicolon-joined DependsOnTargets.
        before_targets: Raw semicolon-joined BeforeTargets.
        after_targets: Raw semicolon-joined AfterTargets.
        children: Property groups and task invocations in declaration order.

    Example:
        >>> target = Target(
        ...     name="Build",
        ...     depends_on_targets="Compile",
        ...     children=[TaskInvocation(name="Message", parameters={"Text": "done"})],
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(
        ...,
        min_length=1,
        pattern=TARGET_NAME_PATTERN,
        description="Target name",
    )
    condition: str | None = Field(default=None, description="Raw skip condition")
    depends_on_targets: str = Field(default="", description="Raw DependsOnTargets")
    before_targets: str = Field(default="", description="Raw BeforeTargets")
    after_targets: str = Field(default="", description="Raw AfterTargets")
    children: list[TargetChild] = Field(
        default_factory=list,
        description="Property groups and tasks in declaration order",
    )

    @property
    def tasks(self) -> list[TaskInvocation]:
        """Task invocations in declaration order."""
        return [child for child in self.children if isinstance(child, TaskInvocation)]

    @property
    def property_groups(self) -> list[PropertyGroup]:
        """Property groups in declaration order."""
        return [child for child in self.children if isinstance(child, PropertyGroup)]
