"""Expression expansion for flatbuild.

The compiler does not evaluate the build engine's macro language itself.
It calls an Expander, which returns the expanded string or raises
ExpansionError. Anything with an ``expand(raw) -> str`` method works.

PropertyExpander is a small reference expander that resolves ``$(Name)``
property references from a lookup table. Item lists (``@(...)``) and item
metadata (``%(...)``) are left untouched.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import structlog

from flatbuild_core.errors import ExpansionError

if TYPE_CHECKING:
    from flatbuild_core.schemas import ProjectModel

logger = structlog.get_logger(__name__)

PROPERTY_REFERENCE_START = "$("


@runtime_checkable
class Expander(Protocol):
    """Expands raw expressions into their effective value."""

    def expand(self, raw: str) -> str:
        """Expand a raw expression.

        Raises:
            ExpansionError: If the expression cannot be expanded.
        """
        ...


class PropertyExpander:
    """Resolve ``$(Name)`` references against a table of property values.

    Lookups are case-insensitive, like property names in the build engine.
    Values are substituted as-is (they are already evaluated), so no
    recursive expansion takes place.

    Example:
        >>> expander = PropertyExpander({"Configuration": "Debug"})
        >>> expander.expand("bin\\\\$(Configuration)")
        'bin\\\\Debug'
        >>> expander.expand("$(Undefined)")
        Traceback (most recent call last):
        ...
        flatbuild_core.errors.ExpansionError: Cannot expand '$(Undefined)': ...
    """

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        """Initialize the expander.

        Args:
            values: Property name to value. Names are matched case-insensitively.
        """
        self._values: dict[str, str] = {
            name.lower(): value for name, value in (values or {}).items()
        }

    @classmethod
    def from_project(
        cls,
        project: ProjectModel,
        global_properties: Mapping[str, str] | None = None,
    ) -> PropertyExpander:
        """Build an expander from a project's evaluated properties.

        Every property takes part, reserved and environment ones included.
        Global properties override project values of the same name.

        Args:
            project: Evaluated project model.
            global_properties: Caller-supplied overrides.

        Returns:
            Configured PropertyExpander.
        """
        values = {prop.name: prop.expanded_value for prop in project.properties}
        for name, value in (global_properties or {}).items():
            # Drop any differently-cased project entry before overriding.
            for existing in [n for n in values if n.lower() == name.lower()]:
                del values[existing]
            values[name] = value
        return cls(values)

    def expand(self, raw: str) -> str:
        """Expand all ``$(Name)`` references in ``raw``.

        Args:
            raw: Raw expression.

        Returns:
            Expanded string.

        Raises:
            ExpansionError: On an undefined property or an unterminated reference.
        """
        parts: list[str] = []
        pos = 0
        while True:
            start = raw.find(PROPERTY_REFERENCE_START, pos)
            if start < 0:
                parts.append(raw[pos:])
                break

            end = raw.find(")", start)
            if end < 0:
                raise ExpansionError(raw, f"unterminated property reference at offset {start}")

            name = raw[start + len(PROPERTY_REFERENCE_START) : end].strip()
            if not name:
                raise ExpansionError(raw, f"empty property reference at offset {start}")

            try:
                value = self._values[name.lower()]
            except KeyError:
                raise ExpansionError(raw, f"undefined property '{name}'") from None

            parts.append(raw[pos:start])
            parts.append(value)
            pos = end + 1

        return "".join(parts)


def expand_or_raw(expander: Expander, raw: str) -> str:
    """Expand ``raw``, falling back to the raw text on failure.

    Expansion is deterministic, so a failure is never retried.

    Args:
        expander: Expander to call.
        raw: Raw expression.

    Returns:
        The expanded value, or ``raw`` unchanged if expansion failed.
    """
    try:
        return expander.expand(raw)
    except ExpansionError as e:
        logger.debug("expansion_fallback", expression=raw, reason=e.reason)
        return raw
