"""Indentation-aware text sink for generated programs."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from io import StringIO


class IndentedWriter:
    """Line writer that prefixes each line with the current indentation.

    Empty lines are written without indentation so generated programs
    carry no trailing whitespace.

    Example:
        >>> writer = IndentedWriter()
        >>> writer.write_line("void Build()")
        >>> writer.write_line("{")
        >>> with writer.indent():
        ...     writer.write_line("BuildRun = true;")
        >>> writer.write_line("}")
        >>> print(writer.getvalue())
        void Build()
        {
            BuildRun = true;
        }
    """

    def __init__(self, indent_size: int = 4) -> None:
        """Initialize the writer.

        Args:
            indent_size: Spaces per indentation level.
        """
        self._buffer = StringIO()
        self._unit = " " * indent_size
        self.level = 0

    @contextmanager
    def indent(self) -> Iterator[None]:
        """Increase indentation for the duration of the block."""
        self.level += 1
        try:
            yield
        finally:
            self.level -= 1

    def write_line(self, text: str = "") -> None:
        """Write one line at the current indentation."""
        if text:
            self._buffer.write(self._unit * self.level)
            self._buffer.write(text)
        self._buffer.write("\n")

    def write_block(self, text: str) -> None:
        """Write pre-rendered text verbatim (it is not re-indented)."""
        self._buffer.write(text)

    def getvalue(self) -> str:
        """Return everything written so far."""
        return self._buffer.getvalue()
