"""Literal formatting for generated programs.

Renders property values, item metadata defaults and task parameter values
as string literals of the generated program.
"""

from __future__ import annotations

LINE_BREAKS = ("\n", "\r")
BLOCK_DELIMITER = '"""'
LINE_DELIMITER = '"'


def _has_line_break(value: str) -> bool:
    return any(brk in value for brk in LINE_BREAKS)


def format_value(value: str) -> str:
    """Render ``value`` as a string literal.

    Backslashes are doubled. A value containing a line break becomes a
    triple-quoted block literal; anything else a double-quoted literal.
    This function never fails.

    Args:
        value: Value to render.

    Returns:
        The literal text.

    Example:
        >>> format_value("Debug")
        '"Debug"'
    """
    escaped = value.replace("\\", "\\\\")
    if _has_line_break(value):
        return f"{BLOCK_DELIMITER}{escaped}{BLOCK_DELIMITER}"
    return f"{LINE_DELIMITER}{escaped}{LINE_DELIMITER}"


def parse_value(literal: str) -> str:
    """Invert :func:`format_value`.

    Args:
        literal: A literal produced by format_value.

    Returns:
        The original value.

    Raises:
        ValueError: If ``literal`` is not delimited like format_value output.
    """
    size = len(BLOCK_DELIMITER)
    if (
        len(literal) >= 2 * size
        and literal.startswith(BLOCK_DELIMITER)
        and literal.endswith(BLOCK_DELIMITER)
        and _has_line_break(literal[size:-size])
    ):
        body = literal[size:-size]
    elif (
        len(literal) >= 2
        and literal.startswith(LINE_DELIMITER)
        and literal.endswith(LINE_DELIMITER)
    ):
        body = literal[1:-1]
    else:
        raise ValueError(f"Not a formatted literal: {literal!r}")
    return body.replace("\\\\", "\\")
