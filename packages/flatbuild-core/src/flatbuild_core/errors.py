"""Custom exception hierarchy for flatbuild-core.

This module defines the exception classes used throughout flatbuild:
- FlatbuildError: Base exception for all flatbuild-related errors
- ExpansionError: Raised by an expander when a raw value cannot be expanded
- CompilationError: Raised when compilation fails (fatal, no fallback)

User-facing messages are safe to display. Technical details are logged
internally via structlog and never become part of the message.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)


class FlatbuildError(Exception):
    """Base exception for flatbuild.

    All flatbuild exceptions inherit from this class. User-facing messages
    are safe to display; technical details are logged internally.

    Args:
        user_message: Message to display to the user.
        internal_details: Optional technical details for logging. This is
            logged internally but NEVER exposed to the user.

    Example:
        >>> raise FlatbuildError(
        ...     "Project model invalid",
        ...     internal_details="targets[3].name duplicated at project.yaml:42"
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize FlatbuildError with user message and optional internal details.

        Args:
            user_message: Message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "flatbuild_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ExpansionError(FlatbuildError):
    """Raised when an expander cannot resolve a raw expression.

    Expansion is deterministic, so callers never retry: they either fall
    back to the raw text or promote the failure to a CompilationError.

    Attributes:
        expression: The raw expression that failed to expand.
        reason: Short description of what went wrong.

    Example:
        >>> raise ExpansionError("$(Undefined)", "undefined property 'Undefined'")
    """

    def __init__(self, expression: str, reason: str) -> None:
        """Initialize ExpansionError.

        Args:
            expression: The raw expression that failed to expand.
            reason: Short description of what went wrong.
        """
        super().__init__(f"Cannot expand '{expression}': {reason}")
        self.expression = expression
        self.reason = reason


class CompilationError(FlatbuildError):
    """Raised when compilation fails.

    Use this exception when:
    - The default target cannot be resolved
    - A value that decides control flow cannot be expanded
    - The optional cycle check finds a cyclic call graph

    Example:
        >>> raise CompilationError(
        ...     "Compilation failed - check logs for details",
        ...     internal_details="BeforeTargets of 'Clean' could not be expanded"
        ... )
    """

    pass


class DefaultTargetError(CompilationError):
    """Raised when the project declares no usable default target.

    Attributes:
        source: Where the default target was looked up (field or property name).
    """

    def __init__(self, source: str, *, internal_details: str | None = None) -> None:
        """Initialize DefaultTargetError.

        Args:
            source: Where the default target was looked up.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(
            f"No default target declared (looked up '{source}')",
            internal_details=internal_details,
        )
        self.source = source


class ControlFlowExpansionError(CompilationError):
    """Raised when a value that changes control flow cannot be expanded.

    Skip conditions and BeforeTargets/AfterTargets lists decide which calls
    the generated program makes, so they never degrade to their raw text.

    Attributes:
        target: Name of the target declaring the value.
        field: Which declaration failed (condition, before_targets, after_targets).
        expression: The raw expression.
    """

    def __init__(self, target: str, field: str, expression: str, reason: str) -> None:
        """Initialize ControlFlowExpansionError.

        Args:
            target: Name of the target declaring the value.
            field: Which declaration failed.
            expression: The raw expression.
            reason: Why expansion failed.
        """
        super().__init__(
            f"Target '{target}': cannot expand {field} '{expression}'",
            internal_details=reason,
        )
        self.target = target
        self.field = field
        self.expression = expression


class CyclicDependencyError(CompilationError):
    """Raised when the target call graph contains a cycle.

    Attributes:
        cycle: Target names forming the cycle, first name repeated at the end.

    Example:
        >>> raise CyclicDependencyError(["A", "B", "A"])
        # User sees: "Cyclic target dependency: A -> B -> A"
    """

    def __init__(self, cycle: list[str]) -> None:
        """Initialize CyclicDependencyError.

        Args:
            cycle: Target names forming the cycle.
        """
        super().__init__(f"Cyclic target dependency: {' -> '.join(cycle)}")
        self.cycle = cycle
