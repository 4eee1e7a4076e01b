"""Custom exception hierarchy for memofix.

All memofix errors inherit from MemofixError and include:
- error_code: A unique ErrorCode enum for categorization
- context: ErrorContext with group/example/fixture details
- suggestions: List of actionable steps to resolve the issue

Errors raised by a fixture's own computation are never wrapped in this
hierarchy; they reach the accessor's caller unchanged.

Example:
    try:
        group.let("fixture", lambda ex: 1)
    except ReservedFixtureNameError as e:
        print(f"Error: {e}")
        print(f"Suggestions: {e.suggestions}")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for memofix.

    Error codes are organized by category:
    - E2xx: Definition and configuration errors
    - E3xx: Fixture resolution errors
    - E4xx: Example execution errors
    - E9xx: Unknown/internal errors
    """

    # Definition errors (E2xx)
    INVALID_FIXTURE = "E201"
    RESERVED_NAME = "E202"
    INVALID_CONFIG = "E203"

    # Resolution errors (E3xx)
    FIXTURE_NOT_FOUND = "E301"
    CIRCULAR_FIXTURE = "E302"

    # Execution errors (E4xx)
    HOOK_FAILED = "E401"
    EXAMPLE_FAILED = "E402"

    # Unknown/internal errors (E9xx)
    UNKNOWN = "E999"

    @property
    def category(self) -> str:
        """Get the error category name."""
        code_num = int(self.value[1:])
        if code_num < 300:
            return "definition"
        elif code_num < 400:
            return "resolution"
        elif code_num < 500:
            return "execution"
        else:
            return "unknown"


@dataclass
class ErrorContext:
    """Where an error happened.

    Attributes:
        group_name: Full description of the group being defined or run.
        example_name: Description of the running example.
        fixture_name: Fixture being declared or resolved.
        extra: Additional context-specific information.
        timestamp: When the error occurred.
    """

    group_name: str | None = None
    example_name: str | None = None
    fixture_name: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        result = {
            "group_name": self.group_name,
            "example_name": self.example_name,
            "fixture_name": self.fixture_name,
            "extra": self.extra,
            "timestamp": self.timestamp.isoformat(),
        }
        return {k: v for k, v in result.items() if v is not None}

    def format_location(self) -> str:
        """Format the error location as a readable string."""
        parts = []
        if self.group_name:
            parts.append(f"group={self.group_name}")
        if self.example_name:
            parts.append(f"example={self.example_name}")
        if self.fixture_name:
            parts.append(f"fixture={self.fixture_name}")
        return " > ".join(parts) if parts else "unknown location"


class MemofixError(Exception):
    """Base exception for all memofix errors.

    Attributes:
        error_code: Unique ErrorCode for this error type
        message: Human-readable error description
        context: ErrorContext with definition/execution details
        suggestions: List of actionable steps to resolve the issue
        cause: The underlying exception (if any)
    """

    error_code: ErrorCode = ErrorCode.UNKNOWN
    default_message: str = "An unexpected error occurred"
    default_suggestions: list[str] = []

    def __init__(
        self,
        message: str | None = None,
        error_code: ErrorCode | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
        suggestions: list[str] | None = None,
        **extra_context: Any,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.error_code
        self.context = context or ErrorContext()
        self.cause = cause
        self._suggestions = suggestions

        if extra_context:
            self.context.extra.update(extra_context)

        super().__init__(self.message)

    @property
    def suggestions(self) -> list[str]:
        """Get actionable suggestions for resolving this error."""
        if self._suggestions is not None:
            return self._suggestions
        return self.default_suggestions.copy()

    def __str__(self) -> str:
        parts = [f"[{self.error_code.value}] {self.message}"]

        location = self.context.format_location()
        if location != "unknown location":
            parts.append(f"at {location}")

        return " | ".join(parts)

    def format_verbose(self) -> str:
        """Format error with full details including suggestions."""
        lines = [
            f"Error [{self.error_code.value}]: {self.message}",
        ]

        location = self.context.format_location()
        if location != "unknown location":
            lines.append(f"Location: {location}")

        if self.cause is not None:
            lines.append(f"Caused by: {type(self.cause).__name__}: {self.cause}")

        if self.suggestions:
            lines.append("")
            lines.append("Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"  - {suggestion}")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error_code": self.error_code.value,
            "error_type": self.__class__.__name__,
            "message": self.message,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
        }


class DefinitionError(MemofixError):
    """A group was defined incorrectly.

    Raised while the group is being built, never deferred to run time.
    """

    error_code = ErrorCode.INVALID_FIXTURE
    default_message = "Invalid group definition"


class FixtureDefinitionError(DefinitionError):
    """A fixture declaration is malformed.

    Common causes include:
    - Computation is not callable
    - Name is not a valid identifier
    - Batch mapping is empty or also given a separate computation
    """

    error_code = ErrorCode.INVALID_FIXTURE
    default_message = "Invalid fixture declaration"
    default_suggestions = [
        "Pass a callable taking either no arguments or the running example",
        "Use a valid Python identifier that does not start with an underscore",
    ]


class ReservedFixtureNameError(FixtureDefinitionError):
    """Fixture name collides with an attribute of the example itself."""

    error_code = ErrorCode.RESERVED_NAME
    default_message = "Fixture name is reserved"
    default_suggestions = [
        "Rename the fixture; names such as 'fixture', 'state' and 'store' "
        "belong to the example instance",
    ]


class ConfigValidationError(MemofixError):
    """Configuration value failed validation."""

    error_code = ErrorCode.INVALID_CONFIG
    default_message = "Invalid configuration"

    def __init__(
        self,
        message: str | None = None,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message=message, **kwargs)
        self.field = field
        self.value = value
        if field:
            self.context.extra["field"] = field


class ResolutionError(MemofixError):
    """A fixture could not be resolved for an example."""

    error_code = ErrorCode.FIXTURE_NOT_FOUND
    default_message = "Fixture resolution failed"


class FixtureNotFoundError(ResolutionError, AttributeError):
    """No fixture with the requested name exists in the group chain."""

    error_code = ErrorCode.FIXTURE_NOT_FOUND
    default_message = "Fixture not found"
    default_suggestions = [
        "Declare the fixture with group.let() on this group or an enclosing one",
        "Check for typos in the fixture name",
    ]


class CircularFixtureError(ResolutionError):
    """A fixture was requested while its own computation was running."""

    error_code = ErrorCode.CIRCULAR_FIXTURE
    default_message = "Circular fixture reference"
    default_suggestions = [
        "Break the cycle so no fixture depends on itself, directly or transitively",
    ]


class ExecutionError(MemofixError):
    """Running an example failed."""

    error_code = ErrorCode.EXAMPLE_FAILED
    default_message = "Example execution failed"


class HookError(ExecutionError):
    """A before or after hook raised."""

    error_code = ErrorCode.HOOK_FAILED
    default_message = "Hook execution failed"
