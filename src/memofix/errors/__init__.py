"""memofix error handling.

Coded exception hierarchy for definition-time, resolution and execution
failures.
"""

from memofix.errors.base import (
    CircularFixtureError,
    ConfigValidationError,
    DefinitionError,
    ErrorCode,
    ErrorContext,
    ExecutionError,
    FixtureDefinitionError,
    FixtureNotFoundError,
    HookError,
    MemofixError,
    ReservedFixtureNameError,
    ResolutionError,
)

__all__ = [
    "MemofixError",
    "ErrorCode",
    "ErrorContext",
    # Definition errors
    "DefinitionError",
    "FixtureDefinitionError",
    "ReservedFixtureNameError",
    "ConfigValidationError",
    # Resolution errors
    "ResolutionError",
    "FixtureNotFoundError",
    "CircularFixtureError",
    # Execution errors
    "ExecutionError",
    "HookError",
]
