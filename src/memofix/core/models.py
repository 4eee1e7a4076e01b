"""Core domain models for memofix.

This module defines the records shared between the declaration side and the
runner:
- FixtureDefinition: A named, lazily computed value declared on a group
- Hook: A before/after callback registered on a group
- ExampleResult: Outcome of running one example
- GroupResult: Outcome of running a group tree

Example:
    >>> from memofix import Group
    >>>
    >>> group = Group("Thing")
    >>> definition = group.let("thing", lambda ex: object())
    >>> definition.eager
    False
"""

from __future__ import annotations

import inspect
import keyword
from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

ComputeCallable = Callable[..., Any]
HookCallable = Callable[..., Any]


def accepts_context(func: Callable[..., Any]) -> bool:
    """Return True if ``func`` can be called with the running example.

    Callables without a required positional parameter (``lambda: 1``,
    ``list``) are treated as zero-argument computations and are invoked
    without the example.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return False

    for param in signature.parameters.values():
        if param.kind == param.VAR_POSITIONAL:
            return True
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD) and param.default is param.empty:
            return True
    return False


def required_keyword_only(func: Callable[..., Any]) -> list[str]:
    """Names of keyword-only parameters ``func`` requires.

    Neither calling convention supplies them, so such callables are rejected
    when they are registered.
    """
    try:
        signature = inspect.signature(func)
    except (TypeError, ValueError):
        return []

    return [
        param.name
        for param in signature.parameters.values()
        if param.kind == param.KEYWORD_ONLY and param.default is param.empty
    ]


def _check_callable(v: Any, what: str) -> Any:
    if not callable(v):
        raise ValueError(f"{what} must be callable, got {type(v).__name__}")
    missing = required_keyword_only(v)
    if missing:
        raise ValueError(f"{what} cannot require keyword-only parameters: {', '.join(missing)}")
    return v


class HookKind(Enum):
    """When a hook runs relative to the example body."""

    BEFORE = "before"
    AFTER = "after"


class FixtureDefinition(BaseModel):
    """A named fixture declared on a group.

    Definitions are created once, when the group is defined, and never change
    afterwards. Every example of the owning group and of its nested groups
    resolves the same definition unless a nested group shadows the name.

    Attributes:
        name: Fixture name, unique within the owning group.
        compute: Callable producing the value. Called with the running
            example when it accepts a positional parameter, otherwise with
            no arguments.
        eager: Whether a before hook forces the computation.
        group: Full description of the group that declared the fixture.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra="forbid",
        frozen=True,
    )

    name: str = Field(..., min_length=1, description="Fixture name")
    compute: ComputeCallable = Field(..., description="Value computation")
    eager: bool = Field(default=False, description="Computed by an implicit before hook")
    group: str = Field(default="", description="Declaring group")

    _takes_context: bool = PrivateAttr(default=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.isidentifier() or keyword.iskeyword(v):
            raise ValueError(f"Fixture name must be a valid identifier, got {v!r}")
        if v.startswith("_"):
            raise ValueError("Fixture name cannot start with an underscore")
        return v

    @field_validator("compute", mode="before")
    @classmethod
    def validate_compute(cls, v: Any) -> ComputeCallable:
        return _check_callable(v, "Fixture computation")

    def model_post_init(self, __context: Any) -> None:
        self._takes_context = accepts_context(self.compute)

    def evaluate(self, example: Any) -> Any:
        """Run the computation for ``example``."""
        if self._takes_context:
            return self.compute(example)
        return self.compute()


class Hook(BaseModel):
    """A callback run before or after each example of a group.

    Attributes:
        kind: Before or after the example body.
        callback: Callable receiving the running example.
        group: Full description of the group that registered the hook.
        fixture: Name of the fixture this hook forces, for hooks generated by
            eager declarations.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra="forbid",
        frozen=True,
    )

    kind: HookKind
    callback: HookCallable
    group: str = ""
    fixture: str | None = None

    @field_validator("callback", mode="before")
    @classmethod
    def validate_callback(cls, v: Any) -> HookCallable:
        return _check_callable(v, "Hook callback")

    @property
    def name(self) -> str:
        if self.fixture is not None:
            return f"let_eager({self.fixture})"
        return getattr(self.callback, "__name__", repr(self.callback))

    def __call__(self, example: Any) -> Any:
        if accepts_context(self.callback):
            return self.callback(example)
        return self.callback()


class ExampleDefinition(BaseModel):
    """An example body registered on a group."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra="forbid",
        frozen=True,
    )

    description: str = Field(..., min_length=1, max_length=500)
    body: HookCallable
    group: str = ""

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Example description cannot be empty or whitespace")
        return v.strip()

    @field_validator("body", mode="before")
    @classmethod
    def validate_body(cls, v: Any) -> HookCallable:
        return _check_callable(v, "Example body")

    def __call__(self, example: Any) -> Any:
        if accepts_context(self.body):
            return self.body(example)
        return self.body()


class ExampleResult(BaseModel):
    """Result of running a single example.

    Attributes:
        description: Full description, group names joined with the example's.
        success: Whether hooks and body completed without raising.
        started_at: Timestamp when the instance was created.
        finished_at: Timestamp when the instance was discarded.
        error: Error message if the example failed.
        error_type: Class name of the raised exception.
        phase: Where the failure happened: "before", "body" or "after".
        fixtures: Fixture names computed during the run, in order.
        duration_ms: Execution duration in milliseconds.
    """

    model_config = ConfigDict(extra="forbid")

    description: str
    success: bool
    started_at: datetime
    finished_at: datetime
    error: str | None = None
    error_type: str | None = None
    phase: str | None = None
    fixtures: list[str] = Field(default_factory=list)
    duration_ms: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def validate_consistency(self) -> ExampleResult:
        if self.success and self.error:
            raise ValueError("Successful example should not have an error message")
        if not self.success and not self.error:
            raise ValueError("Failed example must have an error message")
        if self.finished_at < self.started_at:
            raise ValueError("finished_at cannot be before started_at")
        return self

    @property
    def duration_seconds(self) -> float:
        return self.duration_ms / 1000.0


class GroupResult(BaseModel):
    """Result of running every example in a group tree."""

    model_config = ConfigDict(extra="forbid")

    group_name: str
    started_at: datetime
    finished_at: datetime
    example_results: list[ExampleResult] = Field(default_factory=list)
    aborted: bool = False
    duration_ms: float = Field(default=0.0, ge=0)

    @property
    def success(self) -> bool:
        return all(r.success for r in self.example_results)

    @property
    def total(self) -> int:
        return len(self.example_results)

    @property
    def passed(self) -> int:
        return sum(1 for r in self.example_results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.example_results if not r.success)

    def failures(self) -> list[ExampleResult]:
        return [r for r in self.example_results if not r.success]

    def to_dict(self) -> dict[str, Any]:
        return {
            "group_name": self.group_name,
            "success": self.success,
            "aborted": self.aborted,
            "total": self.total,
            "passed": self.passed,
            "failed": self.failed,
            "duration_ms": self.duration_ms,
            "examples": [r.model_dump(mode="json") for r in self.example_results],
        }
