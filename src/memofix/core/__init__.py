"""Core module exports.

This module provides the fixture-memoization building blocks:
- Group: Definition-time container for fixtures, hooks and examples
- Example: Per-execution instance owning a MemoStore
- MemoStore: Fetch-or-compute cache
- FixtureRegistry: Chained fixture definitions with shadowing
- Models: FixtureDefinition, Hook, ExampleDefinition, ExampleResult, GroupResult
"""

from __future__ import annotations

from memofix.core.example import RESERVED_NAMES, Example
from memofix.core.group import Group
from memofix.core.models import (
    ExampleDefinition,
    ExampleResult,
    FixtureDefinition,
    GroupResult,
    Hook,
    HookKind,
)
from memofix.core.registry import FixtureRegistry
from memofix.core.store import MemoStore

__all__ = [
    "Group",
    "Example",
    "MemoStore",
    "FixtureRegistry",
    "RESERVED_NAMES",
    "FixtureDefinition",
    "ExampleDefinition",
    "Hook",
    "HookKind",
    "ExampleResult",
    "GroupResult",
]
