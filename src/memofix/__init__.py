"""memofix - lazy, per-example memoized fixtures.

Declare a fixture once on a group; every example computes it on first use and
reuses the value for the rest of that example. ``let_eager`` additionally
forces the computation before the example body runs.

Example:
    >>> from memofix import Group, ExampleRunner
    >>>
    >>> accounts = Group("Account")
    >>> _ = accounts.let("balance", lambda ex: 100)
    >>> _ = accounts.let_eager("audit_log", lambda ex: [])
    >>>
    >>> @accounts.it("starts with a balance")
    ... def _(ex):
    ...     assert ex.balance == 100
    >>>
    >>> ExampleRunner().run(accounts).passed
    1
"""

from __future__ import annotations

from memofix.config import MemofixConfig, load_config
from memofix.core import (
    Example,
    ExampleResult,
    FixtureDefinition,
    FixtureRegistry,
    Group,
    GroupResult,
    MemoStore,
)
from memofix.errors import (
    CircularFixtureError,
    FixtureDefinitionError,
    FixtureNotFoundError,
    MemofixError,
    ReservedFixtureNameError,
)
from memofix.observability import configure_logging
from memofix.runner import ExampleRunner

__version__ = "0.1.0"


def describe(name: str) -> Group:
    """Create a top-level group."""
    return Group(name)


__all__ = [
    "__version__",
    "describe",
    "Group",
    "Example",
    "MemoStore",
    "FixtureRegistry",
    "FixtureDefinition",
    "ExampleResult",
    "GroupResult",
    "ExampleRunner",
    "MemofixConfig",
    "load_config",
    "configure_logging",
    "MemofixError",
    "FixtureDefinitionError",
    "ReservedFixtureNameError",
    "FixtureNotFoundError",
    "CircularFixtureError",
]
