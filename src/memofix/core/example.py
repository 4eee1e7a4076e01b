"""The per-execution example instance.

An Example is created fresh for every run of an example body. Hooks and the
body receive it as their only argument, and fixture computations receive it
as explicit context so they can reach other fixtures and hook-set state.

Example:
    >>> from memofix import Group
    >>> group = Group("Counter")
    >>> _ = group.let("start", lambda ex: 1)
    >>> _ = group.let("next", lambda ex: ex.start + 1)
    >>> ex = Example(group)
    >>> ex.next
    2
    >>> ex.fixture("start")
    1
"""

from __future__ import annotations

from types import SimpleNamespace
from typing import TYPE_CHECKING, Any

from memofix.core.store import MemoStore
from memofix.errors import ErrorContext, FixtureNotFoundError

if TYPE_CHECKING:
    from memofix.core.group import Group


class Example:
    """A single execution of an example body.

    Attributes:
        group: The group the example belongs to.
        description: The example's own description.
        state: Free-form namespace for values set by hooks and the body.
    """

    def __init__(self, group: Group, description: str = "", trace: bool = False) -> None:
        self.group = group
        self.description = description
        self.state = SimpleNamespace()
        self._trace = trace
        self._store: MemoStore | None = None

    @property
    def store(self) -> MemoStore:
        """The example's memoization store, created on first access."""
        if self._store is None:
            self._store = MemoStore(owner=self.full_description, trace=self._trace)
        return self._store

    @property
    def full_description(self) -> str:
        if not self.description:
            return self.group.full_description
        return f"{self.group.full_description} {self.description}"

    def fixture(self, name: str) -> Any:
        """Return the value of fixture ``name``, computing it on first use.

        Raises:
            FixtureNotFoundError: If no group in the chain declares ``name``.
        """
        definition = self.group.registry.resolve(name)
        if definition is None:
            raise FixtureNotFoundError(
                message=f"No fixture named '{name}'",
                context=ErrorContext(
                    group_name=self.group.full_description,
                    example_name=self.description or None,
                    fixture_name=name,
                    extra={"available": self.group.registry.names()},
                ),
            )
        return self.store.fetch_or_compute(name, lambda: definition.evaluate(self))

    def has_fixture(self, name: str) -> bool:
        return name in self.group.registry

    def is_computed(self, name: str) -> bool:
        return self._store is not None and name in self._store

    def computed(self) -> list[str]:
        """Names of fixtures computed so far, in computation order."""
        if self._store is None:
            return []
        return self._store.names()

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails.
        if name.startswith("_") or name in RESERVED_NAMES:
            raise AttributeError(name)
        return self.fixture(name)

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self.group.registry.names()))

    def __repr__(self) -> str:
        return f"Example({self.full_description!r})"


# Names fixtures may not use: anything the instance itself answers to.
RESERVED_NAMES: frozenset[str] = frozenset(
    {name for name in dir(Example) if not name.startswith("_")}
    | {"group", "description", "state"}
)
