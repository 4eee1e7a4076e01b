"""Per-example memoization store.

Each running example owns exactly one MemoStore. Values are cached by
fixture name the first time they are computed and returned unchanged on
every later request from the same example, ``None`` included.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from memofix.errors import CircularFixtureError, ErrorContext

logger = logging.getLogger(__name__)


class MemoStore:
    """Fetch-or-compute cache scoped to one example.

    This class handles:
    - Returning a stored value without recomputing it
    - Computing and storing a value on first request
    - Leaving no entry behind when a computation raises
    - Detecting a fixture requested while it is being computed
    - Tracking hit/miss statistics

    Example:
        >>> store = MemoStore()
        >>> store.fetch_or_compute("answer", lambda: 42)
        42
        >>> store.fetch_or_compute("answer", lambda: 0)
        42
    """

    def __init__(self, owner: str | None = None, trace: bool = False) -> None:
        """Initialize an empty store.

        Args:
            owner: Description of the owning example, used in log messages
                and error context.
            trace: Log every hit and computation at DEBUG level.
        """
        self.owner = owner
        self.trace = trace
        self._values: dict[str, Any] = {}
        self._computing: list[str] = []
        self._hits = 0
        self._misses = 0

    def fetch_or_compute(self, name: str, compute: Callable[[], Any]) -> Any:
        """Return the value stored under ``name``, computing it if absent.

        Args:
            name: Fixture name used as the cache key.
            compute: Zero-argument callable producing the value. Called at
                most once per successful computation.

        Returns:
            The stored or freshly computed value.

        Raises:
            CircularFixtureError: If ``name`` is requested again while its
                own computation is still running.
            Exception: Whatever ``compute`` raises, unchanged. Nothing is
                stored in that case, so the next call retries.
        """
        if name in self._values:
            self._hits += 1
            if self.trace:
                logger.debug(f"Fixture cache hit: {name} ({self.owner})")
            return self._values[name]

        if name in self._computing:
            chain = " -> ".join([*self._computing, name])
            raise CircularFixtureError(
                message=f"Fixture '{name}' requested while being computed: {chain}",
                context=ErrorContext(
                    example_name=self.owner,
                    fixture_name=name,
                    extra={"chain": [*self._computing, name]},
                ),
            )

        self._misses += 1
        if self.trace:
            logger.debug(f"Computing fixture: {name} ({self.owner})")

        self._computing.append(name)
        try:
            value = compute()
        finally:
            self._computing.pop()

        self._values[name] = value
        return value

    def get(self, name: str, default: Any = None) -> Any:
        """Return a stored value without computing anything."""
        return self._values.get(name, default)

    def names(self) -> list[str]:
        """Names of the stored values, in computation order."""
        return list(self._values)

    def clear(self) -> None:
        self._values.clear()
        self._computing.clear()

    @property
    def hits(self) -> int:
        return self._hits

    @property
    def misses(self) -> int:
        return self._misses

    def stats(self) -> dict[str, Any]:
        """Get store statistics."""
        return {
            "size": len(self._values),
            "hits": self._hits,
            "misses": self._misses,
        }

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"MemoStore(owner={self.owner!r}, names={self.names()!r})"
