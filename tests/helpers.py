"""Shared test helpers."""

from __future__ import annotations

from typing import Any


class CallCounter:
    """Callable that counts its invocations and returns a fixed value."""

    def __init__(self, value: Any = None) -> None:
        self.value = value
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        return self.value


class Flaky:
    """Raises on the first ``failures`` calls, then returns ``value``."""

    def __init__(self, failures: int = 1, value: Any = "ok") -> None:
        self.failures = failures
        self.value = value
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        if self.calls <= self.failures:
            raise RuntimeError(f"failure #{self.calls}")
        return self.value
