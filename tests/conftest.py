"""Pytest fixtures for memofix tests."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from memofix import Example, ExampleRunner, Group


@pytest.fixture
def group() -> Group:
    """A fresh top-level group."""
    return Group("Thing")


@pytest.fixture
def runner() -> ExampleRunner:
    return ExampleRunner()


@pytest.fixture
def make_example() -> Callable[..., Example]:
    """Create example instances outside a runner."""

    def _make(group: Group, description: str = "example") -> Example:
        return Example(group, description)

    return _make
