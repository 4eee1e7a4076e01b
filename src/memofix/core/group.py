"""Groups: nestable collections of examples, hooks and fixtures.

A Group is the definition-time construct. Fixtures are declared on it with
``let`` (lazy) or ``let_eager`` (forced by an implicit before hook), hooks
with ``before``/``after``, examples with ``it``. Nested groups created with
``describe``/``context`` inherit fixtures and hooks from their parents.

Example:
    >>> from memofix import Group, ExampleRunner
    >>>
    >>> widgets = Group("Widget")
    >>> _ = widgets.let("widget", lambda ex: {"name": "spanner"})
    >>>
    >>> @widgets.it("has a name")
    ... def _(ex):
    ...     assert ex.widget["name"] == "spanner"
    >>>
    >>> ExampleRunner().run(widgets).success
    True
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from typing import Any, overload

from pydantic import ValidationError

from memofix.core.models import (
    ComputeCallable,
    ExampleDefinition,
    FixtureDefinition,
    Hook,
    HookCallable,
    HookKind,
)
from memofix.core.registry import FixtureRegistry
from memofix.errors import DefinitionError, ErrorContext, FixtureDefinitionError

logger = logging.getLogger(__name__)

# Distinguishes the decorator forms from an explicit ``compute=None``.
_UNSET: Any = object()


def _eager_hook(name: str) -> Callable[[Any], Any]:
    def force(example: Any) -> Any:
        return example.fixture(name)

    force.__name__ = f"let_eager_{name}"
    return force


class Group:
    """A named, possibly nested, test group.

    Attributes:
        name: The group's own name.
        parent: Enclosing group, or None for a top-level group.
        registry: Fixtures declared directly on this group, with fallback to
            the parent's registry.
        examples: Example bodies registered on this group, in order.
        children: Nested groups, in creation order.
    """

    def __init__(self, name: str, parent: Group | None = None) -> None:
        if not isinstance(name, str) or not name.strip():
            raise DefinitionError(
                message="Group name cannot be empty",
                context=ErrorContext(group_name=parent.full_description if parent else None),
            )
        self.name = name.strip()
        self.parent = parent
        self.registry = FixtureRegistry(
            owner=self.full_description,
            parent=parent.registry if parent is not None else None,
        )
        self.examples: list[ExampleDefinition] = []
        self.children: list[Group] = []
        self._before: list[Hook] = []
        self._after: list[Hook] = []

    @property
    def full_description(self) -> str:
        if self.parent is None:
            return self.name
        return f"{self.parent.full_description} {self.name}"

    # ------------------------------------------------------------------
    # Nesting
    # ------------------------------------------------------------------

    def describe(self, name: str) -> Group:
        """Create and return a nested group."""
        child = Group(name, parent=self)
        self.children.append(child)
        return child

    context = describe

    def ancestors(self) -> list[Group]:
        """This group and its parents, outermost first."""
        groups: list[Group] = []
        group: Group | None = self
        while group is not None:
            groups.append(group)
            group = group.parent
        return list(reversed(groups))

    def walk(self) -> Iterator[Group]:
        """Yield this group and every nested group, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    # ------------------------------------------------------------------
    # Fixtures
    # ------------------------------------------------------------------

    @overload
    def let(self, name_or_mapping: Mapping[str, ComputeCallable]) -> list[FixtureDefinition]: ...

    @overload
    def let(self, name_or_mapping: str, compute: ComputeCallable) -> FixtureDefinition: ...

    @overload
    def let(self, name_or_mapping: str) -> Callable[[ComputeCallable], ComputeCallable]: ...

    @overload
    def let(self, name_or_mapping: ComputeCallable) -> ComputeCallable: ...

    def let(self, name_or_mapping: Any, compute: Any = _UNSET) -> Any:
        """Declare a lazily computed, per-example memoized fixture.

        Accepted forms::

            group.let("user", lambda ex: User(ex.account))
            group.let({"a": lambda: 1, "b": lambda: 2})

            @group.let
            def user(ex): ...

            @group.let("user")
            def make_user(ex): ...

        Returns:
            The FixtureDefinition, a list of them for the mapping form, or
            the decorated function for the decorator forms.

        Raises:
            ReservedFixtureNameError: If a name belongs to the example itself.
            FixtureDefinitionError: If a name or computation is malformed.
        """
        return self._declare(name_or_mapping, compute, eager=False)

    def let_eager(self, name_or_mapping: Any, compute: Any = _UNSET) -> Any:
        """Declare a fixture like ``let`` and force it before every example.

        One before hook per fixture is appended to this group's hook
        sequence; it requests the fixture through the example, so the body
        sees the same memoized value.
        """
        return self._declare(name_or_mapping, compute, eager=True)

    declare = let
    declare_eager = let_eager

    def _declare(self, name_or_mapping: Any, compute: Any, eager: bool) -> Any:
        if isinstance(name_or_mapping, Mapping):
            if compute is not _UNSET:
                raise FixtureDefinitionError(
                    message="A separate computation cannot be combined with a fixture mapping",
                    context=ErrorContext(group_name=self.full_description),
                )
            return self._install(name_or_mapping, None, eager)

        if compute is not _UNSET:
            return self._install(name_or_mapping, compute, eager)[0]

        if isinstance(name_or_mapping, str):

            def decorator(func: ComputeCallable) -> ComputeCallable:
                self._install(name_or_mapping, func, eager)
                return func

            return decorator

        if callable(name_or_mapping):
            func = name_or_mapping
            self._install(getattr(func, "__name__", ""), func, eager)
            return func

        raise FixtureDefinitionError(
            message=f"Expected a fixture name, mapping or function, got {type(name_or_mapping).__name__}",
            context=ErrorContext(group_name=self.full_description),
        )

    def _install(self, name_or_mapping: Any, compute: Any, eager: bool) -> list[FixtureDefinition]:
        definitions = self.registry.declare(name_or_mapping, compute, eager=eager)
        if eager:
            for definition in definitions:
                self._before.append(
                    Hook(
                        kind=HookKind.BEFORE,
                        callback=_eager_hook(definition.name),
                        group=self.full_description,
                        fixture=definition.name,
                    )
                )
        return definitions

    def fixture_names(self) -> list[str]:
        """Every fixture visible to examples of this group."""
        return self.registry.names()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------

    def before(self, callback: HookCallable) -> HookCallable:
        """Register a hook run before each example; usable as a decorator."""
        self._before.append(self._hook(HookKind.BEFORE, callback))
        return callback

    def after(self, callback: HookCallable) -> HookCallable:
        """Register a hook run after each example, even a failed one."""
        self._after.append(self._hook(HookKind.AFTER, callback))
        return callback

    def _hook(self, kind: HookKind, callback: Any) -> Hook:
        try:
            return Hook(kind=kind, callback=callback, group=self.full_description)
        except ValidationError as e:
            raise DefinitionError(
                message=f"Invalid {kind.value} hook: {e.errors()[0]['msg']}",
                context=ErrorContext(group_name=self.full_description),
                cause=e,
            ) from e

    @property
    def local_before_hooks(self) -> list[Hook]:
        return list(self._before)

    @property
    def local_after_hooks(self) -> list[Hook]:
        return list(self._after)

    def before_hooks(self) -> list[Hook]:
        """Before hooks for this group's examples: outermost group first,
        registration order within a group."""
        return [hook for group in self.ancestors() for hook in group._before]

    def after_hooks(self) -> list[Hook]:
        """After hooks for this group's examples: innermost group first."""
        return [hook for group in reversed(self.ancestors()) for hook in group._after]

    # ------------------------------------------------------------------
    # Examples
    # ------------------------------------------------------------------

    def it(self, description: str) -> Callable[[HookCallable], HookCallable]:
        """Register the decorated function as an example body."""

        def decorator(body: HookCallable) -> HookCallable:
            self.example(description, body)
            return body

        return decorator

    def example(self, description: str, body: HookCallable) -> ExampleDefinition:
        try:
            definition = ExampleDefinition(
                description=description,
                body=body,
                group=self.full_description,
            )
        except ValidationError as e:
            raise DefinitionError(
                message=f"Invalid example: {e.errors()[0]['msg']}",
                context=ErrorContext(group_name=self.full_description, example_name=str(description)),
                cause=e,
            ) from e
        self.examples.append(definition)
        return definition

    def __repr__(self) -> str:
        return f"Group({self.full_description!r})"
