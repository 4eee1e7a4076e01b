"""Fixture registries for groups.

Every group owns one FixtureRegistry holding the fixtures declared directly on
it, plus a back-reference to its parent group's registry. Lookups walk the
chain innermost-first, so a nested group's declaration shadows a same-named
one further out without copying inherited entries.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import ValidationError

from memofix.core.example import RESERVED_NAMES
from memofix.core.models import ComputeCallable, FixtureDefinition
from memofix.errors import ErrorContext, FixtureDefinitionError, ReservedFixtureNameError

logger = logging.getLogger(__name__)


def _validation_message(exc: ValidationError) -> str:
    return "; ".join(err["msg"] for err in exc.errors())


class FixtureRegistry:
    """Ordered name -> FixtureDefinition mapping with parent fallback."""

    def __init__(self, owner: str = "", parent: FixtureRegistry | None = None) -> None:
        self.owner = owner
        self.parent = parent
        self._definitions: dict[str, FixtureDefinition] = {}

    def build(self, name: Any, compute: Any, eager: bool = False) -> FixtureDefinition:
        """Validate one declaration and return its definition without installing it.

        Raises:
            ReservedFixtureNameError: If ``name`` belongs to the example itself.
            FixtureDefinitionError: If the name or computation is malformed.
        """
        context = ErrorContext(group_name=self.owner, fixture_name=str(name))
        if not isinstance(name, str):
            raise FixtureDefinitionError(
                message=f"Fixture name must be a string, got {type(name).__name__}",
                context=context,
            )
        if name in RESERVED_NAMES:
            raise ReservedFixtureNameError(
                message=f"Fixture name '{name}' is reserved by the example instance",
                context=context,
            )
        try:
            return FixtureDefinition(name=name, compute=compute, eager=eager, group=self.owner)
        except ValidationError as e:
            raise FixtureDefinitionError(
                message=f"Invalid fixture '{name}': {_validation_message(e)}",
                context=context,
                cause=e,
            ) from e

    def declare(
        self,
        name_or_mapping: str | Mapping[str, ComputeCallable],
        compute: ComputeCallable | None = None,
        eager: bool = False,
    ) -> list[FixtureDefinition]:
        """Declare one fixture, or several from a mapping.

        Every entry of a mapping is validated before any is installed; a
        single malformed entry fails the whole call.

        Returns:
            The installed definitions, in declaration order.
        """
        if isinstance(name_or_mapping, Mapping):
            if compute is not None:
                raise FixtureDefinitionError(
                    message="A separate computation cannot be combined with a fixture mapping",
                    context=ErrorContext(group_name=self.owner),
                )
            if not name_or_mapping:
                raise FixtureDefinitionError(
                    message="Fixture mapping is empty",
                    context=ErrorContext(group_name=self.owner),
                )
            definitions = [self.build(n, c, eager) for n, c in name_or_mapping.items()]
        else:
            definitions = [self.build(name_or_mapping, compute, eager)]

        for definition in definitions:
            self.add(definition)
        return definitions

    def add(self, definition: FixtureDefinition) -> None:
        """Install a definition; an existing one with the same name is replaced."""
        if definition.name in self._definitions:
            logger.debug(f"Redeclared fixture '{definition.name}' in {self.owner}")
        else:
            logger.debug(f"Declared fixture '{definition.name}' in {self.owner}")
        self._definitions[definition.name] = definition

    def resolve(self, name: str) -> FixtureDefinition | None:
        """Find the innermost definition for ``name``, or None."""
        for registry in self.chain():
            definition = registry._definitions.get(name)
            if definition is not None:
                return definition
        return None

    def chain(self) -> Iterator[FixtureRegistry]:
        """Yield this registry and its ancestors, innermost first."""
        registry: FixtureRegistry | None = self
        while registry is not None:
            yield registry
            registry = registry.parent

    def local_names(self) -> list[str]:
        return list(self._definitions)

    def names(self) -> list[str]:
        """Every visible fixture name, outermost declarations first."""
        seen: dict[str, None] = {}
        for registry in reversed(list(self.chain())):
            for name in registry._definitions:
                seen.setdefault(name, None)
        return list(seen)

    def definitions(self) -> dict[str, FixtureDefinition]:
        """Visible definitions with shadowing applied."""
        return {name: self.resolve(name) for name in self.names()}  # type: ignore[misc]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.resolve(name) is not None

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"FixtureRegistry(owner={self.owner!r}, names={self.local_names()!r})"
