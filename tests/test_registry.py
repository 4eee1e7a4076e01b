"""Tests for fixture registries and group nesting."""

from __future__ import annotations

from memofix.core.registry import FixtureRegistry
from tests.helpers import CallCounter


class TestFixtureRegistry:
    """Tests for FixtureRegistry lookups."""

    def test_resolve_local(self):
        registry = FixtureRegistry(owner="Root")
        registry.declare("value", lambda ex: 1)

        definition = registry.resolve("value")

        assert definition is not None
        assert definition.group == "Root"
        assert "value" in registry

    def test_resolve_missing(self):
        registry = FixtureRegistry(owner="Root")

        assert registry.resolve("missing") is None
        assert "missing" not in registry
        assert 42 not in registry

    def test_falls_back_to_parent(self):
        parent = FixtureRegistry(owner="Root")
        child = FixtureRegistry(owner="Root child", parent=parent)
        parent.declare("value", lambda ex: 1)

        assert child.resolve("value") is parent.resolve("value")
        assert len(child) == 0

    def test_child_shadows_parent(self):
        parent = FixtureRegistry(owner="Root")
        child = FixtureRegistry(owner="Root child", parent=parent)
        parent.declare("value", lambda ex: "outer")
        child.declare("value", lambda ex: "inner")

        assert child.resolve("value").group == "Root child"
        assert parent.resolve("value").group == "Root"

    def test_redeclaration_replaces(self):
        registry = FixtureRegistry(owner="Root")
        first = registry.declare("value", lambda ex: 1)[0]
        second = registry.declare("value", lambda ex: 2)[0]

        assert registry.resolve("value") is second
        assert registry.resolve("value") is not first
        assert registry.local_names() == ["value"]

    def test_names_outermost_first_without_duplicates(self):
        parent = FixtureRegistry(owner="Root")
        child = FixtureRegistry(owner="Root child", parent=parent)
        parent.declare({"a": lambda: 1, "b": lambda: 2})
        child.declare({"c": lambda: 3, "a": lambda: 4})

        assert child.names() == ["a", "b", "c"]
        assert child.definitions()["a"].group == "Root child"
        assert child.definitions()["b"].group == "Root"

    def test_chain(self):
        root = FixtureRegistry(owner="Root")
        middle = FixtureRegistry(owner="Middle", parent=root)
        leaf = FixtureRegistry(owner="Leaf", parent=middle)

        assert [r.owner for r in leaf.chain()] == ["Leaf", "Middle", "Root"]


class TestGroupInheritance:
    """Nested groups inherit and shadow fixtures."""

    def test_nested_group_inherits_fixture(self, group, make_example):
        group.let("value", lambda ex: "outer")
        child = group.describe("when nested")

        assert make_example(child).value == "outer"

    def test_nested_declaration_shadows(self, group, make_example):
        outer = CallCounter("outer")
        inner = CallCounter("inner")
        group.let("value", outer)
        child = group.describe("when overridden")
        child.let("value", inner)

        assert make_example(child).value == "inner"
        assert make_example(group).value == "outer"
        assert (outer.calls, inner.calls) == (1, 1)

    def test_shadowing_does_not_merge(self, group, make_example):
        group.let("settings", lambda ex: {"outer": True})
        child = group.describe("child")
        child.let("settings", lambda ex: {"inner": True})

        assert make_example(child).settings == {"inner": True}

    def test_inherited_fixture_uses_shadowed_dependency(self, group, make_example):
        """A parent's fixture resolves its dependencies from the running example."""
        group.let("name", lambda ex: "outer")
        group.let("greeting", lambda ex: f"hello {ex.name}")
        child = group.describe("child")
        child.let("name", lambda ex: "inner")

        assert make_example(child).greeting == "hello inner"
        assert make_example(group).greeting == "hello outer"

    def test_last_declaration_in_group_wins(self, group, make_example):
        group.let("value", lambda ex: 1)
        group.let("value", lambda ex: 2)

        assert make_example(group).value == 2
        assert group.fixture_names() == ["value"]

    def test_parent_declaration_after_child_creation_is_visible(self, group, make_example):
        child = group.describe("child")
        group.let("late", lambda ex: "late")

        assert make_example(child).late == "late"

    def test_sibling_groups_do_not_share_fixtures(self, group, make_example):
        left = group.describe("left")
        right = group.describe("right")
        left.let("only_left", lambda ex: 1)

        assert right.registry.resolve("only_left") is None
        assert make_example(right).has_fixture("only_left") is False

    def test_full_description(self, group):
        child = group.describe("when nested").context("deeply")

        assert child.full_description == "Thing when nested deeply"
        assert child.registry.owner == "Thing when nested deeply"
        assert [g.name for g in child.ancestors()] == ["Thing", "when nested", "deeply"]

    def test_walk_is_depth_first(self, group):
        a = group.describe("a")
        a.describe("a1")
        group.describe("b")

        assert [g.name for g in group.walk()] == ["Thing", "a", "a1", "b"]
