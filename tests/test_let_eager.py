"""Tests for eager fixtures declared with Group.let_eager."""

from __future__ import annotations

import pytest

from memofix import Group
from memofix.core.models import HookKind
from memofix.errors import FixtureDefinitionError
from tests.helpers import CallCounter


class Thing:
    count = 0

    def __init__(self) -> None:
        Thing.count += 1


@pytest.fixture(autouse=True)
def reset_thing_count():
    Thing.count = 0
    yield
    Thing.count = 0


class TestEagerEvaluation:
    """Eager fixtures are computed before the example body."""

    def test_lazy_fixture_is_not_invoked_implicitly(self, group, runner):
        group.let("thing", lambda ex: Thing())
        observed = []

        @group.it("is not invoked implicitly")
        def _(ex):
            observed.append(Thing.count)

        assert runner.run(group).success
        assert observed == [0]

    def test_lazy_fixture_can_be_invoked_explicitly(self, group, runner):
        group.let("thing", lambda ex: Thing())
        observed = []

        @group.it("can be invoked explicitly")
        def _(ex):
            ex.thing
            observed.append(Thing.count)

        assert runner.run(group).success
        assert observed == [1]

    def test_eager_fixture_is_invoked_before_body(self, group, runner):
        group.let_eager("thing", lambda ex: Thing())
        observed = []

        @group.it("is invoked implicitly")
        def _(ex):
            observed.append(Thing.count)

        assert runner.run(group).success
        assert observed == [1]

    def test_eager_fixture_returns_memoized_value(self, group, runner):
        group.let_eager("thing", lambda ex: Thing())
        observed = []

        @group.it("returns memoized version on first invocation")
        def _(ex):
            ex.thing
            ex.thing
            observed.append(Thing.count)

        assert runner.run(group).success
        assert observed == [1]

    def test_body_sees_hook_computed_instance(self, group, runner):
        created = []

        def thing(ex):
            created.append(object())
            return created[-1]

        group.let_eager("thing", thing)
        seen = []

        @group.it("sees the same object")
        def _(ex):
            seen.append(ex.thing)

        runner.run(group)

        assert len(created) == 1
        assert seen[0] is created[0]

    def test_eager_does_not_interfere_between_examples(self, group, runner):
        compute = CallCounter()
        group.let_eager("creator", lambda ex: compute())

        for description in ("first", "second", "third"):
            group.example(description, lambda ex: None)

        result = runner.run(group)

        assert result.passed == 3
        assert compute.calls == 3

    def test_eager_batch_form(self, group, runner):
        group.let_eager({"foo": lambda: 1, "bar": lambda: 2})
        seen = {}

        @group.it("computes both")
        def _(ex):
            seen["computed"] = ex.computed()
            seen["values"] = (ex.foo, ex.bar)

        assert runner.run(group).success
        assert seen == {"computed": ["foo", "bar"], "values": (1, 2)}

    def test_eager_in_parent_applies_to_nested_examples(self, group, runner):
        group.let_eager("thing", lambda ex: Thing())
        child = group.describe("nested")
        observed = []
        child.example("sees it", lambda ex: observed.append(Thing.count))

        assert runner.run(group).success
        assert observed == [1]

    def test_shadowed_eager_fixture_hook_uses_inner_definition(self, group, runner):
        group.let_eager("value", lambda ex: "outer")
        child = group.describe("nested")
        child.let("value", lambda ex: "inner")
        seen = []
        child.example("reads", lambda ex: seen.append(ex.computed()))
        child.example("value", lambda ex: seen.append(ex.value))

        assert runner.run(group).success
        assert seen == [["value"], "inner"]


class TestEagerHooks:
    """Tests for the hooks registered by let_eager."""

    def test_registers_one_before_hook(self, group):
        definition = group.let_eager("thing", lambda ex: 1)

        hooks = group.before_hooks()
        assert definition.eager is True
        assert len(hooks) == 1
        assert hooks[0].kind is HookKind.BEFORE
        assert hooks[0].fixture == "thing"
        assert hooks[0].name == "let_eager(thing)"

    def test_batch_registers_one_hook_per_name(self, group):
        group.let_eager({"a": lambda: 1, "b": lambda: 2, "c": lambda: 3})

        assert [hook.fixture for hook in group.before_hooks()] == ["a", "b", "c"]

    def test_hook_keeps_registration_position(self, group, runner):
        order = []
        group.before(lambda ex: order.append("first hook"))
        group.let_eager("thing", lambda ex: order.append("thing"))
        group.before(lambda ex: order.append("last hook"))
        group.example("runs", lambda ex: order.append("body"))

        assert runner.run(group).success
        assert order == ["first hook", "thing", "last hook", "body"]

    def test_hook_can_use_state_from_earlier_hook(self, group, runner):
        group.before(lambda ex: setattr(ex.state, "user", "ada"))
        group.let_eager("greeting", lambda ex: f"hi {ex.state.user}")
        seen = []
        group.example("greets", lambda ex: seen.append(ex.greeting))

        assert runner.run(group).success
        assert seen == ["hi ada"]

    def test_invalid_batch_registers_no_hooks(self, group):
        with pytest.raises(FixtureDefinitionError):
            group.let_eager({"good": lambda: 1, "bad": None})

        assert group.before_hooks() == []
        assert group.fixture_names() == []

    def test_eager_decorator_form(self, group, runner):
        @group.let_eager
        def thing(ex):
            return Thing()

        group.example("counts", lambda ex: None)

        assert runner.run(group).success
        assert Thing.count == 1

    def test_declare_eager_alias(self, group):
        group.declare_eager("thing", lambda ex: 1)

        assert group.before_hooks()[0].fixture == "thing"

    def test_failing_eager_fixture_fails_example_before_body(self, group, runner):
        def broken(ex):
            raise ValueError("cannot build")

        group.let_eager("broken", broken)
        body = CallCounter()
        group.example("never runs", lambda ex: body())

        result = runner.run(group)

        assert result.success is False
        failure = result.example_results[0]
        assert failure.phase == "before"
        assert failure.error_type == "ValueError"
        assert "cannot build" in failure.error
        assert body.calls == 0

    def test_failing_eager_fixture_does_not_block_other_examples(self, runner):
        group = Group("Flaky")
        attempts = CallCounter()

        def sometimes(ex):
            attempts()
            if attempts.calls == 1:
                raise RuntimeError("first attempt fails")
            return "ok"

        group.let_eager("resource", sometimes)
        group.example("first", lambda ex: None)
        group.example("second", lambda ex: None)

        result = runner.run(group)

        assert [r.success for r in result.example_results] == [False, True]
        assert attempts.calls == 2
