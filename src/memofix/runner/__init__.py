"""Example Runner - drives examples through their lifecycle.

For every example a fresh Example instance is created, before hooks run
(outermost group first, registration order within a group), then the body,
then after hooks (innermost group first). The instance, and with it the
memoized fixture values, is discarded afterwards.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from memofix.config import MemofixConfig, load_config
from memofix.core.example import Example
from memofix.core.group import Group
from memofix.core.models import ExampleDefinition, ExampleResult, GroupResult, Hook
from memofix.errors import ErrorContext, HookError
from memofix.observability import configure_logging

logger = logging.getLogger(__name__)


class ExampleRunner:
    """Runs the examples of a group tree.

    Before hooks stop at the first failure; the body is skipped in that
    case. After hooks always run, each one even if an earlier one failed.
    The first failure is the one reported.
    """

    def __init__(
        self,
        config: MemofixConfig | None = None,
        fail_fast: bool | None = None,
        trace_fixtures: bool | None = None,
    ) -> None:
        self.config = config or MemofixConfig()
        self.fail_fast = self.config.fail_fast if fail_fast is None else fail_fast
        self.trace_fixtures = (
            self.config.trace_fixtures if trace_fixtures is None else trace_fixtures
        )

    @classmethod
    def from_config(cls, config_path: str | Path | None = None) -> ExampleRunner:
        """Build a runner from a YAML file plus MEMOFIX_* environment variables."""
        config = load_config(config_path)
        configure_logging(config.log_level)
        return cls(config=config)

    def run(self, group: Group) -> GroupResult:
        """Run every example of ``group`` and of its nested groups."""
        logger.info(f"Running group: {group.full_description}")
        started_at = datetime.now()
        results: list[ExampleResult] = []
        aborted = False

        for current in group.walk():
            for definition in current.examples:
                result = self.run_example(current, definition)
                results.append(result)
                if not result.success and self.fail_fast:
                    logger.error(f"Fail fast triggered on example: {result.description}")
                    aborted = True
                    break
            if aborted:
                break

        finished_at = datetime.now()
        result = GroupResult(
            group_name=group.full_description,
            started_at=started_at,
            finished_at=finished_at,
            example_results=results,
            aborted=aborted,
            duration_ms=(finished_at - started_at).total_seconds() * 1000,
        )
        logger.info(
            f"Finished group {group.full_description}: "
            f"{result.passed} passed, {result.failed} failed"
        )
        return result

    def run_example(self, group: Group, definition: ExampleDefinition) -> ExampleResult:
        """Run one example on a fresh instance."""
        started_at = datetime.now()
        example = Example(group, definition.description, trace=self.trace_fixtures)
        description = example.full_description
        logger.debug(f"Running example: {description}")

        error: BaseException | None = None
        phase: str | None = None

        try:
            for hook in group.before_hooks():
                self._run_hook(hook, example)
            phase = "body"
            definition(example)
        except Exception as e:
            error = e
            phase = phase or "before"
        finally:
            # Also reached when a BaseException (KeyboardInterrupt, a test
            # framework's skip/fail outcome) propagates; it re-raises afterwards.
            after_error = self._run_after_hooks(group, example, failed=error is not None)

        if error is None and after_error is not None:
            error = after_error
            phase = "after"

        finished_at = datetime.now()
        fixtures = example.computed()

        if error is None:
            return ExampleResult(
                description=description,
                success=True,
                started_at=started_at,
                finished_at=finished_at,
                fixtures=fixtures,
                duration_ms=(finished_at - started_at).total_seconds() * 1000,
            )

        root = error.cause if isinstance(error, HookError) and error.cause is not None else error
        logger.warning(f"Example failed ({phase}): {description}: {error}")
        return ExampleResult(
            description=description,
            success=False,
            started_at=started_at,
            finished_at=finished_at,
            error=str(error) or type(error).__name__,
            error_type=type(root).__name__,
            phase=phase,
            fixtures=fixtures,
            duration_ms=(finished_at - started_at).total_seconds() * 1000,
        )

    def _run_after_hooks(self, group: Group, example: Example, failed: bool) -> BaseException | None:
        """Run every after hook; return the first failure, log the rest."""
        first_error: BaseException | None = None
        for hook in group.after_hooks():
            try:
                self._run_hook(hook, example)
            except Exception as e:
                if first_error is None and not failed:
                    first_error = e
                else:
                    logger.warning(f"After hook failed following an earlier failure: {e}")
        return first_error

    def _run_hook(self, hook: Hook, example: Example) -> None:
        try:
            hook(example)
        except Exception as e:
            raise HookError(
                message=f"{hook.kind.value} hook '{hook.name}' failed: {e}",
                context=ErrorContext(
                    group_name=hook.group,
                    example_name=example.description or None,
                    fixture_name=hook.fixture,
                ),
                cause=e,
            ) from e


__all__ = ["ExampleRunner"]
