"""Groups of tests sharing lifecycle hooks and configuration."""

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from slimrunner.errors import ConfigurationError, HookError, HookKind
from slimrunner.hook import Hook
from slimrunner.models.events import GroupEndEvent, GroupStartEvent
from slimrunner.models.options import RunnerOptions
from slimrunner.models.results import GroupResult, TestResult
from slimrunner.test import Test

if TYPE_CHECKING:
    from slimrunner.runner import RunnerContext

logger = logging.getLogger(__name__)


class Group:
    """Ordered tests plus before/after/before_each/after_each hook slots.

    ``options`` is copied when the group is created, later changes to the
    global configuration do not reach an existing group. A group with an
    empty title is the implicit root group and publishes no group events.
    """

    def __init__(self, title: str, options: RunnerOptions) -> None:
        """Initialize group with a snapshot of ``options``."""
        self.title = title
        self.options = options.model_copy()
        self.tests: list[Test] = []
        self.hooks: dict[HookKind, Hook] = {}
        self._started = False
        self._after_attempted = False
        self._end_emitted = False

    @property
    def is_root(self) -> bool:
        """Whether this is the implicit group for tests declared at top level."""
        return self.title == ""

    def _ensure_open(self, what: str) -> None:
        if self._started:
            raise ConfigurationError(
                f"Cannot {what} on group {self.title!r} after it started running"
            )

    def _set_hook(self, kind: HookKind, callback: Callable[..., Any]) -> None:
        self._ensure_open(f"set the {kind} hook")
        if kind in self.hooks:
            logger.debug(f"Replacing {kind} hook of group {self.title!r}")
        self.hooks[kind] = Hook(kind, callback, self.title)

    def before(self, callback: Callable[..., Any]) -> None:
        """Run ``callback`` once before the first test of the group."""
        self._set_hook("before", callback)

    def after(self, callback: Callable[..., Any]) -> None:
        """Run ``callback`` once after the last test of the group."""
        self._set_hook("after", callback)

    def before_each(self, callback: Callable[..., Any]) -> None:
        """Run ``callback`` before every test of the group."""
        self._set_hook("before_each", callback)

    def after_each(self, callback: Callable[..., Any]) -> None:
        """Run ``callback`` after every test of the group."""
        self._set_hook("after_each", callback)

    def timeout(self, timeout: int) -> None:
        """Set the default timeout of tests and hooks in this group."""
        self._ensure_open("change the timeout")
        self.options.timeout = timeout

    def test(
        self,
        title: str,
        callback: Callable[..., Any] | None = None,
        **flags: Any,
    ) -> Test:
        """Declare a test in this group and return it."""
        self._ensure_open("declare tests")
        test = Test(title, callback, **flags)
        self.tests.append(test)
        return test

    def skip(self, title: str, callback: Callable[..., Any] | None = None) -> Test:
        """Declare a test that never runs, its each-hooks still do."""
        return self.test(title, callback, skip=True)

    def skip_in_ci(
        self, title: str, callback: Callable[..., Any] | None = None
    ) -> Test:
        """Declare a test that is skipped when running in CI."""
        return self.test(title, callback, skip_in_ci=True)

    def run_in_ci(
        self, title: str, callback: Callable[..., Any] | None = None
    ) -> Test:
        """Declare a test that only runs in CI."""
        return self.test(title, callback, run_in_ci=True)

    def failing(self, title: str, callback: Callable[..., Any] | None = None) -> Test:
        """Declare a regression test, expected to fail."""
        return self.test(title, callback, regression=True)

    def todo(self, title: str) -> Test:
        """Declare a test that is yet to be written."""
        return self.test(title, None)

    async def run(self, ctx: "RunnerContext") -> GroupResult:
        """Run hooks and tests of the group in declaration order."""
        self._started = True
        result = GroupResult(title=self.title)
        if not self.is_root:
            logger.info(f"Running group {self.title!r} ({len(self.tests)} tests)")
            ctx.emitter.emit(GroupStartEvent(title=self.title))

        result.error = await self._run_group_hook("before", ctx)
        if result.error is not None:
            logger.warning(
                f"before hook of group {self.title!r} failed, skipping its tests"
            )
            result.tests = [test.force_skip(ctx) for test in self.tests]
        else:
            result.tests, result.bailed = await self._run_tests(ctx)

        after_error = await self.run_after(ctx)
        if result.error is None:
            result.error = after_error

        self.emit_end(ctx)
        return result

    async def run_after(self, ctx: "RunnerContext") -> HookError | None:
        """Run the after hook, at most once per group."""
        if self._after_attempted:
            return None
        self._after_attempted = True
        return await self._run_group_hook("after", ctx)

    def emit_end(self, ctx: "RunnerContext") -> None:
        """Publish group:end, at most once per group."""
        if self.is_root or self._end_emitted:
            return
        self._end_emitted = True
        ctx.emitter.emit(GroupEndEvent(title=self.title))

    async def _run_tests(self, ctx: "RunnerContext") -> tuple[list[TestResult], bool]:
        results: list[TestResult] = []
        for test in self.tests:
            result = await test.run(
                ctx,
                self.options.timeout,
                self.hooks.get("before_each"),
                self.hooks.get("after_each"),
            )
            results.append(result)
            if self.options.bail and result.status == "failed":
                logger.warning(f"Bailing out after failing test {test.title!r}")
                return results, True
        return results, False

    async def _run_group_hook(
        self, kind: HookKind, ctx: "RunnerContext"
    ) -> HookError | None:
        hook = self.hooks.get(kind)
        if hook is None:
            return None
        try:
            await hook.execute(self.options.timeout)
        except HookError as e:
            ctx.record_failure(self.title or "root", e)
            return e
        return None
