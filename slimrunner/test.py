"""A single test case and its execution."""

import asyncio
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from slimrunner.assertion import Assert
from slimrunner.errors import (
    ConfigurationError,
    HookError,
    TestError,
    TestTimeout,
    UnexpectedPass,
    UserThrown,
)
from slimrunner.hook import Hook
from slimrunner.invoke import invoke
from slimrunner.models.events import TestEndEvent
from slimrunner.models.results import TestResult, TestStatus

if TYPE_CHECKING:
    from slimrunner.runner import RunnerContext

logger = logging.getLogger(__name__)


class Test:
    """One test case: a callback, its flags and, once run, its outcome."""

    __test__ = False

    def __init__(
        self,
        title: str,
        callback: Callable[..., Any] | None,
        *,
        skip: bool = False,
        skip_in_ci: bool = False,
        run_in_ci: bool = False,
        regression: bool = False,
        timeout: int | None = None,
    ) -> None:
        """Declare a test, a missing callback marks it as todo."""
        self.title = title
        self.callback = callback
        self.skip = skip
        self.skip_in_ci = skip_in_ci
        self.run_in_ci = run_in_ci
        self.regression = regression
        self._timeout = timeout

        self.status: TestStatus = "pending"
        self.duration = 0.0
        self.error: BaseException | None = None
        self.regression_message: str | None = None
        self.assertion: Assert | None = None

    def timeout(self, timeout: int) -> "Test":
        """Override the group timeout for this test, in milliseconds."""
        if self.status != "pending":
            raise ConfigurationError(
                f"Cannot change timeout of finished test {self.title!r}"
            )
        self._timeout = timeout
        return self

    def resolve_timeout(self, default: int) -> int:
        """Timeout applied to this test when the group default is ``default``."""
        return default if self._timeout is None else self._timeout

    def should_skip(self, ctx: "RunnerContext") -> bool:
        """Whether flags, the CI environment or the filter skip this test."""
        if self.skip:
            return True
        if self.skip_in_ci and ctx.in_ci:
            return True
        if self.run_in_ci and not ctx.in_ci:
            return True
        return ctx.grep is not None and ctx.grep.search(self.title) is None

    def to_result(self) -> TestResult:
        """Snapshot the current state as a result model."""
        return TestResult(
            title=self.title,
            status=self.status,
            duration=self.duration,
            error=self.error,
            regression=self.regression,
            regression_message=self.regression_message,
        )

    async def run(
        self,
        ctx: "RunnerContext",
        timeout: int,
        before_each: Hook | None = None,
        after_each: Hook | None = None,
    ) -> TestResult:
        """Execute the test once and publish its ``test:end`` event.

        Args:
            ctx: Context of the run in progress
            timeout: Group timeout, used unless the test overrides it
            before_each: Hook run before the body
            after_each: Hook run after the body, whatever its outcome

        Returns:
            The final result of the test

        """
        if self.status != "pending":
            raise ConfigurationError(f"Test {self.title!r} has already run")

        loop = asyncio.get_running_loop()
        started = loop.time()

        if self.callback is None:
            self.status = "todo"
        elif self.should_skip(ctx):
            await self._run_skipped(ctx, timeout, before_each, after_each)
        else:
            await self._run_body(self.callback, timeout, before_each, after_each)

        self.duration = (loop.time() - started) * 1000
        logger.debug(f"Test {self.title!r} {self.status} in {self.duration:.1f}ms")

        result = self.to_result()
        if result.status == "failed" and self.error is not None:
            ctx.record_failure(self.title, self.error)
        ctx.emitter.emit(TestEndEvent(**dict(result)))
        return result

    def force_skip(self, ctx: "RunnerContext") -> TestResult:
        """Report the test as skipped without running anything."""
        self.status = "skipped"
        result = self.to_result()
        ctx.emitter.emit(TestEndEvent(**dict(result)))
        return result

    async def _run_skipped(
        self,
        ctx: "RunnerContext",
        timeout: int,
        before_each: Hook | None,
        after_each: Hook | None,
    ) -> None:
        self.status = "skipped"
        if not ctx.options.run_hooks_for_skipped:
            return
        for hook in (before_each, after_each):
            if hook is None:
                continue
            try:
                await hook.execute(timeout)
            except HookError as e:
                self._fail(e)

    async def _run_body(
        self,
        callback: Callable[..., Any],
        timeout: int,
        before_each: Hook | None,
        after_each: Hook | None,
    ) -> None:
        hook_failed = False
        if before_each is not None:
            try:
                await before_each.execute(timeout)
            except HookError as e:
                self._fail(e)
                hook_failed = True

        if not hook_failed:
            error = await self._execute_callback(callback, timeout)
            self._interpret(error)

        if after_each is not None:
            try:
                await after_each.execute(timeout)
            except HookError as e:
                self._fail(e)

    async def _execute_callback(
        self, callback: Callable[..., Any], group_timeout: int
    ) -> TestError | None:
        """Run the body and return the error it failed with, if any."""
        timeout = self.resolve_timeout(group_timeout)
        self.assertion = Assert()
        try:
            await invoke(
                callback,
                (self.assertion,),
                timeout,
                lambda: TestTimeout(timeout),
            )
            self.assertion.evaluate()
        except TestError as e:
            return e
        except Exception as e:
            return UserThrown(e)
        return None

    def _interpret(self, error: TestError | None) -> None:
        if not self.regression:
            if error is None:
                self.status = "passed"
            else:
                self._fail(error)
            return

        if error is None:
            self._fail(UnexpectedPass())
        else:
            self.status = "passed"
            self.regression_message = str(error)

    def _fail(self, error: BaseException) -> None:
        # A later failure never replaces the first recorded cause.
        self.status = "failed"
        if self.error is None:
            self.error = error
