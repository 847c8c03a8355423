"""Tests for single test execution."""

import asyncio
import re
from collections.abc import Callable

import pytest
from pydantic import BaseModel

from slimrunner.assertion import Assert
from slimrunner.emitter import Emitter
from slimrunner.errors import (
    AssertionCountMismatch,
    ConfigurationError,
    HookError,
    TestTimeout,
    UnexpectedPass,
    UserThrown,
)
from slimrunner.hook import Hook
from slimrunner.models.events import TestEndEvent
from slimrunner.models.options import RunnerOptions
from slimrunner.runner import RunnerContext
from slimrunner.test import Test


def _failing_hook(kind: str = "before_each") -> Hook:
    def callback() -> None:
        raise RuntimeError(f"{kind} broke")

    return Hook(kind, callback, "group")  # type: ignore[arg-type]


def _recording_hook(kind: str, calls: list[str]) -> Hook:
    return Hook(kind, lambda: calls.append(kind), "group")  # type: ignore[arg-type]


async def test_run_passing_test(ctx: RunnerContext, events: list[BaseModel]) -> None:
    """A body that returns cleanly passes and emits one test:end."""
    test = Test("adds two numbers", lambda assert_: assert_.equal(1 + 1, 2))

    result = await test.run(ctx, 2000)

    assert result.status == "passed"
    assert result.error is None
    assert test.status == "passed"
    assert len(events) == 1
    assert isinstance(events[0], TestEndEvent)
    assert events[0].title == "adds two numbers"
    assert events[0].status == "passed"
    assert ctx.has_errors is False


async def test_run_async_body(ctx: RunnerContext) -> None:
    """A coroutine body passes once it returns."""

    async def body(assert_: Assert) -> None:
        await asyncio.sleep(0.01)
        assert_.ok(True)

    result = await Test("async", body).run(ctx, 2000)

    assert result.status == "passed"


async def test_run_failing_test(ctx: RunnerContext) -> None:
    """A raising body fails with UserThrown carrying the original error."""

    def body() -> None:
        raise ValueError("wrong")

    result = await Test("breaks", body).run(ctx, 2000)

    assert result.status == "failed"
    assert isinstance(result.error, UserThrown)
    assert isinstance(result.error.original, ValueError)
    assert ctx.has_errors is True
    assert [f.title for f in ctx.errors] == ["breaks"]


async def test_run_failed_assertion(ctx: RunnerContext) -> None:
    """A failed assertion fails the test."""
    result = await Test("compare", lambda assert_: assert_.equal(1, 2)).run(
        ctx, 2000
    )

    assert result.status == "failed"
    assert isinstance(result.error, UserThrown)
    assert isinstance(result.error.original, AssertionError)


async def test_run_assertion_plan_mismatch(ctx: RunnerContext) -> None:
    """Executing fewer assertions than planned fails the test."""

    def body(assert_: Assert) -> None:
        assert_.plan(2)
        assert_.equal(1, 1)

    result = await Test("planned", body).run(ctx, 2000)

    assert result.status == "failed"
    assert isinstance(result.error, AssertionCountMismatch)


async def test_run_assertion_plan_met(ctx: RunnerContext) -> None:
    """Executing exactly the planned assertions passes."""

    def body(assert_: Assert) -> None:
        assert_.plan(2)
        assert_.ok(True)
        assert_.ok(True)

    result = await Test("planned", body).run(ctx, 2000)

    assert result.status == "passed"


async def test_run_regression_that_fails_passes(ctx: RunnerContext) -> None:
    """A regression test passes when its body fails."""

    def body() -> None:
        raise RuntimeError("known bug")

    result = await Test("known", body, regression=True).run(ctx, 2000)

    assert result.status == "passed"
    assert result.error is None
    assert result.regression is True
    assert result.regression_message == "known bug"
    assert ctx.has_errors is False


async def test_run_regression_that_passes_fails(ctx: RunnerContext) -> None:
    """A regression test fails when its body completes cleanly."""
    result = await Test("fixed", lambda: None, regression=True).run(ctx, 2000)

    assert result.status == "failed"
    assert isinstance(result.error, UnexpectedPass)
    assert ctx.has_errors is True


async def test_run_regression_timeout_passes(ctx: RunnerContext) -> None:
    """A regression test that times out counts as the expected failure."""
    test = Test("hangs", lambda assert_, done: None, regression=True).timeout(20)

    result = await test.run(ctx, 2000)

    assert result.status == "passed"
    assert result.regression_message is not None


async def test_run_timeout(ctx: RunnerContext, events: list[BaseModel]) -> None:
    """A body never calling done times out and late signals are ignored."""
    loop = asyncio.get_running_loop()

    def body(assert_: Assert, done: Callable[..., None]) -> None:
        loop.call_later(0.2, done)

    test = Test("slow", body).timeout(50)

    result = await test.run(ctx, 2000)
    await asyncio.sleep(0.25)

    assert result.status == "failed"
    assert isinstance(result.error, TestTimeout)
    assert result.duration >= 50
    assert test.status == "failed"
    assert test.error is result.error
    assert len(events) == 1


def test_run_uses_group_timeout_by_default() -> None:
    """Without an override the timeout passed by the group applies."""
    test = Test("t", None)
    assert test.resolve_timeout(300) == 300
    test.timeout(10)
    assert test.resolve_timeout(300) == 10


async def test_run_skipped_runs_each_hooks(ctx: RunnerContext) -> None:
    """A skipped test does not run its body but runs each-hooks."""
    calls: list[str] = []
    test = Test("skipped", lambda: calls.append("body"), skip=True)

    result = await test.run(
        ctx,
        2000,
        _recording_hook("before_each", calls),
        _recording_hook("after_each", calls),
    )

    assert result.status == "skipped"
    assert calls == ["before_each", "after_each"]


async def test_run_skipped_without_hooks_policy(emitter: Emitter) -> None:
    """run_hooks_for_skipped=False skips each-hooks as well."""
    ctx = RunnerContext(RunnerOptions(ci=False, run_hooks_for_skipped=False), emitter)
    calls: list[str] = []

    result = await Test("skipped", lambda: None, skip=True).run(
        ctx,
        2000,
        _recording_hook("before_each", calls),
        _recording_hook("after_each", calls),
    )

    assert result.status == "skipped"
    assert calls == []


@pytest.mark.parametrize(
    ("flags", "in_ci", "expected"),
    [
        ({"skip_in_ci": True}, True, "skipped"),
        ({"skip_in_ci": True}, False, "passed"),
        ({"run_in_ci": True}, True, "passed"),
        ({"run_in_ci": True}, False, "skipped"),
    ],
)
async def test_run_ci_conditional_skip(
    emitter: Emitter, flags: dict[str, bool], in_ci: bool, expected: str
) -> None:
    """skip_in_ci and run_in_ci depend on the CI environment."""
    ctx = RunnerContext(RunnerOptions(ci=in_ci), emitter)

    result = await Test("ci", lambda: None, **flags).run(ctx, 2000)

    assert result.status == expected


async def test_run_grep_filter(emitter: Emitter, events: list[BaseModel]) -> None:
    """Titles not matching the filter are reported as skipped."""
    ctx = RunnerContext(RunnerOptions(ci=False, grep=re.compile("adds")), emitter)
    calls: list[str] = []

    adds = await Test("adds two numbers", lambda: calls.append("adds")).run(ctx, 2000)
    subtracts = await Test(
        "subtracts two numbers", lambda: calls.append("subtracts")
    ).run(ctx, 2000)

    assert adds.status == "passed"
    assert subtracts.status == "skipped"
    assert calls == ["adds"]
    assert [e.status for e in events if isinstance(e, TestEndEvent)] == [
        "passed",
        "skipped",
    ]


async def test_run_todo(ctx: RunnerContext, events: list[BaseModel]) -> None:
    """A test without callback is reported as todo and is not a failure."""
    calls: list[str] = []

    result = await Test("later", None).run(
        ctx, 2000, _recording_hook("before_each", calls)
    )

    assert result.status == "todo"
    assert calls == []
    assert ctx.has_errors is False
    assert len(events) == 1


async def test_run_before_each_failure(ctx: RunnerContext) -> None:
    """A failing before_each fails the test, skips the body, runs after_each."""
    calls: list[str] = []

    result = await Test("guarded", lambda: calls.append("body")).run(
        ctx, 2000, _failing_hook("before_each"), _recording_hook("after_each", calls)
    )

    assert result.status == "failed"
    assert isinstance(result.error, HookError)
    assert result.error.kind == "before_each"
    assert calls == ["after_each"]


async def test_run_after_each_failure_overrides_pass(ctx: RunnerContext) -> None:
    """A failing after_each turns a passed test into a failed one."""
    result = await Test("cleanup", lambda: None).run(
        ctx, 2000, None, _failing_hook("after_each")
    )

    assert result.status == "failed"
    assert isinstance(result.error, HookError)
    assert result.error.kind == "after_each"


async def test_run_after_each_failure_keeps_first_error(ctx: RunnerContext) -> None:
    """A failing after_each does not replace the body's error."""

    def body() -> None:
        raise ValueError("first")

    result = await Test("cleanup", body).run(
        ctx, 2000, None, _failing_hook("after_each")
    )

    assert result.status == "failed"
    assert isinstance(result.error, UserThrown)
    assert str(result.error) == "first"


async def test_run_twice_is_rejected(ctx: RunnerContext) -> None:
    """A test never runs twice."""
    test = Test("once", lambda: None)
    await test.run(ctx, 2000)

    with pytest.raises(ConfigurationError, match="already run"):
        await test.run(ctx, 2000)


def test_timeout_after_run_is_rejected() -> None:
    """Changing the timeout of a finished test is an error."""
    test = Test("once", lambda: None)
    test.status = "passed"

    with pytest.raises(ConfigurationError):
        test.timeout(10)


async def test_force_skip(ctx: RunnerContext, events: list[BaseModel]) -> None:
    """force_skip reports the test without running it."""
    calls: list[str] = []
    test = Test("never", lambda: calls.append("body"))

    result = test.force_skip(ctx)

    assert result.status == "skipped"
    assert calls == []
    assert isinstance(events[0], TestEndEvent)


async def test_run_var_positional_body_passes(ctx: RunnerContext) -> None:
    """A body taking only *args completes when it returns."""
    test = Test("varargs", lambda *args: None)

    result = await test.run(ctx, 100)

    assert result.status == "passed"
    assert result.error is None
