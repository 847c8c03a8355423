"""Run groups in order and aggregate their outcome."""

import logging
import re
from collections.abc import Callable, Sequence
from typing import Any

from slimrunner.ci import is_ci
from slimrunner.emitter import Emitter
from slimrunner.errors import ConfigurationError, HardException
from slimrunner.group import Group
from slimrunner.models.events import EndEvent, StartEvent
from slimrunner.models.options import RunnerOptions
from slimrunner.models.results import Failure, GroupResult, RunResult

logger = logging.getLogger(__name__)

ReporterFn = Callable[[Emitter], Any]


def compile_grep(grep: str | re.Pattern[str] | None) -> re.Pattern[str] | None:
    """Normalize a raw pattern string or a compiled pattern."""
    if grep is None or isinstance(grep, re.Pattern):
        return grep
    return re.compile(grep)


class RunnerContext:
    """State of one run, threaded through group and test execution."""

    def __init__(self, options: RunnerOptions, emitter: Emitter) -> None:
        """Build the context, compiling the filter and detecting CI once."""
        self.options = options
        self.emitter = emitter
        self.grep = compile_grep(options.grep)
        self.in_ci = is_ci() if options.ci is None else options.ci
        self.has_errors = False
        self.errors: list[Failure] = []

    def record_failure(self, title: str, error: BaseException) -> None:
        """Record a failure, the run is failed from here on."""
        self.has_errors = True
        self.errors.append(Failure(title=title, error=error))


class Runner:
    """Orchestrates the sequential execution of groups."""

    def __init__(
        self,
        groups: Sequence[Group],
        options: RunnerOptions | None = None,
        emitter: Emitter | None = None,
    ) -> None:
        """Initialize runner with the groups to execute."""
        self.groups = list(groups)
        self.options = options or RunnerOptions()
        self.emitter = emitter or Emitter()
        self.context: RunnerContext | None = None
        self.hard_exception: HardException | None = None
        self._reporter_fn: ReporterFn | None = None

    @property
    def has_errors(self) -> bool:
        """Whether anything failed so far, never reset within a run."""
        if self.hard_exception is not None:
            return True
        return self.context is not None and self.context.has_errors

    @property
    def errors(self) -> list[Failure]:
        """Failures recorded so far, in the order they happened."""
        return [] if self.context is None else list(self.context.errors)

    def reporter(self, reporter_fn: ReporterFn) -> None:
        """Select the reporter attached to the emitter when the run starts."""
        if self.context is not None:
            raise ConfigurationError("Cannot change the reporter of a started run")
        self._reporter_fn = reporter_fn

    async def run(self) -> RunResult:
        """Run every group, publishing lifecycle events along the way.

        Returns:
            Aggregate result of the run

        Raises:
            ConfigurationError: If this runner already ran
            HardException: If orchestration itself failed, after the end
                event was published

        """
        if self.context is not None:
            raise ConfigurationError("A runner can only run once")
        if self._reporter_fn is not None:
            self._reporter_fn(self.emitter)

        ctx = RunnerContext(self.options, self.emitter)
        self.context = ctx
        results: list[GroupResult] = []
        current: Group | None = None

        logger.info(f"Starting run of {len(self.groups)} groups")
        try:
            self.emitter.emit(StartEvent())
            for group in self.groups:
                current = group
                result = await group.run(ctx)
                results.append(result)
                current = None
                if result.bailed:
                    logger.warning("Bail triggered, skipping remaining groups")
                    break
        except Exception as e:
            logger.exception("Test orchestration failed")
            self._record_hard_exception(ctx, e)
            if current is not None:
                await self._cleanup(current, ctx)

        status = "failed" if self.has_errors else "passed"
        try:
            self.emitter.emit(EndEvent(status=status, error=list(ctx.errors)))
        except Exception as e:
            if self.hard_exception is None:
                logger.exception("Publishing the end event failed")
                self._record_hard_exception(ctx, e)
                status = "failed"
            else:
                logger.error(f"Publishing the end event failed: {e}")

        logger.info(f"Run finished: {status} ({len(ctx.errors)} failures)")
        if self.hard_exception is not None:
            raise self.hard_exception
        return RunResult(status=status, errors=list(ctx.errors), groups=results)

    def _record_hard_exception(self, ctx: RunnerContext, error: Exception) -> None:
        hard = HardException(f"{type(error).__name__}: {error}")
        hard.__cause__ = error
        self.hard_exception = hard
        ctx.record_failure("hard exception", hard)

    async def _cleanup(self, group: Group, ctx: RunnerContext) -> None:
        """Finish a group interrupted by a hard exception.

        The after hook is attempted and ``group:end`` published, so reporters
        see every started group closed before ``end``.
        """
        try:
            await group.run_after(ctx)
            group.emit_end(ctx)
        except Exception:
            logger.exception(f"Cleanup of group {group.title!r} failed")
