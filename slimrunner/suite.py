"""Declaration API: configure, declare tests and groups, then run them."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from slimrunner.emitter import Emitter
from slimrunner.errors import ConfigurationError, HardException
from slimrunner.group import Group
from slimrunner.loader import Loader
from slimrunner.models.options import ConfigureOptions, RunnerOptions
from slimrunner.reporters.list import ListReporter
from slimrunner.runner import ReporterFn, Runner
from slimrunner.test import Test

logger = logging.getLogger(__name__)

SuiteHook = Callable[[Runner, Emitter], Awaitable[None]]


class Suite:
    """Collects groups at declaration time and runs them once.

    Tests declared outside of any group go to an implicit root group. A
    new root group is started whenever top level tests follow a group, so
    declaration order is execution order. While a group callback runs,
    suite level declarations go to that group.
    """

    def __init__(self, loader: Loader | None = None) -> None:
        """Initialize an empty suite with default configuration."""
        self.loader = loader or Loader()
        self.options = RunnerOptions()
        self.reporter_fn: ReporterFn = ListReporter
        self.before_hooks: list[SuiteHook] = []
        self.after_hooks: list[SuiteHook] = []
        self.groups: list[Group] = []
        self._root: Group | None = None
        self._active: Group | None = None

    def configure(self, **kwargs: Any) -> None:
        """Configure the runner, before any test or group is declared.

        Accepts the fields of ``ConfigureOptions``.

        Raises:
            ConfigurationError: If a group already exists
            pydantic.ValidationError: If an option has an invalid value

        """
        if self.groups:
            raise ConfigurationError(
                "configure must be called before creating any tests"
            )

        config = ConfigureOptions(**kwargs)
        self.options = config.apply(self.options)

        if config.reporter_fn is not None:
            self.reporter_fn = config.reporter_fn
        if config.files is not None:
            self.loader.files(config.files)
        if config.filter is not None:
            self.loader.filter(config.filter)
        if config.before is not None:
            self.before_hooks = list(config.before)
        if config.after is not None:
            self.after_hooks = list(config.after)

    def _root_group(self) -> Group:
        if self._active is not None:
            return self._active
        if self._root is None:
            self._root = Group("", self.options)
            self.groups.append(self._root)
        return self._root

    def test(
        self,
        title: str,
        callback: Callable[..., Any] | None = None,
        *,
        timeout: int | None = None,
    ) -> Test:
        """Declare a test in the group being declared, or at top level."""
        return self._root_group().test(title, callback, timeout=timeout)

    def skip(self, title: str, callback: Callable[..., Any] | None = None) -> Test:
        """Declare a skipped test, its each-hooks still run."""
        return self._root_group().skip(title, callback)

    def skip_in_ci(
        self, title: str, callback: Callable[..., Any] | None = None
    ) -> Test:
        """Declare a test skipped when running in CI."""
        return self._root_group().skip_in_ci(title, callback)

    def run_in_ci(
        self, title: str, callback: Callable[..., Any] | None = None
    ) -> Test:
        """Declare a test that only runs in CI."""
        return self._root_group().run_in_ci(title, callback)

    def failing(self, title: str, callback: Callable[..., Any] | None = None) -> Test:
        """Declare a regression test."""
        return self._root_group().failing(title, callback)

    def todo(self, title: str) -> Test:
        """Declare a test that is yet to be written."""
        return self._root_group().todo(title)

    def group(self, title: str, callback: Callable[[Group], None]) -> Group:
        """Declare a group and populate it through ``callback``.

        The callback runs immediately and receives the new group, on which
        it declares hooks and tests. Tests declared on the suite while the
        callback runs are added to the group as well.
        """
        if not title:
            raise ConfigurationError("Group title cannot be empty")
        group = Group(title, self.options)
        self.groups.append(group)
        self._root = None
        outer, self._active = self._active, group
        try:
            callback(group)
        finally:
            self._active = outer
        return group

    def reset(self) -> None:
        """Forget every declared group, keeping the configuration."""
        self.groups = []
        self._root = None

    async def run(self) -> int:
        """Load test files, run every group and return the exit code.

        Returns:
            0 if nothing failed, 1 otherwise

        Raises:
            ConfigurationError: If test files are loaded while tests were
                also declared directly

        """
        runner = Runner([], self.options)
        runner.reporter(self.reporter_fn)

        for hook in self.before_hooks:
            await hook(runner, runner.emitter)

        files = self.loader.find_files() if self.loader.patterns else []
        if files and self.groups:
            raise ConfigurationError(
                "Declaring tests in the configuring module is not allowed "
                "when test files are loaded, move them to a test file"
            )
        self.loader.load(files)
        runner.groups = list(self.groups)

        hard_exception: HardException | None = None
        try:
            try:
                await runner.run()
            except HardException as e:
                hard_exception = e

            for hook in self.after_hooks:
                await hook(runner, runner.emitter)
        finally:
            self.reset()

        if runner.has_errors or hard_exception is not None:
            return 1
        return 0


default_suite = Suite()
