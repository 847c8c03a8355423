"""Exceptions raised while declaring and running test suites."""

from typing import Literal

HookKind = Literal["before", "after", "before_each", "after_each"]


class SlimRunnerError(Exception):
    """Base class for every error raised by slimrunner."""


class ConfigurationError(SlimRunnerError):
    """The declaration or configuration API was misused."""


class HardException(SlimRunnerError):
    """Orchestration itself failed, outside of any user callback."""


class TestError(SlimRunnerError):
    """A failure captured at the boundary of a single test."""

    __test__ = False


class UserThrown(TestError):
    """A callback raised, or signalled completion with an error."""

    def __init__(self, original: object) -> None:
        """Wrap the value the callback failed with."""
        super().__init__(str(original))
        self.original = original


class TestTimeout(TestError):
    """A test body did not complete before its deadline."""

    __test__ = False

    def __init__(self, timeout: int) -> None:
        """Record the deadline that was exceeded, in milliseconds."""
        super().__init__(
            f"Test timeout, ensure done() is called or the coroutine returns "
            f"within {timeout}ms"
        )
        self.timeout = timeout


class AssertionCountMismatch(TestError):
    """The number of executed assertions differs from the planned count."""

    def __init__(self, planned: int, executed: int) -> None:
        """Record planned and executed assertion counts."""
        super().__init__(f"Planned for {planned} assertions, but ran {executed}")
        self.planned = planned
        self.executed = executed


class UnexpectedPass(TestError):
    """A regression test completed without failing."""

    def __init__(self) -> None:
        """Create the error with its fixed message."""
        super().__init__("Test was expected to fail but passed")


class HookError(SlimRunnerError):
    """A lifecycle hook failed."""

    def __init__(self, kind: HookKind, original: object) -> None:
        """Wrap the value the hook failed with."""
        super().__init__(f"{kind} hook failed: {original}")
        self.kind = kind
        self.original = original


class HookTimeout(HookError):
    """A lifecycle hook did not complete before its deadline."""

    def __init__(self, kind: HookKind, timeout: int) -> None:
        """Record the hook kind and the deadline, in milliseconds."""
        super().__init__(kind, f"hook timeout after {timeout}ms")
        self.timeout = timeout
