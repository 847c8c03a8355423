"""Assertion helper handed to every test body."""

from collections.abc import Callable
from typing import Any

from slimrunner.errors import AssertionCountMismatch


class Assert:
    """Counts executed assertions and checks them against a declared plan."""

    def __init__(self) -> None:
        """Create a helper with no plan and no executed assertions."""
        self.planned: int | None = None
        self.count = 0

    def plan(self, count: int) -> None:
        """Declare how many assertions the test body must execute."""
        self.planned = count

    def evaluate(self) -> None:
        """Raise when a plan was declared and was not met."""
        if self.planned is not None and self.planned != self.count:
            raise AssertionCountMismatch(self.planned, self.count)

    def _check(self, condition: bool, message: str) -> None:
        self.count += 1
        if not condition:
            raise AssertionError(message)

    def ok(self, value: Any, message: str | None = None) -> None:
        """Assert that ``value`` is truthy."""
        self._check(bool(value), message or f"expected {value!r} to be truthy")

    def not_ok(self, value: Any, message: str | None = None) -> None:
        """Assert that ``value`` is falsy."""
        self._check(not value, message or f"expected {value!r} to be falsy")

    def equal(self, actual: Any, expected: Any, message: str | None = None) -> None:
        """Assert that ``actual == expected``."""
        self._check(
            actual == expected, message or f"expected {actual!r} to equal {expected!r}"
        )

    def not_equal(
        self, actual: Any, expected: Any, message: str | None = None
    ) -> None:
        """Assert that ``actual != expected``."""
        self._check(
            actual != expected,
            message or f"expected {actual!r} to not equal {expected!r}",
        )

    def raises(
        self,
        fn: Callable[[], Any],
        expected: type[BaseException] = Exception,
        message: str | None = None,
    ) -> None:
        """Assert that calling ``fn`` raises ``expected``."""
        try:
            fn()
        except expected:
            self._check(True, "")
            return
        self._check(False, message or f"expected {expected.__name__} to be raised")
