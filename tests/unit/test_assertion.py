"""Tests for the assertion helper."""

import pytest

from slimrunner.assertion import Assert
from slimrunner.errors import AssertionCountMismatch


def test_assert_counts_assertions() -> None:
    """Every matcher increments the assertion count."""
    assert_ = Assert()

    assert_.ok(True)
    assert_.not_ok(0)
    assert_.equal(2, 2)
    assert_.not_equal(1, 2)
    assert_.raises(lambda: int("x"), ValueError)

    assert assert_.count == 5


def test_assert_equal_failure_raises_assertion_error() -> None:
    """A failing matcher raises AssertionError with a message."""
    assert_ = Assert()

    with pytest.raises(AssertionError, match="expected 1 to equal 2"):
        assert_.equal(1, 2)


def test_assert_raises_fails_when_nothing_raised() -> None:
    """raises fails when the callable does not raise."""
    assert_ = Assert()

    with pytest.raises(AssertionError, match="expected ValueError to be raised"):
        assert_.raises(lambda: None, ValueError)


def test_evaluate_without_plan_passes() -> None:
    """evaluate is a no-op when no plan was declared."""
    assert_ = Assert()
    assert_.ok(True)

    assert_.evaluate()


def test_evaluate_plan_met() -> None:
    """evaluate passes when the planned count was executed."""
    assert_ = Assert()
    assert_.plan(2)
    assert_.ok(True)
    assert_.ok(True)

    assert_.evaluate()


def test_evaluate_plan_mismatch() -> None:
    """evaluate raises AssertionCountMismatch when counts differ."""
    assert_ = Assert()
    assert_.plan(3)
    assert_.ok(True)

    with pytest.raises(AssertionCountMismatch) as exc_info:
        assert_.evaluate()

    assert exc_info.value.planned == 3
    assert exc_info.value.executed == 1
