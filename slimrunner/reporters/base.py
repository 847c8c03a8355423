"""Abstract base class for reporters."""

import traceback
from abc import ABC, abstractmethod

from slimrunner.emitter import Emitter
from slimrunner.errors import HookError, UserThrown
from slimrunner.models.events import (
    EndEvent,
    GroupEndEvent,
    GroupStartEvent,
    StartEvent,
    TestEndEvent,
)

STATUSES = ("passed", "failed", "skipped", "todo")


def format_error(error: BaseException) -> str:
    """Render the traceback of the value a callback failed with."""
    original: object = error
    if isinstance(error, (UserThrown, HookError)):
        original = error.original
    if isinstance(original, BaseException):
        return "".join(traceback.format_exception(original)).rstrip()
    return str(original)


class Reporter(ABC):
    """Subscribes to lifecycle events of a run and renders them.

    Reporters only observe, they have no way to influence execution.
    """

    def __init__(self, emitter: Emitter) -> None:
        """Subscribe the ``on_*`` methods to ``emitter``."""
        emitter.on(StartEvent, self.on_start)
        emitter.on(GroupStartEvent, self.on_group_start)
        emitter.on(TestEndEvent, self.on_test_end)
        emitter.on(GroupEndEvent, self.on_group_end)
        emitter.on(EndEvent, self.on_end)

    def on_start(self, event: StartEvent) -> None:
        """Handle the start of the run."""

    def on_group_start(self, event: GroupStartEvent) -> None:
        """Handle the start of a group."""

    def on_group_end(self, event: GroupEndEvent) -> None:
        """Handle the end of a group."""

    @abstractmethod
    def on_test_end(self, event: TestEndEvent) -> None:
        """Handle a finished test.

        Args:
            event: Final status, duration and error of the test

        """

    @abstractmethod
    def on_end(self, event: EndEvent) -> None:
        """Handle the end of the run.

        Args:
            event: Aggregate status and every recorded failure

        """
