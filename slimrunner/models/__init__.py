"""Data models for options, results and lifecycle events."""

from slimrunner.models.events import (
    EndEvent,
    Event,
    GroupEndEvent,
    GroupStartEvent,
    StartEvent,
    TestEndEvent,
)
from slimrunner.models.options import ConfigureOptions, FileConfig, RunnerOptions
from slimrunner.models.results import (
    Failure,
    GroupResult,
    RunResult,
    RunStatus,
    TestResult,
    TestStatus,
)

__all__ = [
    "ConfigureOptions",
    "EndEvent",
    "Event",
    "Failure",
    "FileConfig",
    "GroupEndEvent",
    "GroupResult",
    "GroupStartEvent",
    "RunResult",
    "RunStatus",
    "RunnerOptions",
    "StartEvent",
    "TestEndEvent",
    "TestResult",
    "TestStatus",
]
