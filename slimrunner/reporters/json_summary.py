"""JSON reporter printing a machine readable summary."""

import json
from typing import Any

import typer

from slimrunner.emitter import Emitter
from slimrunner.models.events import (
    EndEvent,
    GroupEndEvent,
    GroupStartEvent,
    TestEndEvent,
)
from slimrunner.reporters.base import Reporter


class JsonReporter(Reporter):
    """Collects results and prints them as one JSON document at the end."""

    def __init__(self, emitter: Emitter) -> None:
        """Initialize reporter and subscribe to ``emitter``."""
        super().__init__(emitter)
        self.group: str | None = None
        self.results: list[dict[str, Any]] = []

    def on_group_start(self, event: GroupStartEvent) -> None:
        """Remember the group of the following tests."""
        self.group = event.title

    def on_group_end(self, event: GroupEndEvent) -> None:
        """Tests that follow belong to no group."""
        self.group = None

    def on_test_end(self, event: TestEndEvent) -> None:
        """Record the test."""
        self.results.append(
            {
                "group": self.group,
                "title": event.title,
                "status": event.status,
                "duration": event.duration,
                "regression": event.regression,
                "regression_message": event.regression_message,
                "error": None if event.error is None else str(event.error),
            }
        )

    def on_end(self, event: EndEvent) -> None:
        """Print the summary."""
        output = {
            "status": event.status,
            "total": len(self.results),
            "passed": sum(1 for r in self.results if r["status"] == "passed"),
            "failed": sum(1 for r in self.results if r["status"] == "failed"),
            "skipped": sum(1 for r in self.results if r["status"] == "skipped"),
            "todo": sum(1 for r in self.results if r["status"] == "todo"),
            "errors": [
                {"title": failure.title, "message": str(failure.error)}
                for failure in event.error
            ],
            "results": self.results,
        }
        typer.echo(json.dumps(output, indent=2))
