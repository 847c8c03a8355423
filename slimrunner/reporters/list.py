"""Console reporter listing every test as it finishes."""

import time

import typer

from slimrunner.emitter import Emitter
from slimrunner.models.events import (
    EndEvent,
    GroupEndEvent,
    GroupStartEvent,
    StartEvent,
    TestEndEvent,
)
from slimrunner.models.results import Failure
from slimrunner.reporters.base import STATUSES, Reporter, format_error

COLORS = {
    "passed": typer.colors.GREEN,
    "failed": typer.colors.RED,
    "skipped": typer.colors.YELLOW,
    "todo": typer.colors.CYAN,
}

ICONS = {
    "passed": "✓",
    "failed": "✖",
    "skipped": ".",
    "todo": "!",
}


def format_duration(duration: float) -> str:
    """Format milliseconds the way humans read them."""
    if duration < 1000:
        return f"{duration:.0f}ms"
    if duration < 60_000:
        return f"{duration / 1000:.1f}s"
    return f"{duration / 60_000:.1f}m"


class ListReporter(Reporter):
    """Prints one line per test, then failures and a summary."""

    def __init__(self, emitter: Emitter) -> None:
        """Initialize counters and subscribe to ``emitter``."""
        super().__init__(emitter)
        self.active_group: str | None = None
        self.started: float | None = None
        self.stats = {
            "total": 0,
            "passed": 0,
            "failed": 0,
            "skipped": 0,
            "regression": 0,
            "todo": 0,
        }

    def log(self, line: str = "") -> None:
        """Print a line indented by two spaces."""
        typer.echo(f"  {line}" if line else "")

    def on_start(self, event: StartEvent) -> None:
        """Remember when the run started."""
        self.started = time.monotonic()

    def on_group_start(self, event: GroupStartEvent) -> None:
        """Print the group title."""
        self.active_group = event.title
        self.log()
        self.log(typer.style(event.title, bold=True))

    def on_group_end(self, event: GroupEndEvent) -> None:
        """Leave the group."""
        self.active_group = None

    def on_test_end(self, event: TestEndEvent) -> None:
        """Print the status line of a test."""
        if event.status not in STATUSES:
            return

        self.stats[event.status] += 1
        self.stats["total"] += 1
        if event.regression:
            self.stats["regression"] += 1

        pad = "  " if self.active_group else ""
        icon = typer.style(ICONS[event.status], fg=COLORS[event.status])
        color = (
            typer.colors.BRIGHT_BLACK
            if event.status == "passed"
            else COLORS[event.status]
        )
        title = typer.style(event.title, fg=color)
        duration = typer.style(
            f"({format_duration(event.duration)})", fg=typer.colors.BRIGHT_BLACK
        )
        self.log(f"{pad}{icon} {title} {duration}")

        if event.regression_message:
            message = typer.style(
                f"MESSAGE: {event.regression_message}", fg=typer.colors.MAGENTA
            )
            self.log(f"{pad}{pad}{message}")

    def print_failure(self, failure: Failure, index: int) -> None:
        """Print a numbered failure with its traceback."""
        self.log(typer.style(f"{index}. {failure.title}", fg=typer.colors.RED))
        for line in format_error(failure.error).splitlines():
            self.log(typer.style(line, fg=typer.colors.RED))
        self.log()

    def on_end(self, event: EndEvent) -> None:
        """Print failures, the verdict and counts per status."""
        self.log()
        if self.stats["total"] == 0 and not event.error:
            self.log(
                typer.style(" 0 TESTS RAN ", bg=typer.colors.MAGENTA, fg="white")
            )
            return

        if event.error:
            self.log(typer.style(" ERRORS ", bg=typer.colors.RED, fg="white"))
            self.log()
            for index, failure in enumerate(event.error, start=1):
                self.print_failure(failure, index)

        if event.status == "passed":
            self.log(typer.style(" PASSED ", bg=typer.colors.GREEN, fg="white"))
        else:
            self.log(typer.style(" FAILED ", bg=typer.colors.RED, fg="white"))
        self.log()

        elapsed = 0.0
        if self.started is not None:
            elapsed = (time.monotonic() - self.started) * 1000
        rows = [(name, str(count)) for name, count in self.stats.items() if count > 0]
        rows.append(("time", format_duration(elapsed)))
        for name, value in rows:
            self.log(typer.style(f"{name:<11} : {value}", fg=typer.colors.BRIGHT_BLACK))
