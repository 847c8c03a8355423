"""Tests for the JSON summary reporter."""

import json
from pathlib import Path

import pytest

from slimrunner.emitter import Emitter
from slimrunner.errors import UnexpectedPass
from slimrunner.loader import Loader
from slimrunner.models.events import (
    EndEvent,
    GroupStartEvent,
    StartEvent,
    TestEndEvent,
)
from slimrunner.models.results import Failure
from slimrunner.reporters.json_summary import JsonReporter
from slimrunner.suite import Suite


def test_json_reporter_summary(capsys: pytest.CaptureFixture[str]) -> None:
    """The reporter prints counts and one record per test."""
    emitter = Emitter()
    JsonReporter(emitter)
    error = UnexpectedPass()

    emitter.emit(StartEvent())
    emitter.emit(GroupStartEvent(title="math"))
    emitter.emit(TestEndEvent(title="adds", status="passed", duration=2))
    emitter.emit(
        TestEndEvent(title="fixed", status="failed", regression=True, error=error)
    )
    emitter.emit(TestEndEvent(title="later", status="todo"))
    emitter.emit(EndEvent(status="failed", error=[Failure(title="fixed", error=error)]))

    output = json.loads(capsys.readouterr().out)
    assert output["status"] == "failed"
    assert output["total"] == 3
    assert output["passed"] == 1
    assert output["failed"] == 1
    assert output["todo"] == 1
    assert output["errors"] == [
        {"title": "fixed", "message": "Test was expected to fail but passed"}
    ]
    assert output["results"][0] == {
        "group": "math",
        "title": "adds",
        "status": "passed",
        "duration": 2.0,
        "regression": False,
        "regression_message": None,
        "error": None,
    }


async def test_json_reporter_top_level_test_after_group(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """A top level test declared after a group is filed under no group."""
    suite = Suite(loader=Loader(tmp_path))
    suite.configure(ci=False, reporter_fn=JsonReporter)
    suite.group("math", lambda g: g.test("adds", lambda: None))
    suite.test("top level after group", lambda: None)

    await suite.run()

    results = json.loads(capsys.readouterr().out)["results"]
    assert [(r["group"], r["title"]) for r in results] == [
        ("math", "adds"),
        (None, "top level after group"),
    ]
