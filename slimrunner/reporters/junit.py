"""JUnit XML reporter."""

import logging
import xml.etree.ElementTree as ET
from functools import partial
from pathlib import Path

from slimrunner.emitter import Emitter
from slimrunner.models.events import (
    EndEvent,
    GroupEndEvent,
    GroupStartEvent,
    TestEndEvent,
)
from slimrunner.reporters.base import Reporter, format_error

logger = logging.getLogger(__name__)

ROOT_SUITE = "root"


class JUnitReporter(Reporter):
    """Writes one ``testsuite`` element per group once the run ends."""

    def __init__(self, emitter: Emitter, path: Path = Path("result.xml")) -> None:
        """Initialize reporter writing to ``path``."""
        super().__init__(emitter)
        self.path = path
        self.root = ET.Element("testsuites")
        self.suite: ET.Element | None = None

    def _open_suite(self, name: str) -> ET.Element:
        suite = ET.SubElement(
            self.root,
            "testsuite",
            name=name,
            tests="0",
            failures="0",
            skipped="0",
            time="0.000",
        )
        self.suite = suite
        return suite

    def on_group_start(self, event: GroupStartEvent) -> None:
        """Start a suite for the group."""
        self._open_suite(event.title)

    def on_group_end(self, event: GroupEndEvent) -> None:
        """Close the suite of the group."""
        self.suite = None

    def on_test_end(self, event: TestEndEvent) -> None:
        """Append a test case to the current suite."""
        suite = self.suite if self.suite is not None else self._open_suite(ROOT_SUITE)
        seconds = event.duration / 1000
        case = ET.SubElement(
            suite,
            "testcase",
            classname=suite.get("name", ROOT_SUITE),
            name=event.title,
            time=f"{seconds:.3f}",
        )

        suite.set("tests", str(int(suite.get("tests", "0")) + 1))
        suite.set("time", f"{float(suite.get('time', '0')) + seconds:.3f}")

        if event.status == "failed" and event.error is not None:
            failure = ET.SubElement(
                case,
                "failure",
                message=str(event.error),
                type=type(event.error).__name__,
            )
            failure.text = format_error(event.error)
            suite.set("failures", str(int(suite.get("failures", "0")) + 1))
        elif event.status in ("skipped", "todo"):
            ET.SubElement(case, "skipped")
            suite.set("skipped", str(int(suite.get("skipped", "0")) + 1))

        if event.regression_message:
            ET.SubElement(case, "system-out").text = event.regression_message

    def on_end(self, event: EndEvent) -> None:
        """Write the XML document."""
        suites = self.root.findall("testsuite")
        self.root.set("tests", str(sum(int(s.get("tests", "0")) for s in suites)))
        self.root.set(
            "failures", str(sum(int(s.get("failures", "0")) for s in suites))
        )
        self.root.set(
            "time", f"{sum(float(s.get('time', '0')) for s in suites):.3f}"
        )

        tree = ET.ElementTree(self.root)
        ET.indent(tree)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tree.write(self.path, encoding="utf-8", xml_declaration=True)
        logger.info(f"JUnit report written to {self.path}")


def junit_reporter(path: Path) -> partial[JUnitReporter]:
    """Return a reporter function writing the JUnit report to ``path``."""
    return partial(JUnitReporter, path=path)
