"""Models for test, group and run results."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TestStatus = Literal["pending", "passed", "failed", "skipped", "todo"]
RunStatus = Literal["passed", "failed"]


class TestResult(BaseModel):
    """Final outcome of a single test."""

    __test__ = False

    model_config = ConfigDict(arbitrary_types_allowed=True)

    title: str = Field(..., description="Test title")
    status: TestStatus = Field(..., description="Final test status")
    duration: float = Field(default=0.0, description="Wall time in milliseconds")
    error: BaseException | None = Field(
        default=None, description="Captured failure cause"
    )
    regression: bool = Field(default=False, description="Test is expected to fail")
    regression_message: str | None = Field(
        default=None, description="Message of the expected failure"
    )


class Failure(BaseModel):
    """A failure collected by the runner, rendered after the run."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    title: str = Field(..., description="Test or group title")
    error: BaseException = Field(..., description="Failure cause")


class GroupResult(BaseModel):
    """Outcome of a group and the tests it ran."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    title: str = Field(..., description="Group title")
    tests: list[TestResult] = Field(default_factory=list, description="Test results")
    error: BaseException | None = Field(
        default=None, description="before/after hook failure"
    )
    bailed: bool = Field(default=False, description="Bail was triggered here")

    @property
    def has_failures(self) -> bool:
        """Whether a hook or any test in the group failed."""
        return self.error is not None or any(
            test.status == "failed" for test in self.tests
        )


class RunResult(BaseModel):
    """Aggregate outcome of a run."""

    status: RunStatus = Field(..., description="Aggregate status")
    errors: list[Failure] = Field(default_factory=list, description="All failures")
    groups: list[GroupResult] = Field(
        default_factory=list, description="Results of groups that ran"
    )
