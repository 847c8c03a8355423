"""Lifecycle events published on the emitter."""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from slimrunner.models.results import Failure, RunStatus, TestResult


class StartEvent(BaseModel):
    """Published before the first group executes."""

    type: Literal["start"] = "start"


class GroupStartEvent(BaseModel):
    """Published before the tests of a group run."""

    type: Literal["group:start"] = "group:start"
    title: str = Field(..., description="Group title")


class TestEndEvent(TestResult):
    """Published after a test fully resolves."""

    __test__ = False

    type: Literal["test:end"] = "test:end"


class GroupEndEvent(BaseModel):
    """Published after the tests and the after hook of a group finish."""

    type: Literal["group:end"] = "group:end"
    title: str = Field(..., description="Group title")


class EndEvent(BaseModel):
    """Published once the run completes, or was aborted."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: Literal["end"] = "end"
    status: RunStatus = Field(..., description="Aggregate status")
    error: list[Failure] = Field(default_factory=list, description="All failures")


Event = Annotated[
    StartEvent | GroupStartEvent | TestEndEvent | GroupEndEvent | EndEvent,
    Field(discriminator="type"),
]
