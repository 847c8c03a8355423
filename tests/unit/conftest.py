"""Shared fixtures for unit tests."""

import pytest
from pydantic import BaseModel

from slimrunner.emitter import Emitter
from slimrunner.models.options import RunnerOptions
from slimrunner.runner import RunnerContext


@pytest.fixture
def emitter() -> Emitter:
    """Create an emitter without subscribers."""
    return Emitter()


@pytest.fixture
def events(emitter: Emitter) -> list[BaseModel]:
    """Record every event published on the emitter."""
    recorded: list[BaseModel] = []
    emitter.on_any(recorded.append)
    return recorded


@pytest.fixture
def ctx(emitter: Emitter, events: list[BaseModel]) -> RunnerContext:
    """Create a run context outside of CI with default options."""
    return RunnerContext(RunnerOptions(ci=False), emitter)
