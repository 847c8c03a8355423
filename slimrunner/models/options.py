"""Configuration models for the runner and the declaration API."""

import re
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RunnerOptions(BaseModel):
    """Options shared by a runner and copied into every group."""

    bail: bool = Field(
        default=False, description="Abort the whole run on the first failing test"
    )
    timeout: int = Field(
        default=2000, ge=0, description="Default timeout in milliseconds (0 disables)"
    )
    grep: re.Pattern[str] | None = Field(
        default=None, description="Only run tests whose title matches this pattern"
    )
    ci: bool | None = Field(
        default=None, description="Force CI detection on or off (None = detect)"
    )
    run_hooks_for_skipped: bool = Field(
        default=True,
        description="Run before_each/after_each hooks around skipped tests",
    )


class ConfigureOptions(BaseModel):
    """Everything accepted by ``Suite.configure``."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    bail: bool | None = Field(default=None, description="Override bail")
    timeout: int | None = Field(default=None, ge=0, description="Override timeout")
    grep: re.Pattern[str] | None = Field(default=None, description="Title filter")
    ci: bool | None = Field(default=None, description="Override CI detection")
    run_hooks_for_skipped: bool | None = Field(
        default=None, description="Override hook policy for skipped tests"
    )
    files: list[str] | None = Field(
        default=None, description="Glob patterns of test files to load"
    )
    filter: Callable[[str], bool] | None = Field(
        default=None, description="Predicate applied to every matched file"
    )
    reporter_fn: Callable[[Any], Any] | None = Field(
        default=None, description="Function receiving the emitter"
    )
    before: list[Callable[[Any, Any], Awaitable[None]]] | None = Field(
        default=None, description="Coroutines run once before the suite"
    )
    after: list[Callable[[Any, Any], Awaitable[None]]] | None = Field(
        default=None, description="Coroutines run once after the suite"
    )

    def apply(self, options: RunnerOptions) -> RunnerOptions:
        """Return a copy of ``options`` with every field set here applied."""
        updates = {
            name: getattr(self, name)
            for name in RunnerOptions.model_fields
            if getattr(self, name) is not None
        }
        return options.model_copy(update=updates)


class FileConfig(BaseModel):
    """Schema of a ``slimrunner.yaml`` configuration file."""

    bail: bool | None = Field(default=None, description="Abort on first failure")
    timeout: int | None = Field(default=None, ge=0, description="Timeout in ms")
    grep: str | None = Field(default=None, description="Title filter pattern")
    files: list[str] = Field(
        default_factory=list, description="Glob patterns of test files to load"
    )
