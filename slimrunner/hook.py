"""Lifecycle hooks attached to a group."""

import logging
from collections.abc import Callable
from typing import Any

from slimrunner.errors import HookError, HookKind, HookTimeout
from slimrunner.invoke import invoke

logger = logging.getLogger(__name__)


class Hook:
    """A single before/after callback with timeout enforcement."""

    def __init__(
        self,
        kind: HookKind,
        callback: Callable[..., Any],
        group_title: str = "",
    ) -> None:
        """Initialize hook for the group titled ``group_title``."""
        self.kind = kind
        self.callback = callback
        self.group_title = group_title

    async def execute(self, timeout: int) -> None:
        """Run the hook callback.

        Args:
            timeout: Deadline in milliseconds, 0 disables it

        Raises:
            HookTimeout: If the hook does not complete in time
            HookError: If the hook raises or passes an error to ``done``

        """
        logger.debug(f"Running {self.kind} hook of group {self.group_title!r}")
        try:
            await invoke(
                self.callback,
                (),
                timeout,
                lambda: HookTimeout(self.kind, timeout),
            )
        except HookError:
            raise
        except Exception as e:
            raise HookError(self.kind, e) from e
