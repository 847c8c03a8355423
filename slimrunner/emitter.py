"""Typed publish/subscribe channel for lifecycle events."""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)

Handler = Callable[[Any], None]


class Emitter:
    """Delivers lifecycle events to the handlers subscribed to their type.

    Registration is append-only. Handlers run synchronously, in registration
    order, and exceptions they raise propagate to the publisher.
    """

    def __init__(self) -> None:
        """Create an emitter with no subscribers."""
        self._handlers: list[tuple[type[BaseModel] | None, Handler]] = []

    def on(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        """Subscribe ``handler`` to events of ``event_type``."""
        self._handlers.append((event_type, handler))

    def on_any(self, handler: Callable[[BaseModel], None]) -> None:
        """Subscribe ``handler`` to every event."""
        self._handlers.append((None, handler))

    def emit(self, event: BaseModel) -> None:
        """Publish ``event`` to its subscribers."""
        logger.debug(f"Emitting {type(event).__name__}")
        for event_type, handler in self._handlers:
            if event_type is None or isinstance(event, event_type):
                handler(event)

    @property
    def subscriber_count(self) -> int:
        """Number of registered handlers."""
        return len(self._handlers)
