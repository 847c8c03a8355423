"""Race a user callback against its completion signal and a deadline."""

import asyncio
import inspect
import logging
from collections.abc import Callable, Sequence
from typing import Any

from slimrunner.errors import UserThrown

logger = logging.getLogger(__name__)

Done = Callable[..., None]


def _positional_arity(callback: Callable[..., Any], available: int) -> int:
    """Return how many of the ``available`` positional arguments to pass.

    ``*args`` does not count, only named leading parameters do.
    """
    try:
        signature = inspect.signature(callback)
    except (TypeError, ValueError):
        return available

    count = 0
    for parameter in signature.parameters.values():
        if parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            break
        if parameter.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return min(count, available)


def _consume_result(task: "asyncio.Future[Any]") -> None:
    """Retrieve the outcome of an abandoned task so it is never reported."""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.debug(f"Ignoring late failure of abandoned callback: {error!r}")


async def invoke(
    callback: Callable[..., Any],
    args: Sequence[Any],
    timeout: int,
    on_timeout: Callable[[], BaseException],
) -> None:
    """Run ``callback`` until it completes, fails or times out.

    ``args`` are the arguments offered to the callback, excluding the
    completion function which is always offered last. A callback declaring
    every offered argument plus one more receives ``done`` and must call it;
    otherwise it completes when it returns, or when its awaitable resolves.

    Args:
        callback: User supplied test body or hook
        args: Leading positional arguments offered to the callback
        timeout: Deadline in milliseconds, 0 disables it
        on_timeout: Factory for the exception raised when the deadline passes

    Raises:
        BaseException: Whatever the callback raised, or passed to ``done``
        UserThrown: When ``done`` received a value that is not an exception

    """
    loop = asyncio.get_running_loop()
    completion: asyncio.Future[None] = loop.create_future()

    def settle(error: object) -> None:
        # The race is already decided, a late signal must not touch it.
        if completion.done():
            return
        if error is None:
            completion.set_result(None)
        elif isinstance(error, BaseException):
            completion.set_exception(error)
        else:
            completion.set_exception(UserThrown(error))

    def done(error: object = None) -> None:
        if loop.is_closed():
            return
        loop.call_soon_threadsafe(settle, error)

    offered = [*args, done]
    arity = _positional_arity(callback, len(offered))
    expects_done = arity == len(offered)

    deadline = loop.time() + timeout / 1000 if timeout else None
    try:
        outcome = callback(*offered[:arity])

        pending: set[asyncio.Future[Any]] = set()
        if inspect.isawaitable(outcome):
            body = asyncio.ensure_future(outcome)
            body.add_done_callback(_consume_result)
            pending.add(body)
        if expects_done:
            pending.add(completion)

        while pending:
            remaining = None if deadline is None else max(0.0, deadline - loop.time())
            finished, pending = await asyncio.wait(
                pending, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )
            if not finished:
                # Timers may fire a hair early; only the loop clock decides.
                if deadline is not None and loop.time() >= deadline:
                    raise on_timeout()
                continue

            for future in finished:
                error = future.exception()
                if error is not None:
                    raise error

            if completion in finished or not expects_done:
                return
    finally:
        if not completion.done():
            completion.cancel()
