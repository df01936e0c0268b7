"""
Debounce an async callable.

Each call (re)arms one cancellable timer. When the timer fires after a quiet
period, the wrapped function runs once with the arguments of the last call,
and every caller that was waiting receives that single result (or exception).
Superseded calls are never executed.
"""

import asyncio
from typing import Any, Awaitable, Callable, List, Optional, Set

from textcraft.config.logging_config import get_logger

logger = get_logger(__name__)


class Debouncer:
    """One logical queue: all calls through an instance coalesce together."""

    def __init__(self, func: Callable[..., Awaitable[Any]], delay_s: float = 0.5):
        if delay_s < 0:
            raise ValueError("delay_s must not be negative")

        self._func = func
        self.delay_s = delay_s

        self._handle: Optional[asyncio.TimerHandle] = None
        self._waiters: List[asyncio.Future] = []
        # Strong refs so fired runs are not garbage-collected mid-flight
        self._running: Set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """True while a timer is armed."""
        return self._handle is not None

    def __call__(self, *args: Any, **kwargs: Any) -> "asyncio.Future[Any]":
        """Schedule `func(*args, **kwargs)` and return a future for the eventual result."""
        loop = asyncio.get_running_loop()

        if self._handle is not None:
            self._handle.cancel()
            logger.trace(f"Debounce: superseded pending call ({len(self._waiters)} waiting)")

        future = loop.create_future()
        self._waiters.append(future)
        self._handle = loop.call_later(self.delay_s, self._fire, args, kwargs)
        return future

    def _fire(self, args, kwargs) -> None:
        self._handle = None
        waiters, self._waiters = self._waiters, []

        task = asyncio.ensure_future(self._run(waiters, args, kwargs))
        self._running.add(task)
        task.add_done_callback(self._running.discard)

    async def _run(self, waiters: List[asyncio.Future], args, kwargs) -> None:
        logger.debug(f"Debounce: firing for {len(waiters)} caller(s)")
        try:
            result = await self._func(*args, **kwargs)
        except asyncio.CancelledError:
            for waiter in waiters:
                waiter.cancel()
            raise
        except Exception as e:
            for waiter in waiters:
                if not waiter.done():
                    waiter.set_exception(e)
        else:
            for waiter in waiters:
                if not waiter.done():
                    waiter.set_result(result)

    def cancel(self) -> None:
        """Disarm the timer and cancel every waiting caller."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            waiter.cancel()
