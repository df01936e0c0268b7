"""
Token-bucket rate limiter for outbound provider calls.

Callers are suspended, never rejected: `consume()` returns only once the
requested tokens have been debited. Refill and debit happen under one
asyncio.Lock, and waiters queue on that lock in FIFO order, so concurrent
callers cannot both spend the same budget.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional

from textcraft.config.logging_config import get_logger

logger = get_logger(__name__)


class TokenBucketRateLimiter:
    """
    Async token bucket.

    Defaults allow a burst of 10 calls, then 2 calls per second.
    """

    def __init__(
        self,
        capacity: float = 10.0,
        refill_rate_per_s: float = 2.0,
        *,
        time_fn: Optional[Callable[[], float]] = None,
        sleep_func: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        # Every request costs one token
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        if refill_rate_per_s <= 0:
            raise ValueError("refill_rate_per_s must be positive")

        self.capacity = float(capacity)
        self.refill_rate_per_s = float(refill_rate_per_s)

        self._time = time_fn or time.monotonic
        self._sleep = sleep_func or asyncio.sleep

        self._tokens = self.capacity
        self._last_refill = self._time()
        self._lock = asyncio.Lock()

    @property
    def tokens(self) -> float:
        """Current budget, refreshed to now (read-only view)."""
        elapsed = max(self._time() - self._last_refill, 0.0)
        return min(self.capacity, self._tokens + elapsed * self.refill_rate_per_s)

    def _refill(self) -> None:
        now = self._time()
        elapsed = now - self._last_refill
        if elapsed > 0:
            self._tokens = min(self.capacity, self._tokens + elapsed * self.refill_rate_per_s)
        self._last_refill = now

    async def consume(self, cost: float = 1.0) -> None:
        """
        Wait until `cost` tokens are available, then debit them.

        Raises:
            ValueError: cost is not positive or exceeds capacity (could never be satisfied)
        """
        if cost <= 0:
            raise ValueError("cost must be positive")
        if cost > self.capacity:
            raise ValueError(f"cost {cost} exceeds bucket capacity {self.capacity}")

        async with self._lock:
            self._refill()

            while self._tokens < cost:
                wait_s = (cost - self._tokens) / self.refill_rate_per_s
                logger.debug(f"⏳ Rate limit: waiting {wait_s:.3f}s for {cost} token(s)")
                await self._sleep(wait_s)
                self._refill()

            self._tokens -= cost
