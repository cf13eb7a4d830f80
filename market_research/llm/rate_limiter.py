"""
LLM Rate Limiter

Enforces a minimum interval between Text Analysis calls (default 4s,
i.e. 15 requests per minute).

Design:
- One instance per run, injected into TextAnalysisService and shared by
  all three agents
- wait() sleeps max(0, last_call + interval - now), then records now as
  the last call time before returning
- The lock serializes concurrent callers so two calls can never slip
  through inside one interval
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, Optional


class RateLimiter:
    """
    Minimum-interval limiter for async callers.

    Example:
        limiter = RateLimiter(min_interval=4.0)
        await limiter.wait()
        response = await call_model()
    """

    def __init__(
        self,
        min_interval: float = 4.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        """
        Args:
            min_interval: Minimum seconds between calls
            clock: Returns current time in seconds (injectable for tests)
            sleep: Awaitable sleep (injectable for tests)
        """
        self.min_interval = min_interval
        self.clock = clock
        self.sleep = sleep
        self.last_call_time: Optional[float] = None
        self._lock = asyncio.Lock()

    async def wait(self) -> float:
        """
        Wait until the next call is allowed.

        Returns:
            Seconds spent waiting
        """
        async with self._lock:
            waited = 0.0
            if self.last_call_time is not None:
                waited = max(0.0, self.last_call_time + self.min_interval - self.clock())
                if waited > 0:
                    print(f"[RateLimiter] Waiting {waited:.1f}s before next LLM call...")
                    await self.sleep(waited)

            self.last_call_time = self.clock()
            return waited

    def reset(self):
        self.last_call_time = None
