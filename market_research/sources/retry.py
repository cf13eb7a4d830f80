"""
Retry With Exponential Backoff

Wraps a source call so transient failures are retried and permanent ones
come back as a typed SearchOutcome instead of an exception. Callers can
then keep whatever other queries succeeded.

Design:
- One initial attempt plus up to max_retries retries
- Retry i (0-based) waits base_delay * multiplier ** i
- Only SourceUnavailableError is retried; anything else is a bug and
  propagates
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Generic, Optional, TypeVar

from ..exceptions import SourceUnavailableError

T = TypeVar("T")


@dataclass
class RetryPolicy:
    max_retries: int = 3
    base_delay: float = 1.0  # seconds
    multiplier: float = 2.0

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RetryPolicy":
        api = config['api']
        return cls(
            max_retries=int(api.get('max_retries', 3)),
            base_delay=float(api.get('retry_delay_seconds', 1.0)),
            multiplier=float(api.get('retry_backoff_multiplier', 2)),
        )

    def delay_for(self, retry_index: int) -> float:
        return self.base_delay * (self.multiplier ** retry_index)


@dataclass
class SearchOutcome(Generic[T]):
    """
    Result of a retried source call.

    Why not raise?
    - Fan-out callers gather many of these and need to separate successes
      from failures without try/except around every task
    """
    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    retries: int = 0


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    label: str = "request",
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
) -> SearchOutcome[T]:
    """
    Run operation until it succeeds or retries are exhausted.

    Args:
        operation: Zero-arg callable returning a fresh awaitable per attempt
        policy: Retry count and backoff parameters
        label: Used in progress output
        sleep: Awaitable sleep (injectable for tests)

    Returns:
        SearchOutcome with data on success, error message on failure
    """
    retries = 0
    while True:
        try:
            data = await operation()
            return SearchOutcome(success=True, data=data, retries=retries)

        except SourceUnavailableError as e:
            if retries >= policy.max_retries:
                print(f"  ✗ {label} failed after {retries} retries: {e}")
                return SearchOutcome(success=False, error=str(e), retries=retries)

            delay = policy.delay_for(retries)
            print(f"  Retrying {label} after {delay:.1f}s (attempt {retries + 1}/{policy.max_retries}): {e}")
            await sleep(delay)
            retries += 1
