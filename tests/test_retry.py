"""
Test Retry With Backoff

Exponential delays, give-up behavior and error classification.
"""

import pytest

from market_research.exceptions import SourceUnavailableError
from market_research.sources import RetryPolicy, retry_with_backoff


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds: float):
        self.delays.append(seconds)


def failing_then(succeed_after: int, value="ok"):
    """Operation that fails succeed_after times, then returns value."""
    attempts = {'count': 0}

    async def operation():
        attempts['count'] += 1
        if attempts['count'] <= succeed_after:
            raise SourceUnavailableError('reddit', f"Search failed: 503 (attempt {attempts['count']})", status_code=503)
        return value

    return operation, attempts


@pytest.mark.asyncio
async def test_exhausted_retries_use_exponential_delays():
    operation, attempts = failing_then(succeed_after=100)
    sleep = RecordingSleep()

    outcome = await retry_with_backoff(operation, RetryPolicy(3, 1.0, 2.0), sleep=sleep)

    assert sleep.delays == [1.0, 2.0, 4.0]
    assert attempts['count'] == 4
    assert outcome.success is False
    assert outcome.retries == 3
    assert "reddit: Search failed: 503" in outcome.error


@pytest.mark.asyncio
async def test_success_after_transient_failures():
    operation, attempts = failing_then(succeed_after=2, value=["post"])
    sleep = RecordingSleep()

    outcome = await retry_with_backoff(operation, RetryPolicy(3, 0.5, 3.0), sleep=sleep)

    assert outcome.success is True
    assert outcome.data == ["post"]
    assert outcome.retries == 2
    assert sleep.delays == [0.5, 1.5]


@pytest.mark.asyncio
async def test_zero_retries_fails_immediately():
    operation, attempts = failing_then(succeed_after=1)
    sleep = RecordingSleep()

    outcome = await retry_with_backoff(operation, RetryPolicy(max_retries=0), sleep=sleep)

    assert outcome.success is False
    assert attempts['count'] == 1
    assert sleep.delays == []


@pytest.mark.asyncio
async def test_programming_errors_propagate():
    async def operation():
        raise ValueError("bug")

    with pytest.raises(ValueError):
        await retry_with_backoff(operation, RetryPolicy(), sleep=RecordingSleep())


def test_policy_from_config(config):
    config['api']['max_retries'] = 5
    config['api']['retry_delay_seconds'] = 0.25

    policy = RetryPolicy.from_config(config)

    assert policy.max_retries == 5
    assert policy.delay_for(0) == 0.25
    assert policy.delay_for(2) == 1.0
