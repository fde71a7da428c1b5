"""Tests for the shared retry policy."""

import pytest
from unittest.mock import AsyncMock

from articlebot.core.errors import DuplicatePostError, StoreUnavailableError
from articlebot.core.retry import RetryPolicy


@pytest.mark.asyncio
async def test_retries_until_success(sleep_recorder):
    fn = AsyncMock(side_effect=[ValueError("boom"), ValueError("boom"), "ok"])
    policy = RetryPolicy(max_attempts=3, delay_seconds=2.0, sleep=sleep_recorder)

    assert await policy.call(fn, "arg") == "ok"
    assert fn.await_count == 3
    assert sleep_recorder.calls == [2.0, 2.0]
    fn.assert_awaited_with("arg")


@pytest.mark.asyncio
async def test_reraises_after_exhaustion(sleep_recorder):
    fn = AsyncMock(side_effect=ValueError("always"))
    policy = RetryPolicy(max_attempts=3, delay_seconds=0.0, sleep=sleep_recorder)

    with pytest.raises(ValueError, match="always"):
        await policy.call(fn)
    assert fn.await_count == 3


@pytest.mark.asyncio
async def test_only_retries_listed_exceptions(sleep_recorder):
    fn = AsyncMock(side_effect=DuplicatePostError("taken"))
    policy = RetryPolicy(max_attempts=5, delay_seconds=0.0,
                         retry_on=(StoreUnavailableError,), sleep=sleep_recorder)

    with pytest.raises(DuplicatePostError):
        await policy.call(fn)
    assert fn.await_count == 1
    assert sleep_recorder.calls == []


@pytest.mark.asyncio
async def test_single_attempt_policy(sleep_recorder):
    fn = AsyncMock(side_effect=StoreUnavailableError("down"))
    policy = RetryPolicy(max_attempts=1, sleep=sleep_recorder)

    with pytest.raises(StoreUnavailableError):
        await policy.call(fn)
    assert fn.await_count == 1
