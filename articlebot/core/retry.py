"""Bounded retry policy shared by generation and persistence."""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_fixed,
)

from .logging import get_logger

logger = get_logger(__name__)


@dataclass
class RetryPolicy:
    """
    Retry an async operation a fixed number of times.

    Args:
        max_attempts: Total attempts including the first one
        delay_seconds: Wait between attempts (initial wait when backoff is set)
        backoff: Multiplier for exponential waits, fixed delay when None
        retry_on: Exception types that trigger another attempt
        sleep: Injectable sleep coroutine, used by tests to skip real waits
    """
    max_attempts: int = 3
    delay_seconds: float = 2.0
    backoff: Optional[float] = None
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
    sleep: Optional[Callable[[float], Awaitable[None]]] = field(default=None, repr=False)

    def _wait(self):
        if self.backoff:
            return wait_exponential(multiplier=self.delay_seconds, exp_base=self.backoff)
        return wait_fixed(self.delay_seconds)

    async def call(self, fn: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """Run fn until it succeeds or attempts run out; re-raises the last error."""
        retrying_kwargs = dict(
            stop=stop_after_attempt(max(1, self.max_attempts)),
            wait=self._wait(),
            retry=retry_if_exception_type(self.retry_on),
            reraise=True,
            before_sleep=before_sleep_log(logger, logging.WARNING),
        )
        if self.sleep is not None:
            retrying_kwargs["sleep"] = self.sleep

        result = None
        async for attempt in AsyncRetrying(**retrying_kwargs):
            with attempt:
                result = await fn(*args, **kwargs)
        return result
