"""Caller-side retry policy for external calls."""

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from knowledge_clone.core.exceptions import NetworkError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """Retries transport failures only.

    Auth and service errors are deterministic for a given request, so they
    are raised on the first attempt.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        min_wait: float = 1.0,
        max_wait: float = 8.0,
    ) -> None:
        """Initialize policy.

        Args:
            max_attempts: Total attempts including the first call
            min_wait: Minimum backoff in seconds
            max_wait: Maximum backoff in seconds
        """
        self.max_attempts = max(1, max_attempts)
        self.min_wait = min_wait
        self.max_wait = max_wait

    @classmethod
    def none(cls) -> "RetryPolicy":
        """Policy that performs a single attempt."""
        return cls(max_attempts=1)

    async def call(self, fn: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Await ``fn(*args, **kwargs)`` under this policy."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=self.min_wait, max=self.max_wait),
            retry=retry_if_exception_type(NetworkError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                return await fn(*args, **kwargs)
        raise AssertionError("unreachable")  # pragma: no cover
