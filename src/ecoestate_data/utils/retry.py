"""
utils/retry.py — Exponential-backoff retry decorator for async remote calls.

Uses tenacity under the hood. Attempt counts and delays default to the
values in settings, read when the call is made, so tests and deployments can
tune them without re-importing the sources.

Usage:
    from ecoestate_data.errors import RemoteUnavailable
    from ecoestate_data.utils.retry import with_retry

    @with_retry()
    async def fetch_layer(url: str) -> dict:
        ...  # raise RemoteUnavailable on timeouts / 5xx

    # Explicit policy
    @with_retry(max_attempts=2, base_delay=0.5, retry_on=(RemoteUnavailable,))
    async def probe() -> dict: ...
"""

from __future__ import annotations

import functools
from collections.abc import Callable, Coroutine
from typing import Any, TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ecoestate_shared.config import settings
from ecoestate_data.errors import RemoteUnavailable

log = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Coroutine[Any, Any, Any]])


def with_retry(
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
    retry_on: type[Exception] | tuple[type[Exception], ...] = RemoteUnavailable,
) -> Callable[[F], F]:
    """
    Decorator that retries an async function with exponential backoff.

    Delays: base_delay * 2^(attempt-1), capped at max_delay. Exceptions not
    matching retry_on propagate on the first attempt; after the last attempt
    the original exception is re-raised.

    Args:
        max_attempts: Total attempts. Defaults to settings.http_max_attempts.
        base_delay:   Initial delay in seconds. Defaults to settings.http_retry_base_delay.
        max_delay:    Delay cap in seconds. Defaults to settings.http_retry_max_delay.
        retry_on:     Exception type(s) that trigger a retry.
    """

    def decorator(fn: F) -> F:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            attempts = max_attempts or settings.http_max_attempts
            delay = settings.http_retry_base_delay if base_delay is None else base_delay
            cap = settings.http_retry_max_delay if max_delay is None else max_delay
            attempt_log = log.bind(function=fn.__qualname__)

            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(attempts),
                wait=wait_exponential(multiplier=delay, max=cap),
                retry=retry_if_exception_type(retry_on),
                reraise=True,
            ):
                with attempt:
                    attempt_num = attempt.retry_state.attempt_number
                    if attempt_num > 1:
                        attempt_log.warning(
                            "retry_attempt",
                            attempt=attempt_num,
                            max_attempts=attempts,
                        )
                    return await fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
