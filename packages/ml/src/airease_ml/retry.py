"""Bounded exponential backoff for async provider calls."""

from __future__ import annotations

import asyncio
import functools
import logging
import random
from typing import TYPE_CHECKING, TypeVar

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")

logger = logging.getLogger(__name__)


class BackoffPolicy(BaseModel):
    """Delay before retry ``n`` (0-based) is ``min(base_delay * 2**n, max_delay)``."""

    max_retries: int = Field(default=3, ge=0)
    base_delay: float = Field(default=1.0, ge=0)
    max_delay: float = Field(default=8.0, ge=0)
    jitter: bool = False

    def delay_for(self, attempt: int) -> float:
        delay = min(self.base_delay * (2**attempt), self.max_delay)
        if self.jitter:
            delay *= 0.5 + random.random()
        return delay


def async_retry(
    policy: BackoffPolicy | None = None,
    exceptions: tuple[type[Exception], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """Decorator that retries an async function on ``exceptions`` with backoff.

    Exceptions outside ``exceptions`` propagate immediately. After
    ``policy.max_retries`` retries the last exception is re-raised.
    """
    policy = policy or BackoffPolicy()

    def decorator(
        func: Callable[..., Awaitable[T]],
    ) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: object, **kwargs: object) -> T:
            return await retry_call(func, *args, policy=policy, exceptions=exceptions, **kwargs)

        return wrapper

    return decorator


async def retry_call(
    func: Callable[..., Awaitable[T]],
    *args: object,
    policy: BackoffPolicy,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    **kwargs: object,
) -> T:
    """Await ``func(*args, **kwargs)`` under ``policy``."""
    last_exc: Exception | None = None
    for attempt in range(policy.max_retries + 1):
        try:
            return await func(*args, **kwargs)
        except exceptions as exc:
            last_exc = exc
            if attempt == policy.max_retries:
                break
            delay = policy.delay_for(attempt)
            logger.warning(
                "Retry %d/%d for %s after %.1fs: %s",
                attempt + 1,
                policy.max_retries,
                getattr(func, "__name__", repr(func)),
                delay,
                exc,
            )
            await asyncio.sleep(delay)
    raise last_exc  # type: ignore[misc]
