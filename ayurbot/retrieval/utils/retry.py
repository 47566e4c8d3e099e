"""Async retry helpers for the chat pipeline."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

from ayurbot.retrieval.errors import RetryExhaustedError, StageTimeoutError, is_transient

T = TypeVar("T")


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    multiplier: float = 2.0,
    retry_on: Callable[[Exception], bool] = is_transient,
    logger: logging.Logger | None = None,
    operation: str | None = None,
) -> T:
    """Run ``func`` up to ``max_attempts`` times with exponential backoff.

    Only failures accepted by ``retry_on`` are retried; anything else, or the
    failure of the last attempt, propagates unchanged.
    """

    delay = initial_delay
    for attempt in range(1, max_attempts + 1):
        try:
            return await func()
        except Exception as exc:
            if attempt >= max_attempts or not retry_on(exc):
                raise

            if logger:
                logger.warning(
                    "Retrying %s after error (attempt %s/%s, delay=%.2fs): %s",
                    operation or "operation",
                    attempt,
                    max_attempts,
                    delay,
                    exc,
                )

            await asyncio.sleep(delay)
            delay *= multiplier

    raise RetryExhaustedError("Max retries reached without success")


async def with_timeout(awaitable: Awaitable[T], *, timeout: float | None, stage: str) -> T:
    """Bound a single attempt; ``None`` disables the limit."""

    if timeout is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout)
    except asyncio.TimeoutError as exc:
        raise StageTimeoutError(stage, timeout) from exc
