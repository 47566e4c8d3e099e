"""Single-purpose pipeline steps.

Each step takes a ``run`` callable used to execute its network calls, so the
caller decides on retries and timeouts.
"""
from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

T = TypeVar("T")

StageRunner = Callable[[str, Callable[[], Awaitable[T]]], Awaitable[T]]


async def run_direct(stage: str, func: Callable[[], Awaitable[T]]) -> T:
    return await func()
