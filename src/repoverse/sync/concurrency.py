"""Fan-out helpers for concurrent GitHub requests."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine, Iterable
from typing import Any, TypeVar

R = TypeVar("R")


async def gather_or_cancel(coros: Iterable[Coroutine[Any, Any, R]]) -> list[R]:
    """Run coroutines concurrently and return their results in order.

    Unlike a bare asyncio.gather, the first failure cancels every sibling
    and waits for them to unwind before the error is re-raised, so no
    request is still in flight once the caller sees the exception.

    Args:
        coros: Coroutines to run

    Returns:
        Results in the same order as the input coroutines
    """
    tasks: list[asyncio.Task[R]] = [asyncio.create_task(coro) for coro in coros]
    if not tasks:
        return []

    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
