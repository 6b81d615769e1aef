"""Helpers for work that must not be abandoned halfway."""

import asyncio
from typing import Awaitable, TypeVar

T = TypeVar("T")


async def run_to_completion(call: Awaitable[T]) -> T:
    """Await ``call`` even if the caller is cancelled while it runs.

    Request timeouts cancel the whole operation. Rollbacks started before
    that moment are finished first, then the cancellation is re-raised.
    """
    task = asyncio.ensure_future(call)
    try:
        return await asyncio.shield(task)
    except asyncio.CancelledError:
        if not task.done():
            await task
        raise
