import asyncio
import logging
from typing import Awaitable, TypeVar

from fastapi import Request

from app.core.errors import ClientDisconnectedError

logger = logging.getLogger(__name__)

T = TypeVar("T")

DISCONNECT_CHECK_INTERVAL = 0.1


async def run_until_disconnected(
    request: Request,
    work: Awaitable[T],
    check_interval: float = DISCONNECT_CHECK_INTERVAL,
) -> T:
    """Await ``work``, cancelling it if the client disconnects first.

    A pending poll delay is interrupted immediately. An upstream call that
    is already running in the threadpool finishes first, and nothing after
    it is issued.
    """
    task = asyncio.ensure_future(work)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=check_interval)
            if done:
                return task.result()
            if await request.is_disconnected():
                logger.info(f"Client disconnected from {request.url.path}, cancelling query")
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
                raise ClientDisconnectedError("Client disconnected")
    finally:
        if not task.done():
            task.cancel()
