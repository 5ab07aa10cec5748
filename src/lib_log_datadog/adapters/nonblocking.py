"""Cooperative dispatcher shipping batches with an asynchronous client.

The dispatcher owns no thread: :func:`logger_task` returns a coroutine that the
caller schedules on an event loop of their choice. :func:`schedule` covers the
two common ways of doing that with :mod:`asyncio`.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
from collections.abc import Coroutine
from typing import Any

from lib_log_datadog.application.ports.channel import ReceiverPort, SenderPort
from lib_log_datadog.application.ports.client import AsyncDataDogClient
from lib_log_datadog.application.use_cases.dispatch import run_async
from lib_log_datadog.domain.batching import FLUSH_THRESHOLD
from lib_log_datadog.domain.record import DataDogLog


def logger_task(
    client: AsyncDataDogClient,
    receiver: ReceiverPort[DataDogLog],
    selflog: SenderPort[str] | None = None,
    *,
    threshold: int = FLUSH_THRESHOLD,
) -> Coroutine[Any, Any, None]:
    """Return the (not yet scheduled) dispatch coroutine."""

    return run_async(client, receiver, selflog, threshold=threshold)


def schedule(
    coro: Coroutine[Any, Any, None],
    loop: asyncio.AbstractEventLoop | None = None,
) -> "asyncio.Task[None] | concurrent.futures.Future[None]":
    """Schedule ``coro`` on ``loop``.

    Without ``loop`` the coroutine becomes a task of the running loop, so the
    call must happen inside a coroutine. With an explicit ``loop`` (typically
    running in another thread) :func:`asyncio.run_coroutine_threadsafe` is used
    and a :class:`concurrent.futures.Future` is returned.
    """

    if loop is None:
        return asyncio.get_running_loop().create_task(coro, name="lib_log_datadog-dispatcher")
    return asyncio.run_coroutine_threadsafe(coro, loop)


__all__ = ["logger_task", "schedule"]
