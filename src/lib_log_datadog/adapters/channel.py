"""Thread-safe message channel bridging producers and a single dispatcher.

Purpose
-------
Carry records (and self-log diagnostics) from any number of producer threads to
one consumer that is either a thread or an asyncio task.

Contents
--------
* :class:`MessageChannel` - bounded or unbounded FIFO implementing both
  :class:`SenderPort` and :class:`ReceiverPort`.

System Role
-----------
Sending never blocks: a full or closed channel raises immediately so the
logger façade can drop the record. Consumers suspend without spinning, either
on the condition variable or on an asyncio future woken through
``loop.call_soon_threadsafe``.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections import deque
from typing import Deque, Generic, TypeVar

from lib_log_datadog.application.ports.channel import ReceiverPort, SenderPort
from lib_log_datadog.errors import ChannelClosed, ChannelDisconnected, ChannelEmpty, ChannelFull

T = TypeVar("T")

LOGGER = logging.getLogger(__name__)

_Waiter = tuple[asyncio.AbstractEventLoop, "asyncio.Future[None]"]


def _resolve(future: "asyncio.Future[None]") -> None:
    if not future.done():
        future.set_result(None)


class MessageChannel(SenderPort[T], ReceiverPort[T], Generic[T]):
    """FIFO queue with non-blocking send and blocking or awaitable receive.

    Examples
    --------
    >>> channel = MessageChannel(capacity=1)
    >>> channel.try_send("a")
    >>> channel.try_send("b")
    Traceback (most recent call last):
    ...
    lib_log_datadog.errors.ChannelFull: sending on a full channel
    >>> channel.try_recv()
    'a'
    >>> channel.close()
    >>> channel.try_recv()
    Traceback (most recent call last):
    ...
    lib_log_datadog.errors.ChannelDisconnected: receiving on an empty and closed channel
    """

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is not None and capacity <= 0:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._items: Deque[T] = deque()
        self._closed = False
        self._condition = threading.Condition()
        self._async_waiters: list[_Waiter] = []

    @classmethod
    def bounded(cls, capacity: int) -> "MessageChannel[T]":
        return cls(capacity)

    @classmethod
    def unbounded(cls) -> "MessageChannel[T]":
        return cls(None)

    @property
    def capacity(self) -> int | None:
        """Return the configured capacity, ``None`` when unbounded."""

        return self._capacity

    @property
    def closed(self) -> bool:
        with self._condition:
            return self._closed

    def __len__(self) -> int:
        with self._condition:
            return len(self._items)

    def try_send(self, item: T) -> None:
        """Append ``item`` without waiting.

        Raises
        ------
        ChannelClosed
            When :meth:`close` has been called.
        ChannelFull
            When a bounded channel already holds ``capacity`` items.
        """

        with self._condition:
            if self._closed:
                raise ChannelClosed()
            if self._capacity is not None and len(self._items) >= self._capacity:
                raise ChannelFull()
            self._items.append(item)
            self._wake_locked()

    def close(self) -> None:
        """Reject further sends and wake every waiting consumer."""

        with self._condition:
            if self._closed:
                return
            self._closed = True
            self._wake_locked()

    def try_recv(self) -> T:
        """Pop the oldest item without waiting.

        Raises
        ------
        ChannelEmpty
            When nothing is queued but producers may still send.
        ChannelDisconnected
            When the channel is closed and fully drained.
        """

        with self._condition:
            if self._items:
                return self._items.popleft()
            if self._closed:
                raise ChannelDisconnected()
            raise ChannelEmpty()

    def recv(self, timeout: float | None = None) -> T:
        """Block until an item arrives, then pop it."""

        self.wait(timeout)
        return self.try_recv()

    def drain(self) -> list[T]:
        """Pop everything currently queued."""

        with self._condition:
            items = list(self._items)
            self._items.clear()
            return items

    def wait(self, timeout: float | None = None) -> bool:
        """Park the calling thread until an item is queued or the channel closes.

        Returns ``False`` when ``timeout`` elapsed first.
        """

        with self._condition:
            return self._condition.wait_for(self._ready_locked, timeout)

    async def wait_async(self) -> None:
        """Suspend the current task until an item is queued or the channel closes."""

        loop = asyncio.get_running_loop()
        with self._condition:
            if self._ready_locked():
                return
            waiter: _Waiter = (loop, loop.create_future())
            self._async_waiters.append(waiter)
        try:
            await waiter[1]
        finally:
            with self._condition:
                if waiter in self._async_waiters:
                    self._async_waiters.remove(waiter)

    def _ready_locked(self) -> bool:
        return bool(self._items) or self._closed

    def _wake_locked(self) -> None:
        self._condition.notify_all()
        waiters, self._async_waiters = self._async_waiters, []
        for loop, future in waiters:
            try:
                loop.call_soon_threadsafe(_resolve, future)
            except RuntimeError:
                LOGGER.debug("Skipping wake-up for a closed event loop")


__all__ = ["MessageChannel"]
