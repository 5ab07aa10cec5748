"""Ports for the producer and consumer ends of a message channel.

The dispatch loop only needs the consumer half; the suspension mechanism is
chosen by the shell: :meth:`ReceiverPort.wait` parks a thread,
:meth:`ReceiverPort.wait_async` suspends a coroutine.
"""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class SenderPort(Protocol[T]):
    """Producer end; sending never blocks."""

    def try_send(self, item: T) -> None:
        """Enqueue ``item`` or raise when the channel is full or closed."""

    def close(self) -> None:
        """Signal the consumer that no more items will arrive."""


@runtime_checkable
class ReceiverPort(Protocol[T]):
    """Consumer end used by the dispatchers."""

    def try_recv(self) -> T:
        """Return the oldest item, raising when empty or disconnected."""

    def wait(self, timeout: float | None = None) -> bool:
        """Block until an item is available or the channel is closed."""

    async def wait_async(self) -> None:
        """Suspend until an item is available or the channel is closed."""


__all__ = ["ReceiverPort", "SenderPort"]
