"""Use case draining the producer channel into batched deliveries.

Purpose
-------
Run the batching policy against a channel and hand full or idle batches to a
Datadog client, funnelling every failure into the self-log channel.

Contents
--------
* :class:`DispatchCycle` - one poll of the channel fed into :class:`BatchPolicy`.
* :func:`offer_selflog` - best-effort diagnostic emission.
* :func:`is_dispatching` - whether the caller runs inside a dispatch loop.
* :func:`run_blocking` - thread shell; parks on :meth:`ReceiverPort.wait`.
* :func:`run_async` - asyncio shell; suspends on :meth:`ReceiverPort.wait_async`.

System Role
-----------
Both shells share the cycle, so flush decisions cannot drift between the
blocking and non-blocking dispatchers. Only the suspension mechanism and the
client call differ.

Alignment Notes
---------------
A failed batch is dropped after one diagnostic attempt; it is never retried or
merged into the next batch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from contextvars import ContextVar

from lib_log_datadog.application.ports.channel import ReceiverPort, SenderPort
from lib_log_datadog.application.ports.client import AsyncDataDogClient, DataDogClient
from lib_log_datadog.domain.batching import FLUSH_THRESHOLD, BatchPolicy, Step
from lib_log_datadog.domain.record import DataDogLog
from lib_log_datadog.errors import ChannelDisconnected, ChannelEmpty, ChannelError

LOGGER = logging.getLogger(__name__)

_DISPATCHING: ContextVar[bool] = ContextVar("lib_log_datadog_dispatching", default=False)


def is_dispatching() -> bool:
    """Return ``True`` while the current thread or task runs a dispatch loop.

    Anything a client logs during delivery (``httpx`` request lines, for
    example) is emitted in this state; the logging bridge uses it to keep such
    records out of the producer channel.
    """

    return _DISPATCHING.get()


@contextmanager
def _dispatching() -> Iterator[None]:
    token = _DISPATCHING.set(True)
    try:
        yield
    finally:
        _DISPATCHING.reset(token)


def offer_selflog(selflog: SenderPort[str] | None, message: str) -> bool:
    """Try to queue ``message`` on the diagnostic channel.

    Returns ``False`` when diagnostics are disabled or the channel is full or
    closed; the message is discarded in that case.
    """

    if selflog is None:
        return False
    try:
        selflog.try_send(message)
    except ChannelError:
        return False
    return True


class DispatchCycle:
    """Poll the channel once per call and translate the outcome into a :class:`Step`."""

    def __init__(
        self,
        receiver: ReceiverPort[DataDogLog],
        selflog: SenderPort[str] | None,
        *,
        threshold: int = FLUSH_THRESHOLD,
    ) -> None:
        self._receiver = receiver
        self._selflog = selflog
        self._policy: BatchPolicy[DataDogLog] = BatchPolicy(threshold=threshold)

    @property
    def pending(self) -> int:
        """Return the number of records waiting in the current batch."""

        return len(self._policy)

    def poll(self) -> Step:
        try:
            record = self._receiver.try_recv()
        except ChannelEmpty:
            return self._policy.on_empty()
        except ChannelDisconnected:
            return self._policy.on_closed()
        return self._policy.on_record(record)

    def take_batch(self) -> list[DataDogLog]:
        return self._policy.take()

    def report_failure(self, batch: Sequence[DataDogLog], exc: BaseException) -> None:
        """Log the failed delivery and offer its text to the self-log channel."""

        LOGGER.warning("Delivery of %d logs failed; dropping batch", len(batch), exc_info=exc)
        offer_selflog(self._selflog, f"failed to deliver {len(batch)} logs: {exc}")


def run_blocking(
    client: DataDogClient,
    receiver: ReceiverPort[DataDogLog],
    selflog: SenderPort[str] | None = None,
    *,
    threshold: int = FLUSH_THRESHOLD,
) -> None:
    """Dispatch until the channel is closed and drained, blocking between records."""

    cycle = DispatchCycle(receiver, selflog, threshold=threshold)
    LOGGER.debug("Blocking dispatcher started")
    with _dispatching():
        while True:
            step = cycle.poll()
            if step.flushes:
                batch = cycle.take_batch()
                try:
                    client.send(batch)
                except Exception as exc:  # noqa: BLE001
                    cycle.report_failure(batch, exc)
            if step.stops:
                break
            if step.waits:
                receiver.wait()
    LOGGER.debug("Blocking dispatcher finished")


async def run_async(
    client: AsyncDataDogClient,
    receiver: ReceiverPort[DataDogLog],
    selflog: SenderPort[str] | None = None,
    *,
    threshold: int = FLUSH_THRESHOLD,
) -> None:
    """Dispatch until the channel is closed and drained, awaiting between records."""

    cycle = DispatchCycle(receiver, selflog, threshold=threshold)
    LOGGER.debug("Non-blocking dispatcher started")
    # The task runs in its own context copy, so the flag never leaks to the loop.
    with _dispatching():
        while True:
            step = cycle.poll()
            if step.flushes:
                batch = cycle.take_batch()
                try:
                    await client.send_async(batch)
                except Exception as exc:  # noqa: BLE001
                    cycle.report_failure(batch, exc)
            if step.stops:
                break
            if step.waits:
                await receiver.wait_async()
    LOGGER.debug("Non-blocking dispatcher finished")


__all__ = ["DispatchCycle", "is_dispatching", "offer_selflog", "run_async", "run_blocking"]
