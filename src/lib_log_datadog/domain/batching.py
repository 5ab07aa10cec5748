"""Batching policy shared by both dispatcher shells.

Purpose
-------
Decide when accumulated records must be flushed, independently of how the
dispatcher waits for new records (blocking thread or asyncio task).

Contents
--------
* :class:`Step` - instruction returned to the dispatcher after each poll.
* :class:`BatchPolicy` - the batch buffer and its flush rules.
* :data:`FLUSH_THRESHOLD` - batch size that forces an immediate flush.

System Role
-----------
Pure domain logic: no I/O, no locking. The buffer is owned by exactly one
dispatcher, so nothing here is thread-safe.
"""

from __future__ import annotations

from enum import Enum
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")

FLUSH_THRESHOLD = 50


class Step(Enum):
    """What the dispatcher does next."""

    CONTINUE = "continue"
    FLUSH = "flush"
    WAIT = "wait"
    FLUSH_THEN_WAIT = "flush_then_wait"
    STOP = "stop"
    FLUSH_THEN_STOP = "flush_then_stop"

    @property
    def flushes(self) -> bool:
        """Return ``True`` when the batch must be delivered before moving on."""

        return self in _FLUSHING

    @property
    def waits(self) -> bool:
        return self in (Step.WAIT, Step.FLUSH_THEN_WAIT)

    @property
    def stops(self) -> bool:
        return self in (Step.STOP, Step.FLUSH_THEN_STOP)


_FLUSHING = frozenset({Step.FLUSH, Step.FLUSH_THEN_WAIT, Step.FLUSH_THEN_STOP})


class BatchPolicy(Generic[T]):
    """Accumulate records and answer each poll outcome with a :class:`Step`.

    The batch never grows beyond ``threshold``: reaching it yields
    :attr:`Step.FLUSH` and the dispatcher is expected to :meth:`take` the batch
    before offering the next record.

    Examples
    --------
    >>> policy = BatchPolicy(threshold=2)
    >>> policy.on_record("a")
    <Step.CONTINUE: 'continue'>
    >>> policy.on_record("b")
    <Step.FLUSH: 'flush'>
    >>> policy.take()
    ['a', 'b']
    >>> policy.on_empty()
    <Step.WAIT: 'wait'>
    >>> policy.on_record("c")
    <Step.CONTINUE: 'continue'>
    >>> policy.on_closed()
    <Step.FLUSH_THEN_STOP: 'flush_then_stop'>
    """

    def __init__(self, *, threshold: int = FLUSH_THRESHOLD) -> None:
        if threshold <= 0:
            raise ValueError("threshold must be positive")
        self._threshold = threshold
        self._batch: list[T] = []

    @property
    def threshold(self) -> int:
        return self._threshold

    def on_record(self, record: T) -> Step:
        """Append ``record``; request a flush once the threshold is reached."""

        if len(self._batch) >= self._threshold:
            raise RuntimeError("batch is full; take() it before adding records")
        self._batch.append(record)
        if len(self._batch) >= self._threshold:
            return Step.FLUSH
        return Step.CONTINUE

    def on_empty(self) -> Step:
        """Handle an empty but open channel: flush what is pending, then wait."""

        return Step.FLUSH_THEN_WAIT if self._batch else Step.WAIT

    def on_closed(self) -> Step:
        """Handle a closed and drained channel: flush the remainder, then stop."""

        return Step.FLUSH_THEN_STOP if self._batch else Step.STOP

    def take(self) -> list[T]:
        """Hand the current batch to the caller and start a new one."""

        batch, self._batch = self._batch, []
        return batch

    def __len__(self) -> int:
        return len(self._batch)

    def __iter__(self) -> Iterator[T]:
        return iter(self._batch)


__all__ = ["FLUSH_THRESHOLD", "BatchPolicy", "Step"]
