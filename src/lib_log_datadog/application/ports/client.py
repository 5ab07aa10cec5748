"""Ports describing the delivery capability of a Datadog network client."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from lib_log_datadog.domain.record import DataDogLog


@runtime_checkable
class DataDogClient(Protocol):
    """Ship a batch of records, blocking the calling thread."""

    def send(self, logs: Sequence[DataDogLog]) -> None:
        """Deliver ``logs`` in order; raise on failure."""


@runtime_checkable
class AsyncDataDogClient(Protocol):
    """Ship a batch of records without blocking the event loop."""

    async def send_async(self, logs: Sequence[DataDogLog]) -> None:
        """Deliver ``logs`` in order; raise on failure."""


__all__ = ["AsyncDataDogClient", "DataDogClient"]
