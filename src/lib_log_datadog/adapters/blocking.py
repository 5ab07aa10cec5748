"""Thread-based dispatcher shipping batches with a synchronous client.

Purpose
-------
Keep network I/O off producer threads by running the dispatch loop on a
dedicated worker thread.

Contents
--------
* :class:`BlockingDispatcher` - owns the worker thread running
  :func:`run_blocking`.

System Role
-----------
Started by :meth:`DataDogLogger.blocking`; joined by
:meth:`DataDogLogger.close` after the producer channel is closed, so every
record enqueued before closing has been attempted once ``join`` returns.
"""

from __future__ import annotations

import logging
import threading

from lib_log_datadog.application.ports.channel import ReceiverPort, SenderPort
from lib_log_datadog.application.ports.client import DataDogClient
from lib_log_datadog.application.use_cases.dispatch import offer_selflog, run_blocking
from lib_log_datadog.domain.batching import FLUSH_THRESHOLD
from lib_log_datadog.domain.record import DataDogLog


LOGGER = logging.getLogger(__name__)

THREAD_NAME = "lib_log_datadog-dispatcher"


class BlockingDispatcher:
    """Run the batching loop on a background thread.

    Examples
    --------
    >>> from lib_log_datadog.adapters.channel import MessageChannel
    >>> from lib_log_datadog.domain.record import DataDogLog
    >>> class Recorder:
    ...     def __init__(self):
    ...         self.batches = []
    ...     def send(self, logs):
    ...         self.batches.append([log.message for log in logs])
    >>> client = Recorder()
    >>> channel = MessageChannel()
    >>> dispatcher = BlockingDispatcher(client, channel)
    >>> dispatcher.start()
    >>> channel.try_send(DataDogLog("hi", None, "python", "", "", "info"))
    >>> channel.close()
    >>> dispatcher.join()
    True
    >>> sum(client.batches, [])
    ['hi']
    """

    def __init__(
        self,
        client: DataDogClient,
        receiver: ReceiverPort[DataDogLog],
        selflog: SenderPort[str] | None = None,
        *,
        threshold: int = FLUSH_THRESHOLD,
    ) -> None:
        self._client = client
        self._receiver = receiver
        self._selflog = selflog
        self._threshold = threshold
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start the worker thread if it is not already running."""

        if self._thread is not None and self._thread.is_alive():
            return
        self._thread = threading.Thread(target=self._run, name=THREAD_NAME, daemon=True)
        self._thread.start()

    def is_alive(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker to finish draining.

        Returns ``True`` once the thread has terminated, ``False`` when
        ``timeout`` elapsed first or when called from the worker itself.
        """

        thread = self._thread
        if thread is None:
            return True
        if thread is threading.current_thread():
            return False
        thread.join(timeout)
        return not thread.is_alive()

    def _run(self) -> None:
        """Worker body; an escaping error ends the thread but is reported first."""

        try:
            run_blocking(self._client, self._receiver, self._selflog, threshold=self._threshold)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Dispatcher thread crashed; pending logs are lost", exc_info=exc)
            offer_selflog(self._selflog, f"dispatcher stopped: {exc}")


__all__ = ["BlockingDispatcher", "THREAD_NAME"]
