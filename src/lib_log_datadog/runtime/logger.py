"""Logger façade owning the producer channel and the dispatcher lifecycle.

Purpose
-------
Expose the entry point host applications use: build a :class:`DataDogLogger`
in blocking or non-blocking mode, call :meth:`DataDogLogger.log`, optionally
poll :meth:`DataDogLogger.selflog`, and :meth:`DataDogLogger.close` at exit.

Contents
--------
* :data:`SELF_LOG_CAPACITY` - size of the diagnostic channel.
* :class:`DataDogLogger` - the façade and its three constructors.

System Role
-----------
Composition root of the dispatch engine. ``log()`` only builds a record and
attempts a non-blocking enqueue; it performs no I/O and never raises for a
full or closed channel. Failures are offered to the self-log channel when
diagnostics are enabled and dropped otherwise.

Alignment Notes
---------------
Blocking mode joins the dispatcher thread in :meth:`DataDogLogger.close`, or
through a :func:`weakref.finalize` hook when the façade is garbage collected
or the interpreter exits without an explicit close.
Non-blocking mode only closes the channel: the scheduled task belongs to the
caller's event loop and may outlive the façade.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import weakref
from collections.abc import Coroutine
from types import TracebackType
from typing import Any

from lib_log_datadog.adapters.blocking import BlockingDispatcher
from lib_log_datadog.adapters.channel import MessageChannel
from lib_log_datadog.adapters.nonblocking import logger_task, schedule
from lib_log_datadog.application.ports.client import AsyncDataDogClient, DataDogClient
from lib_log_datadog.application.use_cases.dispatch import offer_selflog
from lib_log_datadog.domain.config import DataDogConfig
from lib_log_datadog.domain.levels import DataDogLogLevel
from lib_log_datadog.domain.record import DataDogLog
from lib_log_datadog.errors import ChannelError

LOGGER = logging.getLogger(__name__)

SELF_LOG_CAPACITY = 100


def _open_channels(config: DataDogConfig) -> tuple[MessageChannel[DataDogLog], MessageChannel[str] | None]:
    """Create the producer channel and, when enabled, the self-log channel."""

    selflog: MessageChannel[str] | None = None
    if config.enable_self_log:
        selflog = MessageChannel(SELF_LOG_CAPACITY)
    logs: MessageChannel[DataDogLog] = MessageChannel(config.messages_channel_capacity)
    return logs, selflog


def _shutdown(
    logs: MessageChannel[DataDogLog],
    dispatcher: BlockingDispatcher | None,
    timeout: float | None,
) -> None:
    """Close the producer channel and wait for the dispatcher to drain it."""

    logs.close()
    if dispatcher is None:
        return
    if not dispatcher.join(timeout):
        LOGGER.warning("Datadog dispatcher did not finish within %s seconds", timeout)


class DataDogLogger:
    """Non-blocking producer front-end of the dispatch engine.

    Use one of the constructors rather than calling ``__init__`` directly:
    :meth:`blocking`, :meth:`non_blocking_cold` or
    :meth:`non_blocking_with_asyncio`.

    Examples
    --------
    >>> class Recorder:
    ...     def __init__(self):
    ...         self.messages = []
    ...     def send(self, logs):
    ...         self.messages.extend(log.message for log in logs)
    >>> client = Recorder()
    >>> with DataDogLogger.blocking(client, DataDogConfig(service="svc")) as logger:
    ...     logger.info("hello")
    >>> client.messages
    ['hello']
    """

    def __init__(
        self,
        config: DataDogConfig,
        logs: MessageChannel[DataDogLog],
        selflog: MessageChannel[str] | None,
        *,
        dispatcher: BlockingDispatcher | None = None,
    ) -> None:
        self._config = config
        self._logs = logs
        self._selflog = selflog
        self._dispatcher = dispatcher
        self._task: asyncio.Task[None] | concurrent.futures.Future[None] | None = None
        self._closed = False
        # Runs on garbage collection or interpreter exit unless close() ran first.
        self._finalizer = weakref.finalize(self, _shutdown, logs, dispatcher, None)

    @classmethod
    def blocking(cls, client: DataDogClient, config: DataDogConfig) -> "DataDogLogger":
        """Start a dedicated dispatcher thread shipping batches with ``client``."""

        logs, selflog = _open_channels(config)
        dispatcher = BlockingDispatcher(client, logs, selflog)
        dispatcher.start()
        LOGGER.debug("Started blocking Datadog logger (capacity=%s)", config.messages_channel_capacity)
        return cls(config, logs, selflog, dispatcher=dispatcher)

    @classmethod
    def non_blocking_cold(
        cls,
        client: AsyncDataDogClient,
        config: DataDogConfig,
    ) -> tuple["DataDogLogger", Coroutine[Any, Any, None]]:
        """Return the façade and the dispatcher coroutine the caller must schedule.

        Records are only shipped once the coroutine runs on an event loop; until
        then they accumulate in the channel (and bounded channels start
        rejecting them once full).
        """

        logs, selflog = _open_channels(config)
        return cls(config, logs, selflog), logger_task(client, logs, selflog)

    @classmethod
    def non_blocking_with_asyncio(
        cls,
        client: AsyncDataDogClient,
        config: DataDogConfig,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> "DataDogLogger":
        """Build a non-blocking logger and schedule its dispatcher on asyncio.

        Without ``loop`` this must be called from a coroutine; the dispatcher
        becomes a task of the running loop. With ``loop`` the dispatcher is
        submitted thread-safely to that loop.
        """

        logger, coro = cls.non_blocking_cold(client, config)
        try:
            logger._task = schedule(coro, loop)
        except RuntimeError:
            coro.close()
            raise
        return logger

    @property
    def config(self) -> DataDogConfig:
        return self._config

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dispatcher_task(self) -> asyncio.Task[None] | concurrent.futures.Future[None] | None:
        """Return the scheduled dispatcher of :meth:`non_blocking_with_asyncio`."""

        return self._task

    def selflog(self) -> MessageChannel[str] | None:
        """Return the diagnostic channel, or ``None`` when self-log is disabled."""

        return self._selflog

    def log(
        self,
        message: object,
        level: DataDogLogLevel,
        *,
        trace_id: str = "",
        span_id: str = "",
    ) -> None:
        """Queue ``message`` for delivery without blocking.

        A rejected enqueue (full or closed channel) is reported to the self-log
        channel when enabled; the record itself is dropped.
        """

        record = DataDogLog(
            message=str(message),
            tags=self._config.tags,
            source=self._config.source,
            host=self._config.hostname or "",
            service=self._config.service or "",
            level=level.status,
            trace_id=trace_id,
            span_id=span_id,
        )
        try:
            self._logs.try_send(record)
        except ChannelError as exc:
            offer_selflog(self._selflog, str(exc))

    def debug(self, message: object, **ids: str) -> None:
        self.log(message, DataDogLogLevel.DEBUG, **ids)

    def info(self, message: object, **ids: str) -> None:
        self.log(message, DataDogLogLevel.INFO, **ids)

    def notice(self, message: object, **ids: str) -> None:
        self.log(message, DataDogLogLevel.NOTICE, **ids)

    def warning(self, message: object, **ids: str) -> None:
        self.log(message, DataDogLogLevel.WARNING, **ids)

    def error(self, message: object, **ids: str) -> None:
        self.log(message, DataDogLogLevel.ERROR, **ids)

    def critical(self, message: object, **ids: str) -> None:
        self.log(message, DataDogLogLevel.CRITICAL, **ids)

    def alert(self, message: object, **ids: str) -> None:
        self.log(message, DataDogLogLevel.ALERT, **ids)

    def emergency(self, message: object, **ids: str) -> None:
        self.log(message, DataDogLogLevel.EMERGENCY, **ids)

    def close(self, timeout: float | None = None) -> None:
        """Close the producer channel and, in blocking mode, join the dispatcher.

        Dropping the façade without calling this has the same effect, with no
        join timeout.

        A join exceeding ``timeout`` is logged and otherwise ignored; the
        dispatcher keeps draining in the background.
        """

        if self._closed:
            return
        self._closed = True
        self._finalizer.detach()
        _shutdown(self._logs, self._dispatcher, timeout)

    def __enter__(self) -> "DataDogLogger":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


__all__ = ["SELF_LOG_CAPACITY", "DataDogLogger"]
