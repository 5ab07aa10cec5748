"""Bridge from the standard :mod:`logging` module to a :class:`DataDogLogger`.

Purpose
-------
Let applications keep using ``logging.getLogger(...)`` while records are
shipped by the dispatch engine.

Contents
--------
* :class:`DataDogHandler` - ``logging.Handler`` forwarding formatted records.
* :func:`init_with_logging` - attach a handler to a stdlib logger.

System Role
-----------
Optional integration. Records emitted by this package's own loggers, and any
record emitted while a dispatch loop is delivering (transport request logs
such as ``httpx``), are ignored so delivery cannot feed back into the channel.
"""

from __future__ import annotations

import logging
from typing import Protocol

from lib_log_datadog.application.use_cases.dispatch import is_dispatching
from lib_log_datadog.domain.levels import DataDogLogLevel
from lib_log_datadog.errors import LogIntegrationError

_OWN_LOGGER_PREFIX = "lib_log_datadog"


class _LogSink(Protocol):
    def log(self, message: object, level: DataDogLogLevel, *, trace_id: str = "", span_id: str = "") -> None: ...


class DataDogHandler(logging.Handler):
    """Forward stdlib records to ``sink.log`` with the mapped Datadog level.

    ``dd.trace_id`` / ``dd.span_id`` are taken from the record attributes of
    the same name (as injected by tracer log-correlation) when present.
    """

    def __init__(self, sink: _LogSink, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == _OWN_LOGGER_PREFIX or record.name.startswith(_OWN_LOGGER_PREFIX + "."):
            return
        if is_dispatching():
            return
        try:
            message = self.format(record)
            self._sink.log(
                message,
                DataDogLogLevel.from_python_level(record.levelno),
                trace_id=str(getattr(record, "dd.trace_id", "") or ""),
                span_id=str(getattr(record, "dd.span_id", "") or ""),
            )
        except Exception:  # noqa: BLE001
            self.handleError(record)


def init_with_logging(
    sink: _LogSink,
    level: int = logging.INFO,
    target: logging.Logger | None = None,
) -> DataDogHandler:
    """Attach a :class:`DataDogHandler` for ``sink`` to ``target`` (root by default).

    Raises
    ------
    LogIntegrationError
        When ``level`` is not a valid logging level.
    """

    logger = target if target is not None else logging.getLogger()
    try:
        handler = DataDogHandler(sink, level)
    except (TypeError, ValueError) as exc:
        raise LogIntegrationError(f"cannot create Datadog handler: {exc}") from exc
    logger.addHandler(handler)
    if logger.level == logging.NOTSET or logger.level > level:
        logger.setLevel(level)
    return handler


__all__ = ["DataDogHandler", "init_with_logging"]
