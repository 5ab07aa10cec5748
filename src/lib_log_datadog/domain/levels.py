"""Datadog severity levels.

Purpose
-------
Offer a domain-specific representation of the statuses Datadog understands so
callers never hand-craft the ``level`` string of a record.

Contents
--------
* :class:`DataDogLogLevel` enum with conversion helpers.
* ``_PYTHON_LEVEL_TABLE`` constant mapping levels to :mod:`logging` numbers.

System Role
-----------
Used by the logger façade when building records and by the
:mod:`logging` integration to translate stdlib records.
"""

from __future__ import annotations

import logging
from enum import Enum


class DataDogLogLevel(Enum):
    """Syslog-style severities accepted by the Datadog intake."""

    EMERGENCY = "emergency"
    ALERT = "alert"
    CRITICAL = "critical"
    ERROR = "error"
    WARNING = "warning"
    NOTICE = "notice"
    INFO = "info"
    DEBUG = "debug"

    def __str__(self) -> str:
        return self.value

    @property
    def status(self) -> str:
        """Return the status string written to the ``level`` wire field."""

        return self.value

    def to_python_level(self) -> int:
        """Return the closest :mod:`logging` constant for this level."""

        return _PYTHON_LEVEL_TABLE[self]

    @classmethod
    def from_name(cls, name: str) -> "DataDogLogLevel":
        normalized = name.strip().upper()
        if normalized == "WARN":
            normalized = "WARNING"
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_python_level(cls, level: int) -> "DataDogLogLevel":
        """Translate a stdlib logging level integer into :class:`DataDogLogLevel`.

        Levels between the standard constants round down, so custom levels such
        as ``25`` map to :attr:`INFO`.
        """

        if level >= logging.CRITICAL:
            return cls.CRITICAL
        if level >= logging.ERROR:
            return cls.ERROR
        if level >= logging.WARNING:
            return cls.WARNING
        if level >= logging.INFO:
            return cls.INFO
        return cls.DEBUG


_PYTHON_LEVEL_TABLE = {
    DataDogLogLevel.EMERGENCY: logging.CRITICAL,
    DataDogLogLevel.ALERT: logging.CRITICAL,
    DataDogLogLevel.CRITICAL: logging.CRITICAL,
    DataDogLogLevel.ERROR: logging.ERROR,
    DataDogLogLevel.WARNING: logging.WARNING,
    DataDogLogLevel.NOTICE: logging.INFO,
    DataDogLogLevel.INFO: logging.INFO,
    DataDogLogLevel.DEBUG: logging.DEBUG,
}


__all__ = ["DataDogLogLevel"]
