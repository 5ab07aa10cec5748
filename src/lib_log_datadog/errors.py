"""Exception hierarchy raised at the edges of the logger.

Construction problems (bad intake URL, logging integration) propagate to the
caller. Delivery problems are raised by clients and converted to text by the
dispatcher; they never reach code calling :meth:`DataDogLogger.log`.
"""

from __future__ import annotations


class DataDogLoggerError(Exception):
    """Base class for every error raised by :mod:`lib_log_datadog`."""


class UrlParsingError(DataDogLoggerError, ValueError):
    """The configured intake URL cannot be used."""


class MessageSerializationError(DataDogLoggerError):
    """A record could not be encoded as JSON."""


class DeliveryError(DataDogLoggerError):
    """A batch could not be shipped to the intake."""


class LogIntegrationError(DataDogLoggerError):
    """Attaching the handler to :mod:`logging` failed."""


class ChannelError(DataDogLoggerError):
    """Base class for non-blocking channel operations that cannot proceed."""

    reason = "channel error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.reason)


class ChannelFull(ChannelError):
    reason = "sending on a full channel"


class ChannelClosed(ChannelError):
    reason = "sending on a closed channel"


class ChannelEmpty(ChannelError):
    reason = "receiving on an empty channel"


class ChannelDisconnected(ChannelError):
    reason = "receiving on an empty and closed channel"


__all__ = [
    "ChannelClosed",
    "ChannelDisconnected",
    "ChannelEmpty",
    "ChannelError",
    "ChannelFull",
    "DataDogLoggerError",
    "DeliveryError",
    "LogIntegrationError",
    "MessageSerializationError",
    "UrlParsingError",
]
