"""Non-blocking, batched log shipping to Datadog.

``DataDogLogger.log`` only enqueues a record; a background dispatcher (a
thread in blocking mode, an asyncio task in non-blocking mode) batches records
and hands them to a delivery client. Failures are reported on the optional
self-log channel instead of reaching the caller.
"""

from __future__ import annotations

from .adapters import (
    AsyncHttpDataDogClient,
    AsyncTcpDataDogClient,
    DataDogHandler,
    HttpDataDogClient,
    MessageChannel,
    RichConsoleClient,
    TcpDataDogClient,
    init_with_logging,
)
from .application.ports import AsyncDataDogClient, DataDogClient
from .config import enable_dotenv, load_config
from .domain import FLUSH_THRESHOLD, DataDogConfig, DataDogLog, DataDogLogLevel, HttpConfig, TcpConfig
from .errors import (
    ChannelClosed,
    ChannelError,
    ChannelFull,
    DataDogLoggerError,
    DeliveryError,
    LogIntegrationError,
    MessageSerializationError,
    UrlParsingError,
)
from .lib_log_datadog import build_async_client, build_client, summary_info
from .runtime import SELF_LOG_CAPACITY, DataDogLogger

__all__ = [
    "FLUSH_THRESHOLD",
    "SELF_LOG_CAPACITY",
    "AsyncDataDogClient",
    "AsyncHttpDataDogClient",
    "AsyncTcpDataDogClient",
    "ChannelClosed",
    "ChannelError",
    "ChannelFull",
    "DataDogClient",
    "DataDogConfig",
    "DataDogHandler",
    "DataDogLog",
    "DataDogLogLevel",
    "DataDogLogger",
    "DataDogLoggerError",
    "DeliveryError",
    "HttpConfig",
    "HttpDataDogClient",
    "LogIntegrationError",
    "MessageChannel",
    "MessageSerializationError",
    "RichConsoleClient",
    "TcpConfig",
    "TcpDataDogClient",
    "UrlParsingError",
    "build_async_client",
    "build_client",
    "enable_dotenv",
    "init_with_logging",
    "load_config",
    "summary_info",
]
