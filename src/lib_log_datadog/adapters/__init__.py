"""Adapters implementing channels, dispatchers, clients and integrations."""

from __future__ import annotations

from .blocking import BlockingDispatcher
from .channel import MessageChannel
from .console import RichConsoleClient
from .http import AsyncHttpDataDogClient, HttpDataDogClient
from .logging_handler import DataDogHandler, init_with_logging
from .nonblocking import logger_task, schedule
from .tcp import AsyncTcpDataDogClient, TcpDataDogClient

__all__ = [
    "AsyncHttpDataDogClient",
    "AsyncTcpDataDogClient",
    "BlockingDispatcher",
    "DataDogHandler",
    "HttpDataDogClient",
    "MessageChannel",
    "RichConsoleClient",
    "TcpDataDogClient",
    "init_with_logging",
    "logger_task",
    "schedule",
]
