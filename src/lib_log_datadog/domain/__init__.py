"""Domain entities and value objects used by the dispatch engine."""

from __future__ import annotations

from .batching import FLUSH_THRESHOLD, BatchPolicy, Step
from .config import DataDogConfig, HttpConfig, TcpConfig
from .levels import DataDogLogLevel
from .record import DataDogLog, encode_batch

__all__ = [
    "FLUSH_THRESHOLD",
    "BatchPolicy",
    "DataDogConfig",
    "DataDogLog",
    "DataDogLogLevel",
    "HttpConfig",
    "Step",
    "TcpConfig",
    "encode_batch",
]
