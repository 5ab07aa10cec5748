"""Ports describing the boundaries of the dispatch engine."""

from __future__ import annotations

from .channel import ReceiverPort, SenderPort
from .client import AsyncDataDogClient, DataDogClient

__all__ = [
    "AsyncDataDogClient",
    "DataDogClient",
    "ReceiverPort",
    "SenderPort",
]
