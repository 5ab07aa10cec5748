"""Runtime façade wiring channels, dispatchers and clients together."""

from __future__ import annotations

from .logger import SELF_LOG_CAPACITY, DataDogLogger

__all__ = ["SELF_LOG_CAPACITY", "DataDogLogger"]
