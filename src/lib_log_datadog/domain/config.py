"""Immutable configuration records for the logger and its transports."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


DEFAULT_HTTP_URL = "https://http-intake.logs.datadoghq.com/v1/input"
DEFAULT_TCP_HOST = "intake.logs.datadoghq.com"
DEFAULT_TCP_PORT = 10516


@dataclass(slots=True, frozen=True)
class HttpConfig:
    """Settings for the HTTP intake clients."""

    url: str = DEFAULT_HTTP_URL
    timeout: float = 10.0


@dataclass(slots=True, frozen=True)
class TcpConfig:
    """Settings for the TCP intake clients.

    ``use_tls`` wraps the socket with the default SSL context; the public
    intake on port 10516 requires it.
    """

    host: str = DEFAULT_TCP_HOST
    port: int = DEFAULT_TCP_PORT
    use_tls: bool = True
    timeout: float = 10.0

    def __post_init__(self) -> None:
        if not self.host:
            raise ValueError("tcp host must not be empty")
        if self.port <= 0:
            raise ValueError("tcp port must be positive")


@dataclass(slots=True, frozen=True)
class DataDogConfig:
    """Defaults merged into every record plus dispatcher settings.

    Attributes
    ----------
    tags:
        Value of ``ddtags`` for every record; ``None`` omits the tags.
    service:
        Service name; ``None`` is sent as an empty string.
    hostname:
        Host name; ``None`` is sent as an empty string.
    source:
        Value of ``ddsource``.
    enable_self_log:
        Allocate the bounded diagnostic channel exposed by
        :meth:`DataDogLogger.selflog`.
    messages_channel_capacity:
        Capacity of the producer channel; ``None`` keeps it unbounded.
    http, tcp:
        Transport settings consumed by the respective clients.
    """

    tags: str | None = None
    service: str | None = None
    hostname: str | None = None
    source: str = "python"
    enable_self_log: bool = False
    messages_channel_capacity: int | None = None
    http: HttpConfig = field(default_factory=HttpConfig)
    tcp: TcpConfig = field(default_factory=TcpConfig)

    def __post_init__(self) -> None:
        capacity = self.messages_channel_capacity
        if capacity is not None and capacity <= 0:
            raise ValueError("messages_channel_capacity must be positive")

    def replace(self, **changes: Any) -> "DataDogConfig":
        """Return a copied configuration with ``changes`` applied."""

        return replace(self, **changes)


__all__ = [
    "DEFAULT_HTTP_URL",
    "DEFAULT_TCP_HOST",
    "DEFAULT_TCP_PORT",
    "DataDogConfig",
    "HttpConfig",
    "TcpConfig",
]
