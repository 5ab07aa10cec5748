"""TCP intake clients writing one API-key-prefixed JSON line per record.

The connection is opened lazily, kept for subsequent batches and discarded
after any I/O error so the next batch reconnects.
"""

from __future__ import annotations

import asyncio
import logging
import socket
import ssl
from collections.abc import Sequence

from lib_log_datadog.application.ports.client import AsyncDataDogClient, DataDogClient
from lib_log_datadog.domain.config import DataDogConfig, TcpConfig
from lib_log_datadog.domain.record import DataDogLog
from lib_log_datadog.errors import DeliveryError

LOGGER = logging.getLogger(__name__)


def frame_batch(api_key: str, logs: Sequence[DataDogLog]) -> bytes:
    """Return the newline-delimited frames for ``logs``.

    Characters UTF-8 cannot encode (lone surrogates) are replaced with ``?``.
    """

    return "".join(f"{api_key} {log.to_json()}\n" for log in logs).encode("utf-8", errors="replace")


class TcpDataDogClient(DataDogClient):
    """Blocking socket client; TLS is applied when ``config.tcp.use_tls`` is set."""

    def __init__(self, config: DataDogConfig, api_key: str, *, ssl_context: ssl.SSLContext | None = None) -> None:
        self._tcp: TcpConfig = config.tcp
        self._api_key = api_key
        self._ssl_context = ssl_context
        self._sock: socket.socket | None = None

    def send(self, logs: Sequence[DataDogLog]) -> None:
        payload = frame_batch(self._api_key, logs)
        try:
            self._connection().sendall(payload)
        except OSError as exc:
            self.close()
            raise DeliveryError(f"TCP send to {self._tcp.host}:{self._tcp.port} failed: {exc}") from exc

    def close(self) -> None:
        sock, self._sock = self._sock, None
        if sock is not None:
            sock.close()

    def _connection(self) -> socket.socket:
        if self._sock is not None:
            return self._sock
        sock = socket.create_connection((self._tcp.host, self._tcp.port), timeout=self._tcp.timeout)
        if self._tcp.use_tls:
            context = self._ssl_context or ssl.create_default_context()
            try:
                sock = context.wrap_socket(sock, server_hostname=self._tcp.host)
            except OSError:
                sock.close()
                raise
        self._sock = sock
        return sock


class AsyncTcpDataDogClient(AsyncDataDogClient):
    """:mod:`asyncio` streams client with the same framing as :class:`TcpDataDogClient`."""

    def __init__(self, config: DataDogConfig, api_key: str, *, ssl_context: ssl.SSLContext | None = None) -> None:
        self._tcp = config.tcp
        self._api_key = api_key
        self._ssl_context = ssl_context
        self._writer: asyncio.StreamWriter | None = None

    async def send_async(self, logs: Sequence[DataDogLog]) -> None:
        payload = frame_batch(self._api_key, logs)
        try:
            writer = await self._connection()
            writer.write(payload)
            await writer.drain()
        except (OSError, asyncio.TimeoutError) as exc:
            await self.aclose()
            raise DeliveryError(f"TCP send to {self._tcp.host}:{self._tcp.port} failed: {exc}") from exc

    async def aclose(self) -> None:
        writer, self._writer = self._writer, None
        if writer is None:
            return
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as exc:
            LOGGER.debug("Ignoring error while closing TCP intake stream: %s", exc)

    async def _connection(self) -> asyncio.StreamWriter:
        if self._writer is not None:
            return self._writer
        context: ssl.SSLContext | None = None
        if self._tcp.use_tls:
            context = self._ssl_context or ssl.create_default_context()
        _reader, writer = await asyncio.wait_for(
            asyncio.open_connection(
                self._tcp.host,
                self._tcp.port,
                ssl=context,
                server_hostname=self._tcp.host if context is not None else None,
            ),
            timeout=self._tcp.timeout,
        )
        self._writer = writer
        return writer


__all__ = ["AsyncTcpDataDogClient", "TcpDataDogClient", "frame_batch"]
