"""HTTP intake clients built on :mod:`httpx`.

Purpose
-------
Ship batches as a JSON array to the Datadog HTTP intake, authenticated with
the ``DD-API-KEY`` header.

Contents
--------
* :func:`validate_intake_url` - construction-time URL check.
* :class:`HttpDataDogClient` - synchronous client for the blocking dispatcher.
* :class:`AsyncHttpDataDogClient` - asynchronous client for the non-blocking
  dispatcher.

System Role
-----------
Delivery capability adapters. Transport errors and non-2xx responses raise
:class:`DeliveryError`; the dispatcher turns them into self-log text.
"""

from __future__ import annotations

from collections.abc import Sequence

import httpx

from lib_log_datadog.application.ports.client import AsyncDataDogClient, DataDogClient
from lib_log_datadog.domain.config import DataDogConfig
from lib_log_datadog.domain.record import DataDogLog, encode_batch
from lib_log_datadog.errors import DeliveryError, UrlParsingError

API_KEY_HEADER = "DD-API-KEY"


def validate_intake_url(url: str) -> httpx.URL:
    """Parse ``url`` and require an absolute ``http``/``https`` address."""

    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise UrlParsingError(f"invalid intake url {url!r}: {exc}") from exc
    if parsed.scheme not in {"http", "https"}:
        raise UrlParsingError(f"intake url {url!r} must use http or https")
    if not parsed.host:
        raise UrlParsingError(f"intake url {url!r} has no host")
    return parsed


def _headers(api_key: str) -> dict[str, str]:
    return {API_KEY_HEADER: api_key, "Content-Type": "application/json"}


def _body(logs: Sequence[DataDogLog]) -> bytes:
    # Lone surrogates from surrogateescape-decoded text are sent as "?".
    return encode_batch(logs).encode("utf-8", errors="replace")


def _check_response(response: httpx.Response, size: int) -> None:
    if response.is_success:
        return
    snippet = response.text[:256]
    raise DeliveryError(f"intake rejected {size} logs with HTTP {response.status_code}: {snippet}")


class HttpDataDogClient(DataDogClient):
    """POST batches with a pooled :class:`httpx.Client`."""

    def __init__(self, config: DataDogConfig, api_key: str, *, client: httpx.Client | None = None) -> None:
        self._url = validate_intake_url(config.http.url)
        self._headers = _headers(api_key)
        self._client = client or httpx.Client(timeout=config.http.timeout)

    @property
    def url(self) -> httpx.URL:
        return self._url

    def send(self, logs: Sequence[DataDogLog]) -> None:
        body = _body(logs)
        try:
            response = self._client.post(self._url, content=body, headers=self._headers)
        except httpx.HTTPError as exc:
            raise DeliveryError(f"HTTP request to {self._url} failed: {exc}") from exc
        _check_response(response, len(logs))

    def close(self) -> None:
        self._client.close()


class AsyncHttpDataDogClient(AsyncDataDogClient):
    """POST batches with a pooled :class:`httpx.AsyncClient`."""

    def __init__(self, config: DataDogConfig, api_key: str, *, client: httpx.AsyncClient | None = None) -> None:
        self._url = validate_intake_url(config.http.url)
        self._headers = _headers(api_key)
        self._client = client or httpx.AsyncClient(timeout=config.http.timeout)

    @property
    def url(self) -> httpx.URL:
        return self._url

    async def send_async(self, logs: Sequence[DataDogLog]) -> None:
        body = _body(logs)
        try:
            response = await self._client.post(self._url, content=body, headers=self._headers)
        except httpx.HTTPError as exc:
            raise DeliveryError(f"HTTP request to {self._url} failed: {exc}") from exc
        _check_response(response, len(logs))

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = [
    "API_KEY_HEADER",
    "AsyncHttpDataDogClient",
    "HttpDataDogClient",
    "validate_intake_url",
]
