"""Transport selection and metadata helpers shared by the CLI and host code.

Purpose
-------
Choose the delivery client for a transport name once, at construction time,
so the dispatchers never branch on transport details.

Contents
--------
* :data:`TRANSPORTS` - supported transport names.
* :func:`build_client` / :func:`build_async_client` - client factories.
* :func:`summary_info` - metadata banner used by ``lib_log_datadog info``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from .adapters.console import RichConsoleClient
from .adapters.http import AsyncHttpDataDogClient, HttpDataDogClient
from .adapters.tcp import AsyncTcpDataDogClient, TcpDataDogClient
from .application.ports.client import AsyncDataDogClient, DataDogClient
from .domain.config import DataDogConfig

_SYNC_FACTORIES: Mapping[str, Callable[[DataDogConfig, str], DataDogClient]] = {
    "http": HttpDataDogClient,
    "tcp": TcpDataDogClient,
    "console": lambda _config, _api_key: RichConsoleClient(),
}

_ASYNC_FACTORIES: Mapping[str, Callable[[DataDogConfig, str], AsyncDataDogClient]] = {
    "http": AsyncHttpDataDogClient,
    "tcp": AsyncTcpDataDogClient,
    "console": lambda _config, _api_key: RichConsoleClient(),
}

TRANSPORTS = tuple(_SYNC_FACTORIES)


def _factory(table: Mapping[str, Callable[[DataDogConfig, str], object]], transport: str) -> Callable[[DataDogConfig, str], object]:
    normalized = transport.strip().lower()
    try:
        return table[normalized]
    except KeyError as exc:
        raise ValueError(f"Unknown transport {transport!r}; expected one of {', '.join(TRANSPORTS)}") from exc


def build_client(transport: str, config: DataDogConfig, api_key: str) -> DataDogClient:
    """Return the synchronous client for ``transport`` (``http``, ``tcp`` or ``console``).

    Raises
    ------
    ValueError
        For unknown transports.
    UrlParsingError
        When the HTTP intake URL is invalid.
    """

    return _factory(_SYNC_FACTORIES, transport)(config, api_key)  # type: ignore[return-value]


def build_async_client(transport: str, config: DataDogConfig, api_key: str) -> AsyncDataDogClient:
    """Asynchronous counterpart of :func:`build_client`."""

    return _factory(_ASYNC_FACTORIES, transport)(config, api_key)  # type: ignore[return-value]


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point.

    Examples
    --------
    >>> banner = summary_info()
    >>> "version" in banner
    True
    """
    from . import __init__conf__

    lines: list[str] = []

    def _capture(text: str) -> None:
        lines.append(text)

    __init__conf__.print_info(writer=_capture)
    return "".join(lines)


__all__ = ["TRANSPORTS", "build_async_client", "build_client", "summary_info"]
