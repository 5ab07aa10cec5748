"""Configuration loading from keyword arguments, the environment and ``.env``.

Purpose
-------
Translate deployment settings into a :class:`DataDogConfig` so the CLI and
host applications agree on variable names and parsing rules.

Contents
--------
* :func:`load_config` - merge overrides over ``DATADOG_*`` variables.
* :func:`enable_dotenv` / :func:`should_use_dotenv` - opt-in ``.env`` support.
* Parsing helpers for booleans, capacities and ``HOST:PORT`` endpoints.

System Role
-----------
Keyword arguments win over environment variables, which win over the
dataclass defaults. Existing environment variables are never overridden by a
``.env`` file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import find_dotenv, load_dotenv

from lib_log_datadog.domain.config import DataDogConfig, HttpConfig, TcpConfig

DOTENV_ENV_VAR = "LIB_LOG_DATADOG_USE_DOTENV"
ENV_PREFIX = "DATADOG_"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

_DOTENV_LOADED = False
_DOTENV_PATH: Path | None = None


def _env(name: str) -> str | None:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or not value.strip():
        return None
    return value.strip()


def _env_bool(name: str, default: bool) -> bool:
    """Return the boolean value of ``DATADOG_<name>`` with fallback.

    Raises ``ValueError`` for spellings that are neither truthy nor falsy.

    Examples
    --------
    >>> _ = os.environ.pop('DATADOG_EXAMPLE_BOOL', None)
    >>> _env_bool('EXAMPLE_BOOL', default=True)
    True
    >>> os.environ['DATADOG_EXAMPLE_BOOL'] = '0'
    >>> _env_bool('EXAMPLE_BOOL', default=True)
    False
    >>> _ = os.environ.pop('DATADOG_EXAMPLE_BOOL')
    """

    value = _env(name)
    if value is None:
        return default
    normalized = value.lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ValueError(f"{ENV_PREFIX}{name} must be one of {sorted(_TRUTHY | _FALSY)}, got {value!r}")


def _coerce_capacity(value: str | None) -> int | None:
    """Parse a positive channel capacity; ``None`` keeps the channel unbounded."""

    if value is None:
        return None
    try:
        capacity = int(value)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}CHANNEL_CAPACITY must be an integer, got {value!r}") from exc
    if capacity <= 0:
        raise ValueError(f"{ENV_PREFIX}CHANNEL_CAPACITY must be positive, got {capacity}")
    return capacity


def _coerce_tcp_endpoint(value: str | None, fallback: TcpConfig) -> TcpConfig:
    """Parse ``HOST:PORT`` into a :class:`TcpConfig` keeping the fallback's other settings."""

    use_tls = _env_bool("TCP_TLS", fallback.use_tls)
    if value is None:
        return TcpConfig(host=fallback.host, port=fallback.port, use_tls=use_tls, timeout=fallback.timeout)
    host, sep, port_text = value.rpartition(":")
    if not sep or not host:
        raise ValueError(f"{ENV_PREFIX}TCP_ENDPOINT must be HOST:PORT, got {value!r}")
    try:
        port = int(port_text)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}TCP_ENDPOINT port must be an integer, got {port_text!r}") from exc
    if port <= 0:
        raise ValueError(f"{ENV_PREFIX}TCP_ENDPOINT port must be positive, got {port}")
    return TcpConfig(host=host, port=port, use_tls=use_tls, timeout=fallback.timeout)


def load_config(**overrides: Any) -> DataDogConfig:
    """Build a :class:`DataDogConfig` from ``overrides`` and ``DATADOG_*`` variables.

    Recognised variables: ``DATADOG_TAGS``, ``DATADOG_SERVICE``,
    ``DATADOG_HOSTNAME``, ``DATADOG_SOURCE``, ``DATADOG_ENABLE_SELF_LOG``,
    ``DATADOG_CHANNEL_CAPACITY``, ``DATADOG_HTTP_URL``,
    ``DATADOG_TCP_ENDPOINT`` and ``DATADOG_TCP_TLS``.

    Raises
    ------
    ValueError
        When a variable cannot be parsed or an override names an unknown field.
    """

    defaults = DataDogConfig()
    http_url = _env("HTTP_URL")
    values: dict[str, Any] = {
        "tags": _env("TAGS"),
        "service": _env("SERVICE"),
        "hostname": _env("HOSTNAME"),
        "source": _env("SOURCE") or defaults.source,
        "enable_self_log": _env_bool("ENABLE_SELF_LOG", defaults.enable_self_log),
        "messages_channel_capacity": _coerce_capacity(_env("CHANNEL_CAPACITY")),
        "http": HttpConfig(url=http_url) if http_url else defaults.http,
        "tcp": _coerce_tcp_endpoint(_env("TCP_ENDPOINT"), defaults.tcp),
    }
    unknown = set(overrides) - set(values)
    if unknown:
        raise ValueError(f"Unknown configuration fields: {', '.join(sorted(unknown))}")
    values.update(overrides)
    return DataDogConfig(**values)


def should_use_dotenv(*, explicit: bool | None, env_value: str | None) -> bool:
    """Decide whether ``.env`` loading is requested.

    An explicit CLI flag wins; otherwise ``LIB_LOG_DATADOG_USE_DOTENV`` is
    interpreted with the usual truthy spellings.

    Examples
    --------
    >>> should_use_dotenv(explicit=None, env_value="yes")
    True
    >>> should_use_dotenv(explicit=False, env_value="1")
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    normalized = env_value.strip().lower()
    if normalized in _FALSY:
        return False
    return normalized in _TRUTHY


def enable_dotenv(search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` (walking up from ``search_from`` or the cwd).

    Returns the resolved path of the loaded file or ``None`` when no file was
    found. Repeated calls are no-ops returning the first result.
    """

    global _DOTENV_LOADED, _DOTENV_PATH
    if _DOTENV_LOADED:
        return _DOTENV_PATH
    if search_from is not None:
        candidate = _find_upwards(search_from.resolve())
    else:
        found = find_dotenv(usecwd=True)
        candidate = Path(found).resolve() if found else None
    if candidate is not None:
        load_dotenv(candidate, override=False)
    _DOTENV_LOADED = True
    _DOTENV_PATH = candidate
    return candidate


def _find_upwards(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def _reset_dotenv_state_for_testing() -> None:
    global _DOTENV_LOADED, _DOTENV_PATH
    _DOTENV_LOADED = False
    _DOTENV_PATH = None


__all__ = [
    "DOTENV_ENV_VAR",
    "ENV_PREFIX",
    "enable_dotenv",
    "load_config",
    "should_use_dotenv",
]
