"""Domain record describing one log entry bound for Datadog.

Purpose
-------
Provide an immutable, serialisable representation of a log entry together with
the routing metadata the intake expects.

Contents
--------
* :class:`DataDogLog` dataclass with wire (de)serialisation helpers.
* ``_WIRE_NAMES`` constant mapping attributes to the fixed intake keys.

System Role
-----------
Built by the logger façade for every ``log()`` call, moved through the channel
and consumed by the delivery clients. Field names on the wire are fixed for
backend compatibility and must not change.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from lib_log_datadog.errors import MessageSerializationError


# Attribute name -> key expected by the Datadog intake.
_WIRE_NAMES = {
    "message": "message",
    "tags": "ddtags",
    "source": "ddsource",
    "host": "host",
    "service": "service",
    "level": "level",
    "trace_id": "dd.trace_id",
    "span_id": "dd.span_id",
}


@dataclass(slots=True, frozen=True)
class DataDogLog:
    """Immutable log entry shipped to Datadog.

    Attributes
    ----------
    message:
        Rendered message passed by the caller.
    tags:
        Comma separated ``key:value`` tags, ``None`` when not configured.
    source:
        Integration name shown as ``ddsource``.
    host:
        Host that produced the entry; empty when not configured.
    service:
        Service that produced the entry; empty when not configured.
    level:
        Datadog status string (see :class:`DataDogLogLevel`).
    trace_id, span_id:
        Correlation identifiers of the active trace, empty when unknown.
    """

    message: str
    tags: str | None
    source: str
    host: str
    service: str
    level: str
    trace_id: str = ""
    span_id: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the record keyed by the intake field names."""

        return {wire: getattr(self, attribute) for attribute, wire in _WIRE_NAMES.items()}

    def to_json(self) -> str:
        """Serialize the record to a compact JSON object."""

        return encode_batch([self], single=True)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "DataDogLog":
        """Reconstruct a record from :meth:`to_dict` output."""

        return cls(
            message=payload["message"],
            tags=payload.get("ddtags"),
            source=payload["ddsource"],
            host=payload.get("host", ""),
            service=payload.get("service", ""),
            level=payload["level"],
            trace_id=payload.get("dd.trace_id", ""),
            span_id=payload.get("dd.span_id", ""),
        )


def encode_batch(logs: Iterable[DataDogLog], *, single: bool = False) -> str:
    """Encode ``logs`` as the JSON array posted to the HTTP intake.

    With ``single=True`` exactly one record is expected and the bare object is
    returned, which is the framing used by the TCP intake.
    """

    payload: Any = [log.to_dict() for log in logs]
    if single:
        (payload,) = payload
    try:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (TypeError, ValueError) as exc:
        raise MessageSerializationError(str(exc)) from exc


__all__ = ["DataDogLog", "encode_batch"]
