from __future__ import annotations

import json
from dataclasses import FrozenInstanceError

import pytest

from lib_log_datadog.domain.record import DataDogLog, encode_batch
from lib_log_datadog.errors import MessageSerializationError


def _log(**changes: object) -> DataDogLog:
    values: dict[str, object] = {
        "message": "boom",
        "tags": "env:test,team:core",
        "source": "pytest",
        "host": "host-1",
        "service": "svc",
        "level": "error",
        "trace_id": "123",
        "span_id": "456",
    }
    values.update(changes)
    return DataDogLog(**values)  # type: ignore[arg-type]


def test_to_dict_uses_intake_field_names() -> None:
    assert _log().to_dict() == {
        "message": "boom",
        "ddtags": "env:test,team:core",
        "ddsource": "pytest",
        "host": "host-1",
        "service": "svc",
        "level": "error",
        "dd.trace_id": "123",
        "dd.span_id": "456",
    }


def test_missing_tags_serialise_as_null() -> None:
    payload = json.loads(_log(tags=None).to_json())
    assert payload["ddtags"] is None


def test_from_dict_restores_record() -> None:
    record = _log()
    assert DataDogLog.from_dict(record.to_dict()) == record


def test_record_is_immutable() -> None:
    record = _log()
    with pytest.raises(FrozenInstanceError):
        record.message = "changed"  # type: ignore[misc]


def test_encode_batch_preserves_order_and_unicode() -> None:
    body = encode_batch([_log(message="first"), _log(message="zweite ü")])
    payload = json.loads(body)
    assert [item["message"] for item in payload] == ["first", "zweite ü"]
    assert "ü" in body


def test_encode_batch_wraps_serialisation_failures() -> None:
    with pytest.raises(MessageSerializationError):
        encode_batch([_log(message=object())])
