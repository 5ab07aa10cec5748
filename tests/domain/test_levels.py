from __future__ import annotations

import logging

import pytest

from lib_log_datadog.domain.levels import DataDogLogLevel


@pytest.mark.parametrize(
    "name, expected",
    [
        ("debug", DataDogLogLevel.DEBUG),
        ("INFO", DataDogLogLevel.INFO),
        ("Notice", DataDogLogLevel.NOTICE),
        ("warning", DataDogLogLevel.WARNING),
        ("warn", DataDogLogLevel.WARNING),
        ("error", DataDogLogLevel.ERROR),
        ("CRITICAL", DataDogLogLevel.CRITICAL),
        (" alert ", DataDogLogLevel.ALERT),
        ("emergency", DataDogLogLevel.EMERGENCY),
    ],
)
def test_from_name_accepts_case_insensitive_matches(name: str, expected: DataDogLogLevel) -> None:
    assert DataDogLogLevel.from_name(name) is expected


def test_from_name_rejects_unknown_level() -> None:
    with pytest.raises(ValueError, match="Unknown log level"):
        DataDogLogLevel.from_name("verbose")


def test_status_is_the_lowercase_wire_value() -> None:
    assert DataDogLogLevel.WARNING.status == "warning"
    assert str(DataDogLogLevel.EMERGENCY) == "emergency"


@pytest.mark.parametrize(
    "level, expected",
    [
        (logging.DEBUG, DataDogLogLevel.DEBUG),
        (5, DataDogLogLevel.DEBUG),
        (logging.INFO, DataDogLogLevel.INFO),
        (25, DataDogLogLevel.INFO),
        (logging.WARNING, DataDogLogLevel.WARNING),
        (logging.ERROR, DataDogLogLevel.ERROR),
        (logging.CRITICAL, DataDogLogLevel.CRITICAL),
        (60, DataDogLogLevel.CRITICAL),
    ],
)
def test_from_python_level_rounds_down(level: int, expected: DataDogLogLevel) -> None:
    assert DataDogLogLevel.from_python_level(level) is expected


@pytest.mark.parametrize("level", list(DataDogLogLevel))
def test_to_python_level_round_trips_to_a_comparable_severity(level: DataDogLogLevel) -> None:
    python_level = level.to_python_level()
    assert python_level in {logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL}
    assert DataDogLogLevel.from_python_level(python_level).to_python_level() == python_level
