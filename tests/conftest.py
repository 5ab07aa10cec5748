from __future__ import annotations

import os
from io import StringIO
from typing import Iterator

import pytest
from rich.console import Console

from lib_log_datadog import config as log_config
from lib_log_datadog.domain.config import DataDogConfig

_ENV_PREFIXES = (log_config.ENV_PREFIX, log_config.DOTENV_ENV_VAR)


@pytest.fixture
def record_console() -> Console:
    return Console(file=StringIO(), record=True, width=160, color_system=None)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Hide DATADOG_* variables of the developer machine from every test."""

    for name in list(os.environ):
        if name.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(name, raising=False)
    log_config._reset_dotenv_state_for_testing()
    yield
    log_config._reset_dotenv_state_for_testing()


@pytest.fixture
def config() -> DataDogConfig:
    return DataDogConfig(tags="env:test", service="svc", hostname="host-1", source="pytest")
