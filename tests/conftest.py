"""Shared fixtures for solarcommon tests."""

from __future__ import annotations

import pytest
from loguru import logger

from solarcommon.codec.json_utils import default_object_mapper
from solarcommon.config import get_settings


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate tests from SOLARCOMMON_* variables in the developer's environment."""
    import os

    for key in list(os.environ):
        if key.startswith("SOLARCOMMON_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    default_object_mapper.cache_clear()
    yield
    get_settings.cache_clear()
    default_object_mapper.cache_clear()


@pytest.fixture()
def log_messages():
    """Capture loguru records as ``(level, message)`` tuples."""
    records: list[tuple[str, str]] = []
    handler_id = logger.add(
        lambda m: records.append((m.record["level"].name, m.record["message"])),
        level="TRACE",
    )
    yield records
    logger.remove(handler_id)
