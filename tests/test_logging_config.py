# tests/test_logging_config.py

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import pytest
import structlog

from taskreward import logging_config
from taskreward.settings import settings


@pytest.fixture()
def recorded_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[dict[str, Any]]:
    """Keep the real structlog config untouched so capture_logs keeps working elsewhere."""
    recorded: dict[str, Any] = {}
    monkeypatch.setattr(structlog, "configure", lambda **kwargs: recorded.update(kwargs))
    yield recorded
    structlog.contextvars.clear_contextvars()


def test_binds_service_context(recorded_config) -> None:
    logging_config.configure_logging()

    assert structlog.contextvars.get_contextvars() == {"app": settings.app_name, "env": settings.env}
    assert recorded_config["processors"][0] is structlog.contextvars.merge_contextvars


def test_json_format_renders_json(recorded_config) -> None:
    logging_config.configure_logging(log_level="debug", log_format="json")

    assert isinstance(recorded_config["processors"][-1], structlog.processors.JSONRenderer)


def test_console_format_is_default_renderer(recorded_config) -> None:
    logging_config.configure_logging(log_format="console")

    assert isinstance(recorded_config["processors"][-1], structlog.dev.ConsoleRenderer)
