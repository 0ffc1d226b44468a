from __future__ import annotations

import pytest

from strategy_pipeline import logging as pipeline_logging


def test_service_context_is_added(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STRATEGY_PIPELINE_ENVIRONMENT", "staging")

    event = pipeline_logging.add_service_context(None, "info", {"event": "stage_started"})

    assert event["service"] == "strategy-pipeline"
    assert event["environment"] == "staging"


def test_existing_context_is_not_overwritten() -> None:
    event = pipeline_logging.add_service_context(None, "info", {"event": "x", "service": "custom"})

    assert event["service"] == "custom"


def test_configure_logging_is_idempotent(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[dict] = []
    monkeypatch.setattr(pipeline_logging, "_configured", False)
    monkeypatch.setattr(pipeline_logging.structlog, "configure", lambda **kwargs: calls.append(kwargs))

    pipeline_logging.configure_logging()
    pipeline_logging.configure_logging()
    pipeline_logging.configure_logging(force=True)

    assert len(calls) == 2
