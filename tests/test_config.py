"""Tests for config helpers and startup secret checks."""

from __future__ import annotations

import logging

import pytest

from app import create_app
from config import CompletionSettings, TestingConfig, validate_required_secrets


def test_settings_from_config() -> None:
    settings = CompletionSettings.from_config({
        "LLM_API_KEY": "abc",
        "LLM_BASE_URL": "http://llm.invalid/v1",
        "LLM_MODEL": "m",
        "LLM_TIMEOUT_SECONDS": "30",
        "LLM_MAX_RETRIES": 1,
    })
    assert settings == CompletionSettings("abc", "http://llm.invalid/v1", "m", 30.0, 1)
    assert settings.configured


def test_missing_key_in_dev_logs_and_continues(monkeypatch: pytest.MonkeyPatch, caplog) -> None:
    monkeypatch.delenv("ENV", raising=False)
    with caplog.at_level(logging.ERROR, logger="config"):
        validate_required_secrets({"LLM_API_KEY": ""})
    assert "OPENROUTER_API_KEY" in caplog.text


def test_missing_key_in_prod_refuses_to_start(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENV", "prod")
    with pytest.raises(RuntimeError):
        validate_required_secrets({"LLM_API_KEY": ""})


def test_degraded_app_reports_unconfigured_completion(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ENV", raising=False)

    class NoKeyConfig(TestingConfig):
        LLM_API_KEY = ""

    client = create_app(NoKeyConfig).test_client()
    assert client.get("/health").get_json()["completion_configured"] is False
