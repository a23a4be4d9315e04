# config.py
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping

LOG = logging.getLogger("config")


def _csv_env(name: str, default: str = "") -> list[str]:
    val = os.getenv(name, default)
    # split only if non-empty; strip whitespace
    return [x.strip() for x in val.split(",") if x.strip()] if val else []


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


class BaseConfig:
    DEBUG = False
    TESTING = False
    JSON_SORT_KEYS = False
    # base64 inflates the PDF by ~4/3; keep the body limit generous
    MAX_CONTENT_LENGTH = 50 * 1024 * 1024  # 50 MB
    MAX_RESUME_BYTES = 10 * 1024 * 1024    # 10 MB decoded PDF
    PREFERRED_URL_SCHEME = "https"
    FORCE_HTTPS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # CORS
    CORS_ORIGINS = _csv_env("CORS_ORIGINS", "http://localhost:8080,http://localhost:5173")

    # Completion service (any OpenAI-compatible endpoint)
    LLM_API_KEY = os.getenv("OPENROUTER_API_KEY") or os.getenv("OPENAI_API_KEY") or ""
    LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://openrouter.ai/api/v1")
    LLM_MODEL = os.getenv("LLM_MODEL", "meta-llama/llama-3.3-70b-instruct:free")
    LLM_TIMEOUT_SECONDS = _float_env("LLM_TIMEOUT_SECONDS", 60.0)
    LLM_MAX_RETRIES = _int_env("LLM_MAX_RETRIES", 0)


class DevConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")


class ProdConfig(BaseConfig):
    FORCE_HTTPS = True


class TestingConfig(BaseConfig):
    TESTING = True
    CORS_ORIGINS = ["http://localhost:8080"]
    LLM_API_KEY = "test-key"
    LLM_BASE_URL = "http://llm.invalid/v1"
    LLM_MODEL = "test-model"


@dataclass(frozen=True)
class CompletionSettings:
    api_key: str
    base_url: str
    model: str
    timeout: float = 60.0
    max_retries: int = 0

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "CompletionSettings":
        return cls(
            api_key=config.get("LLM_API_KEY") or "",
            base_url=config.get("LLM_BASE_URL") or BaseConfig.LLM_BASE_URL,
            model=config.get("LLM_MODEL") or BaseConfig.LLM_MODEL,
            timeout=float(config.get("LLM_TIMEOUT_SECONDS", 60.0)),
            max_retries=int(config.get("LLM_MAX_RETRIES", 0)),
        )


def validate_required_secrets(config: Mapping[str, Any]) -> None:
    if config.get("LLM_API_KEY"):
        return
    if os.getenv("ENV") == "prod":
        raise RuntimeError("OPENROUTER_API_KEY or OPENAI_API_KEY must be set in production")
    # dev: start degraded, /api calls will report the missing credential
    LOG.error("OPENROUTER_API_KEY / OPENAI_API_KEY is not set; resume analysis will fail until it is.")
