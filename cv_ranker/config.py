"""Environment driven settings for the hosted chat-completion endpoint."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DEPLOYMENT = "gpt-4.1-nano-2"
DEFAULT_API_VERSION = "2025-01-01-preview"
DEFAULT_MAX_TOKENS = 1000
DEFAULT_TEMPERATURE = 0.2
DEFAULT_TIMEOUT = 60.0
DEFAULT_MAX_RETRIES = 2
DEFAULT_LOG_LEVEL = "INFO"


def _env_str(name: str, default: str = "") -> str:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip() or default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring invalid integer for %s: %r", name, value)
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring invalid number for %s: %r", name, value)
        return default


def _env_log_level(name: str, default: str = DEFAULT_LOG_LEVEL) -> str:
    value = _env_str(name, default).upper()
    if value not in logging.getLevelNamesMapping():
        logger.warning("Ignoring unknown log level for %s: %r", name, value)
        return default
    return value


@dataclass(frozen=True)
class Settings:
    """Connection and request parameters for the Azure OpenAI deployment."""

    api_key: str = ""
    endpoint: str = ""
    deployment: str = DEFAULT_DEPLOYMENT
    api_version: str = DEFAULT_API_VERSION
    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: float = DEFAULT_TEMPERATURE
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = DEFAULT_MAX_RETRIES
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.endpoint)


def load_settings(*, dotenv: bool = True) -> Settings:
    """Read settings from the environment, optionally loading ``.env`` first."""

    if dotenv:
        load_dotenv()

    settings = Settings(
        api_key=_env_str("AZURE_OPENAI_KEY"),
        endpoint=_env_str("AZURE_OPENAI_ENDPOINT").rstrip("/"),
        deployment=_env_str("AZURE_OPENAI_DEPLOYMENT", DEFAULT_DEPLOYMENT),
        api_version=_env_str("AZURE_API_VERSION", DEFAULT_API_VERSION),
        max_tokens=_env_int("CV_RANKER_MAX_TOKENS", DEFAULT_MAX_TOKENS),
        temperature=_env_float("CV_RANKER_TEMPERATURE", DEFAULT_TEMPERATURE),
        timeout=_env_float("CV_RANKER_TIMEOUT", DEFAULT_TIMEOUT),
        max_retries=_env_int("CV_RANKER_MAX_RETRIES", DEFAULT_MAX_RETRIES),
        log_level=_env_log_level("CV_RANKER_LOG_LEVEL"),
    )

    if not settings.is_configured:
        logger.error(
            "Azure OpenAI is not configured: set AZURE_OPENAI_KEY and AZURE_OPENAI_ENDPOINT."
        )

    return settings
