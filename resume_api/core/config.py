from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    openai_api_key: str | None
    openai_base_url: str | None
    ai_provider: str
    ai_model: str
    openai_timeout_s: float
    llm_response_format: str
    llm_max_output_tokens: int
    llm_max_retries: int
    llm_initial_delay_ms: int
    max_upload_bytes: int
    resume_content_max_chars: int
    pdf_preview_chars: int
    disconnect_poll_s: float
    log_level: str
    sentry_dsn: str | None
    rate_limit: str
    rate_limit_enabled: bool
    cors_allowed_origins: tuple[str, ...]
    cors_allow_origin_regex: str | None


settings = Settings(
    openai_api_key=_get_env("OPENAI_API_KEY") or _get_env("AI_INTEGRATIONS_OPENAI_API_KEY"),
    openai_base_url=_get_env("OPENAI_BASE_URL") or _get_env("AI_INTEGRATIONS_OPENAI_BASE_URL"),
    ai_provider=(_get_env("AI_PROVIDER", "openai") or "openai").strip().lower(),
    ai_model=(_get_env("AI_MODEL", "gpt-5") or "gpt-5").strip(),
    openai_timeout_s=_get_env_float("OPENAI_TIMEOUT_S", 60.0),
    llm_response_format=(_get_env("LLM_RESPONSE_FORMAT", "json") or "json").strip().lower(),
    llm_max_output_tokens=_get_env_int("LLM_MAX_OUTPUT_TOKENS", 2048),
    llm_max_retries=_get_env_int("LLM_MAX_RETRIES", 3),
    llm_initial_delay_ms=_get_env_int("LLM_INITIAL_DELAY_MS", 1000),
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
    resume_content_max_chars=_get_env_int("RESUME_CONTENT_MAX_CHARS", 10000),
    pdf_preview_chars=_get_env_int("PDF_PREVIEW_CHARS", 5000),
    disconnect_poll_s=_get_env_float("DISCONNECT_POLL_S", 0.25),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    rate_limit=_get_env("RATE_LIMIT", "60/minute") or "60/minute",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            "http://localhost:8081",
            "http://127.0.0.1:8081",
            "http://localhost:19006",
            "http://localhost:5000",
        ],
    ),
    cors_allow_origin_regex=_get_env("CORS_ALLOW_ORIGIN_REGEX"),
)

if settings.llm_max_retries < 0:
    raise RuntimeError("LLM_MAX_RETRIES must be zero or greater.")

if settings.llm_initial_delay_ms < 0:
    raise RuntimeError("LLM_INITIAL_DELAY_MS must be zero or greater.")

if settings.max_upload_bytes <= 0:
    raise RuntimeError("MAX_UPLOAD_BYTES must be greater than zero.")
