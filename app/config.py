"""Application configuration loaded from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from app.utils.env import default_env_path, load_env_file

load_env_file(default_env_path(), override=False)

SUPPORTED_LLM_PROVIDERS: frozenset[str] = frozenset({"openai", "gemini"})


@dataclass(frozen=True)
class Settings:
  """Typed settings for the TeachKit resource engine."""

  environment: str
  allowed_origins: tuple[str, ...]
  debug: bool
  log_max_bytes: int
  log_backup_count: int
  log_http_4xx: bool
  llm_provider: str
  openai_api_key: str | None
  openai_model: str
  gemini_api_key: str | None
  gemini_model: str
  llm_timeout_seconds: float
  llm_max_retries: int
  base_url: str
  mailersend_api_key: str | None
  email_from_address: str | None
  email_from_name: str | None
  mailersend_timeout_seconds: int
  mailersend_base_url: str

  @property
  def llm_api_key(self) -> str | None:
    """Return the API key for the configured provider."""
    if self.llm_provider == "gemini":
      return self.gemini_api_key
    return self.openai_api_key

  @property
  def email_configured(self) -> bool:
    return bool(self.mailersend_api_key and self.email_from_address)


def _parse_origins(raw: str | None) -> tuple[str, ...]:
  if not raw:
    raise ValueError("TEACHKIT_ALLOWED_ORIGINS must be set to one or more origins.")

  origins = [origin.strip() for origin in raw.split(",") if origin.strip()]

  if not origins:
    raise ValueError("TEACHKIT_ALLOWED_ORIGINS must include at least one origin.")

  if "*" in origins:
    raise ValueError("TEACHKIT_ALLOWED_ORIGINS must not include wildcard origins.")

  return tuple(origins)


def _parse_bool(raw: str | None) -> bool:
  """Parse a boolean-ish string from environment variables."""

  if raw is None:
    return False

  normalized = raw.strip().lower()
  return normalized in {"1", "true", "yes", "on"}


def _optional_str(raw: str | None) -> str | None:
  if raw is None:
    return None
  value = raw.strip()
  if value == "":
    return None
  return value


def _positive_int(name: str, default: str) -> int:
  value = int(os.getenv(name, default))
  if value <= 0:
    raise ValueError(f"{name} must be a positive integer.")
  return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
  """Load settings once per process."""

  environment = os.getenv("TEACHKIT_ENV", "development").lower()

  # Toggle verbose diagnostics in non-production environments.
  debug = _parse_bool(os.getenv("TEACHKIT_DEBUG"))

  log_max_bytes = _positive_int("TEACHKIT_LOG_MAX_BYTES", "5242880")  # 5MB default

  log_backup_count = int(os.getenv("TEACHKIT_LOG_BACKUP_COUNT", "10"))
  if log_backup_count < 0:
    raise ValueError("TEACHKIT_LOG_BACKUP_COUNT must be zero or a positive integer.")

  # Allow opt-in logging of 4xx HTTPExceptions for diagnostics.
  log_http_4xx = _parse_bool(os.getenv("TEACHKIT_LOG_HTTP_4XX"))

  llm_provider = (os.getenv("TEACHKIT_LLM_PROVIDER") or "openai").strip().lower()
  if llm_provider not in SUPPORTED_LLM_PROVIDERS:
    raise ValueError(f"TEACHKIT_LLM_PROVIDER must be one of: {', '.join(sorted(SUPPORTED_LLM_PROVIDERS))}.")

  llm_timeout_seconds = float(os.getenv("TEACHKIT_LLM_TIMEOUT_SECONDS", "30"))
  if llm_timeout_seconds <= 0:
    raise ValueError("TEACHKIT_LLM_TIMEOUT_SECONDS must be positive.")

  llm_max_retries = int(os.getenv("TEACHKIT_LLM_MAX_RETRIES", "2"))
  if llm_max_retries < 0:
    raise ValueError("TEACHKIT_LLM_MAX_RETRIES must be zero or a positive integer.")

  return Settings(
    environment=environment,
    allowed_origins=_parse_origins(os.getenv("TEACHKIT_ALLOWED_ORIGINS")),
    debug=debug,
    log_max_bytes=log_max_bytes,
    log_backup_count=log_backup_count,
    log_http_4xx=log_http_4xx,
    llm_provider=llm_provider,
    openai_api_key=_optional_str(os.getenv("OPENAI_API_KEY")),
    openai_model=(os.getenv("TEACHKIT_OPENAI_MODEL") or "gpt-3.5-turbo").strip(),
    gemini_api_key=_optional_str(os.getenv("GEMINI_API_KEY")),
    gemini_model=(os.getenv("TEACHKIT_GEMINI_MODEL") or "gemini-2.0-flash").strip(),
    llm_timeout_seconds=llm_timeout_seconds,
    llm_max_retries=llm_max_retries,
    base_url=(os.getenv("TEACHKIT_BASE_URL") or "http://localhost:8000").strip().rstrip("/"),
    mailersend_api_key=_optional_str(os.getenv("TEACHKIT_MAILERSEND_API_KEY")),
    email_from_address=_optional_str(os.getenv("TEACHKIT_EMAIL_FROM_ADDRESS")),
    email_from_name=_optional_str(os.getenv("TEACHKIT_EMAIL_FROM_NAME")),
    mailersend_timeout_seconds=_positive_int("TEACHKIT_MAILERSEND_TIMEOUT_SECONDS", "10"),
    mailersend_base_url=(os.getenv("TEACHKIT_MAILERSEND_BASE_URL") or "https://api.mailersend.com/v1").strip(),
  )
