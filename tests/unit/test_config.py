"""Unit tests for settings, the env contract and .env parsing."""

from __future__ import annotations

import logging

import pytest
from app.config import get_settings
from app.core.env_contract import EnvContractError, validate_env_values, validate_runtime_env_or_raise
from app.core.logging import rotated_log_name
from app.utils.env import parse_env_lines


@pytest.fixture
def fresh_settings():
  get_settings.cache_clear()
  yield get_settings
  get_settings.cache_clear()


def test_settings_select_provider_key(monkeypatch, fresh_settings) -> None:
  monkeypatch.setenv("TEACHKIT_LLM_PROVIDER", "Gemini")
  monkeypatch.setenv("GEMINI_API_KEY", "gem-key")
  settings = fresh_settings()
  assert settings.llm_provider == "gemini"
  assert settings.llm_api_key == "gem-key"


def test_settings_reject_wildcard_origins(monkeypatch, fresh_settings) -> None:
  monkeypatch.setenv("TEACHKIT_ALLOWED_ORIGINS", "http://a.test,*")
  with pytest.raises(ValueError, match="wildcard"):
    fresh_settings()


def test_settings_reject_unknown_provider(monkeypatch, fresh_settings) -> None:
  monkeypatch.setenv("TEACHKIT_LLM_PROVIDER", "llama")
  with pytest.raises(ValueError, match="TEACHKIT_LLM_PROVIDER"):
    fresh_settings()


def test_email_requires_key_and_sender(monkeypatch, fresh_settings) -> None:
  monkeypatch.setenv("TEACHKIT_MAILERSEND_API_KEY", "ms-key")
  monkeypatch.delenv("TEACHKIT_EMAIL_FROM_ADDRESS", raising=False)
  assert not fresh_settings().email_configured

  get_settings.cache_clear()
  monkeypatch.setenv("TEACHKIT_EMAIL_FROM_ADDRESS", "teacher@example.com")
  assert fresh_settings().email_configured


def test_base_url_trailing_slash_is_dropped(monkeypatch, fresh_settings) -> None:
  monkeypatch.setenv("TEACHKIT_BASE_URL", "https://teachkit.example/")
  assert fresh_settings().base_url == "https://teachkit.example"


def test_env_contract_requires_key_for_selected_provider() -> None:
  errors = validate_env_values({"TEACHKIT_ALLOWED_ORIGINS": "http://a.test", "TEACHKIT_LLM_PROVIDER": "gemini", "OPENAI_API_KEY": "unused"})
  assert errors == ["GEMINI_API_KEY: required variable is missing."]


def test_env_contract_rejects_bad_values() -> None:
  errors = validate_env_values({"TEACHKIT_ALLOWED_ORIGINS": "*", "TEACHKIT_ENV": "moon", "OPENAI_API_KEY": "k"})
  assert "TEACHKIT_ALLOWED_ORIGINS: must not include wildcard origins." in errors
  assert any(error.startswith("TEACHKIT_ENV:") for error in errors)


def test_runtime_contract_raises_and_redacts(monkeypatch, caplog) -> None:
  monkeypatch.setenv("TEACHKIT_LLM_PROVIDER", "openai")
  monkeypatch.delenv("OPENAI_API_KEY", raising=False)
  logger = logging.getLogger("test.env_contract")
  with caplog.at_level(logging.INFO, logger="test.env_contract"):
    with pytest.raises(EnvContractError, match="OPENAI_API_KEY"):
      validate_runtime_env_or_raise(logger=logger)
  assert "key=OPENAI_API_KEY value=<missing>" in caplog.text


def test_parse_env_lines() -> None:
  text = "# comment\nexport TEACHKIT_ENV=test\nOPENAI_API_KEY='abc'\nBROKEN\n =nokey\n"
  assert parse_env_lines(text) == {"TEACHKIT_ENV": "test", "OPENAI_API_KEY": "abc"}


def test_rotated_log_names() -> None:
  assert rotated_log_name("/logs/teachkit.log.2") == "/logs/teachkit.log-2"
  assert rotated_log_name("/logs/teachkit.log") == "/logs/teachkit.log"
