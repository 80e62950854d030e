"""Runtime environment contract checks run before the service accepts requests.

How/Why:
- A missing LLM key must stop the process at startup rather than fail on the first request.
- Secret values are never echoed to the startup log.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

EnvValidator = Callable[[str, dict[str, str]], str | None]
EnvRequirement = Callable[[dict[str, str]], bool]


@dataclass(frozen=True)
class EnvVarDefinition:
  """Describe how an environment variable must be validated."""

  name: str
  secret: bool
  required: bool = False
  required_when: EnvRequirement | None = None
  validator: EnvValidator | None = None
  default: str = ""

  def is_required(self, env_map: dict[str, str]) -> bool:
    if self.required:
      return True
    return self.required_when is not None and self.required_when(env_map)


class EnvContractError(RuntimeError):
  """Raised when required runtime environment keys are missing or invalid."""


def _provider(env_map: dict[str, str]) -> str:
  return (env_map.get("TEACHKIT_LLM_PROVIDER") or "openai").strip().lower()


def _validate_allowed_origins(value: str, _: dict[str, str]) -> str | None:
  """Reject empty and wildcard CORS origin lists."""
  origins = [origin.strip() for origin in value.split(",") if origin.strip()]
  if not origins:
    return "must include at least one origin."

  if "*" in origins:
    return "must not include wildcard origins."

  return None


def _validate_environment_name(value: str, _: dict[str, str]) -> str | None:
  normalized = value.strip().lower()
  if normalized in {"dev", "development", "stage", "staging", "prod", "production", "test", "testing"}:
    return None

  return "must be one of: development, stage, production, test (or aliases)."


def _validate_provider(value: str, _: dict[str, str]) -> str | None:
  if value.strip().lower() in {"openai", "gemini"}:
    return None

  return "must be 'openai' or 'gemini'."


REQUIRED_ENV_REGISTRY: tuple[EnvVarDefinition, ...] = (
  EnvVarDefinition(name="TEACHKIT_ENV", secret=False, validator=_validate_environment_name, default="development"),
  EnvVarDefinition(name="TEACHKIT_ALLOWED_ORIGINS", secret=False, required=True, validator=_validate_allowed_origins),
  EnvVarDefinition(name="TEACHKIT_LLM_PROVIDER", secret=False, validator=_validate_provider, default="openai"),
  EnvVarDefinition(name="OPENAI_API_KEY", secret=True, required_when=lambda env_map: _provider(env_map) == "openai"),
  EnvVarDefinition(name="GEMINI_API_KEY", secret=True, required_when=lambda env_map: _provider(env_map) == "gemini"),
  EnvVarDefinition(name="TEACHKIT_MAILERSEND_API_KEY", secret=True),
)


def validate_env_values(env_map: dict[str, str]) -> list[str]:
  """Validate a provided env map against the contract and return violations."""
  errors: list[str] = []
  for definition in REQUIRED_ENV_REGISTRY:
    value = env_map.get(definition.name, "")
    if value.strip() == "":
      if definition.is_required(env_map):
        errors.append(f"{definition.name}: required variable is missing.")
      continue

    if definition.validator:
      validation_error = definition.validator(value, env_map)
      if validation_error:
        errors.append(f"{definition.name}: {validation_error}")

  return errors


def validate_runtime_env_or_raise(*, logger: logging.Logger) -> None:
  """Validate and log runtime env values, raising EnvContractError on violations."""
  resolved_values: dict[str, str] = {}
  for definition in REQUIRED_ENV_REGISTRY:
    value = os.getenv(definition.name, definition.default)
    resolved_values[definition.name] = value
    if definition.secret:
      logger.info("ENV_CHECK key=%s value=%s", definition.name, "<redacted>" if value else "<missing>")
    else:
      logger.info("ENV_CHECK key=%s value=%s", definition.name, value or "<missing>")

  errors = validate_env_values(resolved_values)
  if not errors:
    logger.info("ENV_CHECK status=ok checked=%d", len(REQUIRED_ENV_REGISTRY))
    return

  message = "ENV_CHECK status=failed violations:\n- {errors}".format(errors="\n- ".join(errors))
  logger.error(message)
  raise EnvContractError(message)
