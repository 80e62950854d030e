"""Shared generation loop: prompt, model call, parse, validate, then default on exhaustion."""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from app.ai.backoff import DEFAULT_DELAYS, retry_with_backoff
from app.ai.errors import AIErrorCode, AIServiceError
from app.ai.json_parser import parse_json_with_fallback
from app.ai.providers.base import ChatMessage, ChatModel
from app.schema.options import ResourceGenerationOptions

ResultT = TypeVar("ResultT", bound=BaseModel)
JsonDict = dict[str, Any]

MAX_ATTEMPTS = 3
DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000

# Errors that indicate a deployment problem rather than a bad completion.
FATAL_CODES: frozenset[AIErrorCode] = frozenset({AIErrorCode.MISSING_API_KEY, AIErrorCode.AUTH, AIErrorCode.INVALID_PROMPT})

logger = logging.getLogger(__name__)


def coalesce_answer(item: JsonDict) -> JsonDict:
  """Copy `correct`/`correctAnswer`/`correct_answer` onto `answer` when the model used another key."""
  if item.get("answer") not in (None, ""):
    return item
  for key in ("correctAnswer", "correct_answer", "correct"):
    if item.get(key) not in (None, ""):
      return {**item, "answer": item[key]}
  return item


class BaseGenerator(ABC, Generic[ResultT]):
  """Bounded generate/validate loop for one subject."""

  subject: ClassVar[str]
  result_model: ClassVar[type[BaseModel]]
  temperature: ClassVar[float] = DEFAULT_TEMPERATURE
  max_tokens: ClassVar[int] = DEFAULT_MAX_TOKENS
  system_prompt: ClassVar[str | None] = None
  sampling_options: ClassVar[dict[str, float]] = {}

  def __init__(self, model: ChatModel, *, max_attempts: int = MAX_ATTEMPTS, transport_retries: int = len(DEFAULT_DELAYS)) -> None:
    self._model = model
    self._max_attempts = max(1, max_attempts)
    self._delays = DEFAULT_DELAYS[: max(0, transport_retries)]

  @abstractmethod
  def build_prompt(self, options: ResourceGenerationOptions) -> str:
    """Return the full user prompt for one attempt."""

  @abstractmethod
  def build_default(self, options: ResourceGenerationOptions) -> ResultT:
    """Return hand-authored placeholder content; must not touch the network."""

  def expected_count(self, options: ResourceGenerationOptions) -> int:
    return options.item_count()

  def max_tokens_for(self, options: ResourceGenerationOptions) -> int:
    return self.max_tokens

  def prepare(self, payload: JsonDict, options: ResourceGenerationOptions) -> JsonDict:
    """Normalize key spellings before validation."""
    return payload

  def validate(self, payload: JsonDict, options: ResourceGenerationOptions) -> list[str]:
    """Return validation errors; an empty list accepts the payload."""
    return []

  def finalize(self, payload: JsonDict, options: ResourceGenerationOptions) -> ResultT:
    return self.result_model.model_validate(payload)  # type: ignore[return-value]

  @staticmethod
  def validate_prompt(prompt: str) -> None:
    if not prompt or not prompt.strip():
      raise AIServiceError("Prompt cannot be empty", AIErrorCode.INVALID_PROMPT)

  def _messages(self, prompt: str) -> list[ChatMessage]:
    messages: list[ChatMessage] = []
    if self.system_prompt:
      messages.append(ChatModel.system_message(self.system_prompt))
    messages.append(ChatModel.user_message(prompt))
    return messages

  async def generate_content(self, prompt: str, options: ResourceGenerationOptions) -> str:
    """Run one model call; transient transport failures are retried with backoff."""
    self.validate_prompt(prompt)
    logger.info("Generating %s content model=%s max_tokens=%d temperature=%.2f custom_instructions=%s", self.subject, self._model.name, self.max_tokens_for(options), self.temperature, bool(options.custom_instructions))
    response = await retry_with_backoff(
      self._model.complete,
      self._messages(prompt),
      delays=self._delays,
      temperature=self.temperature,
      max_tokens=self.max_tokens_for(options),
      json_mode=True,
      **self.sampling_options,
    )
    return response.content

  def _parse(self, raw: str) -> JsonDict:
    payload = parse_json_with_fallback(raw)
    if not isinstance(payload, dict):
      raise AIServiceError("Model response is not a JSON object", AIErrorCode.INVALID_RESPONSE)
    return payload

  async def generate_with_retry(self, options: ResourceGenerationOptions) -> ResultT:
    """Attempt generation up to the configured bound, then fall back to the default payload."""
    prompt = self.build_prompt(options)
    self.validate_prompt(prompt)

    for attempt in range(1, self._max_attempts + 1):
      try:
        raw = await self.generate_content(prompt, options)
      except AIServiceError as exc:
        if exc.code in FATAL_CODES:
          raise
        logger.warning("%s attempt %d/%d failed: %s (%s)", self.subject, attempt, self._max_attempts, exc.message, exc.code.value)
        continue

      try:
        payload = self.prepare(self._parse(raw), options)
      except (json.JSONDecodeError, AIServiceError) as exc:
        logger.warning("%s attempt %d/%d returned unparseable output: %s", self.subject, attempt, self._max_attempts, exc)
        continue

      errors = self.validate(payload, options)
      if errors:
        logger.warning("%s attempt %d/%d failed validation: %s", self.subject, attempt, self._max_attempts, "; ".join(errors))
        continue

      try:
        result = self.finalize(payload, options)
      except ValidationError as exc:
        logger.warning("%s attempt %d/%d did not match the result shape: %s", self.subject, attempt, self._max_attempts, exc.errors(include_url=False))
        continue

      logger.info("%s content generated on attempt %d", self.subject, attempt)
      return result

    logger.warning("%s generation exhausted %d attempts; using default content", self.subject, self._max_attempts)
    return self.build_default(options)
