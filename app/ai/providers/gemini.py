"""Gemini provider implementation using the google-genai SDK."""

from __future__ import annotations

import logging
from typing import Any, Final

from google import genai

from app.ai.errors import AIErrorCode, AIServiceError
from app.ai.providers.base import ChatMessage, ChatModel, ModelResponse, Provider, SimpleModelResponse

logger = logging.getLogger("app.ai.providers.gemini")


def to_gemini_contents(messages: list[ChatMessage]) -> tuple[str | None, list[dict[str, Any]]]:
  """Split chat messages into a system instruction and Gemini content turns."""
  system_parts = [message["content"] for message in messages if message["role"] == "system"]
  contents: list[dict[str, Any]] = []
  for message in messages:
    if message["role"] == "system":
      continue
    role = "model" if message["role"] == "assistant" else "user"
    contents.append({"role": role, "parts": [{"text": message["content"]}]})

  system_instruction = "\n\n".join(system_parts) if system_parts else None
  return system_instruction, contents


class GeminiChatModel(ChatModel):
  """Gemini model client with JSON mime-type output."""

  def __init__(self, name: str, api_key: str | None) -> None:
    self.name: str = name
    if not api_key:
      raise AIServiceError("GEMINI_API_KEY is not set", AIErrorCode.MISSING_API_KEY)

    self._client = genai.Client(api_key=api_key)

  async def complete(self, messages: list[ChatMessage], *, temperature: float = 0.7, max_tokens: int = 2000, json_mode: bool = True, **options: Any) -> ModelResponse:
    """Run one generate_content call."""
    system_instruction, contents = to_gemini_contents(messages)
    config: dict[str, Any] = {"temperature": temperature, "max_output_tokens": max_tokens}
    if system_instruction:
      config["system_instruction"] = system_instruction
    if json_mode:
      config["response_mime_type"] = "application/json"
    # Forward only the sampling options Gemini understands.
    for key in ("presence_penalty", "frequency_penalty"):
      if key in options:
        config[key] = options[key]

    # Use the async client to avoid blocking the asyncio event loop.
    response = await self._client.aio.models.generate_content(model=self.name, contents=contents, config=config)

    content = response.text or ""
    logger.debug("Gemini response model=%s chars=%d", self.name, len(content))
    usage = None
    if response.usage_metadata:
      usage = {"prompt_tokens": response.usage_metadata.prompt_token_count, "completion_tokens": response.usage_metadata.candidates_token_count, "total_tokens": response.usage_metadata.total_token_count}
    return SimpleModelResponse(content=content, usage=usage)


class GeminiProvider(Provider):
  """Gemini provider."""

  _DEFAULT_MODEL: Final[str] = "gemini-2.0-flash"
  _AVAILABLE_MODELS: Final[set[str]] = {"gemini-2.5-pro", "gemini-2.5-flash", "gemini-2.0-flash", "gemini-2.0-flash-lite"}

  def __init__(self, api_key: str | None = None) -> None:
    self.name: str = "gemini"
    self._api_key = api_key

  def get_model(self, model: str | None = None) -> ChatModel:
    """Return a Gemini model client."""
    model_name = model or self._DEFAULT_MODEL
    if model_name not in self._AVAILABLE_MODELS:
      raise ValueError(f"Unsupported Gemini model '{model_name}'.")

    return GeminiChatModel(model_name, api_key=self._api_key)
