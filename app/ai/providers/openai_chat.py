"""OpenAI chat-completion provider using the openai SDK."""

from __future__ import annotations

import logging
from typing import Any, Final

from openai import AsyncOpenAI

from app.ai.errors import AIErrorCode, AIServiceError
from app.ai.providers.base import ChatMessage, ChatModel, ModelResponse, Provider, SimpleModelResponse

logger = logging.getLogger("app.ai.providers.openai_chat")


class OpenAIChatModel(ChatModel):
  """OpenAI model client with JSON-object response support."""

  def __init__(self, name: str, api_key: str | None, *, timeout: float = 30.0) -> None:
    self.name: str = name
    if not api_key:
      raise AIServiceError("OPENAI_API_KEY is not set", AIErrorCode.MISSING_API_KEY)

    # Retries are owned by app.ai.backoff so the SDK must not retry on its own.
    self._client = AsyncOpenAI(api_key=api_key, timeout=timeout, max_retries=0)

  async def complete(self, messages: list[ChatMessage], *, temperature: float = 0.7, max_tokens: int = 2000, json_mode: bool = True, **options: Any) -> ModelResponse:
    """Run one chat completion."""
    request: dict[str, Any] = {"model": self.name, "messages": messages, "temperature": temperature, "max_tokens": max_tokens, **options}
    if json_mode:
      request["response_format"] = {"type": "json_object"}

    response = await self._client.chat.completions.create(**request)

    content = response.choices[0].message.content or ""
    logger.debug("OpenAI response model=%s chars=%d", self.name, len(content))
    usage = None
    if response.usage:
      usage = {"prompt_tokens": response.usage.prompt_tokens, "completion_tokens": response.usage.completion_tokens, "total_tokens": response.usage.total_tokens}

    return SimpleModelResponse(content=content, usage=usage)


class OpenAIProvider(Provider):
  """OpenAI provider."""

  _DEFAULT_MODEL: Final[str] = "gpt-3.5-turbo"

  def __init__(self, api_key: str | None = None, *, timeout: float = 30.0) -> None:
    self.name: str = "openai"
    self._api_key = api_key
    self._timeout = timeout

  def get_model(self, model: str | None = None) -> ChatModel:
    """Return an OpenAI model client."""
    return OpenAIChatModel(model or self._DEFAULT_MODEL, api_key=self._api_key, timeout=self._timeout)
