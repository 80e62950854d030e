"""Provider implementations."""

from __future__ import annotations

from app.ai.providers.base import ChatMessage, ChatModel, ModelResponse, Provider, SimpleModelResponse
from app.ai.providers.gemini import GeminiChatModel, GeminiProvider
from app.ai.providers.openai_chat import OpenAIChatModel, OpenAIProvider
from app.config import Settings


def build_provider(settings: Settings) -> Provider:
  """Return the provider selected by TEACHKIT_LLM_PROVIDER."""
  if settings.llm_provider == "gemini":
    return GeminiProvider(api_key=settings.gemini_api_key)
  return OpenAIProvider(api_key=settings.openai_api_key, timeout=settings.llm_timeout_seconds)


def build_chat_model(settings: Settings) -> ChatModel:
  """Build the configured chat model; raises AIServiceError when the key is missing."""
  model = settings.gemini_model if settings.llm_provider == "gemini" else settings.openai_model
  return build_provider(settings).get_model(model)


__all__ = ["ChatMessage", "ChatModel", "ModelResponse", "SimpleModelResponse", "Provider", "GeminiChatModel", "GeminiProvider", "OpenAIChatModel", "OpenAIProvider", "build_chat_model", "build_provider"]
