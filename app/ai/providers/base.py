"""Base interfaces for chat-completion providers."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Protocol


class ModelResponse(Protocol):
  """Response contract for model outputs."""

  content: str
  usage: dict[str, int] | None


@dataclass
class SimpleModelResponse:
  """Minimal model response structure."""

  content: str
  usage: dict[str, int] | None = None


ChatMessage = dict[str, str]


class ChatModel(ABC):
  """Abstract chat-completion model."""

  name: str

  @abstractmethod
  async def complete(self, messages: list[ChatMessage], *, temperature: float = 0.7, max_tokens: int = 2000, json_mode: bool = True, **options: Any) -> ModelResponse:
    """Send a system/user message list and return the completion text."""

  @staticmethod
  def user_message(content: str) -> ChatMessage:
    return {"role": "user", "content": content}

  @staticmethod
  def system_message(content: str) -> ChatMessage:
    return {"role": "system", "content": content}


class Provider(ABC):
  """Abstract base class for LLM providers."""

  name: str

  @abstractmethod
  def get_model(self, model: str | None = None) -> ChatModel:
    """Return the model client for the provider."""
