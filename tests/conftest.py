"""Test configuration for importing the application package."""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
  sys.path.insert(0, str(ROOT))

os.environ.setdefault("TEACHKIT_ALLOWED_ORIGINS", "http://test")
os.environ.setdefault("TEACHKIT_ENV", "test")
os.environ.setdefault("TEACHKIT_LLM_PROVIDER", "openai")
os.environ.setdefault("OPENAI_API_KEY", "test-key")

from typing import Any  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.ai.providers.base import ChatMessage, ChatModel, SimpleModelResponse  # noqa: E402
from app.api.deps import get_chat_model  # noqa: E402
from app.main import app  # noqa: E402


class FakeChatModel(ChatModel):
  """Replays queued completions; an Exception in the queue is raised instead."""

  name = "fake-model"

  def __init__(self, responses: list[str | Exception] | None = None) -> None:
    self.responses = list(responses or [])
    self.calls: list[dict[str, Any]] = []

  async def complete(self, messages: list[ChatMessage], *, temperature: float = 0.7, max_tokens: int = 2000, json_mode: bool = True, **options: Any) -> SimpleModelResponse:
    self.calls.append({"messages": messages, "temperature": temperature, "max_tokens": max_tokens, "json_mode": json_mode, **options})
    if not self.responses:
      raise AssertionError("FakeChatModel ran out of queued responses")
    response = self.responses.pop(0)
    if isinstance(response, Exception):
      raise response
    return SimpleModelResponse(content=response)


@pytest.fixture
def anyio_backend():
  return "asyncio"


@pytest.fixture
def fake_model():
  return FakeChatModel()


@pytest.fixture
async def async_client(fake_model):
  app.dependency_overrides[get_chat_model] = lambda: fake_model
  async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
    yield client
  app.dependency_overrides.clear()
