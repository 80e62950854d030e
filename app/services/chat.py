"""Teaching-assistant chat proxy."""

from __future__ import annotations

import logging
from typing import Any

from app.ai.providers.base import ChatMessage, ChatModel

logger = logging.getLogger(__name__)

ASSISTANT_SYSTEM_PROMPT = "You are an AI teaching assistant that helps teachers create educational content and manage their classroom tasks."
CHAT_TEMPERATURE = 0.7
CHAT_MAX_TOKENS = 800


class ChatService:
  def __init__(self, model: ChatModel) -> None:
    self._model = model

  async def reply(self, messages: list[ChatMessage]) -> dict[str, Any]:
    """Forward the conversation behind the fixed system prompt and return the assistant turn."""
    conversation = [message for message in messages if message.get("role") != "system"]
    response = await self._model.complete([ChatModel.system_message(ASSISTANT_SYSTEM_PROMPT), *conversation], temperature=CHAT_TEMPERATURE, max_tokens=CHAT_MAX_TOKENS, json_mode=False)
    logger.debug("Chat reply generated for %d message(s)", len(conversation))
    return {"content": response.content, "role": "assistant"}
