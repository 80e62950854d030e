"""Shared FastAPI dependencies for the model, registry and services."""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends

from app.ai.generators import MathGenerator
from app.ai.providers import ChatModel, build_chat_model
from app.config import Settings, get_settings
from app.formats import FormatHandlerRegistry
from app.notifications.email_sender import build_email_sender
from app.services.chat import ChatService
from app.services.format_generation import FormatGenerationService
from app.services.quiz_generation import QuizGenerationService
from app.services.resource_generator import ResourceGenerator
from app.services.sharing import ShareService


@lru_cache
def get_registry() -> FormatHandlerRegistry:
  """Return the process-wide handler registry."""
  return FormatHandlerRegistry()


def get_chat_model(settings: Settings = Depends(get_settings)) -> ChatModel:  # noqa: B008
  """Build the configured chat model; raises AIServiceError when the key is missing."""
  return build_chat_model(settings)


def get_resource_generator(model: ChatModel = Depends(get_chat_model), settings: Settings = Depends(get_settings)) -> ResourceGenerator:  # noqa: B008
  return ResourceGenerator(model, transport_retries=settings.llm_max_retries)


def get_format_generation_service(
  model: ChatModel = Depends(get_chat_model),  # noqa: B008
  registry: FormatHandlerRegistry = Depends(get_registry),  # noqa: B008
  settings: Settings = Depends(get_settings),  # noqa: B008
) -> FormatGenerationService:
  return FormatGenerationService(model, registry, transport_retries=settings.llm_max_retries)


def get_quiz_generation_service(model: ChatModel = Depends(get_chat_model), settings: Settings = Depends(get_settings)) -> QuizGenerationService:  # noqa: B008
  return QuizGenerationService(model, transport_retries=settings.llm_max_retries)


def get_chat_service(model: ChatModel = Depends(get_chat_model)) -> ChatService:  # noqa: B008
  return ChatService(model)


def get_share_service(settings: Settings = Depends(get_settings)) -> ShareService:  # noqa: B008
  return ShareService(build_email_sender(settings), base_url=settings.base_url)


def get_math_generator(model: ChatModel = Depends(get_chat_model), settings: Settings = Depends(get_settings)) -> MathGenerator:  # noqa: B008
  return MathGenerator(model, transport_retries=settings.llm_max_retries)
