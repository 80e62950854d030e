"""Quiz generation with grade/subject difficulty enhancements."""

from __future__ import annotations

import json
import logging

from app.ai.backoff import DEFAULT_DELAYS, retry_with_backoff
from app.ai.errors import AIErrorCode, AIServiceError
from app.ai.generators.base import DEFAULT_TEMPERATURE
from app.ai.json_parser import parse_json_with_fallback
from app.ai.prompts.quiz import build_quiz_system_prompt, build_quiz_user_prompt
from app.ai.providers.base import ChatModel
from app.formats.quiz import transform_quiz
from app.schema.requests import QuizGenerationRequest
from app.schema.resources import QuizResource

logger = logging.getLogger(__name__)

QUIZ_MAX_TOKENS = 3000


class QuizGenerationService:
  def __init__(self, model: ChatModel, *, transport_retries: int = len(DEFAULT_DELAYS)) -> None:
    self._model = model
    self._delays = DEFAULT_DELAYS[: max(0, transport_retries)]

  async def generate(self, request: QuizGenerationRequest) -> QuizResource:
    messages = [ChatModel.system_message(build_quiz_system_prompt(request)), ChatModel.user_message(build_quiz_user_prompt(request))]
    logger.info("Generating quiz subject=%s grade=%s questions=%s", request.subject, request.grade, request.question_count)
    response = await retry_with_backoff(self._model.complete, messages, delays=self._delays, temperature=DEFAULT_TEMPERATURE, max_tokens=QUIZ_MAX_TOKENS, json_mode=True)
    try:
      payload = parse_json_with_fallback(response.content)
    except json.JSONDecodeError as exc:
      raise AIServiceError(f"Model returned malformed quiz JSON: {exc.msg}", AIErrorCode.INVALID_RESPONSE) from exc
    if not isinstance(payload, dict):
      raise AIServiceError("Model response is not a JSON object", AIErrorCode.INVALID_RESPONSE)

    defaults = {"subject": request.subject, "grade_level": request.grade, "topic": request.topic_area, "theme": request.theme}
    return transform_quiz({**{key: value for key, value in defaults.items() if value}, **payload})
