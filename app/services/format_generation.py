"""Format-driven generation: subject+format system prompt, count enforcement, then shaping."""

from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from app.ai.backoff import DEFAULT_DELAYS, retry_with_backoff
from app.ai.errors import AIErrorCode, AIServiceError
from app.ai.generators.base import DEFAULT_TEMPERATURE, MAX_ATTEMPTS
from app.ai.json_parser import parse_json_with_fallback
from app.ai.prompts.formats import build_format_system_prompt, build_format_user_prompt
from app.ai.providers.base import ChatModel
from app.core.errors import ResourceTransformError
from app.formats.base import FormatHandler
from app.formats.quiz import transform_quiz
from app.formats.registry import FormatHandlerRegistry, Subject
from app.schema.requests import FormatGenerationRequest
from app.schema.resources import ExitSlipResource, LessonPlanResource, RubricResource
from app.services.resource_generator import rubric_levels

logger = logging.getLogger(__name__)

JsonDict = dict[str, Any]

DEFAULT_FORMATS: dict[str, str] = {"math": "standard", "reading": "comprehension", "science": "science_context"}
LESSON_PLAN_TYPES = frozenset({"lesson_plan", "mini_lesson"})


def adjust_item_count(payload: JsonDict, count: int) -> JsonDict:
  """Trim or pad `problems` (or `questions`) to exactly `count` items.

  Padding cycles through the existing items and tags each copy with "(variation k)".
  """
  key = "problems" if payload.get("problems") is not None else "questions" if payload.get("questions") is not None else None
  items = payload.get(key) if key else None
  if count <= 0 or not isinstance(items, list) or len(items) == count:
    return payload

  logger.warning("Generated %d items instead of the requested %d; adjusting", len(items), count)
  if len(items) > count:
    return {**payload, key: items[:count]}
  if not items:
    return {**payload, key: [{"question": f"Question {index + 1}"} for index in range(count)]}

  padded = list(items)
  for index in range(len(items), count):
    source = items[index % len(items)]
    source = source if isinstance(source, dict) else {"question": str(source)}
    variation = index // len(items) + 1
    if source.get("question"):
      question = f"{source['question']} (variation {variation})"
    elif source.get("problem"):
      question = f"{source['problem']} (variation {variation})"
    else:
      question = f"Question {index + 1}"
    padded.append({**source, "question": question})
  return {**payload, key: padded}


def reshape_science_context(payload: JsonDict) -> JsonDict:
  """Move `scienceContent` into the `science_context` block the handler reads."""
  content = payload.get("scienceContent")
  if not isinstance(content, dict):
    return payload
  reshaped = {key: value for key, value in payload.items() if key != "scienceContent"}
  reshaped["science_context"] = {
    "topic": payload.get("topic") or "",
    "explanation": content.get("explanation") or "",
    "key_concepts": content.get("concepts") or [],
    "key_terms": content.get("key_terms") or {},
    "applications": content.get("applications") or [],
    "problems": payload.get("problems") or [],
  }
  return reshaped


def _rubric_criterion(item: Any, shared_levels: Any) -> JsonDict:
  """Criteria without their own levels are scored on the rubric-wide scale."""
  if not isinstance(item, dict):
    item = {"criterion": str(item)}
  return {"criterion": str(item.get("criterion") or item.get("name") or ""), "description": str(item.get("description") or ""), "levels": rubric_levels(item.get("levels") or shared_levels)}


def shape_other_resource(payload: JsonDict, request: FormatGenerationRequest) -> JsonDict | None:
  """Rubric, exit slip and lesson plan payloads as their typed models; None for other types."""
  resource_type = request.normalized_resource_type
  common = {
    "title": payload.get("title") or f"{request.subject} {resource_type.replace('_', ' ')}".strip(),
    "subject": payload.get("subject") or request.subject,
    "grade_level": payload.get("grade_level") or payload.get("gradeLevel") or request.grade,
  }
  try:
    if resource_type == "rubric":
      criteria = [_rubric_criterion(item, payload.get("levels")) for item in payload.get("criteria") or [] if item]
      resource: BaseModel = RubricResource(**common, format=request.format or payload.get("format") or "4-point", description=payload.get("description") or "", criteria=criteria)
    elif resource_type == "exit_slip":
      questions = [item if isinstance(item, dict) else {"question": str(item)} for item in payload.get("questions") or [] if item]
      resource = ExitSlipResource(
        **common,
        format=request.format or payload.get("format") or "question",
        exit_slip_topic=payload.get("exit_slip_topic") or payload.get("exitSlipTopic") or request.topic,
        difficulty_level=payload.get("difficulty_level") or payload.get("difficultyLevel") or "",
        questions=questions,
      )
    elif resource_type in LESSON_PLAN_TYPES:
      content = {key: value for key, value in payload.items() if key not in {"title", "subject", "grade_level", "gradeLevel", "topic", "format", "resourceType", "resource_type"}}
      resource = LessonPlanResource(**common, topic=payload.get("topic") or request.topic, format=request.format or resource_type, content=content)
    else:
      return None
  except ValidationError as exc:
    raise ResourceTransformError(f"Failed to transform {resource_type}: {exc.error_count()} field error(s)") from exc
  return resource.model_dump(by_alias=True)


class FormatGenerationService:
  """Generate a worksheet, quiz or other resource from a subject+format prompt."""

  def __init__(self, model: ChatModel, registry: FormatHandlerRegistry, *, transport_retries: int = len(DEFAULT_DELAYS), max_attempts: int = MAX_ATTEMPTS) -> None:
    self._model = model
    self._registry = registry
    self._delays = DEFAULT_DELAYS[: max(0, transport_retries)]
    self._max_attempts = max(1, max_attempts)

  def resolve_handler(self, request: FormatGenerationRequest) -> FormatHandler | None:
    """Worksheets for math, reading and science must name a registered format."""
    subject = request.subject.strip().lower()
    if request.normalized_resource_type != "worksheet" or subject not in {member.value for member in Subject}:
      return None
    return self._registry.get_handler(subject, request.format or DEFAULT_FORMATS[subject])

  async def generate(self, request: FormatGenerationRequest) -> JsonDict:
    handler = self.resolve_handler(request)
    if handler is not None and request.format != handler.format:
      request = request.model_copy(update={"format": handler.format})

    payload = await self._generate_payload(request)
    payload = adjust_item_count(payload, request.question_count)
    if request.format == "science_context":
      payload = reshape_science_context(payload)

    resource_type = request.normalized_resource_type
    if handler is not None:
      resource = self._registry.transform_resource(
        {
          **payload,
          "resourceType": "worksheet",
          "subject": handler.subject,
          "format": handler.format,
          "theme": payload.get("theme") or request.theme,
          "grade_level": payload.get("grade_level") or request.grade,
          "topic": payload.get("topic") or request.topic,
        }
      )
      return resource.model_dump(by_alias=True)
    if resource_type == "quiz":
      quiz = transform_quiz({"theme": request.theme, "subject": request.subject, "grade_level": request.grade, "topic": request.topic, **payload})
      return quiz.model_dump(by_alias=True)
    return shape_other_resource(payload, request) or payload

  async def _generate_payload(self, request: FormatGenerationRequest) -> JsonDict:
    messages = [ChatModel.system_message(build_format_system_prompt(request)), ChatModel.user_message(build_format_user_prompt(request))]
    last_error: Exception | None = None
    for attempt in range(1, self._max_attempts + 1):
      response = await retry_with_backoff(self._model.complete, messages, delays=self._delays, temperature=DEFAULT_TEMPERATURE, max_tokens=4000, json_mode=True)
      try:
        payload = parse_json_with_fallback(response.content)
      except json.JSONDecodeError as exc:
        last_error = exc
        logger.warning("Format generation attempt %d/%d returned unparseable output: %s", attempt, self._max_attempts, exc.msg)
        continue
      if isinstance(payload, dict):
        return payload
      logger.warning("Format generation attempt %d/%d returned a non-object payload", attempt, self._max_attempts)
    raise AIServiceError(f"Model did not return a JSON object after {self._max_attempts} attempts", AIErrorCode.INVALID_RESPONSE) from last_error
