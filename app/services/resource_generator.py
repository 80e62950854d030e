"""Resource normalizer: dispatch one teacher request and reshape the result into the section envelope."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel

from app.ai.backoff import DEFAULT_DELAYS, retry_with_backoff
from app.ai.errors import AIErrorCode, AIServiceError
from app.ai.generators import BaseGenerator, GeneralGenerator, MathGenerator, ReadingGenerator, ScienceGenerator
from app.ai.json_parser import parse_json_with_fallback
from app.ai.prompts.resources import build_exit_slip_prompt, build_generation_system_prompt, build_generation_user_prompt, build_rubric_prompt, rubric_style
from app.ai.providers.base import ChatModel
from app.core.errors import ResourceValidationError
from app.schema.envelope import GeneratedResource, ResourceMetadata, Section
from app.schema.options import ResourceGenerationOptions
from app.schema.resources import RubricCriterion, RubricLevel
from app.schema.results import GenerationResult, ReadingGenerationResult

logger = logging.getLogger(__name__)

JsonDict = dict[str, Any]

SUBJECT_ALIASES: dict[str, str] = {
  "math": "math",
  "mathematics": "math",
  "maths": "math",
  "reading": "reading",
  "english": "reading",
  "language arts": "reading",
  "ela": "reading",
  "science": "science",
  "biology": "science",
  "chemistry": "science",
  "physics": "science",
  "general": "general",
  "general knowledge": "general",
  "general studies": "general",
}

SUBJECT_DECORATIONS: dict[str, tuple[str, ...]] = {
  "math": ("🔢", "✏️", "📐", "➗"),
  "science": ("🔬", "🧪", "🌍", "⚡"),
  "reading": ("📚", "✍️", "📝", "📖"),
}
FALLBACK_DECORATIONS: tuple[str, ...] = ("📝", "✨", "🎯", "🌟")

DEFAULT_QUESTION_TYPES: tuple[str, ...] = ("multiple_choice", "true_false", "short_answer")
QUIZ_TYPE_QUESTION_TYPES: dict[str, tuple[str, ...]] = {
  "vocabulary": ("multiple_choice", "matching"),
  "comprehension": ("multiple_choice", "short_answer"),
  "analysis": ("short_answer", "long_answer"),
}

CHECKLIST_LEVELS: tuple[RubricLevel, ...] = (
  RubricLevel(score="✓", label="Met", description="The criterion is clearly demonstrated."),
  RubricLevel(score="×", label="Not yet", description="The criterion is missing or incomplete."),
)

# Sampling used for exit slips and rubrics.
RESOURCE_TEMPERATURE = 0.2
RESOURCE_MAX_TOKENS = 4000
RESOURCE_SAMPLING = {"presence_penalty": 0.1, "frequency_penalty": 0.1}


def normalize_subject(subject: str) -> str:
  key = (subject or "").strip().lower()
  return SUBJECT_ALIASES.get(key, key)


def default_decorations(subject: str) -> list[str]:
  return list(SUBJECT_DECORATIONS.get((subject or "").strip().lower(), FALLBACK_DECORATIONS))


def default_instructions(options: ResourceGenerationOptions) -> str:
  resource_type = options.resource_type.lower()
  subject = options.subject.lower()
  if resource_type == "quiz":
    return "Read each question carefully and write your answers in the spaces provided. Show your work where necessary."
  if resource_type == "worksheet":
    if subject == "math":
      return "Solve each problem step by step. Show all your work and circle your final answers."
    if subject == "science":
      return "Answer each question based on your understanding of the scientific concepts. Use complete sentences where necessary."
    return "Complete each question thoughtfully. Use evidence from the text to support your answers where applicable."
  return "Complete all questions to the best of your ability. Write your answers clearly in the spaces provided."


def generate_focus_from_topic(topic: str | None) -> list[str]:
  """Derive focus areas from a free-text topic, keeping insertion order."""
  if not topic:
    return []

  lowered = topic.lower()
  focus = [topic]
  if "war" in lowered or "conflict" in lowered:
    focus += ["causes and effects", "key events", "historical significance", "social impact"]
  elif "science" in lowered or "biology" in lowered or "chemistry" in lowered:
    focus += ["key concepts", "practical applications", "scientific principles"]
  elif "math" in lowered:
    focus += ["problem-solving", "practical applications", "core concepts"]
  focus += ["main concepts", "practical examples", "critical thinking"]
  return list(dict.fromkeys(focus))


def get_question_types(options: ResourceGenerationOptions) -> list[str]:
  if options.selected_question_types:
    return list(options.selected_question_types)
  if options.resource_type.lower() == "quiz":
    return list(QUIZ_TYPE_QUESTION_TYPES.get((options.quiz_type or "mixed").lower(), DEFAULT_QUESTION_TYPES))
  return list(DEFAULT_QUESTION_TYPES)


def convert_to_problems(content: JsonDict) -> list[JsonDict]:
  """Student-facing problems from problems, questions or experiments; answers are never copied."""
  if content.get("problems"):
    return [{"question": _question_text(item), "visual": _get(item, "visual"), "steps": _get(item, "steps") or []} for item in content["problems"]]
  if content.get("questions"):
    return [{"question": _question_text(item), "visual": _get(item, "visual") or _get(item, "diagram"), "steps": _get(item, "steps") or []} for item in content["questions"]]
  if content.get("experiments"):
    return [
      {"question": _get(item, "title") or _get(item, "question"), "visual": _get(item, "diagram") or _get(item, "visual"), "steps": _get(item, "procedure") or _get(item, "steps") or []}
      for item in content["experiments"]
    ]
  return []


def _get(item: Any, key: str) -> Any:
  return item.get(key) if isinstance(item, dict) else None


def _question_text(item: Any) -> Any:
  return item.get("question") if isinstance(item, dict) else item


def checklist_criteria(raw: Any) -> list[JsonDict]:
  """Checklist criteria always carry the two ✓/× levels, whatever the model scored them with."""
  criteria = []
  for item in raw if isinstance(raw, list) else []:
    if not isinstance(item, dict):
      item = {"criterion": str(item)}
    criterion = RubricCriterion(criterion=str(item.get("criterion") or item.get("name") or ""), description=str(item.get("description") or ""), levels=list(CHECKLIST_LEVELS))
    criteria.append(criterion.model_dump())
  return criteria


def rubric_levels(raw: Any) -> list[JsonDict]:
  """Point levels as score/label/description dicts; "4 - Advanced" style strings are split."""
  levels = []
  for item in raw if isinstance(raw, list) else []:
    if isinstance(item, dict):
      level = RubricLevel(
        score=item.get("score") if isinstance(item.get("score"), int | str) else str(item.get("score") or ""),
        label=str(item.get("label") or ""),
        description=str(item.get("description") or ""),
        examples=[str(example) for example in item["examples"] if example] if isinstance(item.get("examples"), list) else [],
      )
    else:
      score, _, label = str(item).partition(" - ")
      level = RubricLevel(score=score.strip(), label=label.strip()) if label else RubricLevel(score="", label=str(item).strip())
    levels.append(level.model_dump())
  return levels


class ResourceGenerator:
  """Dispatch on resource type, then subject, and build the GeneratedResource envelope."""

  def __init__(self, model: ChatModel, *, transport_retries: int = len(DEFAULT_DELAYS), now: Callable[[], datetime] | None = None) -> None:
    self._model = model
    self._delays = DEFAULT_DELAYS[: max(0, transport_retries)]
    self._now = now or (lambda: datetime.now(timezone.utc))
    self._generators: dict[str, BaseGenerator[Any]] = {
      "math": MathGenerator(model, transport_retries=transport_retries),
      "reading": ReadingGenerator(model, transport_retries=transport_retries),
      "science": ScienceGenerator(model, transport_retries=transport_retries),
      "general": GeneralGenerator(model, transport_retries=transport_retries),
    }

  async def generate_resource(self, options: ResourceGenerationOptions) -> GeneratedResource:
    resource_type = options.resource_type.lower()
    if resource_type == "exit_slip":
      payload = await self._generate_json(build_exit_slip_prompt(options), options)
      return self._exit_slip_resource(payload, options)
    if resource_type == "rubric":
      payload = await self._generate_json(build_rubric_prompt(options), options)
      return self._rubric_resource(payload, options)

    subject = normalize_subject(options.subject)
    generator = self._generators.get(subject)
    if generator is None:
      raise ResourceValidationError(f"Unsupported subject: {options.subject}")

    result = await generator.generate_with_retry(self._options_for(subject, options))
    return self.format_result(result, options)

  def _options_for(self, subject: str, options: ResourceGenerationOptions) -> ResourceGenerationOptions:
    if subject == "reading":
      return options.model_copy(update={"include_vocabulary": True})
    if subject == "general":
      update: JsonDict = {"focus_areas": options.focus_areas or generate_focus_from_topic(options.topic_area)}
      if options.resource_type.lower() == "quiz" and not options.selected_question_types:
        update["selected_question_types"] = get_question_types(options)
      return options.model_copy(update=update)
    return options

  async def _generate_json(self, prompt: str, options: ResourceGenerationOptions) -> JsonDict:
    """Single model call for exit slips and rubrics; malformed JSON is raised, not defaulted."""
    messages = [ChatModel.system_message(build_generation_system_prompt(options)), ChatModel.user_message(build_generation_user_prompt(prompt, options))]
    logger.info("Generating %s resource model=%s subject=%s", options.resource_type, self._model.name, options.subject)
    response = await retry_with_backoff(self._model.complete, messages, delays=self._delays, temperature=RESOURCE_TEMPERATURE, max_tokens=RESOURCE_MAX_TOKENS, json_mode=True, **RESOURCE_SAMPLING)
    if not response.content:
      raise AIServiceError("No content generated", AIErrorCode.INVALID_RESPONSE)
    try:
      payload = parse_json_with_fallback(response.content)
    except json.JSONDecodeError as exc:
      raise AIServiceError(f"Model returned malformed JSON: {exc.msg}", AIErrorCode.INVALID_RESPONSE) from exc
    if not isinstance(payload, dict):
      raise AIServiceError("Model response is not a JSON object", AIErrorCode.INVALID_RESPONSE)
    return payload

  def _metadata(self, options: ResourceGenerationOptions, resource_type: str | None = None) -> ResourceMetadata:
    return ResourceMetadata(
      grade_level=options.grade_level,
      subject=options.subject,
      resource_type=resource_type or options.resource_type.lower(),
      generated_at=self._now().isoformat(),
      theme=options.theme,
      difficulty=options.difficulty or "medium",
    )

  def _rubric_resource(self, payload: JsonDict, options: ResourceGenerationOptions) -> GeneratedResource:
    checklist = rubric_style(options) == "checklist"
    description = payload.get("description")
    rubric = {
      "description": description,
      "levels": [] if checklist else rubric_levels(payload.get("levels")),
      "criteria": checklist_criteria(payload.get("criteria")) if checklist else [],
    }
    return GeneratedResource(
      title=payload.get("title") or f"{options.subject} Evaluation Rubric",
      content=description or default_instructions(options),
      sections=[Section(type="rubric", title="Evaluation Criteria", content=rubric)],
      metadata=self._metadata(options, "rubric"),
      decorations=payload.get("decorations") or default_decorations(options.subject),
    )

  def _exit_slip_resource(self, payload: JsonDict, options: ResourceGenerationOptions) -> GeneratedResource:
    questions = payload.get("questions")
    for section in payload.get("sections") or []:
      if isinstance(section, dict) and section.get("type") == "questions":
        questions = section.get("content")
        break
    if isinstance(questions, str):
      questions = parse_json_with_fallback(questions)
    return GeneratedResource(
      title=payload.get("title") or f"{options.subject} {options.resource_type}",
      content=payload.get("content") or payload.get("instructions") or default_instructions(options),
      sections=[Section(type="questions", title="Questions", content=questions or [])],
      metadata=self._metadata(options),
      decorations=payload.get("decorations") or default_decorations(options.subject),
    )

  def format_result(self, result: GenerationResult, options: ResourceGenerationOptions) -> GeneratedResource:
    """Reshape a typed generator result into the envelope."""
    data = result.model_dump(by_alias=True, exclude_none=True)
    decorations = getattr(result, "decorations", None) or default_decorations(options.subject)
    content = data.get("content") or data.get("instructions") or data.get("introduction") or default_instructions(options)
    return GeneratedResource(
      title=data.get("title") or f"{options.subject} {options.resource_type}",
      content=content,
      sections=self._sections(result, data),
      metadata=self._metadata(options),
      decorations=list(decorations),
    )

  @staticmethod
  def _sections(result: BaseModel, data: JsonDict) -> list[Section]:
    if isinstance(result, ReadingGenerationResult):
      sections = []
      if result.passage:
        sections.append(Section(type="passage", title="Reading Passage", content=result.passage))
      if data.get("vocabulary"):
        sections.append(Section(type="vocabulary", title="Vocabulary", content=data["vocabulary"]))
      if data.get("questions"):
        sections.append(Section(type="questions", title="Questions", content=data["questions"]))
      return sections
    return [Section(type="problems", title="Problems", content=convert_to_problems(data))]
