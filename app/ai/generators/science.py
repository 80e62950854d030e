"""Science worksheet generation."""

from __future__ import annotations

from app.ai.generators.base import BaseGenerator, JsonDict, coalesce_answer
from app.ai.prompts.science import build_science_prompt, limited_question_count
from app.schema.options import ResourceGenerationOptions
from app.schema.results import ScienceGenerationResult, ScienceQuestion

DEFAULT_OBJECTIVES: tuple[str, ...] = (
  "Understand basic scientific concepts",
  "Apply scientific thinking to real-world problems",
  "Develop observation and analysis skills",
)


def default_science_title(options: ResourceGenerationOptions) -> str:
  topic = f": {options.topic_text}" if options.topic_text else ""
  return f"Grade {options.grade_level or '5'} Science Worksheet{topic} ({options.difficulty or 'intermediate'} level)"


def default_science_introduction(options: ResourceGenerationOptions) -> str:
  experiments = "hands-on experiments and " if options.include_experiments else ""
  return f"Welcome to your science exploration! This worksheet will help you understand key concepts through {experiments}interactive questions."


def _key_terms(value: object) -> object:
  """Accept key terms as a list of {term, definition} or a term -> definition mapping."""
  if isinstance(value, dict):
    return [{"term": term, "definition": str(definition)} for term, definition in value.items()]
  return value or []


class ScienceGenerator(BaseGenerator[ScienceGenerationResult]):
  subject = "science"
  result_model = ScienceGenerationResult

  def build_prompt(self, options: ResourceGenerationOptions) -> str:
    return build_science_prompt(options)

  def expected_count(self, options: ResourceGenerationOptions) -> int:
    return limited_question_count(options)

  def max_tokens_for(self, options: ResourceGenerationOptions) -> int:
    return max(self.max_tokens, self.expected_count(options) * 150)

  def prepare(self, payload: JsonDict, options: ResourceGenerationOptions) -> JsonDict:
    prepared = dict(payload)
    if isinstance(prepared.get("questions"), list):
      prepared["questions"] = [coalesce_answer(q) if isinstance(q, dict) else q for q in prepared["questions"]]
    prepared["keyTerms"] = _key_terms(prepared.pop("keyTerms", None) or prepared.pop("key_terms", None))
    return prepared

  def validate(self, payload: JsonDict, options: ResourceGenerationOptions) -> list[str]:
    questions = payload.get("questions")
    if not isinstance(questions, list):
      return ["questions is not an array"]

    expected = self.expected_count(options)
    if len(questions) != expected:
      return [f"expected {expected} questions, got {len(questions)}"]
    return []

  def finalize(self, payload: JsonDict, options: ResourceGenerationOptions) -> ScienceGenerationResult:
    return ScienceGenerationResult.model_validate(
      {
        **payload,
        "title": payload.get("title") or default_science_title(options),
        "introduction": payload.get("introduction") or default_science_introduction(options),
        "learningObjectives": payload.get("learningObjectives") or list(DEFAULT_OBJECTIVES),
      }
    )

  def build_default(self, options: ResourceGenerationOptions) -> ScienceGenerationResult:
    question = ScienceQuestion(
      question="What is the scientific method?",
      type="short_answer",
      answer="The scientific method is a systematic approach to investigating phenomena and acquiring new knowledge.",
      explanation="This is a fundamental concept in science.",
    )
    return ScienceGenerationResult(
      title=default_science_title(options),
      introduction=default_science_introduction(options),
      learning_objectives=list(DEFAULT_OBJECTIVES),
      questions=[question.model_copy() for _ in range(self.expected_count(options))],
    )
