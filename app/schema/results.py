"""Typed shapes of subject generator output."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Answer = Any


def _coerce_options(value: Any) -> Any:
  """Accept options as a list or as a letter-keyed mapping."""
  if value is None:
    return []
  if isinstance(value, dict):
    return [str(option) for option in value.values()]
  return value


class _ResultModel(BaseModel):
  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class _ChoiceQuestion(_ResultModel):
  question: str
  type: str = "multiple_choice"
  options: list[str] = Field(default_factory=list)
  answer: Answer = None
  explanation: str = ""

  @field_validator("options", mode="before")
  @classmethod
  def _normalize_options(cls, value: Any) -> Any:
    return _coerce_options(value)


class MathProblem(_ResultModel):
  question: str
  answer: Answer = None
  explanation: str = ""
  steps: list[str] = Field(default_factory=list)
  visual: str | None = None


class MathGenerationResult(_ResultModel):
  title: str
  instructions: str = ""
  problems: list[MathProblem]
  decorations: list[str] = Field(default_factory=list)


class VocabularyItem(_ResultModel):
  word: str
  definition: str = ""
  context: str | None = None


class ReadingQuestion(_ChoiceQuestion):
  pass


class ReadingGenerationResult(_ResultModel):
  title: str
  passage: str
  questions: list[ReadingQuestion]
  vocabulary: list[VocabularyItem] = Field(default_factory=list)
  learning_objectives: list[str] = Field(default_factory=list)


class KeyTerm(_ResultModel):
  term: str
  definition: str = ""


class ScienceQuestion(_ChoiceQuestion):
  pass


class ScienceGenerationResult(_ResultModel):
  title: str
  introduction: str = ""
  learning_objectives: list[str] = Field(default_factory=list)
  questions: list[ScienceQuestion]
  key_terms: list[KeyTerm] = Field(default_factory=list)
  additional_resources: list[Any] = Field(default_factory=list)


class GeneralQuestion(_ChoiceQuestion):
  points: int = 1
  rubric: Any = None


class GeneralGenerationResult(_ResultModel):
  title: str
  introduction: str = ""
  questions: list[GeneralQuestion]
  learning_objectives: list[str] = Field(default_factory=list)


GenerationResult = MathGenerationResult | ReadingGenerationResult | ScienceGenerationResult | GeneralGenerationResult
