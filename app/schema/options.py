"""Request-side option models shared by generators and services."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

DEFAULT_ITEM_COUNT = 10
MAX_ITEM_COUNT = 50


class ResourceGenerationOptions(BaseModel):
  """One teacher submission; immutable for the lifetime of a generation attempt."""

  subject: str = Field(default="general", description="Subject area (math, reading, science, or free text).", examples=["math"])
  grade_level: str = Field(default="", description="Grade string such as K, 3rd, or 12.", examples=["5"])
  resource_type: str = Field(default="worksheet", description="worksheet, quiz, rubric, exit_slip, or lesson_plan.", examples=["worksheet"])
  topic_area: str | None = Field(default=None, description="Free-text topic.", examples=["fractions"])
  topic: str | None = Field(default=None, description="Subject-specific topic key (e.g. algebra, cells).")
  subject_area: str | None = Field(default=None, description="Science discipline (biology, chemistry, ...).")
  difficulty: str = Field(default="medium", description="basic/intermediate/advanced or easy/medium/hard.")
  theme: str = Field(default="General", description="Visual theme name.", examples=["Halloween"])
  format: str | None = Field(default=None, description="Subject-specific layout variant.")
  question_count: int | None = Field(default=None, ge=0, le=MAX_ITEM_COUNT)
  problem_count: int | None = Field(default=None, ge=0, le=MAX_ITEM_COUNT)
  custom_instructions: str | None = Field(default=None, max_length=2000)
  include_visuals: bool = False
  include_diagrams: bool = False
  include_experiments: bool = False
  include_steps: bool = True
  include_vocabulary: bool = True
  reading_level: str | None = None
  selected_question_types: list[str] = Field(default_factory=list)
  focus_areas: list[str] = Field(default_factory=list)
  quiz_type: str | None = None
  rubric_style: str | None = Field(default=None, description="4-point, 3-point, or checklist.")
  criteria_count: int | None = Field(default=None, ge=1, le=10)
  exit_slip_format: str | None = None
  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore")

  @model_validator(mode="before")
  @classmethod
  def _accept_legacy_keys(cls, data: Any) -> Any:
    """Map older UI field names onto the canonical ones."""
    if not isinstance(data, dict):
      return data
    data = dict(data)
    legacy = {"grade": "gradeLevel", "numberOfQuestions": "questionCount", "numberOfProblems": "problemCount", "questionTypes": "selectedQuestionTypes"}
    for old, new in legacy.items():
      if old in data and new not in data:
        data[new] = data.pop(old)
    return data

  @field_validator("grade_level", "subject", "resource_type", mode="before")
  @classmethod
  def _strip(cls, value: Any) -> Any:
    if value is None:
      return ""
    return str(value).strip()

  def item_count(self, default: int = DEFAULT_ITEM_COUNT) -> int:
    """Requested number of items: question count, then problem count, then the default."""
    if self.question_count is not None:
      return self.question_count
    if self.problem_count is not None:
      return self.problem_count
    return default

  @property
  def topic_text(self) -> str:
    return self.topic_area or self.topic or ""
