"""Request models for format-driven and quiz generation."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from app.schema.options import MAX_ITEM_COUNT


class FormatGenerationRequest(BaseModel):
  """One subject+format generation request."""

  subject: str = Field(min_length=1, description="Subject name.", examples=["math"])
  format: str | None = Field(default=None, description="Layout variant for the subject.", examples=["guided"])
  topic: str = Field(default="", description="Topic for the resource.", examples=["fractions"])
  grade: str = Field(default="", description="Grade label used in prompts.", examples=["5th grade"])
  theme: str | None = Field(default=None, examples=["Winter"])
  resource_type: str = Field(default="worksheet", examples=["worksheet"])
  question_count: int = Field(default=5, ge=0, le=MAX_ITEM_COUNT)
  selected_question_types: list[str] = Field(default_factory=list)
  custom_instructions: str = Field(default="", max_length=2000)
  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

  @model_validator(mode="before")
  @classmethod
  def _grade_from_grade_level(cls, data: Any) -> Any:
    if isinstance(data, dict) and not data.get("grade") and data.get("gradeLevel"):
      data = {**data, "grade": data["gradeLevel"]}
    return data

  @property
  def normalized_resource_type(self) -> str:
    return self.resource_type.strip().lower().replace(" ", "_")


class QuizGenerationRequest(BaseModel):
  """Quiz request; every field is required but validated by the route for a stable error message."""

  grade: str | None = None
  subject: str | None = None
  topic_area: str | None = None
  question_count: int | None = Field(default=None, ge=0, le=MAX_ITEM_COUNT)
  selected_question_types: list[str] | None = None
  theme: str | None = None
  model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

  def missing_fields(self) -> list[str]:
    required = {
      "grade": self.grade,
      "subject": self.subject,
      "topicArea": self.topic_area,
      "questionCount": self.question_count,
      "selectedQuestionTypes": self.selected_question_types,
    }
    return [name for name, value in required.items() if not value]
