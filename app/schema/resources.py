"""Canonical resource shapes produced by format handlers and consumed by renderers."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _ResourceModel(BaseModel):
  model_config = ConfigDict(populate_by_name=True, extra="ignore")


class WorksheetBase(_ResourceModel):
  resource_type: Literal["worksheet"] = Field(default="worksheet", alias="resourceType")
  title: str = ""
  grade_level: str = ""
  subject: str
  topic: str = ""
  theme: str | None = None
  instructions: str = ""


class MathProblemItem(_ResourceModel):
  type: str = "standard"
  question: str = ""
  answer: str = ""
  explanation: str = ""
  visual_aid: Any = None
  hints: list[str] | None = None
  steps: list[str] | None = None
  thinking_points: list[str] | None = None
  materials_needed: list[str] | None = None
  expected_outcome: str | None = None


class MathWorksheet(WorksheetBase):
  subject: str = "Math"
  format: Literal["standard", "guided", "interactive"]
  problems: list[MathProblemItem] = Field(default_factory=list)
  vocabulary: dict[str, str] = Field(default_factory=dict)


class ReadingPassage(_ResourceModel):
  text: str = ""
  type: str | None = None
  lexile_level: str | None = None
  target_words: list[str] = Field(default_factory=list)
  elements_focus: list[str] = Field(default_factory=list)


class ComprehensionItem(_ResourceModel):
  question: str = ""
  answer: str = ""
  evidence_prompt: str = ""
  skill_focus: str = ""
  hints: list[str] = Field(default_factory=list)


class VocabularyQuestion(_ResourceModel):
  question: str = ""
  answer: str = ""


class VocabularyStudyItem(_ResourceModel):
  word: str = ""
  context: str = ""
  definition: str = ""
  questions: list[VocabularyQuestion] = Field(default_factory=list)
  application: str = ""


class LiteraryItem(_ResourceModel):
  question: str = ""
  answer: str = ""
  literary_element: str = ""
  evidence_prompt: str = ""
  analysis_points: list[str] = Field(default_factory=list)


class _ReadingWorksheet(WorksheetBase):
  subject: str = "Reading"
  passage: ReadingPassage | None = None


class ComprehensionWorksheet(_ReadingWorksheet):
  format: Literal["comprehension"] = "comprehension"
  problems: list[ComprehensionItem] = Field(default_factory=list)


class VocabularyContextWorksheet(_ReadingWorksheet):
  format: Literal["vocabulary_context"] = "vocabulary_context"
  problems: list[VocabularyStudyItem] = Field(default_factory=list)


class LiteraryAnalysisWorksheet(_ReadingWorksheet):
  format: Literal["literary_analysis"] = "literary_analysis"
  problems: list[LiteraryItem] = Field(default_factory=list)


class ScienceProblem(_ResourceModel):
  type: str = ""
  question: str = ""
  answer: str = ""
  explanation: str = ""
  focus_area: str = ""
  thinking_points: list[str] = Field(default_factory=list)
  hints: list[str] = Field(default_factory=list)


class ScienceContext(_ResourceModel):
  topic: str = ""
  explanation: str = ""
  key_concepts: list[str] = Field(default_factory=list)
  key_terms: dict[str, str] = Field(default_factory=dict)
  applications: list[str] = Field(default_factory=list)
  problems: list[ScienceProblem] = Field(default_factory=list)


class AnalysisContent(_ResourceModel):
  analysis_focus: str = ""
  critical_aspects: str = ""
  data_patterns: str = ""
  implications: str = ""
  key_points: list[str] = Field(default_factory=list)


class LabContent(_ResourceModel):
  introduction: str = ""
  main_components: str = ""
  importance: str = ""
  causes_effects: str = ""
  additional_info: str = ""


class _ScienceWorksheet(WorksheetBase):
  subject: str = "Science"
  theme: str | None = "General"


class ScienceContextWorksheet(_ScienceWorksheet):
  format: Literal["science_context"] = "science_context"
  science_context: ScienceContext | None = None


class AnalysisWorksheet(_ScienceWorksheet):
  format: Literal["analysis_focus"] = "analysis_focus"
  analysis_content: AnalysisContent | None = None
  problems: list[ScienceProblem] = Field(default_factory=list)


class LabExperimentWorksheet(_ScienceWorksheet):
  format: Literal["lab_experiment"] = "lab_experiment"
  experiment: dict[str, Any] = Field(default_factory=dict)
  materials: list[str] = Field(default_factory=list)
  procedure: list[str] = Field(default_factory=list)
  content: LabContent | None = None
  problems: list[ScienceProblem] = Field(default_factory=list)
  key_terms: dict[str, str] = Field(default_factory=dict)


WorksheetResource = Annotated[
  MathWorksheet | ComprehensionWorksheet | VocabularyContextWorksheet | LiteraryAnalysisWorksheet | ScienceContextWorksheet | AnalysisWorksheet | LabExperimentWorksheet,
  Field(discriminator="format"),
]

WORKSHEET_ADAPTER: TypeAdapter[Any] = TypeAdapter(WorksheetResource)


class QuizQuestion(_ResourceModel):
  type: Literal["multiple_choice", "short_answer"]
  question: str
  options: list[str] = Field(default_factory=list)
  answer: Any = None
  correct_answer: Any = Field(default=None, alias="correctAnswer")
  explanation: str = ""
  cognitive_level: str = Field(default="recall", alias="cognitiveLevel")
  points: int = 1


class QuizMetadata(_ResourceModel):
  complexity_level: float = Field(default=5, alias="complexityLevel")
  language_level: float = Field(default=5, alias="languageLevel")
  cognitive_distribution: dict[str, float] = Field(default_factory=lambda: {"recall": 0.6, "comprehension": 0.3, "application": 0.1, "analysis": 0.0}, alias="cognitiveDistribution")


class QuizResource(_ResourceModel):
  resource_type: Literal["quiz"] = Field(default="quiz", alias="resourceType")
  title: str = "Quiz"
  subject: str = "General"
  grade_level: str = ""
  topic: str = "General"
  theme: str = "General"
  format: str = "multiple_choice"
  instructions: str | None = None
  estimated_time: str = Field(default="", alias="estimatedTime")
  questions: list[QuizQuestion]
  total_points: int = Field(default=0, alias="totalPoints")
  metadata: QuizMetadata = Field(default_factory=QuizMetadata)


class RubricLevel(_ResourceModel):
  score: str | int
  label: str = ""
  description: str = ""
  examples: list[str] = Field(default_factory=list)


class RubricCriterion(_ResourceModel):
  criterion: str = ""
  description: str = ""
  levels: list[RubricLevel] = Field(default_factory=list)


class RubricResource(_ResourceModel):
  resource_type: Literal["rubric"] = Field(default="rubric", alias="resourceType")
  title: str = ""
  subject: str = ""
  grade_level: str = ""
  format: str = "4-point"
  description: str = ""
  criteria: list[RubricCriterion] = Field(default_factory=list)


class ExitSlipResource(_ResourceModel):
  resource_type: Literal["exit_slip"] = Field(default="exit_slip", alias="resourceType")
  title: str = ""
  subject: str = ""
  grade_level: str = ""
  format: str = "question"
  exit_slip_topic: str = ""
  difficulty_level: str = ""
  questions: list[dict[str, Any]] = Field(default_factory=list)


class LessonPlanResource(_ResourceModel):
  resource_type: Literal["lesson_plan"] = Field(default="lesson_plan", alias="resourceType")
  title: str = ""
  subject: str = ""
  grade_level: str = ""
  topic: str = ""
  format: str = "lesson_plan"
  content: dict[str, Any] = Field(default_factory=dict)


def parse_worksheet(data: dict[str, Any]) -> Any:
  """Validate a worksheet dict into its format-specific model."""
  return WORKSHEET_ADAPTER.validate_python(data)
