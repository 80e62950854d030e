"""Pedagogical tuning values derived from grade, subject and difficulty.

Everything here is pure and deterministic. The values feed the prompt builders as guidance text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final


class GradeBand(str, Enum):
  EARLY_ELEMENTARY = "early_elementary"
  UPPER_ELEMENTARY = "upper_elementary"
  MIDDLE_SCHOOL = "middle_school"
  HIGH_SCHOOL = "high_school"


class DifficultyLevel(str, Enum):
  BASIC = "basic"
  INTERMEDIATE = "intermediate"
  ADVANCED = "advanced"


GRADE_BANDS: Final[dict[GradeBand, tuple[str, ...]]] = {
  GradeBand.EARLY_ELEMENTARY: ("K", "1", "2"),
  GradeBand.UPPER_ELEMENTARY: ("3", "4", "5"),
  GradeBand.MIDDLE_SCHOOL: ("6", "7", "8"),
  GradeBand.HIGH_SCHOOL: ("9", "10", "11", "12"),
}

# Grades that cannot be placed in a band land here.
DEFAULT_GRADE_BAND: Final[GradeBand] = GradeBand.UPPER_ELEMENTARY
DEFAULT_GRADE: Final[str] = "5"

SUBJECTS: Final[tuple[str, ...]] = ("math", "science", "reading", "general")

_DIFFICULTY_ALIASES: Final[dict[str, DifficultyLevel]] = {
  "basic": DifficultyLevel.BASIC,
  "easy": DifficultyLevel.BASIC,
  "intermediate": DifficultyLevel.INTERMEDIATE,
  "medium": DifficultyLevel.INTERMEDIATE,
  "advanced": DifficultyLevel.ADVANCED,
  "hard": DifficultyLevel.ADVANCED,
}

_GRADE_RE = re.compile(r"^(?:GRADE\s*)?(\d{1,2})\s*(?:ST|ND|RD|TH)?(?:\s*GRADE)?$")

COGNITIVE_LEVELS: Final[tuple[str, ...]] = ("remember", "understand", "apply", "analyze", "evaluate", "create")


@dataclass(frozen=True)
class CognitiveDistribution:
  """Share of questions per Bloom level; every weight is in [0, 1] and the total is at most 1."""

  remember: float
  understand: float
  apply: float
  analyze: float
  evaluate: float
  create: float

  def as_dict(self) -> dict[str, float]:
    return {level: getattr(self, level) for level in COGNITIVE_LEVELS}

  @property
  def total(self) -> float:
    return sum(self.as_dict().values())

  @classmethod
  def from_weights(cls, weights: tuple[float, float, float, float, float, float]) -> CognitiveDistribution:
    return cls(*weights)


@dataclass(frozen=True)
class DifficultyParameters:
  cognitive_levels: CognitiveDistribution
  question_types: tuple[str, ...]
  language_complexity: float
  visual_support: float
  concept_depth: float
  multi_step_complexity: float
  kindergarten_specific: dict[str, bool] | None = field(default=None, hash=False)
  question_types_by_level: dict[str, tuple[str, ...]] | None = field(default=None, hash=False)
  advanced_elements: dict[str, Any] | None = field(default=None, hash=False)
  grade12_specific: dict[str, Any] | None = field(default=None, hash=False)

  def to_dict(self) -> dict[str, Any]:
    payload: dict[str, Any] = {
      "cognitiveLevel": self.cognitive_levels.as_dict(),
      "questionTypes": list(self.question_types),
      "languageComplexity": self.language_complexity,
      "visualSupport": self.visual_support,
      "conceptDepth": self.concept_depth,
      "multiStepComplexity": self.multi_step_complexity,
    }
    if self.kindergarten_specific is not None:
      payload["kindergartenSpecific"] = dict(self.kindergarten_specific)
    if self.question_types_by_level is not None:
      payload["questionTypesByLevel"] = {level: list(types) for level, types in self.question_types_by_level.items()}
    if self.advanced_elements is not None:
      payload["advancedElements"] = self.advanced_elements
    if self.grade12_specific is not None:
      payload["grade12Specific"] = self.grade12_specific
    return payload


BASE_COGNITIVE_LEVELS: Final[dict[GradeBand, tuple[float, float, float, float, float, float]]] = {
  GradeBand.EARLY_ELEMENTARY: (0.4, 0.4, 0.2, 0.0, 0.0, 0.0),
  GradeBand.UPPER_ELEMENTARY: (0.2, 0.4, 0.3, 0.1, 0.0, 0.0),
  GradeBand.MIDDLE_SCHOOL: (0.1, 0.2, 0.3, 0.3, 0.1, 0.0),
  GradeBand.HIGH_SCHOOL: (0.1, 0.2, 0.2, 0.3, 0.1, 0.1),
}

QUESTION_TYPES_BY_BAND: Final[dict[GradeBand, tuple[str, ...]]] = {
  GradeBand.EARLY_ELEMENTARY: ("multiple_choice", "matching", "true_false"),
  GradeBand.UPPER_ELEMENTARY: ("multiple_choice", "short_answer", "matching", "true_false"),
  GradeBand.MIDDLE_SCHOOL: ("multiple_choice", "short_answer", "long_answer", "matching"),
  GradeBand.HIGH_SCHOOL: ("multiple_choice", "short_answer", "long_answer", "analysis", "comparative_analysis", "evidence_based", "synthesis", "evaluation", "creative_response"),
}

_DIFFICULTY_SCALE: Final[dict[DifficultyLevel, float]] = {DifficultyLevel.BASIC: 0.8, DifficultyLevel.INTERMEDIATE: 1.0, DifficultyLevel.ADVANCED: 1.2}
_LANGUAGE_BASE: Final[dict[GradeBand, int]] = {GradeBand.EARLY_ELEMENTARY: 2, GradeBand.UPPER_ELEMENTARY: 4, GradeBand.MIDDLE_SCHOOL: 6, GradeBand.HIGH_SCHOOL: 8}
_LANGUAGE_MODIFIER: Final[dict[DifficultyLevel, int]] = {DifficultyLevel.BASIC: -1, DifficultyLevel.INTERMEDIATE: 0, DifficultyLevel.ADVANCED: 1}
_VISUAL_BASE: Final[dict[GradeBand, int]] = {GradeBand.EARLY_ELEMENTARY: 9, GradeBand.UPPER_ELEMENTARY: 7, GradeBand.MIDDLE_SCHOOL: 5, GradeBand.HIGH_SCHOOL: 3}
_VISUAL_SUBJECT_BONUS: Final[dict[str, int]] = {"math": 2, "science": 1, "reading": 0, "general": 0}
_MULTI_STEP_BASE: Final[dict[GradeBand, int]] = {GradeBand.EARLY_ELEMENTARY: 1, GradeBand.UPPER_ELEMENTARY: 3, GradeBand.MIDDLE_SCHOOL: 5, GradeBand.HIGH_SCHOOL: 7}
_MULTI_STEP_MODIFIER: Final[dict[DifficultyLevel, int]] = {DifficultyLevel.BASIC: -1, DifficultyLevel.INTERMEDIATE: 0, DifficultyLevel.ADVANCED: 2}
_SUBJECT_SCALING: Final[dict[str, float]] = {"math": 1.0, "science": 0.9, "reading": 0.8, "general": 1.0}
_BAND_SCALING: Final[dict[GradeBand, float]] = {GradeBand.EARLY_ELEMENTARY: 0.8, GradeBand.UPPER_ELEMENTARY: 1.0, GradeBand.MIDDLE_SCHOOL: 1.2, GradeBand.HIGH_SCHOOL: 1.4}

KINDERGARTEN_QUESTION_TYPES: Final[tuple[str, ...]] = ("picture_matching", "oral_response", "true_false", "sorting", "sequencing")
KINDERGARTEN_FLAGS: Final[tuple[str, ...]] = (
  "phonologicalAwareness",
  "letterRecognition",
  "numberSense",
  "basicShapes",
  "colors",
  "handsonActivities",
  "movementBased",
  "repetitive",
  "picturePrompts",
  "audioSupport",
  "manipulatives",
)

GRADE12_QUESTION_TYPES_BY_LEVEL: Final[dict[str, tuple[str, ...]]] = {
  "remember": ("terminology_application", "concept_identification"),
  "understand": ("theoretical_comprehension", "cross_disciplinary_connection", "contextual_interpretation"),
  "apply": ("complex_problem_solving", "real_world_application", "interdisciplinary_application", "case_study_analysis"),
  "analyze": ("systems_analysis", "comparative_evaluation", "research_methodology_analysis", "data_interpretation", "argument_analysis"),
  "evaluate": ("theoretical_critique", "methodology_evaluation", "evidence_evaluation", "solution_assessment"),
  "create": ("research_design", "theory_development", "innovative_solution", "model_creation"),
}

GRADE12_ADVANCED_ELEMENTS: Final[dict[str, Any]] = {
  "required": ["abstract_reasoning", "theoretical_framework", "research_methodology", "critical_analysis", "interdisciplinary_connection", "real_world_application", "evidence_based_argumentation"],
  "optional": ["meta_analysis", "research_design", "statistical_analysis", "theoretical_modeling"],
  "subjectSpecific": {
    "math": ["proof_construction", "mathematical_modeling", "abstract_algebra", "advanced_calculus"],
    "science": ["experimental_design", "data_analysis", "theoretical_physics", "molecular_biology"],
    "reading": ["literary_theory", "comparative_literature", "critical_theory", "advanced_rhetoric"],
  },
}

GRADE12_SPECIFIC: Final[dict[str, Any]] = {
  "advancedConcepts": True,
  "researchBased": True,
  "crossDisciplinary": True,
  "realWorldApplications": True,
  "subjectSpecific": {
    "math": {"topics": ["calculus", "advanced_algebra", "statistics"], "skills": ["proof_writing", "mathematical_modeling", "abstract_reasoning"]},
    "science": {"topics": ["advanced_physics", "organic_chemistry", "molecular_biology"], "skills": ["lab_research", "data_analysis", "scientific_writing"]},
    "reading": {"topics": ["literary_theory", "comparative_literature", "rhetoric"], "skills": ["critical_analysis", "research_writing", "theoretical_framework"]},
  },
}


def _clamp(value: float, low: float, high: float) -> float:
  return min(max(value, low), high)


def _score(value: float) -> float:
  """Clamp a tuning score to [1, 10] and keep one decimal."""
  return round(_clamp(value, 1, 10), 1)


def normalize_subject(subject: str | None) -> str:
  """Collapse a free-form subject to one of math/science/reading/general."""
  normalized = (subject or "").strip().lower()
  return normalized if normalized in SUBJECTS else "general"


def normalize_difficulty(difficulty: str | DifficultyLevel | None) -> DifficultyLevel:
  if isinstance(difficulty, DifficultyLevel):
    return difficulty
  return _DIFFICULTY_ALIASES.get((difficulty or "").strip().lower(), DifficultyLevel.INTERMEDIATE)


def normalize_grade(grade: str | int | None) -> str:
  """Return "K", a bare grade number, or the cleaned input when it cannot be parsed."""
  cleaned = str(grade if grade is not None else "").strip().upper()
  if cleaned in {"K", "KINDERGARTEN", "GRADE K"}:
    return "K"

  match = _GRADE_RE.match(cleaned)
  if match:
    return str(int(match.group(1)))
  return cleaned


def is_kindergarten(grade: str | int | None) -> bool:
  return normalize_grade(grade) == "K"


def grade_number(grade: str | int | None) -> int | None:
  """Return the numeric grade, 0 for Kindergarten, or None."""
  normalized = normalize_grade(grade)
  if normalized == "K":
    return 0
  return int(normalized) if normalized.isdigit() else None


def get_grade_band(grade: str | int | None) -> GradeBand:
  """Bucket a grade string; empty input maps to early elementary, anything unplaceable to upper elementary."""
  if grade is None or str(grade).strip() == "":
    return GradeBand.EARLY_ELEMENTARY

  normalized = normalize_grade(grade)
  for band, grades in GRADE_BANDS.items():
    if normalized in grades:
      return band

  return DEFAULT_GRADE_BAND


def _scale_cognitive_levels(band: GradeBand, difficulty: DifficultyLevel) -> CognitiveDistribution:
  factor = _DIFFICULTY_SCALE[difficulty]
  scaled = [_clamp(weight * factor, 0.0, 1.0) for weight in BASE_COGNITIVE_LEVELS[band]]
  total = sum(scaled)
  # Advanced scaling can push the total above 1; renormalize so it stays a distribution.
  if total > 1:
    scaled = [weight / total for weight in scaled]
  return CognitiveDistribution(*(round(weight, 4) for weight in scaled))


def subject_scaling(subject: str, band: GradeBand) -> float:
  return _SUBJECT_SCALING[normalize_subject(subject)] * _BAND_SCALING[band]


def _grade_or_default(grade: str | int | None) -> str:
  return DEFAULT_GRADE if grade is None or str(grade).strip() == "" else str(grade)


def get_difficulty_parameters(grade: str | int | None, subject: str | None, difficulty: str | DifficultyLevel | None) -> DifficultyParameters:
  """Return the tuning values for one (grade, subject, difficulty) triple."""
  grade_value = _grade_or_default(grade)
  band = get_grade_band(grade_value)
  subject_key = normalize_subject(subject)
  level = normalize_difficulty(difficulty)
  scaling = subject_scaling(subject_key, band)

  language = _score(_LANGUAGE_BASE[band] + _LANGUAGE_MODIFIER[level])
  visual = _score(_VISUAL_BASE[band] + _VISUAL_SUBJECT_BONUS[subject_key])
  depth = _score((_LANGUAGE_BASE[band] + _LANGUAGE_MODIFIER[level]) * scaling)
  multi_step = _score((_MULTI_STEP_BASE[band] + _MULTI_STEP_MODIFIER[level]) * scaling)

  params = DifficultyParameters(
    cognitive_levels=_scale_cognitive_levels(band, level),
    question_types=QUESTION_TYPES_BY_BAND[band],
    language_complexity=language,
    visual_support=visual,
    concept_depth=depth,
    multi_step_complexity=multi_step,
  )

  number = grade_number(grade_value)
  if number == 0:
    return DifficultyParameters(
      cognitive_levels=CognitiveDistribution(0.6, 0.3, 0.1, 0.0, 0.0, 0.0),
      question_types=KINDERGARTEN_QUESTION_TYPES,
      language_complexity=1,
      visual_support=10,
      concept_depth=1,
      multi_step_complexity=1,
      kindergarten_specific={flag: True for flag in KINDERGARTEN_FLAGS},
    )

  if number == 12:
    return DifficultyParameters(
      cognitive_levels=CognitiveDistribution(0.05, 0.15, 0.25, 0.30, 0.15, 0.10),
      question_types=tuple(question_type for types in GRADE12_QUESTION_TYPES_BY_LEVEL.values() for question_type in types),
      language_complexity=9,
      visual_support=4,
      concept_depth=9,
      multi_step_complexity=9,
      question_types_by_level=dict(GRADE12_QUESTION_TYPES_BY_LEVEL),
      advanced_elements=GRADE12_ADVANCED_ELEMENTS,
      grade12_specific=GRADE12_SPECIFIC,
    )

  # Grades 9-11 climb toward the grade 12 profile.
  if band is GradeBand.HIGH_SCHOOL and number is not None:
    progression = (number - 9) / 3
    return DifficultyParameters(
      cognitive_levels=params.cognitive_levels,
      question_types=params.question_types,
      language_complexity=_score(language + progression),
      visual_support=visual,
      concept_depth=_score(depth + progression),
      multi_step_complexity=_score(multi_step + progression),
    )

  return params


def _format_score(value: float) -> str:
  return f"{value:g}"


def language_guideline(complexity: float) -> str:
  if complexity <= 3:
    return "Use simple words, short sentences, and basic vocabulary"
  if complexity <= 6:
    return "Use grade-appropriate vocabulary, clear explanations, and moderate sentence complexity"
  return "Use advanced vocabulary, complex sentence structures, and subject-specific terminology"


def visual_guideline(support: float) -> str:
  if support >= 8:
    return "Include frequent visual aids, diagrams, and step-by-step illustrations"
  if support >= 5:
    return "Use strategic visuals to support key concepts and complex ideas"
  return "Include visuals only for complex concepts or when essential for understanding"


_CONCEPT_DEPTH_GUIDELINES: Final[dict[str, tuple[str, str, str]]] = {
  "math": ("Focus on basic operations and concrete examples", "Include pattern recognition and simple problem-solving", "Incorporate abstract concepts and complex problem-solving"),
  "science": ("Cover observable phenomena and simple cause-effect", "Include basic scientific principles and simple experiments", "Explore complex systems and scientific theories"),
  "reading": ("Focus on literal comprehension and basic vocabulary", "Include inferential understanding and context clues", "Explore themes, author's purpose, and literary analysis"),
  "general": ("Focus on core facts and familiar examples", "Connect ideas and explain relationships between them", "Explore abstract ideas and connections across topics"),
}

_COMPLEXITY_GUIDELINES: Final[dict[str, tuple[str, str, str]]] = {
  "math": ("Single-step problems with clear instructions", "Two to three step problems with some guidance", "Multi-step problems requiring strategic thinking"),
  "science": ("Single-variable relationships and simple processes", "Multi-variable interactions with guided analysis", "Complex systems analysis and experimental design"),
  "reading": ("Direct recall and simple comprehension questions", "Analysis of text elements and basic inference", "Complex analysis across multiple text elements"),
  "general": ("Direct recall questions with a single step", "Questions combining two or three ideas", "Questions requiring reasoning across several ideas"),
}


def _tiered(value: float, tiers: tuple[str, str, str]) -> str:
  if value <= 3:
    return tiers[0]
  if value <= 7:
    return tiers[1]
  return tiers[2]


def concept_depth_guideline(depth: float, subject: str) -> str:
  return _tiered(depth, _CONCEPT_DEPTH_GUIDELINES[normalize_subject(subject)])


def complexity_guideline(complexity: float, subject: str) -> str:
  return _tiered(complexity, _COMPLEXITY_GUIDELINES[normalize_subject(subject)])


_BAND_GUIDELINES: Final[dict[GradeBand, dict[str, tuple[str, ...]]]] = {
  GradeBand.EARLY_ELEMENTARY: {
    "math": (
      "Use concrete manipulatives and visual representations",
      "Focus on number recognition and counting (1-20 for K, 1-100 for 1-2)",
      "Introduce basic addition/subtraction through stories",
      "Emphasize patterns and sorting",
      "Include shape recognition and basic geometry",
      "Use real-world examples (counting objects, sharing items)",
      "Incorporate movement and hands-on activities",
    ),
    "science": (
      "Focus on observable phenomena and sensory experiences",
      "Use simple cause-and-effect relationships",
      "Include hands-on exploration and discovery",
      "Connect to daily life experiences",
      "Use picture-based observations",
      "Incorporate basic measurement concepts",
      "Focus on patterns in nature and seasons",
    ),
    "reading": (
      "Use sight words and phonics patterns",
      "Include picture support for all text",
      "Use repetitive text structures",
      "Focus on letter recognition and sounds",
      "Keep sentences short and simple",
      "Include rhyming and word families",
      "Use familiar vocabulary and contexts",
    ),
    "general": (
      "Use familiar, everyday contexts",
      "Keep each question to one idea",
      "Support questions with pictures or symbols",
      "Use yes/no and picture-choice formats",
      "Repeat key words across questions",
      "Connect content to home and classroom life",
      "Keep instructions to one short sentence",
    ),
  },
  GradeBand.UPPER_ELEMENTARY: {
    "math": (
      "Bridge concrete and abstract concepts",
      "Include word problems with real-world applications",
      "Focus on multiplication, division, and fractions",
      "Introduce basic algebraic thinking",
      "Use visual models for complex concepts",
      "Include measurement and data interpretation",
      "Incorporate basic geometric principles",
    ),
    "science": (
      "Introduce scientific method basics",
      "Include simple experiments and observations",
      "Connect concepts to everyday experiences",
      "Use diagrams and simple models",
      "Include basic data collection",
      "Focus on classification and systems",
      "Incorporate environmental awareness",
    ),
    "reading": (
      "Focus on comprehension strategies",
      "Include various text features",
      "Use grade-appropriate vocabulary",
      "Incorporate different genres",
      "Include inference and prediction",
      "Focus on main idea and details",
      "Use text evidence for support",
    ),
    "general": (
      "Connect new facts to prior knowledge",
      "Include short explanations with examples",
      "Use charts and simple diagrams",
      "Ask for reasons as well as answers",
      "Mix recall with simple application",
      "Use grade-appropriate vocabulary",
      "Include real-world scenarios",
    ),
  },
  GradeBand.MIDDLE_SCHOOL: {
    "math": (
      "Develop algebraic thinking and reasoning",
      "Include multi-step problem solving",
      "Focus on proportional relationships",
      "Incorporate geometric proofs",
      "Use real-world data analysis",
      "Include statistical thinking",
      "Bridge to abstract concepts",
    ),
    "science": (
      "Explore complex systems and relationships",
      "Include experimental design",
      "Use data analysis and graphs",
      "Incorporate scientific models",
      "Focus on cause and effect",
      "Include technology applications",
      "Use scientific argumentation",
    ),
    "reading": (
      "Analyze literary elements",
      "Include textual evidence",
      "Focus on author's craft",
      "Use multiple text types",
      "Incorporate research skills",
      "Include critical thinking",
      "Focus on argument analysis",
    ),
    "general": (
      "Compare and contrast related ideas",
      "Ask for evidence-based explanations",
      "Use sources, data or short texts as prompts",
      "Include cause-and-effect reasoning",
      "Introduce subject-specific terminology",
      "Include multi-part questions",
      "Encourage justification of answers",
    ),
  },
  GradeBand.HIGH_SCHOOL: {
    "math": (
      "Focus on abstract concepts and proofs",
      "Include complex problem solving",
      "Use advanced algebraic concepts",
      "Incorporate calculus principles",
      "Include mathematical modeling",
      "Focus on logical reasoning",
      "Use real-world applications",
      "Include cross-concept connections",
      "Require mathematical justification",
      "Incorporate technology tools",
    ),
    "science": (
      "Explore advanced theories and models",
      "Include complex experimental design",
      "Use statistical analysis",
      "Focus on scientific research",
      "Include peer review process",
      "Use advanced technology",
      "Incorporate cross-disciplinary concepts",
      "Include real-world applications",
      "Focus on scientific writing",
      "Use advanced data visualization",
    ),
    "reading": (
      "Analyze complex texts and themes",
      "Include advanced literary analysis",
      "Focus on critical theory",
      "Use multiple text synthesis",
      "Include research methodology",
      "Focus on academic writing",
      "Incorporate rhetorical analysis",
      "Include cultural context",
      "Use advanced vocabulary",
      "Focus on author's purpose and craft",
    ),
    "general": (
      "Analyze ideas from multiple perspectives",
      "Require evidence and justification",
      "Include synthesis across sources",
      "Use discipline-specific vocabulary",
      "Incorporate real-world case studies",
      "Include evaluation of arguments",
      "Focus on cause, effect and consequence",
      "Encourage original conclusions",
      "Include cross-disciplinary connections",
      "Use extended written responses",
    ),
  },
}

_BAND_TITLES: Final[dict[GradeBand, str]] = {
  GradeBand.EARLY_ELEMENTARY: "EARLY",
  GradeBand.UPPER_ELEMENTARY: "UPPER ELEMENTARY",
  GradeBand.MIDDLE_SCHOOL: "MIDDLE SCHOOL",
  GradeBand.HIGH_SCHOOL: "HIGH SCHOOL",
}


def grade_band_guidelines(band: GradeBand, subject: str) -> str:
  """Render the band/subject bullet block."""
  subject_key = normalize_subject(subject)
  bullets = "\n".join(f"- {item}" for item in _BAND_GUIDELINES[band][subject_key])
  return f"GRADE BAND SPECIFIC GUIDELINES:\n\n{_BAND_TITLES[band]} {subject_key.upper()} GUIDELINES:\n{bullets}"


def get_prompt_enhancements(grade: str | int | None, subject: str | None, difficulty: str | DifficultyLevel | None) -> str:
  """Render the DIFFICULTY ADJUSTMENTS block embedded into generation prompts."""
  params = get_difficulty_parameters(grade, subject, difficulty)
  band = get_grade_band(_grade_or_default(grade))
  subject_key = normalize_subject(subject)

  distribution = "\n".join(f"   - {level}: {round(value * 100)}% of questions" for level, value in params.cognitive_levels.as_dict().items() if value > 0)

  return (
    "\nDIFFICULTY ADJUSTMENTS:\n"
    f"1. Cognitive Level Distribution:\n{distribution}\n\n"
    f"2. Language Complexity ({_format_score(params.language_complexity)}/10):\n   - {language_guideline(params.language_complexity)}\n\n"
    f"3. Visual Support ({_format_score(params.visual_support)}/10):\n   - {visual_guideline(params.visual_support)}\n\n"
    f"4. Question Types:\n   - Use these types: {', '.join(params.question_types)}\n\n"
    f"5. Concept Depth ({_format_score(params.concept_depth)}/10):\n   - {concept_depth_guideline(params.concept_depth, subject_key)}\n\n"
    f"6. Multi-Step Complexity ({_format_score(params.multi_step_complexity)}/10):\n   - {complexity_guideline(params.multi_step_complexity, subject_key)}\n\n"
    f"{grade_band_guidelines(band, subject_key)}\n"
  )
