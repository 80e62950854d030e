"""Quiz-specific difficulty table and prompt block."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Final

from app.ai.difficulty import GRADE_BANDS, GradeBand, normalize_grade, normalize_subject


@dataclass(frozen=True)
class QuizSkillMix:
  recall: float
  comprehension: float
  application: float
  analysis: float

  def as_dict(self) -> dict[str, float]:
    return {"recall": self.recall, "comprehension": self.comprehension, "application": self.application, "analysis": self.analysis}


@dataclass(frozen=True)
class QuizDifficultyParams:
  question_complexity: float
  language_level: float
  option_count: int
  time_per_question: float
  cognitive_skills: QuizSkillMix


BASE_QUIZ_PARAMS: Final[dict[GradeBand, QuizDifficultyParams]] = {
  GradeBand.EARLY_ELEMENTARY: QuizDifficultyParams(2, 2, 3, 2, QuizSkillMix(0.6, 0.3, 0.1, 0.0)),
  GradeBand.UPPER_ELEMENTARY: QuizDifficultyParams(4, 4, 4, 1.5, QuizSkillMix(0.4, 0.4, 0.2, 0.0)),
  GradeBand.MIDDLE_SCHOOL: QuizDifficultyParams(6, 6, 4, 1.5, QuizSkillMix(0.3, 0.3, 0.3, 0.1)),
  GradeBand.HIGH_SCHOOL: QuizDifficultyParams(8, 8, 4, 1.5, QuizSkillMix(0.2, 0.3, 0.3, 0.2)),
}

# (complexity delta, language delta, minutes delta, replacement skill mix)
_SUBJECT_ADJUSTMENTS: Final[dict[str, tuple[float, float, float, QuizSkillMix | None]]] = {
  "math": (1, 0, 0.5, None),
  "science": (0.5, 0, 0, QuizSkillMix(0.3, 0.3, 0.2, 0.2)),
  "reading": (0, 1, -0.5, None),
  "general": (0, 0, 0, None),
}

_COMPLEXITY_GUIDELINES: Final[dict[str, tuple[str, str, str, str]]] = {
  "math": (
    "Focus on basic operations and simple number recognition",
    "Include step-by-step problem solving",
    "Incorporate multi-step problems and basic formulas",
    "Challenge with complex problem-solving and abstract concepts",
  ),
  "science": (
    "Use simple observations and basic facts",
    "Include cause-and-effect relationships",
    "Incorporate scientific processes and systems",
    "Challenge with complex scientific concepts and analysis",
  ),
  "reading": (
    "Use basic vocabulary and simple sentences",
    "Include grade-level vocabulary and compound sentences",
    "Incorporate advanced vocabulary and complex sentences",
    "Challenge with sophisticated language and abstract concepts",
  ),
}

_ANSWER_LENGTHS: Final[dict[GradeBand, str]] = {
  GradeBand.EARLY_ELEMENTARY: "2-3 words",
  GradeBand.UPPER_ELEMENTARY: "1-2 sentences",
  GradeBand.MIDDLE_SCHOOL: "2-3 sentences",
  GradeBand.HIGH_SCHOOL: "3-4 sentences",
}

_BAND_GUIDELINES: Final[dict[GradeBand, dict[str, str]]] = {
  GradeBand.EARLY_ELEMENTARY: {
    "math": "Use visual aids, simple numbers (1-20), and basic operations",
    "science": "Focus on observable phenomena and simple cause-effect",
    "reading": "Use sight words and simple sentence structures",
    "general": "Use familiar everyday contexts and one idea per question",
  },
  GradeBand.UPPER_ELEMENTARY: {
    "math": "Include word problems, fractions, and basic geometry",
    "science": "Incorporate basic scientific concepts and simple experiments",
    "reading": "Focus on grammar rules and vocabulary in context",
    "general": "Mix fact recall with simple real-world application",
  },
  GradeBand.MIDDLE_SCHOOL: {
    "math": "Use algebraic concepts and complex problem-solving",
    "science": "Include scientific principles and experimental design",
    "reading": "Focus on language conventions and advanced grammar",
    "general": "Ask for explanations supported by evidence",
  },
  GradeBand.HIGH_SCHOOL: {
    "math": "Incorporate advanced mathematical concepts and proofs",
    "science": "Focus on complex scientific theories and analysis",
    "reading": "Include advanced grammar and language analysis",
    "general": "Require analysis, evaluation and synthesis of ideas",
  },
}


def get_quiz_grade_band(grade: str | None) -> GradeBand:
  """Quiz banding; unlike worksheet banding, an empty grade maps to upper elementary."""
  if grade is None or str(grade).strip() == "":
    return GradeBand.UPPER_ELEMENTARY

  normalized = normalize_grade(grade)
  for band, grades in GRADE_BANDS.items():
    if normalized in grades:
      return band
  return GradeBand.UPPER_ELEMENTARY


def get_quiz_difficulty_params(grade: str | None, subject: str | None) -> QuizDifficultyParams:
  base = BASE_QUIZ_PARAMS[get_quiz_grade_band(grade)]
  complexity_delta, language_delta, minutes_delta, skills = _SUBJECT_ADJUSTMENTS[normalize_subject(subject)]
  return replace(
    base,
    question_complexity=min(10, max(1, base.question_complexity + complexity_delta)),
    language_level=min(10, max(1, base.language_level + language_delta)),
    time_per_question=max(0.5, base.time_per_question + minutes_delta),
    cognitive_skills=skills or base.cognitive_skills,
  )


def quiz_complexity_guideline(complexity: float, subject: str | None) -> str:
  level = min(3, max(0, math.floor((complexity - 1) / 3)))
  guidelines = _COMPLEXITY_GUIDELINES.get(normalize_subject(subject), _COMPLEXITY_GUIDELINES["reading"])
  return guidelines[level]


def _fmt(value: float) -> str:
  return f"{value:g}"


def get_quiz_prompt_enhancements(grade: str | None, subject: str | None) -> str:
  params = get_quiz_difficulty_params(grade, subject)
  band = get_quiz_grade_band(grade)
  skills = params.cognitive_skills
  return (
    "\nQUIZ DIFFICULTY PARAMETERS:\n"
    f"1. Question Complexity ({_fmt(params.question_complexity)}/10):\n"
    "   - Adjust vocabulary and concept complexity accordingly\n"
    "   - Use grade-appropriate language and examples\n"
    f"   - {quiz_complexity_guideline(params.question_complexity, subject)}\n\n"
    "2. Cognitive Skills Distribution:\n"
    f"   - Recall Questions: {round(skills.recall * 100)}%\n"
    f"   - Comprehension Questions: {round(skills.comprehension * 100)}%\n"
    f"   - Application Questions: {round(skills.application * 100)}%\n"
    f"   - Analysis Questions: {round(skills.analysis * 100)}%\n\n"
    "3. Format Guidelines:\n"
    f"   - Multiple Choice: {params.option_count} options per question\n"
    "   - True/False: Clear, unambiguous statements\n"
    f"   - Short Answer: Expect {_ANSWER_LENGTHS[band]} responses\n\n"
    "4. Time Consideration:\n"
    f"   - Design questions that take approximately {_fmt(params.time_per_question)} minutes each\n"
    f"   - Total estimated time: {_fmt(params.time_per_question * 10)} minutes for 10 questions\n\n"
    f"GRADE-SPECIFIC GUIDELINES:\n- {_BAND_GUIDELINES[band][normalize_subject(subject)]}\n"
  )
