"""Unit tests for grade banding and difficulty parameters."""

from __future__ import annotations

import pytest
from app.ai.difficulty import (
  KINDERGARTEN_QUESTION_TYPES,
  DifficultyLevel,
  GradeBand,
  get_difficulty_parameters,
  get_grade_band,
  get_prompt_enhancements,
  normalize_difficulty,
  normalize_grade,
)


@pytest.mark.parametrize(
  ("grade", "band"),
  [("", GradeBand.EARLY_ELEMENTARY), ("K", GradeBand.EARLY_ELEMENTARY), ("3rd", GradeBand.UPPER_ELEMENTARY), ("Grade 7", GradeBand.MIDDLE_SCHOOL), ("11", GradeBand.HIGH_SCHOOL), ("13", GradeBand.UPPER_ELEMENTARY), ("college", GradeBand.UPPER_ELEMENTARY)],
)
def test_get_grade_band(grade: str, band: GradeBand) -> None:
  assert get_grade_band(grade) is band


def test_normalize_grade_handles_kindergarten_and_ordinals() -> None:
  assert normalize_grade("kindergarten") == "K"
  assert normalize_grade("5th grade") == "5"
  assert normalize_grade(" 08 ") == "8"


def test_difficulty_aliases_collapse_onto_three_levels() -> None:
  assert normalize_difficulty("easy") is DifficultyLevel.BASIC
  assert normalize_difficulty("Medium") is DifficultyLevel.INTERMEDIATE
  assert normalize_difficulty("hard") is DifficultyLevel.ADVANCED
  assert normalize_difficulty("impossible") is DifficultyLevel.INTERMEDIATE


def test_upper_elementary_math_parameters() -> None:
  params = get_difficulty_parameters("3", "math", "medium")
  assert params.language_complexity == 4
  assert params.visual_support == 9
  assert params.concept_depth == 4
  assert params.multi_step_complexity == 3
  assert "short_answer" in params.question_types
  assert params.kindergarten_specific is None


def test_kindergarten_overrides_band_values() -> None:
  params = get_difficulty_parameters("K", "reading", "hard")
  assert params.question_types == KINDERGARTEN_QUESTION_TYPES
  assert params.visual_support == 10
  assert params.language_complexity == 1
  assert params.kindergarten_specific is not None
  assert all(params.kindergarten_specific.values())


def test_grade_twelve_exposes_advanced_profile() -> None:
  params = get_difficulty_parameters("12", "science", "medium")
  assert params.question_types_by_level is not None
  assert "research_design" in params.question_types_by_level["create"]
  assert params.to_dict()["grade12Specific"]["researchBased"] is True


def test_high_school_progression_raises_language_complexity() -> None:
  grade9 = get_difficulty_parameters("9", "math", "medium")
  grade10 = get_difficulty_parameters("10", "math", "medium")
  assert grade9.language_complexity == 8
  assert grade10.language_complexity == 8.3


@pytest.mark.parametrize("grade", ["1", "4", "7", "10", "12", "K", ""])
@pytest.mark.parametrize("difficulty", ["basic", "intermediate", "advanced"])
def test_cognitive_distribution_stays_a_distribution(grade: str, difficulty: str) -> None:
  levels = get_difficulty_parameters(grade, "math", difficulty).cognitive_levels
  assert all(0 <= weight <= 1 for weight in levels.as_dict().values())
  assert levels.total <= 1 + 1e-6


@pytest.mark.parametrize("grade", ["K", "2", "6", "9", "12"])
def test_scores_are_clamped(grade: str) -> None:
  params = get_difficulty_parameters(grade, "science", "advanced")
  for score in (params.language_complexity, params.visual_support, params.concept_depth, params.multi_step_complexity):
    assert 1 <= score <= 10


def test_empty_grade_uses_default_grade_values() -> None:
  assert get_difficulty_parameters("", "math", "medium") == get_difficulty_parameters("5", "math", "medium")


def test_prompt_enhancements_render_scores_and_guidelines() -> None:
  block = get_prompt_enhancements("3", "math", "medium")
  assert "DIFFICULTY ADJUSTMENTS:" in block
  assert "Language Complexity (4/10)" in block
  assert "UPPER ELEMENTARY MATH GUIDELINES" in block.upper()
  assert "evaluate:" not in block


@pytest.mark.parametrize("grade", [None, "", "   "])
def test_blank_grade_prompt_uses_default_grade_band(grade) -> None:
  assert get_prompt_enhancements(grade, "math", "medium") == get_prompt_enhancements("5", "math", "medium")
