"""Unit tests for quiz shaping."""

from __future__ import annotations

import pytest
from app.core.errors import QuizTransformError
from app.formats import render_quiz_html, transform_quiz


def test_transform_fills_derived_fields() -> None:
  quiz = transform_quiz(
    {
      "title": "Planets",
      "subject": "Science",
      "questions": [
        {"question": "Largest planet?", "options": {"A": "Mars", "B": "Jupiter"}, "correctAnswer": "Jupiter"},
        {"question": "Name a gas giant.", "answer": "Saturn", "points": 3},
        {"question": "Closest to the sun?", "options": ["Mercury", "Venus"], "answer": "Mercury", "explanation": "It orbits nearest."},
      ],
    }
  )

  assert quiz.estimated_time == "6 minutes"
  assert quiz.total_points == 3
  assert [question.type for question in quiz.questions] == ["multiple_choice", "short_answer", "multiple_choice"]
  assert quiz.questions[0].options == ["Mars", "Jupiter"]
  assert quiz.questions[0].answer == "Jupiter"
  assert quiz.questions[0].explanation == "The correct answer is Jupiter"
  assert quiz.questions[1].points == 3
  assert quiz.questions[2].explanation == "It orbits nearest."
  assert quiz.theme == "General"
  assert quiz.metadata.cognitive_distribution["recall"] == 0.6


def test_explicit_total_points_wins() -> None:
  quiz = transform_quiz({"totalPoints": 20, "questions": [{"question": "Q", "answer": "A"}]})
  assert quiz.total_points == 20


def test_supplied_estimated_time_is_kept() -> None:
  assert transform_quiz({"estimatedTime": "15 minutes", "questions": [{"question": "Q", "answer": "A"}]}).estimated_time == "15 minutes"
  assert transform_quiz({"estimated_time": "", "questions": [{"question": "Q", "answer": "A"}]}).estimated_time == "2 minutes"


def test_missing_question_array_is_rejected() -> None:
  with pytest.raises(QuizTransformError, match="Quiz data must contain an array of questions"):
    transform_quiz({"title": "Empty"})


def test_question_without_text_is_rejected() -> None:
  with pytest.raises(QuizTransformError, match="Question 2 is missing the question text"):
    transform_quiz({"questions": [{"question": "Fine"}, {"answer": "orphan"}]})


def test_empty_options_are_rejected() -> None:
  with pytest.raises(QuizTransformError, match="Question 1 has invalid options"):
    transform_quiz({"questions": [{"question": "Pick one", "options": []}]})


def test_quiz_html_ends_with_answer_key() -> None:
  quiz = transform_quiz({"title": "Capitals", "theme": "Spring", "questions": [{"question": "Capital of France?", "options": ["Paris", "Rome"], "answer": "Paris"}]})
  document = render_quiz_html(quiz)
  assert "A) Paris" in document
  assert document.index("Capital of France?") < document.index("Answer Key")
  assert "Estimated time: 2 minutes" in document
