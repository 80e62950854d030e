"""Quiz shaping: quizzes bypass the subject/format table."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from app.core.errors import QuizTransformError
from app.formats import html
from app.formats.base import JsonDict, as_text, first_text
from app.formats.themes import get_theme
from app.schema.resources import QuizMetadata, QuizQuestion, QuizResource

logger = logging.getLogger(__name__)

MINUTES_PER_QUESTION = 2


def _options(value: Any) -> list[str] | None:
  """Options arrive as a list or as a letter -> text mapping; None means absent."""
  if value is None:
    return None
  if isinstance(value, dict):
    return [as_text(option) for option in value.values()]
  if isinstance(value, list):
    return [as_text(option) for option in value]
  return []


def _question(raw: Any, index: int) -> QuizQuestion:
  if not isinstance(raw, dict) or not first_text(raw, "question"):
    raise QuizTransformError(f"Question {index + 1} is missing the question text")

  options = _options(raw.get("options"))
  if options is not None and not options:
    raise QuizTransformError(f"Question {index + 1} has invalid options")

  answer = raw.get("answer") or raw.get("correctAnswer") or raw.get("correct_answer")
  correct = raw.get("correctAnswer") or raw.get("correct_answer") or answer
  points = raw.get("points")
  return QuizQuestion(
    type="multiple_choice" if options else "short_answer",
    question=first_text(raw, "question"),
    options=options or [],
    answer=answer,
    correct_answer=correct,
    explanation=first_text(raw, "explanation") or f"The correct answer is {as_text(correct)}",
    cognitive_level=first_text(raw, "cognitiveLevel", "cognitive_level") or "recall",
    points=points if isinstance(points, int) and not isinstance(points, bool) and points > 0 else 1,
  )


def _metadata(raw: Any) -> QuizMetadata:
  if not isinstance(raw, dict):
    return QuizMetadata()
  return QuizMetadata.model_validate({key: value for key, value in raw.items() if value is not None})


def transform_quiz(data: JsonDict) -> QuizResource:
  """Normalize raw quiz JSON into a QuizResource with derived fields filled in."""
  try:
    questions = data.get("questions") if isinstance(data, dict) else None
    if not isinstance(questions, list):
      raise QuizTransformError("Quiz data must contain an array of questions")

    shaped = [_question(question, index) for index, question in enumerate(questions)]
    total_points = data.get("totalPoints")
    return QuizResource(
      title=first_text(data, "title") or "Quiz",
      subject=first_text(data, "subject") or "General",
      grade_level=first_text(data, "grade_level", "gradeLevel", "grade"),
      topic=first_text(data, "topic") or "General",
      theme=first_text(data, "theme") or "General",
      format=first_text(data, "format") or "multiple_choice",
      instructions=first_text(data, "instructions") or None,
      estimated_time=first_text(data, "estimatedTime", "estimated_time") or f"{len(shaped) * MINUTES_PER_QUESTION} minutes",
      questions=shaped,
      total_points=total_points if isinstance(total_points, int) and not isinstance(total_points, bool) else len(shaped),
      metadata=_metadata(data.get("metadata")),
    )
  except (QuizTransformError, ValidationError) as exc:
    logger.warning("Quiz transform failed: %s", exc)
    raise QuizTransformError(f"Failed to transform quiz: {exc}") from exc


def render_quiz_html(quiz: QuizResource) -> str:
  """Printable quiz followed by its answer key."""
  rows = []
  for index, question in enumerate(quiz.questions, start=1):
    body = f'<div class="question">{html.text(question.question)}</div>'
    if question.options:
      letters = "ABCDEFGH"
      body += "".join(f'<div class="option">{letters[i % len(letters)]}) {html.text(option)}</div>' for i, option in enumerate(question.options))
    else:
      body += html.ANSWER_LINE
    rows.append(html.numbered_item(index, body))

  intro = f'<p class="instructions">{html.text(quiz.instructions)}</p>' if quiz.instructions else ""
  body = intro + html.section("Questions", "".join(rows))
  body += html.answer_key((question.question, question.correct_answer or question.answer, question.explanation) for question in quiz.questions)
  subtitle = f"Estimated time: {quiz.estimated_time} | Total points: {quiz.total_points}"
  return html.document(quiz.title, body, get_theme(quiz.theme), subtitle=subtitle)
