"""Unit tests for format-driven generation."""

from __future__ import annotations

import json

import pytest
from app.ai.errors import AIErrorCode, AIServiceError
from app.core.errors import FormatDispatchError
from app.formats import FormatHandlerRegistry
from app.schema.requests import FormatGenerationRequest
from app.services.format_generation import FormatGenerationService, adjust_item_count, reshape_science_context


def _service(model) -> FormatGenerationService:
  return FormatGenerationService(model, FormatHandlerRegistry(), transport_retries=0)


def test_adjust_item_count_trims_extra_items() -> None:
  payload = {"problems": [{"question": f"Q{index}"} for index in range(6)]}
  assert [item["question"] for item in adjust_item_count(payload, 4)["problems"]] == ["Q0", "Q1", "Q2", "Q3"]


def test_adjust_item_count_pads_with_variations() -> None:
  payload = {"questions": [{"question": "Q1", "answer": "A1"}, {"problem": "P2"}]}
  padded = adjust_item_count(payload, 5)["questions"]
  assert [item["question"] for item in padded[2:]] == ["Q1 (variation 2)", "P2 (variation 2)", "Q1 (variation 3)"]
  assert padded[2]["answer"] == "A1"


def test_adjust_item_count_fills_empty_lists_and_ignores_zero() -> None:
  assert adjust_item_count({"problems": []}, 2)["problems"] == [{"question": "Question 1"}, {"question": "Question 2"}]
  payload = {"problems": [{"question": "keep"}]}
  assert adjust_item_count(payload, 0) is payload


def test_reshape_science_context_moves_content() -> None:
  reshaped = reshape_science_context({"topic": "Cells", "scienceContent": {"explanation": "Cells are small.", "concepts": ["nucleus"]}, "problems": [{"question": "Q"}]})
  assert "scienceContent" not in reshaped
  assert reshaped["science_context"]["key_concepts"] == ["nucleus"]
  assert reshaped["science_context"]["problems"] == [{"question": "Q"}]


@pytest.mark.anyio
async def test_worksheet_generation_pads_and_transforms(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Fractions", "problems": [{"question": "1/2 + 1/2", "answer": "1"}]})]
  request = FormatGenerationRequest.model_validate({"subject": "math", "format": "guided", "gradeLevel": "4", "questionCount": 3, "theme": "Winter"})

  result = await _service(fake_model).generate(request)

  assert result["format"] == "guided"
  assert result["resourceType"] == "worksheet"
  assert result["grade_level"] == "4"
  assert result["theme"] == "Winter"
  assert [problem["question"] for problem in result["problems"]] == ["1/2 + 1/2", "1/2 + 1/2 (variation 2)", "1/2 + 1/2 (variation 3)"]


@pytest.mark.anyio
async def test_missing_format_uses_subject_default(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Cells", "scienceContent": {"explanation": "All living things are made of cells."}, "problems": [{"question": "What is a cell?", "answer": "A unit of life"}]})]
  request = FormatGenerationRequest.model_validate({"subject": "Science", "topic": "cells", "questionCount": 1})

  result = await _service(fake_model).generate(request)

  assert result["format"] == "science_context"
  assert result["science_context"]["explanation"] == "All living things are made of cells."
  assert result["science_context"]["problems"][0]["answer"] == "A unit of life"


@pytest.mark.anyio
async def test_unknown_format_fails_before_calling_the_model(fake_model) -> None:
  request = FormatGenerationRequest.model_validate({"subject": "reading", "format": "poster"})

  with pytest.raises(FormatDispatchError):
    await _service(fake_model).generate(request)

  assert fake_model.calls == []


@pytest.mark.anyio
async def test_quiz_requests_are_shaped_as_quizzes(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Rivers", "questions": [{"question": "Longest river?", "options": ["Nile", "Thames"], "answer": "Nile"}]})]
  request = FormatGenerationRequest.model_validate({"subject": "geography", "resourceType": "Quiz", "questionCount": 1, "topic": "rivers"})

  result = await _service(fake_model).generate(request)

  assert result["resourceType"] == "quiz"
  assert result["estimatedTime"] == "2 minutes"
  assert result["topic"] == "rivers"


@pytest.mark.anyio
async def test_unregistered_subjects_pass_payload_through(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Art Worksheet", "questions": [{"question": "Name a primary color."}]})]
  request = FormatGenerationRequest.model_validate({"subject": "art", "questionCount": 1})

  result = await _service(fake_model).generate(request)

  assert result == {"title": "Art Worksheet", "questions": [{"question": "Name a primary color."}]}


@pytest.mark.anyio
async def test_unparseable_output_exhausts_attempts(fake_model) -> None:
  fake_model.responses = ["nope", "still nope", "[1, 2, 3]"]
  request = FormatGenerationRequest.model_validate({"subject": "art"})

  with pytest.raises(AIServiceError) as exc_info:
    await _service(fake_model).generate(request)

  assert exc_info.value.code is AIErrorCode.INVALID_RESPONSE
  assert len(fake_model.calls) == 3


@pytest.mark.anyio
async def test_rubric_requests_carry_common_fields(fake_model) -> None:
  fake_model.responses = [json.dumps({"description": "Lab report quality", "levels": ["4 - Advanced", "1 - Beginning"], "criteria": [{"criterion": "Hypothesis"}, "Data table"]})]
  request = FormatGenerationRequest.model_validate({"subject": "Science", "resourceType": "rubric", "gradeLevel": "6", "format": "4-point"})

  result = await _service(fake_model).generate(request)

  assert result["resourceType"] == "rubric"
  assert result["title"] == "Science rubric"
  assert (result["subject"], result["grade_level"], result["format"]) == ("Science", "6", "4-point")
  assert [criterion["criterion"] for criterion in result["criteria"]] == ["Hypothesis", "Data table"]
  assert [level["label"] for level in result["criteria"][1]["levels"]] == ["Advanced", "Beginning"]


@pytest.mark.anyio
async def test_exit_slip_requests_are_typed(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Fractions Exit Slip", "questions": [{"question": "What is 1/2 + 1/4?", "answer": "3/4"}, "How confident are you?"]})]
  request = FormatGenerationRequest.model_validate({"subject": "math", "resourceType": "Exit Slip", "grade": "4", "topic": "fractions", "questionCount": 2})

  result = await _service(fake_model).generate(request)

  assert result["resourceType"] == "exit_slip"
  assert result["format"] == "question"
  assert result["exit_slip_topic"] == "fractions"
  assert result["questions"][1] == {"question": "How confident are you?"}


@pytest.mark.anyio
async def test_mini_lessons_are_shaped_as_lesson_plans(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Main Idea", "objectives": ["Find the main idea"], "activities": ["Model", "Practice"]})]
  request = FormatGenerationRequest.model_validate({"subject": "reading", "resourceType": "mini_lesson", "grade": "3", "topic": "main idea", "questionCount": 0})

  result = await _service(fake_model).generate(request)

  assert result["resourceType"] == "lesson_plan"
  assert result["format"] == "mini_lesson"
  assert (result["title"], result["subject"], result["grade_level"], result["topic"]) == ("Main Idea", "reading", "3", "main idea")
  assert result["content"] == {"objectives": ["Find the main idea"], "activities": ["Model", "Practice"]}


@pytest.mark.anyio
async def test_grade_five_arithmetic_gives_five_answered_problems(fake_model) -> None:
  problems = [{"question": f"{index} x 12 = ?", "answer": str(index * 12)} for index in range(2, 7)]
  fake_model.responses = [json.dumps({"title": "Multiplying by 12", "problems": problems})]
  request = FormatGenerationRequest.model_validate({"subject": "math", "gradeLevel": "5", "topic": "arithmetic", "questionCount": 5})

  result = await _service(fake_model).generate(request)

  assert result["format"] == "standard"
  assert result["topic"] == "arithmetic"
  assert len(result["problems"]) == 5
  assert all(problem["question"] and problem["answer"] for problem in result["problems"])
