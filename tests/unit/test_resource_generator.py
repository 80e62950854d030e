"""Unit tests for the resource normalizer and its envelope."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from app.ai.errors import AIErrorCode, AIServiceError
from app.core.errors import ResourceValidationError
from app.formats import FormatHandlerRegistry
from app.rendering.pdf import render_resource_pdf
from app.schema.options import ResourceGenerationOptions
from app.services.resource_generator import ResourceGenerator, convert_to_problems, default_decorations, generate_focus_from_topic, get_question_types, normalize_subject

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _generator(model) -> ResourceGenerator:
  return ResourceGenerator(model, transport_retries=0, now=lambda: FIXED_NOW)


def _options(**values) -> ResourceGenerationOptions:
  return ResourceGenerationOptions.model_validate(values)


def test_subject_aliases() -> None:
  assert normalize_subject("Mathematics") == "math"
  assert normalize_subject("ELA") == "reading"
  assert normalize_subject("Biology") == "science"
  assert normalize_subject("Art") == "art"


def test_default_decorations_fall_back_for_unknown_subjects() -> None:
  assert default_decorations("science")[0] == "🔬"
  assert default_decorations("history") == ["📝", "✨", "🎯", "🌟"]


def test_focus_from_topic_keeps_order_without_duplicates() -> None:
  focus = generate_focus_from_topic("World War I")
  assert focus[:3] == ["World War I", "causes and effects", "key events"]
  assert focus[-3:] == ["main concepts", "practical examples", "critical thinking"]
  assert len(focus) == len(set(focus))
  assert generate_focus_from_topic(None) == []


def test_question_types_by_quiz_type() -> None:
  assert get_question_types(_options(resourceType="quiz", quizType="analysis")) == ["short_answer", "long_answer"]
  assert get_question_types(_options(resourceType="quiz", selectedQuestionTypes=["matching"])) == ["matching"]
  assert get_question_types(_options(resourceType="worksheet")) == ["multiple_choice", "true_false", "short_answer"]


def test_convert_to_problems_never_copies_answers() -> None:
  problems = convert_to_problems({"problems": [{"question": "2 + 2", "answer": "4", "visual": "⭐⭐", "steps": ["add"]}]})
  assert problems == [{"question": "2 + 2", "visual": "⭐⭐", "steps": ["add"]}]

  experiments = convert_to_problems({"experiments": [{"title": "Float test", "procedure": ["Fill bowl"], "answer": "floats"}]})
  assert experiments == [{"question": "Float test", "visual": None, "steps": ["Fill bowl"]}]
  assert convert_to_problems({}) == []


def test_transformed_worksheet_converts_to_unanswered_problems() -> None:
  raw = {"subject": "math", "format": "standard", "title": "Doubles", "problems": [{"question": f"{n} + {n}", "answer": str(2 * n), "steps": ["Add"]} for n in range(1, 5)]}

  worksheet = FormatHandlerRegistry().transform_resource(raw)
  problems = convert_to_problems(worksheet.model_dump())

  assert len(problems) == 4
  assert [problem["question"] for problem in problems] == ["1 + 1", "2 + 2", "3 + 3", "4 + 4"]
  assert all("answer" not in problem for problem in problems)


@pytest.mark.anyio
async def test_math_resource_has_one_problems_section(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Adding", "problems": [{"question": "1 + 2", "answer": "3"}, {"question": "2 + 5", "answer": "7"}]})]

  resource = await _generator(fake_model).generate_resource(_options(subject="Math", gradeLevel="1", questionCount=2))

  assert [section.type for section in resource.sections] == ["problems"]
  assert all("answer" not in problem for problem in resource.sections[0].content)
  assert resource.metadata.generated_at == FIXED_NOW.isoformat()
  assert resource.metadata.resource_type == "worksheet"


@pytest.mark.anyio
async def test_reading_sections_are_passage_vocabulary_questions(fake_model) -> None:
  payload = {
    "title": "Brave Sam",
    "passage": "Sam helped a friend.",
    "questions": [{"question": "Who helped?", "type": "short_answer", "answer": "Sam"}],
    "vocabulary": [{"word": "brave", "definition": "showing courage"}],
  }
  fake_model.responses = [json.dumps(payload)]

  resource = await _generator(fake_model).generate_resource(_options(subject="reading", gradeLevel="4", questionCount=1, includeVocabulary=False))

  assert [section.type for section in resource.sections] == ["passage", "vocabulary", "questions"]
  assert resource.decorations == ["📚", "✍️", "📝", "📖"]


@pytest.mark.anyio
async def test_wire_envelope_double_encodes_sections(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Adding", "problems": [{"question": "1 + 2", "answer": "3"}]})]

  wire = (await _generator(fake_model).generate_resource(_options(subject="math", gradeLevel="1", questionCount=1))).to_wire()

  assert isinstance(wire["sections"][0]["content"], str)
  assert json.loads(wire["sections"][0]["content"])[0]["question"] == "1 + 2"
  assert wire["metadata"]["gradeLevel"] == "1"
  assert wire["metadata"]["generatedAt"] == FIXED_NOW.isoformat()


@pytest.mark.anyio
async def test_checklist_rubric_criteria_use_check_and_cross(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Essay Checklist", "description": "Check each item.", "criteria": [{"criterion": "Has a thesis", "levels": [{"score": 4, "description": "Excellent"}]}, "Cites evidence"]})]

  resource = await _generator(fake_model).generate_resource(_options(subject="reading", resourceType="rubric", rubricStyle="checklist"))

  rubric = resource.sections[0].content
  assert resource.sections[0].type == "rubric"
  assert [criterion["criterion"] for criterion in rubric["criteria"]] == ["Has a thesis", "Cites evidence"]
  assert all([level["score"] for level in criterion["levels"]] == ["✓", "×"] for criterion in rubric["criteria"])
  assert rubric["levels"] == []
  assert fake_model.calls[0]["temperature"] == 0.2
  assert fake_model.calls[0]["presence_penalty"] == 0.1


@pytest.mark.anyio
async def test_point_rubric_levels_are_shaped_and_printable(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Fractions Rubric", "levels": ["4 - Advanced", "3 - Proficient", {"score": 2, "label": "Developing", "examples": "not a list"}]})]

  resource = await _generator(fake_model).generate_resource(_options(subject="math", resourceType="rubric", rubricStyle="4-point"))

  levels = resource.sections[0].content["levels"]
  assert [(level["score"], level["label"]) for level in levels] == [("4", "Advanced"), ("3", "Proficient"), (2, "Developing")]
  assert levels[2]["examples"] == []
  assert render_resource_pdf(resource.to_wire()).startswith(b"%PDF")


@pytest.mark.anyio
async def test_exit_slip_is_a_single_questions_section(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Exit Slip", "questions": [{"question": "What did you learn?"}, {"question": "What is still unclear?"}]})]

  resource = await _generator(fake_model).generate_resource(_options(subject="science", resourceType="exit_slip"))

  assert [section.type for section in resource.sections] == ["questions"]
  assert len(resource.sections[0].content) == 2
  assert resource.metadata.resource_type == "exit_slip"


@pytest.mark.anyio
async def test_malformed_rubric_json_is_an_invalid_response(fake_model) -> None:
  fake_model.responses = ["Here is your rubric without any JSON"]

  with pytest.raises(AIServiceError) as exc_info:
    await _generator(fake_model).generate_resource(_options(subject="math", resourceType="rubric"))

  assert exc_info.value.code is AIErrorCode.INVALID_RESPONSE


@pytest.mark.anyio
async def test_unknown_subject_is_rejected_before_calling_the_model(fake_model) -> None:
  with pytest.raises(ResourceValidationError, match="Unsupported subject: Art"):
    await _generator(fake_model).generate_resource(_options(subject="Art"))

  assert fake_model.calls == []


@pytest.mark.anyio
async def test_general_quiz_gets_focus_and_question_types(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Civil War Quiz", "questions": [{"question": "When did it start?", "type": "short_answer", "answer": "1861"}]})]

  resource = await _generator(fake_model).generate_resource(_options(subject="General", resourceType="quiz", topicArea="Civil War", questionCount=1))

  prompt = fake_model.calls[0]["messages"][-1]["content"]
  assert "causes and effects" in prompt
  assert resource.sections[0].content == [{"question": "When did it start?", "visual": None, "steps": []}]
