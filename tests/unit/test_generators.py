"""Unit tests for the bounded generate/validate loop."""

from __future__ import annotations

import json

import pytest
from app.ai.errors import AIErrorCode, AIServiceError
from app.ai.generators import MAX_ATTEMPTS, MathGenerator, ReadingGenerator, ScienceGenerator
from app.schema.options import ResourceGenerationOptions


def _options(**values) -> ResourceGenerationOptions:
  return ResourceGenerationOptions.model_validate(values)


@pytest.mark.anyio
async def test_math_generator_accepts_valid_payload_on_first_attempt(fake_model) -> None:
  fake_model.responses = [json.dumps({"problems": [{"problem": "What is 2 + 2?", "correctAnswer": "4"}, {"question": "What is 3 x 3?", "answer": 9}]})]
  generator = MathGenerator(fake_model, transport_retries=0)

  result = await generator.generate_with_retry(_options(subject="math", gradeLevel="2", questionCount=2, topicArea="addition"))

  assert [problem.question for problem in result.problems] == ["What is 2 + 2?", "What is 3 x 3?"]
  assert result.problems[0].answer == "4"
  assert result.title == "Grade 2 addition Practice (medium level)"
  assert len(fake_model.calls) == 1
  assert fake_model.calls[0]["json_mode"] is True


@pytest.mark.anyio
async def test_math_generator_falls_back_after_three_bad_attempts(fake_model) -> None:
  fake_model.responses = [
    "I cannot do that",
    json.dumps({"problems": [{"question": "1 + 1", "answer": "2"}]}),
    json.dumps({"problems": [{"question": "1 + 1"}, {"question": "2 + 2"}]}),
  ]
  generator = MathGenerator(fake_model, transport_retries=0)

  result = await generator.generate_with_retry(_options(subject="math", gradeLevel="3", questionCount=2))

  assert len(fake_model.calls) == MAX_ATTEMPTS
  assert [problem.question for problem in result.problems] == ["Example 1: 2 + 3 = ?", "Example 2: 3 + 4 = ?"]
  assert result.problems[0].answer == "5"


@pytest.mark.anyio
async def test_transient_errors_consume_an_attempt(fake_model) -> None:
  fake_model.responses = [AIServiceError("slow", AIErrorCode.TIMEOUT), json.dumps({"problems": [{"question": "5 - 1", "answer": "4"}]})]
  generator = MathGenerator(fake_model, transport_retries=0)

  result = await generator.generate_with_retry(_options(subject="math", questionCount=1))

  assert result.problems[0].answer == "4"
  assert len(fake_model.calls) == 2


@pytest.mark.anyio
async def test_missing_api_key_is_not_swallowed(fake_model) -> None:
  fake_model.responses = [AIServiceError("no key", AIErrorCode.MISSING_API_KEY)]
  generator = MathGenerator(fake_model, transport_retries=0)

  with pytest.raises(AIServiceError) as exc_info:
    await generator.generate_with_retry(_options(subject="math", questionCount=1))

  assert exc_info.value.code is AIErrorCode.MISSING_API_KEY
  assert len(fake_model.calls) == 1


@pytest.mark.anyio
async def test_kindergarten_reading_answers_are_yes_or_no(fake_model) -> None:
  payload = {
    "title": "My Cat",
    "passage": "I see a cat.\nThe cat is big.\nThe cat can nap.",
    "questions": [
      {"question": "Is the cat big?", "type": "true_false", "answer": "True"},
      {"question": "Is the cat a dog?", "type": "multiple_choice", "options": ["Yes", "No"], "answer": "B) No"},
    ],
  }
  fake_model.responses = [json.dumps(payload)]
  generator = ReadingGenerator(fake_model, transport_retries=0)

  result = await generator.generate_with_retry(_options(subject="reading", gradeLevel="K", questionCount=2, topicArea="pets"))

  assert [question.answer for question in result.questions] == ["Yes", "No"]
  assert all(question.options == ["Yes", "No"] for question in result.questions)
  assert all(question.type == "multiple_choice" for question in result.questions)


@pytest.mark.anyio
async def test_kindergarten_passage_over_five_lines_is_rejected(fake_model) -> None:
  long_passage = "\n".join(f"Line {index}." for index in range(7))
  bad = json.dumps({"title": "Too long", "passage": long_passage, "questions": [{"question": "Is it long?", "type": "true_false", "answer": "Yes"}]})
  fake_model.responses = [bad, bad, bad]
  generator = ReadingGenerator(fake_model, transport_retries=0)

  result = await generator.generate_with_retry(_options(subject="reading", gradeLevel="K", questionCount=1))

  assert result.title == "My Friend"
  assert len(result.passage.split("\n")) <= 5
  assert len(fake_model.calls) == MAX_ATTEMPTS


@pytest.mark.anyio
async def test_reading_multiple_choice_needs_two_options(fake_model) -> None:
  bad = json.dumps({"title": "T", "passage": "Once upon a time.", "questions": [{"question": "Who?", "type": "multiple_choice", "options": ["Only one"], "answer": "Only one"}]})
  fake_model.responses = [bad, bad, bad]
  generator = ReadingGenerator(fake_model, transport_retries=0)

  result = await generator.generate_with_retry(_options(subject="reading", gradeLevel="4", questionCount=1))

  assert result.questions[0].question == "Reading comprehension question 1"


@pytest.mark.anyio
async def test_science_generator_accepts_key_terms_mapping(fake_model) -> None:
  fake_model.responses = [json.dumps({"title": "Cells", "questions": [{"question": "What is a cell?", "type": "short_answer", "answer": "The basic unit of life"}], "keyTerms": {"cell": "basic unit of life"}})]
  generator = ScienceGenerator(fake_model, transport_retries=0)

  result = await generator.generate_with_retry(_options(subject="science", gradeLevel="6", questionCount=1))

  assert result.key_terms[0].term == "cell"
  assert result.learning_objectives


@pytest.mark.anyio
async def test_default_content_never_calls_the_model(fake_model) -> None:
  generator = ScienceGenerator(fake_model, transport_retries=0)

  result = generator.build_default(_options(subject="science", questionCount=3))

  assert len(result.questions) == 3
  assert fake_model.calls == []
