"""Unit tests for the subject/format handler registry."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from app.core.errors import FormatDispatchError, ResourceTransformError, ResourceValidationError
from app.formats import FormatHandlerRegistry, Subject, WorksheetFormat
from app.formats.themes import get_theme
from app.schema.resources import AnalysisWorksheet, MathWorksheet, QuizResource, VocabularyContextWorksheet


@pytest.fixture
def registry() -> FormatHandlerRegistry:
  return FormatHandlerRegistry()


def test_registry_covers_every_subject_format_pair(registry: FormatHandlerRegistry) -> None:
  assert registry.available_formats("math") == ["standard", "guided", "interactive"]
  assert registry.available_formats("Reading") == ["comprehension", "vocabulary_context", "literary_analysis"]
  assert registry.available_formats("science") == ["science_context", "analysis_focus", "lab_experiment"]
  assert registry.available_formats("history") == []
  for subject in Subject:
    for format_name in registry.available_formats(subject.value):
      handler = registry.get_handler(subject.value, format_name)
      assert (handler.subject, handler.format) == (subject.value, WorksheetFormat(format_name).value)


def test_unknown_subject_names_the_subject(registry: FormatHandlerRegistry) -> None:
  with pytest.raises(FormatDispatchError, match="No handlers found for subject: history") as exc_info:
    registry.get_handler("history", "standard")
  assert exc_info.value.subject == "history"
  assert "standard" in str(exc_info.value)
  assert exc_info.value.format_name == "standard"


def test_unknown_format_lists_available_formats(registry: FormatHandlerRegistry) -> None:
  with pytest.raises(FormatDispatchError) as exc_info:
    registry.get_handler("math", "poster")
  assert str(exc_info.value) == "No handler found for format: poster in subject: math. Available formats: standard, guided, interactive"
  assert exc_info.value.format_name == "poster"


def test_observation_analysis_resolves_to_analysis_focus(registry: FormatHandlerRegistry) -> None:
  assert registry.get_handler("science", "observation_analysis").format == "analysis_focus"


def test_math_transform_accepts_alternate_keys(registry: FormatHandlerRegistry) -> None:
  worksheet = registry.transform_resource(
    {
      "resourceType": "worksheet",
      "subject": "math",
      "format": "guided",
      "title": "Fractions",
      "requestPayload": {"theme": "Winter"},
      "problems": [{"problem": "1/2 + 1/4", "solution": "3/4", "hints": "Find a common denominator", "visualAid": {"type": "diagram", "data": "[==|=]"}}],
      "vocabulary": [{"term": "denominator", "definition": "the bottom number"}],
    }
  )
  assert isinstance(worksheet, MathWorksheet)
  problem = worksheet.problems[0]
  assert (problem.question, problem.answer) == ("1/2 + 1/4", "3/4")
  assert problem.hints == ["Find a common denominator"]
  assert worksheet.theme == "Winter"
  assert worksheet.vocabulary == {"denominator": "the bottom number"}
  assert worksheet.instructions.startswith("Follow the step-by-step guidance")


def test_transform_is_deterministic(registry: FormatHandlerRegistry) -> None:
  raw = {"resourceType": "worksheet", "subject": "reading", "format": "vocabulary_context", "passage": "The dog was jubilant.", "problems": [{"word": "jubilant", "definition": "very happy", "questions": [{"question": "Use it in a sentence", "answer": "I was jubilant."}]}]}
  first = registry.transform_resource(raw)
  assert isinstance(first, VocabularyContextWorksheet)
  assert first == registry.transform_resource(raw)
  assert first.passage is not None and first.passage.text == "The dog was jubilant."


def test_analysis_transform_reads_nested_content(registry: FormatHandlerRegistry) -> None:
  worksheet = registry.transform_resource(
    {
      "resourceType": "worksheet",
      "subject": "science",
      "format": "observation_analysis",
      "content": {"title": "Plant Growth", "analysis_focus": "Light and growth", "key_points": ["More light, taller plants"], "problems": [{"question": "Which plant grew most?", "answer": "Plant A"}]},
    }
  )
  assert isinstance(worksheet, AnalysisWorksheet)
  assert worksheet.title == "Plant Growth"
  assert worksheet.analysis_content is not None
  assert worksheet.analysis_content.analysis_focus == "Light and growth"
  assert worksheet.problems[0].answer == "Plant A"


def test_quiz_resources_bypass_the_table(registry: FormatHandlerRegistry) -> None:
  quiz = registry.transform_resource({"resourceType": "quiz", "subject": "history", "questions": [{"question": "Who?", "answer": "Lincoln"}]})
  assert isinstance(quiz, QuizResource)
  with pytest.raises(FormatDispatchError):
    registry.generate_preview(quiz)

  printable = registry.generate_pdf(quiz.model_dump(by_alias=True))
  assert "Who?" in printable
  assert "Lincoln" in printable


def test_validate_requires_science_context_block(registry: FormatHandlerRegistry) -> None:
  with pytest.raises(ResourceValidationError, match="missing science_context data"):
    registry.validate_resource({"subject": "science", "format": "science_context", "resourceType": "worksheet"})
  with pytest.raises(ResourceValidationError, match="missing required fields"):
    registry.validate_resource({"subject": "science", "resourceType": "worksheet"})


def test_preview_omits_answer_key_and_pdf_html_appends_it(registry: FormatHandlerRegistry) -> None:
  resource = {"subject": "math", "format": "standard", "title": "Adding <fun>", "theme": "Halloween", "problems": [{"question": "2 + 2", "answer": "4", "explanation": "Count up"}]}

  preview = registry.generate_preview(resource)
  document = registry.generate_pdf(resource)

  assert preview.startswith('<div class="worksheet-preview">')
  assert "Answer Key" not in preview
  assert "Answer Key" in document
  assert document.index("2 + 2") < document.index("Answer Key")
  assert "Adding &lt;fun&gt;" in document
  assert get_theme("Halloween").primary in document


def test_vocabulary_answer_key_has_definition_and_question_rows(registry: FormatHandlerRegistry) -> None:
  handler = registry.get_handler("reading", "vocabulary_context")
  worksheet = handler.transform({"problems": [{"word": "swift", "definition": "fast", "questions": [{"question": "Q1", "answer": "A1"}, {"question": "Q2", "answer": "A2"}]}]})
  assert handler.answer_entries(worksheet) == [("Define: swift", "fast", ""), ("Q1", "A1", ""), ("Q2", "A2", "")]


def test_invalid_worksheet_payload_is_a_validation_error(registry: FormatHandlerRegistry) -> None:
  with pytest.raises(ResourceValidationError):
    registry.generate_preview({"subject": "math", "format": "standard", "problems": "not a list"})


def test_unknown_theme_falls_back_to_general() -> None:
  assert get_theme("Spooky") == get_theme("General")
  assert get_theme("winter").name == "Winter"


def test_non_string_subject_is_a_dispatch_error(registry: FormatHandlerRegistry) -> None:
  with pytest.raises(FormatDispatchError, match="No handlers found for subject: 5") as exc_info:
    registry.transform_resource({"subject": 5, "format": "standard"})
  assert exc_info.value.subject == "5"

  with pytest.raises(FormatDispatchError):
    registry.get_handler("math", 7)


def test_any_handler_failure_is_wrapped_as_transform_error() -> None:
  broken = MagicMock(subject="math", format="standard")
  broken.transform.side_effect = TypeError("unsupported operand")
  registry = FormatHandlerRegistry({Subject.MATH: {WorksheetFormat.STANDARD: broken}})

  with pytest.raises(ResourceTransformError, match="Failed to transform resource: unsupported operand"):
    registry.transform_resource({"subject": "math", "format": "standard"})
