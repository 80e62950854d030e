"""Reading passage generation with grade-aware validation."""

from __future__ import annotations

from app.ai.difficulty import is_kindergarten
from app.ai.generators.base import BaseGenerator, JsonDict, coalesce_answer
from app.ai.prompts.reading import MAX_READING_QUESTIONS, build_reading_prompt, limited_question_count
from app.schema.options import ResourceGenerationOptions
from app.schema.results import ReadingGenerationResult, ReadingQuestion, VocabularyItem

KINDERGARTEN_MAX_LINES = 5
KINDERGARTEN_OPTIONS: tuple[str, str] = ("Yes", "No")
_KINDERGARTEN_TYPES = frozenset({"multiple_choice", "true_false"})
_NO_ANSWERS = frozenset({"no", "false", "b", "b) no", "b. no", "n"})

KINDERGARTEN_PASSAGE = "I see a friend.\nI see them being kind.\nThey share their toys.\nThey help others.\nThey make me smile."


def yes_no(value: object) -> str:
  """Map a model answer ("A) Yes", "False", "b", ...) onto Yes or No."""
  text = str(value or "").strip().lower()
  return "No" if text in _NO_ANSWERS or text.startswith("no") else "Yes"


def passage_lines(passage: str) -> list[str]:
  return [line for line in passage.split("\n") if line.strip()]


class ReadingGenerator(BaseGenerator[ReadingGenerationResult]):
  subject = "reading"
  result_model = ReadingGenerationResult

  def build_prompt(self, options: ResourceGenerationOptions) -> str:
    return build_reading_prompt(options)

  def expected_count(self, options: ResourceGenerationOptions) -> int:
    return limited_question_count(options)

  def max_tokens_for(self, options: ResourceGenerationOptions) -> int:
    return max(self.max_tokens, self.expected_count(options) * 150)

  def prepare(self, payload: JsonDict, options: ResourceGenerationOptions) -> JsonDict:
    questions = payload.get("questions")
    if isinstance(questions, list):
      payload = {**payload, "questions": [coalesce_answer(q) if isinstance(q, dict) else q for q in questions]}
    return payload

  def validate(self, payload: JsonDict, options: ResourceGenerationOptions) -> list[str]:
    if not payload.get("title") or not isinstance(payload.get("passage"), str) or "questions" not in payload:
      return ["missing required fields"]

    questions = payload["questions"]
    if not isinstance(questions, list):
      return ["questions is not an array"]

    expected = self.expected_count(options)
    if len(questions) != expected:
      return [f"expected {expected} questions, got {len(questions)}"]

    if is_kindergarten(options.grade_level):
      # Kindergarten output only needs a question and a yes/no capable type.
      if not all(isinstance(q, dict) and q.get("question") and q.get("type") in _KINDERGARTEN_TYPES for q in questions):
        return ["invalid kindergarten question format"]
      if len(passage_lines(payload["passage"])) > KINDERGARTEN_MAX_LINES:
        return ["kindergarten passage too long"]
      return []

    for index, question in enumerate(questions, start=1):
      if not isinstance(question, dict) or not question.get("question") or not question.get("type") or question.get("answer") in (None, ""):
        return [f"question {index} is incomplete"]
      if question["type"] == "multiple_choice":
        options_value = question.get("options")
        if not isinstance(options_value, (list, dict)) or len(options_value) < 2:
          return [f"question {index} needs at least two options"]

    if not payload["passage"].strip():
      return ["empty passage"]
    return []

  def finalize(self, payload: JsonDict, options: ResourceGenerationOptions) -> ReadingGenerationResult:
    result = ReadingGenerationResult.model_validate(payload)
    if not is_kindergarten(options.grade_level):
      return result

    questions = [question.model_copy(update={"type": "multiple_choice", "options": list(KINDERGARTEN_OPTIONS), "answer": yes_no(question.answer)}) for question in result.questions]
    return result.model_copy(update={"questions": questions})

  def build_default(self, options: ResourceGenerationOptions) -> ReadingGenerationResult:
    if is_kindergarten(options.grade_level):
      return self._kindergarten_default(options)

    count = self.expected_count(options)
    grade = options.grade_level or "5"
    topic = f": {options.topic_text}" if options.topic_text else ""
    vocabulary = [VocabularyItem(word="example", definition="a thing characteristic of its kind", context="This is an example of default content.")] if options.include_vocabulary else []
    return ReadingGenerationResult(
      title=f"Grade {grade} Reading Worksheet{topic} ({options.difficulty or 'intermediate'} level)",
      passage=f"This is a sample reading passage for grade {grade} students.\nIt focuses on {options.topic_text or 'reading comprehension'} skills.",
      questions=[
        ReadingQuestion(question=f"Reading comprehension question {index + 1}", options=["Option A", "Option B", "Option C", "Option D"], answer="Option A", explanation="This is a sample explanation.")
        for index in range(count)
      ],
      vocabulary=vocabulary,
      learning_objectives=["Improve reading comprehension skills", "Develop vocabulary understanding", "Practice critical thinking"],
    )

  def _kindergarten_default(self, options: ResourceGenerationOptions) -> ReadingGenerationResult:
    count = min(options.question_count or options.problem_count or 3, MAX_READING_QUESTIONS)
    traits = ("kind", "helpful", "nice")
    return ReadingGenerationResult(
      title="My Friend",
      passage=KINDERGARTEN_PASSAGE,
      questions=[ReadingQuestion(question=f"Is this friend being {traits[min(index, 2)]}?", options=list(KINDERGARTEN_OPTIONS), answer="Yes") for index in range(count)],
      vocabulary=[VocabularyItem(word="kind", definition="being nice to others"), VocabularyItem(word="share", definition="let others use your things")],
      learning_objectives=["Understand what makes a good friend", "Learn about kindness", "Practice reading simple sentences"],
    )
