"""General-knowledge assessment generation."""

from __future__ import annotations

from app.ai.generators.base import BaseGenerator, JsonDict, coalesce_answer
from app.ai.prompts.general import GENERAL_SYSTEM_PROMPT, build_general_prompt
from app.schema.options import ResourceGenerationOptions
from app.schema.results import GeneralGenerationResult, GeneralQuestion


class GeneralGenerator(BaseGenerator[GeneralGenerationResult]):
  subject = "general"
  result_model = GeneralGenerationResult
  temperature = 0.5
  max_tokens = 4000
  system_prompt = GENERAL_SYSTEM_PROMPT
  sampling_options = {"presence_penalty": 0.1, "frequency_penalty": 0.1}

  def build_prompt(self, options: ResourceGenerationOptions) -> str:
    return build_general_prompt(options)

  def prepare(self, payload: JsonDict, options: ResourceGenerationOptions) -> JsonDict:
    questions = payload.get("questions")
    if isinstance(questions, list):
      payload = {**payload, "questions": [coalesce_answer(q) if isinstance(q, dict) else q for q in questions]}
    return payload

  def validate(self, payload: JsonDict, options: ResourceGenerationOptions) -> list[str]:
    questions = payload.get("questions")
    if not isinstance(questions, list):
      return ["questions is not an array"]

    expected = self.expected_count(options)
    if len(questions) != expected:
      return [f"generated {len(questions)} questions instead of {expected}"]
    return []

  def finalize(self, payload: JsonDict, options: ResourceGenerationOptions) -> GeneralGenerationResult:
    topic = options.topic_text or "General Knowledge"
    return GeneralGenerationResult.model_validate({**payload, "title": payload.get("title") or f"{topic} Assessment"})

  def build_default(self, options: ResourceGenerationOptions) -> GeneralGenerationResult:
    topic = options.topic_text
    return GeneralGenerationResult(
      title=f"{topic or 'General Knowledge'} Assessment",
      introduction=f"This assessment will test your understanding of {topic or 'general knowledge'}.",
      questions=[
        GeneralQuestion(
          question=f"Question {index + 1}: Sample question about {topic or 'general knowledge'}",
          options=["Sample option A", "Sample option B", "Sample option C", "Sample option D"],
          answer="Sample option A",
          explanation="This is a sample explanation.",
          points=2,
        )
        for index in range(self.expected_count(options))
      ],
      learning_objectives=[f"Understand key concepts in {topic or 'the subject'}", "Apply critical thinking skills", "Demonstrate comprehension of core ideas"],
    )
