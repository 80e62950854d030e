"""Math worksheet generation."""

from __future__ import annotations

from app.ai.generators.base import BaseGenerator, JsonDict, coalesce_answer
from app.ai.prompts.math import DEFAULT_MATH_TOPIC, build_math_prompt, math_grade_label
from app.schema.options import ResourceGenerationOptions
from app.schema.results import MathGenerationResult, MathProblem

MATH_DECORATIONS: tuple[str, ...] = ("⭐", "📝", "🔢", "✏️", "📐")


def default_math_title(options: ResourceGenerationOptions) -> str:
  topic = options.topic_text or "Math"
  return f"Grade {math_grade_label(options)} {topic} Practice ({options.difficulty or 'medium'} level)"


def default_math_instructions(options: ResourceGenerationOptions) -> str:
  text = "Solve each problem carefully. Show your work where needed."
  if options.include_steps:
    text += " Follow the step-by-step guides for help."
  return text


class MathGenerator(BaseGenerator[MathGenerationResult]):
  subject = "math"
  result_model = MathGenerationResult

  def build_prompt(self, options: ResourceGenerationOptions) -> str:
    return build_math_prompt(options)

  def prepare(self, payload: JsonDict, options: ResourceGenerationOptions) -> JsonDict:
    problems = payload.get("problems")
    if isinstance(problems, list):
      payload = {**payload, "problems": [coalesce_answer(self._question_key(p)) if isinstance(p, dict) else p for p in problems]}
    return payload

  @staticmethod
  def _question_key(problem: JsonDict) -> JsonDict:
    if not problem.get("question") and problem.get("problem"):
      return {**problem, "question": problem["problem"]}
    return problem

  def validate(self, payload: JsonDict, options: ResourceGenerationOptions) -> list[str]:
    problems = payload.get("problems")
    if not isinstance(problems, list):
      return ["problems is not an array"]

    errors = []
    expected = self.expected_count(options)
    if len(problems) != expected:
      errors.append(f"expected {expected} problems, got {len(problems)}")
    for index, problem in enumerate(problems, start=1):
      if not isinstance(problem, dict) or not str(problem.get("question") or "").strip():
        errors.append(f"problem {index} has no question")
      elif problem.get("answer") in (None, ""):
        errors.append(f"problem {index} has no answer")
    return errors

  def finalize(self, payload: JsonDict, options: ResourceGenerationOptions) -> MathGenerationResult:
    return MathGenerationResult.model_validate(
      {
        **payload,
        "title": payload.get("title") or default_math_title(options),
        "instructions": payload.get("instructions") or default_math_instructions(options),
        "decorations": payload.get("decorations") or list(MATH_DECORATIONS),
      }
    )

  def build_default(self, options: ResourceGenerationOptions) -> MathGenerationResult:
    count = max(1, self.expected_count(options))
    problems = []
    for index in range(count):
      left, right = index + 2, index + 3
      problems.append(
        MathProblem(
          question=f"Example {index + 1}: {left} + {right} = ?",
          answer=str(left + right),
          explanation=f"Add {left} and {right} to get {left + right}.",
          visual="⭐" * left + " + " + "⭐" * right + " = ____" if index == 0 else None,
        )
      )
    return MathGenerationResult(
      title=default_math_title(options),
      instructions=default_math_instructions(options),
      problems=problems,
      decorations=list(MATH_DECORATIONS),
    )


__all__ = ["DEFAULT_MATH_TOPIC", "MATH_DECORATIONS", "MathGenerator", "default_math_title"]
