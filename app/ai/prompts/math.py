"""Prompt builder for math worksheets."""

from __future__ import annotations

from app.ai.difficulty import get_prompt_enhancements, grade_number
from app.ai.prompts.common import JSON_ONLY_SUFFIX, append_custom_instructions, join_blocks, schema_json
from app.schema.options import ResourceGenerationOptions

DEFAULT_MATH_TOPIC = "arithmetic"

TOPIC_PROMPTS: dict[str, str] = {
  "algebra": "Create algebra problems involving equations and variables",
  "geometry": "Generate geometry problems with shapes and measurements",
  "arithmetic": "Create arithmetic problems with basic operations",
  "wordProblems": "Generate real-world word problems",
}

MATH_RESULT_LAYOUT = {
  "title": "An engaging title for the worksheet",
  "instructions": "Clear instructions for students",
  "problems": [
    {
      "question": "The problem text",
      "answer": "The correct answer (number or text)",
      "explanation": "How to reach the answer",
      "visual": "A visual representation using text/emoji (if applicable)",
      "steps": ["Step 1", "Step 2"],
    }
  ],
}


def math_grade_label(options: ResourceGenerationOptions) -> str:
  number = grade_number(options.grade_level)
  if number is None:
    return options.grade_level or "5"
  return "K" if number == 0 else str(number)


def build_math_prompt(options: ResourceGenerationOptions, enhancements: str | None = None) -> str:
  """Build the math worksheet prompt requesting EXACTLY the configured number of problems."""
  count = options.item_count()
  topic = options.topic_text or DEFAULT_MATH_TOPIC
  grade = math_grade_label(options)
  difficulty = options.difficulty or "medium"
  if enhancements is None:
    enhancements = get_prompt_enhancements(options.grade_level, "math", difficulty)

  requirements = [
    "- Make problems engaging and grade-appropriate",
    "- Use clear mathematical notation",
    "- Include real-world contexts where possible",
  ]
  if options.include_steps:
    requirements.append("- Include step-by-step solutions")
  if options.include_visuals:
    requirements.append("- Add text-based visual representations")

  header = (
    "Generate a math worksheet with the following specifications:\n\n"
    f"1. Create EXACTLY {count} {difficulty} level {topic} problems for grade {grade}\n"
    "2. Return the response in the following JSON format:\n"
    f"{schema_json(MATH_RESULT_LAYOUT)}\n\n"
    f"IMPORTANT: The response MUST contain EXACTLY {count} problems, no more and no less."
  )
  topic_guideline = TOPIC_PROMPTS.get(topic, "Create grade-appropriate math problems")

  prompt = join_blocks(
    header,
    "Requirements:\n" + "\n".join(requirements),
    f"Topic-specific guidelines:\n{topic_guideline}",
    enhancements,
    f"Ensure all mathematical notation is clear and properly formatted. {JSON_ONLY_SUFFIX}",
  )
  return append_custom_instructions(prompt, options.custom_instructions)
