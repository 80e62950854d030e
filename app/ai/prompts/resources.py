"""Prompts for exit slips and rubrics built by the resource normalizer."""

from __future__ import annotations

import re

from app.ai.prompts.common import append_custom_instructions, join_blocks, schema_json
from app.schema.options import ResourceGenerationOptions

BASE_SYSTEM_PROMPT = "You are an expert educational content creator, specializing in creating engaging, grade-appropriate learning materials."
RUBRIC_SYSTEM_ADDENDUM = " You excel at creating detailed, clear rubrics that help assess student work fairly and consistently."

RUBRIC_STYLES: tuple[str, ...] = ("4-point", "3-point", "checklist")

EXIT_SLIP_LAYOUT = {
  "title": "string",
  "content": "string",
  "sections": [
    {
      "type": "questions",
      "title": "Questions",
      "content": [{"question": "string", "type": "multiple_choice | short_answer", "options": ["string (multiple choice only)"]}],
    }
  ],
}

CHECKLIST_EXAMPLE = {
  "title": "Math Problem Solving Checklist",
  "description": "Use this checklist to verify each step of your problem-solving process.",
  "criteria": [
    {"criterion": "Shows all work clearly", "description": "Each step of the solution is written out and labeled"},
    {"criterion": "Uses correct mathematical notation", "description": "Proper symbols and notation are used throughout"},
  ],
}

POINT_EXAMPLE = {
  "title": "Math Problem Solving Rubric",
  "description": "This rubric assesses the student's ability to solve mathematical problems.",
  "levels": [{"score": "4", "label": "Advanced", "description": "Shows complete understanding with clear, detailed work", "examples": ["All steps are shown and explained"]}],
}


def _topic_or_general(options: ResourceGenerationOptions) -> str:
  return options.topic_text or "general"


def build_exit_slip_prompt(options: ResourceGenerationOptions) -> str:
  prompt = (
    f"Generate an exit slip assessment for {options.subject} {_topic_or_general(options)} at the {options.grade_level} level.\n\n"
    "Requirements:\n"
    "- Create 2-3 thoughtful questions that assess student understanding\n"
    "- Questions should be grade-appropriate and aligned with learning objectives\n"
    "- Include a mix of question types (multiple choice, short answer)\n"
    "- Focus on key concepts and learning outcomes\n"
    "- Use clear, concise language\n\n"
    "Format the response as a JSON object with this structure:\n"
    f"{schema_json(EXIT_SLIP_LAYOUT)}"
  )
  return append_custom_instructions(prompt, options.custom_instructions, heading="Additional requirements")


def rubric_style(options: ResourceGenerationOptions) -> str:
  style = (options.rubric_style or "4-point").strip().lower()
  return style if style in RUBRIC_STYLES else "4-point"


def build_rubric_prompt(options: ResourceGenerationOptions) -> str:
  style = rubric_style(options)
  checklist = style == "checklist"
  focus = options.topic_text or options.subject
  criteria_range = f"exactly {options.criteria_count}" if options.criteria_count else "4-6"

  requirements = [
    f"- Include {criteria_range} specific criteria relevant to {focus}",
    "- Each criterion should be clearly defined and measurable",
    "- Descriptions should be detailed and specific to the subject matter",
    "- Use grade-appropriate language and expectations",
    "- Focus on observable and measurable outcomes",
    "- Write criteria as specific, observable yes/no statements" if checklist else "- Provide clear distinctions between performance levels",
  ]
  example = (
    f"Example checklist format:\n{schema_json(CHECKLIST_EXAMPLE)}"
    if checklist
    else f"Example point-based format:\n{schema_json(POINT_EXAMPLE)}"
  )

  prompt = join_blocks(
    f"Create a detailed rubric for assessing {options.subject} {_topic_or_general(options)} work at the {options.grade_level} level.",
    f"Style: {style}\nDifficulty: {options.difficulty or 'medium'}",
    "Requirements for writing rubrics:\n" + "\n".join(requirements),
    example,
    f"Format your response exactly like the example above, but with complete criteria for {focus}.",
  )
  return append_custom_instructions(prompt, options.custom_instructions, heading="Additional requirements")


def build_grade_context(grade_level: str) -> str:
  """Coarse grade guidance; non-numeric grades such as K count as grade 0."""
  digits = re.sub(r"\D", "", grade_level or "")
  grade = int(digits) if digits else 0
  if grade <= 2:
    return "Focus on basic concepts, use simple language, and include visual aids."
  if grade <= 4:
    return "Introduce more complex concepts, use grade-appropriate vocabulary, and include some visual support."
  return "Use advanced concepts, incorporate subject-specific terminology, and focus on critical thinking."


def build_visual_context(options: ResourceGenerationOptions) -> str:
  elements = []
  if options.include_visuals:
    elements.append("- Include visual aids to support learning")
  if options.include_diagrams:
    elements.append("- Include diagrams to explain concepts")
  if options.include_experiments:
    elements.append("- Include hands-on activities or experiments")
  return "\n".join(elements) if elements else "No specific visual requirements"


def build_generation_system_prompt(options: ResourceGenerationOptions) -> str:
  if options.resource_type.lower() == "rubric":
    return BASE_SYSTEM_PROMPT + RUBRIC_SYSTEM_ADDENDUM
  return BASE_SYSTEM_PROMPT


def build_generation_user_prompt(prompt: str, options: ResourceGenerationOptions) -> str:
  """Wrap an exit slip or rubric prompt with grade and visual context."""
  return (
    f"{prompt}\n\n"
    f"Grade-Level Context:\n{build_grade_context(options.grade_level)}\n\n"
    f"Visual Requirements:\n{build_visual_context(options)}\n\n"
    "Please generate content that is:\n"
    f"1. Age-appropriate for {options.grade_level}\n"
    f"2. Aligned with {options.grade_level} learning standards\n"
    "3. Using moderate visual elements as appropriate\n"
    "4. Formatted in clear, structured JSON"
  )
