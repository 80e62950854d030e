"""Prompt builder for general-knowledge assessments."""

from __future__ import annotations

from app.ai.difficulty import get_prompt_enhancements
from app.ai.prompts.common import append_custom_instructions, join_blocks, schema_json
from app.schema.options import ResourceGenerationOptions

DEFAULT_QUESTION_TYPES: tuple[str, ...] = ("multiple_choice",)

GENERAL_SYSTEM_PROMPT = "You are an expert educational content creator, specializing in creating engaging, grade-appropriate learning materials. You MUST follow the instructions exactly and return ONLY valid JSON."


def general_layout(first_type: str) -> dict:
  return {
    "title": "string",
    "introduction": "string",
    "questions": [
      {
        "type": first_type,
        "question": "string",
        "options": ["string (multiple choice only)"],
        "answer": "string (True or False for true/false questions)",
        "explanation": "string",
        "points": 1,
        "rubric": ["string (short answer only)"],
      }
    ],
    "learningObjectives": ["string"],
  }


def build_general_prompt(options: ResourceGenerationOptions, enhancements: str | None = None, *, focus: list[str] | None = None) -> str:
  grade = options.grade_level or "5"
  difficulty = options.difficulty or "intermediate"
  count = options.item_count()
  topic = options.topic_text
  question_types = list(options.selected_question_types) or list(DEFAULT_QUESTION_TYPES)
  focus = focus if focus is not None else list(options.focus_areas)
  if enhancements is None:
    enhancements = get_prompt_enhancements(grade, "general", difficulty)

  subject_line = f"assessment about {topic}" if topic else "assessment"
  requirements = (
    "CRITICAL REQUIREMENTS:\n"
    f"1. You MUST generate EXACTLY {count} questions.\n"
    f"2. You MUST ONLY use the following question types: {', '.join(question_types)}.\n"
    "3. Each question MUST be in the specified format(s).\n"
    "4. For true/false questions:\n"
    "   - Question format MUST be a clear statement (not a question)\n"
    '   - DO NOT include "True or False:" at the start of the question\n'
    "   - Avoid double negatives\n"
    "   - Include a mix of true and false statements\n"
    '   - The correct answer MUST be either "True" or "False"\n'
    "5. For multiple choice questions:\n"
    "   - Include 4 options labeled A, B, C, D\n"
    "   - Make all options plausible\n"
    '   - Avoid "all/none of the above"\n'
    "6. For short answer questions:\n"
    "   - Clearly indicate expected response length\n"
    "   - Include scoring rubric points\n"
    f"7. Questions should be grade-appropriate ({grade})\n"
    f"8. Difficulty level should be {difficulty}\n"
    "9. IMPORTANT: DO NOT mix question types. Only use the types specified in requirement #2.\n"
    "10. If only one question type is specified, ALL questions must be of that type."
  )

  prompt = join_blocks(
    f"Generate a general knowledge {subject_line} for grade {grade} students.",
    requirements,
    f"Focus areas to cover: {', '.join(focus)}" if focus else "",
    enhancements,
    f"Return the response in this exact JSON format:\n{schema_json(general_layout(question_types[0]))}",
  )
  return append_custom_instructions(prompt, options.custom_instructions, heading="Additional instructions")
