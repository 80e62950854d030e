"""Prompt builders for each subject and resource type."""

from app.ai.prompts.formats import build_format_system_prompt, build_format_user_prompt
from app.ai.prompts.general import build_general_prompt
from app.ai.prompts.math import build_math_prompt
from app.ai.prompts.quiz import build_quiz_system_prompt, build_quiz_user_prompt
from app.ai.prompts.reading import build_reading_prompt
from app.ai.prompts.resources import build_exit_slip_prompt, build_generation_system_prompt, build_generation_user_prompt, build_rubric_prompt
from app.ai.prompts.science import build_science_prompt

__all__ = [
  "build_exit_slip_prompt",
  "build_format_system_prompt",
  "build_format_user_prompt",
  "build_general_prompt",
  "build_generation_system_prompt",
  "build_generation_user_prompt",
  "build_math_prompt",
  "build_quiz_system_prompt",
  "build_quiz_user_prompt",
  "build_reading_prompt",
  "build_rubric_prompt",
  "build_science_prompt",
]
