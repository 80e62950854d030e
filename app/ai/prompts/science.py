"""Prompt builder for science worksheets."""

from __future__ import annotations

from app.ai.difficulty import get_prompt_enhancements
from app.ai.prompts.common import JSON_ONLY_SUFFIX, append_custom_instructions, join_blocks, schema_json
from app.schema.options import ResourceGenerationOptions

MAX_SCIENCE_QUESTIONS = 20

SUBJECT_AREA_PROMPTS: dict[str, str] = {
  "biology": "Create content about living organisms, systems, and processes",
  "chemistry": "Generate content about matter, substances, and chemical reactions",
  "physics": "Develop content about energy, forces, and physical phenomena",
  "earth_science": "Create content about Earth systems and geological processes",
  "environmental": "Generate content about ecosystems and environmental impacts",
}

TOPIC_PROMPTS: dict[str, str] = {
  "cells": "Focus on cell structure, function, and processes",
  "genetics": "Cover inheritance, DNA, and genetic variation",
  "ecosystems": "Explore interactions between organisms and their environment",
  "forces": "Examine Newton's laws and types of forces",
  "matter": "Study states of matter and their properties",
  "energy": "Investigate different forms of energy and transformations",
  "earth_systems": "Analyze Earth's geological and atmospheric systems",
  "space": "Explore astronomy and space science concepts",
}

SCIENCE_LAYOUT = {
  "title": "A clear title for the worksheet",
  "introduction": "A brief introduction to the topic",
  "learningObjectives": ["objective 1", "objective 2", "objective 3"],
  "questions": [
    {
      "question": "The actual question text",
      "type": "multiple_choice",
      "options": ["option A", "option B", "option C", "option D"],
      "answer": "The correct answer",
      "explanation": "Why this is the correct answer",
    }
  ],
  "keyTerms": [{"term": "Scientific term", "definition": "Definition of the term"}],
  "additionalResources": ["Resource 1", "Resource 2"],
}


def limited_question_count(options: ResourceGenerationOptions) -> int:
  return min(options.item_count(), MAX_SCIENCE_QUESTIONS)


def build_science_prompt(options: ResourceGenerationOptions, enhancements: str | None = None) -> str:
  grade = options.grade_level or "5"
  difficulty = options.difficulty or "intermediate"
  area = (options.subject_area or "general").strip().lower()
  count = limited_question_count(options)
  topic = options.topic_text
  if enhancements is None:
    enhancements = get_prompt_enhancements(grade, "science", difficulty)

  subject_line = f"worksheet about {topic}" if topic else "worksheet"
  requirements = [
    f"- Generate EXACTLY {count} questions",
    f"- Make it {difficulty} difficulty for grade {grade}",
    f"- Focus on {area} concepts",
  ]
  if area in SUBJECT_AREA_PROMPTS:
    requirements.append(f"- {SUBJECT_AREA_PROMPTS[area]}")
  if topic and topic.lower() in TOPIC_PROMPTS:
    requirements.append(f"- {TOPIC_PROMPTS[topic.lower()]}")
  if options.include_experiments:
    requirements.append("- Include hands-on experiments")
  if options.include_diagrams:
    requirements.append("- Include diagrams or visual aids")

  prompt = join_blocks(
    f"Generate a science {subject_line} for grade {grade} students.",
    f"CRITICAL: You MUST generate EXACTLY {count} questions in your response.",
    enhancements,
    f"Please provide the response in the following JSON format:\n{schema_json(SCIENCE_LAYOUT)}",
    "Requirements:\n" + "\n".join(requirements),
    f"Ensure all content is scientifically accurate and grade-appropriate. {JSON_ONLY_SUFFIX}",
  )
  return append_custom_instructions(prompt, options.custom_instructions, heading="Additional requirements")
