"""Prompt builder for reading passages with comprehension questions."""

from __future__ import annotations

from app.ai.difficulty import get_prompt_enhancements, grade_number, is_kindergarten
from app.ai.prompts.common import JSON_ONLY_SUFFIX, append_custom_instructions, join_blocks, schema_json
from app.schema.options import ResourceGenerationOptions

MAX_READING_QUESTIONS = 20

TOPIC_PROMPTS: dict[str, str] = {
  "character traits": "Create content focusing on character analysis, personality traits, and character development",
  "main idea": "Generate content about identifying main ideas and supporting details",
  "comprehension": "Create reading comprehension exercises with questions about the text",
  "vocabulary": "Focus on vocabulary development and word meaning in context",
  "story elements": "Explore plot, setting, characters, and other story elements",
}

KINDERGARTEN_LAYOUT = {
  "title": "Simple, engaging title",
  "passage": "Very simple passage",
  "questions": [{"type": "multiple_choice", "question": "Simple question", "options": ["Yes", "No"], "answer": "Yes or No"}],
  "vocabulary": [{"word": "Simple word from the passage", "definition": "Very basic 3-4 word definition"}],
}

READING_LAYOUT = {
  "title": "A clear, engaging title",
  "passage": "The story showing character traits",
  "questions": [
    {
      "question": "Question about character traits",
      "type": "multiple_choice",
      "options": ["A) ...", "B) ...", "C) ...", "D) ..."],
      "answer": "Correct letter (A, B, C, or D)",
      "explanation": "Why this shows understanding of character traits",
    }
  ],
  "vocabulary": [{"word": "A character trait word from the story", "definition": "Simple definition (5-7 words)", "context": "How it was used in the story"}],
}

_EARLY_ELEMENTARY_BLOCK = """EARLY ELEMENTARY (GRADES 1-2) GUIDELINES:
Content Structure:
- Grade 1: 2-3 simple sentences per paragraph, 2 paragraphs maximum
- Grade 2: 3-4 sentences per paragraph, 2-3 paragraphs maximum
- Clear beginning, middle, and end
- Use grade-appropriate sight words from Dolch/Fry lists
- Include basic punctuation (periods, question marks)

Language Requirements:
- Simple and compound sentences only
- Present and past tense only
- Basic adjectives and common verbs
- Phonics-based vocabulary

Story Elements:
- One main character with clear actions
- Simple, linear plot
- Familiar settings (home, school, park)
- Clear sequence words (first, then, last)

Question Types:
- Multiple choice (3 options maximum)
- Yes/no questions
- One-word or short phrase answers"""

_UPPER_ELEMENTARY_BLOCK = """UPPER ELEMENTARY (GRADES 3-5) GUIDELINES:
Content Structure:
- Grade 3: 3-4 paragraphs (4-5 sentences each)
- Grade 4: 4-5 paragraphs (5-6 sentences each)
- Grade 5: 5-6 paragraphs (6-7 sentences each)
- Clear paragraph structure with topic sentences
- Include dialogue and descriptions

Language Requirements:
- Mix of simple, compound, and complex sentences
- Grade-appropriate academic vocabulary
- Figurative language introduction

Questions Distribution:
- 20% recall/comprehension
- 30% inference/interpretation
- 25% analysis/evaluation
- 15% vocabulary in context
- 10% author's purpose/craft

Question Types:
- Multiple choice (4 options)
- Short answer requiring evidence
- Compare and contrast"""

_MIDDLE_SCHOOL_BLOCK = """MIDDLE SCHOOL (GRADES 6-8) GUIDELINES:
Content Structure:
- 6-8 paragraphs with varied lengths
- Multiple text structures (cause/effect, compare/contrast)
- Sophisticated transitions between ideas

Language Requirements:
- Advanced vocabulary with context clues
- Complex sentence structures
- Domain-specific terminology

Questions Distribution:
- 15% comprehension
- 25% analysis
- 30% evaluation
- 20% inference
- 10% synthesis

Question Types:
- Text-dependent analysis
- Evidence-based responses
- Character motivation analysis
- Literary device impact analysis"""

_HIGH_SCHOOL_BLOCK = """HIGH SCHOOL (GRADES {grade}-12) GUIDELINES:
Content Structure:
- Complex, multi-layered narrative structure
- Multiple narrative techniques
- Integration of multiple perspectives

Language and Style:
- College-preparatory vocabulary
- Complex syntactical structures
- Advanced rhetorical devices

Critical Analysis Requirements:
- Literary theory application
- Historical context analysis
- Author's craft analysis

Questions Distribution:
- 10% comprehension
- 20% analysis
- 25% evaluation
- 25% synthesis
- 20% creation/application"""

_GRADE12_BLOCK = """GRADE 12 ADVANCED ELEMENTS:
- College-level vocabulary integration
- Complex philosophical themes
- Advanced literary theory application
- Cross-disciplinary connections
- Sophisticated rhetorical analysis
- Research integration requirements
- Critical theory frameworks
- Meta-analytical approaches"""

_GENERAL_BLOCK = """GENERAL GUIDELINES:
- Age-appropriate content
- Clear learning objectives
- Structured assessment
- Vocabulary development
- Comprehension focus"""


def limited_question_count(options: ResourceGenerationOptions) -> int:
  return min(options.item_count(), MAX_READING_QUESTIONS)


def grade_specific_block(grade: int | None) -> str:
  """Select the reading guidance block for a numeric grade."""
  if grade is None:
    return _GENERAL_BLOCK
  if 1 <= grade <= 2:
    return _EARLY_ELEMENTARY_BLOCK
  if 3 <= grade <= 5:
    return _UPPER_ELEMENTARY_BLOCK
  if 6 <= grade <= 8:
    return _MIDDLE_SCHOOL_BLOCK
  if 9 <= grade <= 12:
    block = _HIGH_SCHOOL_BLOCK.format(grade=grade)
    if grade == 12:
      block = f"{block}\n\n{_GRADE12_BLOCK}"
    return block
  return _GENERAL_BLOCK


def build_kindergarten_reading_prompt(options: ResourceGenerationOptions) -> str:
  topic = options.topic_text or "basic concepts"
  count = limited_question_count(options)
  prompt = (
    f"Generate a kindergarten-level reading activity about {topic}.\n\n"
    "CRITICAL REQUIREMENTS:\n"
    "1. The passage MUST:\n"
    "   - Be 3-5 simple sentences MAXIMUM\n"
    "   - Use ONLY basic sight words\n"
    "   - Have one sentence per line\n"
    "   - Use repetitive patterns\n"
    f"   - Focus on {topic} at a very basic level\n\n"
    f"2. Generate EXACTLY {count} questions that:\n"
    "   - Are yes/no only\n"
    "   - Use simple language\n"
    "   - Focus on basic comprehension\n\n"
    "Return the response in this exact JSON format:\n"
    f"{schema_json(KINDERGARTEN_LAYOUT)}"
  )
  return append_custom_instructions(prompt, options.custom_instructions, heading="Additional Instructions")


def build_reading_prompt(options: ResourceGenerationOptions, enhancements: str | None = None) -> str:
  """Build the reading prompt; Kindergarten gets the short yes/no variant."""
  if is_kindergarten(options.grade_level):
    return build_kindergarten_reading_prompt(options)

  grade = options.grade_level or "5"
  difficulty = options.difficulty or "intermediate"
  count = limited_question_count(options)
  topic = options.topic_text
  if enhancements is None:
    enhancements = get_prompt_enhancements(grade, "reading", difficulty)

  passage_requirements = (
    "Generate a grade-appropriate reading passage with comprehension questions.\n\n"
    "PASSAGE REQUIREMENTS:\n"
    "1. Write a SHORT story (2-3 paragraphs) about a character showing specific traits through their actions\n"
    f"2. The story must be appropriate for {options.reading_level or f'grade {grade}'} students\n"
    f"3. Focus on the topic: {topic}\n"
    f"4. Difficulty level: {difficulty}\n"
    "5. Include clear examples of character traits in action"
  )
  topic_focus = TOPIC_PROMPTS.get(topic.lower()) if topic else None

  requirements = [
    f"- Generate EXACTLY {count} questions",
    "- Questions should focus on identifying and understanding character traits",
    "- Make all content age-appropriate",
  ]
  if options.include_vocabulary:
    requirements.insert(2, "- Include 3-5 character trait vocabulary words")
  if options.focus_areas:
    requirements.append(f"- Focus areas: {', '.join(options.focus_areas)}")

  prompt = join_blocks(
    passage_requirements,
    grade_specific_block(grade_number(grade)),
    topic_focus or "",
    enhancements,
    f"RESPONSE FORMAT:\n{schema_json(READING_LAYOUT)}",
    "REQUIREMENTS:\n" + "\n".join(requirements),
    f"Ensure all content is grade-appropriate and engaging. {JSON_ONLY_SUFFIX}",
  )
  return append_custom_instructions(prompt, options.custom_instructions, heading="Additional Instructions")
