"""System prompts for subject+format driven generation."""

from __future__ import annotations

from app.ai.prompts.common import JsonDict, schema_json
from app.schema.requests import FormatGenerationRequest

THEME_PROMPTS: dict[str, str] = {
  "Halloween": "Create a Halloween-themed worksheet that incorporates spooky but age-appropriate elements. Use Halloween-themed word problems, scenarios, and vocabulary where appropriate, but ensure the core educational content remains clear and effective. ",
  "Winter": "Create a Winter-themed worksheet that incorporates seasonal elements like snow, holidays, and winter activities. Use winter-themed word problems, scenarios, and vocabulary where appropriate, but ensure the core educational content remains clear and effective. ",
  "Spring": "Create a Spring-themed worksheet that incorporates seasonal elements like flowers, growth, and renewal. Use spring-themed word problems, scenarios, and vocabulary where appropriate, but ensure the core educational content remains clear and effective. ",
}

_HEADER = {
  "title": "string (descriptive title of the worksheet)",
  "grade_level": "string (the grade level)",
  "topic": "string (the topic area)",
}

MATH_STANDARD_LAYOUT: JsonDict = {
  **_HEADER,
  "subject": "string (the subject)",
  "format": "standard",
  "problems": [{"problem": "string (the math problem text)", "answer": "string (the correct answer)", "type": "short_answer"}],
  "vocabulary": {"term1": "definition1", "term2": "definition2"},
}

MATH_GUIDED_LAYOUT: JsonDict = {
  **_HEADER,
  "subject": "string (the subject)",
  "format": "guided",
  "problems": [
    {
      "problem": "string (the math problem text)",
      "steps": ["string (step 1)", "string (step 2)"],
      "answer": "string (the final answer)",
      "explanation": "string (detailed explanation)",
      "type": "guided",
    }
  ],
  "vocabulary": {"term1": "definition1", "term2": "definition2"},
}

MATH_INTERACTIVE_LAYOUT: JsonDict = {
  **_HEADER,
  "subject": "Math",
  "format": "interactive",
  "problems": [
    {
      "problem": "string - The problem statement",
      "type": "interactive",
      "materials_needed": ["string array - List of required materials"],
      "instructions": ["string array - Step by step instructions"],
      "expected_outcome": "string - What students should observe/conclude",
      "answer": "string - The expected answer",
      "explanation": "string - Explanation of the concept",
    }
  ],
  "vocabulary": {"key": "string - Definition of key terms used"},
}

READING_COMPREHENSION_LAYOUT: JsonDict = {
  **_HEADER,
  "subject": "Reading",
  "format": "comprehension",
  "passage": {
    "text": "string (REQUIRED: the complete reading passage)",
    "type": "string (fiction/non-fiction/poetry)",
    "lexile_level": "string (reading level)",
    "target_words": ["string (key vocabulary words)"],
  },
  "problems": [
    {
      "type": "string (main_idea/detail/inference)",
      "question": "string (the question)",
      "answer": "string (correct answer)",
      "evidence_prompt": "string (prompt to cite text evidence)",
      "skill_focus": "string (reading skill being practiced)",
    }
  ],
}

READING_LITERARY_LAYOUT: JsonDict = {
  **_HEADER,
  "subject": "Reading",
  "format": "literary_analysis",
  "passage": {
    "text": "string (REQUIRED: the complete reading passage)",
    "type": "string (fiction/non-fiction/poetry)",
    "elements_focus": ["string (literary elements to analyze)"],
  },
  "problems": [
    {
      "type": "analysis",
      "element": "string (literary element)",
      "question": "string (analysis question)",
      "guiding_questions": ["string (supporting questions)"],
      "evidence_prompt": "string (text evidence guidance)",
      "response_format": "string (how to structure response)",
    }
  ],
}

READING_VOCABULARY_LAYOUT: JsonDict = {
  **_HEADER,
  "subject": "Reading",
  "format": "vocabulary_context",
  "passage": {
    "text": "string (REQUIRED: the complete reading passage)",
    "type": "string (fiction/non-fiction/poetry)",
    "target_words": ["string (REQUIRED: vocabulary words to study)"],
  },
  "problems": [
    {
      "word": "string (vocabulary word)",
      "context": "string (sentence from passage)",
      "definition": "string (word definition)",
      "questions": [{"type": "string (meaning/usage/context)", "question": "string (the question)", "answer": "string (correct answer)"}],
      "application": "string (prompt for using the word)",
    }
  ],
}

SCIENCE_LAB_LAYOUT: JsonDict = {
  **_HEADER,
  "subject": "Science",
  "format": "lab_experiment",
  "content": {
    "introduction": "string (comprehensive introduction to the topic)",
    "main_components": "string (detailed explanation of key components and processes)",
    "importance": "string (significance and real-world applications)",
    "causes_effects": "string (relationships and dependencies)",
    "additional_info": "string (interesting facts, misconceptions, and recent discoveries)",
  },
  "experiment": {"objective": "string (what the experiment demonstrates)", "hypothesis": "string (prediction to test)"},
  "materials": ["string (required material)"],
  "procedure": ["string (numbered lab step)"],
  "problems": [
    {
      "type": "topic_based",
      "question": "string (question based on the content)",
      "complexity": "string (basic/intermediate/advanced)",
      "answer": "string (correct answer)",
      "explanation": "string (detailed explanation linking back to content)",
      "focus_area": "string (specific aspect of topic being tested)",
    }
  ],
  "key_terms": {"term": "string (definition and context)"},
}

_ANALYSIS_CONTENT = {
  "analysis_focus": "Provide a detailed explanation of the specific aspects to examine. Include: 1) Main concept breakdown, 2) Key relationships between components, 3) Critical factors to consider, 4) Methods of analysis appropriate for {grade} level. This should be 3-4 paragraphs of clear, engaging explanation.",
  "implications": "Explain the broader impacts and applications in detail, including: 1) Real-world significance, 2) Future implications, 3) Societal impacts, 4) Personal relevance to students, 5) Connections to other scientific concepts. Provide concrete examples that {grade} students can relate to.",
  "key_points": [
    "Essential concept 1 with detailed explanation and examples",
    "Essential concept 2 with real-world applications",
    "Essential concept 3 with connections to other topics",
    "Essential concept 4 focusing on practical understanding",
  ],
  "critical_aspects": "Detailed breakdown of crucial elements to consider, including: 1) Core principles, 2) Variable relationships, 3) Common misconceptions, 4) Special considerations. Each aspect should include examples and explanations.",
  "data_patterns": "Comprehensive explanation of observable patterns and trends, including: 1) What to look for, 2) How to identify patterns, 3) Why these patterns matter, 4) How to analyze them effectively.",
}

QUIZ_TYPES_SENTENCE = "Create a quiz with exactly {count} questions using these types: {types}. "

EXIT_SLIP_LAYOUTS: dict[str, tuple[str, JsonDict]] = {
  "reflection_prompt": (
    "Create {count} reflection prompts following this structure.",
    {"title": "{topic} Exit Slip", "questions": [{"question": "Main reflection question", "guides": ["Reflection guide 1", "Reflection guide 2", "Reflection guide 3"], "starters": ["I learned that...", "I wonder about...", "I can use this by..."], "notes": "Optional teacher notes or context"}]},
  ),
  "vocabulary_check": (
    "Create {count} vocabulary check items following this structure.",
    {"title": "{topic} Vocabulary Check", "questions": [{"term": "Key term to assess", "definition": "Definition of the term", "context": "Context or example sentence", "examples": ["Example 1", "Example 2"], "usagePrompt": "Prompt for using the term", "relationships": ["Related term 1", "Related term 2"], "visualCue": "Description of a visual representation"}]},
  ),
  "skill_assessment": (
    "Create {count} skill assessment items following this structure.",
    {"title": "{topic} Skill Assessment", "questions": [{"skillName": "Name of the skill being assessed", "task": "Specific task or problem to solve", "steps": ["Step 1", "Step 2", "Step 3"], "criteria": ["Success criterion 1", "Success criterion 2"], "applicationContext": "Real-world context for the skill", "difficultyLevel": "Basic/Intermediate/Advanced"}]},
  ),
  "question": (
    "Create {count} exit slip questions to assess student understanding.",
    {"title": "{topic} Exit Slip", "questions": [{"question": "Assessment question", "answer": "Expected answer or response", "notes": "Teacher notes or guidance"}]},
  ),
}

_EXACT_FORMAT = "Return the response in this exact JSON format: "


def _science_header(request: FormatGenerationRequest, format_name: str, title_suffix: str, instructions: str) -> JsonDict:
  return {
    "title": f"{request.topic} {title_suffix}",
    "grade_level": request.grade,
    "topic": request.topic,
    "subject": "Science",
    "format": format_name,
    "instructions": instructions,
  }


def science_context_layout(request: FormatGenerationRequest) -> JsonDict:
  grade = request.grade
  with_questions = request.question_count > 0
  instructions = (
    "Read through the content carefully before answering questions. Each question builds on the content provided. Support your answers with specific details from the text."
    if with_questions
    else "Read through the content carefully. Pay attention to key concepts and their relationships. Take notes on important points."
  )
  layout = _science_header(request, "science_context", "Study", instructions)
  layout["scienceContent"] = {
    "explanation": f"Provide a thorough, grade-appropriate explanation that clearly defines and distinguishes the main concepts. Use clear, concise language that {grade} students can understand.",
    "concepts": [
      "Detailed explanation of the first main concept, including its definition, characteristics, and how it works",
      "Comprehensive breakdown of the second main concept, including examples and real-world connections",
      "In-depth explanation of the third main concept, including its significance and relationship to other concepts",
    ],
    "applications": ["Provide specific, real-world examples and practical applications that demonstrate the importance and relevance of these concepts"],
    "key_terms": {"term1": "Clear, grade-appropriate definition with an example", "term2": "Clear, grade-appropriate definition with an example"},
  }
  if with_questions:
    layout["problems"] = [
      {
        "type": "topic_based",
        "question": "Question that tests understanding of one of the detailed concepts",
        "complexity": "grade-appropriate",
        "answer": "Clear, complete answer that references the detailed concept explanation",
        "explanation": "Detailed explanation that connects back to the concept and its real-world applications",
        "focus_area": "Specific concept being tested",
      }
    ]
  return layout


def analysis_focus_layout(request: FormatGenerationRequest) -> JsonDict:
  with_questions = request.question_count > 0
  instructions = (
    "First, study each section carefully. Take time to understand how different aspects connect and influence each other. Then answer each question using evidence from the content provided."
    if with_questions
    else "Study each section carefully. Take time to understand how different aspects connect and influence each other. Consider real-world applications and implications."
  )
  layout = _science_header(request, "analysis_focus", "Analysis", instructions)
  layout["content"] = {key: (value.format(grade=request.grade) if isinstance(value, str) else value) for key, value in _ANALYSIS_CONTENT.items()}
  if with_questions:
    layout["problems"] = [
      {
        "type": "analysis",
        "question": f"Thought-provoking question about {request.topic} that requires analysis of multiple aspects",
        "answer": "Detailed answer that demonstrates understanding of key concepts and their relationships",
        "explanation": "Comprehensive explanation that connects the answer to the content, real-world applications, and broader implications",
        "thinking_points": [
          "Specific aspect to consider when analyzing the problem",
          "Connection to real-world applications",
          "Relationship to key concepts",
          "Consideration of variables and patterns",
        ],
        "data_analysis": "Guidance on how to analyze relevant data or patterns for this specific question",
      }
    ]
  return layout


def science_overview_layout(request: FormatGenerationRequest) -> JsonDict:
  layout = _science_header(request, "science_context", "Overview", "Read through the content carefully. Pay attention to key concepts and their relationships. Take notes on important points.")
  layout["content"] = {
    "introduction": f"Provide a thorough explanation of {request.topic}",
    "main_components": "Detail the key elements and their relationships",
    "importance": "Explain the significance in science and daily life",
    "causes_effects": "Explore factors and relationships",
    "additional_info": "Share interesting facts and discoveries",
  }
  return layout


def _math_instructions(request: FormatGenerationRequest) -> str:
  text = ""
  if request.question_count == 0:
    text += "Focus on providing clear explanations, visual aids, or reference materials. "
  if request.format == "guided":
    return text + f"Include step-by-step hints and explanations for each problem. Break down complex problems into smaller steps. {_EXACT_FORMAT}{schema_json(MATH_GUIDED_LAYOUT)}"
  if request.format == "interactive":
    return text + f"Design problems that involve hands-on activities and manipulatives. {_EXACT_FORMAT}{schema_json(MATH_INTERACTIVE_LAYOUT)}"
  return text + f"Include answer spaces after each problem. Provide final answers at the end. Do not include step-by-step explanations. {_EXACT_FORMAT}{schema_json(MATH_STANDARD_LAYOUT)}"


def _reading_instructions(request: FormatGenerationRequest) -> str:
  count = request.question_count
  reading_format = request.format if request.format and request.format != "worksheet" else "comprehension"
  text = ""
  if count == 0:
    text += "Focus on providing a rich, grade-appropriate passage with clear structure and engaging content. "
  text += f"Create a grade-appropriate passage about {request.topic}. The passage should be engaging and suitable for {request.grade} students. "

  if reading_format == "literary_analysis":
    return text + f"Create a literary analysis worksheet with a passage rich in literary elements. Include exactly {count} analysis questions. The passage MUST be included in the response. {_EXACT_FORMAT}{schema_json(READING_LITERARY_LAYOUT)}"
  if reading_format == "vocabulary_context":
    return text + f"Create a vocabulary-in-context worksheet with a passage containing target vocabulary words. Include exactly {count} vocabulary-focused questions. The passage MUST be included in the response. {_EXACT_FORMAT}{schema_json(READING_VOCABULARY_LAYOUT)}"
  return text + (
    f"Create a reading comprehension worksheet with a passage about {request.topic}. The passage should demonstrate clear author's purpose and include exactly {count} questions "
    f"focusing on main ideas, details, and inferences. The passage MUST be included in the response. {_EXACT_FORMAT}{schema_json(READING_COMPREHENSION_LAYOUT)}"
  )


def _science_instructions(request: FormatGenerationRequest) -> str:
  count = request.question_count
  topic = request.topic
  if request.format == "science_context":
    lead = f"Create a comprehensive explanation about {topic} with {count} questions. " if count else f"Create a comprehensive explanation about {topic}. "
    return lead + _EXACT_FORMAT + schema_json(science_context_layout(request))
  if request.format in {"analysis_focus", "observation_analysis"}:
    questions = f" with {count} analytical questions" if count else ""
    lead = f"Create a detailed analytical breakdown of {topic}{questions}. For each section, provide comprehensive explanations that help {request.grade} students deeply understand the topic. "
    return lead + _EXACT_FORMAT + schema_json(analysis_focus_layout(request))
  if request.format == "lab_experiment":
    return f"Design a hands-on lab experiment about {topic} with background content, materials and a numbered procedure. {_EXACT_FORMAT}{schema_json(SCIENCE_LAB_LAYOUT)}"
  return f"Create a comprehensive explanation about {topic}. {_EXACT_FORMAT}{schema_json(science_overview_layout(request))}"


def _worksheet_instructions(request: FormatGenerationRequest) -> str:
  if request.question_count > 0:
    text = f"Generate exactly {request.question_count} problems. "
  else:
    text = "Generate a content-only worksheet without any problems. "

  subject = request.subject.strip().lower()
  if subject == "math":
    return text + _math_instructions(request)
  if subject == "reading":
    return text + _reading_instructions(request)
  if subject == "science":
    return text + _science_instructions(request)
  return text


def _exit_slip_instructions(request: FormatGenerationRequest) -> str:
  sentence, layout = EXIT_SLIP_LAYOUTS.get(request.format or "question", EXIT_SLIP_LAYOUTS["question"])
  body = {
    "title": layout["title"].format(topic=request.topic),
    "subject": request.subject,
    "grade_level": request.grade,
    "exit_slip_topic": request.topic,
    "difficulty_level": "Basic/Intermediate/Advanced",
    "questions": layout["questions"],
  }
  return f"{sentence.format(count=request.question_count)} {_EXACT_FORMAT}{schema_json(body)}"


def build_format_system_prompt(request: FormatGenerationRequest) -> str:
  """Assemble persona, theme, resource and subject+format instructions into one system prompt."""
  prompt = f"You are an expert {request.subject} teacher with years of experience creating engaging educational content. "
  if request.theme and request.theme != "General":
    prompt += THEME_PROMPTS.get(request.theme, "")

  prompt += f"Create a {request.resource_type} about {request.topic} that is appropriate for {request.grade} students. "
  if request.custom_instructions:
    prompt += f"Additional instructions: {request.custom_instructions}. "

  resource_type = request.normalized_resource_type
  if resource_type == "worksheet":
    prompt += _worksheet_instructions(request)
  elif resource_type == "quiz":
    prompt += QUIZ_TYPES_SENTENCE.format(count=request.question_count, types=", ".join(request.selected_question_types))
  elif resource_type == "rubric":
    prompt += "Create a detailed rubric with clear criteria and performance levels. "
  elif resource_type == "lesson_plan":
    prompt += f"Design a comprehensive lesson plan about {request.topic} for {request.grade} students. "
  elif resource_type == "mini_lesson":
    prompt += "Design a focused 15-20 minute mini-lesson that targets a specific skill or concept. "
  elif resource_type == "activity":
    prompt += "Design a standalone hands-on learning activity that can be completed in 20-30 minutes. "
  elif resource_type == "exit_slip":
    prompt += _exit_slip_instructions(request)
  return prompt


def build_format_user_prompt(request: FormatGenerationRequest) -> str:
  return (
    f"Generate a {request.resource_type} about {request.topic} following the exact JSON format specified above. "
    f"You MUST generate EXACTLY {request.question_count} questions/problems - no more, no less. This is a strict requirement."
  )
