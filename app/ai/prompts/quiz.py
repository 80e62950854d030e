"""Quiz prompt with grade and subject difficulty parameters."""

from __future__ import annotations

from app.ai.prompts.common import schema_json
from app.ai.quiz_difficulty import get_quiz_prompt_enhancements
from app.schema.requests import QuizGenerationRequest

QUIZ_LAYOUT = {
  "title": "string (descriptive title of the quiz)",
  "grade_level": "string (the grade level)",
  "topic": "string (the topic area)",
  "subject": "string (the subject)",
  "estimated_time": "string (estimated completion time)",
  "questions": [
    {
      "type": "string (multiple_choice/true_false/short_answer)",
      "question": "string (the question text)",
      "options": ["string (option A)", "string (option B)", "string (option C)", "string (option D)"],
      "correct_answer": "string (the correct answer)",
      "explanation": "string (explanation of the correct answer)",
      "cognitive_level": "string (recall/comprehension/application/analysis)",
      "points": "number (question point value)",
    }
  ],
  "total_points": "number (sum of all question points)",
  "instructions": "string (quiz instructions)",
  "metadata": {
    "complexity_level": "number (1-10)",
    "language_level": "number (1-10)",
    "cognitive_distribution": {"recall": "number (percentage)", "comprehension": "number (percentage)", "application": "number (percentage)", "analysis": "number (percentage)"},
  },
}

_MULTIPLE_CHOICE_EXAMPLE = {
  "type": "multiple_choice",
  "question": "What is the first step of the scientific method?",
  "options": ["Making a prediction", "Testing a hypothesis", "Recording observations", "Asking a question"],
  "correct_answer": "Asking a question",
  "explanation": "The scientific method begins with asking a testable question about an observation.",
}

_ADDITIONAL_REQUIREMENTS = """Additional Requirements:
1. For Multiple Choice:
   - ALWAYS provide exactly 4 options in the "options" array format
   - Each option must be a complete, meaningful answer
   - Make all options plausible but only one correct
   - Avoid "all/none of the above" options
   - Example format:
{example}

2. For True/False:
   - Use clear, unambiguous statements
   - Avoid double negatives
   - Make statements definitively true or false

3. For Short Answer:
   - Questions should have clear, specific answers
   - Provide sample acceptable answers
   - Keep expected response length appropriate for grade level

4. General Guidelines:
   - Use grade-appropriate vocabulary and concepts
   - Make questions clear and unambiguous
   - Distribute cognitive levels as specified
   - Include relevant explanations for all answers
   - NEVER return options as an object (like {{a: "...", b: "..."}})
   - ALWAYS return options as an array ["option1", "option2", "option3", "option4"]"""


def build_quiz_system_prompt(request: QuizGenerationRequest) -> str:
  types = ", ".join(request.selected_question_types or [])
  theme_line = f"\nUse a {request.theme} theme for scenarios and wording where it fits naturally.\n" if request.theme and request.theme != "General" else ""
  return (
    f"You are an expert {request.subject} teacher specializing in creating quizzes for {request.grade} students.\n\n"
    f"{get_quiz_prompt_enhancements(request.grade, request.subject)}\n"
    f"Create a quiz about {request.topic_area} with exactly {request.question_count} questions using these types: {types}.\n"
    f"{theme_line}\n"
    f"Return the response in this exact JSON format:\n{schema_json(QUIZ_LAYOUT)}\n\n"
    + _ADDITIONAL_REQUIREMENTS.format(example=schema_json(_MULTIPLE_CHOICE_EXAMPLE))
  )


def build_quiz_user_prompt(request: QuizGenerationRequest) -> str:
  return f"Generate a quiz about {request.topic_area} following the exact JSON format specified above."
