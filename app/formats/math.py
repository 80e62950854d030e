"""Math worksheet handlers: standard, guided and interactive."""

from __future__ import annotations

from typing import Any, ClassVar

from app.formats import html
from app.formats.base import FormatHandler, JsonDict, as_text, dict_items, first_text, optional_text_list, resolve_theme, term_map
from app.schema.resources import MathProblemItem, MathWorksheet


class _MathHandler(FormatHandler):
  subject = "math"
  section_title: ClassVar[str] = "Practice Problems"

  def transform(self, raw: JsonDict) -> MathWorksheet:
    return MathWorksheet(
      title=first_text(raw, "title"),
      grade_level=first_text(raw, "grade_level", "gradeLevel"),
      subject=first_text(raw, "subject") or "Math",
      topic=first_text(raw, "topic"),
      theme=resolve_theme(raw),
      format=self.format,
      instructions=first_text(raw, "instructions") or self.default_instructions,
      problems=[self.problem(item) for item in dict_items(raw.get("problems"))],
      vocabulary=term_map(raw.get("vocabulary")),
    )

  def problem(self, raw: JsonDict) -> MathProblemItem:
    return MathProblemItem(
      type=self.format,
      question=first_text(raw, "question", "problem"),
      answer=first_text(raw, "answer", "solution", "correctAnswer", "correct_answer"),
      explanation=first_text(raw, "explanation"),
      visual_aid=raw.get("visualAid") or raw.get("visual_aid") or raw.get("visual") or None,
      hints=optional_text_list(raw.get("hints")),
      steps=optional_text_list(raw.get("steps")),
      thinking_points=optional_text_list(raw.get("thinking_points")),
    )

  def render_problem(self, problem: MathProblemItem) -> str:
    body = f'<div class="question">{html.text(problem.question)}</div>'
    if problem.visual_aid:
      body += f'<div class="visual-aid">{html.text(_visual_text(problem.visual_aid))}</div>'
    return body + html.ANSWER_LINE

  def render_body(self, resource: MathWorksheet) -> str:
    parts = [f'<p class="instructions">{html.text(resource.instructions)}</p>'] if resource.instructions else []
    problems = "".join(html.numbered_item(index, self.render_problem(problem)) for index, problem in enumerate(resource.problems, start=1))
    if problems:
      parts.append(html.section(self.section_title, problems))
    if resource.vocabulary:
      terms = "".join(html.labeled(term, definition, css="term") for term, definition in resource.vocabulary.items())
      parts.append(html.section("Vocabulary", terms))
    return "".join(parts)

  def answer_entries(self, resource: MathWorksheet) -> list[tuple[Any, Any, Any]]:
    return [(problem.question, problem.answer, problem.explanation) for problem in resource.problems]


def _visual_text(visual: Any) -> str:
  if isinstance(visual, dict):
    return as_text(visual.get("data", ""))
  return as_text(visual)


class StandardMathHandler(_MathHandler):
  format = "standard"
  default_instructions = "Solve each problem and show your work. Include units in your answers where applicable."


class GuidedMathHandler(_MathHandler):
  format = "guided"
  section_title = "Guided Practice"
  default_instructions = "Follow the step-by-step guidance for each problem. Show your work at each step."

  def render_problem(self, problem: MathProblemItem) -> str:
    body = f'<div class="question">{html.text(problem.question)}</div>'
    if problem.visual_aid:
      body += f'<div class="visual-aid">{html.text(_visual_text(problem.visual_aid))}</div>'
    if problem.steps:
      body += f'<div class="steps"><h4>Steps:</h4>{html.ordered_list(problem.steps)}</div>'
    if problem.hints:
      body += f'<div class="hints"><h4>Helpful Hints:</h4>{html.bullet_list(problem.hints)}</div>'
    return body + html.ANSWER_LINE


class InteractiveMathHandler(_MathHandler):
  format = "interactive"
  section_title = "Hands-On Activities"
  default_instructions = "Work through each activity with the listed materials. Record what you observe and explain your answer."

  def problem(self, raw: JsonDict) -> MathProblemItem:
    item = super().problem(raw)
    steps = item.steps or optional_text_list(raw.get("instructions"))
    return item.model_copy(
      update={
        "steps": steps,
        "materials_needed": optional_text_list(raw.get("materials_needed")),
        "expected_outcome": first_text(raw, "expected_outcome") or None,
      }
    )

  def render_problem(self, problem: MathProblemItem) -> str:
    body = f'<div class="question">{html.text(problem.question)}</div>'
    if problem.materials_needed:
      body += f'<div class="materials"><h4>Materials:</h4>{html.bullet_list(problem.materials_needed)}</div>'
    if problem.steps:
      body += f'<div class="steps"><h4>Instructions:</h4>{html.ordered_list(problem.steps)}</div>'
    return body + html.ANSWER_LINE

  def answer_entries(self, resource: MathWorksheet) -> list[tuple[Any, Any, Any]]:
    rows = []
    for problem in resource.problems:
      explanation = problem.explanation
      if problem.expected_outcome:
        explanation = f"{explanation} Expected outcome: {problem.expected_outcome}".strip()
      rows.append((problem.question, problem.answer, explanation))
    return rows
