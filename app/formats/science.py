"""Science worksheet handlers: science context, analysis focus, lab experiment."""

from __future__ import annotations

from typing import Any

from app.formats import html
from app.formats.base import FormatHandler, JsonDict, as_text, dict_items, first_text, resolve_theme, term_map, text_list
from app.schema.resources import AnalysisContent, AnalysisWorksheet, LabContent, LabExperimentWorksheet, ScienceContext, ScienceContextWorksheet, ScienceProblem

_LAB_CONTENT_TITLES = (
  ("introduction", "Introduction"),
  ("main_components", "Main Components"),
  ("importance", "Importance"),
  ("causes_effects", "Causes and Effects"),
  ("additional_info", "Additional Information"),
)


def science_problem(raw: JsonDict) -> ScienceProblem:
  return ScienceProblem(
    type=first_text(raw, "type"),
    question=first_text(raw, "question", "problem"),
    answer=first_text(raw, "answer", "correctAnswer", "correct_answer"),
    explanation=first_text(raw, "explanation"),
    focus_area=first_text(raw, "focus_area"),
    thinking_points=text_list(raw.get("thinking_points")),
    hints=text_list(raw.get("hints")),
  )


def _problems(value: Any) -> list[ScienceProblem]:
  return [science_problem(item) for item in dict_items(value)]


def _render_problems(title: str, problems: list[ScienceProblem]) -> str:
  rows = []
  for index, problem in enumerate(problems, start=1):
    body = f'<div class="question">{html.text(problem.question)}</div>{html.ANSWER_LINE}'
    if problem.thinking_points:
      body += f'<div class="thinking-points"><h4>Thinking Points:</h4>{html.bullet_list(problem.thinking_points)}</div>'
    rows.append(html.numbered_item(index, body))
  return html.section(title, "".join(rows)) if rows else ""


def _render_terms(terms: dict[str, str]) -> str:
  if not terms:
    return ""
  return html.section("Key Terms", "".join(html.labeled(term, definition, css="term") for term, definition in terms.items()))


def _paragraph(title: str, value: str) -> str:
  return html.section(title, f"<p>{html.text(value)}</p>") if value else ""


class _ScienceHandler(FormatHandler):
  subject = "science"

  def header(self, raw: JsonDict, *, title: str) -> JsonDict:
    return {
      "title": first_text(raw, "title") or title,
      "grade_level": first_text(raw, "grade_level", "gradeLevel"),
      "topic": first_text(raw, "topic"),
      "theme": first_text(raw, "theme") or "General",
      "instructions": first_text(raw, "instructions") or self.default_instructions,
    }

  def answer_entries(self, resource: Any) -> list[tuple[Any, Any, Any]]:
    return [(problem.question, problem.answer, problem.explanation) for problem in self.problems_of(resource)]

  def problems_of(self, resource: Any) -> list[ScienceProblem]:
    return list(resource.problems)


class ScienceContextHandler(_ScienceHandler):
  format = "science_context"
  default_instructions = "Read through the content carefully before answering questions."

  def transform(self, raw: JsonDict) -> ScienceContextWorksheet:
    context = raw.get("science_context") if isinstance(raw.get("science_context"), dict) else {}
    content = raw.get("scienceContent") if isinstance(raw.get("scienceContent"), dict) else {}
    header = self.header(raw, title="Science Context Worksheet")
    return ScienceContextWorksheet(
      **header,
      science_context=ScienceContext(
        topic=first_text(context, "topic") or header["topic"],
        explanation=first_text(context, "explanation") or first_text(content, "explanation"),
        key_concepts=text_list(context.get("key_concepts") or content.get("concepts") or content.get("key_concepts")),
        key_terms=term_map(context.get("key_terms") or content.get("key_terms")),
        applications=text_list(context.get("applications") or content.get("applications")),
        problems=_problems(context.get("problems") or raw.get("problems")),
      ),
    )

  def problems_of(self, resource: ScienceContextWorksheet) -> list[ScienceProblem]:
    return list(resource.science_context.problems) if resource.science_context else []

  def render_body(self, resource: ScienceContextWorksheet) -> str:
    context = resource.science_context
    if context is None:
      return ""
    parts = [
      _paragraph("Introduction", context.explanation),
      html.section("Key Concepts", html.bullet_list(context.key_concepts)) if context.key_concepts else "",
      _render_terms(context.key_terms),
      html.section("Applications", html.bullet_list(context.applications)) if context.applications else "",
      _render_problems("Questions", context.problems),
    ]
    return "".join(parts)


class AnalysisFocusHandler(_ScienceHandler):
  format = "analysis_focus"
  default_instructions = "Study each section carefully. Then answer each question using evidence from the content provided."

  def transform(self, raw: JsonDict) -> AnalysisWorksheet:
    nested = raw.get("content")
    content = nested if isinstance(nested, dict) else raw
    analysis = raw.get("analysis_content") if isinstance(raw.get("analysis_content"), dict) else content
    merged = {**content, **{key: value for key, value in raw.items() if value not in (None, "")}}
    return AnalysisWorksheet(
      **self.header(merged, title="Science Analysis Worksheet"),
      analysis_content=AnalysisContent(
        analysis_focus=first_text(analysis, "analysis_focus"),
        critical_aspects=first_text(analysis, "critical_aspects"),
        data_patterns=first_text(analysis, "data_patterns"),
        implications=first_text(analysis, "implications"),
        key_points=text_list(analysis.get("key_points")) if isinstance(analysis.get("key_points"), list) else [],
      ),
      problems=_problems(raw.get("problems") or content.get("problems")),
    )

  def render_body(self, resource: AnalysisWorksheet) -> str:
    analysis = resource.analysis_content or AnalysisContent()
    parts = [
      _paragraph("Analysis Focus", analysis.analysis_focus),
      _paragraph("Critical Aspects", analysis.critical_aspects),
      _paragraph("Data Patterns", analysis.data_patterns),
      html.section("Key Points", html.bullet_list(analysis.key_points)) if analysis.key_points else "",
      _paragraph("Implications", analysis.implications),
      _render_problems("Analysis Problems", resource.problems),
    ]
    return "".join(parts)


class LabExperimentHandler(_ScienceHandler):
  format = "lab_experiment"
  default_instructions = "Read the background, gather your materials, and follow each step of the procedure. Record your observations."

  def transform(self, raw: JsonDict) -> LabExperimentWorksheet:
    content = raw.get("content")
    experiment = raw.get("experiment")
    return LabExperimentWorksheet(
      **self.header(raw, title="Lab Experiment Worksheet"),
      experiment=experiment if isinstance(experiment, dict) else {},
      materials=text_list(raw.get("materials")),
      procedure=text_list(raw.get("procedure")),
      content=LabContent(**{key: first_text(content, key) for key, _ in _LAB_CONTENT_TITLES}) if isinstance(content, dict) else None,
      problems=_problems(raw.get("problems")),
      key_terms=term_map(raw.get("key_terms")),
    )

  def render_body(self, resource: LabExperimentWorksheet) -> str:
    parts = []
    if resource.content is not None:
      parts.extend(_paragraph(title, getattr(resource.content, key)) for key, title in _LAB_CONTENT_TITLES)
    if resource.experiment:
      parts.append(html.section("Experiment", "".join(html.labeled(key.replace("_", " ").title(), as_text(value)) for key, value in resource.experiment.items())))
    if resource.materials:
      parts.append(html.section("Materials", html.bullet_list(resource.materials)))
    if resource.procedure:
      parts.append(html.section("Procedure", html.ordered_list(resource.procedure)))
    parts.append(html.section("Observations", html.ANSWER_LINE * 3))
    parts.append(_render_problems("Questions", resource.problems))
    parts.append(_render_terms(resource.key_terms))
    return "".join(parts)
