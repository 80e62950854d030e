"""Printable PDF output for worksheets, quizzes and normalized resource envelopes.

Student-facing content comes first; the answer key always starts on a new page.
"""

from __future__ import annotations

import json
import logging
import re
from html import escape
from io import BytesIO
from typing import Any

from pydantic import ValidationError
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import ListFlowable, ListItem, PageBreak, Paragraph, SimpleDocTemplate, Spacer
from reportlab.platypus.doctemplate import LayoutError

from app.core.errors import RenderingError, ResourceValidationError
from app.formats.quiz import transform_quiz
from app.formats.registry import FormatHandlerRegistry
from app.formats.themes import ThemeStyle, get_theme
from app.schema.resources import (
  AnalysisWorksheet,
  ComprehensionWorksheet,
  LabExperimentWorksheet,
  LiteraryAnalysisWorksheet,
  MathWorksheet,
  QuizResource,
  ScienceContextWorksheet,
  ScienceProblem,
  VocabularyContextWorksheet,
  parse_worksheet,
)

logger = logging.getLogger(__name__)

Flowables = list[Any]

ANSWER_BLANK = "_" * 60


def pdf_filename(title: str | None) -> str:
  """Lowercase the title and replace anything outside [a-z0-9] with underscores."""
  return re.sub(r"[^a-z0-9]", "_", (title or "worksheet").lower()) + ".pdf"


class _Styles:
  def __init__(self, theme: ThemeStyle) -> None:
    base = getSampleStyleSheet()
    primary = colors.HexColor(theme.primary)
    accent = colors.HexColor(theme.accent)
    self.title = ParagraphStyle("ResourceTitle", parent=base["Title"], textColor=primary, alignment=TA_CENTER)
    self.subtitle = ParagraphStyle("ResourceSubtitle", parent=base["Normal"], textColor=colors.HexColor(theme.secondary), alignment=TA_CENTER)
    self.heading = ParagraphStyle("SectionHeading", parent=base["Heading2"], textColor=accent, spaceBefore=12)
    self.body = ParagraphStyle("Body", parent=base["BodyText"], leading=15)
    self.muted = ParagraphStyle("Muted", parent=self.body, textColor=colors.HexColor("#4B5563"), fontName="Helvetica-Oblique")
    self.answer = ParagraphStyle("Answer", parent=self.body, textColor=colors.HexColor("#16A34A"))


def _p(value: Any, style: ParagraphStyle) -> Paragraph:
  return Paragraph(escape("" if value is None else str(value), quote=False).replace("\n", "<br/>"), style)


def _bullets(items: list[Any], style: ParagraphStyle, *, numbered: bool = False) -> Flowables:
  if not items:
    return []
  entries = [ListItem(_p(item, style)) for item in items]
  return [ListFlowable(entries, bulletType="1" if numbered else "bullet", leftIndent=18)]


def _question_block(index: int, question: Any, styles: _Styles, *, extra: Flowables | None = None, blanks: int = 2) -> Flowables:
  block: Flowables = [_p(f"{index}. {question}", styles.body)]
  block.extend(extra or [])
  block.extend(_p(ANSWER_BLANK, styles.body) for _ in range(blanks))
  block.append(Spacer(1, 8))
  return block


def _answer_key(entries: list[tuple[Any, Any, Any]], styles: _Styles) -> Flowables:
  story: Flowables = [PageBreak(), _p("Answer Key", styles.heading)]
  if not entries:
    story.append(_p("No answers were provided for this resource.", styles.muted))
    return story
  for index, (question, answer, explanation) in enumerate(entries, start=1):
    story.append(_p(f"{index}. {question}", styles.body))
    story.append(_p(f"Answer: {answer if answer not in (None, '') else 'Answers will vary.'}", styles.answer))
    if explanation:
      story.append(_p(f"Explanation: {explanation}", styles.muted))
    story.append(Spacer(1, 6))
  return story


def _math_story(worksheet: MathWorksheet, styles: _Styles) -> Flowables:
  story: Flowables = [_p("Practice Problems", styles.heading)]
  for index, problem in enumerate(worksheet.problems, start=1):
    extra: Flowables = []
    if problem.visual_aid:
      extra.append(_p(problem.visual_aid.get("data", "") if isinstance(problem.visual_aid, dict) else problem.visual_aid, styles.muted))
    if problem.materials_needed:
      extra.append(_p("Materials:", styles.muted))
      extra.extend(_bullets(problem.materials_needed, styles.body))
    if problem.steps and worksheet.format != "standard":
      extra.extend(_bullets(problem.steps, styles.body, numbered=True))
    if problem.hints:
      extra.append(_p("Helpful Hints: " + "; ".join(problem.hints), styles.muted))
    story.extend(_question_block(index, problem.question, styles, extra=extra))
  if worksheet.vocabulary:
    story.append(_p("Vocabulary", styles.heading))
    story.extend(_p(f"{term}: {definition}", styles.body) for term, definition in worksheet.vocabulary.items())
  return story


def _reading_story(worksheet: ComprehensionWorksheet | VocabularyContextWorksheet | LiteraryAnalysisWorksheet, styles: _Styles) -> Flowables:
  story: Flowables = []
  passage = worksheet.passage
  if passage is not None and passage.text:
    story.append(_p("Reading Passage", styles.heading))
    if passage.target_words:
      story.append(_p("Target Vocabulary Words: " + ", ".join(passage.target_words), styles.muted))
    story.append(_p(passage.text, styles.body))

  story.append(_p("Questions", styles.heading))
  index = 0
  for item in worksheet.problems:
    if isinstance(worksheet, VocabularyContextWorksheet):
      index += 1
      extra = [_p(f"Context: {item.context}", styles.muted)] if item.context else []
      story.extend(_question_block(index, f"Define the word: {item.word}", styles, extra=extra, blanks=1))
      for question in item.questions:
        index += 1
        story.extend(_question_block(index, question.question, styles, blanks=1))
      if item.application:
        story.append(_p(f"Apply it: {item.application}", styles.muted))
      continue
    index += 1
    extra = [_p(item.evidence_prompt, styles.muted)] if item.evidence_prompt else []
    if isinstance(worksheet, LiteraryAnalysisWorksheet) and item.literary_element:
      extra.insert(0, _p(f"Literary element: {item.literary_element}", styles.muted))
    story.extend(_question_block(index, item.question, styles, extra=extra))
  return story


def _science_problems(problems: list[ScienceProblem], styles: _Styles) -> Flowables:
  if not problems:
    return []
  story: Flowables = [_p("Questions", styles.heading)]
  for index, problem in enumerate(problems, start=1):
    extra = _bullets(problem.thinking_points, styles.muted)
    story.extend(_question_block(index, problem.question, styles, extra=extra))
  return story


def _paragraph_section(title: str, value: str, styles: _Styles) -> Flowables:
  return [_p(title, styles.heading), _p(value, styles.body)] if value else []


def _science_story(worksheet: ScienceContextWorksheet | AnalysisWorksheet | LabExperimentWorksheet, styles: _Styles) -> Flowables:
  story: Flowables = []
  if isinstance(worksheet, ScienceContextWorksheet):
    context = worksheet.science_context
    if context is None:
      return story
    story += _paragraph_section("Introduction", context.explanation, styles)
    if context.key_concepts:
      story += [_p("Key Concepts", styles.heading), *_bullets(context.key_concepts, styles.body)]
    if context.key_terms:
      story += [_p("Key Terms", styles.heading), *(_p(f"{term}: {definition}", styles.body) for term, definition in context.key_terms.items())]
    if context.applications:
      story += [_p("Applications", styles.heading), *_bullets(context.applications, styles.body)]
    return story + _science_problems(context.problems, styles)

  if isinstance(worksheet, AnalysisWorksheet):
    analysis = worksheet.analysis_content
    if analysis is not None:
      story += _paragraph_section("Analysis Focus", analysis.analysis_focus, styles)
      story += _paragraph_section("Critical Aspects", analysis.critical_aspects, styles)
      story += _paragraph_section("Data Patterns", analysis.data_patterns, styles)
      if analysis.key_points:
        story += [_p("Key Points", styles.heading), *_bullets(analysis.key_points, styles.body)]
      story += _paragraph_section("Implications", analysis.implications, styles)
    return story + _science_problems(worksheet.problems, styles)

  if worksheet.content is not None:
    for title, value in (("Introduction", worksheet.content.introduction), ("Main Components", worksheet.content.main_components), ("Importance", worksheet.content.importance)):
      story += _paragraph_section(title, value, styles)
  if worksheet.experiment:
    story += [_p("Experiment", styles.heading), *(_p(f"{key.replace('_', ' ').title()}: {value}", styles.body) for key, value in worksheet.experiment.items())]
  if worksheet.materials:
    story += [_p("Materials", styles.heading), *_bullets(worksheet.materials, styles.body)]
  if worksheet.procedure:
    story += [_p("Procedure", styles.heading), *_bullets(worksheet.procedure, styles.body, numbered=True)]
  story += [_p("Observations", styles.heading), *(_p(ANSWER_BLANK, styles.body) for _ in range(3))]
  return story + _science_problems(worksheet.problems, styles)


def _quiz_story(quiz: QuizResource, styles: _Styles) -> tuple[Flowables, list[tuple[Any, Any, Any]]]:
  story: Flowables = []
  if quiz.instructions:
    story.append(_p(quiz.instructions, styles.muted))
  story.append(_p(f"Estimated time: {quiz.estimated_time}    Total points: {quiz.total_points}", styles.muted))
  for index, question in enumerate(quiz.questions, start=1):
    options = [_p(f"{letter}) {option}", styles.body) for letter, option in zip("ABCDEFGH", question.options)]
    story.extend(_question_block(index, question.question, styles, extra=options, blanks=0 if options else 2))
  entries = [(question.question, question.correct_answer or question.answer, question.explanation) for question in quiz.questions]
  return story, entries


def _section_payload(content: Any) -> Any:
  if isinstance(content, str):
    try:
      return json.loads(content)
    except json.JSONDecodeError:
      return content
  return content


def _envelope_story(resource: dict[str, Any], styles: _Styles) -> tuple[Flowables, list[tuple[Any, Any, Any]]]:
  """Render a GeneratedResource wire envelope section by section."""
  story: Flowables = []
  entries: list[tuple[Any, Any, Any]] = []
  if resource.get("content"):
    story.append(_p(resource["content"], styles.muted))
  index = 0
  for section in resource.get("sections") or []:
    if not isinstance(section, dict):
      continue
    payload = _section_payload(section.get("content"))
    story.append(_p(section.get("title") or str(section.get("type", "")).title(), styles.heading))
    if section.get("type") == "vocabulary" and isinstance(payload, list):
      story.extend(_p(f"{item.get('word')}: {item.get('definition', '')}", styles.body) for item in payload if isinstance(item, dict))
    elif section.get("type") == "rubric" and isinstance(payload, dict):
      if payload.get("description"):
        story.append(_p(payload["description"], styles.body))
      for level in payload.get("levels") or []:
        if isinstance(level, dict):
          story.append(_p(f"{level.get('score')} {level.get('label', '')}: {level.get('description', '')}", styles.body))
        else:
          story.append(_p(level, styles.body))
      for criterion in payload.get("criteria") or []:
        if not isinstance(criterion, dict):
          story.append(_p(criterion, styles.body))
          continue
        marks = " / ".join(str(level.get("score") if isinstance(level, dict) else level) for level in criterion.get("levels") or [])
        story.append(_p(f"[{marks}] {criterion.get('criterion')}: {criterion.get('description', '')}", styles.body))
    elif isinstance(payload, list):
      for item in payload:
        index += 1
        question = item.get("question") if isinstance(item, dict) else item
        options = [_p(f"{letter}) {option}", styles.body) for letter, option in zip("ABCDEFGH", item.get("options") or [])] if isinstance(item, dict) else []
        story.extend(_question_block(index, question, styles, extra=options, blanks=0 if options else 2))
        entries.append((question, item.get("answer") if isinstance(item, dict) else None, item.get("explanation") if isinstance(item, dict) else None))
    else:
      story.append(_p(payload, styles.body))
  return story, entries


def _build_story(resource: dict[str, Any], registry: FormatHandlerRegistry) -> tuple[str, str, ThemeStyle, Flowables]:
  if "sections" in resource and "metadata" in resource:
    metadata = resource.get("metadata") or {}
    theme = get_theme(metadata.get("theme"))
    story, entries = _envelope_story(resource, _Styles(theme))
    subtitle = f"Subject: {metadata.get('subject', '')} | Grade Level: {metadata.get('gradeLevel', '')}"
    return resource.get("title") or "Resource", subtitle, theme, story + _answer_key(entries, _Styles(theme))

  if (resource.get("resourceType") or resource.get("resource_type")) == "quiz":
    quiz = transform_quiz(resource)
    theme = get_theme(quiz.theme)
    story, entries = _quiz_story(quiz, _Styles(theme))
    return quiz.title, f"Subject: {quiz.subject} | Grade Level: {quiz.grade_level}", theme, story + _answer_key(entries, _Styles(theme))

  handler = registry.get_handler(str(resource.get("subject") or "").lower(), resource.get("format"))
  try:
    worksheet = parse_worksheet({**resource, "format": handler.format})
  except ValidationError as exc:
    raise ResourceValidationError(f"Invalid resource: {exc.error_count()} field error(s)") from exc
  theme = get_theme(worksheet.theme)
  styles = _Styles(theme)
  story: Flowables = [_p(worksheet.instructions, styles.muted)] if worksheet.instructions else []
  if handler.subject == "math":
    story += _math_story(worksheet, styles)
  elif handler.subject == "reading":
    story += _reading_story(worksheet, styles)
  else:
    story += _science_story(worksheet, styles)
  subtitle = f"Subject: {worksheet.subject} | Grade Level: {worksheet.grade_level}"
  return worksheet.title or "Worksheet", subtitle, theme, story + _answer_key(handler.answer_entries(worksheet), styles)


def render_resource_pdf(resource: dict[str, Any], registry: FormatHandlerRegistry | None = None) -> bytes:
  """Render a worksheet, quiz or envelope dict to PDF bytes."""
  if not isinstance(resource, dict) or not resource.get("title"):
    raise ResourceValidationError("Invalid resource data provided")

  try:
    title, subtitle, theme, story = _build_story(resource, registry or FormatHandlerRegistry())
  except (AttributeError, TypeError) as exc:
    logger.error("PDF layout failed for %r: %s", resource.get("title"), exc)
    raise RenderingError(f"Failed to generate PDF: {exc}") from exc
  styles = _Styles(theme)
  buffer = BytesIO()
  document = SimpleDocTemplate(buffer, pagesize=LETTER, title=title, leftMargin=0.75 * inch, rightMargin=0.75 * inch, topMargin=0.75 * inch, bottomMargin=0.75 * inch)
  try:
    document.build([_p(title, styles.title), _p(subtitle, styles.subtitle), Spacer(1, 12), *story])
  except (LayoutError, ValueError, TypeError) as exc:
    logger.error("PDF build failed for %r: %s", title, exc)
    raise RenderingError(f"Failed to generate PDF: {exc}") from exc
  pdf = buffer.getvalue()
  logger.info("Rendered PDF %r (%d bytes)", title, len(pdf))
  return pdf

