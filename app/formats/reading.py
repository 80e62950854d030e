"""Reading worksheet handlers: comprehension, vocabulary in context, literary analysis."""

from __future__ import annotations

from typing import Any

from app.formats import html
from app.formats.base import FormatHandler, JsonDict, dict_items, first_text, resolve_theme, text_list
from app.schema.resources import (
  ComprehensionItem,
  ComprehensionWorksheet,
  LiteraryAnalysisWorksheet,
  LiteraryItem,
  ReadingPassage,
  VocabularyContextWorksheet,
  VocabularyQuestion,
  VocabularyStudyItem,
)


def _passage(value: Any) -> ReadingPassage | None:
  if isinstance(value, str):
    return ReadingPassage(text=value) if value.strip() else None
  if not isinstance(value, dict):
    return None
  return ReadingPassage(
    text=first_text(value, "text", "content"),
    type=first_text(value, "type") or None,
    lexile_level=first_text(value, "lexile_level") or None,
    target_words=text_list(value.get("target_words")),
    elements_focus=text_list(value.get("elements_focus")),
  )


class _ReadingHandler(FormatHandler):
  subject = "reading"
  passage_title = "Reading Passage"
  questions_title = "Questions"

  def header(self, raw: JsonDict) -> JsonDict:
    return {
      "title": first_text(raw, "title"),
      "grade_level": first_text(raw, "grade_level", "gradeLevel"),
      "subject": first_text(raw, "subject") or "Reading",
      "topic": first_text(raw, "topic"),
      "theme": resolve_theme(raw),
      "instructions": first_text(raw, "instructions") or self.default_instructions,
      "passage": _passage(raw.get("passage")),
    }

  def render_passage(self, passage: ReadingPassage | None) -> str:
    if passage is None:
      return ""
    body = ""
    if passage.target_words:
      words = "".join(f'<span class="target-word">{html.text(word)}</span> ' for word in passage.target_words)
      body += f'<div class="target-words"><strong>Target Vocabulary Words:</strong> {words}</div>'
    paragraphs = "".join(f"<p>{html.text(line)}</p>" for line in passage.text.split("\n") if line.strip())
    body += f'<div class="passage-content">{paragraphs}</div>'
    return html.section(self.passage_title, body)

  def render_item(self, item: Any) -> str:
    raise NotImplementedError

  def render_body(self, resource: Any) -> str:
    parts = [f'<p class="instructions">{html.text(resource.instructions)}</p>'] if resource.instructions else []
    parts.append(self.render_passage(resource.passage))
    items = "".join(html.numbered_item(index, self.render_item(item)) for index, item in enumerate(resource.problems, start=1))
    if items:
      parts.append(html.section(self.questions_title, items))
    return "".join(parts)

  def answer_entries(self, resource: Any) -> list[tuple[Any, Any, Any]]:
    return [(item.question, item.answer, "") for item in resource.problems]


class ComprehensionHandler(_ReadingHandler):
  format = "comprehension"
  questions_title = "Comprehension Questions"
  default_instructions = "Read the passage carefully. Then, answer each question using evidence from the text to support your answers."

  def transform(self, raw: JsonDict) -> ComprehensionWorksheet:
    problems = [
      ComprehensionItem(
        question=first_text(item, "question"),
        answer=first_text(item, "answer", "correctAnswer", "correct_answer"),
        evidence_prompt=first_text(item, "evidence_prompt"),
        skill_focus=first_text(item, "skill_focus"),
        hints=text_list(item.get("hints")),
      )
      for item in dict_items(raw.get("problems"))
    ]
    return ComprehensionWorksheet(**self.header(raw), problems=problems)

  def render_item(self, item: ComprehensionItem) -> str:
    body = f'<div class="question">{html.text(item.question)}</div>'
    if item.evidence_prompt:
      body += f'<div class="evidence-prompt"><em>{html.text(item.evidence_prompt)}</em></div>'
    body += html.labeled("Skill Focus", item.skill_focus)
    return body + html.ANSWER_LINE


class VocabularyContextHandler(_ReadingHandler):
  format = "vocabulary_context"
  passage_title = "Text Passage"
  questions_title = "Vocabulary Study"
  default_instructions = "Study each vocabulary word in context. Define the word, analyze its usage, and apply it in new contexts."

  def transform(self, raw: JsonDict) -> VocabularyContextWorksheet:
    problems = [
      VocabularyStudyItem(
        word=first_text(item, "word"),
        context=first_text(item, "context"),
        definition=first_text(item, "definition"),
        questions=[VocabularyQuestion(question=first_text(q, "question"), answer=first_text(q, "answer")) for q in dict_items(item.get("questions"))],
        application=first_text(item, "application"),
      )
      for item in dict_items(raw.get("problems"))
    ]
    return VocabularyContextWorksheet(**self.header(raw), problems=problems)

  def render_item(self, item: VocabularyStudyItem) -> str:
    body = f'<div class="word"><strong>{html.text(item.word)}</strong></div>'
    body += html.labeled("Context", item.context)
    body += '<div class="definition-space"><strong>Definition:</strong></div>' + html.ANSWER_LINE
    for question in item.questions:
      body += f'<div class="question">{html.text(question.question)}</div>' + html.ANSWER_LINE
    body += html.labeled("Apply It", item.application)
    return body

  def answer_entries(self, resource: VocabularyContextWorksheet) -> list[tuple[Any, Any, Any]]:
    rows: list[tuple[Any, Any, Any]] = []
    for item in resource.problems:
      rows.append((f"Define: {item.word}", item.definition, item.context))
      rows.extend((question.question, question.answer, "") for question in item.questions)
    return rows


class LiteraryAnalysisHandler(_ReadingHandler):
  format = "literary_analysis"
  passage_title = "Literary Passage"
  questions_title = "Analysis Questions"
  default_instructions = "Analyze the passage focusing on the literary elements. Support your analysis with specific evidence from the text."

  def transform(self, raw: JsonDict) -> LiteraryAnalysisWorksheet:
    problems = [
      LiteraryItem(
        question=first_text(item, "question"),
        answer=first_text(item, "answer"),
        literary_element=first_text(item, "literary_element", "element"),
        evidence_prompt=first_text(item, "evidence_prompt"),
        analysis_points=text_list(item.get("analysis_points") or item.get("guiding_questions")),
      )
      for item in dict_items(raw.get("problems"))
    ]
    return LiteraryAnalysisWorksheet(**self.header(raw), problems=problems)

  def render_item(self, item: LiteraryItem) -> str:
    body = html.labeled("Literary Element", item.literary_element)
    body += f'<div class="question">{html.text(item.question)}</div>'
    if item.evidence_prompt:
      body += f'<div class="evidence-prompt"><em>{html.text(item.evidence_prompt)}</em></div>'
    if item.analysis_points:
      body += f'<div class="analysis-points"><h4>Consider:</h4>{html.bullet_list(item.analysis_points)}</div>'
    return body + html.ANSWER_LINE
