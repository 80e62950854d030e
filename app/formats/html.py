"""Small HTML building helpers for handler previews and printable documents."""

from __future__ import annotations

from collections.abc import Iterable
from html import escape

from app.formats.themes import ThemeStyle

ANSWER_LINE = '<div class="answer-space" style="border-bottom: 1px solid #d1d5db; margin: 12px 0; height: 40px;"></div>'


def text(value: object) -> str:
  return escape("" if value is None else str(value))


def section(title: str, body: str, *, page_break: bool = False) -> str:
  style = ' style="page-break-before: always;"' if page_break else ""
  return f'<div class="section"{style}><div class="section-title">{text(title)}</div>{body}</div>'


def bullet_list(items: Iterable[object]) -> str:
  rows = "".join(f"<li>{text(item)}</li>" for item in items)
  return f"<ul>{rows}</ul>" if rows else ""


def ordered_list(items: Iterable[object]) -> str:
  rows = "".join(f"<li>{text(item)}</li>" for item in items)
  return f"<ol>{rows}</ol>" if rows else ""


def numbered_item(index: int, body: str) -> str:
  return f'<div class="problem"><span class="number">{index}.</span><div class="body">{body}</div></div>'


def labeled(label: str, value: object, *, css: str = "note") -> str:
  if value in (None, "", [], {}):
    return ""
  return f'<div class="{css}"><strong>{text(label)}:</strong> {text(value)}</div>'


def answer_key(entries: Iterable[tuple[object, object, object]]) -> str:
  """Render (question, answer, explanation) triples as a page-broken answer key."""
  rows = []
  for index, (question, answer, explanation) in enumerate(entries, start=1):
    body = f'<div class="question">{text(question)}</div>{labeled("Answer", answer, css="answer")}{labeled("Explanation", explanation, css="explanation")}'
    rows.append(numbered_item(index, body))
  return section("Answer Key", "".join(rows), page_break=True) if rows else ""


def document(title: str, body: str, theme: ThemeStyle, *, subtitle: str = "") -> str:
  """Wrap handler output into a standalone printable page."""
  emojis = " ".join(theme.emojis)
  styles = (
    f"body {{ font-family: {theme.font_family}; background: {theme.background}; color: #111827; }}"
    f" h1 {{ color: {theme.primary}; text-align: center; }}"
    f" .section-title {{ color: {theme.accent}; font-weight: 600; margin: 16px 0 8px; }}"
    f" .problem {{ border: 1px solid {theme.border}; border-radius: 8px; padding: 16px; margin: 16px 0; }}"
    " .answer { color: #16a34a; } .explanation { color: #059669; }"
  )
  header = f"<h1>{emojis} {text(title)} {emojis}</h1>"
  if subtitle:
    header += f'<div class="subtitle" style="text-align: center; color: {theme.secondary};">{text(subtitle)}</div>'
  return f'<!DOCTYPE html><html><head><meta charset="utf-8"><title>{text(title)}</title><style>{styles}</style></head><body>{header}{body}</body></html>'
