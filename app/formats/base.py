"""Format handler contract and helpers for coercing raw model JSON."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel

from app.formats import html
from app.formats.themes import get_theme

JsonDict = dict[str, Any]


def as_text(value: Any) -> str:
  """Coerce a model value into a display string; None becomes empty."""
  if value is None:
    return ""
  if isinstance(value, bool):
    return "True" if value else "False"
  return str(value)


def first_text(raw: JsonDict, *keys: str) -> str:
  for key in keys:
    value = raw.get(key)
    if value not in (None, ""):
      return as_text(value)
  return ""


def text_list(value: Any) -> list[str]:
  if value is None:
    return []
  if isinstance(value, str):
    return [value] if value.strip() else []
  if isinstance(value, dict):
    return [as_text(item) for item in value.values()]
  if isinstance(value, list):
    return [as_text(item) for item in value if item is not None]
  return [as_text(value)]


def optional_text_list(value: Any) -> list[str] | None:
  items = text_list(value)
  return items or None


def term_map(value: Any) -> dict[str, str]:
  """Accept key terms as a term -> definition mapping or a list of {term, definition}."""
  if isinstance(value, dict):
    return {as_text(term): as_text(definition) for term, definition in value.items()}
  if isinstance(value, list):
    terms: dict[str, str] = {}
    for item in value:
      if isinstance(item, dict) and item.get("term"):
        terms[as_text(item["term"])] = as_text(item.get("definition"))
    return terms
  return {}


def dict_items(value: Any) -> list[JsonDict]:
  if not isinstance(value, list):
    return []
  return [item if isinstance(item, dict) else {"question": as_text(item)} for item in value]


def resolve_theme(raw: JsonDict) -> str | None:
  payload = raw.get("requestPayload")
  theme = raw.get("theme") or (payload.get("theme") if isinstance(payload, dict) else None)
  return as_text(theme) if theme else None


class FormatHandler(ABC):
  """Strategy for one (subject, format) pair.

  transform must be pure: the same raw input always yields an equal resource.
  """

  subject: ClassVar[str]
  format: ClassVar[str]
  default_instructions: ClassVar[str] = ""

  @abstractmethod
  def transform(self, raw: JsonDict) -> BaseModel:
    raise NotImplementedError

  @abstractmethod
  def render_body(self, resource: Any) -> str:
    """Student-facing HTML for the resource."""
    raise NotImplementedError

  @abstractmethod
  def answer_entries(self, resource: Any) -> list[tuple[Any, Any, Any]]:
    """(question, answer, explanation) rows for the answer key."""
    raise NotImplementedError

  def preview(self, resource: Any) -> str:
    return f'<div class="worksheet-preview">{self.render_body(resource)}</div>'

  def generate_pdf(self, resource: Any) -> str:
    """Printable HTML document; the answer key always follows the student content."""
    body = self.render_body(resource) + html.answer_key(self.answer_entries(resource))
    subtitle = " | ".join(part for part in (f"Subject: {resource.subject}", f"Grade Level: {resource.grade_level}" if resource.grade_level else "") if part)
    return html.document(resource.title or "Worksheet", body, get_theme(resource.theme), subtitle=subtitle)
