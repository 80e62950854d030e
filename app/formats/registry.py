"""Closed (subject, format) registry of worksheet handlers."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from app.core.errors import FormatDispatchError, RenderingError, ResourceEngineError, ResourceTransformError, ResourceValidationError
from app.formats.base import FormatHandler, JsonDict
from app.formats.math import GuidedMathHandler, InteractiveMathHandler, StandardMathHandler
from app.formats.quiz import render_quiz_html, transform_quiz
from app.formats.reading import ComprehensionHandler, LiteraryAnalysisHandler, VocabularyContextHandler
from app.formats.science import AnalysisFocusHandler, LabExperimentHandler, ScienceContextHandler
from app.schema.resources import QuizResource, parse_worksheet

logger = logging.getLogger(__name__)


class Subject(str, Enum):
  MATH = "math"
  READING = "reading"
  SCIENCE = "science"


class WorksheetFormat(str, Enum):
  STANDARD = "standard"
  GUIDED = "guided"
  INTERACTIVE = "interactive"
  COMPREHENSION = "comprehension"
  VOCABULARY_CONTEXT = "vocabulary_context"
  LITERARY_ANALYSIS = "literary_analysis"
  SCIENCE_CONTEXT = "science_context"
  ANALYSIS_FOCUS = "analysis_focus"
  LAB_EXPERIMENT = "lab_experiment"


FORMAT_ALIASES: dict[str, WorksheetFormat] = {"observation_analysis": WorksheetFormat.ANALYSIS_FOCUS}


def default_handlers() -> dict[Subject, dict[WorksheetFormat, FormatHandler]]:
  return {
    Subject.MATH: {
      WorksheetFormat.STANDARD: StandardMathHandler(),
      WorksheetFormat.GUIDED: GuidedMathHandler(),
      WorksheetFormat.INTERACTIVE: InteractiveMathHandler(),
    },
    Subject.READING: {
      WorksheetFormat.COMPREHENSION: ComprehensionHandler(),
      WorksheetFormat.VOCABULARY_CONTEXT: VocabularyContextHandler(),
      WorksheetFormat.LITERARY_ANALYSIS: LiteraryAnalysisHandler(),
    },
    Subject.SCIENCE: {
      WorksheetFormat.SCIENCE_CONTEXT: ScienceContextHandler(),
      WorksheetFormat.ANALYSIS_FOCUS: AnalysisFocusHandler(),
      WorksheetFormat.LAB_EXPERIMENT: LabExperimentHandler(),
    },
  }


def _text(value: Any) -> str:
  return "" if value is None else str(value)


def _field(resource: JsonDict | BaseModel, name: str) -> Any:
  if isinstance(resource, BaseModel):
    return getattr(resource, name, None)
  return resource.get(name)


class FormatHandlerRegistry:
  """Resolve handlers and run transform / preview / PDF HTML through them."""

  def __init__(self, handlers: dict[Subject, dict[WorksheetFormat, FormatHandler]] | None = None) -> None:
    self._handlers = handlers if handlers is not None else default_handlers()

  def available_formats(self, subject: str) -> list[str]:
    resolved = self._subject(subject)
    return [format_name.value for format_name in self._handlers.get(resolved, {})]

  def get_handler(self, subject: Any, format_name: Any) -> FormatHandler:
    subject = _text(subject)
    format_name = _text(format_name) or None
    resolved = self._subject(subject)
    formats = self._handlers.get(resolved)
    if not formats:
      raise FormatDispatchError(f"No handlers found for subject: {subject} (format: {format_name})", subject=subject, format_name=format_name)

    key = (format_name or "").strip().lower()
    try:
      resolved_format = FORMAT_ALIASES.get(key) or WorksheetFormat(key)
    except ValueError:
      resolved_format = None
    handler = formats.get(resolved_format) if resolved_format is not None else None
    if handler is None:
      raise FormatDispatchError(
        f"No handler found for format: {format_name} in subject: {subject}. Available formats: {', '.join(f.value for f in formats)}",
        subject=subject,
        format_name=format_name,
      )
    return handler

  def transform_resource(self, raw: JsonDict) -> BaseModel:
    """Shape raw model output; quizzes go through quiz shaping instead of the table."""
    if (raw.get("resourceType") or raw.get("resource_type")) == "quiz":
      return transform_quiz(raw)

    handler = self.get_handler(raw.get("subject"), raw.get("format"))
    try:
      resource = handler.transform(raw)
    except ResourceEngineError:
      raise
    except (ValidationError, TypeError, ValueError, AttributeError, KeyError) as exc:
      logger.warning("Transform failed for %s/%s: %s", handler.subject, handler.format, exc)
      raise ResourceTransformError(f"Failed to transform resource: {exc}") from exc
    self.validate_resource(resource)
    return resource

  def validate_resource(self, resource: JsonDict | BaseModel) -> None:
    if not _field(resource, "subject") or not _field(resource, "format") or not (_field(resource, "resource_type") or _field(resource, "resourceType")):
      raise ResourceValidationError("Invalid resource: missing required fields")
    format_name = _field(resource, "format")
    if format_name == WorksheetFormat.SCIENCE_CONTEXT and not _field(resource, "science_context"):
      raise ResourceValidationError("Invalid science_context resource: missing science_context data")
    if format_name == WorksheetFormat.ANALYSIS_FOCUS and not _field(resource, "analysis_content"):
      raise ResourceValidationError("Invalid analysis_focus resource: missing analysis_content data")

  def generate_preview(self, resource: JsonDict | BaseModel) -> str:
    handler, worksheet = self._resolve(resource)
    try:
      return handler.preview(worksheet)
    except ResourceEngineError:
      raise
    except (TypeError, ValueError, AttributeError) as exc:
      raise RenderingError(f"Failed to generate preview: {exc}") from exc

  def generate_pdf(self, resource: JsonDict | BaseModel) -> str:
    """Printable HTML with answer key; quizzes print without a format handler."""
    if isinstance(resource, QuizResource):
      return render_quiz_html(resource)
    if isinstance(resource, dict) and (resource.get("resourceType") or resource.get("resource_type")) == "quiz":
      return render_quiz_html(transform_quiz(resource))
    handler, worksheet = self._resolve(resource)
    try:
      return handler.generate_pdf(worksheet)
    except ResourceEngineError:
      raise
    except (TypeError, ValueError, AttributeError) as exc:
      raise RenderingError(f"Failed to generate PDF: {exc}") from exc

  def _resolve(self, resource: JsonDict | BaseModel) -> tuple[FormatHandler, BaseModel]:
    if isinstance(resource, QuizResource):
      raise FormatDispatchError("Quiz resources are rendered without a format handler", subject=resource.subject, format_name=resource.format)
    subject = _field(resource, "subject")
    handler = self.get_handler(subject.lower() if isinstance(subject, str) else subject, _field(resource, "format"))
    if isinstance(resource, BaseModel):
      return handler, resource
    try:
      return handler, parse_worksheet({**resource, "format": handler.format})
    except ValidationError as exc:
      raise ResourceValidationError(f"Invalid resource: {exc.error_count()} field error(s)") from exc

  @staticmethod
  def _subject(subject: Any) -> Subject | None:
    try:
      return Subject(_text(subject).strip().lower())
    except ValueError:
      return None
