"""Domain errors raised by the resource pipeline."""

from __future__ import annotations


class ResourceEngineError(Exception):
  """Base class for resource pipeline failures."""


class FormatDispatchError(ResourceEngineError):
  """Raised when no handler is registered for a subject/format pair."""

  def __init__(self, message: str, *, subject: str | None = None, format_name: str | None = None) -> None:
    super().__init__(message)
    self.subject = subject
    self.format_name = format_name


class ResourceValidationError(ResourceEngineError):
  """Raised when a resource is missing data its handler requires."""


class ResourceTransformError(ResourceEngineError):
  """Raised when a handler fails to reshape raw model output."""


class QuizTransformError(ResourceEngineError):
  """Raised when quiz data cannot be shaped into a quiz resource."""


class RenderingError(ResourceEngineError):
  """Raised when preview, HTML or PDF output cannot be produced."""
