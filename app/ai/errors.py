"""Error taxonomy and classification for LLM provider calls."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum


class AIErrorCode(str, Enum):
  """Stable codes surfaced to API clients."""

  INVALID_PROMPT = "INVALID_PROMPT"
  MISSING_API_KEY = "MISSING_API_KEY"
  TIMEOUT = "TIMEOUT"
  CONNECTION = "CONNECTION"
  RATE_LIMIT = "RATE_LIMIT"
  AUTH = "AUTH"
  INVALID_REQUEST = "INVALID_REQUEST"
  INVALID_RESPONSE = "INVALID_RESPONSE"
  UNKNOWN = "UNKNOWN"


class AIServiceError(Exception):
  """A classified failure from the LLM layer."""

  def __init__(self, message: str, code: AIErrorCode = AIErrorCode.UNKNOWN, *, status_code: int | None = None) -> None:
    super().__init__(message)
    self.message = message
    self.code = code
    self.status_code = status_code

  @property
  def retryable(self) -> bool:
    return self.code in {AIErrorCode.TIMEOUT, AIErrorCode.CONNECTION, AIErrorCode.RATE_LIMIT}

  def __repr__(self) -> str:
    return f"AIServiceError(code={self.code.value!r}, message={self.message!r})"


_TIMEOUT_HINTS: tuple[str, ...] = ("timeout", "timed out", "etimedout", "econnaborted", "deadline exceeded")
_RATE_LIMIT_HINTS: tuple[str, ...] = ("rate limit", "429", "too many requests", "resource exhausted", "quota")
_AUTH_HINTS: tuple[str, ...] = ("api key", "unauthorized", "invalid_api_key", "permission denied", "401", "403")
_CONNECTION_HINTS: tuple[str, ...] = ("connection", "connect", "network", "reset by peer", "refused")


def _match_hint(message: str, hints: Iterable[str]) -> bool:
  """Return True when any hint appears in the message."""
  return any(hint in message for hint in hints)


def _status_of(exc: BaseException) -> int | None:
  status = getattr(exc, "status_code", None)
  if status is None:
    status = getattr(exc, "code", None)
  return status if isinstance(status, int) else None


def classify_exception(exc: BaseException) -> AIServiceError:
  """Map any provider SDK exception onto an AIServiceError."""
  if isinstance(exc, AIServiceError):
    return exc

  message = str(exc).lower()
  status = _status_of(exc)

  if isinstance(exc, TimeoutError) or _match_hint(message, _TIMEOUT_HINTS) or "timeout" in type(exc).__name__.lower():
    return AIServiceError("Request timed out. Please try again.", AIErrorCode.TIMEOUT, status_code=status)

  if status == 429 or _match_hint(message, _RATE_LIMIT_HINTS) or "ratelimit" in type(exc).__name__.lower():
    return AIServiceError("Rate limit exceeded. Please try again in a few moments.", AIErrorCode.RATE_LIMIT, status_code=429)

  if status in {401, 403} or _match_hint(message, _AUTH_HINTS):
    return AIServiceError("The LLM provider rejected the configured credentials.", AIErrorCode.AUTH, status_code=status)

  if status in {400, 404, 422}:
    return AIServiceError(f"The LLM provider rejected the request: {exc}", AIErrorCode.INVALID_REQUEST, status_code=status)

  if isinstance(exc, ConnectionError) or _match_hint(message, _CONNECTION_HINTS):
    return AIServiceError("Could not reach the LLM provider. Please try again.", AIErrorCode.CONNECTION, status_code=status)

  return AIServiceError(str(exc) or type(exc).__name__, AIErrorCode.UNKNOWN, status_code=status)
