"""Unit tests for LLM error classification and retry backoff."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from app.ai.backoff import retry_with_backoff
from app.ai.errors import AIErrorCode, AIServiceError, classify_exception


class _StatusError(Exception):
  def __init__(self, message: str, status_code: int) -> None:
    super().__init__(message)
    self.status_code = status_code


@pytest.mark.parametrize(
  ("exc", "code"),
  [
    (TimeoutError("read timed out"), AIErrorCode.TIMEOUT),
    (_StatusError("slow down", 429), AIErrorCode.RATE_LIMIT),
    (_StatusError("bad key", 401), AIErrorCode.AUTH),
    (_StatusError("bad request", 400), AIErrorCode.INVALID_REQUEST),
    (ConnectionError("boom"), AIErrorCode.CONNECTION),
    (RuntimeError("mystery"), AIErrorCode.UNKNOWN),
  ],
)
def test_classify_exception(exc: Exception, code: AIErrorCode) -> None:
  assert classify_exception(exc).code is code


def test_classified_errors_pass_through() -> None:
  error = AIServiceError("no key", AIErrorCode.MISSING_API_KEY)
  assert classify_exception(error) is error
  assert not error.retryable


@pytest.mark.anyio
async def test_backoff_retries_transient_failures() -> None:
  func = AsyncMock(side_effect=[TimeoutError("timed out"), ConnectionError("reset by peer"), "ok"])
  with patch("app.ai.backoff.asyncio.sleep", new=AsyncMock()) as sleep:
    result = await retry_with_backoff(func, "prompt", delays=(1.0, 2.0), jitter=0)

  assert result == "ok"
  assert func.await_count == 3
  assert [call.args[0] for call in sleep.await_args_list] == [1.0, 2.0]


@pytest.mark.anyio
async def test_backoff_raises_non_retryable_errors_immediately() -> None:
  func = AsyncMock(side_effect=_StatusError("forbidden", 403))
  with patch("app.ai.backoff.asyncio.sleep", new=AsyncMock()) as sleep:
    with pytest.raises(AIServiceError) as exc_info:
      await retry_with_backoff(func, delays=(1.0, 2.0))

  assert exc_info.value.code is AIErrorCode.AUTH
  assert func.await_count == 1
  sleep.assert_not_awaited()


@pytest.mark.anyio
async def test_backoff_gives_up_after_the_final_attempt() -> None:
  func = AsyncMock(side_effect=TimeoutError("timed out"))
  with patch("app.ai.backoff.asyncio.sleep", new=AsyncMock()):
    with pytest.raises(AIServiceError) as exc_info:
      await retry_with_backoff(func, delays=(0.1,), jitter=0)

  assert exc_info.value.code is AIErrorCode.TIMEOUT
  assert func.await_count == 2
