"""Unit tests for API exception sanitization and domain error mapping."""

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
from app.ai.errors import AIErrorCode, AIServiceError
from app.core.errors import FormatDispatchError, QuizTransformError, RenderingError
from app.core.exceptions import (
  _sanitize_http_detail,
  _sanitize_validation_errors,
  ai_service_exception_handler,
  format_dispatch_exception_handler,
  rendering_exception_handler,
  resource_validation_exception_handler,
)


def _request(path: str = "/api/generate") -> SimpleNamespace:
  return SimpleNamespace(state=SimpleNamespace(request_id="req-1"), url=SimpleNamespace(path=path), method="POST")


def _body(response) -> dict:
  return json.loads(response.body)


def test_sanitize_validation_errors_removes_input_and_serializes_exception_ctx() -> None:
  """Validation errors stay JSON-serializable and drop raw request payloads."""
  errors = [{"type": "value_error", "loc": ("body",), "msg": "Value error, bad subject.", "input": {"subject": "x"}, "ctx": {"error": ValueError("bad subject."), "input": {"subject": "x"}}}]
  sanitized = _sanitize_validation_errors(errors)
  assert "input" not in sanitized[0]
  assert sanitized[0]["ctx"]["error"] == "ValueError: bad subject."
  assert "input" not in sanitized[0]["ctx"]
  assert sanitized[0]["loc"] == ["body"]


def test_sanitize_http_detail_drops_payload_keys() -> None:
  assert _sanitize_http_detail({"error": "x", "payload": {"secret": 1}, "items": [{"body": "b", "id": 2}]}) == {"error": "x", "items": [{"id": 2}]}


@pytest.mark.anyio
async def test_format_dispatch_maps_to_400() -> None:
  response = await format_dispatch_exception_handler(_request(), FormatDispatchError("No handlers found for subject: art", subject="art", format_name="standard"))
  assert response.status_code == 400
  assert _body(response) == {"detail": "No handlers found for subject: art", "subject": "art", "format": "standard", "requestId": "req-1"}


@pytest.mark.anyio
async def test_quiz_transform_maps_to_422() -> None:
  response = await resource_validation_exception_handler(_request(), QuizTransformError("Failed to transform quiz: bad"))
  assert response.status_code == 422
  assert _body(response)["detail"] == "Failed to transform quiz: bad"


@pytest.mark.anyio
async def test_rendering_error_keeps_its_message() -> None:
  response = await rendering_exception_handler(_request("/api/generate/pdf"), RenderingError("Failed to generate PDF: boom"))
  assert response.status_code == 500
  assert _body(response)["detail"] == "Failed to generate PDF: boom"


@pytest.mark.anyio
@pytest.mark.parametrize(("code", "status_code"), [(AIErrorCode.MISSING_API_KEY, 503), (AIErrorCode.RATE_LIMIT, 429), (AIErrorCode.TIMEOUT, 502), (AIErrorCode.INVALID_RESPONSE, 502)])
async def test_ai_errors_map_to_gateway_statuses(code: AIErrorCode, status_code: int) -> None:
  response = await ai_service_exception_handler(_request(), AIServiceError("provider said: secret prompt", code))
  assert response.status_code == status_code
  body = _body(response)
  assert body["code"] == code.value
  assert "secret prompt" not in json.dumps(body)
