import logging
from typing import Any

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.ai.errors import AIErrorCode, AIServiceError
from app.core.errors import FormatDispatchError, QuizTransformError, RenderingError, ResourceTransformError, ResourceValidationError

logger = logging.getLogger("uvicorn.error")

_AI_STATUS_BY_CODE: dict[AIErrorCode, int] = {AIErrorCode.MISSING_API_KEY: status.HTTP_503_SERVICE_UNAVAILABLE, AIErrorCode.RATE_LIMIT: status.HTTP_429_TOO_MANY_REQUESTS}
# Keys that may echo request payloads back to the caller or into logs.
_PAYLOAD_KEYS = frozenset({"input", "body", "payload", "content"})


def _coerce_json_safe(value: Any) -> Any:
  """Convert values pydantic puts in error contexts into JSON primitives."""
  if isinstance(value, BaseException):
    message = str(value)
    return f"{type(value).__name__}: {message}" if message else type(value).__name__
  if isinstance(value, dict):
    return {str(key): _coerce_json_safe(item) for key, item in value.items()}
  if isinstance(value, list | tuple | set):
    return [_coerce_json_safe(item) for item in value]
  if value is None or isinstance(value, bool | int | float | str):
    return value
  return str(value)


def _strip_keys(value: Any, keys: frozenset[str]) -> Any:
  if isinstance(value, dict):
    return {key: _strip_keys(item, keys) for key, item in value.items() if key not in keys}
  if isinstance(value, list):
    return [_strip_keys(item, keys) for item in value]
  return value


def _sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
  """Validation errors without the submitted input, safe to serialize."""
  return [_coerce_json_safe(_strip_keys(error, frozenset({"input"}))) for error in errors]


def _sanitize_http_detail(detail: Any) -> Any:
  return _strip_keys(detail, _PAYLOAD_KEYS)


def _request_id(request: Request) -> str | None:
  return getattr(request.state, "request_id", None)


def _error_payload(detail: Any, *, request_id: str | None = None, **extra: Any) -> dict[str, Any]:
  """Build the error body shared by every handler."""
  payload: dict[str, Any] = {"detail": detail, **{key: value for key, value in extra.items() if value is not None}}
  if request_id:
    payload["requestId"] = request_id
  return payload


def _respond(request: Request, status_code: int, detail: Any, *, headers: dict[str, str] | None = None, **extra: Any) -> JSONResponse:
  return JSONResponse(status_code=status_code, content=_error_payload(detail, request_id=_request_id(request), **extra), headers=headers)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
  """Last-resort handler; the response never carries exception details."""
  logger.error("Unhandled exception request_id=%s path=%s error_type=%s", _request_id(request), request.url.path, type(exc).__name__, exc_info=True)
  return _respond(request, status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal Server Error")


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
  errors = _sanitize_validation_errors(exc.errors())
  logger.warning("Request validation failed request_id=%s path=%s method=%s errors=%s", _request_id(request), request.url.path, request.method, errors)
  return _respond(request, status.HTTP_422_UNPROCESSABLE_ENTITY, errors)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
  """4xx details are returned as raised; 5xx details are logged only."""
  from app.config import get_settings

  request_id = _request_id(request)
  if exc.status_code >= 500:
    logger.error("HTTPException request_id=%s path=%s status_code=%s detail=%s", request_id, request.url.path, exc.status_code, exc.detail)
    return _respond(request, exc.status_code, "Internal Server Error")

  if get_settings().log_http_4xx:
    logger.warning("HTTPException request_id=%s path=%s status_code=%s detail=%s", request_id, request.url.path, exc.status_code, _sanitize_http_detail(exc.detail))
  return _respond(request, exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


async def format_dispatch_exception_handler(request: Request, exc: FormatDispatchError) -> JSONResponse:
  """Unknown subject/format pairs are client errors."""
  logger.warning("Format dispatch failed request_id=%s subject=%s format=%s", _request_id(request), exc.subject, exc.format_name)
  return _respond(request, status.HTTP_400_BAD_REQUEST, str(exc), subject=exc.subject, format=exc.format_name)


async def resource_validation_exception_handler(request: Request, exc: ResourceValidationError | ResourceTransformError | QuizTransformError) -> JSONResponse:
  """Return 422 for resources that could not be shaped or validated."""
  logger.warning("Resource rejected request_id=%s path=%s error_type=%s detail=%s", _request_id(request), request.url.path, type(exc).__name__, exc)
  return _respond(request, status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc))


async def rendering_exception_handler(request: Request, exc: RenderingError) -> JSONResponse:
  """Rendering failures keep their message so callers know which output failed."""
  logger.error("Rendering failure request_id=%s path=%s", _request_id(request), request.url.path, exc_info=True)
  return _respond(request, status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc))


async def ai_service_exception_handler(request: Request, exc: AIServiceError) -> JSONResponse:
  """Map classified LLM failures onto gateway-style status codes."""
  status_code = _AI_STATUS_BY_CODE.get(exc.code, status.HTTP_502_BAD_GATEWAY)
  logger.error("LLM failure request_id=%s path=%s code=%s message=%s", _request_id(request), request.url.path, exc.code.value, exc.message)
  # Provider messages may echo prompts; only the stable code is returned.
  return _respond(request, status_code, "AI service request failed", code=exc.code.value)
