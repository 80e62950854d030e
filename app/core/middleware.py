import logging
import re
import time
import uuid
from typing import Any

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("app.core.middleware")

REQUEST_ID_HEADER = "x-request-id"
# Download links carry the whole worksheet in the query string.
UNLOGGED_QUERY_PATHS = frozenset({"/api/generate/pdf/download"})
STRIPPED_RESPONSE_HEADERS = ("x-powered-by", "server")

_SAFE_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{8,64}$")


def _log_target(scope: Scope) -> str:
  """Path plus query string, minus queries that carry resource payloads."""
  path = scope.get("path", "")
  query = scope.get("query_string", b"")
  if not query or path in UNLOGGED_QUERY_PATHS:
    return path
  return f"{path}?{query.decode('latin-1')}"


def _request_id(scope: Scope) -> str:
  """Reuse a well-formed inbound id so proxies can correlate; otherwise mint one."""
  inbound = Headers(scope=scope).get(REQUEST_ID_HEADER, "")
  if _SAFE_REQUEST_ID.match(inbound):
    return inbound
  return uuid.uuid4().hex


class RequestLoggingMiddleware:
  """Log method, target, status and latency, and echo the request id on every response."""

  def __init__(self, app: ASGIApp) -> None:
    self.app = app

  async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
    if scope["type"] != "http":
      await self.app(scope, receive, send)
      return

    request_id = _request_id(scope)
    # Exception handlers read the id back from request.state.
    scope.setdefault("state", {})["request_id"] = request_id
    method = scope.get("method", "UNKNOWN")
    started = time.perf_counter()
    logger.info("Incoming request request_id=%s %s %s", request_id, method, _log_target(scope))

    status_code = 0

    async def send_with_id(message: Message) -> None:
      nonlocal status_code
      if message["type"] == "http.response.start":
        status_code = message["status"]
        MutableHeaders(scope=message).setdefault(REQUEST_ID_HEADER, request_id)
      await send(message)

    try:
      await self.app(scope, receive, send_with_id)
    finally:
      elapsed_ms = (time.perf_counter() - started) * 1000
      logger.info("Response request_id=%s status=%s (took %.2fms)", request_id, status_code, elapsed_ms)


class SecurityHeadersMiddleware:
  """Remove server fingerprinting headers from responses."""

  def __init__(self, app: ASGIApp) -> None:
    self.app = app

  async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
    if scope["type"] != "http":
      await self.app(scope, receive, send)
      return

    async def send_stripped(message: dict[str, Any]) -> None:
      if message["type"] == "http.response.start":
        headers = MutableHeaders(scope=message)
        for name in STRIPPED_RESPONSE_HEADERS:
          if name in headers:
            del headers[name]
      await send(message)

    await self.app(scope, receive, send_stripped)
