from __future__ import annotations

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.ai.errors import AIServiceError
from app.api.models import HealthResponse
from app.api.routes import chat, formats, generate, pdf, quiz, resources, share
from app.config import get_settings
from app.core.errors import FormatDispatchError, QuizTransformError, RenderingError, ResourceTransformError, ResourceValidationError
from app.core.exceptions import (
  ai_service_exception_handler,
  format_dispatch_exception_handler,
  global_exception_handler,
  http_exception_handler,
  rendering_exception_handler,
  request_validation_exception_handler,
  resource_validation_exception_handler,
)
from app.core.lifespan import lifespan
from app.core.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware

VERSION = "0.1.0"

settings = get_settings()

app = FastAPI(title="TeachKit Engine", version=VERSION, lifespan=lifespan, docs_url="/docs" if settings.debug else None, redoc_url=None)

app.add_middleware(
  CORSMiddleware,
  allow_origins=list(settings.allowed_origins),
  allow_credentials=True,
  allow_methods=["GET", "POST", "OPTIONS"],
  allow_headers=["content-type", "authorization"],
  expose_headers=["content-length", "content-disposition", "x-request-id"],
)

app.add_exception_handler(Exception, global_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
app.add_exception_handler(FormatDispatchError, format_dispatch_exception_handler)
app.add_exception_handler(ResourceValidationError, resource_validation_exception_handler)
app.add_exception_handler(ResourceTransformError, resource_validation_exception_handler)
app.add_exception_handler(QuizTransformError, resource_validation_exception_handler)
app.add_exception_handler(RenderingError, rendering_exception_handler)
app.add_exception_handler(AIServiceError, ai_service_exception_handler)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)


@app.get("/health", response_model=HealthResponse, include_in_schema=False)
async def health_check() -> HealthResponse:
  """Return a simple health status."""
  return HealthResponse(status="ok", version=VERSION)


app.include_router(resources.router, prefix="/api", tags=["resources"])
app.include_router(generate.router, prefix="/api", tags=["generate"])
app.include_router(quiz.router, prefix="/api", tags=["generate"])
app.include_router(pdf.router, prefix="/api", tags=["pdf"])
app.include_router(formats.router, prefix="/api", tags=["formats"])
app.include_router(share.router, prefix="/api", tags=["share"])
app.include_router(chat.router, prefix="/api", tags=["chat"])
