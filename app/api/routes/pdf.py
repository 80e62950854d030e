"""Router for PDF export and shared download links."""

import json
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_registry
from app.formats import FormatHandlerRegistry
from app.rendering.pdf import pdf_filename, render_resource_pdf

router = APIRouter()

RESOURCE_BODY = Body(default=None)
DATA_QUERY = Query(default=None)


async def _render(resource: Any, registry: FormatHandlerRegistry) -> Response:
  if not isinstance(resource, dict) or not resource.get("title"):
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid resource data provided")

  # Rendering is CPU-bound; keep it off the event loop.
  pdf = await run_in_threadpool(render_resource_pdf, resource, registry)
  headers = {"Content-Disposition": f'attachment; filename="{pdf_filename(resource["title"])}"'}
  return Response(content=pdf, media_type="application/pdf", headers=headers)


@router.post("/generate/pdf")
async def generate_pdf(resource: Any = RESOURCE_BODY, registry: FormatHandlerRegistry = Depends(get_registry)) -> Response:  # noqa: B008
  """Render the posted resource to a PDF attachment."""
  return await _render(resource, registry)


@router.get("/generate/pdf/download")
async def download_pdf(data: str | None = DATA_QUERY, registry: FormatHandlerRegistry = Depends(get_registry)) -> Response:  # noqa: B008
  """Render a worksheet carried in the `data` query parameter of a share link."""
  if not data:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No worksheet data provided")
  try:
    resource = json.loads(data)
  except json.JSONDecodeError as exc:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid worksheet data format") from exc

  return await _render(resource, registry)
