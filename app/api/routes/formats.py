"""Router exposing the format handler registry."""

from typing import Any

from fastapi import APIRouter, Depends

from app.api.deps import get_registry
from app.api.models import PreviewResponse
from app.formats import FormatHandlerRegistry

router = APIRouter()


@router.get("/formats/{subject}")
async def list_formats(subject: str, registry: FormatHandlerRegistry = Depends(get_registry)) -> dict[str, Any]:  # noqa: B008
  return {"subject": subject, "formats": registry.available_formats(subject)}


@router.post("/formats/preview", response_model=PreviewResponse)
async def preview(resource: dict[str, Any], registry: FormatHandlerRegistry = Depends(get_registry)) -> PreviewResponse:  # noqa: B008
  """Render preview HTML for a worksheet; no answer key is included."""
  return PreviewResponse(html=registry.generate_preview(resource))


@router.post("/formats/transform")
async def transform(raw: dict[str, Any], registry: FormatHandlerRegistry = Depends(get_registry)) -> dict[str, Any]:  # noqa: B008
  """Shape raw model output into a typed worksheet or quiz."""
  return registry.transform_resource(raw).model_dump(by_alias=True)
