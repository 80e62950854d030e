"""Router for subject+format driven generation."""

from typing import Any

from fastapi import APIRouter, Depends

from app.api.deps import get_format_generation_service
from app.schema.requests import FormatGenerationRequest
from app.services.format_generation import FormatGenerationService

router = APIRouter()


@router.post("/generate")
async def generate(request: FormatGenerationRequest, service: FormatGenerationService = Depends(get_format_generation_service)) -> dict[str, Any]:  # noqa: B008
  """Generate a worksheet, quiz or other resource for one subject and format."""
  return await service.generate(request)
