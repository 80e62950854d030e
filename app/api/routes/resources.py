"""Router for normalized resource generation."""

from typing import Any

from fastapi import APIRouter, Depends

from app.ai.generators import MathGenerator
from app.api.deps import get_math_generator, get_resource_generator
from app.schema.options import ResourceGenerationOptions
from app.services.resource_generator import ResourceGenerator

router = APIRouter()


@router.post("/resources")
async def generate_resource(options: ResourceGenerationOptions, generator: ResourceGenerator = Depends(get_resource_generator)) -> dict[str, Any]:  # noqa: B008
  """Generate a resource and return the wire envelope with JSON-encoded sections."""
  resource = await generator.generate_resource(options)
  return resource.to_wire()


@router.post("/generate/math")
async def generate_math(options: ResourceGenerationOptions, generator: MathGenerator = Depends(get_math_generator)) -> dict[str, Any]:  # noqa: B008
  """Generate a math result as the model produced it, answers included."""
  result = await generator.generate_with_retry(options.model_copy(update={"subject": "math"}))
  return result.model_dump(by_alias=True)
