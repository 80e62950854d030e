"""Schema package exports."""

from .envelope import GeneratedResource, ResourceMetadata, Section
from .options import ResourceGenerationOptions
from .requests import FormatGenerationRequest, QuizGenerationRequest
from .resources import QuizResource, WorksheetResource, parse_worksheet

__all__ = ["FormatGenerationRequest", "GeneratedResource", "QuizGenerationRequest", "QuizResource", "ResourceGenerationOptions", "ResourceMetadata", "Section", "WorksheetResource", "parse_worksheet"]
