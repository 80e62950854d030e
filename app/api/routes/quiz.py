"""Router for quiz generation."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_quiz_generation_service
from app.schema.requests import QuizGenerationRequest
from app.services.quiz_generation import QuizGenerationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/generate/quiz")
async def generate_quiz(request: QuizGenerationRequest, service: QuizGenerationService = Depends(get_quiz_generation_service)) -> dict[str, Any]:  # noqa: B008
  missing = request.missing_fields()
  if missing:
    logger.info("Quiz request missing fields: %s", ", ".join(missing))
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")

  quiz = await service.generate(request)
  return quiz.model_dump(by_alias=True)
