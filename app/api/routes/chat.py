"""Router for the teaching-assistant chat proxy."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_chat_service
from app.api.models import ChatRequest, ChatResponse
from app.services.chat import ChatService

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, service: ChatService = Depends(get_chat_service)) -> ChatResponse:  # noqa: B008
  if not request.messages:
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid request: messages array is required")

  reply = await service.reply([turn.model_dump() for turn in request.messages])
  return ChatResponse(content=reply["content"])
