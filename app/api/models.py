from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class ShareRequest(BaseModel):
  """Recipients plus the worksheet being shared."""

  recipients: list[str] | None = None
  worksheet_data: dict[str, Any] | None = Field(default=None, alias="worksheetData")
  model_config = ConfigDict(populate_by_name=True)


class ShareResponse(BaseModel):
  success: bool
  message: str | None = None
  error: str | None = None


class ChatTurn(BaseModel):
  role: Literal["system", "user", "assistant"]
  content: str = Field(max_length=8000)


class ChatRequest(BaseModel):
  messages: list[ChatTurn] | None = None


class ChatResponse(BaseModel):
  content: str
  role: Literal["assistant"] = "assistant"


class PreviewResponse(BaseModel):
  html: str


class HealthResponse(BaseModel):
  status: str
  version: str
