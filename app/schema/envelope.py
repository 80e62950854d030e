"""The render-ready envelope returned by the resource normalizer."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Section(BaseModel):
  """A typed chunk of the envelope; payloads stay structured until serialization."""

  type: str
  title: str | None = None
  content: Any

  def to_wire(self) -> dict[str, Any]:
    """Return the section with structured content JSON-encoded into a string."""
    content = self.content if isinstance(self.content, str) else json.dumps(self.content, ensure_ascii=False)
    payload: dict[str, Any] = {"type": self.type, "content": content}
    if self.title is not None:
      payload["title"] = self.title
    return payload


class ResourceMetadata(BaseModel):
  grade_level: str = Field(alias="gradeLevel")
  subject: str
  resource_type: str = Field(alias="resourceType")
  generated_at: str = Field(alias="generatedAt")
  theme: str | None = None
  difficulty: str | None = None
  model_config = ConfigDict(populate_by_name=True)


class GeneratedResource(BaseModel):
  title: str
  content: str
  sections: list[Section] = Field(default_factory=list)
  metadata: ResourceMetadata
  decorations: list[str] | None = None

  def section(self, section_type: str) -> Section | None:
    return next((section for section in self.sections if section.type == section_type), None)

  def to_wire(self) -> dict[str, Any]:
    """Serialize for HTTP clients and renderers, double-encoding section payloads."""
    payload: dict[str, Any] = {
      "title": self.title,
      "content": self.content,
      "metadata": self.metadata.model_dump(by_alias=True, exclude_none=True),
      "sections": [section.to_wire() for section in self.sections],
    }
    if self.decorations is not None:
      payload["decorations"] = list(self.decorations)
    return payload
