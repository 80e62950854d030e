"""Shared helpers for assembling prompt strings."""

from __future__ import annotations

import json
from typing import Any

JsonDict = dict[str, Any]

JSON_ONLY_SUFFIX = "Return ONLY valid JSON."


def schema_json(schema: JsonDict) -> str:
  """Render a response layout as indented JSON so prompts stay deterministic."""
  return json.dumps(schema, indent=2, ensure_ascii=False)


def bullet_list(items: list[str] | tuple[str, ...], *, prefix: str = "- ") -> str:
  return "\n".join(f"{prefix}{item}" for item in items)


def optional_line(condition: bool, text: str) -> str:
  return text if condition else ""


def append_custom_instructions(prompt: str, custom_instructions: str | None, *, heading: str = "Custom Requirements") -> str:
  """Append user-supplied instructions verbatim under a heading."""
  if not custom_instructions or not custom_instructions.strip():
    return prompt

  return f"{prompt}\n\n{heading}:\n{custom_instructions.strip()}"


def join_blocks(*blocks: str) -> str:
  """Join non-empty prompt blocks with blank lines."""
  return "\n\n".join(block.strip("\n") for block in blocks if block and block.strip())
