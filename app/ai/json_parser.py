"""Lenient JSON parsing for model output."""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any

_FENCE_RE = re.compile(r"^\s*```(?:json|JSON)?\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)
_STRING_RE = re.compile(r'"(?:\\.|[^"\\])*"', re.DOTALL)
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_BARE_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_\-]*)(\s*:)")
_MISSING_COMMA_RE = re.compile(r'("|\d|true|false|null|[}\]])(\s*\n\s*)(["{\[])')


def strip_json_fences(raw: str) -> str:
  """Remove a surrounding markdown code fence if present."""
  match = _FENCE_RE.match(raw)
  if match:
    return match.group(1)
  return raw.strip()


def extract_json_block(raw: str) -> str | None:
  """Return the first balanced object/array in the text, honoring string literals."""
  start: int | None = None
  stack: list[str] = []
  in_string = False
  escaped = False
  closing = {"{": "}", "[": "]"}

  for index, char in enumerate(raw):
    if in_string:
      if escaped:
        escaped = False
      elif char == "\\":
        escaped = True
      elif char == '"':
        in_string = False
      continue

    if char == '"' and start is not None:
      in_string = True
    elif char in closing:
      if start is None:
        start = index
      stack.append(closing[char])
    elif stack and char == stack[-1]:
      stack.pop()
      if not stack:
        return raw[start : index + 1]

  return None


def _outside_strings(raw: str, fix: Callable[[str], str]) -> str:
  """Apply a text fix to every segment that is not inside a string literal."""
  pieces: list[str] = []
  cursor = 0
  for match in _STRING_RE.finditer(raw):
    pieces.append(fix(raw[cursor : match.start()]))
    pieces.append(match.group(0))
    cursor = match.end()
  pieces.append(fix(raw[cursor:]))
  return "".join(pieces)


def _drop_trailing_commas(raw: str) -> str:
  return _outside_strings(raw, lambda segment: _TRAILING_COMMA_RE.sub(r"\1", segment))


def _quote_bare_keys(raw: str) -> str:
  return _outside_strings(raw, lambda segment: _BARE_KEY_RE.sub(r'\1"\2"\3', segment))


def _add_missing_commas(raw: str) -> str:
  # Only newline-separated values are repaired; same-line gaps are ambiguous.
  return _MISSING_COMMA_RE.sub(r"\1,\2\3", raw)


_REPAIRS: tuple[Callable[[str], str], ...] = (_drop_trailing_commas, _quote_bare_keys, _add_missing_commas)


def parse_json_with_fallback(raw: str) -> Any:
  """Parse model output as JSON, applying progressively looser repairs."""
  text = strip_json_fences(raw)
  try:
    return json.loads(text)
  except json.JSONDecodeError as exc:
    last_error = exc

  candidate = extract_json_block(text)
  if candidate is None:
    raise last_error

  # Each repair builds on the previous one; the first parse that succeeds wins.
  for repair in (None, *_REPAIRS):
    if repair is not None:
      candidate = repair(candidate)
    try:
      return json.loads(candidate)
    except json.JSONDecodeError as exc:
      last_error = exc

  raise last_error
