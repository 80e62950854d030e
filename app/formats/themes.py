"""Seasonal theme palettes shared by HTML and PDF output."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ThemeStyle:
  name: str
  primary: str
  secondary: str
  accent: str
  background: str
  border: str
  font_family: str
  emojis: tuple[str, ...]


DEFAULT_THEME = "General"

THEMES: dict[str, ThemeStyle] = {
  "General": ThemeStyle("General", "#4B5563", "#9CA3AF", "#6366F1", "#FFFFFF", "#E5E7EB", "Arial, sans-serif", ("⭐", "⭐")),
  "Halloween": ThemeStyle("Halloween", "#F97316", "#7C2D12", "#581C87", "#FFFBEB", "#FED7AA", "'Creepster', cursive", ("🎃", "👻")),
  "Winter": ThemeStyle("Winter", "#0EA5E9", "#0369A1", "#1E40AF", "#F0F9FF", "#BAE6FD", "'Nunito', sans-serif", ("❄️", "⛄")),
  "Spring": ThemeStyle("Spring", "#22C55E", "#15803D", "#CA8A04", "#F0FDF4", "#BBF7D0", "'Open Sans', sans-serif", ("🌸", "🌺")),
}


def get_theme(name: str | None) -> ThemeStyle:
  """Resolve a theme by name (case-insensitive); unknown names use General."""
  if name:
    for key, theme in THEMES.items():
      if key.lower() == name.strip().lower():
        return theme
  return THEMES[DEFAULT_THEME]
