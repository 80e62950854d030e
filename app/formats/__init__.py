"""Worksheet format handlers and quiz shaping."""

from app.formats.quiz import render_quiz_html, transform_quiz
from app.formats.registry import FormatHandlerRegistry, Subject, WorksheetFormat

__all__ = ["FormatHandlerRegistry", "Subject", "WorksheetFormat", "render_quiz_html", "transform_quiz"]
