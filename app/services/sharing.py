"""Share a generated worksheet by email with a PDF download link."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from html import escape
from typing import Any
from urllib.parse import quote

from starlette.concurrency import run_in_threadpool

from app.notifications.contracts import EmailNotification, EmailSender, NotificationError

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@dataclass(frozen=True)
class ShareResult:
  success: bool
  message: str | None = None
  error: str | None = None
  status_code: int = 200


def invalid_recipients(recipients: list[str]) -> list[str]:
  return [address for address in recipients if not EMAIL_PATTERN.match(address or "")]


def download_link(base_url: str, worksheet: dict[str, Any]) -> str:
  data = quote(json.dumps(worksheet, ensure_ascii=False, separators=(",", ":")), safe="")
  return f"{base_url.rstrip('/')}/api/generate/pdf/download?data={data}"


def render_share_email(worksheet: dict[str, Any], link: str) -> EmailNotification:
  title = str(worksheet.get("title") or "Worksheet")
  resource_type = worksheet.get("type") or worksheet.get("resourceType") or "worksheet"
  grade = worksheet.get("grade_level") or worksheet.get("gradeLevel") or "N/A"
  subject = worksheet.get("subject") or "N/A"
  html_body = (
    '<!DOCTYPE html><html><body style="font-family: sans-serif; color: #374151;">'
    "<p>Hello!</p><p>Someone has shared an educational resource with you.</p>"
    f'<div style="background:#f9fafb;border:1px solid #e5e7eb;border-radius:8px;padding:20px;margin:24px 0"><h2>{escape(title)}</h2>'
    f"<p><strong>Type:</strong> {escape(str(resource_type))}</p><p><strong>Subject:</strong> {escape(str(subject))}</p>"
    f"<p><strong>Grade Level:</strong> {escape(str(grade))}</p></div>"
    f'<p style="text-align:center"><a href="{escape(link, quote=True)}">Download Worksheet (PDF)</a></p>'
    "</body></html>"
  )
  text_body = f"Someone has shared an educational resource with you.\n\n{title}\nSubject: {subject}\nGrade Level: {grade}\n\nDownload: {link}\n"
  return EmailNotification(to_address="", to_name=None, subject=f"Shared Worksheet: {title}", text=text_body, html=html_body)


class ShareService:
  def __init__(self, sender: EmailSender | None, *, base_url: str) -> None:
    self._sender = sender
    self._base_url = base_url

  async def share(self, recipients: list[str] | None, worksheet: dict[str, Any] | None) -> ShareResult:
    """Send one email per recipient; stops at the first delivery failure."""
    if not recipients:
      return ShareResult(success=False, error="Recipients array is required", status_code=400)
    if not worksheet:
      return ShareResult(success=False, error="Worksheet data is required", status_code=400)
    invalid = invalid_recipients(recipients)
    if invalid:
      return ShareResult(success=False, error=f"Invalid email addresses: {', '.join(invalid)}", status_code=400)
    if self._sender is None:
      logger.error("Share requested but email delivery is not configured")
      return ShareResult(success=False, error="Email service is not configured", status_code=500)

    template = render_share_email(worksheet, download_link(self._base_url, worksheet))
    for recipient in recipients:
      notification = EmailNotification(to_address=recipient, to_name=None, subject=template.subject, text=template.text, html=template.html)
      try:
        await run_in_threadpool(self._sender.send, notification)
      except NotificationError as exc:
        logger.error("Failed to send shared worksheet to %s: %s", recipient, exc)
        return ShareResult(success=False, error=f"Failed to send email to {recipient}", status_code=502)
      logger.info("Shared worksheet %r with %s", template.subject, recipient)

    return ShareResult(success=True, message=f"Successfully sent worksheet to {len(recipients)} recipient(s)")
