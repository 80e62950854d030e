"""MailerSend delivery for shared worksheets.

The sender is synchronous; async callers run it through a threadpool.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from email.message import Message

from app.config import Settings
from app.notifications.contracts import EmailNotification, EmailSender, NotificationProviderError

logger = logging.getLogger(__name__)

PROVIDER_NAME = "mailersend"


@dataclass(frozen=True)
class MailerSendConfig:
  api_key: str
  from_address: str
  from_name: str | None
  timeout_seconds: int
  base_url: str = "https://api.mailersend.com/v1"


def _address(email: str, name: str | None) -> dict[str, str]:
  return {"email": email, "name": name} if name else {"email": email}


def _provider_ids(headers: Message) -> dict[str, str | None]:
  # HTTPMessage lookups are case-insensitive.
  return {"provider": PROVIDER_NAME, "message_id": headers.get("X-Message-Id") or None, "request_id": headers.get("X-Request-Id") or None}


class MailerSendEmailSender(EmailSender):
  """Send one email per call through the MailerSend HTTP API."""

  def __init__(self, *, config: MailerSendConfig) -> None:
    self._config = config

  def build_payload(self, notification: EmailNotification) -> dict[str, object]:
    return {
      "from": _address(self._config.from_address, self._config.from_name),
      "to": [_address(notification.to_address, notification.to_name)],
      "subject": notification.subject,
      "text": notification.text,
      "html": notification.html,
    }

  def _request(self, notification: EmailNotification) -> urllib.request.Request:
    body = json.dumps(self.build_payload(notification)).encode("utf-8")
    headers = {"Authorization": f"Bearer {self._config.api_key}", "Content-Type": "application/json", "Accept": "application/json"}
    return urllib.request.Request(url=f"{self._config.base_url.rstrip('/')}/email", data=body, method="POST", headers=headers)

  def send(self, notification: EmailNotification) -> dict[str, str | None]:
    """Deliver the email; provider failures surface as NotificationProviderError."""
    try:
      with urllib.request.urlopen(self._request(notification), timeout=self._config.timeout_seconds) as response:
        return _provider_ids(response.headers)
    except urllib.error.HTTPError as exc:
      detail = exc.read().decode("utf-8", errors="replace") if exc.fp else ""
      logger.error("MailerSend rejected email status=%s body=%s", exc.code, detail)
      raise NotificationProviderError(f"MailerSend rejected the email (status {exc.code})") from exc
    except urllib.error.URLError as exc:
      logger.error("MailerSend unreachable: %s", exc.reason)
      raise NotificationProviderError("MailerSend is unreachable") from exc


def build_email_sender(settings: Settings) -> EmailSender | None:
  """Return a MailerSend sender, or None when email is not configured."""
  if not settings.email_configured:
    return None
  config = MailerSendConfig(
    api_key=settings.mailersend_api_key or "",
    from_address=settings.email_from_address or "",
    from_name=settings.email_from_name,
    timeout_seconds=settings.mailersend_timeout_seconds,
    base_url=settings.mailersend_base_url,
  )
  return MailerSendEmailSender(config=config)
