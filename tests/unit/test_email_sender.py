"""Unit tests for MailerSend delivery."""

from __future__ import annotations

import io
import json
import urllib.error
from dataclasses import replace
from http.client import HTTPMessage
from unittest.mock import MagicMock, patch

import pytest
from app.config import get_settings
from app.notifications.contracts import EmailNotification, NotificationProviderError
from app.notifications.email_sender import MailerSendConfig, MailerSendEmailSender, build_email_sender

NOTIFICATION = EmailNotification(to_address="teacher@example.com", to_name="Ms. Rivera", subject="Shared Worksheet: Fractions", text="hi", html="<p>hi</p>")


def _sender(from_name: str | None = "TeachKit") -> MailerSendEmailSender:
  return MailerSendEmailSender(config=MailerSendConfig(api_key="ms-key", from_address="noreply@teachkit.example", from_name=from_name, timeout_seconds=5))


def test_build_payload() -> None:
  payload = _sender().build_payload(NOTIFICATION)
  assert payload["from"] == {"email": "noreply@teachkit.example", "name": "TeachKit"}
  assert payload["to"] == [{"email": "teacher@example.com", "name": "Ms. Rivera"}]
  assert payload["subject"] == "Shared Worksheet: Fractions"

  assert _sender(from_name=None).build_payload(NOTIFICATION)["from"] == {"email": "noreply@teachkit.example"}


def test_send_posts_and_returns_message_id() -> None:
  headers = HTTPMessage()
  headers["X-Message-ID"] = "msg-1"
  headers["X-Request-Id"] = "req-9"
  response = MagicMock(headers=headers)
  response.__enter__.return_value = response

  with patch("app.notifications.email_sender.urllib.request.urlopen", return_value=response) as urlopen:
    result = _sender().send(NOTIFICATION)

  request = urlopen.call_args.args[0]
  assert request.full_url == "https://api.mailersend.com/v1/email"
  assert request.get_header("Authorization") == "Bearer ms-key"
  assert json.loads(request.data)["to"][0]["email"] == "teacher@example.com"
  assert urlopen.call_args.kwargs["timeout"] == 5
  assert result == {"provider": "mailersend", "message_id": "msg-1", "request_id": "req-9"}


def test_http_error_becomes_provider_error() -> None:
  error = urllib.error.HTTPError("https://api.mailersend.com/v1/email", 422, "Unprocessable", {}, io.BytesIO(b'{"message":"bad"}'))
  with patch("app.notifications.email_sender.urllib.request.urlopen", side_effect=error):
    with pytest.raises(NotificationProviderError, match="status 422"):
      _sender().send(NOTIFICATION)


def test_unreachable_provider_becomes_provider_error() -> None:
  with patch("app.notifications.email_sender.urllib.request.urlopen", side_effect=urllib.error.URLError("dns")):
    with pytest.raises(NotificationProviderError, match="unreachable"):
      _sender().send(NOTIFICATION)


def test_build_email_sender_requires_configuration() -> None:
  settings = get_settings()
  assert build_email_sender(replace(settings, mailersend_api_key=None, email_from_address=None)) is None

  sender = build_email_sender(replace(settings, mailersend_api_key="ms-key", email_from_address="noreply@teachkit.example"))
  assert isinstance(sender, MailerSendEmailSender)
