"""Unit tests for worksheet sharing."""

from __future__ import annotations

import json
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest
from app.notifications.contracts import NotificationProviderError
from app.services.sharing import ShareService, download_link, invalid_recipients, render_share_email

WORKSHEET = {"title": "Fractions <Practice>", "subject": "Math", "grade_level": "Grade 3", "problems": [{"question": "1/2 of 4?", "answer": "2"}]}


def test_invalid_recipients() -> None:
  assert invalid_recipients(["a@b.co", "not-an-email", "x y@z.com", ""]) == ["not-an-email", "x y@z.com", ""]


def test_download_link_round_trips_worksheet() -> None:
  link = download_link("https://teachkit.example/", WORKSHEET)
  parsed = urlparse(link)
  assert parsed.path == "/api/generate/pdf/download"
  assert json.loads(parse_qs(parsed.query)["data"][0]) == WORKSHEET


def test_share_email_escapes_title() -> None:
  email = render_share_email(WORKSHEET, "https://teachkit.example/dl?data=x&y=1")
  assert email.subject == "Shared Worksheet: Fractions <Practice>"
  assert "Fractions &lt;Practice&gt;" in email.html
  assert 'href="https://teachkit.example/dl?data=x&amp;y=1"' in email.html
  assert "Grade Level: Grade 3" in email.text


@pytest.mark.anyio
@pytest.mark.parametrize(
  ("recipients", "worksheet", "error"),
  [
    (None, WORKSHEET, "Recipients array is required"),
    ([], WORKSHEET, "Recipients array is required"),
    (["a@b.co"], None, "Worksheet data is required"),
    (["a@b.co", "bogus"], WORKSHEET, "Invalid email addresses: bogus"),
  ],
)
async def test_share_rejects_bad_input(recipients, worksheet, error) -> None:
  sender = MagicMock()
  result = await ShareService(sender, base_url="http://test").share(recipients, worksheet)
  assert (result.success, result.status_code, result.error) == (False, 400, error)
  sender.send.assert_not_called()


@pytest.mark.anyio
async def test_share_without_email_configuration() -> None:
  result = await ShareService(None, base_url="http://test").share(["a@b.co"], WORKSHEET)
  assert result.status_code == 500
  assert result.error == "Email service is not configured"


@pytest.mark.anyio
async def test_share_sends_one_email_per_recipient() -> None:
  sender = MagicMock()
  result = await ShareService(sender, base_url="http://test").share(["a@b.co", "c@d.org"], WORKSHEET)
  assert result.success
  assert result.message == "Successfully sent worksheet to 2 recipient(s)"
  assert [call.args[0].to_address for call in sender.send.call_args_list] == ["a@b.co", "c@d.org"]
  assert "http://test/api/generate/pdf/download?data=" in sender.send.call_args_list[0].args[0].text


@pytest.mark.anyio
async def test_share_stops_at_first_delivery_failure() -> None:
  sender = MagicMock()
  sender.send.side_effect = [None, NotificationProviderError("rejected"), None]
  result = await ShareService(sender, base_url="http://test").share(["a@b.co", "c@d.org", "e@f.net"], WORKSHEET)
  assert (result.success, result.status_code, result.error) == (False, 502, "Failed to send email to c@d.org")
  assert sender.send.call_count == 2
