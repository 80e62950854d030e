"""Contracts for outbound email delivery."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class EmailNotification:
  """One outbound email."""

  to_address: str
  to_name: str | None
  subject: str
  text: str
  html: str


class NotificationError(Exception):
  """Base class for email delivery failures."""


class NotificationProviderError(NotificationError):
  """Raised when the email provider rejects or cannot receive a request."""


class EmailSender(Protocol):
  """Delivery contract for sending email."""

  def send(self, notification: EmailNotification) -> dict[str, str | None]:
    """Send an email synchronously and return provider identifiers."""
