"""Retry logic for transient LLM transport failures."""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from app.ai.errors import classify_exception

T = TypeVar("T")
logger = logging.getLogger(__name__)

DEFAULT_DELAYS: tuple[float, ...] = (1.0, 2.0, 4.0)


async def retry_with_backoff(func: Callable[..., Awaitable[T]], *args, delays: Sequence[float] = DEFAULT_DELAYS, jitter: float = 0.5, **kwargs) -> T:
  """
  Execute an async call, retrying timeouts, connection drops and rate limits.

  Delays default to 1s, 2s, 4s plus jitter. Other errors are classified and raised immediately.
  """
  for attempt, delay in enumerate(delays):
    try:
      return await func(*args, **kwargs)
    except Exception as exc:
      error = classify_exception(exc)
      if not error.retryable:
        if error is exc:
          raise
        raise error from exc

      wait = delay + random.uniform(0, jitter)
      logger.warning("Retry attempt %d/%d after %s: %s. Retrying in %.1fs...", attempt + 1, len(delays), error.code.value, error.message, wait)
      await asyncio.sleep(wait)

  # Final attempt
  try:
    return await func(*args, **kwargs)
  except Exception as exc:
    error = classify_exception(exc)
    if error is exc:
      raise
    raise error from exc
