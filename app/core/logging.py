import logging
import logging.handlers
import sys
import time
import traceback
from pathlib import Path
from types import TracebackType

from app.config import Settings

LOG_LINE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# Loggers that would otherwise bypass the root handlers.
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")
# Provider SDKs log every HTTP call at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "google_genai")

_log_file: Path | None = None


class TruncatedFormatter(logging.Formatter):
  """Console formatter that keeps the exception header and the innermost frames."""

  tail_frames = 5

  # ruff: noqa: N802
  def formatException(self, ei: tuple[type[BaseException] | None, BaseException | None, TracebackType | None]) -> str:
    lines = traceback.format_exception(*ei)
    if len(lines) <= self.tail_frames + 1:
      return "".join(lines)
    return "".join([lines[0], "    ...\n", *lines[-self.tail_frames :]])


def rotated_log_name(default_name: str) -> str:
  """Rename rotated backups from app.log.1 to app.log-1."""
  base, _, suffix = default_name.rpartition(".")
  if base and suffix.isdigit():
    return f"{base}-{suffix}"
  return default_name


def _file_handler(settings: Settings, log_dir: Path) -> tuple[logging.Handler, Path]:
  try:
    log_dir.mkdir(parents=True, exist_ok=True)
  except OSError as exc:
    raise RuntimeError(f"Failed to create log directory at {log_dir}: {exc}") from exc

  log_path = log_dir / f"teachkit_{time.strftime('%Y%m%d_%H%M%S')}.log"
  handler = logging.handlers.RotatingFileHandler(log_path, encoding="utf-8", maxBytes=settings.log_max_bytes, backupCount=settings.log_backup_count)
  handler.namer = rotated_log_name
  handler.setFormatter(logging.Formatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))
  return handler, log_path


def setup_logging(settings: Settings, log_dir: Path | None = None) -> Path:
  """Send root, server and app records to stdout and a rotating file; returns the file path."""
  file_handler, log_path = _file_handler(settings, log_dir or Path(__file__).resolve().parents[2] / "logs")
  console = logging.StreamHandler(sys.stdout)
  console.setFormatter(TruncatedFormatter(LOG_LINE_FORMAT, datefmt=LOG_DATE_FORMAT))
  handlers: list[logging.Handler] = [console, file_handler]

  for name in SERVER_LOGGERS:
    server_logger = logging.getLogger(name)
    server_logger.handlers = list(handlers)
    server_logger.propagate = False

  logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO, handlers=handlers, force=True)
  for name in QUIET_LOGGERS:
    logging.getLogger(name).setLevel(logging.WARNING)
  return log_path


def _initialize_logging(settings: Settings) -> None:
  """Initialize logging once per process."""
  global _log_file
  if _log_file is not None:
    return
  _log_file = setup_logging(settings)
  logging.getLogger("app.core.logging").info("Logging initialized. Writing to %s", _log_file)
