import logging
import os

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("entrypoint")

DEFAULT_PORT = "8000"


def main() -> None:
  """Exec uvicorn in place of this process so it receives SIGTERM directly."""
  port = os.getenv("TEACHKIT_PORT", DEFAULT_PORT)
  workers = os.getenv("TEACHKIT_WORKERS", "1")
  logger.info("Starting TeachKit Engine on port %s with %s worker(s)", port, workers)
  os.execvp("uvicorn", ["uvicorn", "app.main:app", "--host", "0.0.0.0", "--port", port, "--workers", workers, "--no-server-header"])


if __name__ == "__main__":
  main()
