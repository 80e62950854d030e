import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.env_contract import EnvContractError, validate_runtime_env_or_raise
from app.core.logging import _initialize_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
  """Set up logging and enforce the environment contract before serving."""
  from app.config import get_settings

  settings = get_settings()
  logger = logging.getLogger("app.core.lifespan")

  try:
    _initialize_logging(settings)
    logger.info("Startup complete - logging verified.")
  except RuntimeError:
    # Keep serving with the default handlers when the log directory is unavailable.
    logger.warning("Initial logging setup failed; continuing with default handlers.", exc_info=True)

  try:
    validate_runtime_env_or_raise(logger=logger)
  except EnvContractError:
    # Fail-fast when the LLM key or CORS configuration is missing.
    logger.error("Environment contract failed; refusing to start the service.", exc_info=True)
    raise

  logger.info("LLM provider=%s ready", settings.llm_provider)
  yield
