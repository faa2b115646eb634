"""Process entry point for the Gemini-to-OpenAI bridge.

Reads configuration from the environment once, configures logging and runs
the FastAPI app under uvicorn. Any configuration or startup failure exits the
process with status 1 so the surrounding supervisor can restart it.
"""

from __future__ import annotations

import logging
import os
import sys
from types import TracebackType

import uvicorn

from gemini_bridge.core.config import BridgeConfig
from gemini_bridge.core.errors import ConfigurationError
from gemini_bridge.core.logs import configure_logging, redact_environment
from gemini_bridge.main import create_app

logger = logging.getLogger("gemini-bridge.server")


def main() -> None:
    configure_logging("info")
    logger.info("Starting bridge server initialization...")
    logger.info("Current working directory: %s", os.getcwd())
    logger.info("Python version: %s", sys.version.split()[0])

    logger.info("Environment variables:")
    for name, value in redact_environment(os.environ).items():
        logger.info("  %s=%s", name, value)

    try:
        config = BridgeConfig.from_env()
    except ConfigurationError as exc:
        logger.error("ERROR: %s", exc)
        sys.exit(1)

    configure_logging(config.effective_log_level)
    sys.excepthook = _log_uncaught

    logger.info("===========================================")
    logger.info("Gemini-OpenAI Bridge Starting...")
    logger.info("Bridge Port: %s", config.port)
    logger.info("Target URL: %s", config.target_url)
    logger.info("Debug Mode: %s", "ON" if config.debug else "OFF")
    if config.upstream_timeout is not None:
        logger.info("Upstream Timeout: %ss", config.upstream_timeout)
    logger.info("===========================================")

    app = create_app(config)

    try:
        uvicorn.run(
            app,
            host=config.host,
            port=config.port,
            log_config=None,
            log_level=config.effective_log_level,
        )
    except SystemExit as exc:
        # uvicorn exits this way when the port cannot be bound.
        if exc.code:
            logger.error("Failed to start server on port %s", config.port)
        raise

    logger.info("Server closed")


def _log_uncaught(
    exc_type: type[BaseException],
    exc: BaseException,
    tb: TracebackType | None,
) -> None:
    # The interpreter still exits with status 1 afterwards.
    logger.critical("Uncaught exception", exc_info=(exc_type, exc, tb))


if __name__ == "__main__":
    main()
