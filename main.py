"""Main entry point for running the Hoze FastAPI application."""

import os

import uvicorn
from loguru import logger

from hoze.core.config import get_settings
from hoze.core.logging import setup_logging


def main() -> None:
    """Main entry point for the Hoze application."""
    settings = get_settings()

    # Setup logging first
    setup_logging(settings)

    # Platforms such as Cloud Run set PORT to the port the container listens on
    port = int(os.environ.get("PORT", settings.api_port))

    # Configure uvicorn to use our logging
    log_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": {
            "default": {
                "class": "hoze.core.logging.InterceptHandler",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": "INFO", "propagate": False},
            "uvicorn.error": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": ["default"],
                "level": "INFO",
                "propagate": False,
            },
        },
    }

    mode = "development mode with auto-reload" if settings.debug else "production mode"
    logger.info(f"Starting Uvicorn on http://{settings.api_host}:{port} ({mode})")

    # The app is passed as an import string so reload can re-import it
    uvicorn.run(
        "hoze.api.main:app",
        host=settings.api_host,
        port=port,
        reload=settings.debug,
        log_config=log_config,
        timeout_graceful_shutdown=settings.shutdown_grace_period_s,
    )


if __name__ == "__main__":
    main()
