"""
Main entrypoint: run the credit scoring API with uvicorn.

Env: API_HOST, API_PORT, LOG_LEVEL, ALTSCORE_* (see backend_altscore.config.settings).

Equivalent: uvicorn backend_altscore.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os

# Configure structured logging before other imports that may log
from backend_altscore.altscore_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Load settings, then serve the FastAPI app in the main thread."""
    from backend_altscore.config import get_settings

    try:
        settings = get_settings()
    except ValueError as e:
        logger.error("main_config_error", error=str(e))
        raise SystemExit(1) from e

    from backend_altscore.api_server.app import app
    import uvicorn

    logger.info(
        "main_server_starting",
        host=settings.api_host,
        port=settings.api_port,
        model_version=settings.model_version,
        score_jitter=settings.score_jitter,
    )
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
