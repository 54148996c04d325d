"""
Main entrypoint: FastAPI server for ChangeSim impact analysis.

Env: OPENAI_API_KEY, CHANGESIM_DB_PATH / CHANGESIM_DB_URL, API_TOKEN, API_HOST, API_PORT, etc.

Equivalent: uvicorn changesim.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os

# Configure structured JSON logging before other imports that may log
from changesim.logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Run the FastAPI server in the main thread."""
    from changesim.config import get_settings

    settings = get_settings()
    if not settings.openai_api_key:
        logger.warning(
            "main_config_warning",
            message="OPENAI_API_KEY is not set; impact analysis requests will fail until it is configured",
        )

    from changesim.api_server.app import app
    import uvicorn

    logger.info("main_server_starting", host=settings.api_host, port=settings.api_port)
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


if __name__ == "__main__":
    main()
