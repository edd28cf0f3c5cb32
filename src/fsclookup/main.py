"""Main application entry point for fsclookup."""

from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from fsclookup.api import create_api_router
from fsclookup.config import Config, get_config
from fsclookup.services.portal import LookupService
from fsclookup.version import VERSION


def configure_logging(config: Config) -> None:
    """Add the rotating file sink for all logs.

    Args:
        config: Settings holding log file path and level
    """
    log_path = Path(config.log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    # Rotation at 10 MB, keep 5 old files
    logger.add(
        log_path,
        rotation="10 MB",
        retention=5,
        level=config.log_level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        backtrace=True,
        diagnose=True,
    )

    logger.info(f"Logging to file: {log_path}")


def create_app(service: LookupService | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        service: Lookup service to route requests to (defaults to the global
                instance)

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(title="fsclookup", version=VERSION)

    # Callers are static sites on other origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(create_api_router(service))
    logger.info("REST API endpoints configured")

    return app


def main() -> None:
    """Configure logging and serve the API."""
    config = get_config()
    configure_logging(config)

    logger.info(f"Starting fsclookup on {config.host}:{config.port}")
    uvicorn.run(create_app(), host=config.host, port=config.port, log_level="info")


if __name__ == "__main__":
    main()
