"""
Main entry point for the tinylink service.

Usage:
    tinylink

Environment variables:
    STORE_BACKEND - memory, postgres or redis
    DATABASE_URL - PostgreSQL connection URL
    DATABASE_CREATE_TABLES - Create the links table on first use
    REDIS_URL - Redis connection URL
    BASE_URL - Base URL for short links
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .config import Config, load_config
from .registry import LinkRegistry
from .stores import build_store
from .common.logging_config import setup_logging
from .web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup and close it on shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting tinylink service...")

    store = build_store(config, logger=logger)
    app.state.store = store
    app.state.registry = LinkRegistry(
        store=store,
        logger=logger,
        max_target_length=config.max_target_length,
    )

    logger.info("Service started successfully")

    try:
        yield
    finally:
        logger.info("Shutting down tinylink service...")
        await store.close()
        logger.info("Service stopped")


def build_app(config: Config, logger) -> FastAPI:
    """Create the app with the store lifecycle bound to its lifespan."""
    app = create_app(
        store_instance=None,  # Will be set in lifespan
        registry_instance=None,
        config=config,
    )
    app.state.logger = logger
    app.router.lifespan_context = lifespan
    return app


def create_service() -> FastAPI:
    """App factory for uvicorn; each worker process builds its own app."""
    config = load_config()
    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )
    return build_app(config, logger)


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("tinylink service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url', 'redis_url'})}")

    if config.workers > 1:
        # uvicorn only forks workers when given an import string
        logger.info(f"Starting {config.workers} workers on {config.host}:{config.port}")
        uvicorn.run(
            "tinylink.app:create_service",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
            access_log=True,
        )
        return

    app = build_app(config, logger)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
