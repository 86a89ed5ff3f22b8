#!/usr/bin/env python3
"""
Main entry point for the link service.

Concurrency: The server handles multiple connections simultaneously via async I/O
(FastAPI + asyncpg connection pool). Set WORKERS > 1 for multi-process scaling
across CPU cores; each worker process builds its own app and DB pool.

Usage:
    python app.py

Environment variables:
    STORAGE_BACKEND - 'postgres' (default) or 'memory'
    DATABASE_URL - PostgreSQL connection URL
    DB_CREATE_TABLES - Set to '1' to enable table creation
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    SHOULD_RATE_LIMIT - Set to '0' to disable rate limiting
    LOG_LEVEL - Logging level
"""

import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from shortlink.common.logging_config import setup_logging
from shortlink.database import create_store
from shortlink.identifier import IdentifierCodec
from shortlink.metrics import MetricsSink
from shortlink.service import LinkService
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger
    metrics = app.state.metrics

    logger.info("Starting link service...")

    store = create_store(config, metrics=metrics, logger=logger)
    logger.info(f"Using {store.backend_name} link store")
    await store.connect()

    service_instance = LinkService(
        store=store,
        codec=IdentifierCodec(length=config.id_length, logger=logger),
        metrics=metrics,
        logger=logger,
    )
    app.state.service = service_instance

    logger.info("Service started successfully")

    yield

    logger.info("Shutting down link service...")
    await service_instance.close()
    logger.info("Service stopped")


def build_app() -> FastAPI:
    """Build the app for one server process.

    Used by uvicorn as an app factory, so every worker gets its own metrics,
    store and pool.
    """
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    # Service is built in the lifespan, once the event loop is running
    app = create_app(service_instance=None, config=config, metrics=MetricsSink())
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    return app


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("Link Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_url'})}")

    # uvicorn handles SIGINT/SIGTERM with a graceful shutdown for single and multi-worker runs
    try:
        logger.info(f"Starting server on {config.host}:{config.port} with {config.workers} worker(s)")
        uvicorn.run(
            "app:build_app",
            factory=True,
            host=config.host,
            port=config.port,
            workers=config.workers,
            log_level=config.log_level.lower(),
            access_log=False,
        )
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
