#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: requests are served by async handlers (FastAPI + pymongo's async
client). Set WORKERS > 1 for multi-process scaling across CPU cores (each
worker has its own store client and remote log client).

Usage:
    python app.py

Environment variables:
    DATABASE_URL - Store connection URL (mongodb://... or memory://), required
    BASE_URL / APP_URL - Base URL for short links
    CORS_ORIGINS / FRONTEND_URL - Allowed browser origins
    REMOTE_LOG_URL - Remote log collector (optional) plus REMOTE_LOG_* credentials
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from pydantic import ValidationError

from shortener.components import build_components
from shortener.config import load_config
from shortener.common.logging_config import setup_logging
from shortener_web import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    logger = app.state.logger
    components = app.state.components

    logger.info("Starting URL shortener service...")
    await components.store.ensure_indexes()
    if await components.store.health_check():
        logger.info("Successfully connected to the store.")
    else:
        logger.error("Store health check failed; requests will fail until it recovers")

    yield

    logger.info("Shutting down URL shortener service...")
    await components.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    try:
        config = load_config()
    except ValidationError as e:
        print(f"Invalid or missing configuration (is DATABASE_URL set?): {e}", file=sys.stderr)
        sys.exit(1)

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'remote_log_client_secret', 'remote_log_access_code'})}")

    components = build_components(config)
    app = create_app(components, config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
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
        logger.critical(f"Failed to start server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
