#!/usr/bin/env python3
"""FastAPI server runner: serves the API with the simulated feed in the background."""

import argparse

import structlog
import uvicorn

from pulse_core.api.app import create_app
from pulse_core.config.loader import load_config
from pulse_core.feed import SimulatedFeed
from pulse_core.logging.setup import setup_logging
from pulse_core.pipeline.runner import build_coordinator

logger = structlog.get_logger()


def main(config_path: str | None = None):
    """Run the FastAPI server."""
    config = load_config(config_path)
    setup_logging(level=config.logging.level, log_format=config.logging.format)

    coordinator = build_coordinator(config)
    feed = SimulatedFeed(assets=config.assets, interval_s=config.feed.interval_s, seed=config.feed.seed)
    app = create_app(coordinator, feed=feed)

    logger.info("Starting FastAPI server", port=config.api.port)

    try:
        uvicorn.run(
            app,
            host=config.api.host,
            port=config.api.port,
            log_config=None  # Use our structlog setup
        )
    except Exception as e:
        logger.error("Failed to start server", error=str(e))
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Options Pulse API server")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    args = parser.parse_args()
    main(config_path=args.config)
