"""Structured logging setup with structlog.

JSON lines for the pipeline and API processes, a console renderer for local
runs. Per-tick fields (asset, snapshot time) travel through contextvars so
detector and registry log lines carry them without explicit arguments.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Iterator, Mapping
from datetime import datetime

import structlog

# Third-party loggers that drown out pipeline events at INFO.
NOISY_LOGGERS: dict[str, int] = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "asyncio": logging.WARNING,
}


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer()
    return structlog.processors.JSONRenderer()


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    *,
    quiet: Mapping[str, int] | None = None,
) -> None:
    """Route structlog through stdlib logging with a single stderr handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: "json" for production, "console" for development.
        quiet: Per-logger level caps; defaults to NOISY_LOGGERS.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # Module-level loggers are created before setup_logging runs.
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            _renderer(log_format),
        ],
    ))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name, cap in (NOISY_LOGGERS if quiet is None else quiet).items():
        logging.getLogger(name).setLevel(cap)


@contextlib.contextmanager
def tick_context(asset: str, ts: datetime) -> Iterator[None]:
    """Bind the asset and snapshot time to every log line emitted inside the block."""
    with structlog.contextvars.bound_contextvars(asset=asset, snapshot_ts=ts.isoformat()):
        yield


def get_logger(name: str | None = None, **initial_context) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger, optionally pre-bound with context (e.g. detector)."""
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
