"""Structured logging configuration: structlog + stdlib logging."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

from calltree.core.config import ENV_LOG_FORMAT, ENV_LOG_LEVEL


def setup_logging(level: str | None = None, log_format: str | None = None) -> None:
    """Configure structlog and stdlib logging.

    Arguments override the environment:
        CALLTREE_LOG_LEVEL  (default: INFO)
        CALLTREE_LOG_FORMAT console | json (default: console)

    Logs go to stderr; stdout belongs to CLI output and the MCP transport.
    """
    log_level = (level or os.environ.get(ENV_LOG_LEVEL, "INFO")).upper()
    fmt = (log_format or os.environ.get(ENV_LOG_FORMAT, "console")).lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if fmt == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors
        + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": shared_processors,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        renderer,
                    ],
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "root": {
                "handlers": ["default"],
                "level": log_level,
            },
            "loggers": {
                "calltree": {"level": log_level},
                "mcp": {"level": "WARNING"},
            },
        }
    )
