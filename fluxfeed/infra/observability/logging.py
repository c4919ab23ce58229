"""Structured logging configured through structlog.

Usage:
    from fluxfeed.infra.observability.logging import setup_logging

    setup_logging(service_name="signal-api")
    logger = logging.getLogger(__name__)
    logger.info("Signal %s for %s", status, ticker)
"""

import logging
import sys

import structlog


def setup_logging(
    service_name: str = "fluxfeed",
    *,
    log_level: str = "INFO",
    json_output: bool = True,
) -> None:
    """Global structlog + stdlib logging setup.

    Args:
        service_name: service name bound into every record
        log_level: DEBUG, INFO, WARNING, ERROR
        json_output: JSON lines when True, human-readable console output otherwise
    """
    log_level_int = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level_int,
    )

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # stdlib records (httpx, uvicorn, our modules) go through the same renderer
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    root = logging.getLogger()
    root.setLevel(log_level_int)
    for handler in root.handlers:
        handler.setFormatter(formatter)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(log_level_int, logging.WARNING))

    structlog.contextvars.bind_contextvars(service=service_name)
