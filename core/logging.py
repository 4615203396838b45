"""
Structured logging setup.

Wraps structlog so every module logs event-style messages with key/value
context:

    log = get_logger("pipeline").bind(pipeline="player_metrics")
    log.info("pipeline_started", players=120)
"""

import logging
import sys
from typing import Optional

import structlog


def _add_service_name(service_name: str):
    def processor(logger, method_name, event_dict):
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def setup_logging(
    log_level: str = "INFO",
    json_format: bool = False,
    service_name: str = "courtvision-analytics",
) -> None:
    """
    Configure structlog (and the stdlib root logger) for the process.

    Args:
        log_level: Minimum level name (DEBUG, INFO, WARNING, ...)
        json_format: Render JSON lines instead of the console renderer
        service_name: Added to every event as ``service``
    """
    level = getattr(logging, str(log_level).upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_format
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_service_name(service_name),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: Optional[str] = None):
    """Get a structlog logger, optionally tagged with a logger name."""
    log = structlog.get_logger()
    if name:
        return log.bind(logger=name)
    return log
