"""Structured logging for the engine.

Modules only call ``structlog.get_logger(__name__)``; the embedding
application decides where events go by calling :func:`setup_logging` once.
"""

from __future__ import annotations

import logging
from typing import TextIO

import structlog
from structlog.typing import EventDict, WrappedLogger

from breath_guard.config import get_settings

COMPONENT = "breath_guard"


def _add_component(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("component", COMPONENT)
    return event_dict


def setup_logging(level: str | None = None, stream: TextIO | None = None) -> None:
    """Render engine events as one JSON object per line.

    *level* defaults to ``BREATH_GUARD_LOG_LEVEL``; *stream* defaults to
    stdout.  Safety decisions are logged at debug level.
    """
    threshold = logging.getLevelName((level or get_settings().log_level).upper())
    if not isinstance(threshold, int):
        threshold = logging.INFO

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            _add_component,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )
