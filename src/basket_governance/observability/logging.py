"""Structured JSON logging for the CLI, the keeper and the read API.

Records go to stderr so command results on stdout stay machine readable.
Every record names the component that emitted it; records emitted inside
``command_context`` also carry the CLI command being run.
"""
from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import cast

import structlog
from structlog.typing import EventDict, WrappedLogger

from basket_governance.observability.redaction import redact_sensitive


def redact_event(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    return cast(EventDict, redact_sensitive(dict(event_dict)))


def _stderr_logger(*_: object) -> structlog.PrintLogger:
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: str = "INFO") -> None:
    threshold = logging.getLevelName(level.upper())
    if not isinstance(threshold, int):
        threshold = logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            redact_event,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


@contextmanager
def command_context(command: str) -> Iterator[None]:
    with structlog.contextvars.bound_contextvars(command=command):
        yield


def get_logger(component: str = "basket_governance") -> structlog.stdlib.BoundLogger:
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(component=component))
