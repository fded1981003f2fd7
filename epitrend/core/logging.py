"""Structured logging with structlog and a per-run correlation id.

Log events go to stderr; stdout is reserved for the rendered report.
"""

import logging
import sys
import uuid
from collections.abc import Iterator, MutableMapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

import structlog

from epitrend.core.config import get_settings

# Context variable for report run correlation
run_id_ctx: ContextVar[str | None] = ContextVar("run_id", default=None)


def add_run_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Stamp events emitted inside a run with its run_id."""
    run_id = run_id_ctx.get()
    if run_id:
        event_dict["run_id"] = run_id
    return event_dict


@contextmanager
def run_context(run_id: str | None = None) -> Iterator[str]:
    """Bind a run id for the duration of one report run.

    Args:
        run_id: Explicit id; a random 12-character hex id is generated if omitted.

    Yields:
        The bound run id.
    """
    bound = run_id or uuid.uuid4().hex[:12]
    token = run_id_ctx.set(bound)
    try:
        yield bound
    finally:
        run_id_ctx.reset(token)


def configure_logging() -> None:
    """Configure structlog: level and renderer from settings, output to stderr."""
    settings = get_settings()

    processors: list[structlog.types.Processor] = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_run_id,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    if settings.log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    """Get a logger for a pipeline module.

    Args:
        name: Logger name (typically __name__ of the calling module).

    Returns:
        structlog logger; events carry the current run_id once configured.
    """
    logger: structlog.typing.FilteringBoundLogger = structlog.get_logger(name)
    return logger
