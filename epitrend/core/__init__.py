"""Core infrastructure: config, logging, exceptions."""

from epitrend.core.config import Settings, get_settings
from epitrend.core.exceptions import (
    EpiTrendError,
    FetchError,
    JoinError,
    ModelFitError,
    ParseError,
    SchemaError,
)
from epitrend.core.logging import configure_logging, get_logger, run_context, run_id_ctx

__all__ = [
    "EpiTrendError",
    "FetchError",
    "JoinError",
    "ModelFitError",
    "ParseError",
    "SchemaError",
    "Settings",
    "configure_logging",
    "get_logger",
    "get_settings",
    "run_context",
    "run_id_ctx",
]
