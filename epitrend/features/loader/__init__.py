"""Loader for the raw cumulative-count time-series tables."""

from epitrend.features.loader.schemas import REQUIRED_COLUMNS, Dataset
from epitrend.features.loader.service import (
    load_raw_table,
    load_raw_table_from_source,
    resolve_source,
)

__all__ = [
    "REQUIRED_COLUMNS",
    "Dataset",
    "load_raw_table",
    "load_raw_table_from_source",
    "resolve_source",
]
