"""Preparation module: reshape, join, difference and smooth.

Exports:
    Pipeline stages:
        - reshape_to_long: Wide date-per-column table to tidy rows
        - merge_metrics: Inner join of cases and deaths on (region, date)
        - compute_daily_counts: Region filter and per-region first differences
        - add_trailing_average: Per-region trailing moving average

    Service:
        - PreparationService, PreparationResult

    Schemas:
        - PreparationConfig and column name constants
"""

from epitrend.features.preparation.schemas import (
    CUMULATIVE_CASES,
    CUMULATIVE_DEATHS,
    DAILY_CASES,
    DAILY_DEATHS,
    DATE,
    REGION,
    PreparationConfig,
    average_column,
)
from epitrend.features.preparation.service import (
    PreparationResult,
    PreparationService,
    add_trailing_average,
    compute_daily_counts,
    merge_metrics,
    reshape_to_long,
)

__all__ = [
    "CUMULATIVE_CASES",
    "CUMULATIVE_DEATHS",
    "DAILY_CASES",
    "DAILY_DEATHS",
    "DATE",
    "REGION",
    "PreparationConfig",
    "PreparationResult",
    "PreparationService",
    "add_trailing_average",
    "average_column",
    "compute_daily_counts",
    "merge_metrics",
    "reshape_to_long",
]
