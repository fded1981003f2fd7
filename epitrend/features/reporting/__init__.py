"""Reporting module: charts, tables and narrative sections."""

from epitrend.features.reporting.plots import (
    plot_cumulative_cases,
    plot_forecast,
    plot_trailing_average,
)
from epitrend.features.reporting.service import (
    ReportResult,
    ReportService,
    bias_notes,
    environment_listing,
    format_forecast_table,
    format_holdout,
    summarize_regions,
)

__all__ = [
    "ReportResult",
    "ReportService",
    "bias_notes",
    "environment_listing",
    "format_forecast_table",
    "format_holdout",
    "plot_cumulative_cases",
    "plot_forecast",
    "plot_trailing_average",
    "summarize_regions",
]
