"""Report rendering: regional summary, bias notes, forecast table, figures.

The Reporter is a sink: it never changes pipeline data, it only formats it
and writes figures to the configured output directory.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from epitrend.core.config import Settings, get_settings
from epitrend.core.logging import get_logger
from epitrend.features.forecasting.schemas import ForecastResult, HoldoutEvaluation
from epitrend.features.preparation.schemas import (
    CUMULATIVE_CASES,
    CUMULATIVE_DEATHS,
    DAILY_CASES,
    DATE,
    REGION,
)
from epitrend.features.reporting.plots import (
    plot_cumulative_cases,
    plot_forecast,
    plot_trailing_average,
)

if TYPE_CHECKING:
    from matplotlib.figure import Figure

    from epitrend.features.forecasting.service import RegionForecast
    from epitrend.features.preparation.service import PreparationResult

logger = get_logger(__name__)

# Distributions listed in the environment section
REPORTED_PACKAGES: tuple[str, ...] = (
    "epitrend",
    "numpy",
    "pandas",
    "statsmodels",
    "matplotlib",
    "httpx",
    "pydantic",
    "pydantic-settings",
    "structlog",
)


@dataclass
class ReportResult:
    """Rendered report.

    Attributes:
        sections: Ordered text sections keyed by title.
        figures: Figures keyed by file stem.
        figure_paths: Files written (empty when saving is disabled).
    """

    sections: dict[str, str] = field(default_factory=lambda: {})
    figures: dict[str, Figure] = field(default_factory=lambda: {})
    figure_paths: list[Path] = field(default_factory=lambda: [])

    def to_text(self) -> str:
        """Join all sections into one printable document."""
        blocks = []
        for title, body in self.sections.items():
            blocks.append(f"{title}\n{'=' * len(title)}\n{body}")
        return "\n\n".join(blocks) + "\n"


def summarize_regions(frame: pd.DataFrame, average_column: str) -> pd.DataFrame:
    """Per-region summary table of the smoothed daily frame.

    Args:
        frame: SmoothedRecord frame.
        average_column: Trailing-average column name.

    Returns:
        One row per region, indexed by region.
    """
    rows = []
    for region, sub in frame.groupby(REGION, sort=False):
        sub = sub.sort_values(DATE)
        last = sub.iloc[-1]
        averages = sub[average_column].dropna()
        cases = int(last[CUMULATIVE_CASES])
        deaths = int(last[CUMULATIVE_DEATHS])
        rows.append(
            {
                REGION: region,
                "first_date": sub[DATE].iloc[0].date(),
                "last_date": last[DATE].date(),
                "days": len(sub),
                CUMULATIVE_CASES: cases,
                CUMULATIVE_DEATHS: deaths,
                "case_fatality_pct": round(100.0 * deaths / cases, 2) if cases else None,
                "peak_avg": round(float(averages.max()), 1) if not averages.empty else None,
                "peak_avg_date": (
                    sub.loc[averages.idxmax(), DATE].date() if not averages.empty else None
                ),
                "negative_days": int((sub[DAILY_CASES] < 0).sum()),
            }
        )
    return pd.DataFrame(rows).set_index(REGION) if rows else pd.DataFrame()


def bias_notes(frame: pd.DataFrame) -> list[str]:
    """Narrative notes on known biases of the derived series."""
    notes = [
        "Daily counts are first differences of cumulative counts; the first day of "
        "each region reports its full cumulative total as that day's count.",
        "Counts reflect reported, not true, infections: testing capacity and "
        "reporting cadence (weekends, holidays) shape the series.",
        "A trailing average lags turning points by about half its window.",
    ]
    if frame.empty:
        return notes

    for region, sub in frame.groupby(REGION, sort=False):
        sub = sub.sort_values(DATE)
        first = sub.iloc[0]
        if int(first[CUMULATIVE_CASES]) > 0:
            notes.append(
                f"{region}: first day ({first[DATE].date()}) already carries "
                f"{int(first[CUMULATIVE_CASES])} cumulative cases."
            )
        negative = sub.loc[sub[DAILY_CASES] < 0]
        if not negative.empty:
            notes.append(
                f"{region}: {len(negative)} day(s) with negative daily cases "
                f"(downward revisions), largest {int(negative[DAILY_CASES].min())}."
            )
        zero_days = int((sub[DAILY_CASES] == 0).sum())
        if zero_days > len(sub) // 4:
            notes.append(
                f"{region}: {zero_days} day(s) with zero new cases, likely non-reporting days."
            )
    return notes


def format_forecast_table(result: ForecastResult) -> str:
    """Forecast steps as a fixed-width table."""
    rows = []
    for point in result.points:
        row: dict[str, object] = {
            "step": point.step,
            "date": point.date,
            "forecast": round(point.point_estimate, 1),
        }
        for interval in point.intervals:
            pct = int(round(interval.level * 100))
            row[f"lo{pct}"] = round(interval.lower, 1)
            row[f"hi{pct}"] = round(interval.upper, 1)
        rows.append(row)
    return pd.DataFrame(rows).to_string(index=False)


def format_holdout(evaluation: HoldoutEvaluation) -> str:
    """Holdout scores as a fixed-width table, followed by any metric warnings."""
    table = pd.DataFrame(
        {score.model_type: score.metrics for score in evaluation.scores}
    ).T.round(3)
    header = f"Held out the last {evaluation.horizon} days (train end {evaluation.train_end})"
    lines = [header, table.to_string()]
    for score in evaluation.scores:
        lines.extend(f"note ({score.model_type}) {warning}" for warning in score.warnings)
    return "\n".join(lines)


def environment_listing() -> str:
    """Python, platform and installed library versions."""
    lines = [
        f"python: {sys.version.split()[0]}",
        f"platform: {platform.platform()}",
    ]
    for package in REPORTED_PACKAGES:
        try:
            lines.append(f"{package}: {version(package)}")
        except PackageNotFoundError:
            lines.append(f"{package}: not installed")
    return "\n".join(lines)


class ReportService:
    """Render the report sections and figures.

    Example:
        >>> report = ReportService().render(preparation, forecast)
        >>> print(report.to_text())
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the report service.

        Args:
            settings: Settings (defaults to cached settings).
        """
        self.settings = settings or get_settings()

    def render(
        self,
        preparation: PreparationResult,
        forecast: RegionForecast,
        holdout: HoldoutEvaluation | None = None,
    ) -> ReportResult:
        """Build all sections and figures, saving figures when configured.

        Args:
            preparation: Output of the preparation pipeline.
            forecast: Forecast for the configured region.
            holdout: Optional holdout scores.

        Returns:
            ReportResult.
        """
        regions = list(self.settings.regions)
        frame = preparation.daily
        report = ReportResult()

        summary = summarize_regions(frame, preparation.average_column)
        report.sections["Regional summary"] = summary.to_string() if not summary.empty else "-"
        report.sections["Known biases"] = "\n".join(f"- {note}" for note in bias_notes(frame))
        report.sections[f"Model summary ({forecast.result.region})"] = forecast.model_summary
        report.sections[
            f"{forecast.result.horizon}-day forecast ({forecast.result.region}, "
            f"{forecast.result.order})"
        ] = format_forecast_table(forecast.result)
        if holdout is not None:
            report.sections["Holdout accuracy"] = format_holdout(holdout)
        report.sections["Environment"] = environment_listing()

        report.figures["cumulative_cases"] = plot_cumulative_cases(frame, regions)
        report.figures["daily_cases_trailing_average"] = plot_trailing_average(
            frame,
            preparation.average_column,
            regions,
            window=self.settings.moving_average_window,
        )
        report.figures["forecast"] = plot_forecast(
            forecast.series,
            forecast.result,
            history_days=self.settings.report_history_days,
        )

        if self.settings.report_save_figures:
            report.figure_paths = self.save_figures(report.figures)

        logger.info(
            "reporting.render_completed",
            sections=len(report.sections),
            figures=len(report.figures),
            saved=len(report.figure_paths),
        )
        return report

    def save_figures(self, figures: dict[str, Figure]) -> list[Path]:
        """Write figures as PNG into the output directory."""
        output_dir = Path(self.settings.report_output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        paths: list[Path] = []
        for stem, fig in figures.items():
            path = output_dir / f"{stem}.png"
            fig.savefig(path, dpi=120)
            paths.append(path)
        logger.debug("reporting.figures_saved", output_dir=str(output_dir), count=len(paths))
        return paths
