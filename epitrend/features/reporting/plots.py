"""Charts for the trend report.

Figures are built with the object-oriented matplotlib API so no GUI backend
is needed; callers save them with fig.savefig().
"""

from __future__ import annotations

from collections.abc import Sequence

import matplotlib.dates as mdates
import pandas as pd
from matplotlib.figure import Figure

from epitrend.features.forecasting.schemas import ForecastResult
from epitrend.features.preparation.schemas import CUMULATIVE_CASES, DATE, REGION


def _style(fig: Figure, title: str, ylabel: str) -> None:
    ax = fig.axes[0]
    ax.set_title(title)
    ax.set_xlabel("Date")
    ax.set_ylabel(ylabel)
    ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y-%m"))
    ax.legend()
    ax.grid(alpha=0.25)
    fig.autofmt_xdate()
    fig.tight_layout()


def plot_cumulative_cases(frame: pd.DataFrame, regions: Sequence[str]) -> Figure:
    """Line chart of cumulative confirmed cases per region."""
    fig = Figure(figsize=(10, 5))
    ax = fig.add_subplot()
    for region in regions:
        sub = frame.loc[frame[REGION] == region]
        if sub.empty:
            continue
        ax.plot(sub[DATE], sub[CUMULATIVE_CASES], lw=2, label=region)
    _style(fig, "Cumulative confirmed cases", "Cumulative cases")
    return fig


def plot_trailing_average(
    frame: pd.DataFrame,
    column: str,
    regions: Sequence[str],
    window: int = 7,
) -> Figure:
    """Line chart of the trailing average of daily cases per region.

    Undefined leading points (NaN) are left out of the lines.
    """
    fig = Figure(figsize=(10, 5))
    ax = fig.add_subplot()
    for region in regions:
        sub = frame.loc[frame[REGION] == region, [DATE, column]].dropna()
        if sub.empty:
            continue
        ax.plot(sub[DATE], sub[column], lw=2, label=region)
    _style(fig, f"Daily new cases, {window}-day trailing average", "Daily cases")
    return fig


def plot_forecast(series: pd.Series, result: ForecastResult, history_days: int = 120) -> Figure:
    """Recent history, point forecast and shaded prediction intervals."""
    fig = Figure(figsize=(10, 5))
    ax = fig.add_subplot()

    history = series.iloc[-history_days:] if history_days > 0 else series
    ax.plot(history.index, history.to_numpy(), color="tab:blue", lw=1.5, label="Observed")

    dates = [point.date for point in result.points]
    ax.plot(
        dates,
        [point.point_estimate for point in result.points],
        color="tab:orange",
        lw=2,
        linestyle="--",
        label="Forecast",
    )

    # widest interval first so narrower bands draw on top
    levels = [interval.level for interval in result.points[0].intervals]
    for rank, level in enumerate(sorted(levels, reverse=True)):
        lower = [p.intervals[levels.index(level)].lower for p in result.points]
        upper = [p.intervals[levels.index(level)].upper for p in result.points]
        ax.fill_between(
            dates,
            lower,
            upper,
            color="tab:orange",
            alpha=0.15 + 0.15 * rank,
            label=f"{int(round(level * 100))}% interval",
        )

    _style(
        fig,
        f"{result.region}: {result.order} forecast, {result.horizon} days",
        "Daily cases",
    )
    return fig
