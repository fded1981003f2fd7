"""Test fixtures for reporting module."""

import numpy as np
import pandas as pd
import pytest

from epitrend.core.config import Settings
from epitrend.features.forecasting.schemas import (
    ArimaOrder,
    ForecastPoint,
    ForecastResult,
    HoldoutEvaluation,
    HoldoutScore,
    PredictionInterval,
)
from epitrend.features.forecasting.service import RegionForecast
from epitrend.features.preparation.service import (
    PreparationResult,
    add_trailing_average,
    compute_daily_counts,
)


@pytest.fixture
def joined_frame() -> pd.DataFrame:
    """JoinedRecord frame: US grows steadily, India has a downward revision."""
    dates = pd.date_range(start="2020-03-01", periods=10, freq="D")
    us_cases = [5, 10, 20, 35, 50, 70, 95, 120, 150, 185]
    india_cases = [0, 0, 2, 4, 4, 9, 7, 12, 20, 25]
    rows = []
    for region, cases in (("US", us_cases), ("India", india_cases)):
        for i, d in enumerate(dates):
            rows.append(
                {
                    "region": region,
                    "date": d,
                    "cumulative_cases": cases[i],
                    "cumulative_deaths": cases[i] // 10,
                }
            )
    return pd.DataFrame(rows)


@pytest.fixture
def preparation_result(joined_frame) -> PreparationResult:
    """Preparation output with a 3-day trailing average."""
    daily = compute_daily_counts(joined_frame, ["US", "India"])
    smoothed = add_trailing_average(daily, window=3)
    return PreparationResult(
        joined=joined_frame,
        daily=smoothed,
        average_column="daily_cases_avg3",
        stats={"output_rows": len(smoothed)},
    )


@pytest.fixture
def region_forecast(preparation_result) -> RegionForecast:
    """Hand-built 5-day US forecast continuing the daily series."""
    us = preparation_result.daily[preparation_result.daily["region"] == "US"]
    series = us.set_index("date")["daily_cases"].astype("float64").asfreq("D")
    last = series.index[-1]

    points = []
    for step in range(1, 6):
        estimate = 35.0 + step
        narrow = PredictionInterval(level=0.8, lower=estimate - 2 * step, upper=estimate + 2 * step)
        wide = PredictionInterval(level=0.95, lower=estimate - 3 * step, upper=estimate + 3 * step)
        points.append(
            ForecastPoint(
                step=step,
                date=(last + pd.Timedelta(days=step)).date(),
                point_estimate=estimate,
                lower_bound=wide.lower,
                upper_bound=wide.upper,
                intervals=[narrow, wide],
            )
        )

    result = ForecastResult(
        region="US",
        order=ArimaOrder(p=1, d=1, q=0),
        trend="t",
        information_criterion="aicc",
        criterion_value=42.0,
        confidence_level=0.95,
        n_observations=len(series),
        candidates_evaluated=4,
        horizon=5,
        points=points,
        config_hash="0123456789abcdef",
    )
    return RegionForecast(series=series, result=result, model_summary="ARIMA(1,1,0) summary")


@pytest.fixture
def holdout() -> HoldoutEvaluation:
    """Holdout scores for both models."""
    return HoldoutEvaluation(
        region="US",
        horizon=5,
        train_end=pd.Timestamp("2020-03-05").date(),
        scores=[
            HoldoutScore(
                model_type="auto_arima",
                metrics={"mae": 3.2, "smape": 10.5, "wape": 9.8, "bias": -1.0},
            ),
            HoldoutScore(
                model_type="naive",
                metrics={"mae": 8.0, "smape": 25.0, "wape": 22.0, "bias": 7.5},
            ),
        ],
    )


@pytest.fixture
def report_settings(tmp_path) -> Settings:
    """Settings writing figures into a temporary directory."""
    return Settings(
        regions=["US", "India"],
        moving_average_window=3,
        report_output_dir=str(tmp_path / "report"),
        report_history_days=30,
    )


@pytest.fixture
def empty_frame() -> pd.DataFrame:
    """SmoothedRecord frame with no rows."""
    return pd.DataFrame(
        {
            "region": pd.Series([], dtype="object"),
            "date": pd.Series([], dtype="datetime64[ns]"),
            "cumulative_cases": pd.Series([], dtype="int64"),
            "cumulative_deaths": pd.Series([], dtype="int64"),
            "daily_cases": pd.Series([], dtype="int64"),
            "daily_deaths": pd.Series([], dtype="int64"),
            "daily_cases_avg3": pd.Series([], dtype=np.float64),
        }
    )
