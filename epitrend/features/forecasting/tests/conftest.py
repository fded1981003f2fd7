"""Test fixtures for forecasting module."""

import numpy as np
import pandas as pd
import pytest

from epitrend.core.config import Settings
from epitrend.features.forecasting.schemas import AutoArimaModelConfig


@pytest.fixture
def random_walk_series() -> pd.Series:
    """120 days of a seeded random walk with a daily DatetimeIndex."""
    rng = np.random.default_rng(42)
    values = 500.0 + np.cumsum(rng.normal(loc=2.0, scale=10.0, size=120))
    index = pd.date_range(start="2021-01-01", periods=120, freq="D")
    return pd.Series(values, index=index, name="daily_cases")


@pytest.fixture
def ar1_values() -> np.ndarray:
    """Seeded stationary AR(1) sample around 50."""
    rng = np.random.default_rng(7)
    noise = rng.normal(scale=3.0, size=150)
    values = np.empty(150)
    values[0] = 50.0
    for t in range(1, 150):
        values[t] = 20.0 + 0.6 * values[t - 1] + noise[t]
    return values


@pytest.fixture
def fast_config() -> AutoArimaModelConfig:
    """Small search grid to keep tests quick."""
    return AutoArimaModelConfig(max_p=1, max_q=1)


@pytest.fixture
def daily_frame(random_walk_series) -> pd.DataFrame:
    """DailyRecord frame with US (random walk) and a short India series."""
    us = pd.DataFrame(
        {
            "region": "US",
            "date": random_walk_series.index,
            "daily_cases": random_walk_series.round().astype("int64").to_numpy(),
        }
    )
    india = pd.DataFrame(
        {
            "region": "India",
            "date": pd.date_range(start="2021-01-01", periods=5, freq="D"),
            "daily_cases": [1, 2, 3, 4, 5],
        }
    )
    return pd.concat([india, us], ignore_index=True)


@pytest.fixture
def forecast_settings() -> Settings:
    """Settings with a short horizon and a small search grid."""
    return Settings(
        forecast_horizon=14,
        arima_max_p=1,
        arima_max_q=1,
    )
