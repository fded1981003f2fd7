"""Shared pytest fixtures for end-to-end report tests."""

from collections.abc import Iterator
from pathlib import Path

import httpx
import numpy as np
import pandas as pd
import pytest

from epitrend.core.config import Settings, get_settings

N_DAYS = 60


def _wide_csv(cumulative: dict[tuple[str, str], np.ndarray]) -> str:
    headers = [
        f"{d.month}/{d.day}/{d.strftime('%y')}"
        for d in pd.date_range(start="2020-02-01", periods=N_DAYS, freq="D")
    ]
    rows = []
    for (province, region), values in cumulative.items():
        row = {"Province/State": province, "Country/Region": region, "Lat": 0.0, "Long": 0.0}
        row.update(dict(zip(headers, values.tolist(), strict=True)))
        rows.append(row)
    return pd.DataFrame(rows).to_csv(index=False)


@pytest.fixture
def jhu_tables() -> dict[str, str]:
    """Confirmed and deaths CSVs for US, India and a two-province Canada."""
    rng = np.random.default_rng(2020)
    trend = np.linspace(20, 200, N_DAYS)

    def cumulative(scale: float) -> np.ndarray:
        return np.cumsum(rng.poisson(trend * scale))

    confirmed = {
        ("", "US"): cumulative(1.0),
        ("", "India"): cumulative(0.5),
        ("Ontario", "Canada"): cumulative(0.1),
        ("Quebec", "Canada"): cumulative(0.1),
    }
    deaths = {key: values // 50 for key, values in confirmed.items()}
    return {"confirmed": _wide_csv(confirmed), "deaths": _wide_csv(deaths)}


@pytest.fixture
def jhu_client(jhu_tables) -> httpx.Client:
    """HTTP client serving the fake JHU tables."""

    def handler(request: httpx.Request) -> httpx.Response:
        if "confirmed" in request.url.path:
            return httpx.Response(200, text=jhu_tables["confirmed"])
        if "deaths" in request.url.path:
            return httpx.Response(200, text=jhu_tables["deaths"])
        return httpx.Response(404, text="Not Found")

    return httpx.Client(transport=httpx.MockTransport(handler))


@pytest.fixture
def report_settings(tmp_path: Path) -> Settings:
    """Small, fast report configuration."""
    return Settings(
        confirmed_cases_url="https://data.example.test/confirmed.csv",
        deaths_url="https://data.example.test/deaths.csv",
        regions=["US", "India"],
        forecast_region="US",
        forecast_horizon=7,
        arima_max_p=1,
        arima_max_q=1,
        report_output_dir=str(tmp_path / "report"),
    )


@pytest.fixture
def clear_settings_cache() -> Iterator[None]:
    """Drop cached settings before and after a test that edits the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
