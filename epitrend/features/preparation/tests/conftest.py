"""Test fixtures for preparation module."""

from collections.abc import Callable

import numpy as np
import pandas as pd
import pytest

RawRow = tuple[str | None, str, list[int]]


@pytest.fixture
def make_raw_table() -> Callable[[list[RawRow], list[str]], pd.DataFrame]:
    """Factory for JHU-shaped wide tables.

    Each row is (province, region, cumulative values), one value per header.
    """

    def _make(rows: list[RawRow], headers: list[str]) -> pd.DataFrame:
        records = []
        for province, region, values in rows:
            record: dict[str, object] = {
                "Province/State": province if province is not None else np.nan,
                "Country/Region": region,
                "Lat": 10.0,
                "Long": 20.0,
            }
            record.update(dict(zip(headers, values, strict=True)))
            records.append(record)
        return pd.DataFrame(records, columns=["Province/State", "Country/Region", "Lat", "Long", *headers])

    return _make


@pytest.fixture
def date_headers() -> list[str]:
    """Four consecutive M/D/YY headers."""
    return ["1/22/20", "1/23/20", "1/24/20", "1/25/20"]


@pytest.fixture
def raw_confirmed(make_raw_table, date_headers) -> pd.DataFrame:
    """Cumulative cases for US, India and a two-province Canada."""
    return make_raw_table(
        [
            (None, "US", [0, 5, 5, 12]),
            ("Ontario", "Canada", [1, 2, 3, 4]),
            ("Quebec", "Canada", [0, 1, 1, 2]),
            (None, "India", [10, 11, 13, 20]),
        ],
        date_headers,
    )


@pytest.fixture
def raw_deaths(make_raw_table, date_headers) -> pd.DataFrame:
    """Cumulative deaths matching raw_confirmed."""
    return make_raw_table(
        [
            (None, "US", [0, 0, 1, 1]),
            ("Ontario", "Canada", [0, 0, 0, 1]),
            ("Quebec", "Canada", [0, 0, 0, 0]),
            (None, "India", [0, 1, 1, 2]),
        ],
        date_headers,
    )


@pytest.fixture
def two_region_daily() -> pd.DataFrame:
    """DailyRecord frame for regions A and B with distinguishable values.

    A has a constant 1000 per day, B counts up 1, 2, ..., 10.
    """
    dates = pd.date_range(start="2020-03-01", periods=10, freq="D")
    rows = []
    for region, daily in (("A", [1000] * 10), ("B", list(range(1, 11)))):
        cumulative = np.cumsum(daily)
        for d, day_value, cum_value in zip(dates, daily, cumulative, strict=True):
            rows.append(
                {
                    "region": region,
                    "date": d,
                    "cumulative_cases": int(cum_value),
                    "cumulative_deaths": 0,
                    "daily_cases": day_value,
                    "daily_deaths": 0,
                }
            )
    return pd.DataFrame(rows)
