"""Preparation pipeline: reshape, join, difference and smooth.

CRITICAL: All per-region computations are grouped by region so that no
difference or rolling window ever reads across a region boundary.
- Daily counts use groupby().diff() with the first value baselined against zero
- Trailing averages use groupby().rolling(window, min_periods=window)
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from epitrend.core.exceptions import JoinError, ParseError, SchemaError
from epitrend.core.logging import get_logger
from epitrend.features.loader.schemas import (
    LATITUDE_COLUMN,
    LONGITUDE_COLUMN,
    PROVINCE_COLUMN,
    REGION_COLUMN,
    REQUIRED_COLUMNS,
)
from epitrend.features.preparation.schemas import (
    CUMULATIVE_CASES,
    CUMULATIVE_DEATHS,
    DAILY_CASES,
    DAILY_DEATHS,
    DATE,
    DATE_HEADER_FORMAT,
    REGION,
    VALUE,
    PreparationConfig,
    average_column,
)

logger = get_logger(__name__)


# =============================================================================
# Reshaper
# =============================================================================


def reshape_to_long(raw: pd.DataFrame, value_name: str = VALUE) -> pd.DataFrame:
    """Pivot a wide date-per-column table into (region, date, value) rows.

    Drops the latitude, longitude and sub-region columns. Rows come out
    date-major in the original column order. Sub-regions of the same region
    are summed so the result is unique per (region, date).

    Args:
        raw: RawSeriesTable.
        value_name: Name of the value column in the output.

    Returns:
        Tidy DataFrame with columns region, date, <value_name>.

    Raises:
        SchemaError: If the region column is missing.
        ParseError: If a date header or a cell value cannot be parsed.
    """
    if REGION_COLUMN not in raw.columns:
        raise SchemaError(
            f"Missing expected column: {REGION_COLUMN}",
            stage="reshaper",
            details={"missing": [REGION_COLUMN]},
        )

    date_columns = [col for col in raw.columns if col not in REQUIRED_COLUMNS]
    header_dates = _parse_date_headers(date_columns)

    wide = raw.drop(
        columns=[PROVINCE_COLUMN, LATITUDE_COLUMN, LONGITUDE_COLUMN],
        errors="ignore",
    ).rename(columns={REGION_COLUMN: REGION})

    long = wide.melt(
        id_vars=[REGION],
        value_vars=date_columns,
        var_name=DATE,
        value_name=value_name,
    )
    long[DATE] = long[DATE].map(header_dates)

    values = pd.to_numeric(long[value_name], errors="coerce")
    bad_values = values.isna()
    if bad_values.any():
        sample = long.loc[bad_values].head(5)
        raise ParseError(
            f"{int(bad_values.sum())} cell(s) are not numeric counts",
            details={
                "column": value_name,
                "sample": [
                    {"region": r, "date": str(d.date()), "value": str(v)}
                    for r, d, v in sample[[REGION, DATE, value_name]].itertuples(index=False)
                ],
            },
        )
    long[value_name] = values

    tidy = long.groupby([REGION, DATE], sort=False, as_index=False)[value_name].sum()
    tidy[value_name] = tidy[value_name].round().astype("int64")

    logger.debug(
        "preparation.reshape_completed",
        value_name=value_name,
        date_columns=len(date_columns),
        input_rows=len(raw),
        output_rows=len(tidy),
    )
    return tidy


def _parse_date_headers(columns: Sequence[Any]) -> dict[Any, pd.Timestamp]:
    """Parse M/D/YY headers, failing on the first table with any bad header."""
    headers = pd.Series([str(col) for col in columns], dtype="object")
    parsed = pd.to_datetime(headers, format=DATE_HEADER_FORMAT, errors="coerce")
    bad = [str(col) for col, ts in zip(columns, parsed, strict=True) if pd.isna(ts)]
    if bad:
        raise ParseError(
            f"{len(bad)} column header(s) do not match {DATE_HEADER_FORMAT}",
            details={"headers": bad[:10]},
        )
    return dict(zip(columns, parsed, strict=True))


# =============================================================================
# Merger
# =============================================================================


def merge_metrics(
    cases: pd.DataFrame,
    deaths: pd.DataFrame,
    strict: bool = False,
) -> pd.DataFrame:
    """Inner-join tidy cases and deaths on exact (region, date).

    Args:
        cases: Tidy frame with a cumulative_cases column.
        deaths: Tidy frame with a cumulative_deaths column.
        strict: Raise JoinError instead of returning an empty frame.

    Returns:
        JoinedRecord frame sorted by region then date.

    Raises:
        SchemaError: If an input lacks its key or value column.
        JoinError: If strict and the inputs share no rows.
    """
    for frame, value_col in ((cases, CUMULATIVE_CASES), (deaths, CUMULATIVE_DEATHS)):
        missing = [col for col in (REGION, DATE, value_col) if col not in frame.columns]
        if missing:
            raise SchemaError(
                f"Join input is missing columns: {missing}",
                stage="merger",
                details={"missing": missing},
            )

    joined = cases[[REGION, DATE, CUMULATIVE_CASES]].merge(
        deaths[[REGION, DATE, CUMULATIVE_DEATHS]],
        on=[REGION, DATE],
        how="inner",
        validate="one_to_one",
    )
    joined = joined.sort_values([REGION, DATE], kind="mergesort").reset_index(drop=True)

    if joined.empty:
        if strict:
            raise JoinError(
                details={"cases_rows": len(cases), "deaths_rows": len(deaths)},
            )
        logger.warning(
            "preparation.join_empty",
            cases_rows=len(cases),
            deaths_rows=len(deaths),
        )
    else:
        logger.debug(
            "preparation.join_completed",
            cases_rows=len(cases),
            deaths_rows=len(deaths),
            joined_rows=len(joined),
        )
    return joined


# =============================================================================
# Aggregator
# =============================================================================


def compute_daily_counts(joined: pd.DataFrame, regions: Sequence[str]) -> pd.DataFrame:
    """Filter to the region allow-list and derive daily counts.

    daily[i] = cumulative[i] - cumulative[i-1] within a region, with
    cumulative[-1] taken as 0. The first day's daily value is therefore the
    full cumulative count on that day, not a true new-case count.

    Args:
        joined: JoinedRecord frame.
        regions: Region allow-list.

    Returns:
        DailyRecord frame sorted by region then date.
    """
    result = joined.loc[joined[REGION].isin(list(regions))].copy()

    present = set(result[REGION].unique())
    absent = [region for region in regions if region not in present]
    if absent:
        logger.warning("preparation.regions_not_found", regions=absent)

    result = result.sort_values([REGION, DATE], kind="mergesort").reset_index(drop=True)

    grouped = result.groupby(REGION, sort=False)
    for cumulative_col, daily_col in (
        (CUMULATIVE_CASES, DAILY_CASES),
        (CUMULATIVE_DEATHS, DAILY_DEATHS),
    ):
        # CRITICAL: grouped diff, first row per region falls back to the raw value
        result[daily_col] = (
            grouped[cumulative_col].diff().fillna(result[cumulative_col]).astype("int64")
        )

    negative_days = int((result[DAILY_CASES] < 0).sum()) if not result.empty else 0
    if negative_days:
        logger.info("preparation.negative_daily_cases", rows=negative_days)

    return result


# =============================================================================
# Smoother
# =============================================================================


def add_trailing_average(
    daily: pd.DataFrame,
    window: int = 7,
    column: str = DAILY_CASES,
) -> pd.DataFrame:
    """Add a right-aligned trailing mean of `column` per region.

    The window ends at (and includes) the current date. The first
    window - 1 positions of each region are NaN.

    Args:
        daily: DailyRecord frame.
        window: Window size in samples.
        column: Column to smooth.

    Returns:
        Copy of the frame with a <column>_avg<window> column.
    """
    if window < 1:
        raise ValueError(f"window must be >= 1, got {window}")

    result = daily.sort_values([REGION, DATE], kind="mergesort").reset_index(drop=True)

    def trailing_mean(x: pd.Series, w: int = window) -> pd.Series:
        return x.rolling(window=w, min_periods=w).mean()

    # CRITICAL: group by region to prevent cross-region smoothing
    result[average_column(column, window)] = result.groupby(REGION, sort=False)[
        column
    ].transform(trailing_mean)
    return result


# =============================================================================
# Orchestration
# =============================================================================


@dataclass
class PreparationResult:
    """Result of the preparation pipeline.

    Attributes:
        joined: JoinedRecord frame for all regions.
        daily: Smoothed DailyRecord frame for the allow-listed regions.
        average_column: Name of the trailing-average column.
        stats: Row counts and date range.
    """

    joined: pd.DataFrame
    daily: pd.DataFrame
    average_column: str
    stats: dict[str, Any] = field(default_factory=lambda: {})


class PreparationService:
    """Reshape, join, difference and smooth the raw tables.

    Example:
        >>> service = PreparationService(PreparationConfig(regions=("US", "India")))
        >>> result = service.prepare(confirmed_raw, deaths_raw)
    """

    def __init__(self, config: PreparationConfig) -> None:
        """Initialize service with configuration.

        Args:
            config: Preparation configuration.
        """
        self.config = config

    def prepare(self, confirmed_raw: pd.DataFrame, deaths_raw: pd.DataFrame) -> PreparationResult:
        """Run Reshaper, Merger, Aggregator and Smoother in order.

        Args:
            confirmed_raw: RawSeriesTable of cumulative confirmed cases.
            deaths_raw: RawSeriesTable of cumulative deaths.

        Returns:
            PreparationResult with joined and smoothed frames.
        """
        logger.info(
            "preparation.started",
            config_hash=self.config.config_hash(),
            regions=list(self.config.regions),
        )

        cases = reshape_to_long(confirmed_raw, value_name=CUMULATIVE_CASES)
        deaths = reshape_to_long(deaths_raw, value_name=CUMULATIVE_DEATHS)
        joined = merge_metrics(cases, deaths, strict=self.config.strict_join)
        daily = compute_daily_counts(joined, self.config.regions)
        smoothed = add_trailing_average(daily, window=self.config.window)

        stats: dict[str, Any] = {
            "cases_rows": len(cases),
            "deaths_rows": len(deaths),
            "joined_rows": len(joined),
            "output_rows": len(smoothed),
            "regions": sorted(smoothed[REGION].unique().tolist()),
            "start_date": str(smoothed[DATE].min().date()) if not smoothed.empty else None,
            "end_date": str(smoothed[DATE].max().date()) if not smoothed.empty else None,
        }

        logger.info("preparation.completed", **stats)

        return PreparationResult(
            joined=joined,
            daily=smoothed,
            average_column=average_column(DAILY_CASES, self.config.window),
            stats=stats,
        )
