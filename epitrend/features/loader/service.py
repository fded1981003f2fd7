"""Loader for the wide cumulative-count time-series tables.

Fetches a CSV by URL (or reads a local copy) and returns it unchanged as a
RawSeriesTable: one row per region/sub-region, one column per date.
No retries: any failure is fatal to the run.
"""

from __future__ import annotations

import io
from pathlib import Path

import httpx
import pandas as pd

from epitrend.core.config import Settings, get_settings
from epitrend.core.exceptions import FetchError, SchemaError
from epitrend.core.logging import get_logger
from epitrend.features.loader.schemas import REQUIRED_COLUMNS, Dataset

logger = get_logger(__name__)


def resolve_source(dataset: Dataset, settings: Settings | None = None) -> str:
    """Map a dataset identifier to its configured URL.

    Args:
        dataset: Dataset to resolve.
        settings: Settings to read URLs from (defaults to cached settings).

    Returns:
        Source URL for the dataset.
    """
    settings = settings or get_settings()
    if dataset is Dataset.CONFIRMED:
        return settings.confirmed_cases_url
    return settings.deaths_url


def load_raw_table(
    dataset: Dataset,
    settings: Settings | None = None,
    client: httpx.Client | None = None,
) -> pd.DataFrame:
    """Load one of the report datasets as a raw wide table.

    Args:
        dataset: Dataset identifier.
        settings: Settings (defaults to cached settings).
        client: Optional HTTP client, mainly for tests.

    Returns:
        RawSeriesTable as a DataFrame.

    Raises:
        FetchError: If the source is unreachable or not tabular.
        SchemaError: If expected header columns are missing.
    """
    settings = settings or get_settings()
    source = resolve_source(dataset, settings)
    return load_raw_table_from_source(
        source,
        timeout_seconds=settings.fetch_timeout_seconds,
        client=client,
        dataset_name=dataset.value,
    )


def load_raw_table_from_source(
    source: str | Path,
    timeout_seconds: float = 60.0,
    client: httpx.Client | None = None,
    dataset_name: str | None = None,
) -> pd.DataFrame:
    """Load a raw wide table from a URL or a local file path.

    Args:
        source: http(s) URL or local CSV path.
        timeout_seconds: HTTP timeout.
        client: Optional HTTP client, mainly for tests.
        dataset_name: Name used in log events.

    Returns:
        RawSeriesTable as a DataFrame.

    Raises:
        FetchError: If the source is unreachable or not tabular.
        SchemaError: If expected header columns are missing.
    """
    source_str = str(source)
    logger.info("loader.fetch_started", dataset=dataset_name, source=source_str)

    if source_str.startswith(("http://", "https://")):
        text = _fetch_text(source_str, timeout_seconds, client)
        df = _parse_csv(io.StringIO(text), source_str)
    else:
        path = Path(source_str)
        if not path.is_file():
            raise FetchError(
                f"Local source not found: {path}",
                details={"source": source_str},
            )
        df = _parse_csv(path, source_str)

    _validate_header(df, source_str)

    logger.info(
        "loader.fetch_completed",
        dataset=dataset_name,
        rows=len(df),
        columns=len(df.columns),
    )
    return df


def _fetch_text(url: str, timeout_seconds: float, client: httpx.Client | None) -> str:
    """GET a URL and return the response body as text."""
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout_seconds, follow_redirects=True)
    try:
        response = http.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(
            f"Source returned HTTP {e.response.status_code}",
            details={"source": url, "status_code": e.response.status_code},
        ) from e
    except httpx.RequestError as e:
        raise FetchError(
            f"Source unreachable: {e}",
            details={"source": url},
        ) from e
    finally:
        if owns_client:
            http.close()
    return response.text


def _parse_csv(buffer: io.StringIO | Path, source: str) -> pd.DataFrame:
    """Parse CSV content, mapping pandas parser failures to FetchError."""
    try:
        df = pd.read_csv(buffer)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise FetchError(
            f"Source is not a readable table: {e}",
            details={"source": source},
        ) from e
    if df.empty:
        raise FetchError("Source table has no rows", details={"source": source})
    return df


def _validate_header(df: pd.DataFrame, source: str) -> None:
    """Check that the leading geographic columns and some date columns exist."""
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise SchemaError(
            f"Missing expected columns: {missing}",
            details={"source": source, "missing": missing},
        )
    if len(df.columns) <= len(REQUIRED_COLUMNS):
        raise SchemaError(
            "Table has no date columns",
            details={"source": source, "columns": list(df.columns)},
        )
