"""Report entry point.

Sequences the pipeline: fetch -> reshape -> join -> aggregate -> smooth ->
forecast -> render -> print. Configuration comes from the environment
(see epitrend.core.config.Settings); there are no command-line flags.

Usage:
    python -m epitrend.main
"""

from __future__ import annotations

import sys
import time

import httpx

from epitrend.core.config import Settings, get_settings
from epitrend.core.exceptions import EpiTrendError, ModelFitError
from epitrend.core.logging import configure_logging, get_logger, run_context
from epitrend.features.forecasting.schemas import HoldoutEvaluation
from epitrend.features.forecasting.service import ForecastingService
from epitrend.features.loader.schemas import Dataset
from epitrend.features.loader.service import load_raw_table
from epitrend.features.preparation.schemas import PreparationConfig
from epitrend.features.preparation.service import PreparationService
from epitrend.features.reporting.service import ReportResult, ReportService

logger = get_logger(__name__)


def run_report(settings: Settings | None = None, client: httpx.Client | None = None) -> ReportResult:
    """Run the whole pipeline and render the report.

    Args:
        settings: Settings (defaults to cached settings).
        client: Optional HTTP client shared by both fetches.

    Returns:
        Rendered ReportResult.

    Raises:
        EpiTrendError: On any stage failure; the run produces no output.
            A degenerate holdout split is the one exception: it is logged
            and the accuracy section is left out.
    """
    settings = settings or get_settings()
    start_time = time.perf_counter()

    logger.info(
        "report.started",
        app_name=settings.app_name,
        app_env=settings.app_env,
        regions=settings.regions,
        forecast_region=settings.forecast_region,
        horizon=settings.forecast_horizon,
    )

    confirmed_raw = load_raw_table(Dataset.CONFIRMED, settings=settings, client=client)
    deaths_raw = load_raw_table(Dataset.DEATHS, settings=settings, client=client)

    preparation = PreparationService(
        PreparationConfig(
            regions=tuple(settings.regions),
            window=settings.moving_average_window,
        )
    ).prepare(confirmed_raw, deaths_raw)

    forecasting = ForecastingService(settings=settings)
    forecast = forecasting.forecast_region(preparation.daily, settings.forecast_region)
    holdout: HoldoutEvaluation | None = None
    if settings.report_include_holdout:
        try:
            holdout = forecasting.evaluate_holdout(
                forecast.series, region=settings.forecast_region
            )
        except ModelFitError as exc:
            # the forecast itself succeeded; only the accuracy section is dropped
            logger.warning(
                "report.holdout_skipped",
                region=settings.forecast_region,
                error=exc.message,
                details=exc.details,
            )

    report = ReportService(settings).render(preparation, forecast, holdout)

    logger.info(
        "report.completed",
        duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        figures=[str(path) for path in report.figure_paths],
    )
    return report


def main() -> int:
    """Configure logging, run the report and print it.

    Returns:
        Process exit code: 0 on success, 1 if a pipeline stage failed.
    """
    configure_logging()
    with run_context():
        try:
            report = run_report()
        except EpiTrendError as exc:
            logger.error(
                "report.failed",
                error=exc.message,
                error_type=type(exc).__name__,
                error_title=exc.title,
                error_code=exc.code,
                stage=exc.stage,
                details=exc.details,
            )
            return 1

    sys.stdout.write(report.to_text())
    return 0


if __name__ == "__main__":
    sys.exit(main())
