"""Forecasting service for one region's daily case series.

Orchestrates:
- Extracting a gap-free daily series for the region
- Automatic ARIMA order search and fit
- Fixed-horizon forecast with prediction intervals
- Holdout scoring against the naive baseline
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

import pandas as pd

from epitrend.core.config import Settings, get_settings
from epitrend.core.exceptions import ModelFitError
from epitrend.core.logging import get_logger
from epitrend.features.forecasting.metrics import MetricsCalculator
from epitrend.features.forecasting.models import (
    AutoArimaForecaster,
    CandidateFit,
    model_factory,
    to_daily_series,
)
from epitrend.features.forecasting.schemas import (
    AutoArimaModelConfig,
    ForecastResult,
    HoldoutEvaluation,
    HoldoutScore,
    ModelConfig,
    NaiveModelConfig,
)
from epitrend.features.preparation.schemas import DAILY_CASES

logger = get_logger(__name__)


@dataclass
class RegionForecast:
    """Fitted model output for one region.

    Attributes:
        series: Daily series the model was fitted on.
        result: Forecast with intervals.
        model_summary: statsmodels text summary of the selected model.
        candidates: Evaluated candidates, best first.
        duration_ms: Search, fit and forecast time.
    """

    series: pd.Series
    result: ForecastResult
    model_summary: str
    candidates: list[CandidateFit] = field(default_factory=lambda: [])
    duration_ms: float = 0.0


def arima_config_from_settings(settings: Settings) -> AutoArimaModelConfig:
    """Build the ARIMA search configuration from application settings."""
    return AutoArimaModelConfig(
        max_p=settings.arima_max_p,
        max_d=settings.arima_max_d,
        max_q=settings.arima_max_q,
        information_criterion=settings.arima_information_criterion,
        seasonal_period=settings.forecast_seasonal_period,
        min_observations=settings.forecast_min_observations,
        confidence_levels=tuple(settings.forecast_confidence_levels),
    )


class ForecastingService:
    """Service for fitting and forecasting a region's daily cases.

    Example:
        >>> service = ForecastingService()
        >>> forecast = service.forecast_region(daily_frame, "US")
        >>> forecast.result.order
    """

    def __init__(
        self,
        config: AutoArimaModelConfig | None = None,
        horizon: int | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the forecasting service.

        Args:
            config: ARIMA search config (defaults to one built from settings).
            horizon: Forecast horizon (defaults to settings.forecast_horizon).
            settings: Settings (defaults to cached settings).
        """
        self.settings = settings or get_settings()
        self.config = config or arima_config_from_settings(self.settings)
        self.horizon = horizon or self.settings.forecast_horizon

    def forecast_region(
        self,
        frame: pd.DataFrame,
        region: str,
        column: str = DAILY_CASES,
    ) -> RegionForecast:
        """Fit an ARIMA model on one region and forecast the horizon.

        Args:
            frame: DailyRecord frame.
            region: Region to model.
            column: Value column to model.

        Returns:
            RegionForecast with result and model summary.

        Raises:
            ModelFitError: If the series is degenerate or no model fits.
        """
        start_time = time.perf_counter()

        logger.info(
            "forecasting.region_started",
            region=region,
            horizon=self.horizon,
            config_hash=self.config.config_hash(),
        )

        series = to_daily_series(frame, region, column)
        model = AutoArimaForecaster(self.config)
        model.fit(series)
        result = model.forecast(self.horizon, region=region)

        duration_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "forecasting.region_completed",
            region=region,
            order=str(result.order),
            n_observations=result.n_observations,
            horizon=result.horizon,
            duration_ms=round(duration_ms, 2),
        )

        return RegionForecast(
            series=series,
            result=result,
            model_summary=model.summary(),
            candidates=list(model.candidates),
            duration_ms=duration_ms,
        )

    def evaluate_holdout(self, series: pd.Series, region: str = "") -> HoldoutEvaluation:
        """Score ARIMA and the naive baseline on the last `horizon` days.

        Args:
            series: Daily series (as returned by to_daily_series).
            region: Region label for the result.

        Returns:
            HoldoutEvaluation with one score per model.

        Raises:
            ModelFitError: If the training part is too short or degenerate.
        """
        if len(series) <= self.horizon:
            raise ModelFitError(
                f"Need more than {self.horizon} observations for a holdout, got {len(series)}",
                details={"region": region, "n": len(series)},
            )

        train = series.iloc[: -self.horizon]
        actuals = series.iloc[-self.horizon :].to_numpy(dtype="float64")
        calculator = MetricsCalculator()

        configs: list[ModelConfig] = [self.config, NaiveModelConfig()]
        scores: list[HoldoutScore] = []
        for config in configs:
            model = model_factory(config)
            model.fit(train)
            predictions = model.predict(self.horizon)
            results = calculator.calculate_results(actuals, predictions)
            scores.append(
                HoldoutScore(
                    model_type=config.model_type,
                    metrics={name: result.value for name, result in results.items()},
                    warnings=[
                        f"{name}: {note}"
                        for name, result in results.items()
                        for note in result.warnings
                    ],
                )
            )

        train_end = train.index[-1]
        evaluation = HoldoutEvaluation(
            region=region,
            horizon=self.horizon,
            train_end=train_end.date() if isinstance(train_end, pd.Timestamp) else None,
            scores=scores,
        )

        logger.info(
            "forecasting.holdout_completed",
            region=region,
            horizon=self.horizon,
            scores={s.model_type: round(s.metrics["mae"], 3) for s in scores},
        )
        return evaluation
