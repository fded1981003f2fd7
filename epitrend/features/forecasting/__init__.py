"""Forecasting module: automatic ARIMA and the naive baseline.

Exports:
    Models:
        - BaseForecaster: Abstract base class for all forecasters
        - AutoArimaForecaster: Non-seasonal ARIMA with automatic order search
        - NaiveForecaster: Predicts last observed value
        - model_factory: Create forecaster from config
        - to_daily_series: Region frame to daily-frequency series

    Schemas:
        - AutoArimaModelConfig, NaiveModelConfig
        - ForecastResult, ForecastPoint, PredictionInterval, ArimaOrder
        - HoldoutEvaluation, HoldoutScore

    Service:
        - ForecastingService, RegionForecast
"""

from epitrend.features.forecasting.metrics import MetricResult, MetricsCalculator
from epitrend.features.forecasting.models import (
    AutoArimaForecaster,
    BaseForecaster,
    CandidateFit,
    NaiveForecaster,
    model_factory,
    to_daily_series,
)
from epitrend.features.forecasting.schemas import (
    ArimaOrder,
    AutoArimaModelConfig,
    ForecastPoint,
    ForecastResult,
    HoldoutEvaluation,
    HoldoutScore,
    ModelConfig,
    NaiveModelConfig,
    PredictionInterval,
)
from epitrend.features.forecasting.service import (
    ForecastingService,
    RegionForecast,
    arima_config_from_settings,
)

__all__ = [
    "ArimaOrder",
    "AutoArimaForecaster",
    "AutoArimaModelConfig",
    "BaseForecaster",
    "CandidateFit",
    "ForecastPoint",
    "ForecastResult",
    "ForecastingService",
    "HoldoutEvaluation",
    "HoldoutScore",
    "MetricResult",
    "MetricsCalculator",
    "ModelConfig",
    "NaiveForecaster",
    "NaiveModelConfig",
    "PredictionInterval",
    "RegionForecast",
    "arima_config_from_settings",
    "model_factory",
    "to_daily_series",
]
