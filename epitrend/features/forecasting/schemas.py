"""Pydantic schemas for forecasting configuration and results.

Model configs are designed to be:
- Immutable (frozen=True) for reproducibility
- Versioned (schema_version)
- Hashable (config_hash) for log correlation
"""

from __future__ import annotations

import hashlib
from datetime import date as date_type
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# statsmodels kpss() critical value keys by significance level
KPSS_CRITICAL_KEYS: dict[float, str] = {0.01: "1%", 0.025: "2.5%", 0.05: "5%", 0.1: "10%"}

# =============================================================================
# Model Configuration Schemas
# =============================================================================


class ModelConfigBase(BaseModel):
    """Base configuration for forecasting models.

    All model configs inherit from this base to ensure:
    - Immutability after creation (frozen=True)
    - No extra fields allowed (extra="forbid")
    - Schema versioning for reproducibility
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    schema_version: str = Field(
        default="1.0",
        description="Semantic version of this config schema",
        pattern=r"^\d+\.\d+(\.\d+)?$",
    )

    def config_hash(self) -> str:
        """Generate deterministic hash of configuration.

        Returns:
            16-character hex string hash of config JSON.
        """
        config_json = self.model_dump_json()
        return hashlib.sha256(config_json.encode()).hexdigest()[:16]


class NaiveModelConfig(ModelConfigBase):
    """Configuration for the naive (last value) baseline.

    Formula: y_hat[t+h] = y[t] for all h
    """

    model_type: Literal["naive"] = "naive"


class AutoArimaModelConfig(ModelConfigBase):
    """Configuration for the automatic non-seasonal ARIMA search.

    The differencing order d is picked by repeated KPSS tests; p and q are
    searched exhaustively over [0, max_p] x [0, max_q] and the candidate with
    the lowest information criterion wins. Stationarity and invertibility are
    enforced on every candidate.

    Attributes:
        max_p: Largest autoregressive order to try.
        max_d: Largest differencing order.
        max_q: Largest moving-average order to try.
        information_criterion: Criterion minimised during the search.
        allow_drift: Include a constant (d=0) or drift (d=1) term.
        kpss_alpha: Significance level of the KPSS unit-root test.
        seasonal_period: Nominal samples per year; seasonality stays disabled.
        min_observations: Shortest series accepted for fitting.
        confidence_levels: Prediction interval levels.
    """

    model_type: Literal["auto_arima"] = "auto_arima"
    max_p: int = Field(default=3, ge=0, le=10)
    max_d: int = Field(default=2, ge=0, le=3)
    max_q: int = Field(default=3, ge=0, le=10)
    information_criterion: Literal["aicc", "aic", "bic"] = "aicc"
    allow_drift: bool = True
    kpss_alpha: float = Field(default=0.05, description="One of 0.01, 0.025, 0.05, 0.1")
    seasonal_period: int = Field(default=365, ge=1)
    min_observations: int = Field(default=10, ge=3)
    confidence_levels: tuple[float, ...] = Field(default=(0.80, 0.95))

    @field_validator("kpss_alpha")
    @classmethod
    def validate_kpss_alpha(cls, v: float) -> float:
        """KPSS critical values are tabulated only at four levels."""
        if v not in KPSS_CRITICAL_KEYS:
            raise ValueError(f"kpss_alpha must be one of {sorted(KPSS_CRITICAL_KEYS)}")
        return v

    @field_validator("confidence_levels")
    @classmethod
    def validate_levels(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        """Ensure levels lie in (0, 1); returns them sorted and unique."""
        if not v:
            raise ValueError("At least one confidence level must be specified")
        if any(not 0.0 < level < 1.0 for level in v):
            raise ValueError("Confidence levels must be in (0, 1)")
        return tuple(sorted(set(v)))

    @property
    def primary_level(self) -> float:
        """Widest configured level, used for lower_bound/upper_bound."""
        return self.confidence_levels[-1]


ModelConfig = NaiveModelConfig | AutoArimaModelConfig


# =============================================================================
# Result Schemas
# =============================================================================


class ArimaOrder(BaseModel):
    """Non-seasonal ARIMA order (p, d, q)."""

    model_config = ConfigDict(frozen=True)

    p: int = Field(..., ge=0)
    d: int = Field(..., ge=0)
    q: int = Field(..., ge=0)

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.p, self.d, self.q)

    def __str__(self) -> str:
        return f"ARIMA({self.p},{self.d},{self.q})"


class PredictionInterval(BaseModel):
    """Two-sided prediction interval at one confidence level."""

    level: float
    lower: float
    upper: float

    @property
    def width(self) -> float:
        return self.upper - self.lower


class ForecastPoint(BaseModel):
    """Single forecast step.

    Attributes:
        step: 1-based step ahead of the last observation.
        date: Calendar date of the step (None for an unindexed series).
        point_estimate: Point forecast.
        lower_bound: Lower bound at the primary confidence level.
        upper_bound: Upper bound at the primary confidence level.
        intervals: Intervals at every configured level, narrowest first.
    """

    step: int = Field(..., ge=1)
    date: date_type | None = None
    point_estimate: float
    lower_bound: float
    upper_bound: float
    intervals: list[PredictionInterval] = Field(default_factory=lambda: [])

    @property
    def interval_width(self) -> float:
        return self.upper_bound - self.lower_bound


class ForecastResult(BaseModel):
    """Forecast for one region over a fixed horizon.

    Attributes:
        region: Region the model was fitted on.
        order: Selected ARIMA order.
        trend: statsmodels trend term of the selected model.
        information_criterion: Name of the criterion used for selection.
        criterion_value: Criterion value of the selected model.
        confidence_level: Level of lower_bound/upper_bound.
        n_observations: Length of the fitted series.
        candidates_evaluated: Number of (p, q) candidates successfully fitted.
        horizon: Number of forecast steps.
        points: Forecast steps in order.
        config_hash: Hash of the model configuration.
    """

    region: str
    order: ArimaOrder
    trend: str
    information_criterion: str
    criterion_value: float
    confidence_level: float
    n_observations: int
    candidates_evaluated: int
    horizon: int
    points: list[ForecastPoint]
    config_hash: str

    @model_validator(mode="after")
    def validate_horizon(self) -> ForecastResult:
        """Number of points must equal the horizon."""
        if len(self.points) != self.horizon:
            raise ValueError(f"Expected {self.horizon} points, got {len(self.points)}")
        return self


class HoldoutScore(BaseModel):
    """Accuracy of one model on the held-out window."""

    model_type: str
    metrics: dict[str, float]
    warnings: list[str] = Field(default_factory=list)


class HoldoutEvaluation(BaseModel):
    """Comparison of the ARIMA model against the naive baseline.

    The last `horizon` observations are held out, both models are fitted on
    the rest, and their forecasts are scored against the held-out values.
    """

    region: str
    horizon: int
    train_end: date_type | None = None
    scores: list[HoldoutScore]
