"""Forecasting models with a unified scikit-learn-style interface.

All forecasters implement a common interface:
- fit(y) -> self
- predict(horizon) -> np.ndarray
- get_params() -> dict
- set_params(**params) -> self

The ARIMA search is deterministic: the same series and config always select
the same order.
"""

from __future__ import annotations

import itertools
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd
from statsmodels.tsa.arima.model import ARIMA
from statsmodels.tsa.stattools import kpss

from epitrend.core.exceptions import ModelFitError
from epitrend.core.logging import get_logger
from epitrend.features.forecasting.schemas import (
    KPSS_CRITICAL_KEYS,
    ArimaOrder,
    AutoArimaModelConfig,
    ForecastPoint,
    ForecastResult,
    ModelConfig,
    NaiveModelConfig,
    PredictionInterval,
)
from epitrend.features.preparation.schemas import DAILY_CASES, DATE, REGION

logger = get_logger(__name__)

SeriesLike = pd.Series | np.ndarray


def to_daily_series(frame: pd.DataFrame, region: str, column: str = DAILY_CASES) -> pd.Series:
    """Extract one region's values as a daily-frequency series.

    Args:
        frame: DailyRecord frame with region and date columns.
        region: Region to extract.
        column: Value column.

    Returns:
        Float series indexed by a DatetimeIndex with freq="D".

    Raises:
        ModelFitError: If the region is absent, dates repeat, or days are missing.
    """
    sub = frame.loc[frame[REGION] == region, [DATE, column]].sort_values(DATE)
    if sub.empty:
        raise ModelFitError(
            f"No observations for region '{region}'",
            details={"region": region},
        )

    series = sub.set_index(DATE)[column].astype("float64")
    if series.index.has_duplicates:
        raise ModelFitError(
            f"Duplicate dates for region '{region}'",
            details={"region": region},
        )

    series = series.asfreq("D")
    n_missing = int(series.isna().sum())
    if n_missing:
        raise ModelFitError(
            f"Series for region '{region}' has {n_missing} missing day(s)",
            details={"region": region, "missing": n_missing},
        )
    series.name = column
    return series


def _as_series(y: SeriesLike) -> pd.Series:
    if isinstance(y, pd.Series):
        return y.astype("float64")
    return pd.Series(np.asarray(y, dtype=np.float64))


def validate_series(y: pd.Series, min_observations: int) -> None:
    """Reject series no model can be fitted on.

    Raises:
        ModelFitError: If the series is empty, has missing values, is shorter
            than min_observations, or is constant.
    """
    n = len(y)
    if n == 0:
        raise ModelFitError("Cannot fit on an empty series")
    if bool(y.isna().all()):
        raise ModelFitError("Cannot fit on an all-missing series", details={"n": n})
    if bool(y.isna().any()):
        raise ModelFitError(
            "Series contains missing values",
            details={"n": n, "missing": int(y.isna().sum())},
        )
    if n < min_observations:
        raise ModelFitError(
            f"Need at least {min_observations} observations, got {n}",
            details={"n": n, "min_observations": min_observations},
        )
    if float(np.ptp(y.to_numpy())) == 0.0:
        raise ModelFitError(
            "Cannot fit on a constant series",
            details={"n": n, "value": float(y.iloc[0])},
        )


def select_differencing_order(values: np.ndarray[Any, Any], max_d: int, alpha: float) -> int:
    """Pick d by differencing until the KPSS test no longer rejects stationarity.

    Args:
        values: Observations.
        max_d: Largest order to return.
        alpha: KPSS significance level.

    Returns:
        Differencing order in [0, max_d].
    """
    critical_key = KPSS_CRITICAL_KEYS[alpha]
    x = np.asarray(values, dtype=np.float64)
    d = 0
    while d < max_d:
        # constant after differencing is trivially level-stationary
        if len(x) < 3 or float(np.ptp(x)) == 0.0:
            break
        with warnings.catch_warnings():
            # p-values outside the lookup table only raise InterpolationWarning
            warnings.simplefilter("ignore")
            statistic, _p_value, _lags, critical = kpss(x, regression="c", nlags="auto")
        if statistic <= critical[critical_key]:
            break
        x = np.diff(x)
        d += 1
    return d


def trend_for(d: int, allow_drift: bool) -> str:
    """statsmodels trend term: constant for d=0, drift for d=1, none above."""
    if not allow_drift:
        return "n"
    if d == 0:
        return "c"
    if d == 1:
        return "t"
    return "n"


@dataclass
class CandidateFit:
    """One evaluated ARIMA candidate."""

    order: ArimaOrder
    trend: str
    criterion_value: float


class BaseForecaster(ABC):
    """Abstract base class for forecasting models.

    Interface follows scikit-learn conventions:
    - fit(y) -> self
    - predict(horizon) -> np.ndarray
    - get_params() -> dict
    - set_params(**params) -> self
    """

    def __init__(self) -> None:
        """Initialize the forecaster."""
        self._is_fitted = False

    @abstractmethod
    def fit(self, y: SeriesLike) -> BaseForecaster:
        """Fit the model on historical data.

        Args:
            y: Target values (1D).

        Returns:
            self (for method chaining).

        Raises:
            ModelFitError: If y is degenerate.
        """

    @abstractmethod
    def predict(self, horizon: int) -> np.ndarray[Any, np.dtype[np.floating[Any]]]:
        """Generate point forecasts for the specified horizon.

        Raises:
            RuntimeError: If model has not been fitted.
        """

    @abstractmethod
    def get_params(self) -> dict[str, Any]:
        """Get model parameters (scikit-learn convention)."""

    @abstractmethod
    def set_params(self, **params: Any) -> BaseForecaster:  # noqa: ANN401
        """Set model parameters (scikit-learn convention)."""

    @property
    def is_fitted(self) -> bool:
        """Check if the model has been fitted.

        Returns:
            True if fit() has been called successfully.
        """
        return self._is_fitted


class NaiveForecaster(BaseForecaster):
    """Naive forecaster: predicts last observed value for all horizons.

    Formula: y_hat[t+h] = y[t] for all h

    Used as the baseline the ARIMA model is scored against.
    """

    def __init__(self) -> None:
        super().__init__()
        self._last_value: float = 0.0

    def fit(self, y: SeriesLike) -> NaiveForecaster:
        """Fit by storing the last observed value.

        Raises:
            ModelFitError: If y is empty or its last value is missing.
        """
        series = _as_series(y)
        if len(series) == 0:
            raise ModelFitError("Cannot fit on an empty series")
        last = float(series.iloc[-1])
        if np.isnan(last):
            raise ModelFitError("Last observation is missing")
        self._last_value = last
        self._is_fitted = True
        return self

    def predict(self, horizon: int) -> np.ndarray[Any, np.dtype[np.floating[Any]]]:
        """Predict last value for all horizons."""
        if not self._is_fitted:
            raise RuntimeError("Model must be fitted before predict")
        return np.full(horizon, self._last_value, dtype=np.float64)

    def get_params(self) -> dict[str, Any]:
        return {}

    def set_params(self, **params: Any) -> NaiveForecaster:  # noqa: ANN401
        for key, value in params.items():
            setattr(self, key, value)
        return self


class AutoArimaForecaster(BaseForecaster):
    """Non-seasonal ARIMA with automatic (p, d, q) selection.

    Fitting:
    1. Validate the series (non-empty, no gaps, long enough, not constant).
    2. Choose d with repeated KPSS tests.
    3. Fit every (p, q) in [0, max_p] x [0, max_q] with stationarity and
       invertibility enforced; keep the lowest information criterion.

    Attributes:
        config: Search configuration.
    """

    def __init__(self, config: AutoArimaModelConfig | None = None) -> None:
        """Initialize the forecaster.

        Args:
            config: Search configuration (defaults to AutoArimaModelConfig()).
        """
        super().__init__()
        self.config = config or AutoArimaModelConfig()
        self._results: Any = None
        self._order: ArimaOrder | None = None
        self._trend: str = "n"
        self._criterion_value: float = float("nan")
        self._n_observations: int = 0
        self.candidates: list[CandidateFit] = []

    def fit(self, y: SeriesLike) -> AutoArimaForecaster:
        """Search orders and keep the best fitted model.

        Args:
            y: Daily observations; a pandas Series with a daily DatetimeIndex
                gives dated forecasts.

        Returns:
            self (for method chaining).

        Raises:
            ModelFitError: If y is degenerate or no candidate can be fitted.
        """
        series = _as_series(y)
        validate_series(series, self.config.min_observations)

        criterion = self.config.information_criterion
        d = select_differencing_order(
            series.to_numpy(), self.config.max_d, self.config.kpss_alpha
        )
        trend = trend_for(d, self.config.allow_drift)

        logger.info(
            "forecasting.search_started",
            n_observations=len(series),
            d=d,
            trend=trend,
            max_p=self.config.max_p,
            max_q=self.config.max_q,
            criterion=criterion,
        )

        best_results: Any = None
        best: CandidateFit | None = None
        candidates: list[CandidateFit] = []

        for p, q in itertools.product(
            range(self.config.max_p + 1), range(self.config.max_q + 1)
        ):
            order = ArimaOrder(p=p, d=d, q=q)
            try:
                results = self._fit_candidate(series, order, trend)
            except (np.linalg.LinAlgError, ValueError) as e:
                logger.debug(
                    "forecasting.candidate_failed",
                    order=str(order),
                    error=str(e),
                    error_type=type(e).__name__,
                )
                continue

            value = float(getattr(results, criterion))
            if not np.isfinite(value):
                logger.debug("forecasting.candidate_non_finite", order=str(order))
                continue

            candidate = CandidateFit(order=order, trend=trend, criterion_value=value)
            candidates.append(candidate)
            if best is None or value < best.criterion_value:
                best, best_results = candidate, results

        if best is None:
            raise ModelFitError(
                "No ARIMA candidate could be fitted",
                details={"d": d, "max_p": self.config.max_p, "max_q": self.config.max_q},
            )

        self.candidates = sorted(candidates, key=lambda c: c.criterion_value)
        self._results = best_results
        self._order = best.order
        self._trend = best.trend
        self._criterion_value = best.criterion_value
        self._n_observations = len(series)
        self._is_fitted = True

        logger.info(
            "forecasting.order_selected",
            order=str(best.order),
            trend=best.trend,
            criterion=criterion,
            criterion_value=round(best.criterion_value, 3),
            candidates_evaluated=len(candidates),
        )
        return self

    @staticmethod
    def _fit_candidate(series: pd.Series, order: ArimaOrder, trend: str) -> Any:  # noqa: ANN401
        model = ARIMA(
            series,
            order=order.as_tuple(),
            trend=trend,
            enforce_stationarity=True,
            enforce_invertibility=True,
        )
        with warnings.catch_warnings():
            # convergence and start-parameter warnings are expected during the search
            warnings.simplefilter("ignore")
            return model.fit()

    def _require_fitted(self) -> None:
        if not self._is_fitted or self._results is None:
            raise RuntimeError("Model must be fitted before predict")

    @property
    def order(self) -> ArimaOrder:
        """Selected (p, d, q)."""
        self._require_fitted()
        if self._order is None:
            raise RuntimeError("Model was not properly fitted")
        return self._order

    def predict(self, horizon: int) -> np.ndarray[Any, np.dtype[np.floating[Any]]]:
        """Point forecasts for the next `horizon` steps."""
        self._require_fitted()
        return np.asarray(self._results.forecast(steps=horizon), dtype=np.float64)

    def forecast(self, horizon: int, region: str = "") -> ForecastResult:
        """Point forecasts with prediction intervals at every configured level.

        Args:
            horizon: Number of steps ahead.
            region: Region label for the result.

        Returns:
            ForecastResult with exactly `horizon` points.
        """
        self._require_fitted()
        if horizon < 1:
            raise ValueError(f"horizon must be >= 1, got {horizon}")

        prediction = self._results.get_forecast(steps=horizon)
        mean = np.asarray(prediction.predicted_mean, dtype=np.float64)
        levels = self.config.confidence_levels
        bounds = {
            level: np.asarray(prediction.conf_int(alpha=1.0 - level), dtype=np.float64)
            for level in levels
        }

        index = prediction.predicted_mean.index
        dates = (
            [ts.date() for ts in index]
            if isinstance(index, pd.DatetimeIndex)
            else [None] * horizon
        )

        points: list[ForecastPoint] = []
        for i in range(horizon):
            intervals = [
                PredictionInterval(
                    level=level,
                    lower=float(bounds[level][i, 0]),
                    upper=float(bounds[level][i, 1]),
                )
                for level in levels
            ]
            primary = intervals[-1]
            points.append(
                ForecastPoint(
                    step=i + 1,
                    date=dates[i],
                    point_estimate=float(mean[i]),
                    lower_bound=primary.lower,
                    upper_bound=primary.upper,
                    intervals=intervals,
                )
            )

        return ForecastResult(
            region=region,
            order=self.order,
            trend=self._trend,
            information_criterion=self.config.information_criterion,
            criterion_value=self._criterion_value,
            confidence_level=self.config.primary_level,
            n_observations=self._n_observations,
            candidates_evaluated=len(self.candidates),
            horizon=horizon,
            points=points,
            config_hash=self.config.config_hash(),
        )

    def summary(self) -> str:
        """statsmodels text summary: order, coefficients and fit statistics."""
        self._require_fitted()
        return str(self._results.summary())

    def get_params(self) -> dict[str, Any]:
        return self.config.model_dump()

    def set_params(self, **params: Any) -> AutoArimaForecaster:  # noqa: ANN401
        """Replace config fields; the model must be refitted afterwards."""
        self.config = AutoArimaModelConfig.model_validate(
            {**self.config.model_dump(), **params}
        )
        self._is_fitted = False
        self._results = None
        return self


def model_factory(config: ModelConfig) -> BaseForecaster:
    """Create a forecaster instance from a configuration.

    Raises:
        ValueError: If model_type is unknown.
    """
    if isinstance(config, AutoArimaModelConfig):
        return AutoArimaForecaster(config)
    if isinstance(config, NaiveModelConfig):
        return NaiveForecaster()
    raise ValueError(f"Unknown model type: {getattr(config, 'model_type', config)}")
