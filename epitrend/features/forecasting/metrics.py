"""Point-forecast accuracy on a held-out window of daily counts.

Reported for every holdout:
- mae: mean absolute error, in cases per day
- smape: symmetric percentage error on a 0-200 scale
- wape: total absolute error as a percentage of total actual cases
- bias: mean(actual - forecast); positive means the model under-forecasts

CRITICAL: Empty windows give NaN and zero-case windows never divide by zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

FloatArray = np.ndarray[Any, np.dtype[np.floating[Any]]]


@dataclass
class MetricResult:
    """One metric over one window.

    Attributes:
        name: Metric key (mae, smape, wape, bias).
        value: Metric value; NaN when the window is empty.
        n_samples: Window length.
        warnings: Notes about degenerate inputs, shown under the holdout table.
    """

    name: str
    value: float
    n_samples: int
    warnings: list[str] = field(default_factory=lambda: [])


class MetricsCalculator:
    """Holdout accuracy metrics for the ARIMA model and its naive baseline."""

    @staticmethod
    def mae(actuals: FloatArray, predictions: FloatArray) -> MetricResult:
        """Mean Absolute Error: mean(|A - F|).

        Raises:
            ValueError: If arrays have different lengths.
        """
        if len(actuals) == 0:
            return MetricResult(name="mae", value=np.nan, n_samples=0, warnings=["Empty array"])
        if len(actuals) != len(predictions):
            raise ValueError(
                f"Length mismatch: actuals={len(actuals)}, predictions={len(predictions)}"
            )

        return MetricResult(
            name="mae",
            value=float(np.abs(actuals - predictions).mean()),
            n_samples=len(actuals),
        )

    @staticmethod
    def smape(actuals: FloatArray, predictions: FloatArray) -> MetricResult:
        """Symmetric MAPE: 100/n * sum(2|A - F| / (|A| + |F|)).

        Days where both actual and forecast are zero count as exact.

        Raises:
            ValueError: If arrays have different lengths.
        """
        if len(actuals) == 0:
            return MetricResult(name="smape", value=np.nan, n_samples=0, warnings=["Empty array"])
        if len(actuals) != len(predictions):
            raise ValueError(
                f"Length mismatch: actuals={len(actuals)}, predictions={len(predictions)}"
            )

        scale = np.abs(actuals) + np.abs(predictions)
        safe_scale = np.where(scale == 0, 1.0, scale)
        ratios = np.where(scale == 0, 0.0, 2.0 * np.abs(actuals - predictions) / safe_scale)

        notes = []
        zero_days = int(np.count_nonzero((actuals == 0) | (predictions == 0)))
        if zero_days:
            notes.append(f"{zero_days} day(s) with a zero actual or forecast")

        return MetricResult(
            name="smape",
            value=float(100.0 * ratios.mean()),
            n_samples=len(actuals),
            warnings=notes,
        )

    @staticmethod
    def wape(actuals: FloatArray, predictions: FloatArray) -> MetricResult:
        """Weighted APE: sum(|A - F|) / sum(|A|) * 100; inf when no cases occurred.

        Raises:
            ValueError: If arrays have different lengths.
        """
        if len(actuals) == 0:
            return MetricResult(name="wape", value=np.nan, n_samples=0, warnings=["Empty array"])
        if len(actuals) != len(predictions):
            raise ValueError(
                f"Length mismatch: actuals={len(actuals)}, predictions={len(predictions)}"
            )

        total = float(np.abs(actuals).sum())
        if total == 0:
            return MetricResult(
                name="wape",
                value=float("inf"),
                n_samples=len(actuals),
                warnings=["no cases in the held-out window; WAPE undefined"],
            )
        return MetricResult(
            name="wape",
            value=100.0 * float(np.abs(actuals - predictions).sum()) / total,
            n_samples=len(actuals),
        )

    @staticmethod
    def bias(actuals: FloatArray, predictions: FloatArray) -> MetricResult:
        """Forecast bias: mean(A - F).

        Raises:
            ValueError: If arrays have different lengths.
        """
        if len(actuals) == 0:
            return MetricResult(name="bias", value=np.nan, n_samples=0, warnings=["Empty array"])
        if len(actuals) != len(predictions):
            raise ValueError(
                f"Length mismatch: actuals={len(actuals)}, predictions={len(predictions)}"
            )

        return MetricResult(
            name="bias",
            value=float((actuals - predictions).mean()),
            n_samples=len(actuals),
        )

    def calculate_results(
        self, actuals: FloatArray, predictions: FloatArray
    ) -> dict[str, MetricResult]:
        """Score one window with every metric, keeping warnings.

        Returns:
            Metric name to MetricResult, in report order.
        """
        return {
            "mae": self.mae(actuals, predictions),
            "smape": self.smape(actuals, predictions),
            "wape": self.wape(actuals, predictions),
            "bias": self.bias(actuals, predictions),
        }

    def calculate_all(self, actuals: FloatArray, predictions: FloatArray) -> dict[str, float]:
        """Score one window with every metric.

        Returns:
            Metric name to value, in report order.
        """
        return {
            name: result.value
            for name, result in self.calculate_results(actuals, predictions).items()
        }
