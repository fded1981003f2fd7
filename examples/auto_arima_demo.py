"""Example: automatic ARIMA search on a synthetic daily case series.

Builds a noisy growing series, lets the AutoArimaForecaster pick (p, d, q)
and prints the selected model, the candidate ranking, a 14-day forecast with
intervals and a holdout comparison against the naive baseline.

Usage:
    python examples/auto_arima_demo.py
"""

import numpy as np
import pandas as pd

from epitrend.features.forecasting.models import AutoArimaForecaster
from epitrend.features.forecasting.schemas import AutoArimaModelConfig
from epitrend.features.forecasting.service import ForecastingService


def main():
    # 1. Create sample data (90 days of Poisson counts on a rising trend)
    rng = np.random.default_rng(42)
    index = pd.date_range(start="2020-06-01", periods=90, freq="D")
    y = pd.Series(rng.poisson(np.linspace(50, 400, 90)).astype(float), index=index)
    print(f"Training data: {len(y)} observations ({index[0].date()} to {index[-1].date()})")

    # 2. Configure and fit
    config = AutoArimaModelConfig(max_p=2, max_q=2)
    model = AutoArimaForecaster(config).fit(y)
    print(f"\nSelected: {model.order} ({config.information_criterion})")
    print("Candidates (best first):")
    for candidate in model.candidates[:5]:
        print(f"  {candidate.order}  trend={candidate.trend}  {candidate.criterion_value:.2f}")

    # 3. Forecast with intervals
    result = model.forecast(horizon=14, region="demo")
    print(f"\n14-day forecast ({int(result.confidence_level * 100)}% interval):")
    for point in result.points:
        print(
            f"  {point.date}: {point.point_estimate:8.1f}"
            f"  [{point.lower_bound:8.1f}, {point.upper_bound:8.1f}]"
        )

    # 4. Holdout comparison
    evaluation = ForecastingService(config=config, horizon=14).evaluate_holdout(y, region="demo")
    print(f"\nHoldout (train end {evaluation.train_end}):")
    for score in evaluation.scores:
        print(f"  {score.model_type:>10}: MAE={score.metrics['mae']:.1f}")


if __name__ == "__main__":
    main()
