"""Unit tests for forecasting schemas."""

import pytest
from pydantic import ValidationError

from epitrend.features.forecasting.schemas import (
    ArimaOrder,
    AutoArimaModelConfig,
    ForecastPoint,
    ForecastResult,
    NaiveModelConfig,
    PredictionInterval,
)


def _result(horizon: int, n_points: int) -> ForecastResult:
    points = [
        ForecastPoint(step=i + 1, point_estimate=10.0, lower_bound=5.0, upper_bound=15.0)
        for i in range(n_points)
    ]
    return ForecastResult(
        region="US",
        order=ArimaOrder(p=1, d=1, q=0),
        trend="t",
        information_criterion="aicc",
        criterion_value=100.0,
        confidence_level=0.95,
        n_observations=50,
        candidates_evaluated=4,
        horizon=horizon,
        points=points,
        config_hash="abc",
    )


class TestAutoArimaModelConfig:
    """Tests for the ARIMA search configuration."""

    def test_defaults(self):
        """Defaults search up to ARIMA(3,2,3) by AICc."""
        config = AutoArimaModelConfig()

        assert (config.max_p, config.max_d, config.max_q) == (3, 2, 3)
        assert config.information_criterion == "aicc"
        assert config.seasonal_period == 365
        assert config.model_type == "auto_arima"

    def test_frozen(self):
        """Configs are immutable."""
        config = AutoArimaModelConfig()

        with pytest.raises(ValidationError):
            config.max_p = 5

    def test_extra_fields_forbidden(self):
        """Unknown fields are rejected."""
        with pytest.raises(ValidationError):
            AutoArimaModelConfig(seasonal=True)

    def test_invalid_kpss_alpha(self):
        """Only tabulated KPSS levels are accepted."""
        with pytest.raises(ValidationError, match="kpss_alpha"):
            AutoArimaModelConfig(kpss_alpha=0.2)

    def test_levels_sorted_and_unique(self):
        """Confidence levels are normalized."""
        config = AutoArimaModelConfig(confidence_levels=(0.95, 0.5, 0.95))

        assert config.confidence_levels == (0.5, 0.95)
        assert config.primary_level == 0.95

    def test_level_out_of_range(self):
        """Levels outside (0, 1) are rejected."""
        with pytest.raises(ValidationError):
            AutoArimaModelConfig(confidence_levels=(1.0,))

    def test_config_hash_deterministic(self):
        """Equal configs hash equally; different configs differ."""
        assert AutoArimaModelConfig().config_hash() == AutoArimaModelConfig().config_hash()
        assert AutoArimaModelConfig().config_hash() != AutoArimaModelConfig(max_p=1).config_hash()
        assert len(AutoArimaModelConfig().config_hash()) == 16

    def test_naive_config_type(self):
        """The naive config is tagged."""
        assert NaiveModelConfig().model_type == "naive"


class TestResultSchemas:
    """Tests for forecast result schemas."""

    def test_order_str(self):
        """Orders print in ARIMA(p,d,q) form."""
        order = ArimaOrder(p=2, d=1, q=0)

        assert str(order) == "ARIMA(2,1,0)"
        assert order.as_tuple() == (2, 1, 0)

    def test_negative_order_rejected(self):
        """Orders are non-negative."""
        with pytest.raises(ValidationError):
            ArimaOrder(p=-1, d=0, q=0)

    def test_interval_width(self):
        """Width is upper minus lower."""
        assert PredictionInterval(level=0.8, lower=2.0, upper=7.5).width == 5.5

    def test_step_is_one_based(self):
        """Step 0 is rejected."""
        with pytest.raises(ValidationError):
            ForecastPoint(step=0, point_estimate=1.0, lower_bound=0.0, upper_bound=2.0)

    def test_point_count_matches_horizon(self):
        """A result with the right number of points validates."""
        assert len(_result(horizon=3, n_points=3).points) == 3

    def test_point_count_mismatch_rejected(self):
        """A result whose points disagree with the horizon is invalid."""
        with pytest.raises(ValidationError, match="Expected 3 points"):
            _result(horizon=3, n_points=2)
