"""
Tests for the accuracy estimators.
"""
import numpy as np
import pytest

from conftest import make_history
from sales_outlook.backtest import (
    BacktestAccuracyEstimator,
    ConstantAccuracyEstimator,
    SimulatedAccuracyEstimator,
)
from sales_outlook.errors import InsufficientDataError
from sales_outlook.metrics import wmape
from sales_outlook.models import ForecastMethod
from sales_outlook.pipeline import ForecastConfig


class TestBacktestAccuracyEstimator:
    def test_fold_count(self, linear_history):
        estimator = BacktestAccuracyEstimator(holdout=3, min_train=6)
        metrics = estimator.fold_metrics(linear_history)

        # cutoffs 6, 7, 8 and 9
        assert len(metrics) == 4
        assert list(metrics.columns) == ["cutoff", "wmape"]

    def test_perfect_linear_series(self, linear_history):
        config = ForecastConfig(use_seasonality=False)
        estimate = BacktestAccuracyEstimator(config=config).estimate(linear_history, [])

        assert estimate.accuracy == pytest.approx(100.0)
        assert estimate.accuracy_trend == pytest.approx(0.0)

    def test_noisy_series_is_scored_below_perfect(self, noisy_history):
        config = ForecastConfig(method=ForecastMethod.MOVING_AVERAGE)
        estimate = BacktestAccuracyEstimator(config=config).estimate(noisy_history, [])

        assert 0.0 <= estimate.accuracy < 100.0

    def test_too_short_for_one_fold(self):
        with pytest.raises(InsufficientDataError):
            BacktestAccuracyEstimator(holdout=3, min_train=6).estimate(make_history([100] * 8), [])

    def test_zero_revenue_folds_are_skipped(self):
        with pytest.raises(InsufficientDataError):
            BacktestAccuracyEstimator().estimate(make_history([0] * 12), [])

    def test_deterministic(self, noisy_history):
        estimator = BacktestAccuracyEstimator()
        assert estimator.estimate(noisy_history, []) == estimator.estimate(noisy_history, [])


class TestSimpleEstimators:
    def test_constant(self):
        estimate = ConstantAccuracyEstimator().estimate([], [])
        assert (estimate.accuracy, estimate.accuracy_trend) == (90.0, 0.0)

    def test_simulated_ranges(self):
        estimator = SimulatedAccuracyEstimator(np.random.default_rng(11))
        for _ in range(50):
            estimate = estimator.estimate([], [])
            assert 85.0 <= estimate.accuracy <= 95.0
            assert -2.0 <= estimate.accuracy_trend <= 4.0

    def test_simulated_requires_generator(self):
        with pytest.raises(TypeError):
            SimulatedAccuracyEstimator()


class TestWmape:
    def test_basic(self):
        assert wmape([100, 200], [110, 180]) == pytest.approx(30 / 300)

    def test_zero_actuals(self):
        assert np.isnan(wmape([0, 0], [1, 2]))
