from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Protocol, Sequence

import numpy as np
import pandas as pd

from .data import SalesRecord
from .errors import InsufficientDataError
from .metrics import wmape
from .pipeline import ForecastConfig, ForecastPoint, forecast

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccuracyEstimate:
    accuracy: float
    accuracy_trend: float


class AccuracyEstimator(Protocol):
    def estimate(
        self, history: Sequence[SalesRecord], forecast_points: Sequence[ForecastPoint]
    ) -> AccuracyEstimate:
        ...


@dataclass(frozen=True)
class ConstantAccuracyEstimator:
    accuracy: float = 90.0
    accuracy_trend: float = 0.0

    def estimate(
        self, history: Sequence[SalesRecord], forecast_points: Sequence[ForecastPoint]
    ) -> AccuracyEstimate:
        return AccuracyEstimate(accuracy=self.accuracy, accuracy_trend=self.accuracy_trend)


@dataclass
class SimulatedAccuracyEstimator:
    """Draws accuracy from U(85, 95) and its trend from U(-2, 4).

    Matches the simulated figures the dashboard used to show. The generator is
    required so no draw comes from an unseeded global source.
    """

    rng: np.random.Generator

    def estimate(
        self, history: Sequence[SalesRecord], forecast_points: Sequence[ForecastPoint]
    ) -> AccuracyEstimate:
        accuracy = 85 + self.rng.random() * 10
        accuracy_trend = self.rng.random() * 6 - 2
        return AccuracyEstimate(accuracy=float(accuracy), accuracy_trend=float(accuracy_trend))


@dataclass
class BacktestAccuracyEstimator:
    """Rolling-origin holdout: refit at every cutoff and score the next ``holdout`` periods."""

    config: ForecastConfig = field(default_factory=ForecastConfig)
    holdout: int = 3
    min_train: int = 6

    def fold_metrics(self, history: Sequence[SalesRecord]) -> pd.DataFrame:
        fold_config = replace(self.config, horizon_periods=self.holdout)
        records: List[dict] = []

        for cutoff in range(max(self.min_train, 2), len(history) - self.holdout + 1):
            train = history[:cutoff]
            actual = np.array(
                [record.revenue for record in history[cutoff : cutoff + self.holdout]], dtype=float
            )
            predicted = np.array(
                [point.predicted_revenue for point in forecast(train, fold_config)], dtype=float
            )
            score = wmape(actual, predicted)
            if np.isnan(score):
                logger.warning(f"Skipping backtest fold at {train[-1].period_label}: actual revenue sums to zero")
            records.append({"cutoff": train[-1].date, "wmape": score})

        return pd.DataFrame.from_records(records, columns=["cutoff", "wmape"])

    def estimate(
        self, history: Sequence[SalesRecord], forecast_points: Sequence[ForecastPoint]
    ) -> AccuracyEstimate:
        metrics = self.fold_metrics(history)
        valid = metrics[metrics["wmape"].notna()]
        if valid.empty:
            raise InsufficientDataError(
                f"Backtest needs at least {max(self.min_train, 2) + self.holdout} periods with revenue, "
                f"got {len(history)}"
            )

        fold_accuracy = np.clip(100.0 * (1.0 - valid["wmape"].to_numpy()), 0.0, 100.0)
        accuracy = float(fold_accuracy.mean())
        if fold_accuracy.size > 1:
            accuracy_trend = float(fold_accuracy[-1] - fold_accuracy[:-1].mean())
        else:
            accuracy_trend = 0.0

        logger.info(f"Backtest accuracy {accuracy:.1f}% over {fold_accuracy.size} folds")
        return AccuracyEstimate(accuracy=accuracy, accuracy_trend=accuracy_trend)


def default_estimator(estimator: Optional[AccuracyEstimator] = None) -> AccuracyEstimator:
    return estimator if estimator is not None else ConstantAccuracyEstimator()
