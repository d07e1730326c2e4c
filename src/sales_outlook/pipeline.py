from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List, Sequence

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta

from .data import SalesRecord
from .errors import InsufficientDataError, InvalidConfigError
from .metrics import round_half_up, standard_deviation
from .models import ForecastMethod, fit_forecaster

logger = logging.getLogger(__name__)

RECENT_WINDOW = 12
MIN_HORIZON = 3
MAX_HORIZON = 24
MIN_TREND_STRENGTH = 0.1
MAX_TREND_STRENGTH = 2.0
CONFIDENCE_WIDENING = 0.1


@dataclass(frozen=True)
class ForecastConfig:
    horizon_periods: int = 6
    use_seasonality: bool = True
    trend_strength: float = 1.0
    method: ForecastMethod = ForecastMethod.LINEAR_REGRESSION

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", ForecastMethod.parse(self.method))


@dataclass(frozen=True)
class ForecastPoint:
    date: date
    predicted_revenue: float
    confidence_lower: float
    confidence_upper: float


def validate_config(config: ForecastConfig) -> ForecastConfig:
    """Reject parameters outside the ranges the dashboard exposes."""
    if not MIN_HORIZON <= config.horizon_periods <= MAX_HORIZON:
        raise InvalidConfigError(
            f"horizon_periods must be between {MIN_HORIZON} and {MAX_HORIZON}, got {config.horizon_periods}"
        )
    if not MIN_TREND_STRENGTH <= config.trend_strength <= MAX_TREND_STRENGTH:
        raise InvalidConfigError(
            f"trend_strength must be between {MIN_TREND_STRENGTH} and {MAX_TREND_STRENGTH}, "
            f"got {config.trend_strength}"
        )
    return config


def recent_window(history: Sequence[SalesRecord]) -> Sequence[SalesRecord]:
    return history[-RECENT_WINDOW:]


def forecast(history: Sequence[SalesRecord], config: ForecastConfig) -> List[ForecastPoint]:
    """Project revenue ``config.horizon_periods`` months past the end of ``history``.

    The selected method is fitted on the trailing twelve periods. Each raw
    prediction is pulled toward (or pushed away from) the last observed revenue
    by ``trend_strength``, and the symmetric confidence band is the window's
    standard deviation widened by 10% per period ahead.
    """
    if len(history) < 2:
        raise InsufficientDataError(f"Forecasting needs at least 2 periods of history, got {len(history)}")
    horizon = config.horizon_periods
    if isinstance(horizon, bool) or not isinstance(horizon, (int, np.integer)) or horizon < 1:
        raise InvalidConfigError(f"horizon_periods must be a positive integer, got {horizon!r}")

    window = recent_window(history)
    revenues = np.array([record.revenue for record in window], dtype=float)
    last_value = revenues[-1]
    last_date = window[-1].date
    spread = standard_deviation(revenues)

    logger.debug(
        f"Forecasting {horizon} periods with {config.method.value} over a {len(window)}-period window"
    )

    model = fit_forecaster(config.method, revenues, config.use_seasonality)
    points: List[ForecastPoint] = []
    for step in range(1, horizon + 1):
        predicted = model.predict(step)
        predicted = last_value + (predicted - last_value) * config.trend_strength
        half_width = spread * (1 + (step - 1) * CONFIDENCE_WIDENING)
        points.append(
            ForecastPoint(
                date=last_date + relativedelta(months=step),
                predicted_revenue=round_half_up(predicted),
                confidence_lower=round_half_up(predicted - half_width),
                confidence_upper=round_half_up(predicted + half_width),
            )
        )
    return points


def forecast_to_frame(points: Sequence[ForecastPoint]) -> pd.DataFrame:
    records = [
        {
            "ds": pd.Timestamp(point.date),
            "predicted_revenue": point.predicted_revenue,
            "confidence_lower": point.confidence_lower,
            "confidence_upper": point.confidence_upper,
        }
        for point in points
    ]
    return pd.DataFrame.from_records(
        records, columns=["ds", "predicted_revenue", "confidence_lower", "confidence_upper"]
    )
