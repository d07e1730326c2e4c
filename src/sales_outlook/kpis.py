from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .backtest import AccuracyEstimator, default_estimator
from .data import SalesRecord
from .errors import InsufficientDataError
from .metrics import mean_defined, percent_change, period_growth_rates
from .pipeline import ForecastPoint

logger = logging.getLogger(__name__)

YEAR = 12


@dataclass(frozen=True)
class KPISummary:
    """Headline metrics for one history/forecast pair.

    Ratios whose denominator is zero or unavailable are NaN: a
    ``revenue_growth_percent`` of NaN means there is no complete prior year
    (or it had no revenue) to compare against.
    """

    current_revenue: float
    prior_year_revenue: float
    forecast_revenue: float
    revenue_growth_percent: float
    forecast_growth_percent: float
    average_monthly_growth_percent: float
    growth_trend: float
    accuracy: float
    accuracy_trend: float


def summarize(
    history: Sequence[SalesRecord],
    forecast_points: Sequence[ForecastPoint],
    estimator: Optional[AccuracyEstimator] = None,
) -> KPISummary:
    if not history:
        raise InsufficientDataError("KPI summary needs at least one period of history")

    current = np.array([record.revenue for record in history[-YEAR:]], dtype=float)
    current_revenue = float(current.sum())
    forecast_revenue = float(sum(point.predicted_revenue for point in forecast_points))

    if len(history) >= 2 * YEAR:
        prior = np.array([record.revenue for record in history[-2 * YEAR : -YEAR]], dtype=float)
        prior_year_revenue = float(prior.sum())
        prior_monthly_growth = mean_defined(period_growth_rates(prior))
    else:
        prior_year_revenue = np.nan
        prior_monthly_growth = np.nan

    revenue_growth = percent_change(current_revenue, prior_year_revenue)
    forecast_growth = percent_change(forecast_revenue, current_revenue)
    monthly_growth = mean_defined(period_growth_rates(current))
    if np.isnan(monthly_growth) or np.isnan(prior_monthly_growth):
        growth_trend = np.nan
    else:
        growth_trend = monthly_growth - prior_monthly_growth

    if np.isnan(revenue_growth):
        logger.warning(f"Year-over-year growth undefined with {len(history)} periods of history")
    if np.isnan(forecast_growth):
        logger.warning("Forecast growth undefined: trailing-year revenue is zero")

    estimate = default_estimator(estimator).estimate(history, forecast_points)

    return KPISummary(
        current_revenue=current_revenue,
        prior_year_revenue=prior_year_revenue,
        forecast_revenue=forecast_revenue,
        revenue_growth_percent=revenue_growth,
        forecast_growth_percent=forecast_growth,
        average_monthly_growth_percent=monthly_growth,
        growth_trend=growth_trend,
        accuracy=estimate.accuracy,
        accuracy_trend=estimate.accuracy_trend,
    )
