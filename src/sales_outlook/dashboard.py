from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .backtest import AccuracyEstimator
from .data import SalesRecord
from .insights import Insight, generate_insights
from .kpis import KPISummary, summarize
from .pipeline import ForecastConfig, ForecastPoint, forecast, validate_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardResult:
    forecast: List[ForecastPoint]
    kpis: KPISummary
    insights: List[Insight]


def build_dashboard(
    history: Sequence[SalesRecord],
    config: ForecastConfig,
    estimator: Optional[AccuracyEstimator] = None,
    reference_month: Optional[int] = None,
) -> DashboardResult:
    validate_config(config)
    logger.info(
        f"Building dashboard from {len(history)} periods: method={config.method.value}, "
        f"horizon={config.horizon_periods}, trend_strength={config.trend_strength}"
    )

    points = forecast(history, config)
    kpis = summarize(history, points, estimator)
    insights = generate_insights(history, points, kpis, reference_month=reference_month)
    return DashboardResult(forecast=points, kpis=kpis, insights=insights)
