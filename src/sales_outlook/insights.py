from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np

from .data import SalesRecord
from .errors import InvalidConfigError
from .kpis import KPISummary
from .pipeline import ForecastPoint, recent_window

logger = logging.getLogger(__name__)

STRONG_GROWTH_PERCENT = 10.0
WINTER_PREMIUM = 1.15
HIGH_ACCURACY_PERCENT = 90.0
SUMMER_MONTHS = frozenset({6, 7, 8})
WINTER_MONTHS = frozenset({12, 1, 2})


class InsightKind(str, Enum):
    POSITIVE = "positive"
    WARNING = "warning"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Insight:
    kind: InsightKind
    title: str
    description: str
    recommended_action: Optional[str] = None


def _growth_insight(kpis: KPISummary) -> Optional[Insight]:
    growth = kpis.revenue_growth_percent
    if growth > STRONG_GROWTH_PERCENT:
        return Insight(
            kind=InsightKind.POSITIVE,
            title="Strong Growth Trajectory",
            description=(
                f"Revenue has grown {growth:.1f}% compared to last year, "
                "indicating strong market performance."
            ),
            recommended_action="Consider expanding inventory and marketing efforts to capitalize on growth momentum.",
        )
    if growth < 0:
        return Insight(
            kind=InsightKind.WARNING,
            title="Revenue Decline",
            description=f"Revenue has decreased by {abs(growth):.1f}% compared to last year.",
            recommended_action="Review market conditions, pricing strategy, and competitive positioning.",
        )
    return None


def _seasonal_insight(window: Sequence[SalesRecord], reference_month: int) -> Optional[Insight]:
    summer: List[float] = []
    winter: List[float] = []
    for offset, record in enumerate(window):
        month = (offset + reference_month - 1) % 12 + 1
        if month in SUMMER_MONTHS:
            summer.append(record.revenue)
        elif month in WINTER_MONTHS:
            winter.append(record.revenue)

    if not summer or not winter:
        return None

    summer_avg = float(np.mean(summer))
    winter_avg = float(np.mean(winter))
    logger.debug(f"Seasonal averages: summer={summer_avg:.0f}, winter={winter_avg:.0f}")
    if winter_avg > summer_avg * WINTER_PREMIUM:
        return Insight(
            kind=InsightKind.NEUTRAL,
            title="Seasonal Pattern Detected",
            description="Sales show consistent seasonal variation with stronger winter performance.",
            recommended_action="Plan inventory and staffing adjustments for seasonal fluctuations.",
        )
    return None


def _accuracy_insight(kpis: KPISummary) -> Optional[Insight]:
    if kpis.accuracy > HIGH_ACCURACY_PERCENT:
        return Insight(
            kind=InsightKind.POSITIVE,
            title="High Forecast Reliability",
            description=(
                f"Model accuracy is {kpis.accuracy:.1f}%, "
                "indicating reliable predictions for business planning."
            ),
        )
    return None


def generate_insights(
    history: Sequence[SalesRecord],
    forecast_points: Sequence[ForecastPoint],
    kpis: KPISummary,
    reference_month: Optional[int] = None,
) -> List[Insight]:
    """Evaluate the growth, seasonality and accuracy rules in that order.

    ``reference_month`` (1-12) is the calendar month assigned to the first
    period of the trailing-year window when bucketing summer and winter. It
    defaults to that period's own month. NaN KPIs never trigger a rule.
    """
    window = recent_window(history)
    if reference_month is None:
        reference_month = window[0].date.month if window else 1
    if not 1 <= reference_month <= 12:
        raise InvalidConfigError(f"reference_month must be between 1 and 12, got {reference_month}")

    candidates = (
        _growth_insight(kpis),
        _seasonal_insight(window, reference_month),
        _accuracy_insight(kpis),
    )
    insights = [insight for insight in candidates if insight is not None]
    logger.info(f"Generated {len(insights)} insights")
    return insights
