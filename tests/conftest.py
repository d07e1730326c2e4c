"""
Pytest fixtures and series builders for the forecasting tests.
"""
from datetime import date
from typing import Iterable, List

import pytest
from dateutil.relativedelta import relativedelta

from sales_outlook.data import SalesRecord
from sales_outlook.pipeline import ForecastConfig


def make_history(revenues: Iterable[float], start: date = date(2023, 1, 1)) -> List[SalesRecord]:
    """
    Build consecutive monthly records from a list of revenues.

    Args:
        revenues: Revenue per month, oldest first
        start: First day of the first month

    Returns:
        List of SalesRecord with units derived as revenue / 100
    """
    return [
        SalesRecord(
            date=start + relativedelta(months=index),
            revenue=float(revenue),
            units=int(revenue // 100),
        )
        for index, revenue in enumerate(revenues)
    ]


def yearly_history(prior_year_total: float, current_year_total: float) -> List[SalesRecord]:
    """Two flat years whose sums are exactly the given totals."""
    return make_history([prior_year_total / 12] * 12 + [current_year_total / 12] * 12)


@pytest.fixture
def linear_history():
    """12 months of revenue = 1000 + 500 * index."""
    return make_history([1000 + 500 * i for i in range(12)])


@pytest.fixture
def noisy_history():
    """24 months with trend, a winter bump and some irregular noise."""
    revenues = [
        52000, 50500, 47800, 46100, 44900, 43800,
        44700, 45300, 47900, 51200, 55600, 58900,
        56400, 54800, 51500, 49900, 48300, 47600,
        48800, 49500, 52300, 55900, 60100, 63800,
    ]
    return make_history(revenues)


@pytest.fixture
def default_config():
    return ForecastConfig(horizon_periods=6, use_seasonality=False, trend_strength=1.0)
