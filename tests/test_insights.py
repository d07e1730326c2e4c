"""
Tests for generate_insights().

These tests verify:
1. Growth rule thresholds and wording
2. Seasonal bucketing relative to an explicit reference month
3. Accuracy rule threshold
4. Fixed rule order and NaN handling
"""
import math
from dataclasses import replace

import pytest

from conftest import make_history, yearly_history
from sales_outlook.backtest import ConstantAccuracyEstimator
from sales_outlook.errors import InvalidConfigError
from sales_outlook.insights import InsightKind, generate_insights
from sales_outlook.kpis import KPISummary, summarize


def make_kpis(**overrides) -> KPISummary:
    values = dict(
        current_revenue=120000.0,
        prior_year_revenue=120000.0,
        forecast_revenue=60000.0,
        revenue_growth_percent=5.0,
        forecast_growth_percent=-50.0,
        average_monthly_growth_percent=0.0,
        growth_trend=0.0,
        accuracy=90.0,
        accuracy_trend=0.0,
    )
    values.update(overrides)
    return KPISummary(**values)


def winter_heavy_year():
    """Jan-Dec 2023 where January, February and December sell 30% more."""
    return make_history([130, 130, 100, 100, 100, 100, 100, 100, 100, 100, 100, 130])


class TestGrowthRule:
    def test_fifteen_percent_growth(self):
        history = yearly_history(100000, 115000)
        kpis = summarize(history, [])
        insights = generate_insights(history, [], kpis)

        growth = [i for i in insights if i.title in ("Strong Growth Trajectory", "Revenue Decline")]
        assert len(growth) == 1
        assert growth[0].kind is InsightKind.POSITIVE
        assert growth[0].title == "Strong Growth Trajectory"
        assert "15.0%" in growth[0].description
        assert "inventory" in growth[0].recommended_action

    def test_five_percent_decline(self):
        history = yearly_history(100000, 95000)
        kpis = summarize(history, [])
        insights = generate_insights(history, [], kpis)

        growth = [i for i in insights if i.title in ("Strong Growth Trajectory", "Revenue Decline")]
        assert len(growth) == 1
        assert growth[0].kind is InsightKind.WARNING
        assert growth[0].title == "Revenue Decline"
        assert "decreased by 5.0%" in growth[0].description
        assert growth[0].recommended_action is not None

    @pytest.mark.parametrize("growth", [0.0, 5.0, 10.0])
    def test_moderate_growth_is_quiet(self, growth):
        history = make_history([100] * 12)
        insights = generate_insights(history, [], make_kpis(revenue_growth_percent=growth))
        assert insights == []

    def test_undefined_growth_is_quiet(self):
        history = make_history([100] * 12)
        insights = generate_insights(history, [], make_kpis(revenue_growth_percent=math.nan))
        assert insights == []


class TestSeasonalRule:
    def test_winter_premium_detected(self):
        insights = generate_insights(winter_heavy_year(), [], make_kpis())

        assert len(insights) == 1
        assert insights[0].kind is InsightKind.NEUTRAL
        assert insights[0].title == "Seasonal Pattern Detected"
        assert "staffing" in insights[0].recommended_action

    def test_reference_month_shifts_buckets(self):
        # Starting the window in April puts Sep-Nov in winter and Mar-May in summer.
        insights = generate_insights(winter_heavy_year(), [], make_kpis(), reference_month=4)
        assert insights == []

    def test_explicit_reference_matching_data_months(self):
        explicit = generate_insights(winter_heavy_year(), [], make_kpis(), reference_month=1)
        implicit = generate_insights(winter_heavy_year(), [], make_kpis())
        assert explicit == implicit

    def test_premium_below_threshold(self):
        history = make_history([110, 110, 100, 100, 100, 100, 100, 100, 100, 100, 100, 110])
        assert generate_insights(history, [], make_kpis()) == []

    def test_missing_bucket(self):
        # March through July only: no winter months in the window
        history = make_history([100, 100, 100, 100, 100])
        assert generate_insights(history, [], make_kpis(), reference_month=3) == []

    @pytest.mark.parametrize("month", [0, 13])
    def test_invalid_reference_month(self, month):
        with pytest.raises(InvalidConfigError):
            generate_insights(winter_heavy_year(), [], make_kpis(), reference_month=month)


class TestAccuracyRule:
    def test_high_accuracy(self):
        history = make_history([100] * 12)
        insights = generate_insights(history, [], make_kpis(accuracy=92.5))

        assert len(insights) == 1
        assert insights[0].kind is InsightKind.POSITIVE
        assert insights[0].title == "High Forecast Reliability"
        assert "92.5%" in insights[0].description
        assert insights[0].recommended_action is None

    def test_threshold_is_exclusive(self):
        history = make_history([100] * 12)
        assert generate_insights(history, [], make_kpis(accuracy=90.0)) == []

    def test_estimator_drives_rule(self):
        history = yearly_history(100000, 104000)
        kpis = summarize(history, [], ConstantAccuracyEstimator(accuracy=97.0))
        titles = [insight.title for insight in generate_insights(history, [], kpis)]
        assert titles == ["High Forecast Reliability"]


class TestRuleOrder:
    def test_growth_then_seasonal_then_accuracy(self):
        kpis = make_kpis(revenue_growth_percent=25.0, accuracy=95.0)
        insights = generate_insights(winter_heavy_year(), [], kpis)

        assert [insight.title for insight in insights] == [
            "Strong Growth Trajectory",
            "Seasonal Pattern Detected",
            "High Forecast Reliability",
        ]

    def test_identical_inputs_identical_outputs(self):
        kpis = replace(make_kpis(), revenue_growth_percent=-12.0)
        assert generate_insights(winter_heavy_year(), [], kpis) == generate_insights(
            winter_heavy_year(), [], kpis
        )
