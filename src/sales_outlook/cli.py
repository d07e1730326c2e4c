from __future__ import annotations

import argparse
import logging
import math
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from .backtest import AccuracyEstimator, BacktestAccuracyEstimator, ConstantAccuracyEstimator
from .dashboard import DashboardResult, build_dashboard
from .data import DatasetSummary, generate_sample_data, load_sales_data, sample_csv, summarize_dataset
from .errors import SalesOutlookError
from .kpis import KPISummary
from .models import ForecastMethod
from .pipeline import ForecastConfig, forecast_to_frame

logger = logging.getLogger(__name__)


def format_percent(value: float) -> str:
    if value is None or math.isnan(value):
        return "n/a"
    return f"{value:+.1f}%"


def summarize_dataset_text(summary: DatasetSummary) -> str:
    return "\n".join(
        [
            "Dataset:",
            f"  records:       {summary.record_count}",
            f"  range:         {summary.start} .. {summary.end}",
            f"  total revenue: {summary.total_revenue:,.0f}",
            f"  total units:   {summary.total_units:,}",
        ]
    )


def summarize_kpis(kpis: KPISummary) -> str:
    lines = [
        "KPIs:",
        f"  current revenue (12 mo):  {kpis.current_revenue:,.0f}",
        f"  forecast revenue:         {kpis.forecast_revenue:,.0f}",
        f"  revenue growth (YoY):     {format_percent(kpis.revenue_growth_percent)}",
        f"  forecast growth:          {format_percent(kpis.forecast_growth_percent)}",
        f"  avg monthly growth:       {format_percent(kpis.average_monthly_growth_percent)}",
        f"  growth trend:             {format_percent(kpis.growth_trend)}",
        f"  forecast accuracy:        {kpis.accuracy:.1f}% ({format_percent(kpis.accuracy_trend)})",
    ]
    return "\n".join(lines)


def summarize_insights(result: DashboardResult) -> str:
    if not result.insights:
        return "Insights:\n  No notable findings."

    lines: List[str] = ["Insights:"]
    for insight in result.insights:
        lines.append(f"  [{insight.kind.value}] {insight.title}: {insight.description}")
        if insight.recommended_action:
            lines.append(f"    -> {insight.recommended_action}")
    return "\n".join(lines)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monthly revenue forecasting with KPI summaries and insights.",
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--sales-path",
        type=Path,
        help="Path to the input sales CSV (columns: date, revenue, units).",
    )
    source.add_argument(
        "--sample",
        action="store_true",
        help="Use 24 months of generated sample data instead of a CSV.",
    )
    source.add_argument(
        "--print-template",
        action="store_true",
        help="Print a small CSV template with the expected columns and exit.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for --sample (optional).",
    )
    parser.add_argument(
        "--horizon",
        type=int,
        default=6,
        help="Number of future months to forecast, 3-24 (default: 6).",
    )
    parser.add_argument(
        "--method",
        type=str,
        default=ForecastMethod.LINEAR_REGRESSION.value,
        help="Forecast method: linear-regression, exponential-smoothing or moving-average.",
    )
    parser.add_argument(
        "--trend-strength",
        type=float,
        default=1.0,
        help="Multiplier on the forecast's move away from the last value, 0.1-2.0 (default: 1.0).",
    )
    parser.add_argument(
        "--no-seasonality",
        action="store_true",
        help="Disable the yearly seasonal adjustment of linear regression.",
    )
    parser.add_argument(
        "--accuracy",
        choices=("constant", "backtest"),
        default="constant",
        help="How forecast accuracy is estimated (default: constant 90%%).",
    )
    parser.add_argument(
        "--reference-month",
        type=int,
        help="Calendar month (1-12) of the first period in the trailing year for seasonal insights.",
    )
    parser.add_argument(
        "--forecast-output",
        type=Path,
        help="Optional path to write the forecast as CSV.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        help="Logging verbosity (default: WARNING).",
    )
    return parser


def build_estimator(kind: str, config: ForecastConfig) -> AccuracyEstimator:
    if kind == "backtest":
        return BacktestAccuracyEstimator(config=config)
    return ConstantAccuracyEstimator()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.print_template:
        print(sample_csv())
        return 0

    try:
        if args.sample:
            history = generate_sample_data(seed=args.seed)
        else:
            history = load_sales_data(args.sales_path)

        config = ForecastConfig(
            horizon_periods=args.horizon,
            use_seasonality=not args.no_seasonality,
            trend_strength=args.trend_strength,
            method=args.method,
        )
        result = build_dashboard(
            history,
            config,
            estimator=build_estimator(args.accuracy, config),
            reference_month=args.reference_month,
        )
    except SalesOutlookError as exc:
        logger.error(f"Dashboard build failed: {exc}")
        return 1

    print(summarize_dataset_text(summarize_dataset(history)))
    print()
    print(summarize_kpis(result.kpis))
    print()
    print(summarize_insights(result))

    forecast_df = forecast_to_frame(result.forecast)
    print("\nForecast:")
    print(forecast_df.to_string(index=False, float_format=lambda x: f"{x:,.0f}"))

    if args.forecast_output:
        forecast_df.to_csv(args.forecast_output, index=False)
        print(f"\nSaved forecast to {args.forecast_output}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
