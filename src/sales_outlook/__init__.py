"""Monthly revenue forecasting with KPI summaries and rule-based insights."""

from .backtest import (
    AccuracyEstimate,
    AccuracyEstimator,
    BacktestAccuracyEstimator,
    ConstantAccuracyEstimator,
    SimulatedAccuracyEstimator,
)
from .dashboard import DashboardResult, build_dashboard
from .data import SalesRecord, generate_sample_data, load_sales_data, records_from_frame
from .errors import DataValidationError, InsufficientDataError, InvalidConfigError, SalesOutlookError
from .insights import Insight, InsightKind, generate_insights
from .kpis import KPISummary, summarize
from .models import ForecastMethod
from .pipeline import ForecastConfig, ForecastPoint, forecast, forecast_to_frame, validate_config

__all__ = [
    "AccuracyEstimate",
    "AccuracyEstimator",
    "BacktestAccuracyEstimator",
    "ConstantAccuracyEstimator",
    "DashboardResult",
    "DataValidationError",
    "ForecastConfig",
    "ForecastMethod",
    "ForecastPoint",
    "Insight",
    "InsightKind",
    "InsufficientDataError",
    "InvalidConfigError",
    "KPISummary",
    "SalesOutlookError",
    "SalesRecord",
    "SimulatedAccuracyEstimator",
    "build_dashboard",
    "forecast",
    "forecast_to_frame",
    "generate_insights",
    "generate_sample_data",
    "load_sales_data",
    "records_from_frame",
    "summarize",
    "validate_config",
]

__version__ = "0.1.0"
