from __future__ import annotations

import logging
import math
from enum import Enum
from typing import Dict, Tuple

import numpy as np
from sklearn.linear_model import LinearRegression
from statsmodels.tsa.holtwinters import SimpleExpSmoothing

from .errors import InsufficientDataError, InvalidConfigError

logger = logging.getLogger(__name__)

SMOOTHING_ALPHA = 0.3
MOVING_AVERAGE_WINDOW = 6
SEASON_LENGTH = 12
SEASONAL_AMPLITUDE = 0.2


class ForecastMethod(str, Enum):
    LINEAR_REGRESSION = "linear-regression"
    EXPONENTIAL_SMOOTHING = "exponential-smoothing"
    MOVING_AVERAGE = "moving-average"

    @classmethod
    def parse(cls, value: "ForecastMethod | str") -> "ForecastMethod":
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        method = _METHOD_ALIASES.get(key)
        if method is None:
            choices = ", ".join(m.value for m in cls)
            raise InvalidConfigError(f"Unknown forecast method {value!r}; expected one of: {choices}")
        return method


_METHOD_ALIASES: Dict[str, ForecastMethod] = {
    **{method.value: method for method in ForecastMethod},
    "linear": ForecastMethod.LINEAR_REGRESSION,
    "exponential": ForecastMethod.EXPONENTIAL_SMOOTHING,
    "moving_average": ForecastMethod.MOVING_AVERAGE,
}


def _require_window(window: np.ndarray) -> np.ndarray:
    values = np.asarray(window, dtype=float)
    if values.size < 2:
        raise InsufficientDataError(f"Forecasting needs at least 2 periods, got {values.size}")
    return values


def seasonal_multiplier(position: int) -> float:
    """Yearly sine wave around 1.0 for the period at absolute index ``position``."""
    seasonal_index = position % SEASON_LENGTH
    return 1 + SEASONAL_AMPLITUDE * math.sin((seasonal_index - 2) * math.pi / 6)


def fit_linear_trend(window: np.ndarray) -> Tuple[float, float]:
    values = _require_window(window)
    index = np.arange(values.size, dtype=float).reshape(-1, 1)
    model = LinearRegression()
    model.fit(index, values)
    slope = float(model.coef_[0])
    intercept = float(model.intercept_)
    logger.debug(f"Linear trend over {values.size} periods: slope={slope:.4f}, intercept={intercept:.4f}")
    return slope, intercept



def smoothed_level(window: np.ndarray, alpha: float = SMOOTHING_ALPHA) -> float:
    values = _require_window(window)
    model = SimpleExpSmoothing(values, initialization_method="known", initial_level=values[0])
    fitted = model.fit(smoothing_level=alpha, optimized=False)
    return float(np.asarray(fitted.forecast(1))[0])


class LinearTrendForecaster:
    def __init__(self, use_seasonality: bool = False) -> None:
        self.use_seasonality = use_seasonality
        self.slope = 0.0
        self.intercept = 0.0
        self.size = 0

    def fit(self, window: np.ndarray) -> "LinearTrendForecaster":
        values = _require_window(window)
        self.slope, self.intercept = fit_linear_trend(values)
        self.size = values.size
        return self

    def predict(self, periods_ahead: int) -> float:
        position = self.size + periods_ahead - 1
        prediction = self.slope * position + self.intercept
        if self.use_seasonality:
            prediction *= seasonal_multiplier(position)
        return float(prediction)


class SmoothingForecaster:
    """Single exponential smoothing level plus the first-to-last average step."""

    def __init__(self, use_seasonality: bool = False) -> None:
        self.level = 0.0
        self.trend = 0.0

    def fit(self, window: np.ndarray) -> "SmoothingForecaster":
        values = _require_window(window)
        self.level = smoothed_level(values)
        self.trend = float((values[-1] - values[0]) / (values.size - 1))
        return self

    def predict(self, periods_ahead: int) -> float:
        return float(self.level + self.trend * periods_ahead)


class MovingAverageForecaster:
    def __init__(self, use_seasonality: bool = False) -> None:
        self.average = 0.0
        self.trend = 0.0

    def fit(self, window: np.ndarray) -> "MovingAverageForecaster":
        values = _require_window(window)
        size = min(MOVING_AVERAGE_WINDOW, values.size)
        self.average = float(values[-size:].mean())
        self.trend = float((values[-1] - values[values.size - size]) / size)
        return self

    def predict(self, periods_ahead: int) -> float:
        return float(self.average + self.trend * periods_ahead)


# Only linear regression reads ``use_seasonality``; the other forecasters accept
# it so every entry shares one constructor.
METHODS: Dict[ForecastMethod, type] = {
    ForecastMethod.LINEAR_REGRESSION: LinearTrendForecaster,
    ForecastMethod.EXPONENTIAL_SMOOTHING: SmoothingForecaster,
    ForecastMethod.MOVING_AVERAGE: MovingAverageForecaster,
}


def fit_forecaster(method: ForecastMethod, window: np.ndarray, use_seasonality: bool):
    """Fit the selected method once on ``window``; call ``predict(k)`` per period ahead."""
    return METHODS[ForecastMethod.parse(method)](use_seasonality).fit(window)
