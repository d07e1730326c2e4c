from typing import Sequence

import numpy as np
import pandas as pd


def population_variance(values: Sequence[float] | np.ndarray) -> float:
    values_arr = np.asarray(values, dtype=float)
    if values_arr.size == 0:
        return np.nan
    return float(np.mean((values_arr - values_arr.mean()) ** 2))


def standard_deviation(values: Sequence[float] | np.ndarray) -> float:
    return float(np.sqrt(population_variance(values)))


def percent_change(current: float, base: float) -> float:
    """Percent change from ``base`` to ``current``; NaN when ``base`` is zero or NaN."""
    if base == 0 or np.isnan(base) or np.isnan(current):
        return np.nan
    return float((current - base) / base * 100.0)


def period_growth_rates(values: Sequence[float] | np.ndarray) -> np.ndarray:
    values_arr = np.asarray(values, dtype=float)
    if values_arr.size < 2:
        return np.array([], dtype=float)
    return np.array(
        [percent_change(curr, prev) for prev, curr in zip(values_arr[:-1], values_arr[1:])],
        dtype=float,
    )


def mean_defined(values: Sequence[float] | np.ndarray) -> float:
    values_arr = np.asarray(values, dtype=float)
    defined = values_arr[~np.isnan(values_arr)]
    if defined.size == 0:
        return np.nan
    return float(defined.mean())


def round_half_up(value: float) -> float:
    return float(np.floor(value + 0.5))


def wmape(actual: pd.Series | np.ndarray, predicted: pd.Series | np.ndarray) -> float:
    actual_arr = np.asarray(actual, dtype=float)
    predicted_arr = np.asarray(predicted, dtype=float)
    denom = np.abs(actual_arr).sum()
    if denom == 0:
        return np.nan
    return float(np.abs(actual_arr - predicted_arr).sum() / denom)
