from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd
from dateutil.relativedelta import relativedelta

from .errors import DataValidationError
from .metrics import round_half_up

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS: Sequence[str] = ("date", "revenue", "units")

SAMPLE_ROWS: Sequence[Sequence[str]] = (
    ("2023-01-01", "45000", "562"),
    ("2023-02-01", "48000", "600"),
    ("2023-03-01", "52000", "650"),
    ("2023-04-01", "49000", "612"),
    ("2023-05-01", "55000", "687"),
)


def period_label(period: date) -> str:
    return period.strftime("%b %Y")


@dataclass(frozen=True)
class SalesRecord:
    date: date
    revenue: float
    units: int
    period_label: str = field(default="")

    def __post_init__(self) -> None:
        if not self.period_label:
            object.__setattr__(self, "period_label", period_label(self.date))


@dataclass(frozen=True)
class DatasetSummary:
    record_count: int
    start: Optional[date]
    end: Optional[date]
    total_revenue: float
    total_units: int


def _month_start(value: pd.Timestamp) -> date:
    return value.to_period("M").to_timestamp().date()


def records_from_frame(frame: pd.DataFrame) -> List[SalesRecord]:
    """Validate a raw sales frame and convert it to date-sorted monthly records.

    Revenue is rounded to whole units and every date is moved to the first day
    of its month. Any bad row stops the conversion with the row number (1-based,
    excluding the header) in the error message.
    """
    if frame.empty:
        raise DataValidationError("CSV file is empty")

    missing = [column for column in REQUIRED_COLUMNS if column not in frame.columns]
    if missing:
        raise DataValidationError(f"Missing required columns: {', '.join(missing)}")

    dates = pd.to_datetime(frame["date"].astype(str), errors="coerce")
    revenues = pd.to_numeric(frame["revenue"], errors="coerce")
    units = pd.to_numeric(frame["units"], errors="coerce")

    records: List[SalesRecord] = []
    for position, (raw_row, ds, revenue, unit_count) in enumerate(
        zip(frame[list(REQUIRED_COLUMNS)].itertuples(index=False), dates, revenues, units), start=1
    ):
        raw = raw_row._asdict()
        if pd.isna(ds):
            raise DataValidationError(f"Invalid date format in row {position}: {raw['date']}")
        if pd.isna(revenue) or revenue < 0:
            raise DataValidationError(f"Invalid revenue value in row {position}: {raw['revenue']}")
        if pd.isna(unit_count) or unit_count < 0:
            raise DataValidationError(f"Invalid units value in row {position}: {raw['units']}")
        records.append(
            SalesRecord(
                date=_month_start(ds),
                revenue=round_half_up(float(revenue)),
                units=int(unit_count),
            )
        )

    records.sort(key=lambda record: record.date)
    for previous, current in zip(records, records[1:]):
        if previous.date == current.date:
            raise DataValidationError(f"Duplicate period in sales data: {current.period_label}")

    logger.debug(f"Converted {len(records)} rows into monthly sales records")
    return records


def load_sales_data(sales_path: Path) -> List[SalesRecord]:
    try:
        df = pd.read_csv(sales_path)
    except FileNotFoundError as exc:
        raise DataValidationError(f"Sales file not found: {sales_path}") from exc
    except pd.errors.EmptyDataError as exc:
        raise DataValidationError("CSV file is empty") from exc
    except pd.errors.ParserError as exc:
        raise DataValidationError(f"Failed to parse CSV: {exc}") from exc

    records = records_from_frame(df)
    logger.info(f"Loaded {len(records)} sales records from {sales_path}")
    return records


def _to_number(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return np.nan


def validate_dataset(rows: Iterable[Mapping[str, Any]]) -> List[str]:
    """Collect every structural problem in ``rows`` instead of stopping at the first."""
    rows = list(rows)
    if not rows:
        return ["Dataset must contain at least one record"]

    errors: List[str] = [
        f"Missing required field: {name}" for name in REQUIRED_COLUMNS if name not in rows[0]
    ]

    for position, row in enumerate(rows, start=1):
        if pd.isna(pd.to_datetime(str(row.get("date")), errors="coerce")):
            errors.append(f"Invalid date in record {position}: {row.get('date')}")

        revenue = _to_number(row.get("revenue"))
        if pd.isna(revenue) or revenue < 0:
            errors.append(f"Invalid revenue in record {position}: {row.get('revenue')}")

        unit_count = _to_number(row.get("units"))
        if pd.isna(unit_count) or unit_count < 0:
            errors.append(f"Invalid units in record {position}: {row.get('units')}")

    return errors


def summarize_dataset(records: Sequence[SalesRecord]) -> DatasetSummary:
    return DatasetSummary(
        record_count=len(records),
        start=records[0].date if records else None,
        end=records[-1].date if records else None,
        total_revenue=float(sum(record.revenue for record in records)),
        total_units=int(sum(record.units for record in records)),
    )


def generate_sample_data(
    start: date = date(2023, 1, 1),
    periods: int = 24,
    seed: Optional[int] = None,
) -> List[SalesRecord]:
    """Synthetic monthly history: linear growth, a yearly sine wave and uniform noise."""
    rng = np.random.default_rng(seed)
    first = date(start.year, start.month, 1)

    records: List[SalesRecord] = []
    for index in range(periods):
        base_trend = 45000 + index * 1200
        seasonal_multiplier = 1 + 0.3 * math.sin(((index % 12) - 2) * math.pi / 6)
        noise = 0.85 + rng.random() * 0.3
        revenue = round_half_up(base_trend * seasonal_multiplier * noise)
        units = int(round_half_up(revenue / (80 + rng.random() * 40)))
        records.append(
            SalesRecord(date=first + relativedelta(months=index), revenue=revenue, units=units)
        )
    return records


def sample_csv() -> str:
    lines = [",".join(REQUIRED_COLUMNS)]
    lines.extend(",".join(row) for row in SAMPLE_ROWS)
    return "\n".join(lines)
