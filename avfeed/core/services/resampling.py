"""Range filtering and synthetic-period aggregation of time series."""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from itertools import groupby
from typing import Any

import pandas as pd

from avfeed.core.exceptions import DataValidationError
from avfeed.core.models import AggregationPeriod, TimeSeries, TimeSeriesRecord, parse_datetime

_PERIOD_OFFSETS = {
    AggregationPeriod.WEEK: pd.offsets.Week(weekday=6),
    AggregationPeriod.MONTH: pd.offsets.MonthEnd(),
    AggregationPeriod.QUARTER: pd.offsets.QuarterEnd(),
    AggregationPeriod.YEAR: pd.offsets.YearEnd(),
}


def _as_datetime(value: date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def filter_range(
    series: TimeSeries,
    start: date | datetime | str | None = None,
    end: date | datetime | str | None = None,
) -> TimeSeries:
    """Keep records within ``[start, end]``.

    An ``end`` at exactly midnight is stretched to the end of that day so a
    bare end date includes the whole day.
    """
    start_dt = parse_datetime(start)
    end_dt = parse_datetime(end)
    if end_dt is not None and end_dt.time() == time.min:
        end_dt = datetime.combine(end_dt.date(), time.max, tzinfo=end_dt.tzinfo)

    return [
        record
        for record in series
        if (start_dt is None or _as_datetime(record.timestamp) >= start_dt)
        and (end_dt is None or _as_datetime(record.timestamp) <= end_dt)
    ]


def period_end(timestamp: date | datetime, period: AggregationPeriod) -> date | datetime:
    """End of the calendar period containing ``timestamp``, typed like it."""
    day = pd.Timestamp(timestamp).normalize()
    end_day = _PERIOD_OFFSETS[period].rollforward(day).date()
    if isinstance(timestamp, datetime):
        return datetime.combine(end_day, time.min, tzinfo=timestamp.tzinfo)
    return end_day


def _numeric(values: list[Any]) -> list[Any]:
    return [value for value in values if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)]


def _aggregate_field(name: str, values: list[Any]) -> Any:
    kind = name.replace("_", "").lower()
    if kind == "open":
        return values[0]
    numbers = _numeric(values)
    if not numbers:
        return values[-1]
    if kind == "high":
        return max(numbers)
    if kind == "low":
        return min(numbers)
    if kind == "volume":
        return sum(numbers)
    return values[-1]


def _aggregate_bucket(key: date | datetime, chronological: list[TimeSeriesRecord]) -> TimeSeriesRecord:
    names = dict.fromkeys(name for record in chronological for name in record.fields)
    fields = {
        name: _aggregate_field(name, [record.fields[name] for record in chronological if name in record.fields])
        for name in names
    }
    return TimeSeriesRecord(timestamp=key, fields=fields)


def aggregate(series: TimeSeries, period: AggregationPeriod | str) -> TimeSeries:
    """Resample a daily (or finer) series into ``period`` buckets.

    open is taken from the chronologically first bar, close/adjusted_close and
    any other field from the last, high/low are the extremes and volume is
    summed. A still-open final period is labelled with the latest timestamp.
    The input must already run in one direction; its order is kept.
    """
    try:
        period = AggregationPeriod(period)
    except ValueError as exc:
        raise DataValidationError(
            f"Unsupported aggregation period: {period}",
            validation_errors={"period": str(period)},
        ) from exc
    if not series:
        return []

    latest = max(record.timestamp for record in series)
    descending = series[0].timestamp > series[-1].timestamp

    def bucket_key(record: TimeSeriesRecord) -> date | datetime:
        return min(period_end(record.timestamp, period), latest)

    buckets: TimeSeries = []
    for key, grouped in groupby(series, key=bucket_key):
        records = list(grouped)
        if descending:
            records.reverse()
        buckets.append(_aggregate_bucket(key, records))
    return buckets


__all__ = ["aggregate", "filter_range", "period_end"]
