"""Data models module."""

from avfeed.core.models.base import (
    FieldValue,
    NormalizedRecord,
    SliceWindow,
    TimeSeries,
    TimeSeriesRecord,
)
from avfeed.core.models.market import (
    DAILY_PERIODICITY,
    AggregationPeriod,
    Endpoint,
    is_intraday,
    normalize_periodicity,
    synthetic_period,
)
from avfeed.core.models.query import HistoryRequest, parse_datetime

__all__ = [
    "AggregationPeriod",
    "DAILY_PERIODICITY",
    "Endpoint",
    "FieldValue",
    "HistoryRequest",
    "NormalizedRecord",
    "SliceWindow",
    "TimeSeries",
    "TimeSeriesRecord",
    "is_intraday",
    "normalize_periodicity",
    "parse_datetime",
    "synthetic_period",
]
