"""Core services: normalization, slicing, resampling and orchestration."""

from avfeed.core.services.history import HistoryService, parse_symbols
from avfeed.core.services.normalization import (
    identifier_name,
    normalize_name,
    normalize_value,
    parse_csv,
    parse_response,
)
from avfeed.core.services.resampling import aggregate, filter_range, period_end
from avfeed.core.services.slicing import ALL_SLICES, plan_slices
from avfeed.core.services.timeseries import build_time_series, parse_series_key

__all__ = [
    "ALL_SLICES",
    "HistoryService",
    "aggregate",
    "build_time_series",
    "filter_range",
    "identifier_name",
    "normalize_name",
    "normalize_value",
    "parse_csv",
    "parse_response",
    "parse_series_key",
    "period_end",
    "plan_slices",
    "parse_symbols",
]
