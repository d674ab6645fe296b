"""Reconstruction of ordered time series from timestamp-keyed maps."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Mapping

from avfeed.core.exceptions import DataValidationError, MalformedTimestampError
from avfeed.core.models import TimeSeries, TimeSeriesRecord

# xYYYY_MM_DD (11 chars) or xYYYY_MM_DDHH_MM_SS (19 chars)
_SERIES_KEY = re.compile(r"x(\d{4})_(\d{2})_(\d{2})(?:(\d{2})_(\d{2})_(\d{2}))?")


def parse_series_key(key: str) -> date | datetime:
    """Reverse an identifier-safe timestamp key by character position.

    Date-only keys become :class:`date`, date+time keys :class:`datetime`.
    """
    match = _SERIES_KEY.fullmatch(key)
    if match is None:
        raise MalformedTimestampError(key)
    parts = [int(part) for part in match.groups() if part is not None]
    try:
        if len(parts) == 3:
            return date(*parts)
        return datetime(*parts)
    except ValueError as exc:
        raise MalformedTimestampError(key, details={"reason": str(exc)}) from exc


def build_time_series(field_map: Mapping[str, Mapping[str, Any]]) -> TimeSeries:
    """Turn ``{timestamp key: fields}`` into records, keeping input key order."""
    series: TimeSeries = []
    for key, fields in field_map.items():
        timestamp = parse_series_key(key)
        if not isinstance(fields, Mapping):
            raise DataValidationError(
                "Time-series entries must be field maps",
                validation_errors={"key": key, "type": type(fields).__name__},
            )
        series.append(TimeSeriesRecord(timestamp=timestamp, fields=dict(fields)))
    return series


__all__ = ["build_time_series", "parse_series_key"]
