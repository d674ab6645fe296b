"""Conversion of pipeline output into the configured container."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Sequence

import pandas as pd

from avfeed.core.models import NormalizedRecord, TimeSeries, TimeSeriesRecord

RECORDS_FORMAT = "records"
FRAME_FORMAT = "frame"


def _coerce_decimal_columns(frame: pd.DataFrame) -> pd.DataFrame:
    for column in frame.columns:
        values = frame[column]
        if len(values) and values.map(lambda value: isinstance(value, Decimal)).all():
            frame[column] = values.astype(float)
    return frame


def series_to_frame(series: Sequence[TimeSeriesRecord]) -> pd.DataFrame:
    """Build a DataFrame indexed by ``timestamp``."""
    if not series:
        return pd.DataFrame(index=pd.DatetimeIndex([], name="timestamp"))
    frame = pd.DataFrame([record.as_dict() for record in series])
    frame["timestamp"] = pd.to_datetime(frame["timestamp"])
    return _coerce_decimal_columns(frame.set_index("timestamp"))


def records_to_frame(records: Sequence[NormalizedRecord]) -> pd.DataFrame:
    """Build a DataFrame with one row per normalized record."""
    return _coerce_decimal_columns(pd.DataFrame(list(records)))


def format_series(series: TimeSeries, output_format: str) -> TimeSeries | pd.DataFrame:
    if output_format == FRAME_FORMAT:
        return series_to_frame(series)
    return series


def format_records(records: list[NormalizedRecord], output_format: str) -> Any:
    if output_format == FRAME_FORMAT:
        return records_to_frame(records)
    return records


__all__ = [
    "FRAME_FORMAT",
    "RECORDS_FORMAT",
    "format_records",
    "format_series",
    "records_to_frame",
    "series_to_frame",
]
