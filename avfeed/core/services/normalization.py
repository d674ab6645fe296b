"""Normalization of raw Alpha Vantage payloads into canonical records.

Raw JSON keys are first turned into identifier-safe names (whitespace
dropped with the next letter upper-cased, other punctuation replaced by
``_``, an ``x`` prefix when the name does not start with a letter) and then
canonicalized: ``"1. open"`` becomes ``Open``, ``"Time Series (Daily)"``
becomes ``TimeSeries`` and ``"2021-07-29"`` becomes the series key
``x2021_07_29``.

The API reports failures with the same one-key envelope it uses for real
payloads (``{"Error Message": "..."}``, ``{"Note": "..."}``), the only
difference being that the sole value is text. :func:`parse_response` checks
for that explicitly.
"""

from __future__ import annotations

import io
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

import pandas as pd

from avfeed.core.exceptions import DataValidationError, MalformedTimestampError, UpstreamError
from avfeed.core.logging import get_logger
from avfeed.core.models import NormalizedRecord, TimeSeries, TimeSeriesRecord
from avfeed.core.services.timeseries import build_time_series

logger = get_logger(__name__)

TIME_SERIES_FIELD = "TimeSeries"
TIMESTAMP_COLUMNS = ("timestamp", "time")

_WHITESPACE_RUN = re.compile(r"\s+(\S?)")
_INVALID_CHARS = re.compile(r"[^0-9A-Za-z_]")
_NUMERAL_PREFIX = re.compile(r"^(?:x\d+_(?=\D))+")
_TRAILING_UNDERSCORE = re.compile(r"_+$")
_TIME_SERIES_NAME = re.compile(r"^(TimeSeries).+")


def identifier_name(raw: Any) -> str:
    """Make ``raw`` a valid identifier the way the JSON decoder names fields."""
    name = _WHITESPACE_RUN.sub(lambda match: match.group(1).upper(), str(raw).strip())
    name = _INVALID_CHARS.sub("_", name)
    if not name or not ("A" <= name[0] <= "Z" or "a" <= name[0] <= "z"):
        name = "x" + name
    return name


def normalize_name(name: str) -> str:
    """Canonicalize an identifier-safe field name.

    Strips a leading numeral prefix such as ``x1_`` (but not the digits of a
    date key like ``x2021_07_29``), trailing underscores and the interval
    suffix of ``TimeSeries...`` names. Canonical names are fixed points.
    """
    canonical = _NUMERAL_PREFIX.sub("", name)
    canonical = _TRAILING_UNDERSCORE.sub("", canonical)
    canonical = _TIME_SERIES_NAME.sub(r"\1", canonical)
    return canonical or name


def _to_number(text: str) -> Decimal | None:
    stripped = text.strip()
    if not stripped or "_" in stripped:
        return None
    try:
        number = Decimal(stripped)
    except InvalidOperation:
        return None
    if number.is_nan():
        return None
    return number


def normalize_value(value: Any) -> Any:
    """Type a raw field value.

    Text loses one trailing ``%`` and becomes a :class:`Decimal` when it is
    numeric, otherwise it is kept as text. Mappings are parsed recursively.
    """
    if isinstance(value, str):
        text = value[:-1] if value.endswith("%") else value
        number = _to_number(text)
        return text if number is None else number
    if isinstance(value, Mapping):
        return parse_response(value)
    if isinstance(value, list):
        return [normalize_value(item) for item in value]
    return value


def _normalize_fields(mapping: Mapping[str, Any]) -> NormalizedRecord:
    record: NormalizedRecord = {}
    for key, value in mapping.items():
        name = normalize_name(identifier_name(key))
        if name in record:
            logger.debug("Duplicate canonical field name", field=name, raw_field=key)
        if name.lower() == TIME_SERIES_FIELD.lower() and isinstance(value, Mapping):
            record[name] = _normalize_series(value)
        else:
            record[name] = normalize_value(value)
    return record


def _normalize_series(mapping: Mapping[str, Any]) -> TimeSeries:
    rows: dict[str, Any] = {}
    for key, row in mapping.items():
        # rows are not auto-drilled: single-field indicator rows are valid
        rows[identifier_name(key)] = _normalize_fields(row) if isinstance(row, Mapping) else row
    return build_time_series(rows)


def parse_response(raw: Any) -> Any:
    """Normalize a decoded JSON response into a :data:`NormalizedRecord`.

    Empty or non-mapping input is returned unchanged. A one-field mapping is a
    wrapper and is drilled into; if the wrapped value is text the service
    reported an error and :class:`UpstreamError` is raised with that text.
    """
    if not isinstance(raw, Mapping) or not raw:
        return raw

    payload: Any = raw
    if len(raw) == 1:
        field, payload = next(iter(raw.items()))
        if isinstance(payload, str):
            raise UpstreamError(payload, details={"field": field})
        if not isinstance(payload, Mapping):
            return normalize_value(payload)

    return _normalize_fields(payload)


def parse_wire_timestamp(text: str) -> date | datetime:
    """Parse the ``timestamp``/``time`` column of a CSV payload."""
    value = text.strip()
    try:
        if len(value) == 10:
            return date.fromisoformat(value)
        if len(value) == 19:
            return datetime.strptime(value, "%Y-%m-%d %H:%M:%S")
    except ValueError as exc:
        raise MalformedTimestampError(value, details={"reason": str(exc)}) from exc
    raise MalformedTimestampError(value)


def _upstream_message(payload: Mapping[str, Any]) -> tuple[str, str | None]:
    if not payload:
        return "Empty response from Alpha Vantage", None
    field, value = next(iter(payload.items()))
    return str(value), str(field)


def parse_csv(payload: str | bytes | Mapping[str, Any]) -> TimeSeries:
    """Parse a ``datatype=csv`` payload into a time series.

    A decoded mapping or a body without a CSV header means the service sent
    an error message instead of data.
    """
    if isinstance(payload, Mapping):
        message, field = _upstream_message(payload)
        raise UpstreamError(message, details={"field": field} if field else None)

    text = payload.decode("utf-8") if isinstance(payload, bytes) else payload
    stripped = text.strip()
    if "," not in stripped.split("\n", 1)[0]:
        raise UpstreamError(stripped or "Empty response from Alpha Vantage")

    frame = pd.read_csv(io.StringIO(stripped), dtype=str, keep_default_na=False, skipinitialspace=True)
    columns = {column: normalize_name(identifier_name(column)) for column in frame.columns}
    timestamp_column = next(
        (column for column, name in columns.items() if name.lower() in TIMESTAMP_COLUMNS),
        None,
    )
    if timestamp_column is None:
        raise DataValidationError(
            "CSV response has no timestamp column",
            validation_errors={"columns": list(columns.values())},
        )

    series: TimeSeries = []
    for row in frame.to_dict("records"):
        timestamp = parse_wire_timestamp(row[timestamp_column])
        fields = {columns[column]: normalize_value(value) for column, value in row.items() if column != timestamp_column}
        series.append(TimeSeriesRecord(timestamp=timestamp, fields=fields))
    return series


__all__ = [
    "TIME_SERIES_FIELD",
    "identifier_name",
    "normalize_name",
    "normalize_value",
    "parse_csv",
    "parse_response",
    "parse_wire_timestamp",
]
