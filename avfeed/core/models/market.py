"""Market-related enums and periodicity helpers."""

import re
from enum import Enum


class AggregationPeriod(str, Enum):
    """Synthetic periods computed client-side from daily bars."""

    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class Endpoint(str, Enum):
    """Alpha Vantage query functions used by the connector."""

    INTRADAY_EXTENDED = "TIME_SERIES_INTRADAY_EXTENDED"
    DAILY = "TIME_SERIES_DAILY"
    DAILY_ADJUSTED = "TIME_SERIES_DAILY_ADJUSTED"
    GLOBAL_QUOTE = "GLOBAL_QUOTE"


DAILY_PERIODICITY = "day"

_PLURAL_SUFFIX = re.compile(r"(\d.+)s$")
_WHITESPACE = re.compile(r"\s")


def normalize_periodicity(periodicity: str) -> str:
    """Canonicalize a user-supplied bar size.

    Values are deliberately not checked against a fixed list so that new
    upstream intervals keep working.
    """
    value = _WHITESPACE.sub("", str(periodicity)).lower()
    value = _PLURAL_SUFFIX.sub(r"\1", value)
    return value.replace("1hour", "60min")


def is_intraday(periodicity: str) -> bool:
    """Any periodicity that starts with a digit 1-9 is sub-daily."""
    return bool(periodicity) and "1" <= periodicity[0] <= "9"


def synthetic_period(periodicity: str) -> AggregationPeriod | None:
    """Return the aggregation period for ``periodicity`` if it is synthetic."""
    try:
        return AggregationPeriod(periodicity)
    except ValueError:
        return None


__all__ = [
    "AggregationPeriod",
    "DAILY_PERIODICITY",
    "Endpoint",
    "is_intraday",
    "normalize_periodicity",
    "synthetic_period",
]
