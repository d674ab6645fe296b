"""Base data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterator, Mapping, Union

FieldValue = Union[Decimal, str]
NormalizedRecord = dict[str, Any]
SliceWindow = str


@dataclass(frozen=True)
class TimeSeriesRecord:
    """One timestamped bar with its canonical fields in wire order."""

    timestamp: date | datetime
    fields: Mapping[str, Any] = field(default_factory=dict)

    def __getitem__(self, name: str) -> Any:
        return self.fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def get(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def with_fields(self, timestamp: date | datetime | None = None, **updates: Any) -> TimeSeriesRecord:
        """Return a copy with ``updates`` merged into the fields."""
        return TimeSeriesRecord(
            timestamp=self.timestamp if timestamp is None else timestamp,
            fields={**self.fields, **updates},
        )

    def as_dict(self) -> dict[str, Any]:
        return {"timestamp": self.timestamp, **self.fields}


TimeSeries = list[TimeSeriesRecord]


__all__ = [
    "FieldValue",
    "NormalizedRecord",
    "SliceWindow",
    "TimeSeries",
    "TimeSeriesRecord",
]
