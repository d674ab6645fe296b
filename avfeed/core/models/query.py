"""Query models."""

from datetime import date, datetime

import pandas as pd
from pydantic import BaseModel, ConfigDict, field_validator

from avfeed.core.models.market import DAILY_PERIODICITY, normalize_periodicity


def _as_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_datetime(value: date | datetime | str | None) -> datetime | None:
    """Coerce a user-supplied bound into a ``datetime``.

    Timezone-aware values are converted to naive local time so they compare
    with the naive bars and the system clock.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _as_local(value)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time())
    if isinstance(value, str):
        return _as_local(pd.Timestamp(value).to_pydatetime())
    raise ValueError("Start and End date/time values must be in a valid datetime format")


class HistoryRequest(BaseModel):
    """历史数据查询模型."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    start: datetime | None = None
    end: datetime | None = None
    periodicity: str = DAILY_PERIODICITY

    @field_validator("symbol")
    @classmethod
    def _check_symbol(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("symbol must not be empty")
        if any(separator in value for separator in (" ", ",")):
            raise ValueError("history expects a single symbol")
        return value

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_bound(cls, value: object) -> datetime | None:
        return parse_datetime(value)  # type: ignore[arg-type]

    @field_validator("periodicity")
    @classmethod
    def _normalize_periodicity(cls, value: str) -> str:
        value = normalize_periodicity(value)
        if not value:
            raise ValueError("periodicity must not be empty")
        return value


__all__ = ["HistoryRequest", "parse_datetime"]
