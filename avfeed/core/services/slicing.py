"""Monthly slice planning for intraday history requests.

The intraday endpoint serves at most one trailing month per call. Window
``i`` (1 = newest) covers ``(now - i months, now - (i - 1) months]`` using
calendar months, and is named ``year{Y}month{M}``.
"""

from __future__ import annotations

from datetime import date, datetime

import pandas as pd

from avfeed.core.exceptions import DataValidationError
from avfeed.core.interfaces import Clock, SystemClock
from avfeed.core.logging import get_logger
from avfeed.core.models import SliceWindow, parse_datetime

logger = get_logger(__name__)

SLICE_COUNT = 24
ALL_SLICES: tuple[SliceWindow, ...] = tuple(f"year{year}month{month}" for year in (1, 2) for month in range(1, 13))


def slice_bounds(now: datetime) -> list[tuple[datetime, datetime]]:
    """Return ``(start, end)`` of every window, newest first."""
    anchor = pd.Timestamp(now)
    edges = [(anchor - pd.DateOffset(months=months)).to_pydatetime() for months in range(SLICE_COUNT + 1)]
    return [(edges[index + 1], edges[index]) for index in range(SLICE_COUNT)]


def plan_slices(
    start: date | datetime | str | None = None,
    end: date | datetime | str | None = None,
    *,
    clock: Clock | None = None,
    padding: int = 1,
) -> list[SliceWindow]:
    """Select the windows needed to cover ``[start, end]``.

    Upstream month boundaries are inexact, so ``padding`` extra windows are
    requested on each side of the overlapping range.
    """
    if start is None and end is None:
        return list(ALL_SLICES)
    if padding < 0:
        raise DataValidationError("padding must be non-negative", validation_errors={"padding": padding})

    now = (clock or SystemClock()).now()
    given_start = parse_datetime(start)
    given_end = parse_datetime(end)
    start_dt = given_start or (pd.Timestamp(now) - pd.DateOffset(years=2)).to_pydatetime()
    end_dt = given_end or now
    # one-sided ranges outside the two-year horizon are clamped below
    if given_start is not None and given_end is not None and start_dt > end_dt:
        raise DataValidationError(
            "start must not be after end",
            validation_errors={"start": start_dt.isoformat(), "end": end_dt.isoformat()},
        )

    bounds = slice_bounds(now)
    overlapping = [
        index for index, (window_start, window_end) in enumerate(bounds) if window_end > start_dt and window_start < end_dt
    ]
    if not overlapping:
        # entirely in the future, or older than the oldest window
        selected = [ALL_SLICES[0]] if start_dt >= bounds[0][1] else [ALL_SLICES[-1]]
    else:
        first = max(0, overlapping[0] - padding)
        last = min(SLICE_COUNT - 1, overlapping[-1] + padding)
        selected = list(ALL_SLICES[first : last + 1])

    logger.debug("Planned intraday slices", slices=selected)
    return selected


__all__ = ["ALL_SLICES", "SLICE_COUNT", "plan_slices", "slice_bounds"]
