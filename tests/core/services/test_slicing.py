"""Tests for intraday slice planning."""

from datetime import date, datetime

import pytest

from avfeed.core.exceptions import DataValidationError
from avfeed.core.interfaces import FixedClock
from avfeed.core.services.slicing import ALL_SLICES, SLICE_COUNT, plan_slices, slice_bounds


def test_all_slices_are_named_newest_first() -> None:
    assert len(ALL_SLICES) == SLICE_COUNT == 24
    assert ALL_SLICES[0] == "year1month1"
    assert ALL_SLICES[11] == "year1month12"
    assert ALL_SLICES[12] == "year2month1"
    assert ALL_SLICES[-1] == "year2month12"


def test_slice_bounds_are_contiguous_calendar_months(fixed_clock) -> None:
    bounds = slice_bounds(fixed_clock.now())

    assert len(bounds) == 24
    assert bounds[0] == (datetime(2021, 6, 29, 12), datetime(2021, 7, 29, 12))
    assert bounds[1] == (datetime(2021, 5, 29, 12), datetime(2021, 6, 29, 12))
    # February is clipped to its last day
    assert bounds[4][0] == datetime(2021, 2, 28, 12)
    assert bounds[-1][0] == datetime(2019, 7, 29, 12)
    for newer, older in zip(bounds, bounds[1:]):
        assert older[1] == newer[0]


def test_no_bounds_requests_every_slice() -> None:
    assert plan_slices() == list(ALL_SLICES)


def test_exact_window_is_padded_on_both_sides(fixed_clock) -> None:
    slices = plan_slices(datetime(2021, 4, 29, 12), datetime(2021, 5, 29, 12), clock=fixed_clock)

    assert slices == ["year1month2", "year1month3", "year1month4"]


def test_range_spanning_two_windows(fixed_clock) -> None:
    slices = plan_slices(date(2021, 3, 1), date(2021, 4, 1), clock=fixed_clock)

    assert slices == ["year1month3", "year1month4", "year1month5", "year1month6"]


def test_padding_can_be_disabled(fixed_clock) -> None:
    slices = plan_slices(date(2021, 3, 1), date(2021, 4, 1), clock=fixed_clock, padding=0)

    assert slices == ["year1month4", "year1month5"]


def test_start_only_runs_to_now(fixed_clock) -> None:
    assert plan_slices(start=datetime(2021, 6, 1), clock=fixed_clock) == ["year1month1", "year1month2", "year1month3"]


def test_end_only_starts_two_years_back(fixed_clock) -> None:
    slices = plan_slices(end=datetime(2019, 9, 1), clock=fixed_clock)

    assert slices[-1] == "year2month12"
    assert slices[0] == "year2month10"


def test_string_bounds_are_accepted(fixed_clock) -> None:
    assert plan_slices("2021-06-01", "2021-07-29 12:00:00", clock=fixed_clock) == [
        "year1month1",
        "year1month2",
        "year1month3",
    ]


def test_future_range_clamps_to_newest_window(fixed_clock) -> None:
    assert plan_slices(date(2021, 9, 1), date(2021, 10, 1), clock=fixed_clock) == ["year1month1"]


def test_ancient_range_clamps_to_oldest_window(fixed_clock) -> None:
    assert plan_slices(date(2015, 1, 1), date(2015, 2, 1), clock=fixed_clock) == ["year2month12"]


def test_selection_is_contiguous_subsequence(fixed_clock) -> None:
    slices = plan_slices(date(2020, 1, 1), date(2021, 1, 1), clock=fixed_clock)

    first = ALL_SLICES.index(slices[0])
    assert slices == list(ALL_SLICES[first : first + len(slices)])


def test_start_after_end_is_rejected(fixed_clock) -> None:
    with pytest.raises(DataValidationError):
        plan_slices(date(2021, 5, 1), date(2021, 4, 1), clock=fixed_clock)


def test_negative_padding_is_rejected(fixed_clock) -> None:
    with pytest.raises(DataValidationError):
        plan_slices(date(2021, 3, 1), date(2021, 4, 1), clock=fixed_clock, padding=-1)


def test_end_only_before_the_horizon_clamps_to_oldest_window(fixed_clock) -> None:
    assert plan_slices(end="2019-01-01", clock=fixed_clock) == ["year2month12"]


def test_future_start_only_clamps_to_newest_window(fixed_clock) -> None:
    assert plan_slices(start="2021-09-01", clock=fixed_clock) == ["year1month1"]


def test_timezone_aware_bounds_are_accepted(fixed_clock) -> None:
    slices = plan_slices("2021-06-01T00:00:00Z", "2021-07-29T00:00:00+00:00", clock=fixed_clock)

    assert slices == ["year1month1", "year1month2", "year1month3"]


def test_planning_is_deterministic(fixed_clock) -> None:
    first = plan_slices(date(2020, 3, 15), date(2020, 9, 15), clock=fixed_clock)
    second = plan_slices(date(2020, 3, 15), date(2020, 9, 15), clock=fixed_clock)

    assert first == second
    assert first == plan_slices(date(2020, 3, 15), date(2020, 9, 15), clock=FixedClock(fixed_clock.now()))
