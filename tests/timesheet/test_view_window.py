from datetime import date, timedelta

import pytest

from src.timesheet_system.timesheet_system.core.enums import ViewMode
from src.timesheet_system.timesheet_system.timesheet.view_window import (
    anchor_for,
    build_view_window,
    shift_anchor,
)


def test_week_window_runs_monday_to_sunday(today):
    window = build_view_window(today, ViewMode.WEEK, today=today)

    assert len(window) == 7
    assert window.start == date(2024, 1, 8)
    assert window.end == date(2024, 1, 14)
    assert [d.day_name for d in window] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert [d.date for d in window if d.is_today] == [today]


def test_sunday_belongs_to_the_week_that_started_on_monday():
    sunday = date(2024, 1, 14)
    assert anchor_for(sunday, ViewMode.WEEK) == date(2024, 1, 8)


def test_month_window_covers_every_day_of_the_month(today):
    window = build_view_window(date(2024, 2, 17), ViewMode.MONTH, today=today)

    assert len(window) == 29
    assert window.start == date(2024, 2, 1)
    assert window.end == date(2024, 2, 29)
    assert not any(d.is_today for d in window)


@pytest.mark.parametrize(
    "year, month, length",
    [(2023, 2, 28), (2024, 2, 29), (2024, 4, 30), (2024, 1, 31), (2024, 12, 31)],
)
def test_month_window_days_are_consecutive(today, year, month, length):
    window = build_view_window(date(year, month, 15), ViewMode.MONTH, today=today)
    days = [d.date for d in window]

    assert len(days) == length
    assert days[0] == date(year, month, 1)
    assert days[-1] == date(year, month, length)
    assert all(b - a == timedelta(days=1) for a, b in zip(days, days[1:]))


def test_day_window_has_one_day(today):
    window = build_view_window(today, ViewMode.DAY, today=today)

    assert len(window) == 1
    assert window.days[0].to_dict() == {
        "date": "2024-01-10",
        "day_name": "Wed",
        "day_number": 10,
        "month_name": "Jan",
        "is_today": True,
    }


def test_contains_is_inclusive_on_both_ends(today):
    window = build_view_window(today, ViewMode.WEEK, today=today)

    assert window.contains(date(2024, 1, 8))
    assert window.contains(date(2024, 1, 14))
    assert not window.contains(date(2024, 1, 7))
    assert not window.contains(date(2024, 1, 15))


def test_shift_anchor_moves_by_view_granularity():
    assert shift_anchor(date(2024, 1, 8), ViewMode.WEEK, -1) == date(2024, 1, 1)
    assert shift_anchor(date(2024, 1, 10), ViewMode.DAY, 1) == date(2024, 1, 11)
    assert shift_anchor(date(2024, 1, 31), ViewMode.MONTH, 1) == date(2024, 2, 1)
    assert shift_anchor(date(2024, 1, 1), ViewMode.MONTH, -1) == date(2023, 12, 1)
