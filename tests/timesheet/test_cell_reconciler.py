from datetime import date, datetime, time

import pytest

from src.timesheet_system.timesheet_system.core.enums import CellAction, ViewMode
from src.timesheet_system.timesheet_system.core.exceptions import NotFoundError, ValidationError
from src.timesheet_system.timesheet_system.timesheet.aggregator import ActivityKey, aggregate
from src.timesheet_system.timesheet_system.timesheet.reconciler import CellEditReconciler
from src.timesheet_system.timesheet_system.timesheet.view_window import build_view_window

DAY = date(2024, 1, 9)
KEY = ActivityKey(1, "Design")


@pytest.fixture
def reconciler(entries_repo, projects_repo):
    return CellEditReconciler(entries_repo, projects_repo)


def _apply(reconciler, entries_repo, user, target_seconds, *, key=KEY, day=DAY, description=""):
    return reconciler.apply(
        visible_entries=entries_repo.list_for_user(user.user_id),
        key=key,
        day=day,
        target_seconds=target_seconds,
        acting_user=user,
        description=description,
    )


def test_empty_cell_creates_entry_starting_at_nine(reconciler, entries_repo, employee):
    result = _apply(reconciler, entries_repo, employee, 2 * 3600 + 30 * 60, description="wireframes")

    assert result.action == CellAction.CREATED
    created = entries_repo.get_by_id(result.entry_ids[0])
    assert created.user_id == employee.user_id
    assert created.task_name == "Design"
    assert created.description == "wireframes"
    assert created.start_time == datetime(2024, 1, 9, 9, 0)
    assert created.end_time == datetime(2024, 1, 9, 11, 30)
    assert created.total_time == 150


def test_custom_entry_start_is_honoured(entries_repo, projects_repo, employee):
    reconciler = CellEditReconciler(entries_repo, projects_repo, entry_start=time(8, 0))

    result = _apply(reconciler, entries_repo, employee, 3600)

    assert entries_repo.get_by_id(result.entry_ids[0]).start_time == datetime(2024, 1, 9, 8, 0)


def test_zero_on_empty_cell_does_nothing(reconciler, entries_repo, employee):
    result = _apply(reconciler, entries_repo, employee, 0)

    assert result.action == CellAction.NOOP
    assert entries_repo.list_all() == []


def test_unknown_project_is_rejected_on_create(reconciler, entries_repo, employee):
    with pytest.raises(NotFoundError):
        _apply(reconciler, entries_repo, employee, 3600, key=ActivityKey(99, "Design"))
    assert entries_repo.list_all() == []


def test_missing_user_and_negative_target_are_rejected(reconciler, entries_repo, employee):
    with pytest.raises(ValidationError):
        reconciler.apply(visible_entries=[], key=KEY, day=DAY, target_seconds=3600, acting_user=None)
    with pytest.raises(ValidationError):
        _apply(reconciler, entries_repo, employee, -60)


def test_unchanged_value_is_a_noop(reconciler, entries_repo, employee):
    entry = entries_repo.add(start=datetime(2024, 1, 9, 9, 0), end=datetime(2024, 1, 9, 10, 0), total_time=60)

    result = _apply(reconciler, entries_repo, employee, 3600)

    assert result.action == CellAction.NOOP
    assert entries_repo.get_by_id(entry.entry_id).end_time == datetime(2024, 1, 9, 10, 0)


def test_growth_extends_the_latest_entry(reconciler, entries_repo, employee):
    late = entries_repo.add(start=datetime(2024, 1, 9, 13, 0), end=datetime(2024, 1, 9, 13, 30), total_time=30)
    early = entries_repo.add(start=datetime(2024, 1, 9, 9, 0), end=datetime(2024, 1, 9, 10, 0), total_time=60)

    result = _apply(reconciler, entries_repo, employee, 2 * 3600)

    assert result.action == CellAction.EXTENDED
    assert result.entry_ids == (late.entry_id,)
    assert entries_repo.get_by_id(late.entry_id).end_time == datetime(2024, 1, 9, 14, 0)
    assert entries_repo.get_by_id(late.entry_id).total_time == 60
    assert entries_repo.get_by_id(early.entry_id).end_time == datetime(2024, 1, 9, 10, 0)


def test_shrinking_a_single_entry(reconciler, entries_repo, employee):
    entry = entries_repo.add(start=datetime(2024, 1, 9, 9, 0), end=datetime(2024, 1, 9, 11, 0), total_time=120)

    result = _apply(reconciler, entries_repo, employee, 75 * 60)

    assert result.action == CellAction.SHRUNK
    updated = entries_repo.get_by_id(entry.entry_id)
    assert updated.end_time == datetime(2024, 1, 9, 10, 15)
    assert updated.total_time == 75


def test_shrinking_resets_the_latest_entry_to_the_new_total(reconciler, entries_repo, employee):
    entries_repo.add(start=datetime(2024, 1, 9, 9, 0), end=datetime(2024, 1, 9, 10, 0), total_time=60)
    late = entries_repo.add(start=datetime(2024, 1, 9, 13, 0), end=datetime(2024, 1, 9, 14, 0), total_time=60)

    result = _apply(reconciler, entries_repo, employee, 90 * 60)

    assert result.action == CellAction.SHRUNK
    # Only the latest entry is touched: it now spans the whole new total.
    assert entries_repo.get_by_id(late.entry_id).end_time == datetime(2024, 1, 9, 14, 30)


def test_zero_deletes_every_entry_of_the_cell(reconciler, entries_repo, employee):
    entries_repo.add(start=datetime(2024, 1, 9, 9, 0), end=datetime(2024, 1, 9, 10, 0))
    entries_repo.add(start=datetime(2024, 1, 9, 13, 0), end=datetime(2024, 1, 9, 14, 0))
    other_day = entries_repo.add(start=datetime(2024, 1, 10, 9, 0), end=datetime(2024, 1, 10, 10, 0))

    result = _apply(reconciler, entries_repo, employee, 0)

    assert result.action == CellAction.DELETED
    assert result.complete
    assert [e.entry_id for e in entries_repo.list_all()] == [other_day.entry_id]


def test_failed_deletions_do_not_stop_the_others(reconciler, entries_repo, employee):
    first = entries_repo.add(start=datetime(2024, 1, 9, 9, 0), end=datetime(2024, 1, 9, 10, 0))
    second = entries_repo.add(start=datetime(2024, 1, 9, 13, 0), end=datetime(2024, 1, 9, 14, 0))
    entries_repo.failing_deletes.add(first.entry_id)

    result = _apply(reconciler, entries_repo, employee, 0)

    assert not result.complete
    assert result.failed_ids == (first.entry_id,)
    assert result.entry_ids == (second.entry_id,)
    assert [e.entry_id for e in entries_repo.list_all()] == [first.entry_id]


def test_running_entries_are_not_part_of_the_cell(reconciler, entries_repo, employee):
    running = entries_repo.add(start=datetime(2024, 1, 9, 15, 0))

    result = _apply(reconciler, entries_repo, employee, 1800)

    assert result.action == CellAction.CREATED
    assert entries_repo.get_by_id(running.entry_id).end_time is None


def test_grid_shows_the_value_that_was_typed(reconciler, entries_repo, employee, today):
    window = build_view_window(today, ViewMode.WEEK, today=today)
    entries_repo.add(start=datetime(2024, 1, 9, 9, 0), end=datetime(2024, 1, 9, 10, 0))

    for target in (3 * 3600 + 15 * 60, 45 * 60, 2 * 3600):
        _apply(reconciler, entries_repo, employee, target)
        rows = aggregate(entries_repo.list_for_user(employee.user_id), window)
        assert rows[0].daily_seconds[DAY] == target


def test_two_hour_cell_set_to_one_hour(reconciler, entries_repo, employee, today):
    entries_repo.add(start=datetime(2024, 1, 9, 9, 0), end=datetime(2024, 1, 9, 11, 0), total_time=120)

    _apply(reconciler, entries_repo, employee, 3600)

    window = build_view_window(today, ViewMode.WEEK, today=today)
    rows = aggregate(entries_repo.list_for_user(employee.user_id), window)
    assert rows[0].daily_seconds == {DAY: 3600}
