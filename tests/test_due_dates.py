from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from habit_tracker.errors import InvalidFrequency
from habit_tracker.services.due_dates import compute_next_due_date, initial_due_date, parse_frequency
from habit_tracker.services.habit_state import LogEvent, local_date_for


def test_weekly_habit_completed_on_start_date():
    update = compute_next_due_date(date(2024, 1, 1), 7, date(2024, 1, 1))
    assert update.last_execution_date == date(2024, 1, 1)
    assert update.next_execution_date == date(2024, 1, 8)


@pytest.mark.parametrize("d", [date(2024, 1, 1), date(2024, 1, 28), date(2024, 2, 27), date(2023, 12, 30)])
@pytest.mark.parametrize("f", [1, 3, 7, 30])
def test_next_due_is_completion_plus_frequency(d, f):
    update = compute_next_due_date(d, f, d)
    assert update.next_execution_date == d + timedelta(days=f)
    assert update.last_execution_date == d


def test_month_and_leap_day_boundaries():
    assert compute_next_due_date(date(2024, 1, 1), 7, date(2024, 1, 28)).next_execution_date == date(2024, 2, 4)
    assert compute_next_due_date(date(2024, 1, 1), 3, date(2024, 2, 27)).next_execution_date == date(2024, 3, 1)
    assert compute_next_due_date(date(2024, 1, 1), 2, date(2024, 12, 31)).next_execution_date == date(2025, 1, 2)


def test_no_drift_across_dst_start_in_new_york():
    # 23:30 on the night clocks spring forward; UTC has already moved to the next day
    occurred = datetime(2024, 3, 11, 3, 30, tzinfo=timezone.utc)
    event = LogEvent.create("completed", occurred, "America/New_York")
    assert event.local_date == date(2024, 3, 10)

    update = compute_next_due_date(date(2024, 3, 1), 1, event.local_date)
    assert update.next_execution_date == date(2024, 3, 11)


def test_no_drift_across_dst_end():
    occurred = datetime(2024, 11, 1, 22, 0, tzinfo=ZoneInfo("America/New_York"))
    local = local_date_for(occurred, "America/New_York")
    assert compute_next_due_date(date(2024, 10, 1), 7, local).next_execution_date == date(2024, 11, 8)


def test_local_date_uses_log_zone_not_utc():
    occurred = datetime(2024, 1, 1, 20, 0, tzinfo=timezone.utc)
    assert local_date_for(occurred, "Asia/Kolkata") == date(2024, 1, 2)
    assert local_date_for(occurred, "America/Los_Angeles") == date(2024, 1, 1)


def test_naive_timestamp_keeps_its_calendar_date():
    assert local_date_for(datetime(2024, 1, 1, 23, 59), "Pacific/Auckland") == date(2024, 1, 1)


def test_future_completion_is_accepted():
    update = compute_next_due_date(date(2024, 1, 1), 5, date(2030, 6, 1))
    assert update.next_execution_date == date(2030, 6, 6)


@pytest.mark.parametrize("freq", [0, -3, "0", "-1", "abc", "", None, float("nan"), float("inf"), 2.5, True])
def test_invalid_frequency_means_no_change(freq):
    assert compute_next_due_date(date(2024, 1, 1), freq, date(2024, 1, 1)) is None


@pytest.mark.parametrize("freq,expected", [("7", 7), (7.0, 7), ("14 days", 14), (" 3 ", 3), ("+2", 2)])
def test_parse_frequency(freq, expected):
    assert parse_frequency(freq) == expected


def test_parse_frequency_rejects_non_positive():
    with pytest.raises(InvalidFrequency):
        parse_frequency("0")


def test_initial_due_date_is_start_date():
    assert initial_due_date(date(2024, 5, 5)) == date(2024, 5, 5)
