"""Tests for due-date labels and timestamp formatting."""
from datetime import date, datetime, timezone

from taskboard.utils.dates import (
    describe_due_date, format_timestamp, default_quick_due_date,
    NEUTRAL, WARNING, INFO, ERROR
)

TODAY = date(2024, 6, 10)


def test_absent_due_date():
    assert describe_due_date(None, TODAY) == ('No due date', NEUTRAL)
    assert describe_due_date('', TODAY) == ('No due date', NEUTRAL)


def test_today_and_tomorrow():
    assert describe_due_date('2024-06-10', TODAY) == ('Today', WARNING)
    assert describe_due_date('2024-06-11', TODAY) == ('Tomorrow', INFO)


def test_overdue():
    assert describe_due_date('2024-06-09', TODAY) == ('Overdue', ERROR)
    assert describe_due_date('2023-12-31', TODAY).category == ERROR


def test_future_date_is_formatted():
    label = describe_due_date('2024-07-04', TODAY)
    assert label.label == 'Jul 4, 2024'
    assert label.category == NEUTRAL


def test_accepts_date_objects():
    assert describe_due_date(date(2024, 6, 10), TODAY).label == 'Today'


def test_malformed_due_date_never_raises():
    assert describe_due_date('31/12/2024', TODAY) == ('Invalid date', NEUTRAL)
    assert describe_due_date('soon', TODAY) == ('Invalid date', NEUTRAL)


def test_format_timestamp():
    assert format_timestamp(datetime(2024, 6, 5, 14, 30, tzinfo=timezone.utc)) == 'Jun 5, 2024'
    assert format_timestamp('2024-06-05T14:30:00Z') == 'Jun 5, 2024'
    assert format_timestamp('garbage') == ''
    assert format_timestamp(None) == ''


def test_quick_due_date_is_three_days_out():
    assert default_quick_due_date(TODAY) == date(2024, 6, 13)
