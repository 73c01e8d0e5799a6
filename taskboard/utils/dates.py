"""Due-date labels and timestamp formatting for the views."""
from collections import namedtuple
from datetime import date, datetime, timedelta

NEUTRAL = 'neutral'
WARNING = 'warning'
INFO = 'info'
ERROR = 'error'

QUICK_ADD_DAYS = 3

DueDateLabel = namedtuple('DueDateLabel', ['label', 'category'])


def _format_day(value):
    # "Jun 5, 2024"; strftime's %d would zero-pad the day
    return f"{value:%b} {value.day}, {value.year}"


def _parse_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value).strip().replace('Z', '+00:00')).date()


def describe_due_date(value, today=None):
    """Map a due date (ISO string, date, or None) to a label and urgency category.

    Never raises: malformed input gives ("Invalid date", "neutral").
    """
    if value is None or value == '':
        return DueDateLabel('No due date', NEUTRAL)
    try:
        due = _parse_date(value)
    except (TypeError, ValueError):
        return DueDateLabel('Invalid date', NEUTRAL)

    today = today or date.today()
    if due == today:
        return DueDateLabel('Today', WARNING)
    if due == today + timedelta(days=1):
        return DueDateLabel('Tomorrow', INFO)
    if due < today:
        return DueDateLabel('Overdue', ERROR)
    return DueDateLabel(_format_day(due), NEUTRAL)


def format_timestamp(value):
    if not value:
        return ''
    try:
        return _format_day(_parse_date(value))
    except (TypeError, ValueError):
        return ''


def default_quick_due_date(today=None):
    """Due date preset by the quick-add action."""
    return (today or date.today()) + timedelta(days=QUICK_ADD_DAYS)
