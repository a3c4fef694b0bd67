"""
Due date parsing and formatting helpers.

Canvas due dates in this app always carry the fixed -04:00 offset used by the
Fall 2025 schedule.
"""
from datetime import datetime, timedelta, timezone

CANVAS_OFFSET = timezone(timedelta(hours=-4))
CANVAS_OFFSET_SUFFIX = "-04:00"


def parse_due_date(value):
    """
    Parse an ISO-8601 string into an aware datetime in the -04:00 offset.

    Naive values are taken to already be in -04:00. Raises ValueError for
    empty or unparseable input.
    """
    if value is None:
        raise ValueError("Missing date")
    text = str(value).strip()
    if not text:
        raise ValueError("Missing date")
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'

    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=CANVAS_OFFSET)
    return dt.astimezone(CANVAS_OFFSET)


def normalize_due_date(value):
    """Return value as YYYY-MM-DDTHH:MM:SS-04:00."""
    dt = parse_due_date(value)
    return dt.strftime('%Y-%m-%dT%H:%M:%S') + CANVAS_OFFSET_SUFFIX


def _hour_12(dt):
    return dt.hour % 12 or 12


def format_short_date(value):
    """Aug 30, 2025"""
    dt = parse_due_date(value)
    return f"{dt:%b} {dt.day}, {dt.year}"


def format_long_date(value):
    """Saturday, August 30, 2025"""
    dt = parse_due_date(value)
    return f"{dt:%A, %B} {dt.day}, {dt.year}"


def format_time(value):
    """11:59 PM"""
    dt = parse_due_date(value)
    return f"{_hour_12(dt)}:{dt:%M %p}"


def format_date_and_time(value):
    """Saturday, August 30, 2025 at 11:59 PM"""
    return f"{format_long_date(value)} at {format_time(value)}"


def input_date_value(value):
    """Value for an <input type="date">."""
    return parse_due_date(value).strftime('%Y-%m-%d')


def input_time_value(value):
    """Value for an <input type="time">."""
    return parse_due_date(value).strftime('%H:%M')
