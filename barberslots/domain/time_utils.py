"""
Wall-clock helpers shared by the schedule resolver and the slot generator.

The whole system runs in a single timezone: every "HH:MM" value is read as
local time on the date it is anchored to.
"""

import re
from datetime import date, datetime

import pendulum
from pendulum import DateTime

from .exceptions import InvalidTimeFormat

DEFAULT_TIMEZONE = "America/Sao_Paulo"

_TIME_PATTERN = re.compile(r"([0-9]{2}):([0-9]{2})")


def as_calendar_date(value: date, tz: str = DEFAULT_TIMEZONE) -> date:
    """
    Calendar date of ``value`` in the shop timezone.

    Plain dates pass through; aware datetimes are converted to ``tz``
    before the time part is dropped.
    """
    if isinstance(value, datetime):
        return to_local(value, tz).date()
    return value


def parse_time(text: str, anchor_date: date, tz: str = DEFAULT_TIMEZONE) -> DateTime:
    """
    Parse an "HH:MM" string into an instant on ``anchor_date``.

    Raises:
        InvalidTimeFormat: If the text is not two digits, a colon and two
            digits, or names a time that does not exist on a clock
    """
    match = _TIME_PATTERN.fullmatch(text) if isinstance(text, str) else None
    if not match:
        raise InvalidTimeFormat(f"Expected HH:MM, got {text!r}")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidTimeFormat(f"Time out of range: {text!r}")

    day = as_calendar_date(anchor_date, tz)
    return pendulum.datetime(day.year, day.month, day.day, hour, minute, tz=tz)


def add_minutes(instant: DateTime, minutes: int) -> DateTime:
    return instant.add(minutes=minutes)


def to_local(instant: datetime, tz: str = DEFAULT_TIMEZONE) -> DateTime:
    """
    Express an instant in the shop timezone.

    Naive datetimes are taken as already being shop-local.
    """
    if instant.tzinfo is None:
        return pendulum.instance(instant, tz=tz)
    return pendulum.instance(instant).in_timezone(tz)


def is_before(left: DateTime, right: DateTime) -> bool:
    return left < right


def is_within_range(instant: DateTime, start: DateTime, end: DateTime) -> bool:
    """Half-open containment: start <= instant < end."""
    return start <= instant < end


def is_same_day(instant: datetime, day: date, tz: str = DEFAULT_TIMEZONE) -> bool:
    """Whether ``instant`` falls on calendar ``day`` in the shop timezone."""
    return to_local(instant, tz).date() == as_calendar_date(day, tz)


def format_time(instant: DateTime) -> str:
    """24-hour display form, e.g. "09:45"."""
    return instant.strftime("%H:%M")
