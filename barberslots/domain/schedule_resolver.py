"""
Resolves the bookable window of a single day.

The window is the intersection of the barbershop's operating hours and the
barber's working hours for the date's weekday, plus the barber's optional
lunch break.
"""

import logging
from datetime import date
from typing import Optional, Sequence, TypeVar, Union

from .models import (
    BarberDaySchedule,
    ClosedDay,
    ClosedReason,
    DayHours,
    EffectiveWindow,
    TimeRange,
    WeekDay,
)
from .time_utils import DEFAULT_TIMEZONE, as_calendar_date, parse_time

logger = logging.getLogger(__name__)

_Entry = TypeVar("_Entry", DayHours, BarberDaySchedule)


def find_entry_for_weekday(entries: Sequence[_Entry], weekday: WeekDay) -> Optional[_Entry]:
    """Return the first entry for ``weekday``, or None when the day is missing."""
    for entry in entries:
        if entry.day == weekday:
            return entry
    return None


def resolve_window(
    day: date,
    shop_hours: Sequence[DayHours],
    barber_schedule: Sequence[BarberDaySchedule],
    tz: str = DEFAULT_TIMEZONE,
) -> Union[EffectiveWindow, ClosedDay]:
    """
    Resolve the effective open/close window and lunch exclusion for ``day``.

    Returns:
        EffectiveWindow, or ClosedDay when the shop is closed, the barber
        does not work, or the two windows do not overlap

    Raises:
        InvalidTimeFormat: If one of the stored times is malformed
    """
    day = as_calendar_date(day, tz)
    weekday = WeekDay.from_date(day)

    shop_day = find_entry_for_weekday(shop_hours, weekday)
    if shop_day is None or shop_day.is_closed:
        return ClosedDay(ClosedReason.SHOP_CLOSED)

    barber_day = find_entry_for_weekday(barber_schedule, weekday)
    if barber_day is None:
        return ClosedDay(ClosedReason.BARBER_OFF)

    shop_range = _time_range(shop_day.open, shop_day.close, day, tz)
    barber_range = _time_range(barber_day.start, barber_day.end, day, tz)
    hours = shop_range.intersect(barber_range) if shop_range and barber_range else None

    if hours is None:
        logger.debug("No overlap between shop and barber hours on %s", day)
        return ClosedDay(ClosedReason.NO_OVERLAP)

    lunch = _resolve_lunch(barber_day, day, tz)

    window = EffectiveWindow(hours=hours, lunch=lunch)
    logger.debug("Resolved window for %s: %s (lunch: %s)", day, window.hours, lunch)
    return window


def _time_range(start: str, end: str, day: date, tz: str) -> Optional[TimeRange]:
    """Anchor an "HH:MM" pair to ``day``; None when the pair is empty or inverted."""
    range_start = parse_time(start, day, tz)
    range_end = parse_time(end, day, tz)
    if range_start >= range_end:
        return None
    return TimeRange(start=range_start, end=range_end)


def _resolve_lunch(barber_day: BarberDaySchedule, day: date, tz: str) -> Optional[TimeRange]:
    lunch_time = barber_day.lunch_time
    if lunch_time is None or not lunch_time.start or not lunch_time.end:
        return None

    lunch_start = parse_time(lunch_time.start, day, tz)
    lunch_end = parse_time(lunch_time.end, day, tz)

    if lunch_start >= lunch_end:
        logger.warning(
            "Ignoring lunch break %s-%s on %s: start is not before end",
            lunch_time.start,
            lunch_time.end,
            barber_day.day.display_name,
        )
        return None

    return TimeRange(start=lunch_start, end=lunch_end)
