"""
Enumerates bookable start times inside a resolved window.

Pure domain logic: no I/O, no clock access. "Now" is passed in so results
are reproducible.
"""

from datetime import date
from typing import Iterator, Optional, Sequence

from pendulum import DateTime

from .models import EffectiveWindow, TimeRange
from .time_utils import DEFAULT_TIMEZONE, add_minutes, is_same_day

# Source data has minute resolution, so the last instant of a slot or of a
# lunch break is one minute before its end.
TICK_MINUTES = 1


def overlaps_lunch(slot_start: DateTime, slot_end: DateTime, lunch: Optional[TimeRange]) -> bool:
    """
    Conservative lunch check.

    A slot is rejected when it starts inside lunch, when its last minute
    falls inside lunch, or when it straddles the whole lunch break.
    """
    if lunch is None:
        return False

    last_lunch_minute = add_minutes(lunch.end, -TICK_MINUTES)

    starts_inside = lunch.start <= slot_start <= last_lunch_minute
    ends_inside = lunch.start <= add_minutes(slot_end, -TICK_MINUTES) <= last_lunch_minute
    straddles = slot_start < lunch.start and slot_end > lunch.end

    return starts_inside or ends_inside or straddles


def overlaps_booking(slot_start: DateTime, slot_end: DateTime, occupied: Sequence[TimeRange]) -> bool:
    slot = TimeRange(start=slot_start, end=slot_end)
    return any(slot.overlaps(busy) for busy in occupied)


def generate_slots(
    window: EffectiveWindow,
    occupied: Sequence[TimeRange],
    duration_minutes: int,
    step_minutes: int,
    now: DateTime,
    day: date,
    tz: str = DEFAULT_TIMEZONE,
) -> Iterator[DateTime]:
    """
    Yield every admissible start time in ascending order.

    Walks from the effective open time in ``step_minutes`` increments while
    a slot of ``duration_minutes`` still ends by the effective close time.
    On the current day, start times earlier than ``now`` are skipped.
    Callers validate that duration and step are positive.
    """
    today = is_same_day(now, day, tz)
    current = window.effective_open

    while add_minutes(current, duration_minutes) <= window.effective_close:
        if today and current < now:
            current = add_minutes(current, step_minutes)
            continue

        slot_end = add_minutes(current, duration_minutes)

        if not overlaps_lunch(current, slot_end, window.lunch) and not overlaps_booking(
            current, slot_end, occupied
        ):
            yield current

        current = add_minutes(current, step_minutes)
