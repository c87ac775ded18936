"""
Save-time validation of schedule tables.

The engine tolerates malformed data by offering no slots; these checks are
meant for the settings screens so that swapped open/close times or a lunch
break outside working hours are reported instead of silently hiding a day.
"""

from datetime import date
from typing import Callable, List, Optional, Sequence

from pendulum import DateTime

from .exceptions import InvalidSchedule, InvalidTimeFormat
from .models import BarberDaySchedule, DayHours, WeekDay
from .time_utils import parse_time

# Any fixed day works: only the wall-clock order of times is compared.
_REFERENCE_DATE = date(2000, 1, 3)


def _parse(text: str, label: str, problems: List[str]) -> Optional[DateTime]:
    try:
        return parse_time(text, _REFERENCE_DATE)
    except InvalidTimeFormat:
        problems.append(f"{label}: invalid time {text!r}")
        return None


def _check_duplicates(days: Sequence[WeekDay], problems: List[str]) -> None:
    seen = set()
    for day in days:
        if day in seen:
            problems.append(f"{day.display_name}: duplicate entry")
        seen.add(day)


def collect_shop_hours_problems(hours: Sequence[DayHours]) -> List[str]:
    problems: List[str] = []
    _check_duplicates([entry.day for entry in hours], problems)

    for entry in hours:
        label = entry.day.display_name
        open_closed = entry.open.strip().lower() == "closed"
        close_closed = entry.close.strip().lower() == "closed"
        if open_closed or close_closed:
            if open_closed != close_closed:
                problems.append(f"{label}: open and close must both be 'closed'")
            continue

        opens = _parse(entry.open, label, problems)
        closes = _parse(entry.close, label, problems)
        if opens and closes and opens >= closes:
            problems.append(f"{label}: opening time {entry.open} is not before closing time {entry.close}")

    return problems


def collect_barber_schedule_problems(schedule: Sequence[BarberDaySchedule]) -> List[str]:
    problems: List[str] = []
    _check_duplicates([entry.day for entry in schedule], problems)

    for entry in schedule:
        label = entry.day.display_name
        start = _parse(entry.start, label, problems)
        end = _parse(entry.end, label, problems)
        if start and end and start >= end:
            problems.append(f"{label}: start {entry.start} is not before end {entry.end}")
            continue

        lunch = entry.lunch_time
        if lunch is None:
            continue

        lunch_start = _parse(lunch.start, f"{label} lunch", problems)
        lunch_end = _parse(lunch.end, f"{label} lunch", problems)
        if not (lunch_start and lunch_end):
            continue
        if lunch_start >= lunch_end:
            problems.append(f"{label}: lunch start {lunch.start} is not before lunch end {lunch.end}")
        elif start and end and (lunch_start < start or lunch_end > end):
            problems.append(
                f"{label}: lunch {lunch.start}-{lunch.end} is outside working hours {entry.start}-{entry.end}"
            )

    return problems


def _raise_if_any(collect: Callable[[Sequence], List[str]], entries: Sequence) -> None:
    problems = collect(entries)
    if problems:
        raise InvalidSchedule(problems)


def validate_shop_hours(hours: Sequence[DayHours]) -> None:
    """
    Raises:
        InvalidSchedule: Listing every problem found
    """
    _raise_if_any(collect_shop_hours_problems, hours)


def validate_barber_schedule(schedule: Sequence[BarberDaySchedule]) -> None:
    """
    Raises:
        InvalidSchedule: Listing every problem found
    """
    _raise_if_any(collect_barber_schedule_problems, schedule)
