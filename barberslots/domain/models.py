"""
Domain models for barbershop schedules and slot calculations.
"""

import unicodedata
from dataclasses import dataclass, field
from datetime import date
from enum import Enum, IntEnum
from typing import Iterator, List, Optional, Sequence, Tuple

from pendulum import DateTime

from .time_utils import DEFAULT_TIMEZONE, format_time


def _normalize_day_name(value: str) -> str:
    """Strip accents and everything that is not a letter: "Terça-feira" -> "tercafeira"."""
    decomposed = unicodedata.normalize("NFD", value or "")
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return "".join(ch for ch in stripped.lower() if "a" <= ch <= "z")


class WeekDay(IntEnum):
    """Day of the week, Sunday = 0."""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def from_date(cls, value: date) -> "WeekDay":
        """Weekday of a calendar date (isoweekday is 1=Monday .. 7=Sunday)."""
        return cls(value.isoweekday() % 7)

    @classmethod
    def from_name(cls, name: str) -> "WeekDay":
        """
        Resolve a stored weekday name.

        Accepts Portuguese and English names, with or without accents and
        the "-feira" suffix, and unambiguous prefixes ("seg", "sex").

        Raises:
            ValueError: If the name matches no weekday or more than one
        """
        normalized = _normalize_day_name(name)
        if not normalized:
            raise ValueError(f"Unknown weekday name: {name!r}")

        matches = set()
        for day, aliases in _DAY_ALIASES.items():
            for alias in aliases:
                if (
                    normalized == alias
                    or normalized.startswith(alias)
                    or alias.startswith(normalized)
                ):
                    matches.add(day)

        if len(matches) != 1:
            raise ValueError(f"Unknown weekday name: {name!r}")
        return matches.pop()

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES = {
    WeekDay.SUNDAY: "Domingo",
    WeekDay.MONDAY: "Segunda-feira",
    WeekDay.TUESDAY: "Terça-feira",
    WeekDay.WEDNESDAY: "Quarta-feira",
    WeekDay.THURSDAY: "Quinta-feira",
    WeekDay.FRIDAY: "Sexta-feira",
    WeekDay.SATURDAY: "Sábado",
}

_DAY_ALIASES = {
    WeekDay.SUNDAY: ("domingo", "sunday"),
    WeekDay.MONDAY: ("segundafeira", "segunda", "monday"),
    WeekDay.TUESDAY: ("tercafeira", "terca", "tuesday"),
    WeekDay.WEDNESDAY: ("quartafeira", "quarta", "wednesday"),
    WeekDay.THURSDAY: ("quintafeira", "quinta", "thursday"),
    WeekDay.FRIDAY: ("sextafeira", "sexta", "friday"),
    WeekDay.SATURDAY: ("sabado", "saturday"),
}


CLOSED = "closed"


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable half-open time range [start, end).

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def overlaps(self, other: "TimeRange") -> bool:
        """Half-open overlap: ranges that only touch do not overlap."""
        return self.start < other.end and self.end > other.start

    def intersect(self, other: "TimeRange") -> Optional["TimeRange"]:
        """The common part of both ranges, or None when they do not overlap."""
        if not self.overlaps(other):
            return None
        return TimeRange(start=max(self.start, other.start), end=min(self.end, other.end))

    def __str__(self) -> str:
        return f"{self.start.format('DD/MM/YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class DayHours:
    """
    Public operating hours of a barbershop for one weekday.

    ``open``/``close`` are "HH:MM" strings or the literal "closed".
    """
    day: WeekDay
    open: str
    close: str

    @property
    def is_closed(self) -> bool:
        return CLOSED in (self.open.strip().lower(), self.close.strip().lower())


@dataclass(frozen=True)
class LunchBreak:
    start: str
    end: str


@dataclass(frozen=True)
class BarberDaySchedule:
    """Working hours of a barber for one weekday."""
    day: WeekDay
    start: str
    end: str
    lunch_time: Optional[LunchBreak] = None


class AppointmentStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ExistingAppointment:
    """Read-only projection of a booked appointment, used for conflict checks."""
    barber_id: str
    start_time: DateTime
    end_time: DateTime
    appointment_id: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.CONFIRMED


@dataclass(frozen=True)
class SlotRequest:
    """
    Parameters of a single availability query.

    Built fresh per (barbershop, barber, date, services) and thrown away
    after the computation.
    """
    date: date
    barber_id: str
    shop_hours: Sequence[DayHours]
    barber_schedule: Sequence[BarberDaySchedule]
    existing_appointments: Sequence[ExistingAppointment]
    duration_minutes: int
    step_minutes: int
    now: DateTime
    timezone: str = DEFAULT_TIMEZONE
    exclude_appointment_id: Optional[str] = None


@dataclass(frozen=True)
class EffectiveWindow:
    """Bookable window of a day: shop hours intersected with barber hours."""
    hours: TimeRange
    lunch: Optional[TimeRange] = None

    @property
    def effective_open(self) -> DateTime:
        return self.hours.start

    @property
    def effective_close(self) -> DateTime:
        return self.hours.end


class ClosedReason(str, Enum):
    SHOP_CLOSED = "shop_closed"
    BARBER_OFF = "barber_off"
    NO_OVERLAP = "no_overlap"


@dataclass(frozen=True)
class ClosedDay:
    """No bookable window on the requested date. A normal outcome, not an error."""
    reason: ClosedReason

    @property
    def message(self) -> str:
        return _CLOSED_MESSAGES[self.reason]


_CLOSED_MESSAGES = {
    ClosedReason.SHOP_CLOSED: "A barbearia está fechada neste dia.",
    ClosedReason.BARBER_OFF: "O barbeiro não trabalha neste dia.",
    ClosedReason.NO_OVERLAP: "O horário do barbeiro não coincide com o da barbearia neste dia.",
}


@dataclass(frozen=True)
class SlotResult:
    """
    Ordered available start times for one day.

    An empty result is valid; ``closed`` tells why, when the day itself
    has no window.
    """
    slots: Tuple[DateTime, ...] = field(default_factory=tuple)
    closed: Optional[ClosedDay] = None

    def __iter__(self) -> Iterator[DateTime]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)

    def __getitem__(self, index: int) -> DateTime:
        return self.slots[index]

    def display_times(self) -> List[str]:
        """Start times as 24-hour "HH:MM" strings."""
        return [format_time(slot) for slot in self.slots]
