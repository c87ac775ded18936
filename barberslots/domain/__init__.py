"""
Domain layer - Pure business logic without external dependencies.
"""

from .availability import DEFAULT_STEP_MINUTES, AvailabilityEngine, compute_available_slots
from .exceptions import (
    BarberSlotsError,
    BarbershopNotFound,
    DataSourceError,
    InvalidRequest,
    InvalidSchedule,
    InvalidTimeFormat,
    SlotNoLongerAvailable,
)
from .models import (
    AppointmentStatus,
    BarberDaySchedule,
    ClosedDay,
    ClosedReason,
    DayHours,
    EffectiveWindow,
    ExistingAppointment,
    LunchBreak,
    SlotRequest,
    SlotResult,
    TimeRange,
    WeekDay,
)

__all__ = [
    "DEFAULT_STEP_MINUTES",
    "AvailabilityEngine",
    "compute_available_slots",
    "BarberSlotsError",
    "BarbershopNotFound",
    "DataSourceError",
    "InvalidRequest",
    "InvalidSchedule",
    "InvalidTimeFormat",
    "SlotNoLongerAvailable",
    "AppointmentStatus",
    "BarberDaySchedule",
    "ClosedDay",
    "ClosedReason",
    "DayHours",
    "EffectiveWindow",
    "ExistingAppointment",
    "LunchBreak",
    "SlotRequest",
    "SlotResult",
    "TimeRange",
    "WeekDay",
]
