"""
Availability engine - the single entry point for slot computation.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O). Every page that
offers appointment times (admin schedule, booking wizard, barber schedule,
appointment editing) goes through ``compute_available_slots``.
"""

import logging
from datetime import date
from typing import Optional, Sequence

from pendulum import DateTime

from .conflicts import build_occupied
from .exceptions import InvalidRequest
from .models import (
    BarberDaySchedule,
    ClosedDay,
    DayHours,
    ExistingAppointment,
    SlotRequest,
    SlotResult,
)
from .schedule_resolver import resolve_window
from .slot_generator import generate_slots
from .time_utils import DEFAULT_TIMEZONE, as_calendar_date

logger = logging.getLogger(__name__)

DEFAULT_STEP_MINUTES = 15


def validate_request(request: SlotRequest) -> None:
    """
    Reject requests that would loop forever or make no sense.

    Raises:
        InvalidRequest: If duration or step is not a positive integer
    """
    for name in ("duration_minutes", "step_minutes"):
        value = getattr(request, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidRequest(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise InvalidRequest(f"{name} must be greater than zero, got {value}")


def compute_available_slots(request: SlotRequest) -> SlotResult:
    """
    Compute the bookable start times for one barber on one day.

    Algorithm:
    1. Resolve the effective window (shop hours x barber hours, lunch)
    2. Collect the barber's occupied intervals for the day
    3. Walk the window in steps, dropping past, lunch and booked slots

    A closed day yields an empty result carrying the reason.

    Raises:
        InvalidRequest: If duration or step is not positive
        InvalidTimeFormat: If stored schedule times are malformed
    """
    validate_request(request)

    window = resolve_window(
        request.date,
        request.shop_hours,
        request.barber_schedule,
        tz=request.timezone,
    )
    if isinstance(window, ClosedDay):
        logger.debug("No availability on %s: %s", request.date, window.reason.value)
        return SlotResult(closed=window)

    occupied = build_occupied(
        request.existing_appointments,
        request.barber_id,
        request.date,
        tz=request.timezone,
        exclude_appointment_id=request.exclude_appointment_id,
    )

    slots = tuple(
        generate_slots(
            window,
            occupied,
            request.duration_minutes,
            request.step_minutes,
            request.now,
            request.date,
            tz=request.timezone,
        )
    )
    logger.debug(
        "Found %d slot(s) for barber %s on %s (%d occupied interval(s))",
        len(slots),
        request.barber_id,
        request.date,
        len(occupied),
    )
    return SlotResult(slots=slots)


class AvailabilityEngine:
    """
    Convenience wrapper binding the timezone and step granularity of a
    barbershop, so callers only pass what changes per query.
    """

    def __init__(self, step_minutes: int = DEFAULT_STEP_MINUTES, timezone: str = DEFAULT_TIMEZONE):
        self.step_minutes = step_minutes
        self.timezone = timezone

    def build_request(
        self,
        *,
        day: date,
        barber_id: str,
        shop_hours: Sequence[DayHours],
        barber_schedule: Sequence[BarberDaySchedule],
        existing_appointments: Sequence[ExistingAppointment],
        duration_minutes: int,
        now: DateTime,
        step_minutes: Optional[int] = None,
        exclude_appointment_id: Optional[str] = None,
    ) -> SlotRequest:
        return SlotRequest(
            date=as_calendar_date(day, self.timezone),
            barber_id=barber_id,
            shop_hours=tuple(shop_hours),
            barber_schedule=tuple(barber_schedule),
            existing_appointments=tuple(existing_appointments),
            duration_minutes=duration_minutes,
            step_minutes=self.step_minutes if step_minutes is None else step_minutes,
            now=now,
            timezone=self.timezone,
            exclude_appointment_id=exclude_appointment_id,
        )

    def compute_available_slots(self, request: SlotRequest) -> SlotResult:
        return compute_available_slots(request)
