"""
Builds the set of occupied intervals a new slot must not overlap.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional

from .models import AppointmentStatus, ExistingAppointment, TimeRange
from .time_utils import DEFAULT_TIMEZONE, is_same_day, to_local

logger = logging.getLogger(__name__)


def build_occupied(
    existing_appointments: Iterable[ExistingAppointment],
    barber_id: str,
    day: date,
    tz: str = DEFAULT_TIMEZONE,
    exclude_appointment_id: Optional[str] = None,
) -> List[TimeRange]:
    """
    Collect the [start, end) ranges booked for ``barber_id`` on ``day``.

    Day membership is decided by the local calendar date of the appointment
    start. Cancelled appointments and the one being edited
    (``exclude_appointment_id``) do not occupy time. The result is not sorted.
    """
    occupied: List[TimeRange] = []

    for appointment in existing_appointments:
        if appointment.barber_id != barber_id:
            continue
        if appointment.status == AppointmentStatus.CANCELLED:
            continue
        if exclude_appointment_id is not None and appointment.appointment_id == exclude_appointment_id:
            continue
        if not is_same_day(appointment.start_time, day, tz):
            continue

        start = to_local(appointment.start_time, tz)
        end = to_local(appointment.end_time, tz)
        if start >= end:
            logger.warning(
                "Skipping appointment %s: end %s is not after start %s",
                appointment.appointment_id or "<unsaved>",
                end,
                start,
            )
            continue

        occupied.append(TimeRange(start=start, end=end))

    return occupied
