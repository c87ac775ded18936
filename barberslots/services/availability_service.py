"""
Application services for offering and booking appointment times.

The service fetches barbershop data through a data source adapter and
delegates the actual availability calculation to the domain-level
``AvailabilityEngine``. Keeping the data dependency behind a protocol lets
the REST client, the JSON repository or a test stub be plugged in.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional, Protocol, Sequence

import pendulum
from pendulum import DateTime

from ..adapters.payloads import BarberPayload, BarbershopPayload, ServicePayload
from ..domain.availability import AvailabilityEngine
from ..domain.exceptions import BarbershopNotFound, InvalidRequest, SlotNoLongerAvailable
from ..domain.models import ExistingAppointment, SlotRequest, SlotResult, TimeRange
from ..domain.time_utils import add_minutes, as_calendar_date, format_time, to_local

logger = logging.getLogger(__name__)


class BarbershopDataSource(Protocol):
    """Protocol describing the data access needed by the service."""

    async def get_barbershop(self, barbershop_id: str) -> BarbershopPayload:
        """Return the barbershop with its operating hours."""

    async def list_barbers(self, barbershop_id: str) -> List[BarberPayload]:
        """Return the barbers of a barbershop with their schedules."""

    async def list_services(self, barbershop_id: str) -> List[ServicePayload]:
        """Return the services offered by a barbershop."""

    async def list_appointments(
        self,
        barbershop_id: str,
        barber_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[ExistingAppointment]:
        """Return the barber's appointments overlapping [start, end)."""


def total_duration(
    services: Sequence[ServicePayload],
    barber: BarberPayload,
    service_ids: Sequence[str],
) -> int:
    """
    Sum the durations of the selected services.

    A barber's own duration for a service wins over the service default.

    Raises:
        InvalidRequest: If nothing is selected or a service id is unknown
    """
    if not service_ids:
        raise InvalidRequest("Select at least one service.")

    by_id: Dict[str, ServicePayload] = {service.id: service for service in services}
    overrides = barber.duration_overrides()

    unknown = [service_id for service_id in service_ids if service_id not in by_id]
    if unknown:
        raise InvalidRequest(f"Unknown service id(s): {', '.join(unknown)}")

    return sum(overrides.get(service_id, by_id[service_id].duration) for service_id in service_ids)


class AvailabilityService:
    """
    Orchestrates data retrieval and slot computation.

    Data is fetched fresh on every call, never patched in place, so a slot
    list always reflects the latest bookings.
    """

    def __init__(
        self,
        data_source: BarbershopDataSource,
        engine: AvailabilityEngine,
    ) -> None:
        self._data_source = data_source
        self._engine = engine

    async def get_barber(self, barbershop_id: str, barber_id: str) -> BarberPayload:
        for barber in await self._data_source.list_barbers(barbershop_id):
            if barber.id == barber_id:
                return barber
        raise BarbershopNotFound(f"Barbeiro não encontrado: {barber_id}")

    async def build_request(
        self,
        *,
        barbershop_id: str,
        barber_id: str,
        day: date,
        service_ids: Sequence[str],
        now: Optional[DateTime] = None,
        exclude_appointment_id: Optional[str] = None,
    ) -> SlotRequest:
        """Fetch everything the engine needs for one barber and day."""
        tz = self._engine.timezone
        day = as_calendar_date(day, tz)

        barbershop = await self._data_source.get_barbershop(barbershop_id)
        barber = await self.get_barber(barbershop.id, barber_id)
        services = await self._data_source.list_services(barbershop.id)
        duration = total_duration(services, barber, service_ids)

        day_start = pendulum.datetime(day.year, day.month, day.day, tz=tz)
        appointments = await self._data_source.list_appointments(
            barbershop.id,
            barber_id,
            day_start,
            day_start.add(days=1),
        )

        return self._engine.build_request(
            day=day,
            barber_id=barber_id,
            shop_hours=barbershop.hours_to_domain(),
            barber_schedule=barber.schedule_to_domain(),
            existing_appointments=appointments,
            duration_minutes=duration,
            now=to_local(now, tz) if now is not None else pendulum.now(tz),
            exclude_appointment_id=exclude_appointment_id,
        )

    async def available_times(
        self,
        *,
        barbershop_id: str,
        barber_id: str,
        day: date,
        service_ids: Sequence[str],
        now: Optional[DateTime] = None,
        exclude_appointment_id: Optional[str] = None,
    ) -> SlotResult:
        """Available start times for the selected services."""
        request = await self.build_request(
            barbershop_id=barbershop_id,
            barber_id=barber_id,
            day=day,
            service_ids=service_ids,
            now=now,
            exclude_appointment_id=exclude_appointment_id,
        )
        return self._engine.compute_available_slots(request)

    async def ensure_slot_available(
        self,
        *,
        barbershop_id: str,
        barber_id: str,
        start_time: DateTime,
        service_ids: Sequence[str],
        now: Optional[DateTime] = None,
        exclude_appointment_id: Optional[str] = None,
    ) -> TimeRange:
        """
        Authoritative re-check right before an appointment is saved.

        Recomputes availability from freshly fetched data; two clients that
        were both offered the same time cannot both pass this check once the
        first booking is stored.

        Returns:
            The slot to persist, [start_time, start_time + duration)

        Raises:
            SlotNoLongerAvailable: If ``start_time`` is not offered any more
        """
        tz = self._engine.timezone
        start = to_local(start_time, tz)

        request = await self.build_request(
            barbershop_id=barbershop_id,
            barber_id=barber_id,
            day=start.date(),
            service_ids=service_ids,
            now=now,
            exclude_appointment_id=exclude_appointment_id,
        )
        result = self._engine.compute_available_slots(request)

        if start not in result.slots:
            logger.info(
                "Rejected booking for barber %s at %s: slot no longer available",
                barber_id,
                start,
            )
            raise SlotNoLongerAvailable(
                f"O horário {format_time(start)} de {start.format('DD/MM/YYYY')} "
                "não está mais disponível. Escolha outro horário."
            )

        return TimeRange(start=start, end=add_minutes(start, request.duration_minutes))
