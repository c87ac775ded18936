"""
Tests for the AvailabilityService orchestration layer.
"""

import asyncio
from typing import Dict, List

import pendulum
import pytest

from barberslots.adapters.payloads import BarberPayload, BarbershopPayload, ServicePayload
from barberslots.domain.availability import AvailabilityEngine
from barberslots.domain.exceptions import BarbershopNotFound, InvalidRequest, SlotNoLongerAvailable
from barberslots.domain.models import ClosedReason, ExistingAppointment
from barberslots.services.availability_service import AvailabilityService, total_duration

TZ = "America/Sao_Paulo"
MONDAY = pendulum.date(2024, 11, 25)
LONG_AGO = pendulum.parse("2020-01-01 00:00", tz=TZ)


class StubDataSource:
    """Minimal stub matching BarbershopDataSource."""

    def __init__(self, appointments: List[ExistingAppointment] = None):
        self.appointments = list(appointments or [])
        self.calls: List[Dict[str, str]] = []

    async def get_barbershop(self, barbershop_id):
        if barbershop_id != "shop-1":
            raise BarbershopNotFound(barbershop_id)
        return BarbershopPayload.model_validate({
            "id": "shop-1",
            "operatingHours": [
                {"day": "Domingo", "open": "closed", "close": "closed"},
                {"day": "Segunda-feira", "open": "09:00", "close": "18:00"},
            ],
        })

    async def list_barbers(self, barbershop_id):
        return [BarberPayload.model_validate({
            "id": "barber-1",
            "schedule": [
                {"day": "Segunda-feira", "start": "09:00", "end": "12:00"},
                {"day": "Domingo", "start": "09:00", "end": "12:00"},
            ],
            "services": [{"serviceId": "barba", "duration": 15}],
        })]

    async def list_services(self, barbershop_id):
        return [
            ServicePayload(id="corte", duration=30),
            ServicePayload(id="barba", duration=30),
        ]

    async def list_appointments(self, barbershop_id, barber_id, start, end):
        self.calls.append({
            "barber_id": barber_id,
            "start": start.to_datetime_string(),
            "end": end.to_datetime_string(),
        })
        return list(self.appointments)


def _booking(start, end, appointment_id=None):
    return ExistingAppointment(
        barber_id="barber-1",
        start_time=pendulum.parse(f"2024-11-25 {start}", tz=TZ),
        end_time=pendulum.parse(f"2024-11-25 {end}", tz=TZ),
        appointment_id=appointment_id,
    )


def _build_service(source: StubDataSource, step: int = 15) -> AvailabilityService:
    return AvailabilityService(source, AvailabilityEngine(step_minutes=step, timezone=TZ))


class TestTotalDuration:
    """Tests for total_duration."""

    def test_sum_with_barber_override(self):
        source = StubDataSource()
        services = asyncio.run(source.list_services("shop-1"))
        barber = asyncio.run(source.list_barbers("shop-1"))[0]

        assert total_duration(services, barber, ["corte"]) == 30
        assert total_duration(services, barber, ["corte", "barba"]) == 45

    def test_empty_selection(self):
        with pytest.raises(InvalidRequest, match="at least one service"):
            total_duration([], BarberPayload(id="b"), [])

    def test_unknown_service(self):
        with pytest.raises(InvalidRequest, match="Unknown service id"):
            total_duration([ServicePayload(id="corte", duration=30)], BarberPayload(id="b"), ["luzes"])


class TestAvailableTimes:
    """Tests for AvailabilityService.available_times."""

    def test_fetches_day_window_and_computes(self):
        source = StubDataSource(appointments=[_booking("10:00", "10:30")])
        service = _build_service(source)

        result = asyncio.run(service.available_times(
            barbershop_id="shop-1",
            barber_id="barber-1",
            day=MONDAY,
            service_ids=["corte"],
            now=LONG_AGO,
        ))

        assert source.calls == [{
            "barber_id": "barber-1",
            "start": "2024-11-25 00:00:00",
            "end": "2024-11-26 00:00:00",
        }]
        assert result.display_times() == [
            "09:00", "09:15", "09:30", "10:30", "10:45", "11:00", "11:15", "11:30",
        ]

    def test_closed_shop(self):
        service = _build_service(StubDataSource())

        result = asyncio.run(service.available_times(
            barbershop_id="shop-1",
            barber_id="barber-1",
            day=pendulum.date(2024, 11, 24),
            service_ids=["corte"],
            now=LONG_AGO,
        ))

        assert not result
        assert result.closed.reason == ClosedReason.SHOP_CLOSED

    def test_rescheduling_ignores_own_appointment(self):
        source = StubDataSource(appointments=[_booking("09:00", "12:00", appointment_id="mine")])
        service = _build_service(source, step=60)

        result = asyncio.run(service.available_times(
            barbershop_id="shop-1",
            barber_id="barber-1",
            day=MONDAY,
            service_ids=["corte"],
            now=LONG_AGO,
            exclude_appointment_id="mine",
        ))

        assert result.display_times() == ["09:00", "10:00", "11:00"]

    def test_unknown_barber(self):
        service = _build_service(StubDataSource())

        with pytest.raises(BarbershopNotFound, match="Barbeiro"):
            asyncio.run(service.available_times(
                barbershop_id="shop-1",
                barber_id="ghost",
                day=MONDAY,
                service_ids=["corte"],
            ))


class TestEnsureSlotAvailable:
    """Tests for the booking-time re-check."""

    def test_free_slot_returns_range(self):
        service = _build_service(StubDataSource())
        start = pendulum.parse("2024-11-25 10:30", tz=TZ)

        slot = asyncio.run(service.ensure_slot_available(
            barbershop_id="shop-1",
            barber_id="barber-1",
            start_time=start,
            service_ids=["corte", "barba"],
            now=LONG_AGO,
        ))

        assert slot.start == start
        assert slot.end == pendulum.parse("2024-11-25 11:15", tz=TZ)

    def test_accepts_utc_start_time(self):
        service = _build_service(StubDataSource())

        slot = asyncio.run(service.ensure_slot_available(
            barbershop_id="shop-1",
            barber_id="barber-1",
            start_time=pendulum.parse("2024-11-25T13:30:00Z"),
            service_ids=["corte"],
            now=LONG_AGO,
        ))

        assert slot.start.hour == 10

    def test_taken_slot_rejected(self):
        """Test that a slot booked by someone else in the meantime is refused."""
        source = StubDataSource()
        service = _build_service(source)
        start = pendulum.parse("2024-11-25 10:00", tz=TZ)

        source.appointments.append(_booking("10:00", "10:30"))

        with pytest.raises(SlotNoLongerAvailable, match="10:00"):
            asyncio.run(service.ensure_slot_available(
                barbershop_id="shop-1",
                barber_id="barber-1",
                start_time=start,
                service_ids=["corte"],
                now=LONG_AGO,
            ))

    def test_off_grid_start_rejected(self):
        service = _build_service(StubDataSource())

        with pytest.raises(SlotNoLongerAvailable):
            asyncio.run(service.ensure_slot_available(
                barbershop_id="shop-1",
                barber_id="barber-1",
                start_time=pendulum.parse("2024-11-25 10:07", tz=TZ),
                service_ids=["corte"],
                now=LONG_AGO,
            ))

    def test_past_start_rejected(self):
        service = _build_service(StubDataSource())

        with pytest.raises(SlotNoLongerAvailable):
            asyncio.run(service.ensure_slot_available(
                barbershop_id="shop-1",
                barber_id="barber-1",
                start_time=pendulum.parse("2024-11-25 09:00", tz=TZ),
                service_ids=["corte"],
                now=pendulum.parse("2024-11-25 09:20", tz=TZ),
            ))
