"""
Tests for the conflict set builder.
"""

from datetime import date

import pendulum

from barberslots.domain.conflicts import build_occupied
from barberslots.domain.models import AppointmentStatus, ExistingAppointment

TZ = "America/Sao_Paulo"
MONDAY = date(2024, 11, 25)


def _appointment(start, end, barber_id="barber-1", **kwargs):
    return ExistingAppointment(
        barber_id=barber_id,
        start_time=pendulum.parse(start, tz=TZ),
        end_time=pendulum.parse(end, tz=TZ),
        **kwargs
    )


class TestBuildOccupied:
    """Tests for build_occupied."""

    def test_keeps_same_barber_same_day(self):
        appointments = [
            _appointment("2024-11-25 10:00", "2024-11-25 10:30"),
            _appointment("2024-11-25 11:00", "2024-11-25 11:45", barber_id="barber-2"),
            _appointment("2024-11-26 10:00", "2024-11-26 10:30"),
        ]

        occupied = build_occupied(appointments, "barber-1", MONDAY, tz=TZ)

        assert len(occupied) == 1
        assert occupied[0].start == pendulum.parse("2024-11-25 10:00", tz=TZ)
        assert occupied[0].end == pendulum.parse("2024-11-25 10:30", tz=TZ)

    def test_same_day_is_judged_in_shop_timezone(self):
        """Test that a UTC timestamp past midnight still belongs to the local day."""
        appointment = ExistingAppointment(
            barber_id="barber-1",
            start_time=pendulum.parse("2024-11-25T22:30:00Z"),
            end_time=pendulum.parse("2024-11-25T23:00:00Z"),
        )
        late = ExistingAppointment(
            barber_id="barber-1",
            start_time=pendulum.parse("2024-11-26T01:00:00Z"),
            end_time=pendulum.parse("2024-11-26T01:30:00Z"),
        )

        occupied = build_occupied([appointment, late], "barber-1", MONDAY, tz=TZ)

        assert [r.start.hour for r in occupied] == [19, 22]

    def test_cancelled_appointments_do_not_occupy(self):
        appointments = [
            _appointment("2024-11-25 10:00", "2024-11-25 10:30", status=AppointmentStatus.CANCELLED),
            _appointment("2024-11-25 14:00", "2024-11-25 14:30", status=AppointmentStatus.PENDING),
        ]

        occupied = build_occupied(appointments, "barber-1", MONDAY, tz=TZ)

        assert [r.start.hour for r in occupied] == [14]

    def test_excludes_appointment_being_edited(self):
        appointments = [
            _appointment("2024-11-25 10:00", "2024-11-25 10:30", appointment_id="a1"),
            _appointment("2024-11-25 15:00", "2024-11-25 15:30", appointment_id="a2"),
        ]

        occupied = build_occupied(appointments, "barber-1", MONDAY, tz=TZ, exclude_appointment_id="a1")

        assert [r.start.hour for r in occupied] == [15]

    def test_inverted_appointment_is_skipped(self, caplog):
        appointments = [_appointment("2024-11-25 10:30", "2024-11-25 10:00", appointment_id="bad")]

        with caplog.at_level("WARNING"):
            occupied = build_occupied(appointments, "barber-1", MONDAY, tz=TZ)

        assert occupied == []
        assert "bad" in caplog.text

    def test_preserves_input_order(self):
        """Test that intervals are returned as given, without sorting."""
        appointments = [
            _appointment("2024-11-25 15:00", "2024-11-25 15:30"),
            _appointment("2024-11-25 09:00", "2024-11-25 09:30"),
        ]

        occupied = build_occupied(appointments, "barber-1", MONDAY, tz=TZ)

        assert [r.start.hour for r in occupied] == [15, 9]
