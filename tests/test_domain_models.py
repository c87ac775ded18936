"""
Tests for domain models.
"""

from datetime import date

import pendulum
import pytest

from barberslots.domain.models import (
    ClosedDay,
    ClosedReason,
    DayHours,
    SlotResult,
    TimeRange,
    WeekDay,
)

TZ = "America/Sao_Paulo"


class TestTimeRange:
    """Tests for TimeRange model."""

    def test_create_valid_time_range(self):
        """Test creating a valid time range."""
        start = pendulum.parse("2024-11-25 09:00", tz=TZ)
        end = pendulum.parse("2024-11-25 17:00", tz=TZ)

        tr = TimeRange(start=start, end=end)

        assert tr.start == start
        assert tr.end == end

    def test_invalid_time_range_raises_error(self):
        """Test that creating an invalid time range raises ValueError."""
        start = pendulum.parse("2024-11-25 17:00", tz=TZ)
        end = pendulum.parse("2024-11-25 09:00", tz=TZ)

        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeRange(start=start, end=end)

    def test_overlaps_is_half_open(self):
        """Test that ranges touching at one end do not overlap."""
        morning = TimeRange(
            start=pendulum.parse("2024-11-25 09:00", tz=TZ),
            end=pendulum.parse("2024-11-25 12:00", tz=TZ)
        )
        late_morning = TimeRange(
            start=pendulum.parse("2024-11-25 11:00", tz=TZ),
            end=pendulum.parse("2024-11-25 14:00", tz=TZ)
        )
        afternoon = TimeRange(
            start=pendulum.parse("2024-11-25 12:00", tz=TZ),
            end=pendulum.parse("2024-11-25 17:00", tz=TZ)
        )

        assert morning.overlaps(late_morning)
        assert late_morning.overlaps(morning)
        assert not morning.overlaps(afternoon)

    def test_intersect(self):
        """Test intersection calculation."""
        tr1 = TimeRange(
            start=pendulum.parse("2024-11-25 09:00", tz=TZ),
            end=pendulum.parse("2024-11-25 12:00", tz=TZ)
        )
        tr2 = TimeRange(
            start=pendulum.parse("2024-11-25 11:00", tz=TZ),
            end=pendulum.parse("2024-11-25 14:00", tz=TZ)
        )

        intersection = tr1.intersect(tr2)

        assert intersection is not None
        assert intersection.start == pendulum.parse("2024-11-25 11:00", tz=TZ)
        assert intersection.end == pendulum.parse("2024-11-25 12:00", tz=TZ)

    def test_intersect_no_overlap(self):
        """Test intersection with no overlap returns None."""
        tr1 = TimeRange(
            start=pendulum.parse("2024-11-25 09:00", tz=TZ),
            end=pendulum.parse("2024-11-25 12:00", tz=TZ)
        )
        tr2 = TimeRange(
            start=pendulum.parse("2024-11-25 14:00", tz=TZ),
            end=pendulum.parse("2024-11-25 17:00", tz=TZ)
        )

        assert tr1.intersect(tr2) is None


class TestWeekDay:
    """Tests for weekday resolution."""

    def test_from_date_sunday_is_zero(self):
        assert WeekDay.from_date(date(2024, 11, 24)) == WeekDay.SUNDAY == 0
        assert WeekDay.from_date(date(2024, 11, 25)) == WeekDay.MONDAY
        assert WeekDay.from_date(date(2024, 11, 30)) == WeekDay.SATURDAY == 6

    def test_from_date_accepts_pendulum_datetime(self):
        assert WeekDay.from_date(pendulum.parse("2024-11-27 10:00", tz=TZ)) == WeekDay.WEDNESDAY

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Domingo", WeekDay.SUNDAY),
            ("Segunda-feira", WeekDay.MONDAY),
            ("segunda", WeekDay.MONDAY),
            ("Terça-feira", WeekDay.TUESDAY),
            ("Terca-feira", WeekDay.TUESDAY),
            ("QUARTA-FEIRA", WeekDay.WEDNESDAY),
            ("Quinta", WeekDay.THURSDAY),
            ("sex", WeekDay.FRIDAY),
            ("Sábado", WeekDay.SATURDAY),
            ("Sabado", WeekDay.SATURDAY),
            ("Monday", WeekDay.MONDAY),
            ("sunday", WeekDay.SUNDAY),
        ],
    )
    def test_from_name(self, name, expected):
        """Test Portuguese and English names, with or without accents."""
        assert WeekDay.from_name(name) == expected

    @pytest.mark.parametrize("name", ["", "-", "feriado", "s", "qu"])
    def test_from_name_rejects_unknown_or_ambiguous(self, name):
        with pytest.raises(ValueError, match="Unknown weekday"):
            WeekDay.from_name(name)

    def test_display_name(self):
        assert WeekDay.SATURDAY.display_name == "Sábado"
        assert WeekDay.TUESDAY.display_name == "Terça-feira"


class TestDayHours:
    """Tests for DayHours model."""

    def test_closed_literal(self):
        assert DayHours(day=WeekDay.SUNDAY, open="closed", close="closed").is_closed
        assert DayHours(day=WeekDay.SUNDAY, open="Closed", close="closed").is_closed

    def test_open_day(self):
        assert not DayHours(day=WeekDay.MONDAY, open="09:00", close="18:00").is_closed


class TestSlotResult:
    """Tests for SlotResult."""

    def test_empty_result_is_falsy(self):
        result = SlotResult(closed=ClosedDay(ClosedReason.SHOP_CLOSED))

        assert not result
        assert len(result) == 0
        assert result.display_times() == []
        assert result.closed.message == "A barbearia está fechada neste dia."

    def test_display_times(self):
        result = SlotResult(slots=(
            pendulum.parse("2024-11-25 09:00", tz=TZ),
            pendulum.parse("2024-11-25 09:15", tz=TZ),
        ))

        assert list(result) == [result[0], result[1]]
        assert result.display_times() == ["09:00", "09:15"]
