"""
Wire records as served by the barbershop REST API and stored in JSON exports.

Field names follow the API (camelCase); conversion methods produce domain
objects for the availability engine.
"""

from typing import Dict, List, Optional

import pendulum
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..domain.models import (
    AppointmentStatus,
    BarberDaySchedule,
    DayHours,
    ExistingAppointment,
    LunchBreak,
    WeekDay,
)
from ..domain.time_utils import DEFAULT_TIMEZONE


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def _check_day(value: str) -> str:
    WeekDay.from_name(value)
    return value


class OperatingHourPayload(_Payload):
    day: str
    open: str
    close: str

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        """Reject weekday names that match no day."""
        return _check_day(value)

    def to_domain(self) -> DayHours:
        return DayHours(day=WeekDay.from_name(self.day), open=self.open, close=self.close)


class LunchTimePayload(_Payload):
    start: str = ""
    end: str = ""


class BarberSchedulePayload(_Payload):
    day: str
    start: str
    end: str
    lunch_time: Optional[LunchTimePayload] = Field(default=None, alias="lunchTime")

    @field_validator("day")
    @classmethod
    def validate_day(cls, value: str) -> str:
        """Reject weekday names that match no day."""
        return _check_day(value)

    def to_domain(self) -> BarberDaySchedule:
        lunch = None
        if self.lunch_time and self.lunch_time.start and self.lunch_time.end:
            lunch = LunchBreak(start=self.lunch_time.start, end=self.lunch_time.end)
        return BarberDaySchedule(
            day=WeekDay.from_name(self.day),
            start=self.start,
            end=self.end,
            lunch_time=lunch,
        )


class BarberServicePayload(_Payload):
    """A service offered by a barber, optionally with their own duration."""
    service_id: str = Field(alias="serviceId")
    duration: Optional[int] = None


class BarberPayload(_Payload):
    id: str
    name: str = ""
    barbershop_id: Optional[str] = Field(default=None, alias="barbershopId")
    schedule: List[BarberSchedulePayload] = Field(default_factory=list)
    services: List[BarberServicePayload] = Field(default_factory=list)

    def schedule_to_domain(self) -> List[BarberDaySchedule]:
        return [entry.to_domain() for entry in self.schedule]

    def duration_overrides(self) -> Dict[str, int]:
        """Service id -> this barber's duration, where one is set."""
        return {
            service.service_id: service.duration
            for service in self.services
            if service.duration
        }


class ServicePayload(_Payload):
    id: str
    name: str = ""
    duration: int
    price: float = 0.0
    barbershop_id: Optional[str] = Field(default=None, alias="barbershopId")


class BarbershopPayload(_Payload):
    id: str
    name: str = ""
    slug: Optional[str] = None
    operating_hours: List[OperatingHourPayload] = Field(default_factory=list, alias="operatingHours")

    def hours_to_domain(self) -> List[DayHours]:
        return [entry.to_domain() for entry in self.operating_hours]


class AppointmentPayload(_Payload):
    id: Optional[str] = None
    barbershop_id: Optional[str] = Field(default=None, alias="barbershopId")
    barber_id: str = Field(alias="barberId")
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    status: AppointmentStatus = AppointmentStatus.CONFIRMED

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        """The database enum is upper case; the API sends lower case."""
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_domain(self, tz: str = DEFAULT_TIMEZONE) -> ExistingAppointment:
        """
        Convert ISO-8601 timestamps to shop-local instants.

        Timestamps without an offset are read as shop-local.
        """
        return ExistingAppointment(
            barber_id=self.barber_id,
            start_time=pendulum.parse(self.start_time, tz=tz).in_timezone(tz),
            end_time=pendulum.parse(self.end_time, tz=tz).in_timezone(tz),
            appointment_id=self.id,
            status=self.status,
        )
