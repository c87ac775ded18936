"""
Barbershop data source backed by a JSON export file.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pendulum import DateTime
from pydantic import ValidationError

from ..domain.exceptions import BarbershopNotFound, DataSourceError
from ..domain.models import ExistingAppointment
from ..domain.time_utils import DEFAULT_TIMEZONE
from .payloads import AppointmentPayload, BarberPayload, BarbershopPayload, ServicePayload

logger = logging.getLogger(__name__)


class JsonBarbershopRepository:
    """
    Reads barbershops, barbers, services and appointments from one JSON file.

    The file holds four arrays (``barbershops``, ``barbers``, ``services``,
    ``appointments``) in the same shape the REST API returns. It is read once
    on construction; build a new repository to pick up changes.
    """

    def __init__(self, data_file: Path, timezone: str = DEFAULT_TIMEZONE):
        self.data_file = Path(data_file)
        self.timezone = timezone
        self._data = self._load()

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.data_file.exists():
            raise DataSourceError(f"Data file not found: {self.data_file}")

        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise DataSourceError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise DataSourceError("Data file must contain an object at the root level.")

        tables = {}
        for key in ("barbershops", "barbers", "services", "appointments"):
            records = data.get(key) or []
            if not isinstance(records, list) or not all(isinstance(record, dict) for record in records):
                raise DataSourceError(f"'{key}' in {self.data_file} must be a list of objects.")
            tables[key] = records
        return tables

    def _records(self, key: str, barbershop_id: str) -> List[Dict[str, Any]]:
        return [
            record for record in self._data[key]
            if record.get("barbershopId") in (None, barbershop_id)
        ]

    async def get_barbershop(self, barbershop_id: str) -> BarbershopPayload:
        """Find a barbershop by id or slug."""
        for record in self._data["barbershops"]:
            if barbershop_id in (record.get("id"), record.get("slug")):
                try:
                    return BarbershopPayload.model_validate(record)
                except ValidationError as exc:
                    raise DataSourceError(f"Invalid barbershop record {barbershop_id}: {exc}") from exc

        raise BarbershopNotFound(f"Barbearia não encontrada: {barbershop_id}")

    async def list_barbers(self, barbershop_id: str) -> List[BarberPayload]:
        try:
            return [
                BarberPayload.model_validate(record)
                for record in self._records("barbers", barbershop_id)
            ]
        except ValidationError as exc:
            raise DataSourceError(f"Invalid barber record: {exc}") from exc

    async def list_services(self, barbershop_id: str) -> List[ServicePayload]:
        try:
            return [
                ServicePayload.model_validate(record)
                for record in self._records("services", barbershop_id)
            ]
        except ValidationError as exc:
            raise DataSourceError(f"Invalid service record: {exc}") from exc

    async def list_appointments(
        self,
        barbershop_id: str,
        barber_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[ExistingAppointment]:
        """Appointments of ``barber_id`` that overlap [start, end)."""
        appointments: List[ExistingAppointment] = []

        for record in self._records("appointments", barbershop_id):
            if record.get("barberId") != barber_id:
                continue

            try:
                appointment = AppointmentPayload.model_validate(record).to_domain(self.timezone)
            except (ValidationError, ValueError) as exc:
                raise DataSourceError(f"Invalid appointment record {record.get('id')}: {exc}") from exc

            if appointment.start_time < end and appointment.end_time > start:
                appointments.append(appointment)

        logger.debug(
            "Loaded %d appointment(s) for barber %s from %s",
            len(appointments),
            barber_id,
            self.data_file,
        )
        return appointments
