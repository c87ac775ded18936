"""
REST client for the barbershop management API.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import requests
from pendulum import DateTime
from pydantic import ValidationError

from ..domain.exceptions import BarbershopNotFound, DataSourceError
from ..domain.models import ExistingAppointment
from ..domain.time_utils import DEFAULT_TIMEZONE
from .payloads import AppointmentPayload, BarberPayload, BarbershopPayload, ServicePayload

logger = logging.getLogger(__name__)


class BarbershopApiClient:
    """
    Client for the barbershop API's read endpoints.

    Every endpoint answers ``{"data": ...}``. Requests are blocking, so the
    async methods hand them to a worker thread.
    """

    def __init__(
        self,
        base_url: str,
        timezone: str = DEFAULT_TIMEZONE,
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Root URL of the web application, e.g. https://app.example.com
            timezone: IANA timezone of the barbershop
            timeout: Per-request timeout in seconds
            session: Optional pre-configured requests session (auth cookies, retries)
        """
        self.base_url = base_url.rstrip("/")
        self.timezone = timezone
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        GET an endpoint and unwrap its ``data`` member.

        Raises:
            BarbershopNotFound: On HTTP 404
            DataSourceError: On any other transport or HTTP failure
        """
        url = f"{self.base_url}{path}"

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            if response.status_code == 404:
                raise BarbershopNotFound(f"Não encontrado: {path}")
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.RequestException as exc:
            raise DataSourceError(f"Failed to fetch {path}: {exc}") from exc
        except ValueError as exc:
            raise DataSourceError(f"Invalid JSON from {path}: {exc}") from exc

        if not isinstance(body, dict) or "data" not in body:
            raise DataSourceError(f"Unexpected response from {path}: missing 'data'")

        return body["data"]

    @staticmethod
    def _objects(data: Any, path: str) -> List[Dict[str, Any]]:
        """The ``data`` member of a list endpoint; every element must be an object."""
        if data is None:
            return []
        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise DataSourceError(f"Unexpected response from {path}: expected a list of objects")
        return data

    async def _fetch(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        return await asyncio.to_thread(self._get, path, params)

    async def get_barbershop(self, barbershop_id: str) -> BarbershopPayload:
        data = await self._fetch(f"/api/barbershops/{barbershop_id}")
        try:
            return BarbershopPayload.model_validate(data)
        except ValidationError as exc:
            raise DataSourceError(f"Invalid barbershop {barbershop_id}: {exc}") from exc

    async def list_barbers(self, barbershop_id: str) -> List[BarberPayload]:
        data = await self._fetch("/api/barbers", {"barbershopId": barbershop_id})
        try:
            return [BarberPayload.model_validate(item) for item in self._objects(data, "/api/barbers")]
        except ValidationError as exc:
            raise DataSourceError(f"Invalid barber list: {exc}") from exc

    async def list_services(self, barbershop_id: str) -> List[ServicePayload]:
        data = await self._fetch("/api/services", {"barbershopId": barbershop_id})
        try:
            return [ServicePayload.model_validate(item) for item in self._objects(data, "/api/services")]
        except ValidationError as exc:
            raise DataSourceError(f"Invalid service list: {exc}") from exc

    async def list_appointments(
        self,
        barbershop_id: str,
        barber_id: str,
        start: DateTime,
        end: DateTime,
    ) -> List[ExistingAppointment]:
        """Appointments of ``barber_id`` between ``start`` and ``end``."""
        params = {
            "barbershopId": barbershop_id,
            "barberId": barber_id,
            "from": start.in_timezone("UTC").to_iso8601_string(),
            "to": end.in_timezone("UTC").to_iso8601_string(),
        }
        data = await self._fetch("/api/appointments", params)

        appointments: List[ExistingAppointment] = []
        for item in self._objects(data, "/api/appointments"):
            try:
                appointments.append(AppointmentPayload.model_validate(item).to_domain(self.timezone))
            except (ValidationError, ValueError) as exc:
                raise DataSourceError(f"Invalid appointment {item.get('id')}: {exc}") from exc

        logger.debug("Fetched %d appointment(s) for barber %s", len(appointments), barber_id)
        return appointments
