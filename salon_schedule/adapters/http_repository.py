"""
Salon repository that reads the booking app's REST API.
"""

import asyncio
import logging
from datetime import date
from typing import Any, Dict, List, Optional

import pendulum
import requests

from ..domain.exceptions import RepositoryError
from ..domain.models import Appointment, Business, Master
from .records import appointments_on_date, business_from_record, masters_from_records

logger = logging.getLogger(__name__)


class HttpSalonRepository:
    """
    Client for the booking app's read endpoints.

    Uses:
    - GET /api/masters?businessId=...
    - GET /api/appointments?businessId=...&masterId=...&startDate=...&endDate=...
    - GET /api/business/{businessId}

    Blocking ``requests`` calls run in a worker thread so the async service
    is not stalled.
    """

    def __init__(
        self,
        base_url: str,
        business_id: str,
        token: str = "",
        timezone: str = "Europe/Kyiv",
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
    ):
        if not business_id:
            raise ValueError("business_id is required for the HTTP repository")

        self.base_url = base_url.rstrip("/")
        self.business_id = business_id
        self.timezone = timezone
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Accept": "application/json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        """
        Perform a GET request and decode the JSON body.

        Raises:
            RepositoryError: If the request fails or the body is not JSON
        """
        url = f"{self.base_url}{path}"

        try:
            response = self.session.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout,
            )
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            logger.error("Request to %s failed: %s", url, e)
            raise RepositoryError(f"Failed to fetch {path} from booking API: {e}") from e
        except ValueError as e:
            logger.error("Response from %s is not JSON: %s", url, e)
            raise RepositoryError(f"Booking API returned invalid JSON for {path}") from e

    def _fetch_masters(self) -> List[Master]:
        data = self._get("/api/masters", params={"businessId": self.business_id})
        if not isinstance(data, list):
            raise RepositoryError("Booking API returned an unexpected masters payload")
        return masters_from_records(data, self.timezone)

    def _fetch_appointments(self, master_id: str, day: date) -> List[Appointment]:
        # Bookings are filtered by start date upstream; include the previous
        # day so overnight bookings reaching into ``day`` are not missed.
        previous = pendulum.date(day.year, day.month, day.day).subtract(days=1)
        data = self._get(
            "/api/appointments",
            params={
                "businessId": self.business_id,
                "masterId": master_id,
                "startDate": previous.to_date_string(),
                "endDate": pendulum.date(day.year, day.month, day.day).to_date_string(),
            },
        )
        if not isinstance(data, list):
            raise RepositoryError("Booking API returned an unexpected appointments payload")
        return appointments_on_date(data, master_id, day, self.timezone)

    def _fetch_business(self) -> Optional[Business]:
        data = self._get(f"/api/business/{self.business_id}")
        if isinstance(data, dict) and isinstance(data.get("business"), dict):
            data = data["business"]
        if not isinstance(data, dict):
            return None
        return business_from_record(data)

    async def list_masters(self) -> List[Master]:
        return await asyncio.to_thread(self._fetch_masters)

    async def get_master_schedule(self, master_id: str) -> Optional[Master]:
        for master in await self.list_masters():
            if master.id == master_id:
                return master
        return None

    async def get_appointments_on_date(self, master_id: str, day: date) -> List[Appointment]:
        return await asyncio.to_thread(self._fetch_appointments, master_id, day)

    async def get_business(self) -> Optional[Business]:
        return await asyncio.to_thread(self._fetch_business)
