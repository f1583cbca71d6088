"""
Salon repository backed by a JSON fixture file.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.exceptions import RepositoryError
from ..domain.models import Appointment, Business, Master
from .records import appointments_on_date, business_from_record, masters_from_records

logger = logging.getLogger(__name__)

SAMPLE_DATA_FILE = Path(__file__).parent / "sample_salon_data.json"


class JsonSalonRepository:
    """
    Repository that serves salon records from a JSON document.

    The document mirrors the booking app's API payloads:
    ``{"business": {...}, "masters": [...], "appointments": [...]}``.
    Useful for demos and tests without a running booking backend.
    """

    def __init__(self, data: Dict[str, Any], timezone: str = "Europe/Kyiv"):
        self.timezone = timezone
        self._business = data.get("business")
        self._masters = masters_from_records(data.get("masters") or [], timezone)
        self._appointment_records = list(data.get("appointments") or [])

    @classmethod
    def from_file(cls, data_file: Path, timezone: str = "Europe/Kyiv") -> "JsonSalonRepository":
        """
        Load salon data from a JSON file.

        Raises:
            RepositoryError: If the file is missing or not valid JSON
        """
        try:
            with open(data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Could not load salon data from %s: %s", data_file, e)
            raise RepositoryError(f"Could not load salon data from {data_file}: {e}") from e

        if not isinstance(data, dict):
            raise RepositoryError(f"Salon data in {data_file} must be a JSON object")

        return cls(data, timezone=timezone)

    async def list_masters(self) -> List[Master]:
        return list(self._masters)

    async def get_master_schedule(self, master_id: str) -> Optional[Master]:
        for master in self._masters:
            if master.id == master_id:
                return master
        return None

    async def get_appointments_on_date(self, master_id: str, day: date) -> List[Appointment]:
        return appointments_on_date(self._appointment_records, master_id, day, self.timezone)

    async def get_business(self) -> Optional[Business]:
        if not isinstance(self._business, dict):
            return None
        return business_from_record(self._business)
