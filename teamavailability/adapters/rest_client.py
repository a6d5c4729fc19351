"""
REST client for fetching availability rows from the hosted database.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import requests

from ..domain.exceptions import AvailabilitySourceError
from ..domain.models import AvailabilitySlot
from .rows import parse_availability_rows

logger = logging.getLogger(__name__)


class RestAvailabilitySource:
    """
    Client for the availability REST endpoint.

    Uses GET {base_url}/instructor_availability, which returns a JSON list
    of availability rows already filtered to the requested instructors and
    date range.
    """

    ENDPOINT = "instructor_availability"

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: int = 30):
        """
        Initialize the REST client.

        Args:
            base_url: Root URL of the REST API
            api_key: Optional bearer token
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Accept": "application/json"}
        if api_key:
            self.headers["Authorization"] = f"Bearer {api_key}"

    def get_availability(
        self,
        emails: List[str],
        start_date: date,
        end_date: date,
    ) -> List[AvailabilitySlot]:
        """
        Fetch availability rows for the instructors in the date range.

        Raises:
            AvailabilitySourceError: If the API call fails or returns garbage
        """
        url = f"{self.base_url}/{self.ENDPOINT}"
        params = {
            "emails": ",".join(emails),
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
        }

        try:
            response = requests.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as e:
            raise AvailabilitySourceError(f"Failed to fetch availability: {e}") from e
        except ValueError as e:
            raise AvailabilitySourceError(f"Availability response is not valid JSON: {e}") from e

        rows = self._extract_rows(data)
        logger.debug("Fetched %d availability row(s) from %s", len(rows), url)
        return parse_availability_rows(rows)

    @staticmethod
    def _extract_rows(data: Any) -> List[Dict[str, Any]]:
        """
        Accept either a bare list of rows or {"availability": [...]}.
        """
        if isinstance(data, dict):
            data = data.get("availability")

        if not isinstance(data, list):
            raise AvailabilitySourceError("Availability response must contain a list of rows")

        return data
