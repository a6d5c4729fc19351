"""
Availability source backed by a JSON export of availability rows.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

from ..domain.exceptions import AvailabilitySourceError
from ..domain.models import AvailabilitySlot
from ..domain.overlap_calculator import normalize_emails
from .rows import parse_availability_rows

logger = logging.getLogger(__name__)


class JsonAvailabilitySource:
    """
    Loads availability rows from a JSON file.

    Useful for working offline against an export of the availability table,
    and as a drop-in replacement for the REST source in tests.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._slots: Optional[List[AvailabilitySlot]] = None

    def _load(self) -> List[AvailabilitySlot]:
        """Read and parse the file once."""
        if self._slots is not None:
            return self._slots

        if not self.path.exists():
            raise AvailabilitySourceError(f"Availability file not found: {self.path}")

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise AvailabilitySourceError(f"Invalid JSON in {self.path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise AvailabilitySourceError(f"Availability file {self.path} is not UTF-8: {exc}") from exc
        except OSError as exc:
            raise AvailabilitySourceError(f"Could not read {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise AvailabilitySourceError(
                f"Availability file {self.path} must contain a list of rows"
            )

        self._slots = parse_availability_rows(data)
        logger.debug("Loaded %d availability slot(s) from %s", len(self._slots), self.path)
        return self._slots

    def get_availability(
        self,
        emails: List[str],
        start_date: date,
        end_date: date,
    ) -> List[AvailabilitySlot]:
        """
        Return the slots of the given instructors within the date range.
        """
        wanted = set(normalize_emails(emails))

        return [
            slot for slot in self._load()
            if slot.email_key in wanted and start_date <= slot.date <= end_date
        ]
