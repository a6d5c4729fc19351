"""
Parsing of availability rows as served by the hosted database.
"""

import logging
from datetime import date, time
from typing import Any, Dict, Iterable, List, Optional

import pendulum

from ..domain.models import AvailabilitySlot, TimeWindow

logger = logging.getLogger(__name__)


def parse_time(value: Optional[str]) -> Optional[time]:
    """
    Parse ``HH:MM`` or ``HH:MM:SS`` into a time of day.

    Seconds are dropped: availability is minute-granular. The database
    allows ``24:00``, which is clamped to the 23:59 end of the full day.
    """
    if value is None or value == "":
        return None

    parts = str(value).split(":")
    if len(parts) < 2:
        raise ValueError(f"Could not parse time: {value}")

    try:
        hour, minute = int(parts[0]), int(parts[1])
        if (hour, minute) == (24, 0) and all(int(p) == 0 for p in parts[2:]):
            return TimeWindow.FULL_DAY.end_time()
        return time(hour=hour, minute=minute)
    except ValueError as exc:
        raise ValueError(f"Could not parse time: {value}") from exc


def parse_date(value: Any) -> date:
    """Parse an ISO ``YYYY-MM-DD`` date."""
    if isinstance(value, date):
        return date(value.year, value.month, value.day)
    if not value:
        raise ValueError("Row has no date")

    parsed = pendulum.parse(str(value), exact=True)
    if not isinstance(parsed, date):
        raise ValueError(f"Could not parse date: {value}")
    return date(parsed.year, parsed.month, parsed.day)


def parse_availability_row(row: Dict[str, Any]) -> AvailabilitySlot:
    """
    Convert one database row into an AvailabilitySlot.

    Row format:
    {
        "date": "2024-06-10",
        "start_time": "09:00:00",
        "end_time": "17:00:00",
        "is_all_day": false,
        "instructor_id": "...",
        "instructor": {"id": "...", "name": "...", "email": "..."}
    }

    Partial-day rows with missing times are kept; the engine treats them as
    covering nothing.

    Raises:
        ValueError: If the row has no instructor email or no usable date
    """
    instructor = row.get("instructor") or {}
    if not isinstance(instructor, dict):
        raise ValueError("Row instructor is not an object")

    email = instructor.get("email") or ""
    if not isinstance(email, str):
        raise ValueError(f"Row instructor email is not a string: {email!r}")
    email = email.strip().lower()
    if not email:
        raise ValueError("Row has no instructor email")

    is_all_day = bool(row.get("is_all_day", False))

    return AvailabilitySlot(
        instructor_id=str(row.get("instructor_id") or instructor.get("id") or ""),
        instructor_name=instructor.get("name") or email,
        instructor_email=email,
        date=parse_date(row.get("date")),
        is_all_day=is_all_day,
        start_time=None if is_all_day else parse_time(row.get("start_time")),
        end_time=None if is_all_day else parse_time(row.get("end_time")),
    )


def parse_availability_rows(rows: Iterable[Dict[str, Any]]) -> List[AvailabilitySlot]:
    """Parse many rows, skipping the ones that cannot be parsed."""
    slots: List[AvailabilitySlot] = []

    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            logger.warning("Skipping availability row %d: not an object", index)
            continue
        try:
            slots.append(parse_availability_row(row))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping availability row %d: %s", index, exc)
            continue

    return slots
