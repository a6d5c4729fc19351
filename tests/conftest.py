"""
Shared fixtures and slot builders.
"""

from datetime import date, time

import pytest

from teamavailability.domain.models import AvailabilitySlot


def make_slot(
    email: str,
    on: date,
    start: str | None = None,
    end: str | None = None,
    all_day: bool = False,
    name: str | None = None,
) -> AvailabilitySlot:
    """Build a slot from ``HH:MM`` strings."""
    def _t(value):
        if value is None:
            return None
        hours, minutes = value.split(":")
        return time(int(hours), int(minutes))

    return AvailabilitySlot(
        instructor_id=email.split("@")[0],
        instructor_name=name or email.split("@")[0].title(),
        instructor_email=email,
        date=on,
        is_all_day=all_day,
        start_time=_t(start),
        end_time=_t(end),
    )


@pytest.fixture
def slot_factory():
    return make_slot


@pytest.fixture
def availability_rows():
    """Rows in the format served by the hosted database."""
    def row(email, name, on, start=None, end=None, all_day=False):
        return {
            "date": on,
            "start_time": start,
            "end_time": end,
            "is_all_day": all_day,
            "instructor_id": name.lower(),
            "instructor": {"id": name.lower(), "name": name, "email": email},
        }

    return [
        row("alex@example.com", "Alex", "2024-06-10", "09:00:00", "17:00:00"),
        row("sam@example.com", "Sam", "2024-06-10", "13:00", "18:00"),
        row("alex@example.com", "Alex", "2024-06-11", all_day=True),
        row("sam@example.com", "Sam", "2024-06-11", "14:00", "15:00"),
        row("sam@example.com", "Sam", "2024-06-12", "09:00", "10:00"),
        row("jo@example.com", "Jo", "2024-06-10", "08:00", "12:00"),
    ]
