"""
Domain models for instructor availability and overlap calculations.

All dates and times are naive local values exactly as instructors submitted
them. No timezone conversion happens anywhere in the domain layer.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import ClassVar, List, Optional, Tuple

import pendulum

MINUTES_PER_DAY = 24 * 60


def normalize_email(email: str) -> str:
    """Lower-case and strip an email so lookups are case-insensitive."""
    return email.strip().lower()


def time_to_minutes(value: time) -> int:
    """Convert a time of day to minutes since midnight (seconds are dropped)."""
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> time:
    """Convert minutes since midnight back to a time of day."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minute offset {minutes} is outside a single day")
    return time(hour=minutes // 60, minute=minutes % 60)


def day_name(value: date) -> str:
    """
    English weekday name for a date.

    The locale is passed explicitly so a process-wide ``pendulum.set_locale``
    never changes the output.
    """
    return pendulum.date(value.year, value.month, value.day).format("dddd", locale="en")


@dataclass(frozen=True)
class TimeWindow:
    """
    Represents an immutable window within one day, in whole minutes.

    Invariant: start must be before end.
    """
    start_minute: int
    end_minute: int

    FULL_DAY: ClassVar["TimeWindow"]

    def __post_init__(self):
        if self.start_minute >= self.end_minute:
            raise ValueError(
                f"Start minute {self.start_minute} must be before end minute {self.end_minute}"
            )

    @classmethod
    def from_times(cls, start: time, end: time) -> "TimeWindow":
        """Build a window from two times of day."""
        return cls(start_minute=time_to_minutes(start), end_minute=time_to_minutes(end))

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return self.end_minute - self.start_minute

    def contains(self, minute: float) -> bool:
        """Check whether a (possibly fractional) minute offset lies inside the window."""
        return self.start_minute <= minute < self.end_minute

    def overlaps(self, other: "TimeWindow") -> bool:
        """Check if this window overlaps with another."""
        return self.start_minute < other.end_minute and self.end_minute > other.start_minute

    def intersect(self, other: "TimeWindow") -> Optional["TimeWindow"]:
        """
        Calculate the intersection of two windows.
        Returns None if there is no overlap.
        """
        if not self.overlaps(other):
            return None

        return TimeWindow(
            start_minute=max(self.start_minute, other.start_minute),
            end_minute=min(self.end_minute, other.end_minute),
        )

    def start_time(self) -> time:
        return minutes_to_time(self.start_minute)

    def end_time(self) -> time:
        return minutes_to_time(self.end_minute)

    def __str__(self) -> str:
        return f"{self.start_time():%H:%M} - {self.end_time():%H:%M}"


# All-day availability is represented as 00:00 - 23:59.
TimeWindow.FULL_DAY = TimeWindow(start_minute=0, end_minute=MINUTES_PER_DAY - 1)


@dataclass(frozen=True)
class AvailabilitySlot:
    """
    One instructor's stated availability on one date.

    ``start_time`` and ``end_time`` are only meaningful when ``is_all_day`` is
    false. A partial-day slot with missing or inverted times is kept as-is;
    it simply contributes no coverage.
    """
    instructor_id: str
    instructor_name: str
    instructor_email: str
    date: date
    is_all_day: bool = False
    start_time: Optional[time] = None
    end_time: Optional[time] = None

    @property
    def email_key(self) -> str:
        return normalize_email(self.instructor_email)

    @property
    def has_times(self) -> bool:
        return self.start_time is not None and self.end_time is not None

    def window(self, full_day: TimeWindow = TimeWindow.FULL_DAY) -> Optional[TimeWindow]:
        """
        Return the covered window, or None when the slot covers nothing.
        """
        if self.is_all_day:
            return full_day
        if not self.has_times:
            return None

        start = time_to_minutes(self.start_time)
        end = time_to_minutes(self.end_time)
        if start >= end:
            return None
        return TimeWindow(start_minute=start, end_minute=end)


@dataclass(frozen=True)
class OverlapWindow:
    """
    A window on one date during which every selected instructor is available.
    """
    date: date
    day_name: str
    start_time: time
    end_time: time
    duration_minutes: int

    @classmethod
    def from_window(cls, on: date, window: TimeWindow) -> "OverlapWindow":
        return cls(
            date=on,
            day_name=day_name(on),
            start_time=window.start_time(),
            end_time=window.end_time(),
            duration_minutes=window.duration_minutes(),
        )

    def sort_key(self) -> Tuple[date, time]:
        return (self.date, self.start_time)

    def format_display(self) -> str:
        """
        Format the window for display.
        Format: Weekday, YYYY-MM-DD | HH:MM - HH:MM (Xh Ym)
        """
        return (
            f"{self.day_name}, {self.date.isoformat()} | "
            f"{self.start_time:%H:%M} - {self.end_time:%H:%M} "
            f"({format_duration(self.duration_minutes)})"
        )


def format_duration(minutes: int) -> str:
    """Render a duration as ``2h 30m``, ``45m`` or ``3h``."""
    hours, rest = divmod(minutes, 60)
    if hours == 0:
        return f"{rest}m"
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}m"


@dataclass(frozen=True)
class InstructorDay:
    """All slots an instructor submitted for a single date."""
    date: date
    slots: Tuple[AvailabilitySlot, ...]


@dataclass
class InstructorAvailability:
    """
    One selected instructor's raw availability, grouped by date.
    """
    email: str
    name: str
    days: List[InstructorDay] = field(default_factory=list)

    def slot_count(self) -> int:
        return sum(len(day.slots) for day in self.days)


@dataclass
class TeamAvailabilityResult:
    """Overlap windows plus the side-by-side individual view for one search."""
    emails: List[str]
    start_date: date
    end_date: date
    overlaps: List[OverlapWindow] = field(default_factory=list)
    individual: List[InstructorAvailability] = field(default_factory=list)

    def total_overlap_minutes(self) -> int:
        return sum(window.duration_minutes for window in self.overlaps)
