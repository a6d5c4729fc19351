"""
Core business logic for finding team-wide overlapping availability.

Pure domain logic without any external dependencies (no API calls, no
database, no I/O). Calls only read their arguments, so a single calculator
can serve concurrent searches.
"""

import logging
from datetime import date, timedelta
from typing import Dict, Iterable, Iterator, List, Sequence

from .exceptions import InsufficientInstructorsError, InvalidRangeError
from .models import (
    AvailabilitySlot,
    InstructorAvailability,
    InstructorDay,
    OverlapWindow,
    TimeWindow,
    normalize_email,
)

logger = logging.getLogger(__name__)

MIN_INSTRUCTORS = 2


def normalize_emails(emails: Iterable[str]) -> List[str]:
    """
    Normalise emails, dropping blanks and duplicates while keeping order.
    """
    normalized: List[str] = []
    for email in emails:
        key = normalize_email(email)
        if key and key not in normalized:
            normalized.append(key)
    return normalized


def validate_request(emails: Sequence[str], start_date: date, end_date: date) -> None:
    """
    Check the search preconditions.

    Raises:
        InvalidRangeError: If start_date is after end_date
        InsufficientInstructorsError: If fewer than two instructors are selected
    """
    if start_date > end_date:
        raise InvalidRangeError(
            f"Start date {start_date.isoformat()} is after end date {end_date.isoformat()}"
        )
    if len(emails) < MIN_INSTRUCTORS:
        raise InsufficientInstructorsError(
            f"At least {MIN_INSTRUCTORS} instructors are required, got {len(emails)}"
        )


def iter_dates(start_date: date, end_date: date) -> Iterator[date]:
    """Yield every calendar date in the inclusive range."""
    current = _as_date(start_date)
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def _as_date(value: date) -> date:
    return date(value.year, value.month, value.day)


class OverlapCalculator:
    """
    Computes the windows during which all selected instructors are available.

    Algorithm, per date in the range:
    1. Collect each selected instructor's slots for that date
    2. Skip the date if any instructor submitted nothing
    3. Reduce each instructor to coverage windows (all-day wins)
    4. Sweep the sorted window boundaries and keep segments everyone covers
    5. Merge touching segments and drop empty ones
    """

    def __init__(self, full_day: TimeWindow = TimeWindow.FULL_DAY):
        self.full_day = full_day

    def compute_overlaps(
        self,
        selected_emails: Iterable[str],
        slots: Iterable[AvailabilitySlot],
        start_date: date,
        end_date: date,
    ) -> List[OverlapWindow]:
        """
        Find all windows in the date range where every selected instructor is free.

        Args:
            selected_emails: Instructors to include (order does not matter)
            slots: Availability slots, possibly for other instructors or dates
            start_date: First date of the range (inclusive)
            end_date: Last date of the range (inclusive)

        Returns:
            OverlapWindow objects sorted by date and start time

        Raises:
            InvalidRangeError: If start_date is after end_date
            InsufficientInstructorsError: If fewer than two instructors are selected
        """
        emails = normalize_emails(selected_emails)
        validate_request(emails, start_date, end_date)

        by_date = self._group_by_date_and_email(emails, slots, start_date, end_date)
        overlaps: List[OverlapWindow] = []

        for current in iter_dates(start_date, end_date):
            day_slots = by_date.get(current, {})

            # An instructor without slots is unavailable, never "free by omission"
            if any(not day_slots.get(email) for email in emails):
                continue

            coverage = {
                email: self._coverage_for(day_slots[email])
                for email in emails
            }

            for window in self._intersect_all(list(coverage.values())):
                overlaps.append(OverlapWindow.from_window(current, window))

        overlaps.sort(key=lambda window: window.sort_key())

        logger.debug(
            "Found %d overlap window(s) for %d instructors between %s and %s",
            len(overlaps), len(emails), start_date, end_date,
        )
        return overlaps

    def build_individual_view(
        self,
        selected_emails: Iterable[str],
        slots: Iterable[AvailabilitySlot],
        start_date: date,
        end_date: date,
    ) -> List[InstructorAvailability]:
        """
        Group each selected instructor's slots by date for side-by-side display.

        Instructors keep the order they were selected in. Slots are passed
        through untouched: no merging, and all-day slots stay all-day.
        """
        emails = normalize_emails(selected_emails)
        validate_request(emails, start_date, end_date)

        by_date = self._group_by_date_and_email(emails, slots, start_date, end_date)
        view: List[InstructorAvailability] = []

        for email in emails:
            days: List[InstructorDay] = []
            name = ""
            for current in sorted(by_date):
                day_slots = by_date[current].get(email)
                if not day_slots:
                    continue
                days.append(InstructorDay(date=current, slots=tuple(day_slots)))
                name = name or day_slots[0].instructor_name

            view.append(InstructorAvailability(email=email, name=name or email, days=days))

        return view

    def _group_by_date_and_email(
        self,
        emails: Sequence[str],
        slots: Iterable[AvailabilitySlot],
        start_date: date,
        end_date: date,
    ) -> Dict[date, Dict[str, List[AvailabilitySlot]]]:
        """
        Bucket the relevant slots by date, then by instructor email.

        Slots for unselected instructors or dates outside the range are dropped.
        """
        selected = set(emails)
        grouped: Dict[date, Dict[str, List[AvailabilitySlot]]] = {}

        for slot in slots:
            if slot.email_key not in selected:
                continue
            if not start_date <= slot.date <= end_date:
                continue
            day = grouped.setdefault(_as_date(slot.date), {})
            day.setdefault(slot.email_key, []).append(slot)

        return grouped

    def _coverage_for(self, slots: Sequence[AvailabilitySlot]) -> List[TimeWindow]:
        """
        Reduce one instructor's slots on one date to coverage windows.

        Any all-day slot makes the instructor available for the full day,
        whatever partial slots were submitted alongside it.
        """
        if any(slot.is_all_day for slot in slots):
            return [self.full_day]

        windows: List[TimeWindow] = []
        for slot in slots:
            window = slot.window(self.full_day)
            if window is None:
                logger.debug(
                    "Ignoring slot without a valid window for %s on %s",
                    slot.email_key, slot.date,
                )
                continue
            windows.append(window)
        return windows

    def _intersect_all(self, coverage: List[List[TimeWindow]]) -> List[TimeWindow]:
        """
        Calculate the windows covered by every instructor.

        Sweep over the sorted boundaries of all windows: an elementary segment
        is kept when its midpoint lies inside at least one window of every
        instructor.
        """
        if not coverage or any(not windows for windows in coverage):
            return []

        boundaries = sorted({
            minute
            for windows in coverage
            for window in windows
            for minute in (window.start_minute, window.end_minute)
        })

        segments: List[TimeWindow] = []
        for seg_start, seg_end in zip(boundaries, boundaries[1:]):
            midpoint = (seg_start + seg_end) / 2
            if all(
                any(window.contains(midpoint) for window in windows)
                for windows in coverage
            ):
                segments.append(TimeWindow(start_minute=seg_start, end_minute=seg_end))

        return [
            window for window in self._merge_adjacent_windows(segments)
            if window.duration_minutes() > 0
        ]

    def _merge_adjacent_windows(self, windows: List[TimeWindow]) -> List[TimeWindow]:
        """
        Merge overlapping or touching windows.

        Example: [09:00-10:00, 10:00-11:00] -> [09:00-11:00]
        """
        if not windows:
            return []

        sorted_windows = sorted(windows, key=lambda w: w.start_minute)
        merged: List[TimeWindow] = [sorted_windows[0]]

        for current in sorted_windows[1:]:
            last = merged[-1]
            if current.start_minute <= last.end_minute:
                merged[-1] = TimeWindow(
                    start_minute=last.start_minute,
                    end_minute=max(last.end_minute, current.end_minute),
                )
            else:
                merged.append(current)

        return merged


_default_calculator = OverlapCalculator()


def compute_overlaps(
    selected_emails: Iterable[str],
    slots: Iterable[AvailabilitySlot],
    start_date: date,
    end_date: date,
) -> List[OverlapWindow]:
    """Module-level shortcut for ``OverlapCalculator().compute_overlaps``."""
    return _default_calculator.compute_overlaps(selected_emails, slots, start_date, end_date)


def build_individual_view(
    selected_emails: Iterable[str],
    slots: Iterable[AvailabilitySlot],
    start_date: date,
    end_date: date,
) -> List[InstructorAvailability]:
    """Module-level shortcut for ``OverlapCalculator().build_individual_view``."""
    return _default_calculator.build_individual_view(selected_emails, slots, start_date, end_date)
