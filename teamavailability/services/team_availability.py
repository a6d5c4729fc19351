"""
Application services for finding team-wide availability.

The service coordinates fetching availability rows via a data source adapter
and delegates the overlap calculation to the domain-level
``OverlapCalculator``. This keeps the CLI thin and lets tests swap in a stub
source through a simple protocol.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Protocol, Sequence

from ..config import TeamView
from ..domain.models import AvailabilitySlot, TeamAvailabilityResult
from ..domain.overlap_calculator import OverlapCalculator, normalize_emails, validate_request

logger = logging.getLogger(__name__)


class AvailabilitySourceProtocol(Protocol):
    """Protocol describing the data source behaviour needed by the service."""

    def get_availability(
        self,
        emails: List[str],
        start_date: date,
        end_date: date,
    ) -> List[AvailabilitySlot]:
        """Return availability slots for the instructors in the date range."""


class TeamAvailabilityService:
    """
    Orchestrates availability retrieval and overlap calculation.
    """

    def __init__(
        self,
        availability_source: AvailabilitySourceProtocol,
        calculator: OverlapCalculator | None = None,
    ) -> None:
        self._availability_source = availability_source
        self._calculator = calculator or OverlapCalculator()

    def find_team_availability(
        self,
        *,
        emails: Sequence[str],
        start_date: date,
        end_date: date,
    ) -> TeamAvailabilityResult:
        """
        Validate the request, fetch availability and compute both views.

        Raises:
            InvalidRangeError: If start_date is after end_date
            InsufficientInstructorsError: If fewer than two instructors are selected
            AvailabilitySourceError: If the data source fails
        """
        selected = normalize_emails(emails)
        # Reject before fetching anything
        validate_request(selected, start_date, end_date)

        slots = self.fetch_slots(emails=selected, start_date=start_date, end_date=end_date)

        result = TeamAvailabilityResult(
            emails=selected,
            start_date=start_date,
            end_date=end_date,
            overlaps=self._calculator.compute_overlaps(selected, slots, start_date, end_date),
            individual=self._calculator.build_individual_view(selected, slots, start_date, end_date),
        )

        logger.info(
            "Team availability for %d instructors: %d overlap window(s)",
            len(selected), len(result.overlaps),
        )
        return result

    def find_for_view(
        self,
        view: TeamView,
        *,
        start_date: date,
        end_date: date,
    ) -> TeamAvailabilityResult:
        """Run a search for a saved team view."""
        return self.find_team_availability(
            emails=view.instructor_emails,
            start_date=start_date,
            end_date=end_date,
        )

    def fetch_slots(
        self,
        *,
        emails: Sequence[str],
        start_date: date,
        end_date: date,
    ) -> List[AvailabilitySlot]:
        """
        Fetch slots for the requested instructors.

        Rows for other instructors or dates outside the range are dropped
        even if the source returns them.
        """
        selected = normalize_emails(emails)
        slots = self._availability_source.get_availability(
            emails=selected,
            start_date=start_date,
            end_date=end_date,
        )

        wanted = set(selected)
        filtered = [
            slot for slot in slots
            if slot.email_key in wanted and start_date <= slot.date <= end_date
        ]

        dropped = len(slots) - len(filtered)
        if dropped:
            logger.debug("Dropped %d slot(s) outside the requested instructors or dates", dropped)

        return filtered
