"""
Domain-specific exception hierarchy for the team availability finder.
"""


class TeamAvailabilityError(Exception):
    """Base class for all application-level errors."""


class InsufficientInstructorsError(TeamAvailabilityError, ValueError):
    """Raised when fewer than two distinct instructors are selected."""


class InvalidRangeError(TeamAvailabilityError, ValueError):
    """Raised when the start date lies after the end date."""


class AvailabilitySourceError(TeamAvailabilityError):
    """Raised when availability rows cannot be fetched or parsed."""


class UnknownViewError(TeamAvailabilityError, KeyError):
    """Raised when a saved team view is not configured."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""
