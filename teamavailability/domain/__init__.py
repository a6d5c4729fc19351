"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    AvailabilitySourceError,
    InsufficientInstructorsError,
    InvalidRangeError,
    TeamAvailabilityError,
    UnknownViewError,
)
from .models import (
    AvailabilitySlot,
    InstructorAvailability,
    InstructorDay,
    OverlapWindow,
    TeamAvailabilityResult,
    TimeWindow,
)
from .overlap_calculator import OverlapCalculator, build_individual_view, compute_overlaps

__all__ = [
    "AvailabilitySlot",
    "AvailabilitySourceError",
    "InstructorAvailability",
    "InstructorDay",
    "InsufficientInstructorsError",
    "InvalidRangeError",
    "OverlapCalculator",
    "OverlapWindow",
    "TeamAvailabilityError",
    "TeamAvailabilityResult",
    "TimeWindow",
    "UnknownViewError",
    "build_individual_view",
    "compute_overlaps",
]
