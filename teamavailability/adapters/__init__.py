"""
Adapters layer - Availability data sources.
"""

from .json_source import JsonAvailabilitySource
from .rest_client import RestAvailabilitySource
from .rows import parse_availability_row, parse_availability_rows

__all__ = [
    "JsonAvailabilitySource",
    "RestAvailabilitySource",
    "parse_availability_row",
    "parse_availability_rows",
]
