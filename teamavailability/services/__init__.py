"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .team_availability import AvailabilitySourceProtocol, TeamAvailabilityService

__all__ = ["AvailabilitySourceProtocol", "TeamAvailabilityService"]
