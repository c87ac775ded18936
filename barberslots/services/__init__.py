"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .availability_service import AvailabilityService, BarbershopDataSource, total_duration

__all__ = ["AvailabilityService", "BarbershopDataSource", "total_duration"]
