"""
Domain-specific exception hierarchy for the barbershop availability engine.
"""

from typing import List


class BarberSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidTimeFormat(BarberSlotsError, ValueError):
    """Raised when a wall-clock time is not a valid "HH:MM" string."""


class InvalidRequest(BarberSlotsError, ValueError):
    """Raised when a slot request cannot be computed (e.g. non-positive duration)."""


class InvalidSchedule(BarberSlotsError, ValueError):
    """Raised when schedule data fails save-time validation."""

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("Invalid schedule: " + "; ".join(self.problems))


class SlotNoLongerAvailable(BarberSlotsError):
    """Raised when a requested start time was taken since it was offered."""


class DataSourceError(BarberSlotsError):
    """Raised when barbershop data cannot be fetched or parsed."""


class BarbershopNotFound(DataSourceError):
    """Raised when a barbershop (or one of its barbers) does not exist."""
