"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import (
    AuthenticationError,
    EventStoreError,
    FreeSlotError,
    InvalidQueryError,
)
from .models import Event, FreeSlotQuery, TimeRange, TimeSlot, intervals_overlap
from .slot_calculator import GRID_STEP, FreeSlotCalculator, find_free_slots

__all__ = [
    "AuthenticationError",
    "EventStoreError",
    "FreeSlotError",
    "InvalidQueryError",
    "Event",
    "FreeSlotQuery",
    "TimeRange",
    "TimeSlot",
    "intervals_overlap",
    "GRID_STEP",
    "FreeSlotCalculator",
    "find_free_slots",
]
