"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .free_slot_finder import EventStoreProtocol, FreeSlotFinderService

__all__ = ["EventStoreProtocol", "FreeSlotFinderService"]
