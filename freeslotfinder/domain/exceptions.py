"""
Domain-specific exception hierarchy for the free slot finder application.
"""


class FreeSlotError(Exception):
    """Base class for all application-level errors."""


class InvalidQueryError(FreeSlotError):
    """Raised when a free-slot query is malformed or can never be satisfied."""


class EventStoreError(FreeSlotError):
    """Raised when calendar events cannot be fetched or parsed."""


class AuthenticationError(FreeSlotError):
    """Raised when authentication or token handling fails."""
