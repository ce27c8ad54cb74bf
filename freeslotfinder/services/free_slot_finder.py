"""
Application services for finding shared free meeting slots.

The service coordinates fetching candidate events via an event store adapter
and delegates the actual availability calculation to the domain-level
``FreeSlotCalculator``. This keeps the CLI thin and improves testability by
allowing the event store dependency to be mocked via a simple protocol.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Iterable, List, Protocol, Sequence

from pendulum import DateTime

from ..domain.exceptions import InvalidQueryError
from ..domain.models import Event, FreeSlotQuery, TimeSlot
from ..domain.slot_calculator import FreeSlotCalculator

logger = logging.getLogger(__name__)


class EventStoreProtocol(Protocol):
    """Protocol describing the event store behaviour needed by the service."""

    async def get_events(
        self,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[Event]:
        """Return events overlapping the window, cancelled ones included."""


class FreeSlotFinderService:
    """
    Orchestrates event retrieval and free-slot calculation.

    Dependency inversion toward a protocol makes it easy to plug in the HTTP
    calendar API store or the JSON file store in tests.
    """

    def __init__(
        self,
        event_store: EventStoreProtocol,
        slot_calculator: FreeSlotCalculator | None = None,
    ) -> None:
        self._event_store = event_store
        self._slot_calculator = slot_calculator or FreeSlotCalculator()

    async def find_slots(
        self,
        *,
        participants: Sequence[int],
        window_start: DateTime,
        window_end: DateTime,
        duration: timedelta,
        validate: bool = False,
    ) -> List[TimeSlot]:
        """
        Fetch candidate events and compute free slots.

        With ``validate=True`` a malformed query raises ``InvalidQueryError``
        instead of quietly producing no slots.
        """
        query = FreeSlotQuery(
            window_start=window_start,
            window_end=window_end,
            duration=duration,
            participant_ids=frozenset(participants),
        )
        if validate:
            self.validate_query(query)

        events = await self.fetch_events(
            window_start=window_start,
            window_end=window_end,
        )

        return self.calculate_slots(query=query, events=events)

    async def fetch_events(
        self,
        *,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[Event]:
        """Fetch candidate events for the window from the store."""
        events = list(
            await self._event_store.get_events(
                window_start=window_start,
                window_end=window_end,
            )
        )
        logger.debug("Event store returned %d event(s)", len(events))
        return events

    def calculate_slots(
        self,
        *,
        query: FreeSlotQuery,
        events: Iterable[Event],
    ) -> List[TimeSlot]:
        """Calculate free time slots from already fetched events."""
        return self._slot_calculator.find_free_slots(
            events=events,
            window_start=query.window_start,
            window_end=query.window_end,
            duration=query.duration,
            participant_ids=query.participant_ids,
        )

    @staticmethod
    def validate_query(query: FreeSlotQuery) -> None:
        """
        Reject queries that can never produce a slot.

        The calculator itself answers such queries with an empty list; this
        check lets callers tell "malformed" apart from "fully booked".

        Raises:
            InvalidQueryError: On a non-positive duration, an empty or
                inverted window, or a duration longer than the window
        """
        if query.duration <= timedelta(0):
            raise InvalidQueryError(
                f"Duration must be positive, got {query.duration_minutes} minute(s)"
            )

        if query.window_start >= query.window_end:
            raise InvalidQueryError(
                f"Window start {query.window_start} must be before window end {query.window_end}"
            )

        if query.duration > query.window_end - query.window_start:
            raise InvalidQueryError(
                f"Duration of {query.duration_minutes} minute(s) does not fit "
                f"into the window {query.window_start} - {query.window_end}"
            )
