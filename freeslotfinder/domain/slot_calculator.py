"""
Core business logic for calculating free meeting slots.

This is the heart of the application - pure domain logic with no I/O
(no API calls, no database, no files).
"""

import dataclasses
import logging
from datetime import datetime, timedelta
from typing import FrozenSet, Iterable, List

import pendulum

from .models import Event, TimeRange, TimeSlot, intervals_overlap

logger = logging.getLogger(__name__)

# Scan cursor increment, independent of the requested meeting duration.
GRID_STEP = timedelta(minutes=30)


class FreeSlotCalculator:
    """
    Calculates free meeting slots for a set of participants.

    Algorithm:
    1. Keep only relevant events: not cancelled, involving at least one
       required participant, overlapping the search window
    2. Walk a cursor from the window start in fixed 30 minute steps
    3. At each step, the candidate ``[cursor, cursor + duration)`` is free
       unless a relevant event overlaps it (half-open, touching is fine)
    4. Stop as soon as a candidate would end after the window

    The result is a coarse grid sample of the window, not every possible
    start instant: a free window that only exists off-grid is not reported.
    """

    def find_free_slots(
        self,
        events: Iterable[Event],
        window_start: datetime,
        window_end: datetime,
        duration: timedelta,
        participant_ids: Iterable[int],
    ) -> List[TimeSlot]:
        """
        Find all grid-aligned slots in which every participant is free.

        Args:
            events: Candidate events; cancelled and unrelated ones are ignored
            window_start: Start of the search window (UTC)
            window_end: End of the search window (UTC)
            duration: Requested meeting length
            participant_ids: Required attendees

        Returns:
            TimeSlot objects in chronological order. Empty for a non-positive
            duration, an empty or inverted window, or a duration that does
            not fit the window.
        """
        if duration <= timedelta(0):
            return []

        participants = frozenset(participant_ids)
        window_start = pendulum.instance(window_start)
        window_end = pendulum.instance(window_end)

        relevant_events = self._relevant_events(
            events, window_start, window_end, participants
        )
        logger.debug(
            "Scanning %s - %s with %d relevant event(s)",
            window_start, window_end, len(relevant_events),
        )

        slots: List[TimeSlot] = []
        current = window_start

        while True:
            candidate_end = current + duration
            if candidate_end > window_end:
                break

            if self._is_free(relevant_events, current, candidate_end):
                slots.append(
                    TimeSlot(
                        time_range=TimeRange(start=current, end=candidate_end),
                        participants=sorted(participants),
                    )
                )

            current = current + GRID_STEP

        logger.debug("Found %d free slot(s)", len(slots))
        return slots

    @staticmethod
    def _relevant_events(
        events: Iterable[Event],
        window_start: datetime,
        window_end: datetime,
        participants: FrozenSet[int],
    ) -> List[Event]:
        """
        Filter events down to those that can block a slot.

        Event times are normalised like the window, so naive values count
        as UTC. Events with start >= end are dropped, they never block anything.
        Sorting by start only makes debugging output deterministic; the
        conflict test scans the whole list.
        """
        normalised = (
            dataclasses.replace(
                event,
                start=pendulum.instance(event.start),
                end=pendulum.instance(event.end),
            )
            for event in events
        )
        relevant = [
            event for event in normalised
            if not event.cancelled
            and event.start < event.end
            and event.involves_any(participants)
            and event.overlaps(window_start, window_end)
        ]
        return sorted(relevant, key=lambda e: e.start)

    @staticmethod
    def _is_free(
        relevant_events: List[Event],
        slot_start: datetime,
        slot_end: datetime,
    ) -> bool:
        # Overlapping events are implicitly unioned by the any() test.
        return not any(
            intervals_overlap(event.start, event.end, slot_start, slot_end)
            for event in relevant_events
        )


def find_free_slots(
    events: Iterable[Event],
    window_start: datetime,
    window_end: datetime,
    duration: timedelta,
    participant_ids: Iterable[int],
) -> List[TimeSlot]:
    """Module-level shortcut for ``FreeSlotCalculator().find_free_slots``."""
    return FreeSlotCalculator().find_free_slots(
        events=events,
        window_start=window_start,
        window_end=window_end,
        duration=duration,
        participant_ids=participant_ids,
    )
