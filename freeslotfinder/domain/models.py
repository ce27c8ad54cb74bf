"""
Domain models for events, time ranges and free slots.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, FrozenSet, Iterable, List

from pendulum import DateTime


def intervals_overlap(
    a_start: datetime,
    a_end: datetime,
    b_start: datetime,
    b_end: datetime,
) -> bool:
    """
    Half-open overlap test for ``[a_start, a_end)`` and ``[b_start, b_end)``.

    Shared boundary points do not count: an interval ending at 10:00 does not
    overlap one starting at 10:00.
    """
    return a_start < b_end and b_start < a_end


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another."""
        return intervals_overlap(self.start, self.end, other.start, other.end)

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class Event:
    """
    A calendar event as seen by the availability engine.

    Unlike ``TimeRange`` no ordering of start and end is enforced: events
    with ``start >= end`` are accepted and simply never block a slot.
    """
    start: DateTime
    end: DateTime
    cancelled: bool = False
    participant_user_ids: FrozenSet[int] = field(default_factory=frozenset)
    id: int | None = None
    title: str = ""
    description: str = ""

    def overlaps(self, start: datetime, end: datetime) -> bool:
        """Check if the event overlaps ``[start, end)``."""
        return intervals_overlap(self.start, self.end, start, end)

    def involves_any(self, user_ids: Iterable[int]) -> bool:
        """Check if at least one of ``user_ids`` takes part in the event."""
        return not self.participant_user_ids.isdisjoint(user_ids)


@dataclass(frozen=True)
class FreeSlotQuery:
    """Parameters of a single free-slot search."""
    window_start: DateTime
    window_end: DateTime
    duration: timedelta
    participant_ids: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def duration_minutes(self) -> int:
        return int(self.duration.total_seconds() // 60)


@dataclass
class TimeSlot:
    """
    Represents a found available time slot.
    """
    time_range: TimeRange
    participants: List[int]  # User ids the slot was computed for

    @property
    def start(self) -> DateTime:
        return self.time_range.start

    @property
    def end(self) -> DateTime:
        return self.time_range.end

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the calendar API's ``{startTime, endTime}`` shape."""
        return {
            "startTime": self.start.to_iso8601_string(),
            "endTime": self.end.to_iso8601_string(),
        }

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: Weekday, DD.MM.YYYY | HH:MM – HH:MM (N min)
        """
        start = self.time_range.start
        end = self.time_range.end

        date_str = start.format("dddd, DD.MM.YYYY")
        time_str = f"{start.format('HH:mm')} – {end.format('HH:mm')} {start.timezone_name}"
        duration = self.time_range.duration_minutes()

        return f"{date_str} | {time_str} ({duration} min)"
