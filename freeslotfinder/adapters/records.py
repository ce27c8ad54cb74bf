"""
Parsing of calendar API event records into domain events.
"""

import logging
from typing import Any, Dict, Iterable, List

import pendulum
from pendulum import DateTime

from ..domain.models import Event

logger = logging.getLogger(__name__)


def parse_datetime(value: str) -> DateTime:
    """
    Parse an ISO 8601 string to a pendulum DateTime in UTC.

    Strings without an offset are taken to be UTC already.

    Raises:
        ValueError: If the string is not a date-time
    """
    dt = pendulum.parse(value)

    if isinstance(dt, DateTime):
        return dt.in_timezone("UTC")

    raise ValueError(f"Could not parse datetime: {value}")


def parse_event_record(record: Dict[str, Any]) -> Event:
    """
    Convert one calendar API event record to an ``Event``.

    Record format:
    {
        "id": 1,
        "title": "Standup",
        "description": "",
        "startTime": "2024-03-01T09:00:00Z",
        "endTime": "2024-03-01T09:30:00Z",
        "isCancelled": false,
        "participants": [{"userId": 1}, {"userId": 2}]
    }

    Raises:
        KeyError: If start or end time is missing
        ValueError: If a field has an unusable value
    """
    start = parse_datetime(record["startTime"])
    end = parse_datetime(record["endTime"])

    participant_ids = frozenset(
        int(participant["userId"])
        for participant in record.get("participants") or []
    )

    return Event(
        start=start,
        end=end,
        cancelled=bool(record.get("isCancelled", False)),
        participant_user_ids=participant_ids,
        id=record.get("id"),
        title=record.get("title") or "",
        description=record.get("description") or "",
    )


def parse_event_records(records: Iterable[Dict[str, Any]]) -> List[Event]:
    """Parse many records, skipping (and logging) the ones that are invalid."""
    events: List[Event] = []

    for record in records:
        try:
            events.append(parse_event_record(record))
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping invalid event record %r: %s", record, exc)
            continue

    return events


def overlapping(events: Iterable[Event], window_start: DateTime, window_end: DateTime) -> List[Event]:
    """Keep the events whose interval overlaps ``[window_start, window_end)``."""
    return [event for event in events if event.overlaps(window_start, window_end)]
