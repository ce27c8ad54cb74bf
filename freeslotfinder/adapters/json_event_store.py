"""
Event store backed by a local JSON file, for use without the calendar API.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from pendulum import DateTime

from ..domain.exceptions import EventStoreError
from ..domain.models import Event
from .records import overlapping, parse_event_records

logger = logging.getLogger(__name__)

DEFAULT_EVENTS_FILE = Path(__file__).parent / "mock_events.json"


class JsonEventStore:
    """
    Event store that reads calendar API event records from a JSON file.

    The file holds a list of records in the same shape the
    ``GET /events`` endpoint returns, which makes it handy for testing
    without a running server or credentials.
    """

    def __init__(self, path: Path | None = None):
        """
        Initialize the store.

        Args:
            path: JSON file to read; defaults to the bundled mock data
        """
        self.path = path or DEFAULT_EVENTS_FILE
        self.events = parse_event_records(self._load_records())

    def _load_records(self) -> List[Dict[str, Any]]:
        """Load raw records from the JSON file."""
        if not self.path.exists():
            logger.warning("Events file %s not found, using an empty store", self.path)
            return []

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            raise EventStoreError(f"Could not read events file {self.path}: {exc}") from exc

        if not isinstance(data, list):
            raise EventStoreError(f"Events file {self.path} must contain a list of events.")

        return data

    async def get_events(
        self,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[Event]:
        """
        Return the stored events that overlap the window.

        Args:
            window_start: Start of the time window
            window_end: End of the time window

        Returns:
            Overlapping events, cancelled ones included
        """
        return overlapping(self.events, window_start, window_end)
