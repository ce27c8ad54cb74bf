"""
Calendar API client for fetching events.
"""

import logging
from typing import Any, Dict, List

import requests
from pendulum import DateTime

from ..domain.exceptions import EventStoreError
from ..domain.models import Event
from .records import overlapping, parse_event_records

logger = logging.getLogger(__name__)


class HttpEventStore:
    """
    Event store reading from the calendar API.

    Uses the ``/events`` endpoint. The server's own ``startDate``/``endDate``
    filter only returns events fully contained in the range, so events are
    fetched unfiltered and the overlap check happens here.
    """

    def __init__(self, base_url: str, access_token: str, timeout: int = 30):
        """
        Initialize the calendar API client.

        Args:
            base_url: API root, e.g. ``http://localhost:5000/api/v1``
            access_token: Valid JWT issued by ``/auth/login``
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }

    async def get_events(
        self,
        window_start: DateTime,
        window_end: DateTime,
    ) -> List[Event]:
        """
        Get the events overlapping a time window.

        Args:
            window_start: Start of the time window
            window_end: End of the time window

        Returns:
            Overlapping events, cancelled ones included

        Raises:
            EventStoreError: If the API call fails or returns unexpected data
        """
        records = self._get_json("/events")

        if not isinstance(records, list):
            raise EventStoreError("Unexpected /events response: expected a list of events")

        events = parse_event_records(records)
        logger.debug("Parsed %d of %d event record(s)", len(events), len(records))

        return overlapping(events, window_start, window_end)

    def test_connection(self) -> List[Dict[str, Any]]:
        """
        Test the connection and token by listing the users.

        Returns:
            User records

        Raises:
            EventStoreError: If connection test fails
        """
        return self._get_json("/users")

    def _get_json(self, path: str) -> Any:
        url = f"{self.base_url}{path}"

        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
            return response.json()

        except requests.exceptions.RequestException as e:
            raise EventStoreError(f"Request to {url} failed: {e}") from e

        except ValueError as e:
            raise EventStoreError(f"Invalid JSON from {url}: {e}") from e
