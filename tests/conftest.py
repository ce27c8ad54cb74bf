"""
Shared fixtures.
"""

import pytest


@pytest.fixture
def event_records():
    """Calendar API records: one normal, one cancelled, one outside the day."""
    return [
        {
            "id": 1,
            "title": "Standup",
            "description": "",
            "startTime": "2024-03-01T09:00:00Z",
            "endTime": "2024-03-01T09:30:00Z",
            "isCancelled": False,
            "participants": [{"userId": 1}, {"userId": 2}],
        },
        {
            "id": 2,
            "title": "Cancelled review",
            "startTime": "2024-03-01T10:00:00Z",
            "endTime": "2024-03-01T11:00:00Z",
            "isCancelled": True,
            "participants": [{"userId": 1}],
        },
        {
            "id": 3,
            "title": "Tomorrow",
            "startTime": "2024-03-02T09:00:00Z",
            "endTime": "2024-03-02T10:00:00Z",
            "isCancelled": False,
            "participants": [{"userId": 2}],
        },
    ]
