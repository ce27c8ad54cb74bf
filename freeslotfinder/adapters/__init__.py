"""
Adapters layer - External integrations (calendar API, JSON files).
"""

from .api_authenticator import ApiAuthenticator
from .http_event_store import HttpEventStore
from .json_event_store import JsonEventStore

__all__ = ["ApiAuthenticator", "HttpEventStore", "JsonEventStore"]
