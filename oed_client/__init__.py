"""Asynchronous client for the Open Energy Dashboard backend API."""

from .api import ApiResponse, OEDClient, join_ids
from .time_interval import TimeInterval, duration_isoformat
from .token import TokenProvider, TokenStore

__all__ = [
    "ApiResponse",
    "OEDClient",
    "TimeInterval",
    "TokenProvider",
    "TokenStore",
    "duration_isoformat",
    "join_ids",
]
