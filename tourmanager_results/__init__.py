"""Tourmanager results client package.

Fetches race-event data (stages, rankings, selections, points and start-list
favorites) from the tourmanager scraper service into an observable
``DataStore``, and formats rider names for display.
"""

from .config import EVENT_CONFIG, EventConfig, Resource
from .names import format_rider_name
from .store import DataStore, ResourceStatus, StoreSnapshot

__all__ = [
    "EVENT_CONFIG",
    "DataStore",
    "EventConfig",
    "Resource",
    "ResourceStatus",
    "StoreSnapshot",
    "format_rider_name",
]
