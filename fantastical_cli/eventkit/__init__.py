"""EventKit integration: helper build/cache, calendar queries and rendering."""

from .helper import EventKitHelper, HELPER_ENV
from .gateway import (
    EventKitGateway, AuthorizationStatus, CalendarInfo, CalendarEvent,
    filter_events, sort_events, limit_events, SORT_KEYS
)

__all__ = [
    'EventKitHelper',
    'HELPER_ENV',
    'EventKitGateway',
    'AuthorizationStatus',
    'CalendarInfo',
    'CalendarEvent',
    'filter_events',
    'sort_events',
    'limit_events',
    'SORT_KEYS'
]
