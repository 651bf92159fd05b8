"""Apple Calendar gateway backed by the EventKit helper process."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence
import logging

from ..core.exceptions import HelperError
from ..utils.date import DateRange
from .helper import EventKitHelper

SORT_KEYS = ("start", "end", "title", "calendar")


@dataclass
class AuthorizationStatus:
    """Calendar authorization state reported by the helper."""
    status: str
    can_prompt: bool


@dataclass
class CalendarInfo:
    """An event calendar."""
    calendar_id: str
    title: str
    source: str
    calendar_type: str
    allows_modifications: bool


@dataclass
class CalendarEvent:
    """Calendar event data."""
    event_id: str
    title: str
    start_time: datetime
    end_time: datetime
    location: Optional[str]
    notes: Optional[str]
    is_all_day: bool
    calendar_name: str
    calendar_id: str
    declined: bool = False


def _parse_timestamp(value: Any) -> datetime:
    text = str(value or "").strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise HelperError(f"eventkit helper returned invalid timestamp {value!r}") from None


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text else None


def _expect_list(payload: Any, what: str) -> List[Dict[str, Any]]:
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise HelperError(f"eventkit helper returned unexpected {what} payload")
    return payload


class EventKitGateway:
    """Gateway for Apple Calendar via the EventKit helper."""

    def __init__(self, helper: EventKitHelper, logger: Optional[logging.Logger] = None):
        self.helper = helper
        self.logger = logger or logging.getLogger(__name__)

    def status(self) -> Optional[AuthorizationStatus]:
        payload = self.helper.run(["status"])
        if payload is None:
            return None
        if not isinstance(payload, dict) or "status" not in payload:
            raise HelperError("eventkit helper returned unexpected status payload")
        return AuthorizationStatus(
            status=str(payload["status"]),
            can_prompt=bool(payload.get("canPrompt", False)),
        )

    def get_calendars(self, no_input: bool = False) -> Optional[List[CalendarInfo]]:
        """Get event calendars sorted by title (case-insensitive)."""
        args = ["calendars"]
        if no_input:
            args.append("--no-input")
        payload = self.helper.run(args)
        if payload is None:
            return None

        calendars = [
            CalendarInfo(
                calendar_id=str(item.get("id", "")),
                title=str(item.get("title", "")),
                source=str(item.get("source", "")),
                calendar_type=str(item.get("type", "unknown")),
                allows_modifications=bool(item.get("allowsModifications", False)),
            )
            for item in _expect_list(payload, "calendars")
        ]
        calendars.sort(key=lambda cal: cal.title.lower())
        return calendars

    def get_events(self, date_range: DateRange,
                   calendars: Sequence[str] = (),
                   calendar_ids: Sequence[str] = (),
                   no_input: bool = False) -> Optional[List[CalendarEvent]]:
        """Get events overlapping ``date_range``, optionally limited to calendars."""
        args = ["events"] + date_range.helper_args()
        for name in calendars:
            args.extend(["--calendar", name])
        for identifier in calendar_ids:
            args.extend(["--calendar-id", identifier])
        if no_input:
            args.append("--no-input")

        self.logger.debug("Fetching events %s .. %s", date_range.start, date_range.end)
        payload = self.helper.run(args)
        if payload is None:
            return None

        result = []
        for item in _expect_list(payload, "events"):
            result.append(CalendarEvent(
                event_id=str(item.get("id", "")),
                title=str(item.get("title") or ""),
                start_time=_parse_timestamp(item.get("start")),
                end_time=_parse_timestamp(item.get("end")),
                location=_optional_text(item.get("location")),
                notes=_optional_text(item.get("notes")),
                is_all_day=bool(item.get("allDay", False)),
                calendar_name=str(item.get("calendar") or ""),
                calendar_id=str(item.get("calendarId") or ""),
                declined=bool(item.get("declined", False)),
            ))
        return result


def filter_events(events: Iterable[CalendarEvent],
                  query: Optional[str] = None,
                  include_all_day: bool = True,
                  include_declined: bool = False) -> List[CalendarEvent]:
    """Apply the text query, all-day and declined filters."""
    needle = (query or "").strip().lower()
    result = []
    for event in events:
        if needle:
            haystacks = (event.title, event.location or "", event.notes or "")
            if not any(needle in text.lower() for text in haystacks):
                continue
        if not include_all_day and event.is_all_day:
            continue
        if not include_declined and event.declined:
            continue
        result.append(event)
    return result


def sort_events(events: Iterable[CalendarEvent], key: str = "start") -> List[CalendarEvent]:
    """Sort by start, end, title or calendar (ties on calendar broken by start)."""
    if key == "end":
        return sorted(events, key=lambda e: e.end_time)
    if key == "title":
        return sorted(events, key=lambda e: e.title.lower())
    if key == "calendar":
        return sorted(events, key=lambda e: (e.calendar_name.lower(), e.start_time))
    return sorted(events, key=lambda e: e.start_time)


def limit_events(events: List[CalendarEvent], limit: Optional[int]) -> List[CalendarEvent]:
    if limit and limit > 0:
        return events[:limit]
    return events
