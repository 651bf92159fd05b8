"""
Tests for the EventKit gateway and event post-processing
(fantastical_cli/eventkit/gateway.py).
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import Mock

import pytest

from fantastical_cli.core.exceptions import HelperError
from fantastical_cli.eventkit.gateway import (
    CalendarEvent,
    EventKitGateway,
    filter_events,
    limit_events,
    sort_events
)
from fantastical_cli.utils.date import DateRange

UTC = timezone.utc


def _event(title, start_hour, calendar="Work", all_day=False, declined=False,
           location=None, notes=None, end_hour=None):
    start = datetime(2026, 1, 7, start_hour, tzinfo=UTC)
    end = start + timedelta(hours=1) if end_hour is None else datetime(2026, 1, 7, end_hour, tzinfo=UTC)
    return CalendarEvent(
        event_id=f"id-{title}",
        title=title,
        start_time=start,
        end_time=end,
        location=location,
        notes=notes,
        is_all_day=all_day,
        calendar_name=calendar,
        calendar_id=f"cal-{calendar}",
        declined=declined,
    )


class TestEventKitGateway:
    """Test decoding of helper payloads."""

    def test_status(self):
        helper = Mock()
        helper.run.return_value = {"status": "not_determined", "canPrompt": True}
        status = EventKitGateway(helper).status()
        helper.run.assert_called_once_with(["status"])
        assert status.status == "not_determined"
        assert status.can_prompt is True

    def test_status_payload_must_be_object(self):
        helper = Mock()
        helper.run.return_value = ["authorized"]
        with pytest.raises(HelperError, match="unexpected status payload"):
            EventKitGateway(helper).status()

    def test_calendars_sorted_case_insensitively(self):
        helper = Mock()
        helper.run.return_value = [
            {"id": "2", "title": "work", "source": "iCloud", "type": "caldav", "allowsModifications": True},
            {"id": "1", "title": "Birthdays", "source": "Other", "type": "birthday"},
            {"id": "3", "title": "Home", "source": "iCloud", "type": "caldav", "allowsModifications": True},
        ]
        calendars = EventKitGateway(helper).get_calendars(no_input=True)
        helper.run.assert_called_once_with(["calendars", "--no-input"])
        assert [cal.title for cal in calendars] == ["Birthdays", "Home", "work"]
        assert calendars[0].allows_modifications is False
        assert calendars[0].calendar_type == "birthday"

    def test_events_arguments_and_decoding(self):
        helper = Mock()
        helper.run.return_value = [{
            "id": "e1",
            "title": "Standup",
            "calendar": "Work",
            "calendarId": "cal-1",
            "start": "2026-01-07T09:00:00Z",
            "end": "2026-01-07T09:15:00+01:00",
            "allDay": False,
            "location": "",
            "notes": None,
            "declined": True,
        }]
        rng = DateRange(datetime(2026, 1, 7), datetime(2026, 1, 7, 23, 59, 59))
        events = EventKitGateway(helper).get_events(
            rng, calendars=["Work", "Home"], calendar_ids=["abc"], no_input=True
        )

        helper.run.assert_called_once_with([
            "events", "--from", "2026-01-07T00:00:00", "--to", "2026-01-07T23:59:59",
            "--calendar", "Work", "--calendar", "Home", "--calendar-id", "abc", "--no-input",
        ])
        event = events[0]
        assert event.start_time == datetime(2026, 1, 7, 9, tzinfo=UTC)
        assert event.end_time.utcoffset() == timedelta(hours=1)
        assert event.location is None
        assert event.notes is None
        assert event.declined is True

    def test_invalid_timestamp(self):
        helper = Mock()
        helper.run.return_value = [{"id": "e1", "start": "yesterday", "end": "2026-01-07T09:00:00Z"}]
        rng = DateRange(datetime(2026, 1, 7), datetime(2026, 1, 8))
        with pytest.raises(HelperError, match="invalid timestamp"):
            EventKitGateway(helper).get_events(rng)

    def test_dry_run_returns_none(self):
        helper = Mock()
        helper.run.return_value = None
        gateway = EventKitGateway(helper)
        assert gateway.status() is None
        assert gateway.get_calendars() is None
        assert gateway.get_events(DateRange(datetime(2026, 1, 7), datetime(2026, 1, 8))) is None


class TestEventProcessing:
    """Test query filtering, sorting and limiting."""

    def test_query_matches_title_location_and_notes(self):
        events = [
            _event("Design review", 9),
            _event("Lunch", 12, location="Cafe REVIEW"),
            _event("Gym", 18, notes="leg day; review form"),
            _event("Commute", 8),
        ]
        assert [e.title for e in filter_events(events, "review")] == ["Design review", "Lunch", "Gym"]

    def test_excludes_all_day_and_declined(self):
        events = [
            _event("Holiday", 0, all_day=True),
            _event("Skipped", 10, declined=True),
            _event("Kept", 11),
        ]
        assert [e.title for e in filter_events(events, include_all_day=False)] == ["Kept"]
        assert [e.title for e in filter_events(events, include_declined=True)] == ["Holiday", "Skipped", "Kept"]

    def test_sort_keys(self):
        events = [
            _event("b", 11, calendar="Home", end_hour=20),
            _event("C", 9, calendar="work", end_hour=10),
            _event("a", 10, calendar="Home", end_hour=12),
        ]
        assert [e.title for e in sort_events(events, "start")] == ["C", "a", "b"]
        assert [e.title for e in sort_events(events, "end")] == ["C", "a", "b"]
        assert [e.title for e in sort_events(events, "title")] == ["a", "b", "C"]
        assert [e.title for e in sort_events(events, "calendar")] == ["a", "b", "C"]

    def test_limit(self):
        events = [_event(str(i), i) for i in range(5)]
        assert len(limit_events(events, 2)) == 2
        assert len(limit_events(events, 0)) == 5
        assert len(limit_events(events, None)) == 5
