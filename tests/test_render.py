"""
Tests for EventKit output rendering (fantastical_cli/eventkit/render.py).
"""

import json
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from fantastical_cli.core.exceptions import UsageError
from fantastical_cli.eventkit.gateway import AuthorizationStatus, CalendarEvent, CalendarInfo
from fantastical_cli.eventkit.render import (
    LIST_FORMATS,
    STATUS_FORMATS,
    render_calendars,
    render_events,
    render_status,
    resolve_format,
    resolve_timezone
)

CALENDARS = [
    CalendarInfo("c1", "Home", "iCloud", "caldav", True),
    CalendarInfo("c2", "Work", "Exchange", "exchange", False),
]

EVENTS = [
    CalendarEvent(
        event_id="e1",
        title="Standup",
        start_time=datetime(2026, 1, 7, 14, 0, tzinfo=timezone.utc),
        end_time=datetime(2026, 1, 7, 14, 15, tzinfo=timezone.utc),
        location=None,
        notes="daily",
        is_all_day=False,
        calendar_name="Work",
        calendar_id="c2",
    ),
]


class TestResolveFormat:
    """Test --format/--json/--plain reconciliation."""

    def test_default(self):
        assert resolve_format(None, False, False, LIST_FORMATS) == "plain"

    def test_configured_default(self):
        assert resolve_format(None, False, False, LIST_FORMATS, default="json") == "json"

    def test_shortcuts(self):
        assert resolve_format(None, True, False, LIST_FORMATS) == "json"
        assert resolve_format(None, False, True, LIST_FORMATS, default="json") == "plain"

    def test_explicit_format_is_normalized(self):
        assert resolve_format(" TABLE ", False, False, LIST_FORMATS) == "table"

    def test_format_with_shortcut_conflicts(self):
        with pytest.raises(UsageError, match="cannot combine --format"):
            resolve_format("json", True, False, LIST_FORMATS)

    def test_json_and_plain_conflict(self):
        with pytest.raises(UsageError, match="mutually exclusive"):
            resolve_format(None, True, True, LIST_FORMATS)

    def test_status_rejects_table(self):
        with pytest.raises(UsageError, match="invalid --format"):
            resolve_format("table", False, False, STATUS_FORMATS)


class TestResolveTimezone:
    """Test --tz handling."""

    def test_named_zone(self):
        assert resolve_timezone("America/New_York") == ZoneInfo("America/New_York")

    def test_blank_is_local(self):
        assert resolve_timezone("  ") is not None

    def test_invalid_zone(self):
        with pytest.raises(UsageError, match="invalid --tz value: Mars/Olympus"):
            resolve_timezone("Mars/Olympus")

    def test_zone_directory_is_invalid(self):
        with pytest.raises(UsageError, match="invalid --tz value: America"):
            resolve_timezone("America")


class TestRenderers:
    """Test plain, table and JSON output."""

    def test_status(self):
        status = AuthorizationStatus("full_access", False)
        assert render_status(status, "plain") == "full_access"
        assert json.loads(render_status(status, "json")) == {"status": "full_access", "canPrompt": False}

    def test_calendars_plain(self):
        assert render_calendars(CALENDARS, "plain") == "Home\t(iCloud)\nWork\t(Exchange)"

    def test_calendars_table(self):
        lines = render_calendars(CALENDARS, "table").split("\n")
        assert lines[0].split() == ["Title", "Source", "Type", "ID"]
        assert set(lines[1]) <= {"-", " "}
        assert lines[3].split() == ["Work", "Exchange", "exchange", "c2"]

    def test_calendars_json(self):
        data = json.loads(render_calendars(CALENDARS, "json"))
        assert data[1] == {
            "id": "c2", "title": "Work", "source": "Exchange",
            "type": "exchange", "allowsModifications": False,
        }

    def test_events_plain_in_target_zone(self):
        tz = ZoneInfo("America/New_York")
        assert render_events(EVENTS, "plain", tz) == "2026-01-07 09:00\t2026-01-07 09:15\tWork\tStandup"

    def test_events_json(self):
        data = json.loads(render_events(EVENTS, "json", ZoneInfo("Europe/Berlin")))
        assert data == [{
            "id": "e1",
            "title": "Standup",
            "calendar": "Work",
            "calendarId": "c2",
            "start": "2026-01-07T15:00:00+01:00",
            "end": "2026-01-07T15:15:00+01:00",
            "allDay": False,
            "location": None,
            "notes": "daily",
        }]

    def test_events_table(self):
        lines = render_events(EVENTS, "table", timezone.utc).split("\n")
        assert lines[0].split() == ["Start", "End", "Calendar", "Title"]
        assert lines[2].startswith("2026-01-07 14:00  2026-01-07 14:15  Work")

    def test_empty_plain_output(self):
        assert render_events([], "plain", timezone.utc) == ""
        assert render_calendars([], "plain") == ""
