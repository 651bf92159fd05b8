"""Plain, JSON and table renderers for EventKit query results."""

import json
from datetime import datetime, tzinfo
from typing import List, Optional, Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import UsageError
from .gateway import AuthorizationStatus, CalendarEvent, CalendarInfo

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"

STATUS_FORMATS = ("plain", "json")
LIST_FORMATS = ("plain", "json", "table")


def resolve_format(format_name: Optional[str], as_json: bool, as_plain: bool,
                   allowed: Sequence[str], default: str = "plain") -> str:
    """
    Reconcile ``--format`` with the ``--json``/``--plain`` shortcuts.

    Raises:
        UsageError: on conflicting flags or a format not in ``allowed``
    """
    if format_name:
        if as_json or as_plain:
            raise UsageError("cannot combine --format with --json/--plain")
        normalized = format_name.strip().lower()
        if normalized not in allowed:
            raise UsageError(f"invalid --format {format_name!r} (want: {', '.join(allowed)})")
        return normalized
    if as_json and as_plain:
        raise UsageError("--json and --plain are mutually exclusive")
    if as_json:
        return "json"
    if as_plain:
        return "plain"
    return default if default in allowed else allowed[0]


def resolve_timezone(name: Optional[str]) -> tzinfo:
    """Return the named IANA zone, or the system local zone when blank."""
    if not name or not name.strip():
        return datetime.now().astimezone().tzinfo
    try:
        return ZoneInfo(name.strip())
    except (ZoneInfoNotFoundError, ValueError, OSError):
        # a zone directory such as "America" raises IsADirectoryError
        raise UsageError(f"invalid --tz value: {name}") from None


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    """Left-aligned columns separated by two spaces, with a dashed rule under the header."""
    widths = [len(header) for header in headers]
    for row in rows:
        for index, value in enumerate(row):
            widths[index] = max(widths[index], len(value))

    def line(values: Sequence[str]) -> str:
        return "  ".join(value.ljust(widths[index]) for index, value in enumerate(values))

    lines = [line(headers), "  ".join("-" * width for width in widths)]
    lines.extend(line(row) for row in rows)
    return "\n".join(lines)


def render_status(status: AuthorizationStatus, fmt: str) -> str:
    if fmt == "json":
        return json.dumps({"status": status.status, "canPrompt": status.can_prompt})
    return status.status


def render_calendars(calendars: List[CalendarInfo], fmt: str) -> str:
    if fmt == "json":
        return json.dumps([
            {
                "id": cal.calendar_id,
                "title": cal.title,
                "source": cal.source,
                "type": cal.calendar_type,
                "allowsModifications": cal.allows_modifications,
            }
            for cal in calendars
        ])
    if fmt == "table":
        rows = [[cal.title, cal.source, cal.calendar_type, cal.calendar_id] for cal in calendars]
        return render_table(["Title", "Source", "Type", "ID"], rows)
    return "\n".join(f"{cal.title}\t({cal.source})" for cal in calendars)


def render_events(events: List[CalendarEvent], fmt: str, tz: tzinfo) -> str:
    if fmt == "json":
        return json.dumps([
            {
                "id": event.event_id,
                "title": event.title,
                "calendar": event.calendar_name,
                "calendarId": event.calendar_id,
                "start": event.start_time.astimezone(tz).isoformat(),
                "end": event.end_time.astimezone(tz).isoformat(),
                "allDay": event.is_all_day,
                "location": event.location,
                "notes": event.notes,
            }
            for event in events
        ])

    rows = [
        [
            event.start_time.astimezone(tz).strftime(DISPLAY_FORMAT),
            event.end_time.astimezone(tz).strftime(DISPLAY_FORMAT),
            event.calendar_name,
            event.title,
        ]
        for event in events
    ]
    if fmt == "table":
        return render_table(["Start", "End", "Calendar", "Title"], rows)
    return "\n".join("\t".join(row) for row in rows)
