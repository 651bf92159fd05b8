"""EventKit commands - query the macOS calendar store through the helper."""

from typing import Optional, Sequence, TextIO

from ..core.models import Config
from ..eventkit.gateway import EventKitGateway, filter_events, limit_events, sort_events
from ..eventkit.helper import EventKitHelper
from ..eventkit.render import (
    LIST_FORMATS, STATUS_FORMATS, render_calendars, render_events,
    render_status, resolve_format, resolve_timezone
)
from ..utils.date import resolve_date_range
from ..utils.system import ProcessRunner
from .base import Command


class EventKitCommand(Command):
    """Implements ``eventkit status``, ``calendars`` and ``events``."""

    name = "eventkit"

    def __init__(self, config: Config, runner: Optional[ProcessRunner] = None,
                 out: Optional[TextIO] = None, verbose: bool = False,
                 gateway: Optional[EventKitGateway] = None):
        super().__init__(config, runner=runner, out=out, verbose=verbose)
        self.gateway = gateway or EventKitGateway(
            EventKitHelper(runner=self.runner, env=self.runner.env)
        )

    def _format(self, format_name: Optional[str], as_json: bool, as_plain: bool,
                allowed: Sequence[str]) -> str:
        output = self.config.output
        default = "json" if output.json and not output.plain else "plain"
        return resolve_format(format_name, as_json, as_plain, allowed, default=default)

    def _emit_nonempty(self, text: str) -> None:
        if text:
            self.emit(text)

    def status(self, format_name: Optional[str] = None,
               as_json: bool = False, as_plain: bool = False) -> bool:
        fmt = self._format(format_name, as_json, as_plain, STATUS_FORMATS)
        status = self.gateway.status()
        if status is None:
            return True
        self._emit_nonempty(render_status(status, fmt))
        return True

    def calendars(self, format_name: Optional[str] = None,
                  as_json: bool = False, as_plain: bool = False,
                  no_input: bool = False) -> bool:
        fmt = self._format(format_name, as_json, as_plain, LIST_FORMATS)
        calendars = self.gateway.get_calendars(no_input=no_input)
        if calendars is None:
            return True
        self._emit_nonempty(render_calendars(calendars, fmt))
        return True

    def events(self, format_name: Optional[str] = None,
               as_json: bool = False, as_plain: bool = False,
               calendars: Sequence[str] = (),
               calendar_ids: Sequence[str] = (),
               from_value: Optional[str] = None,
               to_value: Optional[str] = None,
               days: Optional[int] = None,
               today: bool = False,
               tomorrow: bool = False,
               this_week: bool = False,
               next_week: bool = False,
               limit: Optional[int] = None,
               include_all_day: bool = True,
               include_declined: bool = False,
               sort: str = "start",
               tz: Optional[str] = None,
               query: Optional[str] = None,
               no_input: bool = False) -> bool:
        """
        List events in the resolved window.

        Validation (format, time zone, date range) happens before the helper
        is located or built, so usage errors never trigger a compile.
        """
        fmt = self._format(format_name, as_json, as_plain, LIST_FORMATS)
        zone = resolve_timezone(tz if tz is not None else self.config.eventkit.timezone)
        date_range = resolve_date_range(
            from_value=from_value,
            to_value=to_value,
            days=days,
            today=today,
            tomorrow=tomorrow,
            this_week=this_week,
            next_week=next_week,
            week_start=self.config.eventkit.week_start or "monday",
        )

        events = self.gateway.get_events(
            date_range,
            calendars=calendars,
            calendar_ids=calendar_ids,
            no_input=no_input,
        )
        if events is None:
            return True

        events = filter_events(events, query, include_all_day, include_declined)
        events = limit_events(sort_events(events, sort), limit)
        self.logger.debug("%d event(s) after filtering", len(events))
        self._emit_nonempty(render_events(events, fmt, zone))
        return True
