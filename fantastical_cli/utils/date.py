"""
Date parsing and date-range resolution utilities.

All values here are naive local datetimes; the EventKit helper interprets
them in the system time zone.
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

from ..core.exceptions import UsageError

DATE_FORMAT = "%Y-%m-%d"
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Accepted --from/--to formats, most specific first.
DATETIME_FORMATS = ("%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M", DATE_FORMAT)

WEEK_STARTS = {"monday": 0, "sunday": 6}

_RELATIVE_DAYS = {"today": 0, "tomorrow": 1, "yesterday": -1}


def parse_date_arg(value: Optional[str], today: Optional[date] = None) -> date:
    """
    Parse a ``show`` date argument.

    Accepts ``YYYY-MM-DD`` or ``today``/``tomorrow``/``yesterday``
    (case-insensitive).

    Raises:
        UsageError: for blank or unrecognised values
    """
    text = (value or "").strip()
    if not text:
        raise UsageError("empty date")

    offset = _RELATIVE_DAYS.get(text.lower())
    if offset is not None:
        base = today or date.today()
        return base + timedelta(days=offset)

    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError:
        raise UsageError(
            f"invalid date {text!r}; want yyyy-mm-dd (e.g. 2026-01-03) or today/tomorrow/yesterday"
        ) from None


def format_date(d: date) -> str:
    """Format a date as ``YYYY-MM-DD``."""
    return d.strftime(DATE_FORMAT)


def format_timestamp(dt: datetime) -> str:
    """Format a local datetime as ``YYYY-MM-DDTHH:MM:SS``."""
    return dt.strftime(TIMESTAMP_FORMAT)


def parse_datetime_arg(value: str) -> Optional[Tuple[datetime, bool]]:
    """
    Parse a ``--from``/``--to`` value.

    Returns:
        ``(datetime, date_only)`` or None when no accepted format matches
    """
    text = value.strip()
    for fmt in DATETIME_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed, fmt == DATE_FORMAT
    return None


def start_of_day(dt: datetime) -> datetime:
    return datetime.combine(dt.date(), time.min)


def end_of_day(dt: datetime) -> datetime:
    """Last whole second of the day."""
    return start_of_day(dt) + timedelta(days=1, seconds=-1)


def week_bounds(day: date, week_start: str = "monday") -> Tuple[datetime, datetime]:
    """Return the first and last second of the week containing ``day``."""
    try:
        first_weekday = WEEK_STARTS[week_start.lower()]
    except KeyError:
        raise UsageError(f"invalid week start {week_start!r} (want: monday, sunday)") from None
    delta = (day.weekday() - first_weekday) % 7
    start = datetime.combine(day - timedelta(days=delta), time.min)
    return start, start + timedelta(days=7, seconds=-1)


@dataclass(frozen=True)
class DateRange:
    """An inclusive local time range for an events query."""
    start: datetime
    end: datetime

    def helper_args(self):
        return ["--from", format_timestamp(self.start), "--to", format_timestamp(self.end)]


def resolve_date_range(from_value: Optional[str] = None,
                       to_value: Optional[str] = None,
                       days: Optional[int] = None,
                       today: bool = False,
                       tomorrow: bool = False,
                       this_week: bool = False,
                       next_week: bool = False,
                       now: Optional[datetime] = None,
                       week_start: str = "monday") -> DateRange:
    """
    Resolve the events query window from the command-line selectors.

    Presets (today/tomorrow/this-week/next-week) are mutually exclusive and
    cannot be combined with --from/--to/--days; --days cannot be combined
    with --from/--to. Without any selector the window is today.

    Raises:
        UsageError: on conflicting selectors, unparseable values, or an
            empty window
    """
    now = (now or datetime.now()).replace(microsecond=0)
    has_from = bool(from_value and from_value.strip())
    has_to = bool(to_value and to_value.strip())

    presets = [today, tomorrow, this_week, next_week]
    if sum(1 for flag in presets if flag) > 1:
        raise UsageError("only one of --today/--tomorrow/--this-week/--next-week can be used")
    if any(presets) and (has_from or has_to or days is not None):
        raise UsageError("--from/--to/--days cannot be combined with date shortcuts")
    if days is not None and (has_from or has_to):
        raise UsageError("--days cannot be combined with --from/--to")

    if days is not None:
        if days <= 0:
            raise UsageError("--days must be greater than 0")
        try:
            return DateRange(now, now + timedelta(days=days))
        except OverflowError:
            raise UsageError("--days is out of range") from None

    if today:
        return DateRange(start_of_day(now), end_of_day(now))
    if tomorrow:
        next_day = now + timedelta(days=1)
        return DateRange(start_of_day(next_day), end_of_day(next_day))
    if this_week:
        return DateRange(*week_bounds(now.date(), week_start))
    if next_week:
        return DateRange(*week_bounds(now.date() + timedelta(days=7), week_start))

    start = start_of_day(now)
    end = end_of_day(now)
    from_date_only = to_date_only = False

    if has_from:
        parsed = parse_datetime_arg(from_value)
        if parsed is None:
            raise UsageError(f"invalid --from value: {from_value}")
        start, from_date_only = parsed
        if from_date_only:
            start = start_of_day(start)

    if has_to:
        parsed = parse_datetime_arg(to_value)
        if parsed is None:
            raise UsageError(f"invalid --to value: {to_value}")
        end, to_date_only = parsed
        if to_date_only:
            end = end_of_day(end)

    if has_from and not has_to:
        end = end_of_day(start) if from_date_only else start + timedelta(days=1)
    if has_to and not has_from:
        start = start_of_day(end) if to_date_only else end - timedelta(days=1)

    if end < start:
        raise UsageError("--to must be after --from")

    return DateRange(start, end)
