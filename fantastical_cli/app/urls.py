"""
Fantastical URL-scheme builders.

Fantastical's handler accepts ``x-fantastical3://parse?...`` for natural
language input and ``x-fantastical3://show/...`` for navigation. Queries are
form-encoded with keys sorted, but spaces are written as ``%20``: some
URL handlers reject ``+``.
"""

import re
from datetime import date
from typing import Dict, Iterable, Mapping, Optional
from urllib.parse import quote, urlencode

from ..core.exceptions import UsageError
from ..utils.date import format_date

SCHEME = "x-fantastical3://"

VIEW_PATTERN = re.compile(r"^[a-z0-9][a-z0-9_-]*$")


def encode_query(params: Mapping[str, str]) -> str:
    """Form-encode ``params`` with sorted keys and ``%20`` for spaces."""
    return urlencode(sorted(params.items()), safe="", quote_via=quote)


def parse_extra_params(entries: Optional[Iterable[str]]) -> Dict[str, str]:
    """Parse repeated ``KEY=VALUE`` arguments into a dict (last one wins)."""
    params: Dict[str, str] = {}
    for entry in entries or ():
        key, sep, value = entry.partition("=")
        key = key.strip()
        if not sep or not key:
            raise UsageError(f"invalid --param {entry!r}; want KEY=VALUE")
        params[key] = value
    return params


def build_parse_url(sentence: str,
                    note: Optional[str] = None,
                    calendar: Optional[str] = None,
                    add: bool = False,
                    extra: Optional[Mapping[str, str]] = None) -> str:
    """
    Build a ``parse`` URL.

    Args:
        sentence: Natural-language event text (``s``)
        note: Optional note (``n``), omitted when blank
        calendar: Optional calendar name (``calendarName``), omitted when blank
        add: Add without showing the mini window (``add=1``)
        extra: Additional query parameters; the named ones above take precedence

    Returns:
        The complete URL
    """
    params = dict(extra or {})
    params["s"] = sentence
    if note and note.strip():
        params["n"] = note
    if calendar and calendar.strip():
        params["calendarName"] = calendar
    if add:
        params["add"] = "1"
    return f"{SCHEME}parse?{encode_query(params)}"


def normalize_view(view: str) -> str:
    """Lower-case and validate a ``show`` view name."""
    normalized = (view or "").strip().lower()
    if not VIEW_PATTERN.match(normalized):
        raise UsageError(
            f"unknown show target {view!r} (want: mini, calendar, day, week, month, year, or set)"
        )
    return normalized


def build_show_url(view: str, day: Optional[date] = None) -> str:
    """Build ``show/<view>`` or ``show/<view>/<YYYY-MM-DD>``."""
    url = f"{SCHEME}show/{normalize_view(view)}"
    if day is not None:
        url = f"{url}/{format_date(day)}"
    return url


def build_show_set_url(name: str) -> str:
    """Build ``show/set?name=<calendar set>``."""
    name = (name or "").strip()
    if not name:
        raise UsageError("missing calendar set name")
    return f"{SCHEME}show/set?{encode_query({'name': name})}"
