"""Show command - navigate Fantastical to a view, date or calendar set."""

from datetime import date
from typing import Optional, Sequence

from ..app.urls import build_show_set_url, build_show_url
from ..core.exceptions import UsageError
from ..utils.date import parse_date_arg
from .base import UrlCommand


class ShowCommand(UrlCommand):
    """Build ``x-fantastical3://show/...`` and deliver it."""

    name = "show"

    def build_url(self, target: Sequence[str], today: Optional[date] = None) -> str:
        if not target:
            raise UsageError("missing show target (mini, calendar, day, week, month, year, or set)")

        view, rest = target[0], list(target[1:])
        if view.strip().lower() == "set":
            return build_show_set_url(" ".join(rest))

        if len(rest) > 1:
            raise UsageError(f"too many arguments for show {view}; want at most one date")
        day = parse_date_arg(rest[0], today=today) if rest else None
        return build_show_url(view, day)

    def run(self, target: Sequence[str],
            open_url: Optional[bool] = None,
            print_url: Optional[bool] = None,
            copy: Optional[bool] = None,
            as_json: Optional[bool] = None) -> bool:
        url = self.build_url(target)
        delivery = self.resolve_delivery(open_url, print_url, copy, as_json)
        self.deliver(url, delivery)
        return True
