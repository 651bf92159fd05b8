"""Parse command - send a natural-language sentence to Fantastical via URL."""

from typing import Optional, Sequence, TextIO

from ..app.urls import build_parse_url, parse_extra_params
from .base import UrlCommand, pick, read_sentence


class ParseCommand(UrlCommand):
    """Build ``x-fantastical3://parse?...`` and deliver it."""

    name = "parse"

    def run(self, words: Sequence[str],
            note: Optional[str] = None,
            calendar: Optional[str] = None,
            add: Optional[bool] = None,
            params: Optional[Sequence[str]] = None,
            use_stdin: bool = False,
            stdin: Optional[TextIO] = None,
            open_url: Optional[bool] = None,
            print_url: Optional[bool] = None,
            copy: Optional[bool] = None,
            as_json: Optional[bool] = None) -> bool:
        """
        Run the parse command.

        Flag values left as None fall back to the ``parse`` and ``output``
        config sections.
        """
        sentence = read_sentence(words, use_stdin, stdin)
        extra = parse_extra_params(params)
        defaults = self.config.parse

        url = build_parse_url(
            sentence,
            note=note if note is not None else defaults.note,
            calendar=calendar if calendar is not None else defaults.calendar,
            add=pick(add, defaults.add),
            extra=extra,
        )
        delivery = self.resolve_delivery(open_url, print_url, copy, as_json)
        self.deliver(url, delivery)
        return True
