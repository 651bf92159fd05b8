"""
Shared plumbing for commands: flag/config precedence, sentence input and
URL delivery (print, copy, open).
"""

import json
import logging
import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, TextIO

from ..core.exceptions import UsageError
from ..core.models import Config
from ..utils.macos import is_macos
from ..utils.system import ProcessRunner


def pick(*values: Optional[bool], default: bool = False) -> bool:
    """Return the first value that is not None (flag, then config), else ``default``."""
    for value in values:
        if value is not None:
            return bool(value)
    return default


def read_sentence(words: Sequence[str], use_stdin: bool = False,
                  stdin: Optional[TextIO] = None) -> str:
    """
    Build the sentence from positional words or standard input.

    Raises:
        UsageError: when the sentence is empty or both sources are given
    """
    if use_stdin:
        if words:
            raise UsageError("cannot combine --stdin with <sentence...> arguments")
        sentence = (stdin or sys.stdin).read().strip()
    else:
        sentence = " ".join(words).strip()
    if not sentence:
        raise UsageError("missing <sentence...>")
    return sentence


@dataclass
class Delivery:
    """Where a generated URL goes."""
    open: bool
    print: bool
    copy: bool
    json: bool
    dry_run: bool

    @property
    def prints_url(self) -> bool:
        # Fall back to printing when nothing else would happen.
        return self.print or not (self.open or self.copy)


class Command:
    """Base class holding the resolved config, process runner and output stream."""

    name = ""

    def __init__(self, config: Config, runner: Optional[ProcessRunner] = None,
                 out: Optional[TextIO] = None, verbose: bool = False):
        self.config = config
        self.verbose = verbose
        self.runner = runner or ProcessRunner(dry_run=config.dry_run)
        self.out = out or sys.stdout
        self.logger = logging.getLogger(f"{__package__}.{self.name or 'command'}")

    def emit(self, text: str) -> None:
        print(text, file=self.out)

    def emit_json(self, payload: Dict[str, Any]) -> None:
        self.emit(json.dumps(payload, ensure_ascii=False))


class UrlCommand(Command):
    """A command whose result is a Fantastical URL."""

    def resolve_delivery(self, open_url: Optional[bool] = None,
                         print_url: Optional[bool] = None,
                         copy: Optional[bool] = None,
                         as_json: Optional[bool] = None) -> Delivery:
        output = self.config.output
        return Delivery(
            open=pick(open_url, output.open, default=is_macos()),
            print=pick(print_url, output.print),
            copy=pick(copy, output.copy),
            json=pick(as_json, output.json),
            dry_run=self.runner.dry_run,
        )

    def deliver(self, url: str, delivery: Delivery) -> None:
        """Print, copy and/or open ``url``, in that order."""
        self.logger.debug("generated url: %s", url)
        if delivery.json:
            self.emit_json({
                "command": self.name,
                "url": url,
                "open": delivery.open,
                "copy": delivery.copy,
                "dry_run": delivery.dry_run,
            })
        elif delivery.prints_url:
            self.emit(url)

        if delivery.copy:
            self.runner.copy_to_clipboard(url)
        if delivery.open:
            self.runner.open_url(url)
