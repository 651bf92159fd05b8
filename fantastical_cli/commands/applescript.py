"""AppleScript command - hand a sentence to Fantastical through osascript."""

from typing import Optional, Sequence, TextIO

from ..app.applescript import build_script, osascript_argv, script_arguments
from ..core.exceptions import PlatformError
from ..utils.macos import is_macos
from ..utils.system import OSASCRIPT_COMMAND_ENV
from .base import Command, pick, read_sentence


class AppleScriptCommand(Command):
    """Print and/or run the ``parse sentence`` AppleScript."""

    name = "applescript"

    def run(self, words: Sequence[str],
            use_stdin: bool = False,
            stdin: Optional[TextIO] = None,
            add: Optional[bool] = None,
            run_script: Optional[bool] = None,
            print_script: Optional[bool] = None,
            as_json: Optional[bool] = None) -> bool:
        sentence = read_sentence(words, use_stdin, stdin)
        defaults = self.config.applescript

        add = pick(add, defaults.add)
        should_run = pick(run_script, defaults.run, default=is_macos())
        should_print = pick(print_script, defaults.print)
        as_json = pick(as_json, self.config.output.json)

        script = build_script()
        if as_json:
            self.emit_json({
                "command": self.name,
                "script": script,
                "args": script_arguments(sentence, add),
                "run": should_run,
                "dry_run": self.runner.dry_run,
            })
        elif should_print or not should_run:
            self.emit(script)

        if should_run:
            override = self.runner.command_override(OSASCRIPT_COMMAND_ENV)
            if not override and not is_macos():
                raise PlatformError(
                    f"osascript requires macOS (use --no-run, or set {OSASCRIPT_COMMAND_ENV})"
                )
            self.runner.run(osascript_argv(sentence, add, override))
        return True
