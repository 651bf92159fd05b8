"""
AppleScript bridge for Fantastical's ``parse sentence`` command.

The sentence travels as an ``osascript`` argument rather than being spliced
into the script text, so no AppleScript string escaping is needed.
"""

from typing import List, Optional, Sequence

SCRIPT_LINES = (
    "on run argv",
    "set theSentence to item 1 of argv",
    "set addImmediately to false",
    "if (count of argv) > 1 then",
    "set addImmediately to (item 2 of argv is \"1\")",
    "end if",
    "tell application \"Fantastical\"",
    "if addImmediately then",
    "parse sentence theSentence with add immediately",
    "else",
    "parse sentence theSentence",
    "end if",
    "end tell",
    "end run",
)


def build_script() -> str:
    """Return the AppleScript source as a single string."""
    return "\n".join(SCRIPT_LINES)


def script_arguments(sentence: str, add: bool = False) -> List[str]:
    """The argv items the script reads: the sentence and ``"1"``/``"0"``."""
    return [sentence, "1" if add else "0"]


def osascript_argv(sentence: str, add: bool = False,
                   command: Optional[Sequence[str]] = None) -> List[str]:
    """
    Build the full ``osascript`` command line.

    Args:
        sentence: Natural-language event text
        add: Use ``with add immediately``
        command: Interpreter command, defaults to ``["osascript"]``
    """
    argv = list(command or ["osascript"])
    for line in SCRIPT_LINES:
        argv.extend(["-e", line])
    argv.append("--")
    argv.extend(script_arguments(sentence, add))
    return argv
