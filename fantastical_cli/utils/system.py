"""
Subprocess invocation: URL opening, clipboard copy and generic command runs.

Every command goes through :class:`ProcessRunner` so that dry-run mode and
the ``FANTASTICAL_*_COMMAND`` overrides apply uniformly.
"""

import logging
import os
import platform
import shlex
import shutil
import subprocess
from typing import List, Mapping, Optional, Sequence

from ..core.exceptions import CommandError, PlatformError

OPEN_COMMAND_ENV = "FANTASTICAL_OPEN_COMMAND"
COPY_COMMAND_ENV = "FANTASTICAL_COPY_COMMAND"
OSASCRIPT_COMMAND_ENV = "FANTASTICAL_OSASCRIPT_COMMAND"

# Linux clipboard tools in preference order: Wayland first, then X11.
LINUX_CLIPBOARD_COMMANDS = (
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
)


def format_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(part) for part in argv)


class ProcessRunner:
    """Runs external commands, honouring dry-run and command overrides."""

    def __init__(self, dry_run: bool = False,
                 env: Optional[Mapping[str, str]] = None,
                 logger: Optional[logging.Logger] = None):
        self.dry_run = dry_run
        self.env = os.environ if env is None else env
        self.logger = logger or logging.getLogger(__name__)

    def command_override(self, env_name: str) -> Optional[List[str]]:
        """Return the shell-split override command from ``env_name``, if set."""
        raw = self.env.get(env_name, "").strip()
        if not raw:
            return None
        try:
            argv = shlex.split(raw)
        except ValueError as exc:
            raise CommandError(f"invalid {env_name}: {exc}") from exc
        return argv or None

    def run(self, argv: Sequence[str], input_text: Optional[str] = None,
            capture: bool = False) -> Optional[subprocess.CompletedProcess]:
        """
        Run a command to completion.

        Args:
            argv: Command and arguments
            input_text: Optional text fed to the command's stdin
            capture: Capture stdout/stderr instead of inheriting them

        Returns:
            The completed process, or None in dry-run mode

        Raises:
            CommandError: if the command is missing or exits non-zero
        """
        argv = list(argv)
        if self.dry_run:
            self.logger.info("would run: %s", format_argv(argv))
            return None

        self.logger.debug("running: %s", format_argv(argv))
        try:
            result = subprocess.run(
                argv,
                input=input_text,
                capture_output=capture,
                text=True,
            )
        except FileNotFoundError as exc:
            raise CommandError(f"{argv[0]}: command not found") from exc
        except OSError as exc:
            raise CommandError(f"{argv[0]}: {exc}") from exc

        if result.returncode != 0:
            detail = ""
            if capture and result.stderr and result.stderr.strip():
                detail = f": {result.stderr.strip()}"
            raise CommandError(
                f"{os.path.basename(argv[0])} exited with status {result.returncode}{detail}",
                returncode=result.returncode,
            )
        return result

    def open_url(self, url: str) -> None:
        """Open a URL with the platform's default handler."""
        override = self.command_override(OPEN_COMMAND_ENV)
        if override:
            self.run(override + [url])
            return

        system = platform.system()
        if system == "Darwin":
            argv = ["open", url]
        elif system == "Linux":
            argv = ["xdg-open", url]
        elif system == "Windows":
            argv = ["rundll32", "url.dll,FileProtocolHandler", url]
        else:
            raise PlatformError(f"don't know how to open URLs on {system or 'this platform'} (use --print)")
        self.run(argv)

    def copy_to_clipboard(self, text: str) -> None:
        """Copy text to the system clipboard."""
        override = self.command_override(COPY_COMMAND_ENV)
        if override:
            self.run(override, input_text=text)
            return

        system = platform.system()
        if system == "Darwin":
            argv = ["pbcopy"]
        elif system == "Windows":
            argv = ["cmd", "/c", "clip"]
        elif system == "Linux":
            argv = self._linux_clipboard_command()
        else:
            raise PlatformError(f"clipboard copy not supported on {system or 'this platform'}")
        self.run(argv, input_text=text)

    def _linux_clipboard_command(self) -> List[str]:
        for candidate in LINUX_CLIPBOARD_COMMANDS:
            if shutil.which(candidate[0]):
                return list(candidate)
        raise CommandError("clipboard tool not found (need wl-copy, xclip, or xsel)")
