"""
Build, cache and run the EventKit helper binary.

EventKit's calendar queries are not reachable from an ordinary command-line
process, so a small Swift program shipped with this package is compiled on
first use and cached under ``<user cache dir>/fantastical``. The cached build
is keyed on a hash of the shipped source and rebuilt whenever it changes.
"""

import hashlib
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from ..core.exceptions import CommandError, HelperBuildError, HelperError, PlatformError
from ..core.paths import PathManager
from ..utils.io import atomic_write, file_lock
from ..utils.macos import is_macos
from ..utils.system import ProcessRunner

HELPER_ENV = "FANTASTICAL_EVENTKIT_HELPER"
SOURCE_FILE = Path(__file__).with_name("eventkit_helper.swift")

SWIFTC_FLAGS = ("-O", "-framework", "EventKit")


def helper_source() -> str:
    """Return the Swift source shipped with the package."""
    return SOURCE_FILE.read_text(encoding="utf-8")


def source_hash(source: str) -> str:
    """First 8 bytes of the SHA-256 of the source, hex-encoded."""
    return hashlib.sha256(source.encode("utf-8")).hexdigest()[:16]


class EventKitHelper:
    """Locates (building if needed) and invokes the EventKit helper."""

    def __init__(self, runner: Optional[ProcessRunner] = None,
                 paths: Optional[PathManager] = None,
                 env: Optional[Mapping[str, str]] = None,
                 logger: Optional[logging.Logger] = None):
        self.env = os.environ if env is None else env
        self.runner = runner or ProcessRunner(env=self.env)
        self.paths = paths or PathManager(env=self.env)
        self.logger = logger or logging.getLogger(__name__)

    @property
    def override(self) -> Optional[str]:
        value = self.env.get(HELPER_ENV, "").strip()
        return value or None

    def command(self) -> List[str]:
        """Return the argv prefix for invoking the helper."""
        if self.override:
            self.logger.debug("eventkit helper override: %s", self.override)
            return [self.override]

        if not is_macos():
            raise PlatformError(
                f"eventkit requires macOS (or set {HELPER_ENV} to a compatible helper)"
            )

        if self.runner.dry_run:
            return [str(self.paths.helper_binary_path)]

        path = self.ensure_built()
        self.logger.debug("eventkit helper: %s", path)
        return [str(path)]

    def _is_current(self, expected_hash: str) -> bool:
        binary = self.paths.helper_binary_path
        if not binary.exists():
            return False
        try:
            current = self.paths.helper_hash_path.read_text(encoding="utf-8").strip()
        except OSError:
            current = ""
        if current == expected_hash:
            return True
        self.logger.debug("eventkit helper hash mismatch; recompiling")
        return False

    def ensure_built(self) -> Path:
        """
        Return the cached helper binary, compiling it when missing or stale.

        Raises:
            HelperBuildError: if the cache cannot be written or no Swift
                compiler succeeds
        """
        source = helper_source()
        expected = source_hash(source)
        binary = self.paths.helper_binary_path

        if self._is_current(expected):
            return binary

        try:
            self.paths.ensure_cache_root()
            with file_lock(binary):
                # Another invocation may have finished the build while we waited.
                if self._is_current(expected):
                    return binary
                atomic_write(self.paths.helper_source_path, source)
                self._compile(self.paths.helper_source_path, binary)
                atomic_write(self.paths.helper_hash_path, expected + "\n")
        except (OSError, TimeoutError) as exc:
            raise HelperBuildError(f"eventkit helper cache: {exc}") from exc

        return binary

    def _compile(self, source_path: Path, output_path: Path) -> None:
        tail = list(SWIFTC_FLAGS) + ["-o", str(output_path), str(source_path)]
        candidates = []
        xcrun = shutil.which("xcrun")
        if xcrun:
            candidates.append(("xcrun swiftc", [xcrun, "swiftc"] + tail))
        swiftc = shutil.which("swiftc")
        if swiftc:
            candidates.append(("swiftc", [swiftc] + tail))

        for label, argv in candidates:
            self.logger.debug("compiling eventkit helper with %s", label)
            try:
                self.runner.run(argv, capture=True)
                return
            except CommandError as exc:
                self.logger.debug("%s failed: %s", label, exc)

        raise HelperBuildError(
            "eventkit helper build failed; install Xcode Command Line Tools (xcode-select --install)"
        )

    def run(self, args: Sequence[str]) -> Any:
        """
        Run the helper and decode its JSON output.

        Returns:
            The decoded JSON document, or None in dry-run mode

        Raises:
            HelperError: if the helper fails or prints invalid JSON
        """
        argv = self.command() + list(args)
        try:
            result = self.runner.run(argv, capture=True)
        except CommandError as exc:
            raise HelperError(f"eventkit helper failed: {exc}") from exc
        if result is None:
            return None

        if result.stderr and result.stderr.strip():
            self.logger.debug("eventkit helper stderr: %s", result.stderr.strip())

        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as exc:
            raise HelperError(f"eventkit helper returned invalid JSON: {exc}") from exc
