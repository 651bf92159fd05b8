"""macOS platform checks and process naming."""

import logging
import platform

logger = logging.getLogger(__name__)


def is_macos() -> bool:
    return platform.system() == "Darwin"


def set_process_name(name: str) -> bool:
    """
    Rename the running process via PyObjC (``macos`` extra).

    Calendar privacy prompts and Activity Monitor show this name instead of
    "Python". Returns False when not on macOS or PyObjC is missing.
    """
    if not is_macos():
        return False
    try:
        from Foundation import NSProcessInfo  # type: ignore
    except ImportError:
        logger.debug("PyObjC not installed; keeping process name")
        return False

    info = NSProcessInfo.processInfo()
    if info.processName() != name:
        info.setProcessName_(name)
        logger.debug("process name set to %s", name)
    return True
