"""
Exception classes for fantastical-cli.
"""


class FantasticalError(Exception):
    """Base exception for all fantastical-cli errors."""

    exit_code = 1


class UsageError(FantasticalError):
    """Raised when the command line is invalid (bad flags, missing arguments)."""

    exit_code = 2


class ConfigurationError(FantasticalError):
    """Raised when a configuration file cannot be read or is invalid."""
    pass


class PlatformError(FantasticalError):
    """Raised when an operation is not supported on the current platform."""
    pass


class CommandError(FantasticalError):
    """Raised when an external command fails or cannot be started."""

    def __init__(self, message: str, returncode: int = 1):
        super().__init__(message)
        self.returncode = returncode


class HelperError(FantasticalError):
    """Raised when the EventKit helper fails or returns unusable output."""
    pass


class HelperBuildError(HelperError):
    """Raised when the EventKit helper cannot be compiled."""
    pass
