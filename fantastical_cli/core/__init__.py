"""
Core module for fantastical-cli - configuration, paths and exceptions.
"""

from .models import (
    Config,
    OutputConfig,
    ParseConfig,
    ShowConfig,
    AppleScriptConfig,
    EventKitConfig
)

from .exceptions import (
    FantasticalError,
    UsageError,
    ConfigurationError,
    PlatformError,
    CommandError,
    HelperError,
    HelperBuildError
)

__all__ = [
    # Models
    'Config',
    'OutputConfig',
    'ParseConfig',
    'ShowConfig',
    'AppleScriptConfig',
    'EventKitConfig',
    # Exceptions
    'FantasticalError',
    'UsageError',
    'ConfigurationError',
    'PlatformError',
    'CommandError',
    'HelperError',
    'HelperBuildError'
]
