"""
Command implementations for fantastical-cli.
"""

from .parse import ParseCommand
from .show import ShowCommand
from .applescript import AppleScriptCommand
from .eventkit import EventKitCommand

__all__ = [
    'ParseCommand',
    'ShowCommand',
    'AppleScriptCommand',
    'EventKitCommand',
]
