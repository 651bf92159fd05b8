"""
Utility functions for fantastical-cli.
"""

from .date import (
    DateRange, parse_date_arg, parse_datetime_arg, format_date,
    format_timestamp, resolve_date_range, week_bounds
)
from .io import atomic_write, file_lock
from .macos import is_macos, set_process_name
from .system import ProcessRunner, format_argv

__all__ = [
    # Date utilities
    'DateRange',
    'parse_date_arg',
    'parse_datetime_arg',
    'format_date',
    'format_timestamp',
    'resolve_date_range',
    'week_bounds',
    # I/O utilities
    'atomic_write',
    'file_lock',
    # macOS helpers
    'is_macos',
    'set_process_name',
    # Subprocess helpers
    'ProcessRunner',
    'format_argv'
]
