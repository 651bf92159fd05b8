"""Fantastical integration surfaces: URL scheme and AppleScript."""

from .urls import (
    SCHEME, encode_query, parse_extra_params, build_parse_url,
    build_show_url, build_show_set_url
)
from .applescript import SCRIPT_LINES, build_script, osascript_argv

__all__ = [
    'SCHEME',
    'encode_query',
    'parse_extra_params',
    'build_parse_url',
    'build_show_url',
    'build_show_set_url',
    'SCRIPT_LINES',
    'build_script',
    'osascript_argv'
]
