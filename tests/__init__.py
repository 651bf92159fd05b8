"""
Test suite for fantastical-cli.

This package contains:
- Unit tests for URL, AppleScript, date and config handling
- Command and CLI tests with mocked subprocesses
- EventKit tests against fake helper scripts
"""
