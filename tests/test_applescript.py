"""
Tests for the AppleScript bridge (fantastical_cli/app/applescript.py).
"""

from fantastical_cli.app.applescript import (
    SCRIPT_LINES,
    build_script,
    osascript_argv,
    script_arguments
)


class TestAppleScript:
    """Test script text and osascript command lines."""

    def test_script_text(self):
        script = build_script()
        lines = script.split("\n")
        assert lines[0] == "on run argv"
        assert lines[-1] == "end run"
        assert 'tell application "Fantastical"' in lines
        assert "parse sentence theSentence with add immediately" in lines
        assert len(lines) == 14

    def test_script_never_contains_sentence(self):
        # The sentence travels as an argument, so quotes need no escaping.
        argv = osascript_argv('He said "hi"')
        script_part = argv[:argv.index("--")]
        assert all('He said' not in part for part in script_part)

    def test_arguments(self):
        assert script_arguments("Lunch", add=True) == ["Lunch", "1"]
        assert script_arguments("Lunch") == ["Lunch", "0"]

    def test_osascript_argv(self):
        argv = osascript_argv("Lunch at noon", add=True)
        assert argv[0] == "osascript"
        assert argv.count("-e") == len(SCRIPT_LINES)
        assert argv[1:3] == ["-e", "on run argv"]
        assert argv[-3:] == ["--", "Lunch at noon", "1"]

    def test_custom_interpreter_command(self):
        argv = osascript_argv("Lunch", command=["/usr/local/bin/fake-osa", "--quiet"])
        assert argv[:2] == ["/usr/local/bin/fake-osa", "--quiet"]
        assert argv[-2:] == ["Lunch", "0"]
