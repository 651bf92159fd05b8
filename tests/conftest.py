#!/usr/bin/env python3
"""
Global pytest configuration and fixtures.

This module provides:
- Platform-specific test skipping (macOS tests)
- Environment isolation so a developer's real config never leaks in
- A fake EventKit helper script factory
"""

import json
import os
import platform
import stat
import sys
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def pytest_configure(config):
    """Configure pytest environment."""
    config.addinivalue_line("markers", "macos: test requires a Darwin host")
    config.addinivalue_line("markers", "posix: test runs shell scripts")


def pytest_collection_modifyitems(config, items):
    """Skip macOS tests off Darwin and shell-script tests on Windows."""
    skip_macos = pytest.mark.skip(reason="macOS tests require Darwin platform")
    skip_posix = pytest.mark.skip(reason="shell-script tests require a POSIX platform")

    for item in items:
        if "macos" in item.keywords and platform.system() != "Darwin":
            item.add_marker(skip_macos)
        if "posix" in item.keywords and os.name != "posix":
            item.add_marker(skip_posix)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Clear FANTASTICAL_* variables and point config/cache dirs into tmp_path."""
    for name in list(os.environ):
        if name.startswith("FANTASTICAL_"):
            monkeypatch.delenv(name, raising=False)

    home = tmp_path / "home"
    home.mkdir()
    workdir = tmp_path / "work"
    workdir.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(home / ".cache"))
    monkeypatch.setenv("FANTASTICAL_CONFIG", str(tmp_path / "config.json"))
    monkeypatch.chdir(workdir)
    return tmp_path


@pytest.fixture
def write_config(tmp_path) -> Callable[[Dict[str, Any]], Path]:
    """Write the user config file that FANTASTICAL_CONFIG points at."""
    def _write(data: Dict[str, Any]) -> Path:
        path = tmp_path / "config.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def fake_helper(tmp_path, monkeypatch) -> Callable[..., Path]:
    """
    Install a shell script as FANTASTICAL_EVENTKIT_HELPER.

    The script records its arguments (one per line) in ``helper-args.txt``
    and prints the canned JSON for the subcommand it was called with.
    """
    def _install(outputs: Dict[str, Any], exit_code: int = 0, stderr: str = "") -> Path:
        responses = tmp_path / "responses"
        responses.mkdir(exist_ok=True)
        for command, payload in outputs.items():
            text = payload if isinstance(payload, str) else json.dumps(payload)
            (responses / command).write_text(text, encoding="utf-8")

        args_file = tmp_path / "helper-args.txt"
        script = tmp_path / "fake-helper.sh"
        script.write_text(
            "#!/bin/sh\n"
            f"printf '%s\\n' \"$@\" > '{args_file}'\n"
            + (f"echo '{stderr}' >&2\n" if stderr else "")
            + f"if [ {exit_code} -ne 0 ]; then exit {exit_code}; fi\n"
            + f"cat '{responses}'/\"$1\"\n",
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        monkeypatch.setenv("FANTASTICAL_EVENTKIT_HELPER", str(script))
        return args_file
    return _install
