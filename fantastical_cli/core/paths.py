"""
Centralized path management for fantastical-cli.

This module resolves the per-user configuration and cache locations, the
project-local configuration file, and the files that make up the cached
EventKit helper build.
"""

import os
import sys
from pathlib import Path
from typing import Mapping, Optional
import logging


class PathManager:
    """Resolves fantastical-cli file paths for the current platform and environment."""

    APP_DIR_NAME = "fantastical"

    # File names
    CONFIG_FILE = "config.json"
    PROJECT_CONFIG_FILE = ".fantastical.json"
    HELPER_BINARY = "eventkit-helper"
    HELPER_SOURCE = "eventkit-helper.swift"
    HELPER_HASH = "eventkit-helper.hash"

    # Environment overrides
    CONFIG_ENV = "FANTASTICAL_CONFIG"

    def __init__(self, env: Optional[Mapping[str, str]] = None,
                 cwd: Optional[Path] = None,
                 logger: Optional[logging.Logger] = None):
        """Initialize path manager."""
        self.env = os.environ if env is None else env
        self._cwd = cwd
        self.logger = logger or logging.getLogger(__name__)

    def _home(self) -> Path:
        home = self.env.get("HOME")
        return Path(home) if home else Path.home()

    @property
    def user_config_dir(self) -> Path:
        """Platform-appropriate per-user configuration directory."""
        if sys.platform == "darwin":
            return self._home() / "Library" / "Application Support"
        if sys.platform.startswith("win"):
            appdata = self.env.get("APPDATA")
            if appdata:
                return Path(appdata)
            return self._home() / "AppData" / "Roaming"
        xdg = self.env.get("XDG_CONFIG_HOME", "").strip()
        if xdg and os.path.isabs(xdg):
            return Path(xdg)
        return self._home() / ".config"

    @property
    def user_cache_dir(self) -> Path:
        """Platform-appropriate per-user cache directory."""
        if sys.platform == "darwin":
            return self._home() / "Library" / "Caches"
        if sys.platform.startswith("win"):
            local = self.env.get("LOCALAPPDATA")
            if local:
                return Path(local)
            return self._home() / "AppData" / "Local"
        xdg = self.env.get("XDG_CACHE_HOME", "").strip()
        if xdg and os.path.isabs(xdg):
            return Path(xdg)
        return self._home() / ".cache"

    @property
    def default_config_path(self) -> Path:
        return self.user_config_dir / self.APP_DIR_NAME / self.CONFIG_FILE

    def user_config_path(self, override: Optional[str] = None) -> Path:
        """
        Get the user configuration file path.

        Priority order:
        1. explicit override (``--config``)
        2. FANTASTICAL_CONFIG environment variable
        3. <user config dir>/fantastical/config.json
        """
        if override and override.strip():
            return self.resolve_user_path(override.strip())
        env_path = self.env.get(self.CONFIG_ENV, "").strip()
        if env_path:
            return self.resolve_user_path(env_path)
        return self.default_config_path

    @property
    def project_config_path(self) -> Path:
        """The project-local config file in the working directory."""
        return (self._cwd or Path.cwd()) / self.PROJECT_CONFIG_FILE

    @property
    def cache_root(self) -> Path:
        return self.user_cache_dir / self.APP_DIR_NAME

    @property
    def helper_binary_path(self) -> Path:
        return self.cache_root / self.HELPER_BINARY

    @property
    def helper_source_path(self) -> Path:
        return self.cache_root / self.HELPER_SOURCE

    @property
    def helper_hash_path(self) -> Path:
        return self.cache_root / self.HELPER_HASH

    def ensure_cache_root(self) -> Path:
        """Create the cache directory if needed and return it."""
        self.cache_root.mkdir(parents=True, exist_ok=True)
        return self.cache_root

    def resolve_user_path(self, path: str) -> Path:
        """Expand ``~`` and make the path absolute relative to the working directory."""
        candidate = Path(os.path.expanduser(path))
        if not candidate.is_absolute():
            candidate = (self._cwd or Path.cwd()) / candidate
        return candidate


def get_path_manager(env: Optional[Mapping[str, str]] = None) -> PathManager:
    """Return a path manager bound to the given (or current) environment."""
    return PathManager(env=env)


def get_default_config_path() -> Path:
    """Get the default user configuration file path."""
    return get_path_manager().default_config_path
