"""
Configuration management for fantastical-cli.

Settings are layered, lowest precedence first:

1. built-in defaults (everything unset)
2. the user config file (``--config``, ``FANTASTICAL_CONFIG`` or the
   platform config directory)
3. the project config file (``.fantastical.json`` in the working directory)
4. ``FANTASTICAL_*`` environment variables

Command-line flags are applied on top by the commands themselves.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import jsonschema

from .exceptions import ConfigurationError
from .models import Config
from .paths import PathManager, get_path_manager

logger = logging.getLogger(__name__)


_BOOL = {"type": "boolean"}
_STRING = {"type": "string"}

CONFIG_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "output": {
            "type": "object",
            "properties": {
                "open": _BOOL,
                "print": _BOOL,
                "copy": _BOOL,
                "json": _BOOL,
                "plain": _BOOL,
                "dry_run": _BOOL,
                "verbose": _BOOL,
            },
        },
        "parse": {
            "type": "object",
            "properties": {
                "calendar": _STRING,
                "note": _STRING,
                "add": _BOOL,
            },
        },
        "show": {"type": "object"},
        "applescript": {
            "type": "object",
            "properties": {
                "add": _BOOL,
                "run": _BOOL,
                "print": _BOOL,
            },
        },
        "eventkit": {
            "type": "object",
            "properties": {
                "week_start": {"type": "string", "enum": ["monday", "sunday"]},
                "timezone": _STRING,
            },
        },
    },
}

# Environment variable -> (section, key, kind)
ENV_OVERRIDES = (
    ("FANTASTICAL_DEFAULT_OPEN", "output", "open", "bool"),
    ("FANTASTICAL_DEFAULT_PRINT", "output", "print", "bool"),
    ("FANTASTICAL_DEFAULT_COPY", "output", "copy", "bool"),
    ("FANTASTICAL_DEFAULT_JSON", "output", "json", "bool"),
    ("FANTASTICAL_DEFAULT_PLAIN", "output", "plain", "bool"),
    ("FANTASTICAL_DRY_RUN", "output", "dry_run", "bool"),
    ("FANTASTICAL_VERBOSE", "output", "verbose", "bool"),
    ("FANTASTICAL_DEFAULT_CALENDAR", "parse", "calendar", "str"),
    ("FANTASTICAL_DEFAULT_NOTE", "parse", "note", "str"),
    ("FANTASTICAL_DEFAULT_ADD", "parse", "add", "bool"),
    ("FANTASTICAL_APPLESCRIPT_ADD", "applescript", "add", "bool"),
    ("FANTASTICAL_APPLESCRIPT_RUN", "applescript", "run", "bool"),
    ("FANTASTICAL_APPLESCRIPT_PRINT", "applescript", "print", "bool"),
)

_TRUE_VALUES = {"1", "t", "true", "yes", "on"}
_FALSE_VALUES = {"0", "f", "false", "no", "off"}


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Parse a boolean environment value; ``None`` when blank or unrecognised."""
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return None


def read_config_file(path: Path) -> Optional[Config]:
    """
    Read a single config layer.

    Args:
        path: Path to a JSON config file

    Returns:
        Config for the layer, or None when the file is missing or empty

    Raises:
        ConfigurationError: if the file is unreadable, not JSON, or fails
            schema validation
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"read config {path}: {exc}") from exc

    if not text.strip():
        return None

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"parse config {path}: {exc}") from exc

    try:
        jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise ConfigurationError(f"invalid config {path} at {location}: {exc.message}") from exc

    logger.debug("Loaded config layer from %s", path)
    return Config.from_dict(data)


def apply_env_overrides(config: Config, env: Optional[Mapping[str, str]] = None) -> Config:
    """Apply FANTASTICAL_* environment overrides onto ``config`` in place."""
    environ = os.environ if env is None else env
    for name, section_name, key, kind in ENV_OVERRIDES:
        raw = environ.get(name)
        if raw is None or not raw.strip():
            continue
        if kind == "bool":
            value = parse_bool(raw)
            if value is None:
                logger.debug("Ignoring %s=%r: not a boolean", name, raw)
                continue
        else:
            value = raw.strip()
        setattr(getattr(config, section_name), key, value)
    return config


def load_config(config_path: Optional[str] = None,
                env: Optional[Mapping[str, str]] = None,
                manager: Optional[PathManager] = None) -> Config:
    """
    Load the layered configuration.

    Args:
        config_path: Optional user config file path (``--config``)
        env: Environment mapping, defaults to ``os.environ``
        manager: Optional PathManager (tests inject one with a fixed cwd)

    Returns:
        Config object with file and environment layers applied
    """
    manager = manager or get_path_manager(env)
    config = Config()

    user_path = manager.user_config_path(config_path)
    config.merge(read_config_file(user_path))

    project_path = manager.project_config_path
    if project_path != user_path:
        config.merge(read_config_file(project_path))

    apply_env_overrides(config, env)
    return config
