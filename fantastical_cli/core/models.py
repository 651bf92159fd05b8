"""
Configuration models for fantastical-cli.

Every setting is optional: ``None`` (or a blank string) means "not set at this
layer", so layers can be merged without clobbering lower-precedence values.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


def _is_set(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and not value.strip():
        return False
    return True


class _Section:
    """Shared merge/serialization helpers for config sections."""

    def merge(self, other: Optional["_Section"]) -> None:
        """Overlay every set value from ``other`` onto this section."""
        if other is None:
            return
        for item in fields(self):
            value = getattr(other, item.name)
            if _is_set(value):
                setattr(self, item.name, value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if _is_set(getattr(self, item.name))
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]):
        data = data or {}
        known = {item.name for item in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass
class OutputConfig(_Section):
    """Delivery and output defaults shared by all commands."""
    open: Optional[bool] = None
    print: Optional[bool] = None
    copy: Optional[bool] = None
    json: Optional[bool] = None
    plain: Optional[bool] = None
    dry_run: Optional[bool] = None
    verbose: Optional[bool] = None


@dataclass
class ParseConfig(_Section):
    """Defaults for ``fantastical parse``."""
    calendar: Optional[str] = None
    note: Optional[str] = None
    add: Optional[bool] = None


@dataclass
class ShowConfig(_Section):
    """Defaults for ``fantastical show`` (no settings yet)."""


@dataclass
class AppleScriptConfig(_Section):
    """Defaults for ``fantastical applescript``."""
    add: Optional[bool] = None
    run: Optional[bool] = None
    print: Optional[bool] = None


@dataclass
class EventKitConfig(_Section):
    """Defaults for ``fantastical eventkit``."""
    week_start: Optional[str] = None
    timezone: Optional[str] = None


@dataclass
class Config:
    """Resolved configuration for a single invocation."""

    output: OutputConfig = field(default_factory=OutputConfig)
    parse: ParseConfig = field(default_factory=ParseConfig)
    show: ShowConfig = field(default_factory=ShowConfig)
    applescript: AppleScriptConfig = field(default_factory=AppleScriptConfig)
    eventkit: EventKitConfig = field(default_factory=EventKitConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Config:
        data = data or {}
        return cls(
            output=OutputConfig.from_dict(data.get("output")),
            parse=ParseConfig.from_dict(data.get("parse")),
            show=ShowConfig.from_dict(data.get("show")),
            applescript=AppleScriptConfig.from_dict(data.get("applescript")),
            eventkit=EventKitConfig.from_dict(data.get("eventkit")),
        )

    def merge(self, other: Optional[Config]) -> Config:
        """Overlay ``other`` onto this config in place and return self."""
        if other is None:
            return self
        self.output.merge(other.output)
        self.parse.merge(other.parse)
        self.show.merge(other.show)
        self.applescript.merge(other.applescript)
        self.eventkit.merge(other.eventkit)
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {
            "output": self.output.to_dict(),
            "parse": self.parse.to_dict(),
            "show": self.show.to_dict(),
            "applescript": self.applescript.to_dict(),
            "eventkit": self.eventkit.to_dict(),
        }

    @property
    def verbose(self) -> bool:
        return bool(self.output.verbose)

    @property
    def dry_run(self) -> bool:
        return bool(self.output.dry_run)
