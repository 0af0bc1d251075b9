#!/usr/bin/env python3
"""
Runtime settings

Merges the sections of the configuration file over built-in defaults.
"""

import logging
from typing import Any, Dict, List, Optional

from .errors import PreconditionViolation
from .reboot import BootTarget, DEFAULT_HELPER, DEFAULT_TOOL

logger = logging.getLogger(__name__)

DEFAULTS = {
    "countdown": {"seconds": 60, "tick": 1, "display": 10, "redraw": 0.5},
    "targets": [{"identifier": "windows", "label": "Restart to Windows..."}],
    "menu": {"position": 2},
    "watcher": {"poll_interval": 0.1, "max_attempts": None},
    "command": {"helper": DEFAULT_HELPER, "tool": DEFAULT_TOOL},
    "logind": {"enabled": True, "interactive": True},
}


def _merged(config: Dict[str, Any], section: str) -> Dict[str, Any]:
    value = config.get(section)
    if value is None:
        return dict(DEFAULTS[section])
    if not isinstance(value, dict):
        raise PreconditionViolation(f"Config section '{section}' must be an object")
    merged = dict(DEFAULTS[section])
    merged.update(value)
    return merged


def _int(section: str, key: str, value, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise PreconditionViolation(f"{section}.{key} must be an integer >= {minimum}, got {value!r}")
    return value


def _positive(section: str, key: str, value) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise PreconditionViolation(f"{section}.{key} must be a positive number, got {value!r}")
    return float(value)


class BootSwitchSettings:
    """Validated settings for the extension, the presenter and the command"""

    def __init__(self):
        countdown = DEFAULTS["countdown"]
        self.seconds: int = countdown["seconds"]
        self.tick: int = countdown["tick"]
        self.display: int = countdown["display"]
        self.redraw: Optional[float] = countdown["redraw"]
        self.targets: List[BootTarget] = [BootTarget(t["identifier"], t["label"]) for t in DEFAULTS["targets"]]
        self.menu_position: Optional[int] = DEFAULTS["menu"]["position"]
        self.poll_interval: float = DEFAULTS["watcher"]["poll_interval"]
        self.max_attempts: Optional[int] = DEFAULTS["watcher"]["max_attempts"]
        self.helper: Optional[str] = DEFAULTS["command"]["helper"]
        self.tool: str = DEFAULTS["command"]["tool"]
        self.logind_enabled: bool = DEFAULTS["logind"]["enabled"]
        self.interactive: bool = DEFAULTS["logind"]["interactive"]

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "BootSwitchSettings":
        """
        Build settings from a parsed configuration file
        
        Args:
            config: Parsed configuration, may be empty or None
            
        Raises:
            PreconditionViolation: if a value has the wrong type or range
        """
        config = config or {}
        settings = cls()

        countdown = _merged(config, "countdown")
        settings.seconds = _int("countdown", "seconds", countdown["seconds"], 0)
        settings.tick = _int("countdown", "tick", countdown["tick"], 1)
        settings.display = _int("countdown", "display", countdown["display"], 1)
        redraw = countdown["redraw"]
        settings.redraw = None if redraw in (None, 0) else _positive("countdown", "redraw", redraw)

        targets = config.get("targets", DEFAULTS["targets"])
        if not isinstance(targets, list) or not targets:
            raise PreconditionViolation("targets must be a non-empty list")
        settings.targets = []
        for entry in targets:
            if not isinstance(entry, dict) or not isinstance(entry.get("identifier"), str) \
                    or not entry["identifier"].strip():
                raise PreconditionViolation(f"Invalid boot target: {entry!r}")
            label = entry.get("label") or f"Restart to {entry['identifier']}..."
            settings.targets.append(BootTarget(entry["identifier"], label))

        menu = _merged(config, "menu")
        position = menu["position"]
        settings.menu_position = None if position is None else _int("menu", "position", position, 0)

        watcher = _merged(config, "watcher")
        settings.poll_interval = _positive("watcher", "poll_interval", watcher["poll_interval"])
        max_attempts = watcher["max_attempts"]
        settings.max_attempts = None if max_attempts is None else _int("watcher", "max_attempts", max_attempts, 1)

        command = _merged(config, "command")
        settings.helper = command["helper"] or None
        if not isinstance(command["tool"], str) or not command["tool"]:
            raise PreconditionViolation("command.tool must be a non-empty string")
        settings.tool = command["tool"]

        logind = _merged(config, "logind")
        settings.logind_enabled = bool(logind["enabled"])
        settings.interactive = bool(logind["interactive"])

        logger.debug(f"Settings: {settings.__dict__}")
        return settings
