"""
Config utilities for Coloring Printer.

Responsibilities:
- Resolve the config and scratch paths with environment and XDG support
- Provide JSON load/save helpers for the app's config
- Merge defaults, the JSON config and environment overrides into Settings
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger(__name__)


def default_config_path() -> str:
    """
    Resolve the default config path using:
    1) $XDG_CONFIG_HOME/coloringprinter/config.json
    2) ~/.config/coloringprinter/config.json
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return str(Path(xdg) / "coloringprinter" / "config.json")
    return str(Path.home() / ".config" / "coloringprinter" / "config.json")


def default_scratch_path() -> str:
    """
    Scratch files live under the system temp dir, so a reboot clears leftovers.
    """
    return str(Path(tempfile.gettempdir()) / "coloringprinter")


def get_config_path() -> str:
    """
    Return the config path honoring COLORPRINT_CONFIG_PATH override.
    """
    return os.environ.get("COLORPRINT_CONFIG_PATH", default_config_path())


def load_config(path: Optional[str] = None) -> Optional[Dict[str, Any]]:
    """
    Load the JSON config if it exists; return None if missing.

    Raises:
        json.JSONDecodeError if the file exists but contains invalid JSON.
        OSError for I/O errors other than missing file.
    """
    cfg_path = Path(path or get_config_path())
    if not cfg_path.exists():
        return None
    with cfg_path.open("r", encoding="utf-8") as f:
        return json.load(f)


def save_config(data: Dict[str, Any], path: Optional[str] = None) -> None:
    """
    Save the JSON config, creating parent directories as needed.

    Writes atomically by using a temporary file and os.replace().
    Raises OSError on I/O failures.
    """
    cfg_path = Path(path or get_config_path())
    cfg_path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path = cfg_path.with_suffix(cfg_path.suffix + ".tmp")
    with tmp_path.open("w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, cfg_path)


@dataclass(frozen=True)
class Settings:
    scratch_dir: str
    watch_interval_seconds: float = 1.0
    watcher_enabled: bool = True
    printer_name: Optional[str] = None
    list_command: str = "lpstat"
    submit_command: str = "lp"
    resume_command: str = "cupsenable"
    media_size: Optional[str] = None
    max_content_length: int = 10 * 1024 * 1024


# Settings key -> environment variable
ENV_OVERRIDES: Dict[str, str] = {
    "scratch_dir": "COLORPRINT_SCRATCH_DIR",
    "watch_interval_seconds": "COLORPRINT_WATCH_INTERVAL",
    "watcher_enabled": "COLORPRINT_WATCHER_ENABLED",
    "printer_name": "COLORPRINT_PRINTER",
    "list_command": "COLORPRINT_LPSTAT",
    "submit_command": "COLORPRINT_LP",
    "resume_command": "COLORPRINT_CUPSENABLE",
    "media_size": "COLORPRINT_MEDIA",
    "max_content_length": "COLORPRINT_MAX_CONTENT_LENGTH",
}


def _as_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    s = str(value).strip().lower()
    if s in ("1", "true", "yes", "on"):
        return True
    if s in ("0", "false", "no", "off"):
        return False
    return default


def _coerce(key: str, value: Any, default: Any) -> Any:
    """
    Convert a raw config/env value to the type of the field default.
    Malformed values fall back to the default with a warning.
    """
    if value is None:
        return default
    try:
        if key == "watcher_enabled":
            return _as_bool(value, default)
        if key == "watch_interval_seconds":
            interval = float(value)
            if interval <= 0:
                raise ValueError("interval must be positive")
            return interval
        if key == "max_content_length":
            return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid value for %s: %r", key, value)
        return default
    s = str(value).strip()
    return s or default


def get_settings(
    config: Optional[Mapping[str, Any]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    """
    Build Settings from defaults <- JSON config <- environment.

    Parameters:
    - config: config mapping; when None the JSON config file is loaded (if any)
    - env: environment mapping; defaults to os.environ
    """
    if config is None:
        try:
            config = load_config() or {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not read config file %s: %s", get_config_path(), e)
            config = {}
    env = os.environ if env is None else env

    defaults = Settings(scratch_dir=default_scratch_path())
    values: Dict[str, Any] = {}
    for f in fields(Settings):
        default = getattr(defaults, f.name)
        raw = config.get(f.name)
        env_name = ENV_OVERRIDES.get(f.name)
        if env_name and env.get(env_name) not in (None, ""):
            raw = env[env_name]
        values[f.name] = _coerce(f.name, raw, default)
    return Settings(**values)


__all__ = [
    "ENV_OVERRIDES",
    "Settings",
    "default_config_path",
    "default_scratch_path",
    "get_config_path",
    "get_settings",
    "load_config",
    "save_config",
]
