"""Configuration read once at startup from ~/.backdrop-conf.json."""

import json
import os
import sys
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Callable, Dict, NamedTuple, Optional

from .notify import Notify

# --- Debug Flag ---
BACKDROP_DEBUG = os.environ.get("BACKDROP_DEBUG", "false").lower() in ("true", "1", "t")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(f"expected an integer, got {value!r}")
    return int(value)


def _to_interval(value: Any) -> int:
    seconds = _to_int(value)
    if seconds < 1:
        raise ValueError(f"interval must be at least 1 second, got {seconds}")
    return seconds


def _to_optional_size(value: Any) -> Optional[int]:
    """Empty, null and non-positive values mean "not set"."""
    if value is None or value == "":
        return None
    size = _to_int(value)
    return size if size > 0 else None


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise TypeError(f"expected true/false, got {value!r}")


def _to_str(value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"expected a string, got {value!r}")
    return value


_CONVERTERS: Dict[str, Callable[[Any], Any]] = {
    "check_interval": _to_interval,
    "window_name": _to_str,
    "manual_width": _to_optional_size,
    "manual_height": _to_optional_size,
    "manual_x": _to_int,
    "manual_y": _to_int,
    "top_offset": _to_int,
    "debug": _to_bool,
    "restart_icon_manager_on_exit": _to_bool,
    "icon_manager": _to_str,
    "background_schema": _to_str,
    "background_key": _to_str,
    "notify_on_launch": _to_bool,
    "show_indicator": _to_bool,
}


class Config(NamedTuple):
    """Immutable application settings."""

    check_interval: int = 9000
    window_name: str = "Wallpaper Pop-out"
    # Manual size override; only used when both are set.
    manual_width: Optional[int] = None
    manual_height: Optional[int] = None
    manual_x: int = 0
    manual_y: int = 0
    top_offset: int = 100
    debug: bool = False
    restart_icon_manager_on_exit: bool = False
    icon_manager: str = "nemo-desktop"
    background_schema: str = "org.cinnamon.desktop.background"
    background_key: str = "picture-options"
    notify_on_launch: bool = True
    show_indicator: bool = False

    _config_path = Path.home() / ".backdrop-conf.json"

    @property
    def has_manual_size(self) -> bool:
        return bool(self.manual_width and self.manual_height)

    @classmethod
    def get_path(cls) -> Path:
        """Returns the path to the configuration file."""
        return cls._config_path

    @classmethod
    def load(cls, path: Optional[Path] = None) -> "Config":
        """Loads configuration from the JSON file, falling back to defaults."""
        path = path or cls.get_path()
        if BACKDROP_DEBUG:
            print(f"Config: Loading configuration from {path}...")

        if not path.exists():
            if BACKDROP_DEBUG:
                print("Config: No configuration file, using defaults.")
            return cls(debug=BACKDROP_DEBUG)

        try:
            with open(path, "r") as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise TypeError("top-level value must be a JSON object")
        except (JSONDecodeError, TypeError, OSError) as e:
            Notify.send(
                summary="Backdrop: Invalid Configuration",
                description=f"Using default config. Error in {path}: {e}",
                expire_time=10000,
                debug=BACKDROP_DEBUG,
            )
            print(f"Config Error: {e}", file=sys.stderr)
            return cls(debug=BACKDROP_DEBUG)

        values: Dict[str, Any] = {}
        for name in cls._fields:
            if name not in data:
                continue
            try:
                values[name] = _CONVERTERS[name](data[name])
            except (TypeError, ValueError) as e:
                print(
                    f"Config Error: ignoring '{name}' ({e}), using default "
                    f"{cls._field_defaults[name]!r}",
                    file=sys.stderr,
                )

        if BACKDROP_DEBUG:
            values["debug"] = True
        config = cls(**values)

        if config.debug:
            print(f"Config: Loaded. {config}")
        return config
