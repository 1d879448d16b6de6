"""
Desktop environment glue: the wallpaper-rendering GSettings key and the
desktop icon manager.
"""

import subprocess
import sys
from typing import Optional

import gi

gi.require_version("Gio", "2.0")
from gi.repository import Gio, GLib  # noqa: E402

# Value that stops the desktop from drawing its own wallpaper.
PICTURE_OPTIONS_NONE = "none"


class DesktopBackground:
    """Reads and writes one string key of a background GSettings schema."""

    def __init__(self, schema: str, key: str, debug: bool = False):
        self.schema = schema
        self.key = key
        self._debug = debug
        self._settings: Optional[Gio.Settings] = None
        self._schema_key: Optional[Gio.SettingsSchemaKey] = None

    def _lookup(self) -> Optional[Gio.Settings]:
        """Returns the settings object, or None if the schema/key is not installed.

        Gio aborts the process when asked for an unknown schema, so the schema
        source is consulted first.
        """
        if self._settings is not None:
            return self._settings

        source = Gio.SettingsSchemaSource.get_default()
        schema = source.lookup(self.schema, True) if source else None
        if schema is None or not schema.has_key(self.key):
            if self._debug:
                print(f"[DBG] GSettings {self.schema} {self.key} is not available.")
            return None

        self._schema_key = schema.get_key(self.key)
        self._settings = Gio.Settings.new(self.schema)
        return self._settings

    def get(self) -> Optional[str]:
        settings = self._lookup()
        if settings is None:
            return None
        value = settings.get_value(self.key)
        if value.get_type_string() != "s":
            if self._debug:
                print(f"[DBG] {self.key} is not a string key ({value.get_type_string()}).")
            return None
        return value.get_string()

    def set(self, value: str) -> bool:
        settings = self._lookup()
        if settings is None:
            return False
        variant = GLib.Variant("s", value)
        if not self._schema_key.range_check(variant):
            if self._debug:
                print(f"[DBG] {value!r} is not a valid value for {self.key}.")
            return False
        if not settings.set_value(self.key, variant):
            if self._debug:
                print(f"[DBG] {self.schema} {self.key} is not writable.")
            return False
        Gio.Settings.sync()
        return True


def restart_icon_manager(command: str, debug: bool = False) -> None:
    """Kills the desktop icon manager and starts a detached new instance."""
    print(f"Restarting {command} so icons are restored...")
    try:
        subprocess.run(["pkill", command], capture_output=True, check=False)
    except FileNotFoundError:
        if debug:
            print("[DBG] pkill not found, starting a new instance anyway.")

    try:
        subprocess.Popen(
            [command],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as e:
        print(f"Error: could not start {command}: {e}", file=sys.stderr)
