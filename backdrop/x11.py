"""
Wrappers around the X11 command-line tools (xdotool, xprop, xwininfo,
wmctrl, xdpyinfo). Every call collapses to success or failure; nothing here
raises on a failed command.
"""

import re
import subprocess
from typing import List, Optional, Sequence, Tuple

from .geometry import Geometry
from .notify import Notify

REQUIRED_COMMANDS = ["xdotool", "xprop", "xwininfo"]
OPTIONAL_COMMANDS = ["wmctrl", "xdpyinfo", "notify-send"]

_DIMENSIONS = re.compile(r"dimensions:\s+(\d+)x(\d+)")


def parse_display_dimensions(output: Optional[str]) -> Optional[Tuple[int, int]]:
    """Extracts (width, height) from xdpyinfo output."""
    match = _DIMENSIONS.search(output or "")
    if match:
        return int(match.group(1)), int(match.group(2))
    return None


class X11Commands:
    """Runs window-system commands for the reconciler."""

    def __init__(self, debug: bool = False):
        self._debug = debug
        self._notify = Notify(debug=debug)

    def _run_command(self, cmd: List[str]) -> Optional[str]:
        """Executes a command and returns its stdout, or None if it failed."""
        try:
            result = subprocess.run(
                cmd, capture_output=True, text=True, check=True, encoding="utf-8"
            )
            return result.stdout.strip()
        except FileNotFoundError:
            self._notify.command_missing(cmd[0])
            if self._debug:
                print(f"[DBG] Command not found: {cmd}")
            return None
        except subprocess.CalledProcessError as e:
            if self._debug:
                print(f"[DBG] Command failed: {cmd}\nError: {(e.stderr or '').strip()}")
            return None

    def _succeeds(self, cmd: List[str]) -> bool:
        return self._run_command(cmd) is not None

    # --- Queries ---
    def search_windows(self, name: str) -> List[str]:
        """Ids of visible windows whose title matches `name`."""
        output = self._run_command(["xdotool", "search", "--onlyvisible", "--name", name])
        return output.split() if output else []

    def window_exists(self, window_id: str) -> bool:
        return self._succeeds(["xwininfo", "-id", window_id])

    def get_workarea(self) -> Optional[str]:
        """Raw `_NET_WORKAREA` property of the root window."""
        return self._run_command(["xprop", "-root", "_NET_WORKAREA"]) or None

    def get_display_size(self) -> Optional[Tuple[int, int]]:
        size = parse_display_dimensions(self._run_command(["xdpyinfo"]))
        if size:
            return size

        output = self._run_command(["xdotool", "getdisplaygeometry"]) or ""
        parts = output.split()
        if len(parts) == 2 and all(p.isdigit() for p in parts):
            return int(parts[0]), int(parts[1])
        return None

    # --- Window properties ---
    def set_property(self, window_id: str, name: str, fmt: str, value: str) -> bool:
        return self._succeeds(
            ["xprop", "-id", window_id, "-f", name, fmt, "-set", name, value]
        )

    def unmap(self, window_id: str) -> bool:
        return self._succeeds(["xdotool", "windowunmap", window_id])

    def map(self, window_id: str) -> bool:
        return self._succeeds(["xdotool", "windowmap", window_id])

    def reparent_to_root(self, window_id: str) -> bool:
        return self._succeeds(["xdotool", "windowreparent", window_id, "0"])

    # --- Geometry ---
    def wm_move_resize(self, window_id: str, geometry: Geometry) -> bool:
        """Moves and resizes through the window manager (gravity 0)."""
        x, y, width, height = geometry
        return self._succeeds(
            ["wmctrl", "-i", "-r", window_id, "-e", f"0,{x},{y},{width},{height}"]
        )

    def move(self, window_id: str, x: int, y: int) -> bool:
        return self._succeeds(["xdotool", "windowmove", window_id, str(x), str(y)])

    def resize(self, window_id: str, width: int, height: int) -> bool:
        return self._succeeds(
            ["xdotool", "windowsize", window_id, str(width), str(height)]
        )

    # --- Window manager state ---
    def wm_change_state(
        self, window_id: str, action: str, properties: Sequence[str]
    ) -> bool:
        """Adds, removes or toggles _NET_WM_STATE flags through wmctrl.

        wmctrl accepts at most two properties per request, so longer lists
        are sent in pairs. Returns True only if every request succeeded.
        """
        ok = True
        for i in range(0, len(properties), 2):
            pair = ",".join(properties[i : i + 2])
            if not self._succeeds(
                ["wmctrl", "-i", "-r", window_id, "-b", f"{action},{pair}"]
            ):
                ok = False
        return ok
