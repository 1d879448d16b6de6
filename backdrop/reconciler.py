"""Applies the desktop-layer state to every matching pop-out window."""

import time
from typing import Callable, List, Optional, Tuple

from .config import Config
from .geometry import Geometry, resolve_geometry
from .x11 import X11Commands

# Pause after unmap/map so the window manager can catch up.
SETTLE_DELAY = 0.06

# flags=MWM_HINTS_DECORATIONS, decorations=0
NO_DECORATIONS = "0x2, 0x0, 0x0, 0x0, 0x0"

BELOW_STATES = ["skip_taskbar", "skip_pager", "below"]
CLEARED_STATES = ["fullscreen", "sticky"]


def _never() -> bool:
    return False


class WindowReconciler:
    """Re-applies the full state sequence to each matching window per tick.

    There is no record of which windows are already configured: every step
    is idempotent, so the whole sequence simply runs again next tick. Steps
    are independent and a failed one never stops the ones after it.
    """

    def __init__(
        self,
        config: Config,
        x11: X11Commands,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._config = config
        self._x11 = x11
        self._sleep = sleep

    def _debug(self, message: str) -> None:
        if self._config.debug:
            print(f"[DBG] {message}")

    def reconcile(self, should_stop: Callable[[], bool] = _never) -> int:
        """Runs one pass over the current windows; returns how many were done."""
        window_ids = self._x11.search_windows(self._config.window_name)
        if not window_ids:
            self._debug("No pop-out windows found.")
            return 0

        done = 0
        for window_id in window_ids:
            if should_stop():
                self._debug("Stop requested, ending pass.")
                break
            if not self._x11.window_exists(window_id):
                self._debug(f"Window {window_id} vanished, skipping.")
                continue

            print(f"Found pop-out window id: {window_id}")
            self.apply(window_id)
            done += 1
        return done

    def target_geometry(self) -> Optional[Geometry]:
        workarea = None if self._config.has_manual_size else self._x11.get_workarea()
        return resolve_geometry(self._config, workarea, self._x11.get_display_size)

    def apply(self, window_id: str) -> None:
        """Applies the whole state sequence to one window.

        A started sequence always runs to the end: stop requests are only
        honoured between windows, so an unmapped window is always mapped
        again.
        """
        x11 = self._x11
        geometry = self.target_geometry()
        if geometry:
            self._debug(
                f"Computed target geometry: X={geometry.x}, Y={geometry.y}, "
                f"W={geometry.width}, H={geometry.height}"
            )

        steps: List[Tuple[str, Callable[[], bool]]] = [
            (
                "set _NET_WM_WINDOW_TYPE",
                lambda: x11.set_property(
                    window_id, "_NET_WM_WINDOW_TYPE", "32a", "_NET_WM_WINDOW_TYPE_DESKTOP"
                ),
            ),
            (
                "set _MOTIF_WM_HINTS",
                lambda: x11.set_property(window_id, "_MOTIF_WM_HINTS", "32c", NO_DECORATIONS),
            ),
            (
                "clear _NET_WM_NAME",
                lambda: x11.set_property(window_id, "_NET_WM_NAME", "8u", ""),
            ),
            ("unmap", lambda: x11.unmap(window_id)),
            ("wait after unmap", self._settle),
            ("reparent to root", lambda: x11.reparent_to_root(window_id)),
            ("move/resize", lambda: self._apply_geometry(window_id, geometry)),
            ("map", lambda: x11.map(window_id)),
            ("wait after map", self._settle),
            (
                "add " + ",".join(BELOW_STATES),
                lambda: x11.wm_change_state(window_id, "add", BELOW_STATES),
            ),
            (
                "remove " + ",".join(CLEARED_STATES),
                lambda: x11.wm_change_state(window_id, "remove", CLEARED_STATES),
            ),
            (
                "set _NET_WM_STATE",
                lambda: x11.set_property(
                    window_id,
                    "_NET_WM_STATE",
                    "32a",
                    "_NET_WM_STATE_SKIP_TASKBAR, _NET_WM_STATE_SKIP_PAGER",
                ),
            ),
        ]

        for label, step in steps:
            if step():
                self._debug(f"{label}: ok for {window_id}")
            else:
                self._debug(f"{label}: failed for {window_id}, continuing.")

        if geometry:
            print(
                f"   Applied desktop-type + no-decor + positioned at "
                f"{geometry.x},{geometry.y} size {geometry.width}x{geometry.height} "
                f"for window {window_id}"
            )
        else:
            print(f"   Applied desktop-type + no-decor for window {window_id}")

    def _settle(self) -> bool:
        self._sleep(SETTLE_DELAY)
        return True

    def _apply_geometry(self, window_id: str, geometry: Optional[Geometry]) -> bool:
        if geometry is None:
            self._debug("No target geometry, leaving size and position alone.")
            return False
        if self._x11.wm_move_resize(window_id, geometry):
            return True

        self._debug("wmctrl failed to set geometry, trying xdotool move/resize")
        moved = self._x11.move(window_id, geometry.x, geometry.y)
        if not moved:
            self._debug("xdotool windowmove failed")
        resized = self._x11.resize(window_id, geometry.width, geometry.height)
        if not resized:
            self._debug("xdotool windowsize failed")
        return moved and resized
