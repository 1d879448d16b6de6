"""
Backdrop: keeps an application's pop-out window on the desktop layer so it
behaves like a static wallpaper.

While running, the desktop's own wallpaper is switched off (picture-options
set to 'none'); it is restored when the process receives SIGINT or SIGTERM.

Dependencies on Debian/Linux Mint:
- python3-gi
- gir1.2-glib-2.0
- xdotool, x11-utils (xprop, xwininfo, xdpyinfo), wmctrl
- libnotify-bin (for notify-send, optional)
- gir1.2-ayatanaappindicator3-0.1 (only for the tray indicator)

Installation of Dependencies:
sudo apt update
sudo apt install python3-gi xdotool x11-utils wmctrl libnotify-bin
"""

import signal
import subprocess
import sys
from typing import Any, Optional

import gi

gi.require_version("GLib", "2.0")
from gi.repository import GLib  # noqa: E402

from .config import Config  # noqa: E402
from .desktop import PICTURE_OPTIONS_NONE, DesktopBackground, restart_icon_manager  # noqa: E402
from .notify import Notify  # noqa: E402
from .reconciler import WindowReconciler  # noqa: E402
from .x11 import OPTIONAL_COMMANDS, REQUIRED_COMMANDS, X11Commands  # noqa: E402


class BackdropApp:
    """Owns the polling loop, the saved wallpaper setting and shutdown."""

    def __init__(
        self,
        config: Config,
        reconciler: WindowReconciler,
        background: DesktopBackground,
        loop: Optional[Any] = None,
    ):
        self._config = config
        self._reconciler = reconciler
        self._background = background
        self._loop = loop or GLib.MainLoop()
        self._stopping = False
        self._cleaned_up = False
        self._saved_option: Optional[str] = None
        self._indicator = None
        self._error: Optional[BaseException] = None

    @property
    def stopping(self) -> bool:
        return self._stopping

    def _debug(self, message: str) -> None:
        if self._config.debug:
            print(f"[DBG] {message}")

    def start(self) -> None:
        """Saves the wallpaper setting and switches the static wallpaper off."""
        print("Saving current wallpaper option and disabling the static wallpaper...")
        self._saved_option = self._background.get()
        self._debug(f"Original {self._background.key}: {self._saved_option!r}")
        if not self._background.set(PICTURE_OPTIONS_NONE):
            self._debug(f"Could not set {self._background.key} to '{PICTURE_OPTIONS_NONE}'")

        print(f'Watching for pop-out windows named: "{self._config.window_name}"')
        print("   Press Ctrl+C to stop.")
        self._debug(
            f"Configuration: check_interval={self._config.check_interval}, "
            f"manual_width={self._config.manual_width}, "
            f"manual_height={self._config.manual_height}, "
            f"top_offset={self._config.top_offset}, "
            f"restart_icon_manager_on_exit={self._config.restart_icon_manager_on_exit}"
        )

    def run(self) -> int:
        """Runs until SIGINT/SIGTERM (or the indicator's Stop), then cleans up."""
        signal.signal(signal.SIGINT, self._on_signal)
        signal.signal(signal.SIGTERM, self._on_signal)
        try:
            self.start()
            if self._config.show_indicator:
                self._start_indicator()

            GLib.idle_add(self._on_tick, False)
            GLib.timeout_add_seconds(self._config.check_interval, self._on_tick, True)
            if not self.stopping:
                self._loop.run()
        finally:
            self.cleanup()
        if self._error is not None:
            raise self._error
        return 0

    def _start_indicator(self) -> None:
        try:
            from .indicator import IndicatorApp
        except (ImportError, ValueError) as e:
            print(f"Warning: tray indicator unavailable ({e}).", file=sys.stderr)
            return
        self._indicator = IndicatorApp(self, self._config.window_name)

    def _on_tick(self, repeat: bool) -> bool:
        if self.stopping:
            return False
        try:
            self._reconciler.reconcile(should_stop=lambda: self.stopping)
        except Exception as e:
            # Re-raised by run() once cleanup has restored the wallpaper.
            self._error = e
            self.stop()
            return False
        return repeat and not self.stopping

    def _on_signal(self, signum: int, _frame: Any) -> None:
        self._debug(f"Received signal {signum}")
        self.stop()

    def apply_now(self) -> None:
        """Runs one reconciliation pass as soon as the loop is idle."""
        GLib.idle_add(self._on_tick, False)

    def stop(self) -> None:
        self._stopping = True
        self._loop.quit()

    def cleanup(self) -> None:
        """Restores the saved wallpaper setting. Runs at most once."""
        if self._cleaned_up:
            return
        self._cleaned_up = True

        print()
        print("Stopping. Restoring wallpaper setting...")
        if self._saved_option is not None:
            if not self._background.set(self._saved_option):
                self._debug(f"Could not restore {self._background.key}")

        if self._config.restart_icon_manager_on_exit:
            restart_icon_manager(self._config.icon_manager, debug=self._config.debug)


# --- Main Execution ---
def check_dependencies() -> None:
    """Checks for required command-line tools."""
    missing = [
        dep
        for dep in REQUIRED_COMMANDS
        if subprocess.run(["which", dep], capture_output=True).returncode != 0
    ]
    if missing:
        print(
            f"Error: Missing required command(s): {', '.join(missing)}.",
            file=sys.stderr,
        )
        print(
            "On Debian/Mint, install them with: sudo apt install xdotool x11-utils wmctrl",
            file=sys.stderr,
        )
        sys.exit(1)

    for dep in OPTIONAL_COMMANDS:
        if subprocess.run(["which", dep], capture_output=True).returncode != 0:
            print(f"Warning: optional command '{dep}' not found.", file=sys.stderr)


def main() -> int:
    """Main function to initialize and run the application."""
    config = Config.load()
    check_dependencies()

    x11 = X11Commands(debug=config.debug)
    app = BackdropApp(
        config,
        WindowReconciler(config, x11),
        DesktopBackground(
            config.background_schema, config.background_key, debug=config.debug
        ),
    )
    if config.notify_on_launch:
        Notify.send(
            "Backdrop launched",
            f'Watching for "{config.window_name}" windows.',
            debug=config.debug,
        )
    return app.run()
