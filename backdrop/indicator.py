"""Optional system tray indicator (AppIndicator3 or AyatanaAppIndicator3)."""

from typing import Any, Dict, List

import gi

gi.require_version("Gtk", "3.0")
from gi.repository import Gtk  # noqa: E402


def gtk_module_exists(module_name: str, version: str) -> bool:
    """Checks if a GI repository is available."""
    try:
        gi.require_version(module_name, version)
        return True
    except (ValueError, ImportError):
        return False


if gtk_module_exists("AppIndicator3", "0.1"):
    from gi.repository import AppIndicator3
elif gtk_module_exists("AyatanaAppIndicator3", "0.1"):
    from gi.repository import AyatanaAppIndicator3 as AppIndicator3
else:
    raise ImportError("Requires either AppIndicator3 or AyatanaAppIndicator3.")


class IndicatorApp:
    """Tray icon with "Apply Now" and "Stop" entries for a running BackdropApp."""

    def __init__(self, app: Any, window_name: str):
        self._app = app
        self.indicator = AppIndicator3.Indicator.new(
            "backdrop",
            "preferences-desktop-wallpaper",
            AppIndicator3.IndicatorCategory.APPLICATION_STATUS,
        )
        self.indicator.set_status(AppIndicator3.IndicatorStatus.ACTIVE)
        self.indicator.set_title("Backdrop")
        self.indicator.set_menu(self._build_menu(window_name))

    @staticmethod
    def menu_structure(window_name: str) -> List[Dict[str, Any]]:
        return [
            {"label": f"Watching: {window_name}", "type": "header"},
            {"type": "separator"},
            {"label": "Apply Now", "action": "apply_now"},
            {"label": "Stop", "action": "stop"},
        ]

    def _build_menu(self, window_name: str) -> Gtk.Menu:
        menu = Gtk.Menu()
        for item_def in self.menu_structure(window_name):
            if item_def.get("type") == "separator":
                menu.append(Gtk.SeparatorMenuItem())
                continue

            menu_item = Gtk.MenuItem(label=item_def.get("label", ""))
            if item_def.get("type") == "header":
                menu_item.set_sensitive(False)
            else:
                handler = getattr(self, f"_action_{item_def['action']}")
                menu_item.connect("activate", handler)
            menu.append(menu_item)
        menu.show_all()
        return menu

    def _action_apply_now(self, _: Gtk.MenuItem) -> None:
        self._app.apply_now()

    def _action_stop(self, _: Gtk.MenuItem) -> None:
        self._app.stop()
