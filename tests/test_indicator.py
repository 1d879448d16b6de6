import pytest

pytest.importorskip("gi")

try:
    from backdrop.indicator import IndicatorApp
except (ImportError, ValueError) as e:
    pytest.skip(f"tray indicator libraries unavailable: {e}", allow_module_level=True)


class FakeApp:
    def __init__(self):
        self.actions = []

    def apply_now(self):
        self.actions.append("apply_now")

    def stop(self):
        self.actions.append("stop")


def make_indicator(app):
    # Skip __init__: building the real tray icon needs a running session.
    indicator = IndicatorApp.__new__(IndicatorApp)
    indicator._app = app
    return indicator


def test_menu_actions_reach_the_app():
    app = FakeApp()
    indicator = make_indicator(app)
    indicator._action_apply_now(None)
    indicator._action_stop(None)
    assert app.actions == ["apply_now", "stop"]


def test_every_menu_action_has_a_handler():
    structure = IndicatorApp.menu_structure("Wallpaper Pop-out")
    actions = [item["action"] for item in structure if "action" in item]
    assert actions == ["apply_now", "stop"]
    for action in actions:
        assert callable(getattr(IndicatorApp, f"_action_{action}"))
    assert structure[0]["label"] == "Watching: Wallpaper Pop-out"
