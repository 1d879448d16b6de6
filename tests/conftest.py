"""Shared fixtures: an in-memory stand-in for the X11 command wrappers."""

from typing import Dict, Iterable, List, Optional, Set, Tuple

import pytest

from backdrop import config as config_module
from backdrop.config import Config
from backdrop.geometry import Geometry


class FakeX11:
    """Records every call and keeps enough window state to compare passes."""

    def __init__(
        self,
        windows: Iterable[str] = (),
        workarea: Optional[str] = "_NET_WORKAREA(CARDINAL) = 0, 0, 1920, 1050",
        display: Optional[Tuple[int, int]] = (1920, 1080),
        failing: Iterable[str] = (),
    ):
        self.windows = list(windows)
        self.alive: Set[str] = set(self.windows)
        self.workarea = workarea
        self.display = display
        self.failing = set(failing)
        self.calls: List[tuple] = []

        self.props: Dict[Tuple[str, str], str] = {}
        self.mapped: Dict[str, bool] = {}
        self.position: Dict[str, Tuple[int, int]] = {}
        self.size: Dict[str, Tuple[int, int]] = {}
        self.states: Dict[str, Set[str]] = {}
        self.parent: Dict[str, str] = {}

    def _call(self, name: str, *args) -> bool:
        self.calls.append((name,) + args)
        return name not in self.failing

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def snapshot(self, window_id: str) -> tuple:
        return (
            {k: v for k, v in self.props.items() if k[0] == window_id},
            self.mapped.get(window_id),
            self.position.get(window_id),
            self.size.get(window_id),
            frozenset(self.states.get(window_id, set())),
            self.parent.get(window_id),
        )

    def search_windows(self, name: str) -> List[str]:
        self.calls.append(("search_windows", name))
        return list(self.windows)

    def window_exists(self, window_id: str) -> bool:
        self.calls.append(("window_exists", window_id))
        return window_id in self.alive

    def get_workarea(self) -> Optional[str]:
        self.calls.append(("get_workarea",))
        return self.workarea

    def get_display_size(self) -> Optional[Tuple[int, int]]:
        self.calls.append(("get_display_size",))
        return self.display

    def set_property(self, window_id: str, name: str, fmt: str, value: str) -> bool:
        ok = self._call("set_property", window_id, name, fmt, value)
        if ok:
            self.props[(window_id, name)] = value
        return ok

    def unmap(self, window_id: str) -> bool:
        ok = self._call("unmap", window_id)
        if ok:
            self.mapped[window_id] = False
        return ok

    def map(self, window_id: str) -> bool:
        ok = self._call("map", window_id)
        if ok:
            self.mapped[window_id] = True
        return ok

    def reparent_to_root(self, window_id: str) -> bool:
        ok = self._call("reparent_to_root", window_id)
        if ok:
            self.parent[window_id] = "root"
        return ok

    def wm_move_resize(self, window_id: str, geometry: Geometry) -> bool:
        ok = self._call("wm_move_resize", window_id, geometry)
        if ok:
            self.position[window_id] = (geometry.x, geometry.y)
            self.size[window_id] = (geometry.width, geometry.height)
        return ok

    def move(self, window_id: str, x: int, y: int) -> bool:
        ok = self._call("move", window_id, x, y)
        if ok:
            self.position[window_id] = (x, y)
        return ok

    def resize(self, window_id: str, width: int, height: int) -> bool:
        ok = self._call("resize", window_id, width, height)
        if ok:
            self.size[window_id] = (width, height)
        return ok

    def wm_change_state(self, window_id: str, action: str, properties) -> bool:
        ok = self._call("wm_change_state", window_id, action, tuple(properties))
        if ok:
            states = self.states.setdefault(window_id, set())
            if action == "add":
                states.update(properties)
            elif action == "remove":
                states.difference_update(properties)
        return ok


@pytest.fixture(autouse=True)
def no_env_debug(monkeypatch):
    monkeypatch.setattr(config_module, "BACKDROP_DEBUG", False)


@pytest.fixture
def config() -> Config:
    return Config(check_interval=5, window_name="Wallpaper Pop-out", top_offset=100)


@pytest.fixture
def fake_x11() -> FakeX11:
    return FakeX11(windows=["0x3a00007"])
