"""Target geometry for the desktop-layer window."""

import re
from typing import Callable, NamedTuple, Optional, Tuple

from .config import Config


class Geometry(NamedTuple):
    x: int
    y: int
    width: int
    height: int


def parse_workarea(raw: Optional[str]) -> Optional[Geometry]:
    """Parses the first workarea out of `xprop -root _NET_WORKAREA` output.

    The property lists one (x, y, width, height) quadruple per desktop, e.g.
    "_NET_WORKAREA(CARDINAL) = 0, 0, 1920, 1050, 0, 0, 1920, 1050".
    Returns None when the output is missing, malformed, or describes an
    empty area.
    """
    if not raw:
        return None
    _, sep, values = raw.partition("=")
    if not sep:
        return None

    fields = [v for v in re.split(r"[,\s]+", values.strip()) if v]
    if len(fields) < 4:
        return None
    try:
        x, y, width, height = (int(v) for v in fields[:4])
    except ValueError:
        return None

    if width <= 0 or height <= 0:
        return None
    return Geometry(x, y, width, height)


def resolve_geometry(
    config: Config,
    workarea_raw: Optional[str],
    display_size: Callable[[], Optional[Tuple[int, int]]],
) -> Optional[Geometry]:
    """Computes where the pop-out window should go.

    The usable area comes from the manual override when both its width and
    height are set, otherwise from the parsed workarea, otherwise from the
    full display (queried through `display_size` only when needed). The top
    offset is then applied; if it would leave no height at all it is
    ignored for the height.

    Returns None only when no usable area could be determined at all.
    """
    if config.has_manual_size:
        usable = Geometry(
            config.manual_x, config.manual_y, config.manual_width, config.manual_height
        )
        if config.debug:
            print(f"[DBG] Using manual resolution: {usable.width}x{usable.height}")
    else:
        usable = parse_workarea(workarea_raw)
        if usable is None:
            size = display_size()
            if not size or size[0] <= 0 or size[1] <= 0:
                if config.debug:
                    print("[DBG] Neither workarea nor display size available.")
                return None
            usable = Geometry(0, 0, size[0], size[1])
            if config.debug:
                reason = "Workarea parsing failed" if workarea_raw else "No _NET_WORKAREA"
                print(f"[DBG] {reason}; using full screen {size[0]}x{size[1]}")

    height = usable.height - config.top_offset
    if height <= 0:
        height = usable.height

    return Geometry(
        x=usable.x,
        y=usable.y + config.top_offset,
        width=usable.width,
        height=height,
    )
