"""Window layout and the application's settings models."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum

from .gui import Rect

NES_WIDTH = 256
NES_HEIGHT = 240
MIN_DEBUG_WIDTH = 200
MIN_DEBUG_HEIGHT = 400


def _lround(x: float) -> int:
    """Round to nearest, halves away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


class DrawTarget(IntEnum):
    """Which page of the debug panel is shown."""

    NES_STATE = 0
    APU_OSC = 1
    MEMORY = 2
    ABOUT = 3
    SETTINGS = 4


class EmulationMode(IntEnum):
    """Whether the emulator runs freely, steps on request, or has no ROM."""

    PLAY = 0
    STEP_THROUGH = 1
    NOT_RUNNING = 2


@dataclass
class Settings:
    """User-adjustable runtime settings."""

    ms_per_frame: float = 0.0
    mode: EmulationMode = EmulationMode.PLAY
    fullscreen: bool = False
    draw_grid: bool = False
    scanline: bool = False
    # Draw the debug panel when there is room for it.
    allow_debug_panel: bool = False


@dataclass
class ChannelEnable:
    """Which audio channels are heard; used for debugging."""

    sq1: bool = True
    sq2: bool = True
    tri: bool = True
    noise: bool = True
    dmc: bool = True


@dataclass
class WindowMetrics:
    """Pixel positions and sizes of everything laid out in the window."""

    width: int
    height: int
    padding: int
    nes_x: int
    nes_y: int
    nes_w: int
    nes_h: int
    db_x: int
    db_y: int
    db_w: int
    db_h: int
    draw_debug_view: bool
    button_h: int
    pattern_table_len: int
    menu_button_w: float
    menu_button_h: int
    palette_visual_len: int
    apu_osc_height: int


def compute_window_metrics(width: int, height: int, allow_debug_panel: bool) -> WindowMetrics:
    """Lay out the game screen and the debug panel for a window of the given size."""
    if width <= 0 or height <= 0:
        raise ValueError("window size must be positive")
    w, h = width, height
    draw_debug_view = True
    padding = _lround(0.0045 * (w + h))

    if w / h >= NES_WIDTH / NES_HEIGHT:
        nes_x = padding
        nes_y = padding
        nes_h = h - 2 * padding
        nes_w = _lround(nes_h * NES_WIDTH / NES_HEIGHT)
    else:
        nes_w = w - 2 * padding
        nes_h = _lround(nes_w * NES_HEIGHT / NES_WIDTH)
        nes_x = padding
        nes_y = _cdiv(h - nes_h, 2)
        draw_debug_view = False

    db_x = 2 * padding + nes_w
    db_y = padding
    db_w = w - 3 * padding - nes_w
    db_h = h - 2 * padding

    if db_w < MIN_DEBUG_WIDTH or db_h < MIN_DEBUG_HEIGHT or not allow_debug_panel:
        draw_debug_view = False
        # Centre the game screen in the space the panel would have used.
        nes_x = _cdiv(w - nes_w, 2)
        nes_y = _cdiv(h - nes_h, 2)

    return WindowMetrics(
        width=w,
        height=h,
        padding=padding,
        nes_x=nes_x,
        nes_y=nes_y,
        nes_w=nes_w,
        nes_h=nes_h,
        db_x=db_x,
        db_y=db_y,
        db_w=db_w,
        db_h=db_h,
        draw_debug_view=draw_debug_view,
        button_h=_lround(0.03 * h),
        pattern_table_len=_lround(0.096 * (w + h)),
        menu_button_w=db_w / 5.0,
        menu_button_h=_lround(0.0406 * h),
        palette_visual_len=_lround(0.004 * (w + h)),
        apu_osc_height=_lround(0.1355 * h),
    )


MENU_BUTTONS = (
    ("NES State", DrawTarget.NES_STATE),
    ("APU Wave", DrawTarget.APU_OSC),
    ("Memory", DrawTarget.MEMORY),
    ("About", DrawTarget.ABOUT),
    ("Settings", DrawTarget.SETTINGS),
)


def menu_button_spans(metrics: WindowMetrics) -> list[tuple[str, DrawTarget, Rect]]:
    """Return the label, target page and rectangle of each menu button along the panel top."""
    count = len(MENU_BUTTONS)
    edges = [metrics.db_x]
    edges.extend(_lround(metrics.db_x + i * metrics.menu_button_w) for i in range(1, count))
    edges.append(metrics.db_x + metrics.db_w)
    return [
        (label, target, Rect(left, metrics.padding, right - left, metrics.menu_button_h))
        for (label, target), left, right in zip(MENU_BUTTONS, edges, edges[1:])
    ]