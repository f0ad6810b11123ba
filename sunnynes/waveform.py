"""Waveform visualisation of the audio channels: trigger detection and point sampling."""

from __future__ import annotations

import math
from typing import Callable

from .components import WINDOW_SIZE, AudioWindow
from .gui import Rect

VISIBLE_SAMPLES = 1024
WAVEFORM_COLOR = (247, 226, 64)
AXIS_SHADE = 128

Trigger = Callable[[AudioWindow], int]


def _lround(x: float) -> int:
    """Round to nearest, halves away from zero."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _sample(window: AudioWindow, index: int) -> float:
    return window.buffer[index % WINDOW_SIZE]


def pulse_trigger(window: AudioWindow) -> int:
    """Offset of the steepest edge, used to keep pulse waves steady on screen."""
    max_slope = -100000.0
    max_x = 0
    base = window.write_pos
    for x in range(VISIBLE_SAMPLES):
        slope = _sample(window, base + 511 + x) - _sample(window, base + 513 + x)
        if slope > max_slope:
            max_slope = slope
            max_x = x
    return max_x


def triangle_trigger(window: AudioWindow) -> int:
    """Offset where the wave is closest to zero while its slope is positive."""
    zero_x = 0
    zero_sample = 100000.0
    base = window.write_pos
    for x in range(VISIBLE_SAMPLES):
        slope = _sample(window, base + 500 + x) - _sample(window, base + 524 + x)
        magnitude = abs(_sample(window, base + 512 + x))
        if slope > 0 and magnitude < zero_sample:
            zero_sample = magnitude
            zero_x = x
    return zero_x


def no_trigger(window: AudioWindow) -> int:
    """Draw from the start of the ring buffer without tracking the wave."""
    return 0


def waveform_points(
    window: AudioWindow, rect: Rect, vertical_scale: float, trigger: Trigger
) -> list[tuple[int, int]]:
    """Sample the visible part of the window into one point per pixel column.

    Consecutive points form the line segments of the drawn waveform.
    """
    if rect.w <= 0:
        raise ValueError("rect width must be positive")
    mid_y = rect.y + _cdiv(rect.h, 2)
    start_index = (window.write_pos + trigger(window)) % WINDOW_SIZE
    index_inc = VISIBLE_SAMPLES / rect.w

    points = []
    position = 0.0
    for column in range(rect.w):
        value = _sample(window, _lround(position + start_index)) * vertical_scale + mid_y
        points.append((rect.x + column, int(value)))
        position += index_inc
    return points