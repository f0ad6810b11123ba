"""A small immediate-mode GUI: buttons, checkboxes and scroll bars."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional


class Color(NamedTuple):
    r: int
    g: int
    b: int


WHITE = Color(255, 255, 255)
CYAN = Color(78, 201, 176)
RED = Color(255, 0, 0)
GREEN = Color(0, 255, 0)
BLUE = Color(0, 122, 204)
LIGHT_BLUE = Color(28, 151, 234)

BUTTON_HIGH = Color(66, 150, 250)
BUTTON_LOW = Color(35, 69, 109)
CHECKBOX_HIGH = Color(35, 69, 109)
CHECKBOX_LOW = Color(29, 47, 73)
CHECKBOX_ACTIVE = Color(66, 150, 250)
SCROLL_BAR = Color(29, 47, 73)
SCROLL_GRAB_LOW = Color(66, 150, 250)
SCROLL_GRAB_HIGH = Color(3, 132, 252)
SCROLL_BACKGROUND = Color(32, 32, 32)

_HASH_MASK = (1 << 64) - 1


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    w: int
    h: int

    def contains(self, x: int, y: int) -> bool:
        """True if the point lies inside; the right and bottom edges are excluded."""
        return self.x <= x < self.x + self.w and self.y <= y < self.y + self.h


@dataclass
class GuiMetrics:
    scroll_bar_width: int = 18
    checkbox_size: int = 18
    font_size: int = 15
    padding: int = 0


def djb2_hash(text: str) -> int:
    """The djb2 string hash over the UTF-8 bytes, wrapping at 64 bits."""
    value = 5381
    for byte in text.encode("utf-8"):
        value = (value * 33 + byte) & _HASH_MASK
    return value


class Gui:
    """Collects the quads and text of one frame and reports interaction with widgets.

    Mouse state is sampled at the end of each frame and applies to the next one.
    """

    def __init__(self, metrics: GuiMetrics, text_width: Callable[[str], int]) -> None:
        self.metrics = metrics
        self.text_width = text_width
        self.mouse_x = 0
        self.mouse_y = 0
        self.mouse_pressed = False
        self.mouse_released = False
        self.wheel = 0
        self.quads: list[tuple[Rect, Color]] = []
        self.texts: list[tuple[str, int, int, Color]] = []
        self._last_down = False
        self._grab_active = False
        self._grab_id = 0
        self._grab_yoff = 0

    def dispatch_wheel(self, dy: int) -> None:
        """Record a mouse wheel movement; upward movement scrolls back."""
        self.wheel -= dy

    def end_frame(self, mouse_x: int, mouse_y: int, left_down: bool) -> None:
        """Finish the frame: take the mouse state and drop the frame's draw commands."""
        self.mouse_x = mouse_x
        self.mouse_y = mouse_y
        self.mouse_pressed = left_down and not self._last_down
        self.mouse_released = not left_down and self._last_down
        self._last_down = left_down
        self.wheel = 0
        self.quads.clear()
        self.texts.clear()

    def _hover(self, rect: Rect) -> bool:
        return rect.contains(self.mouse_x, self.mouse_y)

    def _quad(self, rect: Rect, color: Color) -> None:
        self.quads.append((rect, color))

    def _text(self, text: str, x: int, y: int, color: Color = WHITE) -> None:
        self.texts.append((text, x, y, color))

    def button(self, label: str, span: Rect) -> bool:
        """Draw a button; return True when it was clicked."""
        hover = self._hover(span)
        self._quad(span, BUTTON_HIGH if hover else BUTTON_LOW)
        width = self.text_width(label)
        self._text(
            label,
            span.x + _cdiv(span.w - width, 2),
            span.y + _cdiv(span.h - self.metrics.font_size + 1, 2),
        )
        return hover and self.mouse_released

    def checkbox(self, label: Optional[str], x: int, y: int, value: bool) -> tuple[bool, bool]:
        """Draw a checkbox; return whether it was clicked and its new value."""
        size = self.metrics.checkbox_size
        span = Rect(x, y, size, size)
        hover = self._hover(span)
        self._quad(span, CHECKBOX_HIGH if hover else CHECKBOX_LOW)

        pressed = hover and self.mouse_released
        if pressed:
            value = not value

        if value:
            offset = _round_half_away(size / 4)
            inner = size - 2 * offset
            self._quad(Rect(x + offset, y + offset, inner, inner), CHECKBOX_ACTIVE)

        if label:
            self._text(
                label,
                x + size + self.metrics.padding,
                y + _cdiv(size - self.metrics.font_size + 1, 2),
            )
        return pressed, value

    def scroll_bar(self, label: str, span: Rect, value: int, maximum: int, scale: int) -> tuple[bool, int]:
        """Draw a vertical scroll bar; return whether the value changed and the new value."""
        if maximum <= 0:
            raise ValueError("maximum must be positive")
        activated = False
        if self._hover(span) and not self._grab_active:
            old = value
            value = min(max(value + scale * self.wheel, 0), maximum)
            activated = old != value

        self._quad(span, SCROLL_BACKGROUND)
        bar_w = self.metrics.scroll_bar_width
        bar_x = span.x + span.w - bar_w
        self._quad(Rect(bar_x, span.y, bar_w, span.h), SCROLL_BAR)

        height = _cdiv(5 * span.h * scale, maximum)
        travel = span.h - height
        if self._grab_active and djb2_hash(label) == self._grab_id:
            old = value
            value = _cdiv(maximum * (self.mouse_y + self._grab_yoff - span.y), travel)
            value = min(max(value, 0), maximum)
            activated = old != value
            grab_y = _cdiv(value * travel, maximum) + span.y
            self._quad(Rect(bar_x, grab_y, bar_w, height), SCROLL_GRAB_HIGH)
            if self.mouse_released:
                self._grab_active = False
        else:
            grab_y = _cdiv(value * travel, maximum) + span.y
            grab = Rect(bar_x, grab_y, bar_w, height)
            hover = self._hover(grab)
            self._quad(grab, SCROLL_GRAB_HIGH if hover else SCROLL_GRAB_LOW)
            if self.mouse_pressed and hover and not self._grab_active:
                self._grab_active = True
                self._grab_id = djb2_hash(label)
                self._grab_yoff = grab_y - self.mouse_y

        return activated, value