import pytest

from sunnynes.gui import (
    BUTTON_HIGH,
    BUTTON_LOW,
    CHECKBOX_ACTIVE,
    WHITE,
    Color,
    Gui,
    GuiMetrics,
    Rect,
    djb2_hash,
)


def make_gui():
    return Gui(GuiMetrics(scroll_bar_width=18, checkbox_size=18, font_size=15, padding=9), lambda s: len(s) * 8)


def click(gui, x, y):
    gui.end_frame(x, y, True)
    gui.end_frame(x, y, False)


def test_color_definitions():
    assert WHITE == Color(255, 255, 255)
    assert BUTTON_HIGH == Color(66, 150, 250)


def test_rect_contains_edges():
    r = Rect(10, 20, 5, 5)
    assert r.contains(10, 20)
    assert r.contains(14, 24)
    assert not r.contains(15, 20)
    assert not r.contains(10, 25)
    assert not r.contains(9, 22)


def test_hash_empty_and_properties():
    assert djb2_hash("") == 5381
    assert djb2_hash("cpu memory") == djb2_hash("cpu memory")
    assert djb2_hash("cpu memory") != djb2_hash("test2")
    assert 0 <= djb2_hash("x" * 500) < 2**64


def test_button_click_and_hover():
    gui = make_gui()
    span = Rect(0, 0, 100, 30)
    click(gui, 50, 10)
    assert gui.button("Reset", span) is True
    assert gui.quads[-1] == (span, BUTTON_HIGH)
    text, x, y, _ = gui.texts[-1]
    assert text == "Reset"
    assert x == (100 - len("Reset") * 8) // 2
    assert y == (30 - 15 + 1) // 2


def test_button_not_clicked_outside():
    gui = make_gui()
    span = Rect(0, 0, 100, 30)
    click(gui, 200, 10)
    assert gui.button("Reset", span) is False
    assert gui.quads[-1] == (span, BUTTON_LOW)


def test_end_frame_clears_commands():
    gui = make_gui()
    gui.button("A", Rect(0, 0, 10, 10))
    gui.end_frame(0, 0, False)
    assert gui.quads == [] and gui.texts == []


def test_checkbox_toggles_on_release():
    gui = make_gui()
    click(gui, 5, 5)
    pressed, value = gui.checkbox("Draw Grid", 0, 0, False)
    assert pressed is True
    assert value is True
    assert gui.quads[-1][1] == CHECKBOX_ACTIVE
    assert gui.texts[-1][0] == "Draw Grid"
    assert gui.texts[-1][1] == 18 + 9


def test_checkbox_unchanged_without_click():
    gui = make_gui()
    gui.end_frame(5, 5, False)
    pressed, value = gui.checkbox(None, 0, 0, True)
    assert (pressed, value) == (False, True)
    assert gui.texts == []


def test_scroll_wheel_clamps():
    gui = make_gui()
    span = Rect(0, 0, 100, 100)
    gui.end_frame(10, 10, False)
    gui.dispatch_wheel(-1)
    changed, value = gui.scroll_bar("bar", span, 0, 10, 5)
    assert (changed, value) == (True, 5)
    gui.dispatch_wheel(-5)
    changed, value = gui.scroll_bar("bar", span, value, 10, 5)
    assert value == 10
    gui.end_frame(10, 10, False)
    gui.dispatch_wheel(10)
    changed, value = gui.scroll_bar("bar", span, value, 10, 5)
    assert (changed, value) == (True, 0)


def test_scroll_wheel_ignored_outside():
    gui = make_gui()
    gui.end_frame(500, 500, False)
    gui.dispatch_wheel(-1)
    assert gui.scroll_bar("bar", Rect(0, 0, 100, 100), 3, 10, 1) == (False, 3)


def test_scroll_drag():
    gui = make_gui()
    span = Rect(0, 0, 100, 100)
    grab_x = 100 - 18 + 1
    gui.end_frame(grab_x, 10, True)
    assert gui.scroll_bar("bar", span, 0, 10, 1) == (False, 0)
    gui.end_frame(grab_x, 60, True)
    changed, value = gui.scroll_bar("bar", span, 0, 10, 1)
    assert changed is True
    assert value == 10
    gui.end_frame(grab_x, 60, False)
    assert gui.scroll_bar("bar", span, value, 10, 1) == (False, 10)
    # Grab released: wheel works again.
    gui.end_frame(grab_x, 60, False)
    gui.dispatch_wheel(1)
    assert gui.scroll_bar("bar", span, 10, 10, 1) == (True, 9)


def test_scroll_bad_maximum():
    gui = make_gui()
    with pytest.raises(ValueError):
        gui.scroll_bar("bar", Rect(0, 0, 10, 10), 0, 0, 1)