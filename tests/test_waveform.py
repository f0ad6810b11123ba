import pytest

from sunnynes.components import WINDOW_SIZE, AudioWindow
from sunnynes.gui import Rect
from sunnynes.waveform import (
    no_trigger,
    pulse_trigger,
    triangle_trigger,
    waveform_points,
)


def test_no_trigger_is_zero():
    window = AudioWindow()
    window.write_pos = 123
    assert no_trigger(window) == 0


def test_pulse_trigger_on_silence_is_first_offset():
    assert pulse_trigger(AudioWindow()) == 0


def test_pulse_trigger_finds_spike():
    window = AudioWindow()
    window.buffer[600] = 1.0
    assert pulse_trigger(window) + 511 == 600


def test_pulse_trigger_respects_write_pos():
    window = AudioWindow()
    window.write_pos = 100
    window.buffer[700] = 1.0
    assert pulse_trigger(window) + 511 + 100 == 700


def test_triangle_trigger_on_silence_is_zero():
    assert triangle_trigger(AudioWindow()) == 0


def test_triangle_trigger_finds_zero_crossing():
    window = AudioWindow()
    window.buffer = [(1000 - k) / 1000 for k in range(WINDOW_SIZE)]
    assert triangle_trigger(window) + 512 == 1000


def test_points_one_per_column():
    rect = Rect(10, 20, 100, 50)
    points = waveform_points(AudioWindow(), rect, 350.0, no_trigger)
    assert len(points) == rect.w
    assert [x for x, _ in points] == list(range(rect.x, rect.x + rect.w))


def test_silence_draws_on_axis():
    rect = Rect(10, 20, 100, 50)
    points = waveform_points(AudioWindow(), rect, 350.0, no_trigger)
    assert all(y == rect.y + rect.h // 2 for _, y in points)


def test_vertical_scale_applies():
    window = AudioWindow()
    window.buffer = [0.5] * WINDOW_SIZE
    rect = Rect(0, 0, 64, 90)
    points = waveform_points(window, rect, 100.0, no_trigger)
    assert all(y == 45 + 50 for _, y in points)


def test_trigger_offset_starts_drawing():
    window = AudioWindow()
    window.buffer[300] = 1.0
    rect = Rect(0, 0, 1024, 100)
    points = waveform_points(window, rect, 10.0, lambda w: 300)
    assert points[0][1] == 50 + 10
    assert points[1][1] == 50


def test_zero_width_rejected():
    with pytest.raises(ValueError):
        waveform_points(AudioWindow(), Rect(0, 0, 0, 10), 1.0, no_trigger)