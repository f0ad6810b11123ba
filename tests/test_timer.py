import pytest

from sunnynes.timer import FRAME_BUDGET_US, FrameTimer, remaining_frame_time


def test_average_reported_after_full_window():
    timer = FrameTimer(10)
    results = [timer.record(2.0) for _ in range(10)]
    assert results[:9] == [None] * 9
    assert results[9] == pytest.approx(2.0)
    assert timer.ms_per_frame == pytest.approx(2.0)


def test_initial_average_is_zero():
    assert FrameTimer().ms_per_frame == 0.0


def test_window_resets_between_averages():
    timer = FrameTimer(2)
    timer.record(1.0)
    first = timer.record(3.0)
    timer.record(5.0)
    second = timer.record(7.0)
    assert first == pytest.approx(2.0)
    assert second == pytest.approx(6.0)
    assert timer.ms_per_frame == second


def test_average_lies_within_recorded_range():
    timer = FrameTimer(4)
    values = [1.5, 9.0, 4.0, 2.5]
    result = None
    for value in values:
        result = timer.record(value)
    assert min(values) <= result <= max(values)


def test_invalid_window():
    with pytest.raises(ValueError):
        FrameTimer(0)


def test_remaining_frame_time_full_budget():
    assert remaining_frame_time(0) == FRAME_BUDGET_US
    assert FRAME_BUDGET_US == 16666


def test_remaining_frame_time_over_budget():
    assert remaining_frame_time(20000) == 0
    assert remaining_frame_time(FRAME_BUDGET_US) == 0


def test_remaining_plus_elapsed_is_budget():
    for elapsed in (1000, 5000, 16000):
        assert remaining_frame_time(elapsed) + elapsed == FRAME_BUDGET_US