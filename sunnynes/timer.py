"""Frame timing: rolling milliseconds-per-frame average and the 60 FPS sleep budget."""

from __future__ import annotations

import time

FRAME_BUDGET_US = 16666


class FrameTimer:
    """Averages frame times over a fixed window of frames."""

    def __init__(self, window: int = 10) -> None:
        if window < 1:
            raise ValueError("window must be at least 1")
        self.window = window
        self.ms_per_frame = 0.0
        self._total = 0.0
        self._frames = 0

    def record(self, elapsed_ms: float) -> float | None:
        """Add one frame's time; return the new average when a window completes."""
        self._total += elapsed_ms
        self._frames += 1
        if self._frames < self.window:
            return None
        self.ms_per_frame = self._total / self.window
        self._total = 0.0
        self._frames = 0
        return self.ms_per_frame


def remaining_frame_time(elapsed_us: float) -> int:
    """Microseconds left in the frame budget, or 0 if the frame ran over."""
    if elapsed_us < FRAME_BUDGET_US:
        return int(FRAME_BUDGET_US - elapsed_us)
    return 0


def sleep_micro(usec: int) -> None:
    """Sleep for the given number of microseconds."""
    if usec > 0:
        time.sleep(usec / 1_000_000)