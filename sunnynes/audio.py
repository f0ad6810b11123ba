"""Sample queue between the emulation thread and the audio output callback."""

from __future__ import annotations

import logging
import threading
from typing import Iterable

BUFFER_SIZE = 2048
BUFFER_COUNT = 3

_log = logging.getLogger(__name__)


class DcFilter:
    """DC-blocking filter that moves the [0, 1] output of the unit into [-1, 1]."""

    def __init__(self) -> None:
        self.last_sample = 0.0
        self.last_filter = 0.0

    def apply(self, sample: float) -> float:
        filtered = sample - self.last_sample + 0.995 * self.last_filter
        self.last_sample = sample
        self.last_filter = filtered
        return filtered


class SampleQueue:
    """A ring of fixed-size buffers; the writer blocks until the reader frees a buffer."""

    def __init__(self, buffer_size: int = BUFFER_SIZE, buffer_count: int = BUFFER_COUNT) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be positive")
        if buffer_count < 2:
            raise ValueError("buffer_count must be at least 2")
        self.buffer_size = buffer_size
        self.buffer_count = buffer_count
        self._buffers = [0.0] * (buffer_size * buffer_count)
        # The first buffer is being written to, so one fewer than the total is free.
        self._free = buffer_count - 1
        self._cond = threading.Condition()
        self._read_buffer = 0
        self._write_buffer = 0
        self._write_pos = 0
        self._filter = DcFilter()

    def write(self, samples: Iterable[float]) -> None:
        """Append samples, blocking whenever a filled buffer has no free successor."""
        data = list(samples)
        pos = 0
        while pos < len(data):
            count = min(self.buffer_size - self._write_pos, len(data) - pos)
            start = self.buffer_size * self._write_buffer + self._write_pos
            self._buffers[start:start + count] = data[pos:pos + count]
            pos += count
            self._write_pos += count

            if self._write_pos == self.buffer_size:
                self._write_pos = 0
                self._write_buffer = (self._write_buffer + 1) % self.buffer_count
                with self._cond:
                    while self._free == 0:
                        self._cond.wait()
                    self._free -= 1

    def fill(self, count: int) -> list[float]:
        """Return the next buffer's first count filtered samples, or silence if none is ready."""
        if count < 0 or count > self.buffer_size:
            raise ValueError(f"count must be between 0 and {self.buffer_size}")
        with self._cond:
            ready = self._free < self.buffer_count - 1
        if not ready:
            _log.info("Clearing audio stream")
            return [0.0] * count

        base = self.buffer_size * self._read_buffer
        out = []
        for sample in self._buffers[base:base + count]:
            filtered = self._filter.apply(sample)
            if not abs(filtered) <= 1.0:
                _log.error("sound sample out of range")
                filtered = 0.0
            out.append(filtered)

        self._read_buffer = (self._read_buffer + 1) % self.buffer_count
        with self._cond:
            self._free += 1
            self._cond.notify_all()
        return out