"""Building blocks of the 2A03 audio unit: dividers, pulse channels, windows and mixer tables."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Sequence

AUDIO_SAMPLES = 40
SAMPLE_RATE = 44100
SAMPLE_PERIOD = 1.0 / SAMPLE_RATE
WINDOW_SIZE = 2048

LENGTH_COUNTER_LUT = (
    10, 254, 20, 2, 40, 4, 80, 6, 160, 8, 60, 10, 14, 12, 26, 14,
    12, 16, 24, 18, 48, 20, 96, 22, 192, 24, 72, 26, 16, 28, 32, 30,
)
TRI_SEQUENCER = (
    15, 14, 13, 12, 11, 10, 9, 8, 7, 6, 5, 4, 3, 2, 1, 0,
    0, 1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12, 13, 14, 15,
)
NOISE_PERIOD_LUT = (4, 8, 16, 32, 64, 96, 128, 160, 202, 254, 380, 508, 762, 1016, 2034, 4068)
DMC_RATE_LUT = (214, 190, 170, 160, 143, 127, 113, 107, 95, 80, 71, 64, 53, 42, 36, 27)

_DUTY_SEQUENCES = (0b00000001, 0b00000011, 0b00001111, 0b11111100)


class Channel(IntFlag):
    """Bits used to enable or disable individual audio channels."""

    SQ1 = 1
    SQ2 = 1 << 1
    TRI = 1 << 2
    NOISE = 1 << 3
    DMC = 1 << 4


def sinc(x: float) -> float:
    """Normalised sinc: sin(pi x) / (pi x), with sinc(0) == 1."""
    if x != 0.0:
        xpi = x * math.pi
        return math.sin(xpi) / xpi
    return 1.0


def _low_pass_weights() -> tuple[float, ...]:
    cutoff = (SAMPLE_RATE / 2.0) / SAMPLE_RATE
    factor = 2.0 * cutoff
    half = AUDIO_SAMPLES // 2
    return tuple(factor * sinc(factor * (i - half)) for i in range(AUDIO_SAMPLES))


LOW_PASS_WEIGHTS = _low_pass_weights()
PULSE_LUT = (0.0,) + tuple(95.52 / (8128.0 / i + 100.0) for i in range(1, 31))
TND_LUT = (0.0,) + tuple(163.67 / (24329.0 / i + 100.0) for i in range(1, 203))


def filtered_sample(samples: Sequence[float]) -> float:
    """Apply the FIR low-pass filter to the most recent native-rate samples."""
    if len(samples) != AUDIO_SAMPLES:
        raise ValueError(f"expected {AUDIO_SAMPLES} samples, got {len(samples)}")
    return sum(w * s for w, s in zip(LOW_PASS_WEIGHTS, samples))


@dataclass
class Divider:
    """Counts down from its period; the effective period is one more than given."""

    period: int = 0
    counter: int = 0

    def clock(self) -> bool:
        """Advance by one tick; return True when the divider outputs a clock."""
        if self.counter == 0:
            self.counter = self.period
            return True
        self.counter -= 1
        return False

    def reload(self) -> None:
        self.counter = self.period


@dataclass
class Envelope:
    """Volume envelope generator shared by the pulse and noise channels."""

    div: Divider = field(default_factory=Divider)
    decay: int = 0
    start_flag: bool = False

    def quarter_frame(self, loop: bool) -> None:
        if self.start_flag:
            self.start_flag = False
            self.decay = 0x0F
            self.div.reload()
        elif self.div.clock():
            if self.decay > 0:
                self.decay -= 1
            elif loop:
                self.decay = 0x0F


@dataclass
class Sweep:
    """Sweep unit state of a pulse channel."""

    div: Divider = field(default_factory=Divider)
    reload_flag: bool = False
    target: int = 0


@dataclass
class AudioWindow:
    """Ring buffer of DC-filtered samples used to draw a channel's waveform."""

    buffer: list[float] = field(default_factory=lambda: [0.0] * WINDOW_SIZE)
    write_pos: int = 0
    last_sample: float = 0.0
    last_filter: float = 0.0

    def add_sample(self, sample: float) -> None:
        filtered = sample - self.last_sample + 0.995 * self.last_filter
        self.last_sample = sample
        self.last_filter = filtered
        self.buffer[self.write_pos] = filtered
        self.write_pos = (self.write_pos + 1) % WINDOW_SIZE

    def reset(self) -> None:
        self.buffer = [0.0] * WINDOW_SIZE
        self.write_pos = 0
        self.last_sample = 0.0
        self.last_filter = 0.0


@dataclass
class SquareChannel:
    """One of the two pulse-wave channels."""

    vol: int = 0
    sweep_register: int = 0
    low: int = 0
    high: int = 0
    timer: Divider = field(default_factory=Divider)
    sequencer: int = 0
    sequence_sel: int = 0
    length_counter: int = 0
    envelope: Envelope = field(default_factory=Envelope)
    sweep: Sweep = field(default_factory=Sweep)
    output: int = 0

    # Volume register fields
    @property
    def volume(self) -> int:
        return self.vol & 0x0F

    @property
    def constant_volume(self) -> bool:
        return bool(self.vol & 0x10)

    @property
    def halt(self) -> bool:
        return bool(self.vol & 0x20)

    @property
    def duty(self) -> int:
        return (self.vol >> 6) & 0x03

    # Sweep register fields
    @property
    def sweep_shift(self) -> int:
        return self.sweep_register & 0x07

    @property
    def sweep_negate(self) -> bool:
        return bool(self.sweep_register & 0x08)

    @property
    def sweep_period(self) -> int:
        return (self.sweep_register >> 4) & 0x07

    @property
    def sweep_enabled(self) -> bool:
        return bool(self.sweep_register & 0x80)

    # High register fields
    @property
    def timer_high(self) -> int:
        return self.high & 0x07

    @property
    def length_index(self) -> int:
        return (self.high >> 3) & 0x1F

    def _update_period(self) -> None:
        self.timer.period = (self.timer_high << 8) | self.low

    def write_volume(self, data: int) -> None:
        self.vol = data & 0xFF
        self.sequencer = _DUTY_SEQUENCES[self.duty]
        self.envelope.div.period = self.volume

    def write_sweep(self, data: int) -> None:
        self.sweep_register = data & 0xFF
        self.sweep.div.period = self.sweep_period
        self.sweep.reload_flag = True

    def write_low(self, data: int) -> None:
        self.low = data & 0xFF
        self._update_period()

    def write_high(self, data: int, length_enabled: bool) -> None:
        self.high = data & 0xFF
        self.envelope.start_flag = True
        self._update_period()
        self.sequence_sel = 0x80
        if length_enabled:
            self.length_counter = LENGTH_COUNTER_LUT[self.length_index]

    def is_muted(self) -> bool:
        """Recompute the sweep target and report whether the channel is silenced."""
        delta = self.timer.period >> self.sweep_shift
        if self.sweep_negate:
            delta = -delta
        self.sweep.target = self.timer.period + delta
        return self.sweep.target > 0x07FF or self.timer.period < 8

    def quarter_frame(self) -> None:
        self.envelope.quarter_frame(self.halt)

    def half_frame(self) -> None:
        if self.length_counter > 0 and not self.halt:
            self.length_counter -= 1
        if self.sweep.div.clock() and not self.is_muted() and self.sweep_enabled:
            self.timer.period = self.sweep.target
        if self.sweep.reload_flag:
            self.sweep.reload_flag = False
            self.sweep.div.reload()

    def clock(self) -> int:
        """Clock the timer; return the channel's current 4-bit output."""
        if self.timer.clock():
            seq_out = (self.sequencer & self.sequence_sel) > 0
            self.sequence_sel = ((self.sequence_sel >> 7) | (self.sequence_sel << 1)) & 0xFF
            if seq_out and self.length_counter != 0 and not self.is_muted():
                self.output = self.volume if self.constant_volume else self.envelope.decay
            else:
                self.output = 0
        return self.output