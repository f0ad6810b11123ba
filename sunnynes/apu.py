"""The 2A03 audio processing unit: register interface, sequencing and mixing."""

from __future__ import annotations

from collections import deque
from typing import Protocol

from .components import (
    AUDIO_SAMPLES,
    DMC_RATE_LUT,
    LENGTH_COUNTER_LUT,
    NOISE_PERIOD_LUT,
    PULSE_LUT,
    SAMPLE_PERIOD,
    TND_LUT,
    TRI_SEQUENCER,
    AudioWindow,
    Channel,
    Divider,
    Envelope,
    SquareChannel,
    filtered_sample,
)

PPU_CLOCK_HZ = 5369318.0
AUDIO_BUFFER_SIZE = 4096

DMC_IRQ = 0
FRAME_IRQ = 1

_ALL_CHANNELS = int(Channel.SQ1 | Channel.SQ2 | Channel.TRI | Channel.NOISE | Channel.DMC)


class ApuHost(Protocol):
    """What the audio unit needs from the CPU side of the machine."""

    def bus_read(self, addr: int) -> int:
        """Read one byte from the CPU bus."""

    def irq_set(self, index: int) -> None:
        """Raise the interrupt line with the given index."""

    def irq_clear(self, index: int) -> None:
        """Lower the interrupt line with the given index."""

    def dma_active(self) -> bool:
        """Report whether an OAM DMA transfer is in progress."""

    def stall(self, cycles: int) -> None:
        """Stall the CPU for the given number of cycles."""


class Apu:
    """Audio unit clocked at the PPU rate; produces 44.1 kHz samples."""

    def __init__(self, host: ApuHost) -> None:
        self.host = host

        self.sq1 = SquareChannel()
        self.sq2 = SquareChannel()

        self.tri_linear = 0
        self.tri_low = 0
        self.tri_high = 0
        self.tri_timer = Divider()
        self.tri_length_counter = 0
        self.tri_linear_counter = 0
        self.tri_linear_reload_flag = False
        self.tri_sequence_index = 0
        self.triangle_out = 0

        self.noise_vol = 0
        self.noise_period = 0
        self.noise_count = 0
        self.noise_timer = Divider()
        self.noise_length_counter = 0
        self.noise_envelope = Envelope()
        self.noise_lfsr = 0
        self.noise_out = 0

        self.dmc_freq = 0
        self.dmc_load_counter = 0
        self.dmc_addr = 0
        self.dmc_length = 0
        self.dmc_sample_buffer = 0
        self.dmc_sample_buffer_empty = False
        self.dmc_irq_flag = False
        self.dmc_addr_counter = 0
        self.dmc_bytes_remaining = 0
        self.dmc_shift_register = 0
        self.dmc_bits_remaining = 0
        self.dmc_silence = False
        self.dmc_timer = Divider()

        self.status = 0
        self.frame_counter = 0
        self.frame_count = 0
        self.frame_irq_flag = False

        self.total_cycles = 0
        self.apu_cycles = 0

        self.channel_enable = 0
        self.audio_samples: deque[float] = deque([0.0] * AUDIO_SAMPLES, maxlen=AUDIO_SAMPLES)
        self.audio_buffer = [0.0] * AUDIO_BUFFER_SIZE
        self.audio_pos = 0
        self.real_time = 0.0

        self.sq1_window = AudioWindow()
        self.sq2_window = AudioWindow()
        self.tri_window = AudioWindow()
        self.noise_window = AudioWindow()

        self.power_on()
        self.reset()

    # Register fields

    @property
    def _status_p1(self) -> bool:
        return bool(self.status & 0x01)

    @property
    def _status_p2(self) -> bool:
        return bool(self.status & 0x02)

    @property
    def _status_t(self) -> bool:
        return bool(self.status & 0x04)

    @property
    def _status_n(self) -> bool:
        return bool(self.status & 0x08)

    @property
    def _status_d(self) -> bool:
        return bool(self.status & 0x10)

    @property
    def _frame_inhibit(self) -> bool:
        return bool(self.frame_counter & 0x40)

    @property
    def _frame_five_step(self) -> bool:
        return bool(self.frame_counter & 0x80)

    @property
    def _tri_control(self) -> bool:
        return bool(self.tri_linear & 0x80)

    @property
    def _noise_halt(self) -> bool:
        return bool(self.noise_vol & 0x20)

    @property
    def _noise_loop(self) -> bool:
        return bool(self.noise_period & 0x80)

    @property
    def _dmc_loop(self) -> bool:
        return bool(self.dmc_freq & 0x40)

    @property
    def _dmc_irq_enabled(self) -> bool:
        return bool(self.dmc_freq & 0x80)

    # Lifecycle

    def power_on(self) -> None:
        """Enable every channel and put the noise and DMC units in their power-on state."""
        self.channel_enable = _ALL_CHANNELS
        self.noise_lfsr = 1
        self.dmc_load_counter = 0
        for window in (self.sq1_window, self.sq2_window, self.tri_window, self.noise_window):
            window.reset()

    def reset(self) -> None:
        """Silence the status register, inhibit frame interrupts and clear the sample buffer."""
        self.status = 0x00
        self.frame_counter = 0x40
        self.frame_count = 0
        self.frame_irq_flag = False
        self.total_cycles = 0
        self.apu_cycles = 0
        self.sq1.sequence_sel = 0x80
        self.sq2.sequence_sel = 0x80
        self.tri_sequence_index = 0
        self.audio_buffer = [0.0] * AUDIO_BUFFER_SIZE
        self.audio_pos = 0
        self.real_time = 0.0

    # DMC

    def _restart_dmc_sample(self) -> None:
        self.dmc_addr_counter = 0xC000 | (self.dmc_addr << 6)
        self.dmc_bytes_remaining = (self.dmc_length << 4) + 1

    def _dmc_read_byte(self) -> None:
        if not (self.dmc_sample_buffer_empty and self.dmc_bytes_remaining != 0):
            return
        self.dmc_sample_buffer_empty = False
        self.dmc_sample_buffer = self.host.bus_read(self.dmc_addr_counter) & 0xFF
        self.host.stall(2 if self.host.dma_active() else 4)

        self.dmc_addr_counter = (self.dmc_addr_counter + 1) & 0xFFFF
        if self.dmc_addr_counter == 0:
            self.dmc_addr_counter = 0x8000

        self.dmc_bytes_remaining -= 1
        if self.dmc_bytes_remaining == 0:
            if self._dmc_loop:
                self._restart_dmc_sample()
            elif self._dmc_irq_enabled:
                self.host.irq_set(DMC_IRQ)
                self.dmc_irq_flag = True

    def _clock_dmc_output(self) -> None:
        if not self.dmc_silence:
            if (self.dmc_shift_register & 1) and self.dmc_load_counter <= 125:
                self.dmc_load_counter += 2
            elif self.dmc_load_counter >= 2:
                self.dmc_load_counter -= 2
        self.dmc_shift_register >>= 1
        self.dmc_bits_remaining = (self.dmc_bits_remaining - 1) & 0xFF

        if self.dmc_bits_remaining == 0:
            self.dmc_bits_remaining = 8
            if self.dmc_sample_buffer_empty:
                self.dmc_silence = True
            else:
                self.dmc_silence = False
                self.dmc_shift_register = self.dmc_sample_buffer
                self.dmc_sample_buffer_empty = True

    # Frame sequencing

    def _quarter_frame(self) -> None:
        self.sq1.quarter_frame()
        self.sq2.quarter_frame()

        if self.tri_linear_reload_flag:
            self.tri_linear_counter = self.tri_linear & 0x7F
        elif self.tri_linear_counter > 0:
            self.tri_linear_counter -= 1
        if not self._tri_control:
            self.tri_linear_reload_flag = False

        self.noise_envelope.quarter_frame(self._noise_loop)

    def _half_frame(self) -> None:
        self.sq1.half_frame()
        self.sq2.half_frame()
        if self.tri_length_counter > 0 and not self._tri_control:
            self.tri_length_counter -= 1
        if self.noise_length_counter > 0 and not self._noise_halt:
            self.noise_length_counter -= 1

    def _clock_frame_counter(self) -> None:
        self.frame_count += 1
        count = self.frame_count
        if self._frame_five_step:
            if count in (7456, 18640):
                self._half_frame()
                self._quarter_frame()
            if count in (3728, 18640):
                self._quarter_frame()
            if count == 18641:
                self.frame_count = 0
        else:
            if count in (7456, 14914):
                self._half_frame()
                self._quarter_frame()
            if count in (3728, 11185):
                self._quarter_frame()
            if count == 14915:
                if not self._frame_inhibit:
                    self.host.irq_set(FRAME_IRQ)
                    self.frame_irq_flag = True
                self.frame_count = 0

    def _clock_noise(self) -> None:
        if not self.noise_timer.clock():
            return
        tap = (1 << 6) if self._noise_loop else 2
        feedback = (self.noise_lfsr & 1) ^ int((self.noise_lfsr & tap) > 0)
        self.noise_lfsr = (self.noise_lfsr >> 1) | (feedback << 14)
        if not (self.noise_lfsr & 1) and self.noise_length_counter != 0:
            self.noise_out = (self.noise_vol & 0x0F) if (self.noise_vol & 0x10) else self.noise_envelope.decay
        else:
            self.noise_out = 0

    # Clocking

    def clock(self) -> None:
        """Advance by one PPU cycle."""
        self.total_cycles += 1
        self.real_time += 1.0 / PPU_CLOCK_HZ

        if self.total_cycles % 6 == 0:
            self.apu_cycles += 1
            self._clock_frame_counter()
            self.sq1.clock()
            self.sq2.clock()
            self._clock_noise()
            self._dmc_read_byte()
            if self.dmc_timer.clock():
                self._clock_dmc_output()

        if self.total_cycles % 3 == 0:
            self._mix()

    def _mix(self) -> None:
        if self.tri_timer.clock() and self.tri_length_counter != 0 and self.tri_linear_counter != 0:
            self.tri_sequence_index = (self.tri_sequence_index + 1) % 32
            self.triangle_out = TRI_SEQUENCER[self.tri_sequence_index]

        enable = self.channel_enable
        sq1_on = bool(enable & Channel.SQ1)
        sq2_on = bool(enable & Channel.SQ2)
        noise_on = bool(enable & Channel.NOISE)
        # High-frequency triangle periods are muted explicitly; the filter alone does not silence them.
        tri_on = bool(enable & Channel.TRI) and self.tri_timer.period > 1

        pulse_index = (self.sq1.output if sq1_on else 0) + (self.sq2.output if sq2_on else 0)
        tnd_index = 0
        if tri_on:
            tnd_index += 3 * self.triangle_out
        if noise_on:
            tnd_index += 2 * self.noise_out
        if enable & Channel.DMC:
            tnd_index += self.dmc_load_counter

        self.audio_samples.appendleft(PULSE_LUT[pulse_index] + TND_LUT[tnd_index])

        if self.real_time > SAMPLE_PERIOD:
            self.real_time -= SAMPLE_PERIOD
            self.audio_buffer[self.audio_pos] = filtered_sample(self.audio_samples)
            if self.audio_pos < AUDIO_BUFFER_SIZE - 1:
                self.audio_pos += 1
            self.sq1_window.add_sample(PULSE_LUT[self.sq1.output] if sq1_on else 0.0)
            self.sq2_window.add_sample(PULSE_LUT[self.sq2.output] if sq2_on else 0.0)
            self.tri_window.add_sample(TND_LUT[3 * self.triangle_out] if tri_on else 0.0)
            self.noise_window.add_sample(TND_LUT[2 * self.noise_out] if noise_on else 0.0)

    # Register interface

    def write(self, addr: int, data: int) -> None:
        """Write a byte to one of the registers at $4000-$4017."""
        data &= 0xFF
        if addr == 0x4000:
            self.sq1.write_volume(data)
        elif addr == 0x4001:
            self.sq1.write_sweep(data)
        elif addr == 0x4002:
            self.sq1.write_low(data)
        elif addr == 0x4003:
            self.sq1.write_high(data, self._status_p1)
        elif addr == 0x4004:
            self.sq2.write_volume(data)
        elif addr == 0x4005:
            self.sq2.write_sweep(data)
        elif addr == 0x4006:
            self.sq2.write_low(data)
        elif addr == 0x4007:
            self.sq2.write_high(data, self._status_p2)
        elif addr == 0x4008:
            self.tri_linear = data
        elif addr == 0x400A:
            self.tri_low = data
            self.tri_timer.period = ((self.tri_high & 0x07) << 8) | self.tri_low
        elif addr == 0x400B:
            self.tri_high = data
            self.tri_timer.period = ((self.tri_high & 0x07) << 8) | self.tri_low
            self.tri_linear_reload_flag = True
            if self._status_t:
                self.tri_length_counter = LENGTH_COUNTER_LUT[(self.tri_high >> 3) & 0x1F]
        elif addr == 0x400C:
            self.noise_vol = data
            self.noise_envelope.div.period = data & 0x0F
        elif addr == 0x400E:
            self.noise_period = data
            self.noise_timer.period = NOISE_PERIOD_LUT[data & 0x0F]
        elif addr == 0x400F:
            self.noise_count = data
            self.noise_envelope.start_flag = True
            if self._status_n:
                self.noise_length_counter = LENGTH_COUNTER_LUT[(data >> 3) & 0x1F]
        elif addr == 0x4010:
            self.dmc_freq = data
            self.dmc_timer.period = DMC_RATE_LUT[data & 0x0F]
            if not self._dmc_irq_enabled:
                self.host.irq_clear(DMC_IRQ)
                self.dmc_irq_flag = False
        elif addr == 0x4011:
            self.dmc_load_counter = data & 0x7F
        elif addr == 0x4012:
            self.dmc_addr = data
        elif addr == 0x4013:
            self.dmc_length = data
        elif addr == 0x4015:
            self._write_status(data)
        elif addr == 0x4017:
            self.frame_counter = data
            if self._frame_inhibit:
                self.host.irq_clear(FRAME_IRQ)
                self.frame_irq_flag = False
            self.frame_count = 0
            if self._frame_five_step:
                self._quarter_frame()
                self._half_frame()

    def _write_status(self, data: int) -> None:
        self.status = data & 0x1F
        if not self._status_p1:
            self.sq1.length_counter = 0
        if not self._status_p2:
            self.sq2.length_counter = 0
        if not self._status_t:
            self.tri_length_counter = 0
        if not self._status_n:
            self.noise_length_counter = 0
        if not self._status_d:
            self.dmc_bytes_remaining = 0
        elif self.dmc_bytes_remaining == 0:
            self._restart_dmc_sample()
            if self.dmc_bits_remaining == 0:
                self._dmc_read_byte()
        self.host.irq_clear(DMC_IRQ)
        self.dmc_irq_flag = False

    def read(self, addr: int) -> int:
        """Read a register; only $4015 returns data, and reading it clears the frame interrupt."""
        if addr != 0x4015:
            return 0
        value = (
            int(self.sq1.length_counter > 0)
            | int(self.sq2.length_counter > 0) << 1
            | int(self.tri_length_counter > 0) << 2
            | int(self.noise_length_counter > 0) << 3
            | int(self.dmc_bytes_remaining > 0) << 4
            | int(self.frame_irq_flag) << 6
            | int(self.dmc_irq_flag) << 7
        )
        self.host.irq_clear(FRAME_IRQ)
        self.frame_irq_flag = False
        return value

    def set_channel(self, channel: int, enabled: bool) -> None:
        """Enable or disable channels in the mix."""
        if enabled:
            self.channel_enable |= int(channel)
        else:
            self.channel_enable &= ~int(channel)

    def take_samples(self) -> list[float]:
        """Return the samples produced since the last call and empty the buffer."""
        samples = self.audio_buffer[: self.audio_pos]
        self.audio_pos = 0
        return samples