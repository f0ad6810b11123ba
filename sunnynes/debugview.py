"""Text and geometry for the debug panel: memory dumps, flags, pattern tables and controls."""

from __future__ import annotations

from typing import Callable, Sequence

CPU_FLAGS = "NV-BDIZC"
PPUCTRL_FLAGS = "VPHBSINN"
PPUMASK_FLAGS = "BGRsbMmG"
PPUSTATUS_FLAGS = "VSO....."
GAMEPAD_BUTTONS = "ABUVUDLR"

MEMORY_HEADER = "$ADDR  00 01 02 03 04 05 06 07 08 09 0A 0B 0C 0D 0E 0F"
MEMORY_ROWS = 13
MAX_STACK_LINES = 7

PATTERN_TABLE_SIZE = 0x1000
PATTERN_TABLE_PIXELS = 128

XBOX_BUTTONS = ("A", "B", "Start", "Back", "D-pad Up", "D-pad Down", "D-pad Left", "D-pad Right")
PLAYSTATION_BUTTONS = ("X", "O", "Options", "Share", "D-pad Up", "D-pad Down", "D-pad Left", "D-pad Right")

_CONTROL_LABELS = (
    "A button",
    "B button",
    "Start   ",
    "Select  ",
    "Up      ",
    "Down    ",
    "Left    ",
    "Right   ",
)

Reader = Callable[[int], int]


def _cdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def hex_row(addr: int, values: Sequence[int]) -> str:
    """Format one 16-byte memory row as "$ADDR  XX XX ..."."""
    if len(values) != 16:
        raise ValueError(f"expected 16 values, got {len(values)}")
    return f"${addr & 0xFFFF:04X}  " + " ".join(f"{v & 0xFF:02X}" for v in values)


def memory_lines(read: Reader, offset: int, rows: int = MEMORY_ROWS) -> list[str]:
    """Dump rows of memory starting at row offset, 16 bytes per row."""
    lines = []
    for row in range(rows):
        addr = ((row + offset) * 16) & 0xFFFF
        lines.append(hex_row(addr, [read((addr + i) & 0xFFFF) for i in range(16)]))
    return lines


def stack_lines(sp: int, read: Reader) -> list[str]:
    """Show up to seven entries on top of the stack page."""
    sp &= 0xFF
    size = min(0xFF - sp, MAX_STACK_LINES)
    lines = []
    for i in range(size):
        addr = (sp + i + 1) | 0x100
        lines.append(f"${addr:04X}: ${read(addr) & 0xFF:02X}")
    return lines


def flag_states(value: int, letters: str) -> list[tuple[str, bool]]:
    """Pair each flag letter with its bit, most significant bit first."""
    if len(letters) != 8:
        raise ValueError("expected 8 flag letters")
    return [(letter, bool(value & (1 << (7 - i)))) for i, letter in enumerate(letters)]


def rasterize_pattern_table(table_data: Sequence[int]) -> list[int]:
    """Decode a 4 KiB pattern table into 128x128 two-bit palette indices, row by row."""
    if len(table_data) < PATTERN_TABLE_SIZE:
        raise ValueError(f"pattern table needs {PATTERN_TABLE_SIZE} bytes")
    pixels = []
    for y in range(PATTERN_TABLE_PIXELS):
        fine_y = y % 8
        tile_row = y // 8
        for x in range(PATTERN_TABLE_PIXELS):
            mask = 1 << (7 - (x % 8))
            addr = (tile_row << 8) | ((x // 8) << 4) | fine_y
            low = int(bool(table_data[addr] & mask))
            high = int(bool(table_data[addr | 0x08] & mask))
            pixels.append(low | (high << 1))
    return pixels


def controller_button_names(is_playstation: bool) -> tuple[str, ...]:
    """Names of the pad buttons mapped to A, B, Start, Select, Up, Down, Left, Right."""
    return PLAYSTATION_BUTTONS if is_playstation else XBOX_BUTTONS


def control_lines(names: Sequence[str]) -> list[str]:
    """Describe which input drives each of the eight buttons."""
    if len(names) != len(_CONTROL_LABELS):
        raise ValueError(f"expected {len(_CONTROL_LABELS)} names")
    return [f"{label} - {name}" for label, name in zip(_CONTROL_LABELS, names)]


def _shade(i: int, middle: int) -> int:
    if i == middle:
        return 128
    return 64 if i % 2 == 0 else 32


def grid_lines(x: int, y: int, width: int, height: int) -> list[tuple[int, int, int, int, int]]:
    """Lines of the 8x8 tile grid over the game screen as (x1, y1, x2, y2, shade)."""
    lines = []
    for i in range(33):
        lx = x + _cdiv(width * i, 32)
        lines.append((lx, y, lx, y + height, _shade(i, 16)))
    for i in range(31):
        # Rows are spaced by the screen width, keeping tiles square.
        ly = y + _cdiv(width * i, 32)
        lines.append((x, ly, x + width, ly, _shade(i, 15)))
    return lines