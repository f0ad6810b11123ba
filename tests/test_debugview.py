import pytest

from sunnynes.debugview import (
    CPU_FLAGS,
    MEMORY_HEADER,
    PLAYSTATION_BUTTONS,
    XBOX_BUTTONS,
    control_lines,
    controller_button_names,
    flag_states,
    grid_lines,
    hex_row,
    memory_lines,
    rasterize_pattern_table,
    stack_lines,
)


def _identity_read(addr):
    return addr & 0xFF


def test_hex_row_format():
    row = hex_row(0x1234, list(range(16)))
    assert row == "$1234  00 01 02 03 04 05 06 07 08 09 0A 0B 0C 0D 0E 0F"


def test_hex_row_aligns_with_header():
    assert len(hex_row(0, [0xFF] * 16)) == len(MEMORY_HEADER)


def test_hex_row_wrong_length():
    with pytest.raises(ValueError):
        hex_row(0, [0] * 15)


def test_memory_lines_rows_and_addresses():
    lines = memory_lines(_identity_read, 3, 13)
    assert len(lines) == 13
    assert lines[0].startswith(f"${3 * 16:04X}  ")
    assert lines[1].startswith(f"${4 * 16:04X}  ")


def test_memory_lines_reads_values():
    lines = memory_lines(lambda a: 0xAB, 0, 1)
    assert lines[0].endswith(" AB" * 15)
    assert lines[0].count("AB") == 16


def test_stack_empty_at_top():
    assert stack_lines(0xFF, _identity_read) == []


def test_stack_entries():
    lines = stack_lines(0xFD, lambda a: 0x42)
    assert lines == ["$01FE: $42", "$01FF: $42"]


def test_stack_limited_to_seven():
    assert len(stack_lines(0x00, _identity_read)) == 7


def test_flag_states_high_bit_first():
    states = flag_states(0x81, CPU_FLAGS)
    assert [letter for letter, _ in states] == list(CPU_FLAGS)
    assert [on for _, on in states] == [True] + [False] * 6 + [True]


def test_flag_states_needs_eight_letters():
    with pytest.raises(ValueError):
        flag_states(0, "NV")


def test_rasterize_blank_table():
    pixels = rasterize_pattern_table(bytes(0x1000))
    assert len(pixels) == 128 * 128
    assert set(pixels) == {0}


def test_rasterize_low_and_high_planes():
    table = bytearray(0x1000)
    table[0] = 0x80
    assert rasterize_pattern_table(table)[0] == 1
    table[8] = 0x80
    assert rasterize_pattern_table(table)[0] == 3
    table[0] = 0
    assert rasterize_pattern_table(table)[0] == 2


def test_rasterize_second_tile_column():
    table = bytearray(0x1000)
    table[0x10] = 0x80
    pixels = rasterize_pattern_table(table)
    assert pixels[8] == 1
    assert sum(pixels) == 1


def test_rasterize_short_table():
    with pytest.raises(ValueError):
        rasterize_pattern_table(bytes(100))


def test_controller_names():
    assert controller_button_names(False) == XBOX_BUTTONS
    assert controller_button_names(True) == PLAYSTATION_BUTTONS
    assert controller_button_names(True)[0] == "X"


def test_control_lines():
    lines = control_lines(XBOX_BUTTONS)
    assert lines[0] == "A button - A"
    assert lines[2] == "Start    - Start"
    assert len(lines) == 8


def test_control_lines_wrong_length():
    with pytest.raises(ValueError):
        control_lines(["A"])


def test_grid_lines_count_and_bounds():
    lines = grid_lines(10, 20, 256, 240)
    assert len(lines) == 33 + 31
    assert lines[0] == (10, 20, 10, 260, 64)
    assert lines[32][0] == 10 + 256


def test_grid_middle_lines_brightest():
    lines = grid_lines(0, 0, 256, 240)
    assert lines[16][4] == 128
    assert lines[33 + 15][4] == 128
    assert lines[1][4] == 32