"""Flag behaviour of the register-to-register ALU group."""

from __future__ import annotations

import pytest

from pychip8.bus import Memory, MemorySystem
from pychip8.cpu import Chip8CPU
from pychip8.cpu.core import FLAG_REGISTER

SAMPLE_VALUES = (0x00, 0x01, 0x0F, 0x7F, 0x80, 0x81, 0xAA, 0xFE, 0xFF)


def _cpu_with(word: int, vx: int, vy: int = 0, *, x: int = 1, y: int = 2) -> Chip8CPU:
    memory = MemorySystem()
    memory.allocate_space(0x1000)
    memory.register_memory(Memory(0x000, 0x1000))
    memory.store16(0x200, word)
    cpu = Chip8CPU(memory)
    cpu.state.registers[x] = vx
    cpu.state.registers[y] = vy
    return cpu


@pytest.mark.parametrize("vx", SAMPLE_VALUES)
@pytest.mark.parametrize("vy", SAMPLE_VALUES)
def test_add_sets_carry_exactly_on_overflow(vx: int, vy: int) -> None:
    cpu = _cpu_with(0x8124, vx, vy)
    cpu.step()
    assert cpu.state.registers[1] == (vx + vy) % 256
    assert cpu.state.registers[FLAG_REGISTER] == (1 if vx + vy > 255 else 0)


@pytest.mark.parametrize("vx", SAMPLE_VALUES)
@pytest.mark.parametrize("vy", SAMPLE_VALUES)
def test_sub_sets_not_borrow(vx: int, vy: int) -> None:
    cpu = _cpu_with(0x8125, vx, vy)
    cpu.step()
    assert cpu.state.registers[1] == (vx - vy) % 256
    assert cpu.state.registers[FLAG_REGISTER] == (1 if vx >= vy else 0)


@pytest.mark.parametrize("vx", SAMPLE_VALUES)
@pytest.mark.parametrize("vy", SAMPLE_VALUES)
def test_subn_sets_not_borrow(vx: int, vy: int) -> None:
    cpu = _cpu_with(0x8127, vx, vy)
    cpu.step()
    assert cpu.state.registers[1] == (vy - vx) % 256
    assert cpu.state.registers[FLAG_REGISTER] == (1 if vy >= vx else 0)


def test_shift_right_every_byte() -> None:
    for value in range(256):
        cpu = _cpu_with(0x8126, value)
        cpu.step()
        assert cpu.state.registers[FLAG_REGISTER] == value & 0x01
        assert cpu.state.registers[1] == value >> 1


def test_shift_left_every_byte() -> None:
    for value in range(256):
        cpu = _cpu_with(0x812E, value)
        cpu.step()
        assert cpu.state.registers[FLAG_REGISTER] == (value & 0x80) >> 7
        assert cpu.state.registers[1] == (value << 1) & 0xFF


def test_shift_ignores_vy() -> None:
    cpu = _cpu_with(0x8126, 0x04, 0xFF)
    cpu.step()
    assert cpu.state.registers[1] == 0x02
    assert cpu.state.registers[2] == 0xFF


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        (0x8120, 0x0F),
        (0x8121, 0xFF),
        (0x8122, 0x00),
        (0x8123, 0xFF),
    ],
)
def test_logic_ops(word: int, expected: int) -> None:
    cpu = _cpu_with(word, 0xF0, 0x0F)
    cpu.state.registers[FLAG_REGISTER] = 0x33

    cpu.step()

    assert cpu.state.registers[1] == expected
    assert cpu.state.registers[FLAG_REGISTER] == 0x33


def test_add_into_flag_register_keeps_carry_last() -> None:
    cpu = _cpu_with(0x8F24, 0xFF, 0x02, x=0xF)
    cpu.step()
    assert cpu.state.registers[FLAG_REGISTER] == 1


def test_sub_into_flag_register_keeps_difference_last() -> None:
    cpu = _cpu_with(0x8F25, 0x09, 0x02, x=0xF)
    cpu.step()
    assert cpu.state.registers[FLAG_REGISTER] == 0x07
