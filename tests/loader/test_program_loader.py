"""Tests for loading program images into memory."""

from __future__ import annotations

import pytest

from pychip8.bus import Memory, MemorySystem
from pychip8.loader import ProgramTooLargeError, load_program, load_program_from_path


def make_memory() -> MemorySystem:
    memory = MemorySystem()
    memory.allocate_space(0x1000)
    memory.register_memory(Memory(0x000, 0x1000))
    return memory


def test_load_program_copies_bytes_at_0x200() -> None:
    memory = make_memory()

    program = load_program(b"\x00\xE0\x12\x00", memory, name="loop")

    assert memory.read_block(0x200, 4) == b"\x00\xE0\x12\x00"
    assert memory.load8(0x1FF) == 0
    assert memory.load8(0x204) == 0
    assert program.name == "loop"
    assert program.start == 0x200
    assert program.size == 4
    assert program.regions[0].start == 0x200
    assert program.regions[0].end == 0x203
    assert program.regions[0].length() == 4


def test_load_program_accepts_full_size_image() -> None:
    memory = make_memory()
    image = bytes(range(256)) * 14

    program = load_program(image, memory)

    assert program.size == 0xE00
    assert memory.load8(0xFFF) == 0xFF


def test_load_empty_program_has_no_regions() -> None:
    program = load_program(b"", make_memory())
    assert program.size == 0
    assert program.regions == []


def test_too_large_program_writes_nothing() -> None:
    memory = make_memory()

    with pytest.raises(ProgramTooLargeError):
        load_program(b"\xAA" * 0xE01, memory)

    assert memory.read_block(0x200, 0xE00) == bytes(0xE00)


def test_load_program_from_path(tmp_path) -> None:
    path = tmp_path / "maze.ch8"
    path.write_bytes(b"\xA2\x1E\xC2\x01")
    memory = make_memory()

    program = load_program_from_path(path, memory)

    assert program.name == "maze"
    assert memory.read_block(0x200, 4) == b"\xA2\x1E\xC2\x01"


def test_load_program_from_missing_path(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_program_from_path(tmp_path / "missing.ch8", make_memory())
