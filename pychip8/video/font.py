"""Built-in hexadecimal glyph set."""

from __future__ import annotations

from typing import Final

from pychip8.bus import MemorySystem

GLYPH_BYTES = 5
FONT_BASE_ADDRESS: Final[int] = 0x050

# One 5-byte bitmap per hexadecimal digit; only the high nibble is lit.
FONT_SET: Final[bytes] = bytes(
    (
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    )
)


def glyph_address(digit: int, base: int = FONT_BASE_ADDRESS) -> int:
    """Return the address of the glyph for ``digit``."""

    return base + GLYPH_BYTES * digit


def install_font(memory: MemorySystem, base: int = FONT_BASE_ADDRESS) -> None:
    """Copy the glyph set into ``memory`` at ``base``."""

    memory.write_block(base, FONT_SET)
