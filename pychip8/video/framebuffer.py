"""Monochrome 64x32 framebuffer."""

from __future__ import annotations

from typing import Iterator, Sequence

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32


class FrameBuffer:
    """Grid of on/off cells addressed as ``(x, y)`` with the origin top-left."""

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("framebuffer dimensions must be positive")
        self.width = width
        self.height = height
        self._cells = bytearray(width * height)

    def clear(self) -> None:
        self._cells[:] = bytes(len(self._cells))

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def get(self, x: int, y: int) -> bool:
        return self._cells[self._index(x, y)] != 0

    def set(self, x: int, y: int, lit: bool) -> None:
        self._cells[self._index(x, y)] = 1 if lit else 0

    def toggle(self, x: int, y: int) -> bool:
        """XOR the cell at ``(x, y)``; return True if a lit cell was turned off."""

        index = self._index(x, y)
        was_lit = self._cells[index] != 0
        self._cells[index] = 0 if was_lit else 1
        return was_lit

    def rows(self) -> Iterator[Sequence[bool]]:
        for y in range(self.height):
            start = y * self.width
            yield tuple(cell != 0 for cell in self._cells[start : start + self.width])

    def snapshot(self) -> bytes:
        """Return one byte per cell (0 or 1) in row-major order."""

        return bytes(self._cells)

    def lit_count(self) -> int:
        return sum(self._cells)

    def _index(self, x: int, y: int) -> int:
        if not self.contains(x, y):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} framebuffer")
        return y * self.width + x
