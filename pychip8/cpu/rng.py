"""Sources of random bytes for the ``Cxkk`` instruction."""

from __future__ import annotations

import random
from typing import Iterable, Protocol


class RandomSource(Protocol):
    def next_byte(self) -> int:  # pragma: no cover - interface
        ...


class SystemRandomSource:
    """Uniform bytes from ``random.Random``; pass ``seed`` for repeatable runs."""

    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed)

    def next_byte(self) -> int:
        return self._random.getrandbits(8)


class SequenceRandomSource:
    """Replay a fixed byte sequence, wrapping around at the end."""

    def __init__(self, values: Iterable[int]) -> None:
        self._values = tuple(value & 0xFF for value in values)
        if not self._values:
            raise ValueError("sequence must contain at least one value")
        self._index = 0

    def next_byte(self) -> int:
        value = self._values[self._index]
        self._index = (self._index + 1) % len(self._values)
        return value


__all__ = ["RandomSource", "SystemRandomSource", "SequenceRandomSource"]
