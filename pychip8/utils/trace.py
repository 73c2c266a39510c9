"""Ring buffer of recent instruction snapshots, dumped on faults."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, Sequence

from .debug import debug_log


@dataclass(frozen=True)
class TraceEntry:
    pc: int
    word: int | None
    mnemonic: str
    i: int
    sp: int
    registers: tuple[int, ...]
    delay_timer: int
    sound_timer: int
    note: str = ""

    def format(self) -> str:
        word = "----" if self.word is None else f"{self.word:04X}"
        regs = " ".join(f"{value:02X}" for value in self.registers)
        return (
            f"pc={self.pc:03X} word={word} {self.mnemonic or '?':<16} I={self.i:03X} SP={self.sp:X} "
            f"DT={self.delay_timer:02X} ST={self.sound_timer:02X} V=[{regs}] note={self.note or '-'}"
        )


class TraceRecorder:
    """Keep the last ``capacity`` executed steps; older ones fall off the front."""

    def __init__(self, capacity: int = 256) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._buffer: Deque[TraceEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._buffer)

    def record_step(self, cpu_state, word: int | None, *, mnemonic: str = "", note: str = "") -> None:
        """Snapshot ``cpu_state`` as it was before executing ``word``."""

        self._buffer.append(
            TraceEntry(
                pc=cpu_state.pc,
                word=word,
                mnemonic=mnemonic,
                i=cpu_state.i,
                sp=cpu_state.sp,
                registers=tuple(cpu_state.registers),
                delay_timer=cpu_state.delay_timer,
                sound_timer=cpu_state.sound_timer,
                note=note,
            )
        )

    def entries(self, limit: int | None = None) -> Iterator[TraceEntry]:
        """Yield the newest ``limit`` entries, oldest first."""

        skip = 0 if limit is None else max(len(self._buffer) - max(limit, 0), 0)
        for index, entry in enumerate(self._buffer):
            if index >= skip:
                yield entry

    def last_entry(self) -> TraceEntry | None:
        return self._buffer[-1] if self._buffer else None

    def format_entries(self, limit: int | None = None) -> Sequence[str]:
        return [entry.format() for entry in self.entries(limit)]

    def dump(self, category: str, limit: int | None = None) -> None:
        for line in self.format_entries(limit):
            debug_log(category, line)
