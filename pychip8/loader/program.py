"""Program image loading for the CHIP-8 interpreter."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from pychip8.bus import MemorySystem

PROGRAM_START = 0x200


class LoaderError(RuntimeError):
    """Base error for program loading failures."""


class ProgramTooLargeError(LoaderError):
    """Raised when an image does not fit between 0x200 and the end of memory."""


@dataclass
class AddressRegion:
    """Represents a contiguous address range within the CHIP-8 address space."""

    start: int
    end: int
    comment: str = ""

    def length(self) -> int:
        return self.end - self.start + 1


@dataclass
class ProgramImage:
    """Metadata describing an image copied into memory."""

    name: str = ""
    start: int = PROGRAM_START
    size: int = 0
    regions: List[AddressRegion] = field(default_factory=list)

    def add_region(self, start: int, end: int, comment: str = "") -> None:
        self.regions.append(AddressRegion(start, end, comment))


def load_program(image: bytes, memory: MemorySystem, *, name: str = "", start: int = PROGRAM_START) -> ProgramImage:
    """Copy ``image`` verbatim into ``memory`` starting at ``start``.

    Nothing is written when the image would run past the end of memory.
    """

    data = bytes(image)
    capacity = memory.capacity - start
    if len(data) > capacity:
        raise ProgramTooLargeError(
            f"program is {len(data)} bytes; only {capacity} bytes fit from {start:#05x}"
        )

    memory.write_block(start, data)

    program = ProgramImage(name=name, start=start, size=len(data))
    if data:
        program.add_region(start, start + len(data) - 1, "program")
    return program


def load_program_from_path(path: Path, memory: MemorySystem) -> ProgramImage:
    """Load a raw program image from the filesystem."""

    return load_program(path.read_bytes(), memory, name=path.stem)
