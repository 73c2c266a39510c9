"""Segmented memory for the CHIP-8 interpreter.

The 4 KiB address space is split into an interpreter area (0x000-0x1FF, which
hosts the built-in glyph set) and a program area (0x200-0xFFF). Each area is a
``Memory`` region registered with a ``MemorySystem`` that dispatches reads and
writes. Every access is bounds-checked: an address outside the allocated space
raises ``MemoryError`` instead of wrapping.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Type, TypeVar


class MemoryError(Exception):
    """Raised when the memory map is misconfigured or accessed out of range."""


class Addressable:
    """A device occupying ``get_start_address() .. get_end_address()``."""

    def get_start_address(self) -> int:  # pragma: no cover - interface
        raise NotImplementedError

    def get_end_address(self) -> int:  # pragma: no cover - interface
        raise NotImplementedError

    def load8(self, address: int) -> int:  # pragma: no cover - interface
        raise NotImplementedError

    def store8(self, address: int, value: int) -> None:  # pragma: no cover - interface
        raise NotImplementedError


@dataclass
class Memory(Addressable):
    """Plain RAM covering ``length`` bytes from ``start``."""

    start: int
    length: int
    _data: bytearray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.start < 0 or self.length <= 0:
            raise MemoryError(f"invalid region start={self.start:#05x} length={self.length}")
        self._data = bytearray(self.length)

    def get_start_address(self) -> int:
        return self.start

    def get_end_address(self) -> int:
        return self.start + self.length - 1

    def load8(self, address: int) -> int:
        return self._data[self._index(address)]

    def store8(self, address: int, value: int) -> None:
        self._data[self._index(address)] = value & 0xFF

    def _index(self, address: int) -> int:
        index = address - self.start
        if index < 0 or index >= self.length:
            raise MemoryError(
                f"address {address:#05x} outside region {self.start:#05x}-{self.get_end_address():#05x}"
            )
        return index


RegionT = TypeVar("RegionT", bound=Addressable)


class MemorySystem:
    """Address map that routes each byte access to the region owning it."""

    def __init__(self) -> None:
        self._owners: list[Addressable | None] | None = None
        self._regions: Dict[Type[Addressable], Addressable] = {}

    @property
    def capacity(self) -> int:
        return len(self._map())

    def allocate_space(self, capacity: int) -> None:
        if not 0 < capacity <= 0x10000:
            raise MemoryError(f"capacity {capacity} out of range (1-65536)")
        self._owners = [None] * capacity

    def register_memory(self, region: Addressable) -> None:
        owners = self._map()
        first = region.get_start_address()
        last = region.get_end_address()
        if last < first:
            raise MemoryError(f"region end {last:#05x} precedes start {first:#05x}")
        if first < 0 or last >= len(owners):
            raise MemoryError(f"region {first:#05x}-{last:#05x} exceeds allocated space")
        owners[first : last + 1] = [region] * (last - first + 1)
        self._regions[type(region)] = region

    def get_memory(self, cls: Type[RegionT]) -> RegionT | None:
        return self._regions.get(cls)  # type: ignore[return-value]

    def get_start_address(self, cls: Type[Addressable]) -> int:
        return self._registered(cls).get_start_address()

    def get_end_address(self, cls: Type[Addressable]) -> int:
        return self._registered(cls).get_end_address()

    def check_range(self, address: int, length: int = 1) -> None:
        """Raise ``MemoryError`` unless ``address .. address+length-1`` is in the space."""

        size = len(self._map())
        if length > 0 and (address < 0 or address + length > size):
            raise MemoryError(f"access {address:#05x}+{length} outside address space 0x000-{size - 1:#05x}")

    def load8(self, address: int) -> int:
        return self._owner(address).load8(address) & 0xFF

    def store8(self, address: int, value: int) -> None:
        self._owner(address).store8(address, value & 0xFF)

    def load16(self, address: int) -> int:
        """Read a big-endian word."""

        self.check_range(address, 2)
        return (self.load8(address) << 8) | self.load8(address + 1)

    def store16(self, address: int, value: int) -> None:
        self.check_range(address, 2)
        self.store8(address, value >> 8)
        self.store8(address + 1, value)

    def read_block(self, address: int, length: int) -> bytes:
        self.check_range(address, length)
        return bytes(self.load8(address + offset) for offset in range(length))

    def write_block(self, address: int, data: bytes) -> None:
        self.check_range(address, len(data))
        for offset, value in enumerate(data):
            self.store8(address + offset, value)

    def _registered(self, cls: Type[Addressable]) -> Addressable:
        region = self._regions.get(cls)
        if region is None:
            raise MemoryError(f"no {cls.__name__} region registered")
        return region

    def _owner(self, address: int) -> Addressable:
        owners = self._map()
        if address < 0 or address >= len(owners):
            raise MemoryError(f"address {address:#05x} outside address space 0x000-{len(owners) - 1:#05x}")
        region = owners[address]
        if region is None:
            raise MemoryError(f"address {address:#05x} is not mapped")
        return region

    def _map(self) -> list[Addressable | None]:
        if self._owners is None:
            raise MemoryError("memory space not allocated")
        return self._owners
