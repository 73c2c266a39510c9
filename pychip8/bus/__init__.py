"""Bus-related helpers for the CHIP-8 interpreter."""

from .memory import Addressable, Memory, MemoryError, MemorySystem

__all__ = [
    "Addressable",
    "Memory",
    "MemorySystem",
    "MemoryError",
]
