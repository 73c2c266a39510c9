"""CPU package for the CHIP-8 interpreter."""

from .core import (
    PROGRAM_START,
    AddressFaultError,
    Chip8CPU,
    CPUError,
    CPUState,
    DecodeError,
    StackError,
)
from .rng import RandomSource, SequenceRandomSource, SystemRandomSource
from . import opcodes

__all__ = [
    "Chip8CPU",
    "CPUState",
    "CPUError",
    "DecodeError",
    "StackError",
    "AddressFaultError",
    "PROGRAM_START",
    "RandomSource",
    "SystemRandomSource",
    "SequenceRandomSource",
    "opcodes",
]
